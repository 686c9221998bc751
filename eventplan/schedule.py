"""
Schedule derivation: turns catalog templates into dated assignment drafts.

A template is scheduled by exactly one policy, checked in this order:

- day-of: starts and is due on the project date. When the template has a
  duration, the estimated completion is the project date plus that many hours.
- ongoing: starts on the project date and has neither due date nor
  estimated completion.
- offset: starts `recommended_start_offset_days` calendar days before the
  project date (a missing offset is 0). With a duration, due date and
  estimated completion are both start plus duration; without one the task
  is due on its start and has no estimated completion.

Day offsets are applied on the wall clock of the single zone named by
settings.EVENTPLAN_SCHEDULE_TIMEZONE, hour durations are absolute. Derived
datetimes are returned in UTC.

Nothing here touches the database.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional
import pytz
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.utils import timezone
from .status import TaskStatus

DAY_OF = 'day-of'
ONGOING = 'ongoing'
OFFSET = 'offset'


def schedule_timezone():
    name = getattr(settings, 'EVENTPLAN_SCHEDULE_TIMEZONE', 'UTC')
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError:
        raise ImproperlyConfigured(
            f'settings.EVENTPLAN_SCHEDULE_TIMEZONE "{name}" is not a known timezone'
        )


@dataclass
class AssignmentDraft:
    """A derived assignment that has not been stored yet."""

    template_id: int
    recommended_start_date: datetime
    due_date: Optional[datetime]
    estimated_completion: Optional[datetime]
    important: bool
    status: str = TaskStatus.PENDING
    assignee_id: Optional[int] = None


def policy_for(template):
    if template.is_day_of:
        return DAY_OF
    if template.is_ongoing:
        return ONGOING
    return OFFSET


def localize(moment, tz=None):
    """Attach `tz` to naive datetimes, convert aware ones into it."""
    tz = tz or schedule_timezone()
    if timezone.is_naive(moment):
        return tz.localize(moment)
    return moment.astimezone(tz)


def shift_days(moment, days, tz=None):
    """Move `moment` by whole calendar days on the schedule zone's clock."""
    tz = tz or schedule_timezone()
    local = localize(moment, tz)
    shifted = tz.localize(local.replace(tzinfo=None) + timedelta(days=days))
    return shifted.astimezone(pytz.utc)


def add_hours(moment, hours):
    return moment + timedelta(hours=float(hours))


def derive(project, template, tz=None):
    tz = tz or schedule_timezone()
    anchor = localize(project.date, tz).astimezone(pytz.utc)
    duration = template.estimated_duration_hours
    policy = policy_for(template)

    if policy == DAY_OF:
        start = anchor
        due = anchor
        completion = add_hours(start, duration) if duration else None
    elif policy == ONGOING:
        start = anchor
        due = None
        completion = None
    else:
        offset = template.recommended_start_offset_days or 0
        start = shift_days(anchor, -offset, tz)
        if duration:
            due = completion = add_hours(start, duration)
        else:
            due = start
            completion = None

    return AssignmentDraft(
        template_id=template.id,
        recommended_start_date=start,
        due_date=due,
        estimated_completion=completion,
        important=bool(template.is_day_of),
    )


def derive_all(project, templates, tz=None):
    """Drafts for every template, in template order. All drafts are built
    before the caller stores any of them."""
    tz = tz or schedule_timezone()
    return [derive(project, template, tz) for template in templates]
