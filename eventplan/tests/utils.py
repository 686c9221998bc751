from datetime import datetime
from types import SimpleNamespace
import pytz
from django.contrib.auth import get_user_model
from eventplan.models import AssignmentTemplate

PROJECT_DATE = datetime(2025, 6, 20, 18, 0, tzinfo=pytz.utc)


def make_user(name, role='user'):
    return get_user_model().objects.create_user(
        username=f'{name}@example.com',
        email=f'{name}@example.com',
        password='secret',
        role=role,
    )


def make_template(name, tags, **kwargs):
    return AssignmentTemplate.objects.create(name=name, tags=tags, **kwargs)


def stub_template(id=1, is_day_of=False, is_ongoing=False,
                  estimated_duration_hours=None, recommended_start_offset_days=None):
    """An unsaved stand-in with only what the deriver reads."""
    return SimpleNamespace(
        id=id,
        is_day_of=is_day_of,
        is_ongoing=is_ongoing,
        estimated_duration_hours=estimated_duration_hours,
        recommended_start_offset_days=recommended_start_offset_days,
    )


def make_project(creator, tags=('wedding',), name='Wedding', date=PROJECT_DATE, **extra):
    from eventplan.projects import ProjectService
    return ProjectService().create_project(creator, name=name, date=date,
                                           tags=list(tags), **extra)


def assign(assignment, user):
    assignment.assignee = user
    assignment.save(update_fields=['assignee'])
