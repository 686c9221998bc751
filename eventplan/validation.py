"""Parsing of raw request values into the types the planner stores."""
import math
from datetime import datetime, date, time
from django.utils.dateparse import parse_date, parse_datetime
from .catalog import normalize_tags
from .exceptions import ValidationError
from .schedule import localize


def require(value, field):
    if value is None or value == '' or value == []:
        raise ValidationError(f'{field} is required')
    return value


def parse_moment(value, field, allow_null=False):
    """Accept a datetime, a date, or an ISO 8601 string."""
    if value is None or value == '':
        if allow_null:
            return None
        raise ValidationError(f'{field} is required')

    if isinstance(value, datetime):
        return localize(value)
    if isinstance(value, date):
        return localize(datetime.combine(value, time()))
    if not isinstance(value, str):
        raise ValidationError(f'Invalid {field} format')

    try:
        parsed = parse_datetime(value)
        if parsed is None:
            day = parse_date(value)
            if day is not None:
                parsed = datetime.combine(day, time())
    except ValueError:
        parsed = None
    if parsed is None:
        raise ValidationError(f'Invalid {field} format')
    return localize(parsed)


def parse_tags(value, field='tags'):
    tags = normalize_tags(value)
    if not tags:
        raise ValidationError(f'{field} is required')
    return sorted(tags)


def parse_bool(value, field):
    if not isinstance(value, bool):
        raise ValidationError(f'{field} must be a boolean')
    return value


def parse_number(value, field, allow_null=False):
    if value is None or value == '':
        if allow_null:
            return None
        raise ValidationError(f'{field} is required')
    if isinstance(value, bool):
        raise ValidationError(f'{field} must be a number')
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f'{field} must be a number')
    if not math.isfinite(number):
        raise ValidationError(f'{field} must be a finite number')
    return number


def parse_id(value, field):
    require(value, field)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f'Invalid {field}')


def parse_whole_number(value, field, allow_null=False, minimum=None):
    number = parse_number(value, field, allow_null)
    if number is None:
        return None
    if not number.is_integer():
        raise ValidationError(f'{field} must be a whole number')
    if minimum is not None and number < minimum:
        raise ValidationError(f'{field} must be at least {minimum}')
    return int(number)


def parse_text(value, field, max_length=None):
    """A required string, stripped. Blank after stripping counts as missing."""
    if value is not None and not isinstance(value, str):
        raise ValidationError(f'{field} must be a string')
    text = (value or '').strip()
    if not text:
        raise ValidationError(f'{field} is required')
    if max_length is not None and len(text) > max_length:
        raise ValidationError(f'{field} must be at most {max_length} characters')
    return text


def parse_paging(page, limit, default_limit, minimum_limit=1):
    """Return (page, limit) from query values. `page` defaults to 1."""
    page = parse_whole_number(page, 'page', allow_null=True, minimum=1) or 1
    if limit is None or limit == '':
        limit = default_limit
    limit = parse_whole_number(limit, 'limit', minimum=minimum_limit)
    return page, limit
