import json
from datetime import datetime, date
from pytz import utc


def default_serializer(value):
    if isinstance(value, datetime):
        value = value.astimezone(utc)
        value = str(value.replace(tzinfo=None))
        return f'{value}Z'
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def json_dumps(value, **kwargs):
    return json.dumps(value, default=default_serializer, **kwargs)
