"""Template catalog import from Excel, CSV or JSON files.

Rows carry `step`, `name` (or `assignment`), `estimated_duration_hours`
(or `estimated_time`), `recommended_start_offset_days`, `is_ongoing`,
`is_day_of`, `tags` (or `type`) and `target_audience`. Tags are the union of
the comma separated `tags` and `target_audience` cells.
"""
import csv
import json
import logging
import zipfile
from pathlib import Path
import openpyxl
from openpyxl.utils.exceptions import InvalidFileException
from .catalog import normalize_tags
from .models import AssignmentTemplate
from .transaction import atomic_operation

logger = logging.getLogger(__name__)

_TRUE = {'1', 'true', 'yes', 'y', 'x'}
_FALSE = {'', '0', 'false', 'no', 'n'}


def _first(row, *keys):
    for key in keys:
        value = row.get(key)
        if value not in (None, ''):
            return value
    return None


def _split(value):
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return str(value).split(',')


def _flag(value, field, label):
    if isinstance(value, bool):
        return value
    text = '' if value is None else str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f'{label}: invalid {field} "{value}"')


def _number(value, field, label, cast):
    if value in (None, ''):
        return None
    try:
        return cast(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f'{label}: invalid {field} "{value}"') from exc


def parse_row(row, label):
    name = _first(row, 'name', 'assignment')
    if not name:
        raise ValueError(f'{label}: missing required field "name"')

    tags = normalize_tags(
        _split(_first(row, 'tags', 'type')) + _split(row.get('target_audience'))
    )

    return AssignmentTemplate(
        step=str(row.get('step') or '').strip(),
        name=str(name).strip(),
        estimated_duration_hours=_number(
            _first(row, 'estimated_duration_hours', 'estimated_time'),
            'estimated_duration_hours', label, float),
        recommended_start_offset_days=_number(
            row.get('recommended_start_offset_days'),
            'recommended_start_offset_days', label, lambda v: int(float(v))),
        is_ongoing=_flag(row.get('is_ongoing'), 'is_ongoing', label),
        is_day_of=_flag(row.get('is_day_of'), 'is_day_of', label),
        tags=sorted(tags),
        status=str(row.get('status') or 'Pending'),
    )


def read_csv(path):
    with open(path, newline='', encoding='utf-8') as handle:
        reader = csv.DictReader(handle)
        return [
            parse_row(row, f'Row {number}')
            for number, row in enumerate(reader, start=2)
        ]


def read_json(path):
    with open(path, encoding='utf-8') as handle:
        payload = json.load(handle)
    if not isinstance(payload, list):
        raise ValueError('JSON payload must be a list of objects')
    return [parse_row(item, f'Item {i}') for i, item in enumerate(payload, start=1)]


def read_xlsx(path):
    """Read the first worksheet; its first row names the columns."""
    try:
        workbook = openpyxl.load_workbook(path, read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile) as exc:
        raise ValueError(f'{path} is not a valid Excel workbook') from exc
    try:
        rows = workbook.worksheets[0].iter_rows(values_only=True)
        header = next(rows, None)
        if header is None:
            return []
        keys = ['' if cell is None else str(cell).strip() for cell in header]
        templates = []
        for number, values in enumerate(rows, start=2):
            if all(value is None for value in values):
                continue
            templates.append(parse_row(dict(zip(keys, values)), f'Row {number}'))
        return templates
    finally:
        workbook.close()


def read_templates(path):
    suffix = Path(path).suffix.lower()
    if suffix == '.json':
        return read_json(path)
    if suffix == '.csv':
        return read_csv(path)
    if suffix == '.xlsx':
        return read_xlsx(path)
    raise ValueError(f'Unsupported template file type "{suffix}"')


def load_templates(path, force=False):
    """Load the catalog from `path` unless it already has templates.
    Returns the number of templates created."""
    if not force and AssignmentTemplate.objects.exists():
        logger.info('Template catalog already populated, skipping %s', path)
        return 0
    templates = read_templates(path)
    with atomic_operation('template import'):
        AssignmentTemplate.objects.bulk_create(templates)
    logger.info('Loaded %d templates from %s', len(templates), path)
    return len(templates)
