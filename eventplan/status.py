"""Lifecycle of a project assignment.

Status changes are direct-set: the caller names the target status and it is
written as long as it is one of the known values. Any status may follow any
other, and setting the current value again is a successful no-op, so a
retried request never advances twice.
"""
from django.db import models
from .exceptions import ValidationError


class TaskStatus(models.TextChoices):
    PENDING = 'Pending', 'Pending'
    IN_PROGRESS = 'InProgress', 'In progress'
    DONE = 'Done', 'Done'


def parse_status(value):
    if value is None or value == '':
        raise ValidationError('Status is required')
    if value not in TaskStatus.values:
        valid = ', '.join(TaskStatus.values)
        raise ValidationError(f'Invalid status "{value}", expected one of {valid}')
    return TaskStatus(value)


def transition(current, target):
    """Return (new_status, changed) for a request to move `current` to `target`."""
    target = parse_status(target)
    return target, target != current
