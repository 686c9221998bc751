"""
Storage boundary for multi-step operations.

Every write in the planner runs inside `atomic_operation`, which wraps
`transaction.atomic` and translates database failures into planner errors:

- IntegrityError (unique constraints) becomes ConflictError
- any other DatabaseError becomes TransientStorageError

Nothing is retried here; the caller may retry the whole request.
"""
import logging
from contextlib import contextmanager
from django.db import transaction, DatabaseError, IntegrityError
from .exceptions import ConflictError, TransientStorageError

logger = logging.getLogger(__name__)


@contextmanager
def atomic_operation(description, conflict_message=None, using=None):
    try:
        with transaction.atomic(using=using):
            yield
    except IntegrityError as e:
        logger.info('Conflict during %s: %s', description, e)
        raise ConflictError(conflict_message or f'{description} conflicts with existing data') from e
    except DatabaseError as e:
        logger.exception('Storage failure during %s', description)
        raise TransientStorageError(f'{description} failed, nothing was changed') from e
