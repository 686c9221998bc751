class PlannerError(Exception):
    """Base for errors surfaced to callers.

    `kind` is the machine-readable tag, `message` the human-readable one.
    """
    kind = 'error/internal'
    status_code = 500
    default_message = 'Internal error'

    def __init__(self, msg=None):
        self.message = msg or self.default_message
        super().__init__(self.message)


class ValidationError(PlannerError):
    kind = 'error/invalid'
    status_code = 400
    default_message = 'Invalid input'


class UnauthorizedError(PlannerError):
    kind = 'error/unauthorized'
    status_code = 401
    default_message = 'Authentication required'


class ForbiddenError(PlannerError):
    kind = 'error/forbidden'
    status_code = 403
    default_message = 'Not allowed'


class NotFoundError(PlannerError):
    kind = 'error/not-found'
    status_code = 404
    default_message = 'Not found'


class ConflictError(PlannerError):
    kind = 'error/conflict'
    status_code = 409
    default_message = 'Conflict'


class TransientStorageError(PlannerError):
    kind = 'error/storage'
    status_code = 503
    default_message = 'Storage temporarily unavailable'
