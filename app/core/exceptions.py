class TodoAppError(Exception):
    """Base class for errors raised by the service layer."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(TodoAppError):
    # Also raised when a todo exists but is invisible to the caller
    status_code = 404


class PermissionDeniedError(TodoAppError):
    status_code = 403


class ConflictError(TodoAppError):
    status_code = 409


class ValidationError(TodoAppError):
    status_code = 400
