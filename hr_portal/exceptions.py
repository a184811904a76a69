# hr_portal/exceptions.py


class PortalError(Exception):
    """Base exception for request-level business rule violations."""
    status_code = 400

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {'message': self.message}


class ValidationError(PortalError):
    """Raised when a request body fails form validation."""

    def __init__(self, errors):
        super().__init__('Invalid request data.')
        self.errors = errors

    def to_dict(self):
        return {'message': self.message, 'errors': self.errors}


class AttendanceStateError(PortalError):
    """Raised when a clock event does not fit the employee's current session."""


class NotFoundError(PortalError):
    status_code = 404
