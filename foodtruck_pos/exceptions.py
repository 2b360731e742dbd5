"""Error taxonomy shared by services and the HTTP layer."""


class POSError(Exception):
    """Base class for errors that map onto an HTTP status and a message."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthenticationError(POSError):
    """Missing, invalid or expired credentials."""
    status_code = 401


class AuthorizationError(POSError):
    """Valid session, but its role is not allowed here."""
    status_code = 403


class NotFoundError(POSError):
    status_code = 404


class ValidationError(POSError):
    """Malformed or unacceptable input."""
    status_code = 400


class InternalError(POSError):
    status_code = 500
