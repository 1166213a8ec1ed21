"""
Error taxonomy for the form intake handlers.

Every failure a handler can report to a client is a ``FormServiceError``
carrying the HTTP status it maps to. Anything else that escapes an operation
is treated as an internal error by the handler boundary.
"""


class FormServiceError(Exception):
    """Base class for errors that map onto an HTTP status"""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(FormServiceError):
    status_code = 400
    default_message = "Invalid request"


class AuthenticationError(FormServiceError):
    status_code = 401
    default_message = "Could not validate credentials"


class AuthorizationError(FormServiceError):
    status_code = 403
    default_message = "You do not have access to this resource"


class NotFoundError(FormServiceError):
    status_code = 404
    default_message = "Not found"


class MethodNotAllowedError(FormServiceError):
    status_code = 405
    default_message = "Method not allowed"


class ConflictError(FormServiceError):
    status_code = 409
    default_message = "Form was modified by another request"


class InternalError(FormServiceError):
    """Never carries detail; the message is always the generic one"""

    status_code = 500

    def __init__(self, message: str = None):
        super().__init__(self.default_message)
