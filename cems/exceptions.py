class CemsError(Exception):
    """Base error for anything a caller can be told about.

    Each subclass carries the HTTP status the API answers with; the message
    is sent back verbatim as ``{"message": ...}``.
    """

    status_code = 500

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    default_message = "An unexpected error occurred"


class ValidationError(CemsError):
    status_code = 400
    default_message = "Invalid request"

    def __init__(self, message=None, fields=None):
        super().__init__(message)
        self.fields = fields or []


class MissingFieldsError(ValidationError):
    def __init__(self, fields):
        super().__init__("All required fields must be provided", fields)


class AuthenticationError(CemsError):
    status_code = 401
    default_message = "Invalid credentials"


class AuthorizationError(CemsError):
    status_code = 403
    default_message = "Access denied"


class NotFoundError(CemsError):
    status_code = 404
    default_message = "Not found"


class ConflictError(CemsError):
    status_code = 409
    default_message = "Conflict"


class CapacityError(CemsError):
    status_code = 400
    default_message = "Event is at full capacity"


class InvalidStateError(CemsError):
    status_code = 400
    default_message = "Operation not allowed in the current state"
