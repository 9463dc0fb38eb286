__all__ = [
    "ConfigurationError",
    "ContactServiceError",
    "DecryptionError",
    "NotFoundError",
    "PersistenceError",
    "ValidationError",
]

INTERNAL_SERVER_ERROR = "Internal Server Error"


class ContactServiceError(Exception):
    """Base error carrying the HTTP status and the caller-facing message."""

    status_code: int = 500

    def __init__(self, message: str = INTERNAL_SERVER_ERROR):
        super().__init__(message)
        self.message = message


class ValidationError(ContactServiceError):
    status_code = 422


class NotFoundError(ContactServiceError):
    status_code = 404

    def __init__(self, message: str = "Contact not found"):
        super().__init__(message)


class DecryptionError(ContactServiceError):
    """Raised for any ciphertext that cannot be turned back into text.

    Malformed encodings and cipher failures are deliberately not told apart.
    """

    def __init__(self, message: str = "Decryption failed"):
        super().__init__(message)


class PersistenceError(ContactServiceError):
    pass


class ConfigurationError(ContactServiceError):
    """Fatal at startup; never reaches a request handler."""
