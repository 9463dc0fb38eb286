from .contact import ContactPayload, first_error_message, sensitive_paths, validate_contact
from .schema import Contact

__all__ = [
    "Contact",
    "ContactPayload",
    "first_error_message",
    "sensitive_paths",
    "validate_contact",
]
