# Encryption, the field transformer, persistence and the service layer that
# ties them together. Nothing here knows about HTTP routing.
from .cipher import Cipher
from .repository import ContactRepository
from .service import ContactService
from .transform import SENSITIVE_FIELDS, FieldTransformer, transform_contact

__all__ = [
    "SENSITIVE_FIELDS",
    "Cipher",
    "ContactRepository",
    "ContactService",
    "FieldTransformer",
    "transform_contact",
]
