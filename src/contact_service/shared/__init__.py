from .config import Config, load_config
from .errors import (
    ConfigurationError,
    ContactServiceError,
    DecryptionError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from .logger import Logger

__all__ = [
    "Config",
    "ConfigurationError",
    "ContactServiceError",
    "DecryptionError",
    "Logger",
    "NotFoundError",
    "PersistenceError",
    "ValidationError",
    "load_config",
]
