from .errors import error_envelope, register_exception_handlers, server_error_handler
from .headers import SECURITY_HEADERS, SecurityHeadersMiddleware

__all__ = [
    "SECURITY_HEADERS",
    "SecurityHeadersMiddleware",
    "error_envelope",
    "register_exception_handlers",
    "server_error_handler",
]
