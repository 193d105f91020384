from .jwt_handler import create_access_token, verify_access_token
from .dependencies import get_token_payload, oauth2_scheme

__all__ = [
    "create_access_token",
    "verify_access_token",
    "get_token_payload",
    "oauth2_scheme",
]
