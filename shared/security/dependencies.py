from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer

from shared.errors import AuthenticationError
from .jwt_handler import verify_access_token

# Defines the expected header format (Bearer <token>)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login", auto_error=False)


async def get_token_payload(token: str = Depends(oauth2_scheme)) -> dict:
    """Dependency to validate the JWT and return its claims (`sub`, `sid`)."""
    if not token:
        raise AuthenticationError("Not authenticated")

    payload = verify_access_token(token)
    if payload is None:
        raise AuthenticationError("Could not validate credentials")

    if not payload.get("sub") or not payload.get("sid"):
        raise AuthenticationError("Could not validate credentials")
    return payload
