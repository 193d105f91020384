from datetime import datetime, timedelta, timezone
from typing import Optional

import structlog
from jose import JWTError, jwt

from shared.config.settings import ACCESS_TOKEN_EXPIRE_MINUTES, JWT_SECRET_KEY

logger = structlog.get_logger(__name__)

ALGORITHM = "HS256"

if not JWT_SECRET_KEY:
    logger.warning("jwt_secret_missing", detail="JWT_SECRET_KEY is not set, using an insecure development key")
SECRET_KEY = JWT_SECRET_KEY or "insecure-development-key"


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Signs `data` (admin email in `sub`, session id in `sid`) with issue and expiry times."""
    issued_at = datetime.now(timezone.utc)
    claims = dict(data)
    claims["iat"] = issued_at
    claims["exp"] = issued_at + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    return jwt.encode(claims, SECRET_KEY, algorithm=ALGORITHM)


def verify_access_token(token: str) -> dict | None:
    """Claims of a valid token; None when the signature is bad or the token expired."""
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None
