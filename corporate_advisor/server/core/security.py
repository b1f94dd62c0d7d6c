"""
Password hashing and JWT access tokens.
"""

import time
from typing import Any, Dict, Optional

import jwt
from passlib.context import CryptContext

from .config import AuthConfig, settings

ALGORITHM = "HS256"

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return pwd_context.verify(password, password_hash)
    except ValueError:
        return False


def create_access_token(user_id: str, role: str, config: Optional[AuthConfig] = None) -> str:
    config = config or settings.auth
    now = int(time.time())
    exp = now + config.access_token_expire_minutes * 60
    payload = {"sub": str(user_id), "role": role, "iat": now, "exp": exp}
    return jwt.encode(payload, config.secret_key, algorithm=ALGORITHM)


def decode_access_token(token: str, config: Optional[AuthConfig] = None) -> Optional[Dict[str, Any]]:
    """Return the token claims, or ``None`` when the token is invalid or expired."""
    config = config or settings.auth
    try:
        return jwt.decode(token, config.secret_key, algorithms=[ALGORITHM])
    except jwt.PyJWTError:
        return None
