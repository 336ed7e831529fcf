"""
Farm Advisor - JWT identity service with an in-process user registry.
"""
import logging
import threading
import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from jose import JWTError, jwt
from werkzeug.security import check_password_hash, generate_password_hash

from config import ACCESS_TOKEN_EXPIRE_MINUTES, ALGORITHM, SECRET_KEY

logger = logging.getLogger(__name__)

# email (lower-cased) -> user record
_users: Dict[str, dict] = {}
_lock = threading.Lock()

# Checked against on unknown emails so a miss costs the same as a wrong password
_DUMMY_PASSWORD_HASH = generate_password_hash("farm-advisor-unknown-user")


class EmailAlreadyRegistered(ValueError):
    """Raised when signing up with an email that already has an account."""


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def register_user(email: str, password: str, full_name: Optional[str] = None) -> dict:
    """Create a user and return its public profile (no password hash)."""
    key = _normalize_email(email)
    with _lock:
        if key in _users:
            raise EmailAlreadyRegistered(f"Email already registered: {key}")
        user = {
            "id": str(uuid.uuid4()),
            "email": key,
            "full_name": full_name,
            "password_hash": generate_password_hash(password),
            "created_at": datetime.now(timezone.utc),
        }
        _users[key] = user
    logger.info("Registered user %s", user["id"])
    return public_profile(user)


def verify_user(email: str, password: str) -> Optional[dict]:
    """Verify credentials; returns the public profile or None."""
    user = _users.get(_normalize_email(email))
    password_hash = user["password_hash"] if user is not None else _DUMMY_PASSWORD_HASH
    if not check_password_hash(password_hash, password) or user is None:
        logger.warning("Failed login for %s", _normalize_email(email))
        return None
    return public_profile(user)


def get_user(user_id: str) -> Optional[dict]:
    for user in list(_users.values()):
        if user["id"] == user_id:
            return public_profile(user)
    return None


def public_profile(user: dict) -> dict:
    return {k: v for k, v in user.items() if k != "password_hash"}


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def verify_token(token: str) -> Optional[dict]:
    """Verify JWT and return payload or None."""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        return payload
    except JWTError:
        return None


def reset_users() -> None:
    with _lock:
        _users.clear()
