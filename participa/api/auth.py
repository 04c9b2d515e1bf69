"""Authentication for the Participa HTTP engines."""

import hashlib
import secrets
from datetime import datetime
from typing import Optional
from fastapi import HTTPException, Security, status
from fastapi.security import APIKeyHeader
from participa.db import get_session, APIKey, User

# API key header; anonymous callers are allowed on public routes
api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


def hash_api_key(key: str) -> str:
    """Hash an API key using SHA256."""
    return hashlib.sha256(key.encode()).hexdigest()


def generate_api_key() -> str:
    """Generate a new random API key."""
    return secrets.token_urlsafe(32)


async def current_user(api_key: Optional[str] = Security(api_key_header)) -> Optional[User]:
    """
    Resolve the calling user from the X-API-Key header.

    Args:
        api_key: API key from request header

    Returns:
        The key's User, or None when no key was sent

    Raises:
        HTTPException: If the key is unknown or inactive
    """
    if not api_key:
        return None

    key_hash = hash_api_key(api_key)

    with get_session() as session:
        api_key_obj = session.query(APIKey).filter_by(key=key_hash).first()

        if not api_key_obj:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid API key"
            )

        if not api_key_obj.is_active:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="API key has been deactivated"
            )

        # Update usage stats
        api_key_obj.last_used = datetime.utcnow()
        api_key_obj.usage_count += 1

        user = api_key_obj.user
        session.flush()
        session.expunge(user)

        return user


async def require_user(api_key: Optional[str] = Security(api_key_header)) -> User:
    """Like current_user, but anonymous callers are rejected."""
    user = await current_user(api_key)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="API key is missing"
        )
    return user
