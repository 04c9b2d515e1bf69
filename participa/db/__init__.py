"""Database models and session management."""

from .models import (
    Base,
    Organization,
    Scope,
    ParticipatorySpace,
    Category,
    User,
    Component,
    ActionLog,
    Comment,
    APIKey,
    translated,
)
from .session import get_session, init_db

__all__ = [
    "Base",
    "Organization",
    "Scope",
    "ParticipatorySpace",
    "Category",
    "User",
    "Component",
    "ActionLog",
    "Comment",
    "APIKey",
    "translated",
    "get_session",
    "init_db",
]
