# backend/app/db/base.py
"""
Declarative base shared by every model in backend/app/models.

engine, AsyncSessionLocal and get_db live in db/session.py and are
re-exported here so models, endpoints and scripts need one import path.
"""
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Models use classic `Column(...)` attributes on this base."""
    pass


from backend.app.db.session import (  # noqa: E402
    engine,
    AsyncSessionLocal,
    get_db,
)

__all__ = [
    "Base",
    "engine",
    "AsyncSessionLocal",
    "get_db",
]
