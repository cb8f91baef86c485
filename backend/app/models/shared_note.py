# backend/app/models/shared_note.py
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from sqlalchemy.sql import func

from backend.app.db.base import Base


class SharedNote(Base):
    """
    Public read capability for one note.

    The token is stored in clear: possession of it IS the credential.
    Rows are disabled, never deleted (except with their note).
    """
    __tablename__ = "shared_notes"

    id = Column(Integer, primary_key=True, index=True)
    note_id = Column(
        Integer, ForeignKey("notes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    token = Column(String(64), unique=True, index=True, nullable=False)
    disabled = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
