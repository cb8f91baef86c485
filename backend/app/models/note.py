# backend/app/models/note.py
import enum

from sqlalchemy import Column, Integer, String, Text, Boolean, ForeignKey, DateTime
from sqlalchemy.sql import func

from backend.app.db.base import Base


class NoteKind(str, enum.Enum):
    TRANSPARENT = "transparent"
    ZERO_KNOWLEDGE = "zero_knowledge"


class Note(Base):
    """
    Both note shapes live in one table so ownership checks are shared.

    - transparent: `title` plain, `content` = server-side AES-GCM ciphertext
    - zero_knowledge: the *_ciphertext / *_nonce / note_salt columns hold
      client-encrypted opaque values; the server never decrypts them
    """
    __tablename__ = "notes"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    kind = Column(String(20), nullable=False, index=True)

    # --- transparent ---
    title = Column(String(255), nullable=True)
    content = Column(Text, nullable=True)
    is_pinned = Column(Boolean, nullable=False, default=False)
    is_archived = Column(Boolean, nullable=False, default=False)
    is_deleted = Column(Boolean, nullable=False, default=False)

    # --- zero_knowledge (server is blind) ---
    title_ciphertext = Column(Text, nullable=True)
    content_ciphertext = Column(Text, nullable=True)
    title_nonce = Column(String(64), nullable=True)
    content_nonce = Column(String(64), nullable=True)
    note_salt = Column(String(128), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now()
    )
