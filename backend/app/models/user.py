# backend/app/models/user.py
import enum

from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.sql import func

from backend.app.db.base import Base


class AccountStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    SUSPENDED = "SUSPENDED"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    # Unique and compared exactly as stored (no case folding)
    email = Column(String(255), unique=True, index=True, nullable=False)

    # Login only. Never used to derive note keys.
    hashed_password = Column(String(255), nullable=False)

    name = Column(String(100), nullable=False, default="")

    # Reserved for client-side key derivation (hex)
    user_salt = Column(String(128), nullable=False)

    # Mutated only by admin actions
    status = Column(String(20), nullable=False, default=AccountStatus.PENDING.value)
    is_admin = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
