from backend.app.models.user import User, AccountStatus
from backend.app.models.refresh_token import RefreshToken
from backend.app.models.password_reset import PasswordReset
from backend.app.models.note import Note, NoteKind
from backend.app.models.shared_note import SharedNote

__all__ = [
    "User",
    "AccountStatus",
    "RefreshToken",
    "PasswordReset",
    "Note",
    "NoteKind",
    "SharedNote",
]
