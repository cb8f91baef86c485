# backend/app/security/hashing.py
"""
Password hashing (argon2id via argon2-cffi).

Passwords are only ever compared through verify_password; the stored hash
is never logged or serialized into an API response.
"""
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

_hasher = PasswordHasher()

# Verified against when the email is unknown so both login failures cost the same
DUMMY_HASH = _hasher.hash("notora-dummy-password")


def get_password_hash(password: str) -> str:
    return _hasher.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return _hasher.verify(hashed_password, plain_password)
    except (VerificationError, InvalidHashError):
        return False
