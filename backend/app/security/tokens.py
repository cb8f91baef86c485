# backend/app/security/tokens.py
"""
Opaque token primitives.

- random_opaque_token: refresh, reset and share tokens
- one_way_hash: lookup key for tokens stored server-side (NOT for passwords)

secrets draws from os.urandom; if the OS RNG is unavailable the error
propagates to the caller instead of degrading to a weaker source.
"""
import hashlib
import secrets

OPAQUE_TOKEN_BYTES = 32


def random_opaque_token(byte_length: int = OPAQUE_TOKEN_BYTES) -> str:
    """
    Generate a cryptographically secure random hex string.

    Returns:
        2 * byte_length hex characters
    """
    if byte_length <= 0:
        raise ValueError("byte_length must be positive")
    return secrets.token_hex(byte_length)


def one_way_hash(value: str) -> str:
    """SHA-256 hex digest; equal inputs always give equal outputs."""
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def generate_user_salt(length: int = 16) -> str:
    """Per-account salt reserved for client-side key derivation (hex)."""
    return secrets.token_hex(length)
