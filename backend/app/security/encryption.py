# backend/app/security/encryption.py
"""
Server-side encryption at rest for transparent notes.

AES-256-GCM with a single server-wide key. Stored format is
base64(nonce[12] || ciphertext+tag). The key is configuration, injected
once; it is never per-user and never mutated at runtime.
"""
import base64
import binascii
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from backend.app.core.errors import StorageError

NONCE_SIZE = 12
# Binds ciphertext to its purpose; not secret
_AAD = b"notora:note-content:v1"


class NoteCipher:
    def __init__(self, key: bytes):
        if len(key) != 32:
            raise ValueError("note encryption key must be exactly 32 bytes")
        self._aesgcm = AESGCM(key)

    def encrypt(self, plaintext: str) -> str:
        nonce = os.urandom(NONCE_SIZE)
        ct = self._aesgcm.encrypt(nonce, plaintext.encode("utf-8"), _AAD)
        return base64.b64encode(nonce + ct).decode("ascii")

    def decrypt(self, stored: str) -> str:
        """
        Decrypt a stored value.

        Any failure (bad base64, truncated blob, wrong key, tampering) raises
        StorageError; partial plaintext is never returned.
        """
        try:
            blob = base64.b64decode(stored, validate=True)
            if len(blob) <= NONCE_SIZE:
                raise StorageError("ciphertext too short")
            nonce, ct = blob[:NONCE_SIZE], blob[NONCE_SIZE:]
            return self._aesgcm.decrypt(nonce, ct, _AAD).decode("utf-8")
        except (binascii.Error, ValueError, TypeError, InvalidTag) as ex:
            raise StorageError("failed to decrypt note content") from ex
