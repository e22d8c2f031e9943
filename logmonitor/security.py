"""Encryption of short string secrets before they are persisted."""

from __future__ import annotations

import base64
import binascii
import hashlib
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

ENCRYPTED_PREFIX = "enc:v1:"
_NONCE_SIZE = 12


class SecurityError(Exception):
    """Raised when an encrypted value cannot be decoded or decrypted."""


def _decode_raw_base64(text: str) -> bytes:
    if "=" in text:
        raise binascii.Error("unexpected padding")
    return base64.b64decode(text + "=" * (-len(text) % 4), validate=True)


class StringCipher:
    """AES-GCM cipher keyed by the SHA-256 digest of an application secret."""

    def __init__(self, secret: str) -> None:
        secret = secret.strip()
        if not secret:
            raise ValueError("security: secret must not be empty")
        self._aead = AESGCM(hashlib.sha256(secret.encode()).digest())

    def encrypt(self, value: str) -> str:
        """Return an encrypted representation of value; empty or encrypted values pass through."""
        if not value or value.startswith(ENCRYPTED_PREFIX):
            return value
        nonce = os.urandom(_NONCE_SIZE)
        ciphertext = self._aead.encrypt(nonce, value.encode(), None)
        encoded = base64.b64encode(nonce + ciphertext).decode("ascii").rstrip("=")
        return ENCRYPTED_PREFIX + encoded

    def decrypt(self, value: str) -> str:
        """Return plaintext for encrypted values; plain values pass through."""
        if not value or not value.startswith(ENCRYPTED_PREFIX):
            return value
        try:
            payload = _decode_raw_base64(value[len(ENCRYPTED_PREFIX):])
        except (binascii.Error, ValueError) as exc:
            raise SecurityError(f"security: decode encrypted value: {exc}") from exc
        if len(payload) < _NONCE_SIZE:
            raise SecurityError("security: encrypted value is too short")
        nonce, ciphertext = payload[:_NONCE_SIZE], payload[_NONCE_SIZE:]
        try:
            plaintext = self._aead.decrypt(nonce, ciphertext, None)
        except InvalidTag as exc:
            raise SecurityError("security: decrypt value: message authentication failed") from exc
        return plaintext.decode()


def new_string_cipher(secret: str) -> StringCipher | None:
    """Create a cipher from secret, or None when the secret is blank."""
    if not secret.strip():
        return None
    return StringCipher(secret)