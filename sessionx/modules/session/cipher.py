"""AES-GCM token framing.

Token layout: unpadded URL-safe base64 of ``nonce || ciphertext || tag``
with a 96-bit nonce drawn fresh for every encryption.
"""

import base64
import binascii
import os
import re

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .config import VALID_KEY_LENGTHS
from .errors import ConfigError, DecryptionError, EncryptionError

NONCE_SIZE = 12
TAG_SIZE = 16

TOKEN_ALPHABET = re.compile(r"[A-Za-z0-9_-]*")


def encode_token(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def decode_token(token: str) -> bytes:
    """Strict inverse of ``encode_token``; raises ``DecryptionError`` on bad input."""
    if not TOKEN_ALPHABET.fullmatch(token):
        raise DecryptionError("decode", "token contains characters outside the URL-safe alphabet")
    try:
        padded = token.encode("ascii") + b"=" * (-len(token) % 4)
        return base64.b64decode(padded, altchars=b"-_", validate=True)
    except binascii.Error as e:
        raise DecryptionError("decode", "malformed token encoding", e) from e


class SessionCipher:
    """Seals and opens session tokens under a single AES key."""

    def __init__(self, key: bytes):
        if len(key) not in VALID_KEY_LENGTHS:
            raise ConfigError(
                "new manager",
                f"secret key must be 16, 24, or 32 bytes, got {len(key)}",
            )
        self._aead = AESGCM(key)

    def encrypt(self, plaintext: bytes) -> str:
        try:
            nonce = os.urandom(NONCE_SIZE)
            sealed = self._aead.encrypt(nonce, plaintext, None)
        except (OverflowError, ValueError, TypeError) as e:
            raise EncryptionError("encrypt", "failed to encrypt session data", e) from e
        return encode_token(nonce + sealed)

    def decrypt(self, token: str) -> bytes:
        raw = decode_token(token)
        if len(raw) < NONCE_SIZE + TAG_SIZE:
            raise DecryptionError("decrypt", "token too short")

        nonce, sealed = raw[:NONCE_SIZE], raw[NONCE_SIZE:]
        try:
            return self._aead.decrypt(nonce, sealed, None)
        except InvalidTag as e:
            raise DecryptionError("decrypt", "failed to authenticate session data", e) from e
