"""
At-rest encryption for third-party secrets (SMTP user names and passwords).

Blob format: ``<32 hex chars of IV>:<hex ciphertext>``. The ciphertext is
AES-256-GCM output, so it carries a 16-byte authentication tag and any
tampering, truncation or key change fails loudly instead of decrypting to
garbage.

The AES key is derived from the configured passphrase with scrypt once per
SecretCipher instance. The app builds a single instance at startup.
"""

from __future__ import annotations

import os
import string
from functools import cached_property

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from config import EncryptionSettings
from errors import ConfigurationError, DecryptionError

IV_BYTES = 16
KEY_BYTES = 32
TAG_BYTES = 16
DELIMITER = ":"

# scrypt cost parameters
SCRYPT_N = 2**14
SCRYPT_R = 8
SCRYPT_P = 1

_HEX_DIGITS = frozenset(string.hexdigits)


class SecretCipher:
    def __init__(self, passphrase: str, salt: str = "salt") -> None:
        if not passphrase:
            raise ConfigurationError("ENCRYPTION_KEY must be set")
        self._passphrase = passphrase.encode("utf-8")
        self._salt = salt.encode("utf-8")

    @classmethod
    def from_settings(cls, settings: EncryptionSettings) -> "SecretCipher":
        return cls(settings.encryption_key, settings.encryption_salt)

    @cached_property
    def _key(self) -> bytes:
        kdf = Scrypt(
            salt=self._salt, length=KEY_BYTES, n=SCRYPT_N, r=SCRYPT_R, p=SCRYPT_P
        )
        return kdf.derive(self._passphrase)

    def encrypt(self, plaintext: str) -> str:
        iv = os.urandom(IV_BYTES)
        ciphertext = AESGCM(self._key).encrypt(iv, plaintext.encode("utf-8"), None)
        return f"{iv.hex()}{DELIMITER}{ciphertext.hex()}"

    def decrypt(self, blob: str) -> str:
        """Inverse of encrypt(); raises DecryptionError for anything else."""
        if not isinstance(blob, str):
            raise DecryptionError("Encrypted secret is malformed")

        parts = blob.split(DELIMITER)
        if len(parts) != 2:
            raise DecryptionError("Encrypted secret is malformed")
        iv_hex, ciphertext_hex = parts

        if len(iv_hex) != IV_BYTES * 2 or not _is_hex(iv_hex):
            raise DecryptionError("Encrypted secret has an invalid IV")
        if len(ciphertext_hex) % 2 or not _is_hex(ciphertext_hex):
            raise DecryptionError("Encrypted secret has invalid ciphertext")

        ciphertext = bytes.fromhex(ciphertext_hex)
        if len(ciphertext) < TAG_BYTES:
            raise DecryptionError("Encrypted secret is truncated")

        try:
            plaintext = AESGCM(self._key).decrypt(
                bytes.fromhex(iv_hex), ciphertext, None
            )
        except InvalidTag:
            raise DecryptionError(
                "Encrypted secret failed authentication (tampered or key changed)"
            ) from None

        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError:
            raise DecryptionError("Decrypted secret is not valid UTF-8") from None


def _is_hex(value: str) -> bool:
    return bool(value) and all(ch in _HEX_DIGITS for ch in value)
