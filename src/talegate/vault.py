"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Password-based credential vault.

Keys are derived with PBKDF2-HMAC-SHA256 and secrets are sealed with
AES-256-GCM, so a wrong password and a tampered blob fail the same way:
the authentication tag does not verify and `DecryptionError` is raised.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from .errors import DecryptionError

MIN_KDF_ITERATIONS = 100_000
SALT_BYTES = 16
NONCE_BYTES = 12
KEY_BYTES = 32


def _b64encode(raw: bytes) -> str:
    return base64.b64encode(raw).decode("ascii")


def _b64decode(text: str, field_name: str) -> bytes:
    try:
        return base64.b64decode(text.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError, ValueError) as exc:
        raise DecryptionError(f"Encrypted secret field '{field_name}' is not valid base64") from exc


@dataclass(frozen=True, slots=True)
class EncryptedSecret:
    """Transport-safe sealed secret; all three byte fields are base64 text."""

    salt: str
    nonce: str
    ciphertext: str
    iterations: int = MIN_KDF_ITERATIONS

    def to_dict(self) -> dict[str, Any]:
        return {
            "salt": self.salt,
            "nonce": self.nonce,
            "ciphertext": self.ciphertext,
            "iterations": self.iterations,
        }

    @classmethod
    def from_dict(cls, row: Mapping[str, Any]) -> "EncryptedSecret":
        """
        Parse a persisted blob.

        Also accepts the legacy short `s`/`i`/`c` keys used by older game
        saves.
        """
        if not isinstance(row, Mapping):
            raise DecryptionError("Encrypted secret must be an object")
        salt = row.get("salt", row.get("s"))
        nonce = row.get("nonce", row.get("i"))
        ciphertext = row.get("ciphertext", row.get("c"))
        iterations = row.get("iterations", MIN_KDF_ITERATIONS)
        missing = [
            name
            for name, value in (("salt", salt), ("nonce", nonce), ("ciphertext", ciphertext))
            if not isinstance(value, str) or not value
        ]
        if missing:
            raise DecryptionError(
                f"Encrypted secret is missing fields: {', '.join(missing)}"
            )
        if not isinstance(iterations, int) or isinstance(iterations, bool):
            raise DecryptionError("Encrypted secret has an invalid iteration count")
        return cls(salt=salt, nonce=nonce, ciphertext=ciphertext, iterations=iterations)


def derive_key(password: str, salt: bytes, iterations: int = MIN_KDF_ITERATIONS) -> bytes:
    """Derive a 256-bit key from `password` and `salt` (deliberately slow)."""
    if iterations < MIN_KDF_ITERATIONS:
        raise ValueError(
            f"KDF iterations must be at least {MIN_KDF_ITERATIONS}, got {iterations}"
        )
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_BYTES,
        salt=salt,
        iterations=iterations,
    )
    return kdf.derive(password.encode("utf-8"))


def encrypt(
    password: str,
    plaintext: str,
    *,
    iterations: int = MIN_KDF_ITERATIONS,
) -> EncryptedSecret:
    """Seal `plaintext` under `password` with a fresh salt and nonce."""
    salt = os.urandom(SALT_BYTES)
    nonce = os.urandom(NONCE_BYTES)
    key = derive_key(password, salt, iterations)
    sealed = AESGCM(key).encrypt(nonce, plaintext.encode("utf-8"), None)
    return EncryptedSecret(
        salt=_b64encode(salt),
        nonce=_b64encode(nonce),
        ciphertext=_b64encode(sealed),
        iterations=iterations,
    )


def decrypt(password: str, secret: EncryptedSecret | Mapping[str, Any]) -> str:
    """Open a sealed secret; raises `DecryptionError` on any mismatch."""
    if not isinstance(secret, EncryptedSecret):
        secret = EncryptedSecret.from_dict(secret)

    salt = _b64decode(secret.salt, "salt")
    nonce = _b64decode(secret.nonce, "nonce")
    sealed = _b64decode(secret.ciphertext, "ciphertext")
    if not salt or len(nonce) != NONCE_BYTES or not sealed:
        raise DecryptionError("Encrypted secret has malformed fields")

    try:
        key = derive_key(password, salt, secret.iterations)
    except ValueError as exc:
        raise DecryptionError(str(exc)) from exc

    try:
        opened = AESGCM(key).decrypt(nonce, sealed, None)
    except InvalidTag as exc:
        raise DecryptionError("Wrong passphrase or corrupted secret") from exc

    try:
        return opened.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecryptionError("Decrypted secret is not valid text") from exc


class CredentialVault:
    """
    Async front for the vault functions.

    Key derivation runs in a worker thread so the event loop stays free.
    The vault keeps no password and no plaintext between calls.
    """

    def __init__(self, *, iterations: int = MIN_KDF_ITERATIONS) -> None:
        if iterations < MIN_KDF_ITERATIONS:
            raise ValueError(
                f"KDF iterations must be at least {MIN_KDF_ITERATIONS}, got {iterations}"
            )
        self.iterations = iterations

    async def encrypt(self, password: str, plaintext: str) -> EncryptedSecret:
        return await asyncio.to_thread(
            encrypt, password, plaintext, iterations=self.iterations
        )

    async def decrypt(
        self, password: str, secret: EncryptedSecret | Mapping[str, Any]
    ) -> str:
        return await asyncio.to_thread(decrypt, password, secret)
