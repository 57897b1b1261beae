"""Optional helpers that sit around the codecs.

Password sealing of the payload before it is embedded, and a SHA-256 content
digest of the produced carrier for tamper-evidence.
"""
from __future__ import annotations

import base64
import hashlib
import hmac
import json
import os
from typing import Tuple

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from . import config
from .bits import decode_utf8
from .errors import CorruptPayload

SALT_SIZE = 16
NONCE_SIZE = 12


def _derive_key(password: str, salt: bytes, length: int = 32, iterations: int = None) -> bytes:
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=length,
        salt=salt,
        iterations=iterations or config.PBKDF2_ITERATIONS,
    )
    return kdf.derive(password.encode("utf-8"))


def _split(blob: bytes) -> Tuple[bytes, bytes, bytes]:
    if len(blob) < SALT_SIZE + NONCE_SIZE:
        raise CorruptPayload("Blob too short for salt+nonce")
    return blob[:SALT_SIZE], blob[SALT_SIZE:SALT_SIZE + NONCE_SIZE], blob[SALT_SIZE + NONCE_SIZE:]


def _seal(password: str, plaintext: bytes) -> Tuple[bytes, bytes, bytes]:
    salt = os.urandom(SALT_SIZE)
    nonce = os.urandom(NONCE_SIZE)
    ct = AESGCM(_derive_key(password, salt)).encrypt(nonce, plaintext, associated_data=None)
    return salt, nonce, ct


def encrypt_bytes(password: str, plaintext: bytes) -> bytes:
    """``salt(16) || nonce(12) || ciphertext+tag`` under a PBKDF2-derived AES-256-GCM key."""
    return b"".join(_seal(password, plaintext))


def decrypt_bytes(password: str, blob: bytes) -> bytes:
    salt, nonce, ct = _split(blob)
    try:
        return AESGCM(_derive_key(password, salt)).decrypt(nonce, ct, associated_data=None)
    except InvalidTag as exc:
        raise CorruptPayload("Decryption failed: wrong password or tampered payload") from exc


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def seal_message(password: str, text: str) -> str:
    """Encrypt ``text`` into a JSON envelope that is itself plain UTF-8 text."""
    salt, nonce, ct = _seal(password, text.encode("utf-8"))
    return json.dumps({"salt": _b64(salt), "iv": _b64(nonce), "ciphertext": _b64(ct)}, separators=(",", ":"))


def is_sealed(text: str) -> bool:
    try:
        obj = json.loads(text)
    except ValueError:
        return False
    return isinstance(obj, dict) and {"salt", "iv", "ciphertext"} <= set(obj)


def open_message(password: str, text: str) -> str:
    if not is_sealed(text):
        raise CorruptPayload("Message is not a sealed envelope")
    obj = json.loads(text)
    try:
        blob = b"".join(base64.b64decode(obj[k], validate=True) for k in ("salt", "iv", "ciphertext"))
    except (ValueError, TypeError) as exc:
        raise CorruptPayload("Malformed sealed envelope") from exc
    return decode_utf8(decrypt_bytes(password, blob))


def content_digest(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def verify_digest(data: bytes, expected: str) -> bool:
    return hmac.compare_digest(content_digest(data), expected.lower())
