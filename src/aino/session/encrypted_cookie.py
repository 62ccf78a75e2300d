"""
Session storage in encrypted cookies.

Session JSON is sealed with AES-256-GCM and stored in a single
``_aino_session`` cookie as ``base64(ciphertext)--base64(iv)--base64(tag)``.
Anything that fails to split, decode, authenticate or parse is treated the
same way: the request starts with an empty session.
"""

import base64
import binascii
import logging
import os
from dataclasses import dataclass
from typing import Optional, Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from aino.http.context import Context
from aino.session.storage import SESSION_COOKIE, SessionStorage, dump_session, load_session, to_bytes

logger = logging.getLogger(__name__)

KEY_SIZE = 32
IV_SIZE = 16
TAG_SIZE = 16
DELIMITER = "--"
AAD = b"aino-session-crypto-module"


def encrypt(data: Union[str, bytes], key: bytes) -> str:
    """Seal ``data`` and pack ciphertext, IV and tag into one string"""
    iv = os.urandom(IV_SIZE)
    sealed = AESGCM(key).encrypt(iv, to_bytes(data), AAD)
    ciphertext, tag = sealed[:-TAG_SIZE], sealed[-TAG_SIZE:]
    return DELIMITER.join(base64.b64encode(part).decode("ascii") for part in (ciphertext, iv, tag))


def decrypt(blob: str, key: bytes) -> Optional[bytes]:
    """
    Open a blob produced by ``encrypt``.

    Returns None when the blob is malformed or fails authentication.
    """
    parts = blob.split(DELIMITER)
    if len(parts) != 3:
        return None

    try:
        ciphertext, iv, tag = [base64.b64decode(part, validate=True) for part in parts]
    except (binascii.Error, ValueError):
        return None

    if len(tag) != TAG_SIZE:
        return None

    try:
        return AESGCM(key).decrypt(iv, ciphertext + tag, AAD)
    except (InvalidTag, ValueError):
        return None


@dataclass
class EncryptedCookieStorage(SessionStorage):
    """
    Session implementation using encrypted cookies as the storage.

    ``key`` must be exactly 256 bits (32 bytes).
    """
    key: bytes
    cookie_name: str = SESSION_COOKIE
    path: str = "/"
    secure: bool = False
    same_site: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.key, bytes) or len(self.key) != KEY_SIZE:
            raise ValueError(f"Encrypted session key must be exactly {KEY_SIZE} bytes")

    def __repr__(self) -> str:
        return f"EncryptedCookieStorage(cookie_name={self.cookie_name!r})"

    def decode(self, context: Context) -> Context:
        """Decrypt session data from the session cookie"""
        blob = (context.cookies or {}).get(self.cookie_name)

        if blob is None:
            context.session = {}
            return context

        data = decrypt(blob, self.key)
        if data is None:
            logger.debug("Session cookie failed to decrypt, starting an empty session")
            context.session = {}
            return context

        context.session = load_session(data)
        return context

    def encode(self, context: Context) -> Context:
        """Append one ``Set-Cookie`` header with the encrypted session"""
        if not isinstance(context.session, dict):
            return context

        return self.set_cookie(context, self.cookie_name, encrypt(dump_session(context.session), self.key))


__all__ = ['EncryptedCookieStorage', 'encrypt', 'decrypt', 'AAD', 'KEY_SIZE']
