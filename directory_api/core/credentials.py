"""Credential Primitives — password hashing and verification-code encoding.

Invariants:
    - Passwords are stored only as salted bcrypt hashes (rounds >= 10)
    - Verification codes are 64 random bytes; raw bytes at rest, base64 over the wire
    - Code comparison is constant-time (hmac.compare_digest)

Design Decisions:
    - passlib CryptContext over calling bcrypt directly: dummy_verify() gives
      equal-cost failures for unknown accounts
    - Hashing helpers are sync; callers move them off the event loop
"""

import base64
import binascii
import hmac
import secrets

from passlib.context import CryptContext

VERIFICATION_CODE_BYTES = 64
MIN_HASH_ROUNDS = 10


class PasswordHasher:
    """bcrypt hashing with a fixed work factor."""

    def __init__(self, rounds: int = MIN_HASH_ROUNDS):
        if rounds < MIN_HASH_ROUNDS:
            raise ValueError(f"bcrypt rounds must be >= {MIN_HASH_ROUNDS}, got {rounds}")
        self._context = CryptContext(
            schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds,
        )

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, password: str, password_hash: str | None) -> bool:
        """Check a password. A missing hash costs the same as a mismatch."""
        if password_hash is None:
            self._context.dummy_verify()
            return False
        return self._context.verify(password, password_hash)


def new_verification_code() -> bytes:
    return secrets.token_bytes(VERIFICATION_CODE_BYTES)


def encode_verification_code(code: bytes) -> str:
    return base64.b64encode(code).decode("ascii")


def decode_verification_code(code: str) -> bytes | None:
    """Transport form back to bytes; None when the text is not valid base64."""
    try:
        return base64.b64decode(code, validate=True)
    except (binascii.Error, ValueError):
        return None


def codes_match(stored: bytes | None, submitted: bytes) -> bool:
    if stored is None:
        return False
    return hmac.compare_digest(stored, submitted)
