"""Credential Primitives — bcrypt hashing and verification-code encoding.

Tests:
    - Work factor below 10 is refused; hashes carry the configured cost
    - verify() accepts the right password only; a missing hash is just False
    - Codes are 64 random bytes; base64 transport form decodes back exactly
    - Malformed base64 decodes to None instead of raising
    - codes_match is False for a missing stored code
"""

import base64

import pytest

from directory_api.core.credentials import (
    MIN_HASH_ROUNDS,
    VERIFICATION_CODE_BYTES,
    PasswordHasher,
    codes_match,
    decode_verification_code,
    encode_verification_code,
    new_verification_code,
)


@pytest.fixture(scope="module")
def hasher():
    return PasswordHasher()


def test_rounds_below_minimum_rejected():
    with pytest.raises(ValueError):
        PasswordHasher(rounds=MIN_HASH_ROUNDS - 1)


def test_hash_is_salted_bcrypt(hasher):
    first = hasher.hash("correct horse")
    second = hasher.hash("correct horse")
    assert first.startswith("$2b$10$")
    assert first != second


def test_verify_accepts_only_matching_password(hasher):
    stored = hasher.hash("correct horse")
    assert hasher.verify("correct horse", stored) is True
    assert hasher.verify("battery staple", stored) is False


def test_verify_without_hash_is_false(hasher):
    assert hasher.verify("anything", None) is False


def test_new_code_is_64_random_bytes():
    code = new_verification_code()
    assert len(code) == VERIFICATION_CODE_BYTES
    assert code != new_verification_code()


def test_encoded_code_decodes_to_same_bytes():
    code = new_verification_code()
    encoded = encode_verification_code(code)
    assert encoded == base64.b64encode(code).decode("ascii")
    assert decode_verification_code(encoded) == code


def test_malformed_code_decodes_to_none():
    assert decode_verification_code("not base64!!") is None
    assert decode_verification_code("abc") is None


def test_codes_match():
    code = new_verification_code()
    assert codes_match(code, bytes(code)) is True
    assert codes_match(code, new_verification_code()) is False
    assert codes_match(None, code) is False
