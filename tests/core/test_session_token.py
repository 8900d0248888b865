"""Session Token Codec — mint/verify round trip and the two rejection kinds.

Tests:
    - A minted token verifies back to the same claims
    - Wrong secret, garbage and tampered tokens are INVALID
    - Well-signed tokens with the wrong claim shape are INVALID_PAYLOAD
    - An empty secret is refused at construction
"""

import pytest
from jose import jwt

from directory_api.core.domain_types import TokenErrorKind
from directory_api.core.session_token import (
    SessionTokenCodec, TokenClaims, TokenRejection,
)

SECRET = "unit-test-secret"


@pytest.fixture
def codec():
    return SessionTokenCodec(SECRET)


def test_empty_secret_rejected():
    with pytest.raises(ValueError):
        SessionTokenCodec("")


def test_minted_token_verifies(codec):
    token = codec.mint(42, "jane@example.org")
    assert codec.verify(token) == TokenClaims(42, "jane@example.org")


def test_claims_have_no_expiry(codec):
    claims = jwt.get_unverified_claims(codec.mint(1, "a@b.co"))
    assert claims == {"id": 1, "emailAddress": "a@b.co"}


def test_token_from_other_secret_is_invalid(codec):
    token = SessionTokenCodec("another-secret").mint(1, "a@b.co")
    verdict = codec.verify(token)
    assert isinstance(verdict, TokenRejection)
    assert verdict.kind is TokenErrorKind.INVALID


def test_garbage_token_is_invalid(codec):
    assert codec.verify("not-a-token").kind is TokenErrorKind.INVALID


def test_tampered_signature_is_invalid(codec):
    token = codec.mint(1, "a@b.co")
    head, body, signature = token.split(".")
    forged = ".".join([head, body, signature[::-1]])
    assert codec.verify(forged).kind is TokenErrorKind.INVALID


@pytest.mark.parametrize("claims", [
    {"emailAddress": "a@b.co"},
    {"id": "7", "emailAddress": "a@b.co"},
    {"id": True, "emailAddress": "a@b.co"},
    {"id": 7},
    {"id": 7, "emailAddress": 99},
])
def test_wrong_claim_shape_is_invalid_payload(codec, claims):
    token = jwt.encode(claims, SECRET, algorithm="HS256")
    verdict = codec.verify(token)
    assert isinstance(verdict, TokenRejection)
    assert verdict.kind is TokenErrorKind.INVALID_PAYLOAD
