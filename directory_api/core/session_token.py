"""Session Token Codec — signs and verifies the bearer token kept in the session cookie.

Invariants:
    - Claims are exactly {"id": int, "emailAddress": str}; no expiry is set
    - verify() never raises: it returns TokenClaims or TokenRejection
    - No claim is trusted before the payload shape is checked

Design Decisions:
    - python-jose HS256 JWTs: compact, and the secret is the only state
    - Tagged result instead of exceptions: the auth gate maps each kind to its own 401
"""

import logging
from dataclasses import dataclass

from jose import jwt, JWTError

from directory_api.core.domain_types import AccountId, TokenErrorKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenClaims:
    account_id: AccountId
    email_address: str


@dataclass(frozen=True)
class TokenRejection:
    kind: TokenErrorKind
    reason: str = ""


class SessionTokenCodec:
    """Mints and verifies session tokens with one process-wide secret."""

    def __init__(self, secret: str, algorithm: str = "HS256"):
        if not secret:
            raise ValueError("session token secret must not be empty")
        self._secret = secret
        self._algorithm = algorithm

    def mint(self, account_id: int, email_address: str) -> str:
        claims = {"id": account_id, "emailAddress": email_address}
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> TokenClaims | TokenRejection:
        try:
            payload = jwt.decode(
                token, self._secret, algorithms=[self._algorithm],
            )
        except JWTError as e:
            logger.info(f"Session token rejected: {e}")
            return TokenRejection(TokenErrorKind.INVALID, str(e))

        if not isinstance(payload, dict):
            return TokenRejection(TokenErrorKind.INVALID_PAYLOAD, "payload is not an object")
        account_id = payload.get("id")
        email_address = payload.get("emailAddress")
        # bool is a subclass of int
        if not isinstance(account_id, int) or isinstance(account_id, bool):
            return TokenRejection(TokenErrorKind.INVALID_PAYLOAD, "id is not an integer")
        if not isinstance(email_address, str):
            return TokenRejection(TokenErrorKind.INVALID_PAYLOAD, "emailAddress is not a string")
        return TokenClaims(AccountId(account_id), email_address)
