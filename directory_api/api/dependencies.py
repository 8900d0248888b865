"""API Dependencies — process-wide components and the session-cookie auth gate.

Invariants:
    - Codec, hasher and mailer are built once per process from Settings
    - require_session raises UnauthorizedError; it never returns partial claims
    - Missing cookie, bad token and bad payload each have their own 401 code

Design Decisions:
    - lru_cache providers instead of app.state: they work without the lifespan
      (ASGI test transports) and tests swap them via dependency_overrides
"""

import logging
from functools import lru_cache

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from directory_api.config import get_settings
from directory_api.core.credentials import PasswordHasher
from directory_api.core.domain_types import TokenErrorKind
from directory_api.core.errors import UnauthorizedError
from directory_api.core.session_token import SessionTokenCodec, TokenClaims
from directory_api.infrastructure.database import (
    SessionScope, get_db, get_session_scope,
)
from directory_api.infrastructure.mailer import Mailer, MailerSettings
from directory_api.services.credential_store import CredentialStore
from directory_api.services.profile_aggregator import ProfileAggregator
from directory_api.services.subscription_registrar import SubscriptionRegistrar

logger = logging.getLogger(__name__)

_REJECTIONS = {
    TokenErrorKind.INVALID: (
        "INVALID_TOKEN", "invalid authentication token",
    ),
    TokenErrorKind.INVALID_PAYLOAD: (
        "INVALID_TOKEN_PAYLOAD", "invalid authentication token data",
    ),
}


@lru_cache
def get_token_codec() -> SessionTokenCodec:
    settings = get_settings()
    return SessionTokenCodec(settings.jwt_secret, settings.jwt_algorithm)


@lru_cache
def get_password_hasher() -> PasswordHasher:
    return PasswordHasher(get_settings().password_hash_rounds)


@lru_cache
def get_mailer() -> Mailer:
    settings = get_settings()
    return Mailer(MailerSettings(
        host=settings.email_host,
        port=settings.email_port,
        secure=settings.email_secure,
        require_tls=settings.email_require_tls,
        username=settings.email_user,
        password=settings.email_password,
        sender=settings.email_from,
    ))


def get_credential_store(
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> CredentialStore:
    return CredentialStore(db, hasher)


def get_subscription_registrar(
    db: AsyncSession = Depends(get_db),
) -> SubscriptionRegistrar:
    return SubscriptionRegistrar(db)


def get_profile_aggregator(
    session_scope: SessionScope = Depends(get_session_scope),
) -> ProfileAggregator:
    return ProfileAggregator(session_scope)


def require_session(
    request: Request,
    codec: SessionTokenCodec = Depends(get_token_codec),
) -> TokenClaims:
    """Auth gate: claims from the session cookie or a 401."""
    token = request.cookies.get(get_settings().cookie_name)
    if not token:
        raise UnauthorizedError("not authenticated", "NOT_AUTHENTICATED")
    verdict = codec.verify(token)
    if isinstance(verdict, TokenClaims):
        return verdict
    code, message = _REJECTIONS[verdict.kind]
    logger.info(
        f"Rejected session token on {request.url.path}: {verdict.reason}",
        extra={"error_code": code, "path": request.url.path},
    )
    raise UnauthorizedError(message, code)
