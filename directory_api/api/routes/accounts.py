"""Account Routes — register, verify, login and cookie login.

Invariants:
    - register and login set the session cookie and return {id, emailAddress}
    - A taken email is 409; bad credentials and bad verification codes are 400
    - The verification email is sent after the response; its failure is only logged
    - cookieLogin answers from the token alone (no database access)

Design Decisions:
    - Cookie attributes fixed here (HttpOnly, Secure, path-scoped, far-future expiry)
      so register and login cannot drift apart
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Response
from fastapi.responses import RedirectResponse

from directory_api.api.dependencies import (
    get_credential_store, get_mailer, get_token_codec, require_session,
)
from directory_api.config import get_settings
from directory_api.core.errors import ConflictError, InvalidRequestError
from directory_api.core.session_token import SessionTokenCodec, TokenClaims
from directory_api.infrastructure.mailer import (
    Mailer, build_verification_url, send_verification_email_safely,
)
from directory_api.schemas.account import (
    AccountResponse, LoginRequest, RegisterRequest,
)
from directory_api.services.credential_store import CredentialStore

logger = logging.getLogger(__name__)
router = APIRouter(tags=["accounts"])

# 2^31 - 1 seconds: the latest expiry every browser accepts
COOKIE_EXPIRES = datetime.fromtimestamp(2_147_483_647, tz=timezone.utc)


def set_session_cookie(response: Response, token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        settings.cookie_name,
        token,
        path=f"{settings.api_prefix}/",
        expires=COOKIE_EXPIRES,
        httponly=True,
        secure=True,
    )


@router.post("/register", response_model=AccountResponse)
async def register(
    body: RegisterRequest,
    response: Response,
    background_tasks: BackgroundTasks,
    store: CredentialStore = Depends(get_credential_store),
    codec: SessionTokenCodec = Depends(get_token_codec),
    mailer: Mailer = Depends(get_mailer),
):
    """Create an account, start the session and email a verification link."""
    registered = await store.register_account(body.email_address, body.password)
    if registered is None:
        raise ConflictError(
            "Email address is already registered", "EMAIL_ALREADY_REGISTERED",
        )

    settings = get_settings()
    verification_url = build_verification_url(
        settings.public_api_url, settings.api_prefix,
        body.email_address, registered.verification_code,
    )
    background_tasks.add_task(
        send_verification_email_safely, mailer, body.email_address, verification_url,
    )

    set_session_cookie(response, codec.mint(registered.id, body.email_address))
    return AccountResponse(id=registered.id, email_address=body.email_address)


@router.get("/verify")
async def verify(
    email_address: str = Query(..., alias="emailAddress", min_length=1),
    code: str = Query(..., min_length=1),
    store: CredentialStore = Depends(get_credential_store),
):
    """Redeem an emailed verification code, then send the browser on."""
    if not await store.verify_account(email_address, code):
        raise InvalidRequestError("Invalid email address or code")
    return RedirectResponse(get_settings().verify_redirect_url, status_code=302)


@router.post("/login", response_model=AccountResponse)
async def login(
    body: LoginRequest,
    response: Response,
    store: CredentialStore = Depends(get_credential_store),
    codec: SessionTokenCodec = Depends(get_token_codec),
):
    account_id = await store.authenticate(body.email_address, body.password)
    if account_id is None:
        raise InvalidRequestError("Invalid username or password")
    set_session_cookie(response, codec.mint(account_id, body.email_address))
    return AccountResponse(id=account_id, email_address=body.email_address)


@router.post("/cookieLogin", response_model=AccountResponse)
async def cookie_login(claims: TokenClaims = Depends(require_session)):
    return AccountResponse(id=claims.account_id, email_address=claims.email_address)
