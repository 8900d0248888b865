"""Subscription Routes — register a Web Push subscription for the signed-in account."""

from fastapi import APIRouter, Depends, Header

from directory_api.api.dependencies import get_subscription_registrar, require_session
from directory_api.core.session_token import TokenClaims
from directory_api.schemas.subscription import PushSubscriptionIn, SubscriptionCreated
from directory_api.services.subscription_registrar import SubscriptionRegistrar

router = APIRouter(tags=["subscriptions"])


@router.post("/subscriptions", response_model=SubscriptionCreated)
async def add_subscription(
    body: PushSubscriptionIn,
    claims: TokenClaims = Depends(require_session),
    user_agent: str | None = Header(None),
    registrar: SubscriptionRegistrar = Depends(get_subscription_registrar),
):
    """Idempotent by endpoint: resubmitting returns the stored id."""
    subscription_id = await registrar.register_subscription(
        claims.account_id, body, user_agent or None,
    )
    return SubscriptionCreated(success=True, subscription_id=subscription_id)
