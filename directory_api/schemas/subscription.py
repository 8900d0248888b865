"""Push Subscription Schemas — the browser PushSubscription.toJSON() shape."""

from pydantic import Field

from directory_api.schemas.base import CamelModel


class PushSubscriptionKeys(CamelModel):
    auth: str = Field(min_length=1)
    p256dh: str = Field(min_length=1)


class PushSubscriptionIn(CamelModel):
    endpoint: str = Field(min_length=1)
    # Key required, null allowed
    expiration_time: int | None = Field(..., gt=0)
    keys: PushSubscriptionKeys


class SubscriptionCreated(CamelModel):
    success: bool = True
    subscription_id: int
