"""Subscription Registrar — stores Web Push subscriptions once per endpoint.

Invariants:
    - An already stored endpoint returns its id unchanged (no field is updated,
      whichever account or keys were submitted)
    - User agents are looked up by exact, case-sensitive string, created on miss
    - A unique violation on insert means another request stored the endpoint
      first; its id is returned

Design Decisions:
    - Read-then-insert with a unique constraint behind it: the common path is one
      SELECT, the race path costs a rollback and a second SELECT
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from directory_api.core.domain_types import SubscriptionId, UserAgentId
from directory_api.models.push_subscription import PushSubscription, UserAgent
from directory_api.schemas.subscription import PushSubscriptionIn

logger = logging.getLogger(__name__)


class SubscriptionRegistrar:
    """Push subscription persistence bound to one request's session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _find_subscription(self, endpoint: str) -> SubscriptionId | None:
        result = await self.db.execute(
            select(PushSubscription.id)
            .where(PushSubscription.endpoint == endpoint)
            .limit(1),
        )
        found = result.scalar_one_or_none()
        return SubscriptionId(found) if found is not None else None

    async def _find_user_agent(self, user_agent: str) -> UserAgentId | None:
        result = await self.db.execute(
            select(UserAgent.id).where(UserAgent.user_agent == user_agent).limit(1),
        )
        found = result.scalar_one_or_none()
        return UserAgentId(found) if found is not None else None

    async def resolve_user_agent(self, user_agent: str) -> UserAgentId:
        """Id of the user agent row for this exact string, inserting it if needed."""
        existing = await self._find_user_agent(user_agent)
        if existing is not None:
            return existing
        row = UserAgent(user_agent=user_agent)
        self.db.add(row)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            existing = await self._find_user_agent(user_agent)
            if existing is None:
                raise
            return existing
        return UserAgentId(row.id)

    async def register_subscription(
        self,
        account_id: int,
        subscription: PushSubscriptionIn,
        user_agent: str | None = None,
    ) -> SubscriptionId:
        existing = await self._find_subscription(subscription.endpoint)
        if existing is not None:
            return existing

        user_agent_id = await self.resolve_user_agent(user_agent) if user_agent else None

        row = PushSubscription(
            account_id=account_id,
            endpoint=subscription.endpoint,
            expiration_time=subscription.expiration_time,
            p256dh=subscription.keys.p256dh,
            auth=subscription.keys.auth,
            user_agent_id=user_agent_id,
        )
        self.db.add(row)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            existing = await self._find_subscription(subscription.endpoint)
            if existing is None:
                raise
            logger.info(
                "Concurrent subscription for same endpoint, reusing stored row",
                extra={"subscription_id": existing},
            )
            return existing

        logger.info(
            "Push subscription stored",
            extra={"subscription_id": row.id, "account_id": account_id},
        )
        return SubscriptionId(row.id)
