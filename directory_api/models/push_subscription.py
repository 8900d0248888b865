"""Push Subscription ORM — Web Push endpoints and the user agents that registered them.

Invariants:
    - endpoint is unique: one stored row per push service URL
    - user_agent strings are deduplicated exactly (case-sensitive unique)
    - existing subscription rows are never updated by registration

Design Decisions:
    - Unique constraint on endpoint: concurrent first submissions resolve to one row
      (the registrar re-reads after a violation)
"""

from datetime import datetime, timezone

from sqlalchemy import BigInteger, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from directory_api.db.base import Base


class UserAgent(Base):
    __tablename__ = "user_agents"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_agent: Mapped[str] = mapped_column(Text, nullable=False, unique=True)


class PushSubscription(Base):
    """Browser push subscription owned by an account."""
    __tablename__ = "push_subscriptions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False,
        index=True,
    )
    endpoint: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    expiration_time: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    p256dh: Mapped[str] = mapped_column(String(255), nullable=False)
    auth: Mapped[str] = mapped_column(String(255), nullable=False)
    user_agent_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("user_agents.id"), nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
