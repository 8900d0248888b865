"""Profile ORM — public-facing 1:1 extension of an Account.

Invariants:
    - account_id is both primary key and FK (exactly one profile per account)
    - active = false hides the profile; noindex = true only hides it from crawlers
    - timestamp tracks the last modification (sitemap lastmod)

Design Decisions:
    - Bio split into intro/additional/services: search requires at least one non-empty
"""

from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from directory_api.db.base import Base


class Profile(Base):
    """Profile entity — the published directory listing."""
    __tablename__ = "profiles"

    account_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("accounts.id", ondelete="CASCADE"), primary_key=True,
    )
    company: Mapped[str | None] = mapped_column(String(100), nullable=True)
    email_address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    website: Mapped[str | None] = mapped_column(String(255), nullable=True)
    intro: Mapped[str | None] = mapped_column(Text, nullable=True)
    additional: Mapped[str | None] = mapped_column(Text, nullable=True)
    slogan: Mapped[str | None] = mapped_column(String(255), nullable=True)
    services: Mapped[str | None] = mapped_column(Text, nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    country_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("countries.id"), nullable=True,
    )
    province_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("provinces.id"), nullable=True,
    )
    phone_number: Mapped[str | None] = mapped_column(String(30), nullable=True)
    noindex: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    facebook: Mapped[str | None] = mapped_column(String(255), nullable=True)
    twitter: Mapped[str | None] = mapped_column(String(255), nullable=True)
    pinterest: Mapped[str | None] = mapped_column(String(255), nullable=True)
    instagram: Mapped[str | None] = mapped_column(String(255), nullable=True)
    linkedin: Mapped[str | None] = mapped_column(String(255), nullable=True)
    style_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("styles.id"), nullable=True,
    )
    background_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("backgrounds.id"), nullable=True,
    )
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    account: Mapped["Account"] = relationship("Account", back_populates="profile")
