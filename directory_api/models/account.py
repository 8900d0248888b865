"""Account ORM — identity record owning credentials and directory visibility.

Invariants:
    - email_address unique, compared case-insensitively (lower() unique index)
    - verified flips false -> true once; never reset here
    - verification_code holds raw random bytes (base64 only on the wire)
    - arrears > 0 hides every profile owned by the account

Design Decisions:
    - password_hash nullable: directory accounts imported without a login exist
"""

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import (
    Boolean, DateTime, Index, Integer, LargeBinary, Numeric, String, func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from directory_api.db.base import Base


class Account(Base):
    """Account entity — login identity and profile owner."""
    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email_address: Mapped[str] = mapped_column(String(255), nullable=False)
    password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)
    verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    verification_code: Mapped[bytes | None] = mapped_column(
        LargeBinary(64), nullable=True,
    )
    arrears: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0"),
    )
    sex: Mapped[str | None] = mapped_column(String(1), nullable=True)
    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    profile: Mapped["Profile"] = relationship(
        "Profile", back_populates="account", uselist=False,
    )


Index(
    "uq_accounts_email_address_lower",
    func.lower(Account.email_address),
    unique=True,
)
