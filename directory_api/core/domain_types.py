"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - AccountId, SubscriptionId, UserAgentId wrap ints, never bare int in services
    - ProfileFilters is immutable; empty strings mean "filter not applied"
    - All valid states encoded as Enums, no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from dataclasses import dataclass
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

AccountId = NewType("AccountId", int)
SubscriptionId = NewType("SubscriptionId", int)
UserAgentId = NewType("UserAgentId", int)


# ─── Enums ───────────────────────────────────────────────────────

class Sex(str, Enum):
    """Values stored in accounts.sex."""
    MALE = "M"
    FEMALE = "F"


class TokenErrorKind(str, Enum):
    """Why a session token was rejected; drives the 401 message."""
    INVALID = "invalid"
    INVALID_PAYLOAD = "invalid_payload"


# ─── Value Objects ───────────────────────────────────────────────

@dataclass(frozen=True)
class RegisteredAccount:
    """Result of a successful registration."""
    id: AccountId
    verification_code: str  # base64 of the stored bytes


@dataclass(frozen=True)
class ProfileFilters:
    """Optional search filters, AND-combined."""
    first_name: str = ""
    last_name: str = ""
    country_code: str = ""
    province_code: str | None = None
    area: str = ""
    profession: str = ""
