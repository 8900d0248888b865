"""ORM Models — SQLAlchemy declarative models for all directory tables.

Invariants:
    - All models inherit from Base (db/base.py)
    - Account is the aggregate root; every other row is scoped by account_id

Design Decisions:
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from directory_api.models.account import Account  # noqa: F401
from directory_api.models.lookup import Background, Country, Province, Style  # noqa: F401
from directory_api.models.profile import Profile  # noqa: F401
from directory_api.models.profile_content import (  # noqa: F401
    Picture, Portrait, ProfileProfession, ServiceArea, Testimonial,
)
from directory_api.models.enrollment import Course, Student  # noqa: F401
from directory_api.models.push_subscription import PushSubscription, UserAgent  # noqa: F401
