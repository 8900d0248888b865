"""Profile Aggregator — assembles full profiles and runs the filtered profile search.

Invariants:
    - Visibility is a query-time filter: arrears = 0 AND active, for both operations
    - fetch_profile returns None when the base query finds no visible row
    - Certifications, pictures and testimonials are fetched concurrently, each on its
      own session scope, only after the base row exists
    - search_profiles requires a non-empty bio and, unless told otherwise, noindex = false
    - Every optional filter narrows the result (AND); absent filters add nothing

Design Decisions:
    - Profession and service-area filters are EXISTS sub-queries: the listing has one
      entry per profile and can be ordered by random() on any backend
    - LIKE wildcards in user input are escaped; prefix filters stay left-anchored
    - One session scope per concurrent query: an AsyncSession cannot run two
      statements at once
"""

import asyncio
import logging
from collections.abc import Sequence

from sqlalchemy import Select, and_, exists, func, or_, select
from sqlalchemy.engine import RowMapping

from directory_api.core.domain_types import ProfileFilters
from directory_api.core.profile_mapping import (
    partial_profile_from_row, profile_from_rows,
)
from directory_api.infrastructure.database import SessionScope
from directory_api.models.account import Account
from directory_api.models.enrollment import Course, Student
from directory_api.models.lookup import Background, Country, Province, Style
from directory_api.models.profile import Profile as ProfileRow
from directory_api.models.profile_content import (
    Picture, Portrait, ProfileProfession, ServiceArea, Testimonial,
)
from directory_api.schemas.profile import PartialProfile, Profile

logger = logging.getLogger(__name__)

LIKE_ESCAPE = "\\"


def escape_like(value: str) -> str:
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def _visible():
    return and_(Account.arrears == 0, ProfileRow.active.is_(True))


def _has_bio():
    return or_(
        func.length(func.coalesce(ProfileRow.intro, "")) > 0,
        func.length(func.coalesce(ProfileRow.additional, "")) > 0,
        func.length(func.coalesce(ProfileRow.services, "")) > 0,
    )


def _summary_columns() -> list:
    return [
        Account.id.label("id"),
        Account.sex.label("sex"),
        Account.first_name.label("first_name"),
        Account.last_name.label("last_name"),
        ProfileRow.company.label("company"),
        ProfileRow.email_address.label("email_address"),
        ProfileRow.website.label("website"),
        ProfileRow.slogan.label("slogan"),
        ProfileRow.city.label("city"),
        Province.code.label("province_code"),
        Country.code.label("country_code"),
        ProfileRow.phone_number.label("phone_number"),
        ProfileRow.timestamp.label("timestamp"),
        Portrait.filename.label("portrait_filename"),
        Portrait.width.label("portrait_width"),
        Portrait.height.label("portrait_height"),
        Portrait.mime_type.label("portrait_mime_type"),
        Portrait.modified.label("portrait_modified"),
    ]


def _summary_joins(query: Select) -> Select:
    return (
        query.select_from(Account)
        .join(ProfileRow, ProfileRow.account_id == Account.id)
        .outerjoin(Country, Country.id == ProfileRow.country_id)
        .outerjoin(Province, Province.id == ProfileRow.province_id)
        .outerjoin(Portrait, Portrait.account_id == Account.id)
    )


def build_profile_query(account_id: int) -> Select:
    """Base row query for one profile: one row per profession."""
    query = select(
        *_summary_columns(),
        ProfileRow.intro.label("intro"),
        ProfileRow.additional.label("additional"),
        ProfileRow.services.label("services"),
        ProfileRow.noindex.label("noindex"),
        ProfileRow.facebook.label("facebook"),
        ProfileRow.twitter.label("twitter"),
        ProfileRow.pinterest.label("pinterest"),
        ProfileRow.instagram.label("instagram"),
        ProfileRow.linkedin.label("linkedin"),
        Style.name.label("style_name"),
        Style.dark.label("dark"),
        Background.name.label("background_name"),
        Background.url.label("background_url"),
        ProfileProfession.profession_name.label("profession_name"),
    )
    return (
        _summary_joins(query)
        .outerjoin(Style, Style.id == ProfileRow.style_id)
        .outerjoin(Background, Background.id == ProfileRow.background_id)
        .outerjoin(ProfileProfession, ProfileProfession.account_id == Account.id)
        .where(_visible())
        .where(Account.id == account_id)
        .order_by(ProfileProfession.profession_name)
    )


def build_search_query(filters: ProfileFilters, only_crawlable: bool = True) -> Select:
    query = (
        _summary_joins(select(*_summary_columns()))
        .where(_visible())
        .where(_has_bio())
    )
    if only_crawlable:
        query = query.where(ProfileRow.noindex.is_(False))
    if filters.first_name:
        query = query.where(Account.first_name.ilike(
            f"{escape_like(filters.first_name)}%", escape=LIKE_ESCAPE,
        ))
    if filters.last_name:
        query = query.where(Account.last_name.ilike(
            f"{escape_like(filters.last_name)}%", escape=LIKE_ESCAPE,
        ))
    if filters.country_code:
        query = query.where(Country.code == filters.country_code)
    if filters.province_code:
        query = query.where(Province.code == filters.province_code)
    if filters.area:
        pattern = f"%{escape_like(filters.area)}%"
        query = query.where(or_(
            ProfileRow.city.ilike(pattern, escape=LIKE_ESCAPE),
            exists().where(
                ServiceArea.account_id == Account.id,
                ServiceArea.name.ilike(pattern, escape=LIKE_ESCAPE),
            ),
        ))
    if filters.profession:
        query = query.where(exists().where(
            ProfileProfession.account_id == Account.id,
            ProfileProfession.profession_name == filters.profession,
        ))
    return query.order_by(func.random())


class ProfileAggregator:
    """Read-side profile composition over pooled session scopes."""

    def __init__(self, session_scope: SessionScope):
        self.session_scope = session_scope

    async def _fetch_all(self, query: Select) -> Sequence[RowMapping]:
        async with self.session_scope() as db:
            result = await db.execute(query)
            return result.mappings().all()

    async def _certifications(self, account_id: int) -> list[str | None]:
        """Course codes of enrollments with graduated = true, ordered by code."""
        async with self.session_scope() as db:
            result = await db.execute(
                select(Course.code)
                .select_from(Student)
                .join(Course, Course.id == Student.course_id)
                .where(Student.account_id == account_id)
                .where(Student.graduated.is_(True))
                .order_by(Course.code),
            )
            return list(result.scalars().all())

    async def _pictures(self, account_id: int) -> Sequence[RowMapping]:
        return await self._fetch_all(
            select(
                Picture.id, Picture.heading, Picture.description,
                Picture.priority, Picture.width, Picture.height,
            )
            .where(Picture.account_id == account_id)
            .order_by(Picture.priority, Picture.id),
        )

    async def _testimonials(self, account_id: int) -> Sequence[RowMapping]:
        return await self._fetch_all(
            select(Testimonial.quote, Testimonial.name, Testimonial.rating)
            .where(Testimonial.account_id == account_id)
            .order_by(Testimonial.id),
        )

    async def fetch_profile(self, account_id: int) -> Profile | None:
        rows = await self._fetch_all(build_profile_query(account_id))
        if not rows:
            return None
        certifications, pictures, testimonials = await asyncio.gather(
            self._certifications(account_id),
            self._pictures(account_id),
            self._testimonials(account_id),
        )
        return profile_from_rows(rows, certifications, pictures, testimonials)

    async def search_profiles(
        self, filters: ProfileFilters | None = None, only_crawlable: bool = True,
    ) -> list[PartialProfile]:
        rows = await self._fetch_all(
            build_search_query(filters or ProfileFilters(), only_crawlable),
        )
        logger.debug(f"Profile search returned {len(rows)} rows")
        return [partial_profile_from_row(row) for row in rows]
