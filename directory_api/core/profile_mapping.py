"""Profile Mapping — typed row-to-entity conversion for every profile query.

Invariants:
    - One mapping function per query shape; rows are never passed on untyped
    - Datetimes become Unix seconds; naive datetimes are read as UTC
    - A portrait exists only when the joined row has a filename
    - Profession lists drop NULLs (LEFT JOIN with no professions) and duplicates

Design Decisions:
    - Pure functions over RowMapping: no session, no IO, tested without a database
    - Pydantic model_validate at the end of each mapping: shape errors surface
      here instead of in the response serializer
"""

from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime, timezone
from typing import Any

from directory_api.schemas.profile import (
    PartialProfile, Picture, Portrait, Profile, Testimonial,
)

Row = Mapping[str, Any]


def to_unix(value: datetime | None) -> int | None:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp())


def portrait_from_row(row: Row) -> Portrait | None:
    filename = row.get("portrait_filename")
    if not filename:
        return None
    return Portrait(
        account_id=row["id"],
        filename=filename,
        width=row.get("portrait_width"),
        height=row.get("portrait_height"),
        mime_type=row.get("portrait_mime_type"),
        modified=to_unix(row.get("portrait_modified")),
    )


def _summary_fields(row: Row) -> dict[str, Any]:
    return {
        "id": row["id"],
        "sex": row.get("sex"),
        "first_name": row.get("first_name"),
        "last_name": row.get("last_name"),
        "company": row.get("company"),
        "email_address": row.get("email_address"),
        "website": row.get("website"),
        "slogan": row.get("slogan"),
        "city": row.get("city"),
        "province_code": row.get("province_code"),
        "country_code": row.get("country_code"),
        "phone_number": row.get("phone_number"),
        "timestamp": to_unix(row.get("timestamp")),
        "portrait": portrait_from_row(row),
    }


def partial_profile_from_row(row: Row) -> PartialProfile:
    return PartialProfile.model_validate(_summary_fields(row))


def picture_from_row(row: Row) -> Picture:
    return Picture.model_validate(dict(row))


def testimonial_from_row(row: Row) -> Testimonial:
    return Testimonial.model_validate(dict(row))


def collect_professions(rows: Iterable[Row]) -> list[str]:
    names = {row["profession_name"] for row in rows if row.get("profession_name")}
    return sorted(names)


def profile_from_rows(
    rows: Sequence[Row],
    certifications: Iterable[str | None],
    pictures: Iterable[Row],
    testimonials: Iterable[Row],
) -> Profile:
    """Merge the fanned-out base rows with the three collection results.

    `rows` is the base query output: one row per profession, identical in
    every other column. The first row supplies the scalar fields.
    """
    if not rows:
        raise ValueError("profile_from_rows needs at least one base row")
    base = rows[0]
    fields = _summary_fields(base)
    fields.update({
        "intro": base.get("intro"),
        "additional": base.get("additional"),
        "services": base.get("services"),
        "noindex": bool(base.get("noindex")),
        "facebook": base.get("facebook"),
        "twitter": base.get("twitter"),
        "pinterest": base.get("pinterest"),
        "instagram": base.get("instagram"),
        "linkedin": base.get("linkedin"),
        "style_name": base.get("style_name"),
        "dark": bool(base.get("dark")),
        "background_name": base.get("background_name"),
        "background_url": base.get("background_url"),
        "professions": collect_professions(rows),
        "certifications": [code for code in certifications if code],
        "images": [picture_from_row(p) for p in pictures],
        "testimonials": [testimonial_from_row(t) for t in testimonials],
    })
    return Profile.model_validate(fields)
