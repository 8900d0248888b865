"""Profile Mapping — row dictionaries to Profile / PartialProfile entities.

Tests:
    - Datetimes become Unix seconds; naive values are read as UTC
    - Portrait only when the joined filename is present
    - Base rows fanned out per profession collapse into one profile
    - Collections are attached in the order they are given
"""

from datetime import datetime, timedelta, timezone

import pytest

from directory_api.core.domain_types import Sex
from directory_api.core.profile_mapping import (
    collect_professions,
    partial_profile_from_row,
    portrait_from_row,
    profile_from_rows,
    to_unix,
)

STAMP = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def _base_row(**overrides) -> dict:
    row = {
        "id": 7,
        "sex": "F",
        "first_name": "Jane",
        "last_name": "Doe",
        "company": "Doe Editing",
        "email_address": "jane@doe.example",
        "website": None,
        "slogan": "Words, fixed.",
        "city": "Toronto",
        "province_code": "ON",
        "country_code": "CA",
        "phone_number": None,
        "timestamp": STAMP,
        "portrait_filename": None,
        "intro": "Hello",
        "additional": None,
        "services": None,
        "noindex": 0,
        "style_name": "Midnight",
        "dark": 1,
        "background_name": None,
        "background_url": None,
        "profession_name": "Writer",
    }
    row.update(overrides)
    return row


def test_to_unix_reads_naive_as_utc():
    assert to_unix(STAMP) == int(STAMP.timestamp())
    assert to_unix(STAMP.replace(tzinfo=None)) == int(STAMP.timestamp())
    assert to_unix(None) is None


def test_to_unix_honours_offset():
    eastern = STAMP.astimezone(timezone(timedelta(hours=-5)))
    assert to_unix(eastern) == to_unix(STAMP)


def test_portrait_absent_without_filename():
    assert portrait_from_row(_base_row()) is None


def test_portrait_built_from_joined_columns():
    portrait = portrait_from_row(_base_row(
        portrait_filename="jane.jpg",
        portrait_width=400,
        portrait_height=600,
        portrait_mime_type="image/jpeg",
        portrait_modified=STAMP,
    ))
    assert portrait.account_id == 7
    assert portrait.filename == "jane.jpg"
    assert portrait.modified == to_unix(STAMP)


def test_partial_profile_has_summary_fields_only():
    partial = partial_profile_from_row(_base_row())
    assert partial.id == 7
    assert partial.sex is Sex.FEMALE
    assert partial.country_code == "CA"
    assert partial.timestamp == to_unix(STAMP)
    assert not hasattr(partial, "intro")


def test_collect_professions_drops_nulls_and_duplicates():
    rows = [
        {"profession_name": "Writer"},
        {"profession_name": None},
        {"profession_name": "Editor"},
        {"profession_name": "Writer"},
    ]
    assert collect_professions(rows) == ["Editor", "Writer"]


def test_profile_collapses_fanned_out_rows():
    rows = [
        _base_row(profession_name="Editor"),
        _base_row(profession_name="Writer"),
    ]
    profile = profile_from_rows(
        rows,
        certifications=["EP", None, "WR"],
        pictures=[{"id": 3, "heading": "Desk", "description": None,
                   "priority": 1, "width": 10, "height": 20}],
        testimonials=[{"quote": "Superb.", "name": "Sam", "rating": 5}],
    )
    assert profile.professions == ["Editor", "Writer"]
    assert profile.certifications == ["EP", "WR"]
    assert [p.id for p in profile.images] == [3]
    assert profile.testimonials[0].quote == "Superb."
    assert profile.noindex is False
    assert profile.dark is True
    assert profile.style_name == "Midnight"


def test_profile_without_professions_has_empty_list():
    profile = profile_from_rows(
        [_base_row(profession_name=None)], [], [], [],
    )
    assert profile.professions == []


def test_profile_requires_a_base_row():
    with pytest.raises(ValueError):
        profile_from_rows([], [], [], [])


def test_profile_serializes_camel_case():
    body = profile_from_rows([_base_row()], [], [], []).model_dump(by_alias=True)
    assert body["firstName"] == "Jane"
    assert body["provinceCode"] == "ON"
    assert body["styleName"] == "Midnight"
