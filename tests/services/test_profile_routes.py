"""Profile and Sitemap Routes — public read endpoints over HTTP.

Invariants:
    - GET /profiles without a query lists crawlable profiles
    - Any query parameter requires countryCode and profession (400 otherwise)
    - GET /profiles/{id} is 404 for unknown, hidden, non-integer and
      out-of-range ids
    - GET /sitemap is XML with X-Length = number of crawlable profiles
"""

from xml.etree import ElementTree

import pytest

from directory_api.core.sitemap import SITEMAP_NS

API = "/qccareerschool"


async def test_list_profiles_without_query(client, make_profile):
    listed = await make_profile()
    hidden = await make_profile(noindex=True)

    res = await client.get(f"{API}/profiles")
    assert res.status_code == 200
    ids = {p["id"] for p in res.json()}
    assert listed in ids
    assert hidden not in ids


async def test_filtered_listing_includes_noindex(client, make_profile):
    hidden = await make_profile(noindex=True)
    res = await client.get(
        f"{API}/profiles", params={"countryCode": "CA", "profession": "Writer"},
    )
    assert res.status_code == 200
    assert [p["id"] for p in res.json()] == [hidden]


async def test_listing_uses_camel_case(client, make_profile, lookups):
    await make_profile(province=lookups.ontario)
    profile = (await client.get(f"{API}/profiles")).json()[0]
    assert profile["firstName"] == "Jane"
    assert profile["provinceCode"] == "ON"
    assert profile["countryCode"] == "CA"
    assert "intro" not in profile


async def test_filtered_listing_requires_profession(client, lookups):
    res = await client.get(f"{API}/profiles", params={"countryCode": "CA"})
    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["message"].startswith("profession:")


async def test_filtered_listing_rejects_long_country_code(client, lookups):
    res = await client.get(
        f"{API}/profiles", params={"countryCode": "CAN", "profession": "Writer"},
    )
    assert res.status_code == 400
    assert res.json()["error"]["message"].startswith("countryCode:")


async def test_get_profile(client, make_profile):
    account_id = await make_profile(professions=("Writer", "Editor"))
    res = await client.get(f"{API}/profiles/{account_id}")
    assert res.status_code == 200
    body = res.json()
    assert body["id"] == account_id
    assert body["professions"] == ["Editor", "Writer"]
    assert body["intro"] == "Freelance writer."
    assert body["images"] == []


async def test_get_unknown_profile_is_404(client, lookups):
    res = await client.get(f"{API}/profiles/999999")
    assert res.status_code == 404
    assert res.json()["error"]["message"] == "Profile not found"


async def test_get_hidden_profile_is_404(client, make_profile):
    account_id = await make_profile(arrears="5")
    res = await client.get(f"{API}/profiles/{account_id}")
    assert res.status_code == 404


async def test_get_non_integer_profile_is_404(client):
    res = await client.get(f"{API}/profiles/abc")
    assert res.status_code == 404
    assert res.json()["error"]["message"] == "Invalid profile"


@pytest.mark.parametrize("profile_id", [2**31, 2**70, -(2**31) - 1])
async def test_get_out_of_range_profile_is_404(client, lookups, profile_id):
    res = await client.get(f"{API}/profiles/{profile_id}")
    assert res.status_code == 404
    assert res.json()["error"]["message"] == "Invalid profile"


async def test_sitemap(client, make_profile):
    first = await make_profile()
    second = await make_profile()
    await make_profile(noindex=True)

    res = await client.get(f"{API}/sitemap")
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/xml")
    assert res.headers["x-length"] == "2"

    root = ElementTree.fromstring(res.content)
    locs = {
        el.text for el in root.iter(f"{{{SITEMAP_NS}}}loc")
    }
    assert locs == {
        f"https://www.qccareerschool.com/profiles/{first}",
        f"https://www.qccareerschool.com/profiles/{second}",
    }


async def test_sitemap_empty_directory(client, lookups):
    res = await client.get(f"{API}/sitemap")
    assert res.status_code == 200
    assert res.headers["x-length"] == "0"
