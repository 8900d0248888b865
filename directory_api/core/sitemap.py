"""Sitemap — sitemaps.org urlset for crawlable profiles.

Invariants:
    - One <url> per profile that has both an id and a timestamp
    - lastmod is ISO-8601 in UTC; priority is always 0.5
"""

from collections.abc import Iterable
from datetime import datetime, timezone
from xml.etree import ElementTree

from directory_api.schemas.profile import PartialProfile

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"
PROFILE_PRIORITY = "0.5"


def build_sitemap(profiles: Iterable[PartialProfile], site_url: str) -> bytes:
    urlset = ElementTree.Element("urlset", xmlns=SITEMAP_NS)
    base = site_url.rstrip("/")
    for profile in profiles:
        if not profile.id or profile.timestamp is None:
            continue
        url = ElementTree.SubElement(urlset, "url")
        ElementTree.SubElement(url, "loc").text = f"{base}/profiles/{profile.id}"
        ElementTree.SubElement(url, "lastmod").text = datetime.fromtimestamp(
            profile.timestamp, tz=timezone.utc,
        ).isoformat()
        ElementTree.SubElement(url, "priority").text = PROFILE_PRIORITY
    return ElementTree.tostring(urlset, encoding="utf-8", xml_declaration=True)
