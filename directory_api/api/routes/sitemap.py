"""Sitemap Route — XML sitemap of crawlable profiles for search engines."""

from fastapi import APIRouter, Depends, Response

from directory_api.api.dependencies import get_profile_aggregator
from directory_api.config import get_settings
from directory_api.core.sitemap import build_sitemap
from directory_api.services.profile_aggregator import ProfileAggregator

router = APIRouter(tags=["sitemap"])


@router.get("/sitemap")
async def sitemap(aggregator: ProfileAggregator = Depends(get_profile_aggregator)):
    """X-Length counts every crawlable profile, including ones left out of the XML."""
    profiles = await aggregator.search_profiles()
    return Response(
        content=build_sitemap(profiles, get_settings().site_url),
        media_type="text/xml",
        headers={"X-Length": str(len(profiles))},
    )
