"""Profile Routes — public profile search and single-profile lookup.

Invariants:
    - GET /profiles with an empty query string lists crawlable profiles only
    - Any query parameter switches to filtered search (noindex profiles included),
      which requires countryCode and profession
    - GET /profiles/{id} is 404 for non-integer ids, ids outside the INTEGER
      column range, and hidden profiles
"""

from fastapi import APIRouter, Depends, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from directory_api.api.dependencies import get_profile_aggregator
from directory_api.core.errors import ResourceNotFoundError
from directory_api.schemas.profile import PartialProfile, Profile, ProfileSearchQuery
from directory_api.services.profile_aggregator import ProfileAggregator

router = APIRouter(prefix="/profiles", tags=["profiles"])

# accounts.id is a 32-bit signed INTEGER column
MIN_PROFILE_ID, MAX_PROFILE_ID = -(2**31), 2**31 - 1


@router.get("", response_model=list[PartialProfile])
async def list_profiles(
    request: Request,
    aggregator: ProfileAggregator = Depends(get_profile_aggregator),
):
    if not request.query_params:
        return await aggregator.search_profiles()
    try:
        query = ProfileSearchQuery.model_validate(dict(request.query_params))
    except ValidationError as e:
        raise RequestValidationError(
            [{**err, "loc": ("query", *err["loc"])} for err in e.errors()],
        )
    return await aggregator.search_profiles(query.to_filters(), only_crawlable=False)


@router.get("/{profile_id}", response_model=Profile)
async def get_profile(
    profile_id: str,
    aggregator: ProfileAggregator = Depends(get_profile_aggregator),
):
    try:
        account_id = int(profile_id)
    except ValueError:
        raise ResourceNotFoundError("Invalid profile")
    if not MIN_PROFILE_ID <= account_id <= MAX_PROFILE_ID:
        raise ResourceNotFoundError("Invalid profile")
    profile = await aggregator.fetch_profile(account_id)
    if profile is None:
        raise ResourceNotFoundError("Profile not found")
    return profile
