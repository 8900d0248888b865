"""Profile Schemas — full and partial profile projections plus the search query.

Invariants:
    - Profile carries bio text and every related collection
    - PartialProfile is the search/sitemap projection: no bio text, no collections
    - ProfileSearchQuery requires countryCode (2 chars) and profession once any
      filter is supplied; the route only validates it when the query string is non-empty
    - Timestamps are Unix seconds

Design Decisions:
    - Response models double as domain entities: the mapping functions in
      core/profile_mapping.py validate rows into them at the query boundary
"""

from pydantic import Field

from directory_api.core.domain_types import ProfileFilters, Sex
from directory_api.schemas.base import CamelModel


class Portrait(CamelModel):
    account_id: int
    filename: str
    width: int | None = None
    height: int | None = None
    mime_type: str | None = None
    modified: int | None = None


class Picture(CamelModel):
    id: int
    heading: str | None = None
    description: str | None = None
    priority: int = 0
    width: int | None = None
    height: int | None = None


class Testimonial(CamelModel):
    quote: str
    name: str | None = None
    rating: int | None = None


class PartialProfile(CamelModel):
    """Summary projection used by search results and the sitemap."""
    id: int
    sex: Sex | None = None
    first_name: str | None = None
    last_name: str | None = None
    company: str | None = None
    email_address: str | None = None
    website: str | None = None
    slogan: str | None = None
    city: str | None = None
    province_code: str | None = None
    country_code: str | None = None
    phone_number: str | None = None
    timestamp: int | None = None
    portrait: Portrait | None = None


class Profile(PartialProfile):
    intro: str | None = None
    additional: str | None = None
    services: str | None = None
    noindex: bool = False
    facebook: str | None = None
    twitter: str | None = None
    pinterest: str | None = None
    instagram: str | None = None
    linkedin: str | None = None
    style_name: str | None = None
    dark: bool = False
    background_name: str | None = None
    background_url: str | None = None
    professions: list[str] = Field(default_factory=list)
    certifications: list[str] = Field(default_factory=list)
    images: list[Picture] = Field(default_factory=list)
    testimonials: list[Testimonial] = Field(default_factory=list)


class ProfileSearchQuery(CamelModel):
    """Public search filters from the query string."""
    first_name: str = ""
    last_name: str = ""
    country_code: str = Field(min_length=2, max_length=2)
    province_code: str = ""
    area: str = ""
    profession: str = Field(min_length=1)

    def to_filters(self) -> ProfileFilters:
        return ProfileFilters(
            first_name=self.first_name,
            last_name=self.last_name,
            country_code=self.country_code,
            province_code=self.province_code or None,
            area=self.area,
            profession=self.profession,
        )
