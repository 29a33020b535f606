"""Pydantic records returned by the scraper."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# ============================================================================
# Base
# ============================================================================

class Record(BaseModel):
    """
    Immutable output record.

    Attributes are snake_case; ``model_dump(by_alias=True)`` produces the
    camelCase keys used by the JavaScript scrapers (``appId``, ``userName``).
    """
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


# Star value (1-5) to number of ratings
RatingHistogram = dict[int, int]


def empty_histogram() -> RatingHistogram:
    return {1: 0, 2: 0, 3: 0, 4: 0, 5: 0}


# ============================================================================
# Apps
# ============================================================================

class App(Record):
    """A single App Store application."""
    id: int = Field(default=0, description="Track ID")
    app_id: str = Field(default="", description="Bundle ID (e.g., 'com.example.app')")
    title: str = ""
    url: str = Field(default="", description="iTunes store URL")
    description: str = ""
    icon: str = Field(default="", description="Icon URL (512px when available)")
    genres: list[str] = Field(default_factory=list)
    genre_ids: list[str] = Field(default_factory=list)
    primary_genre: str = ""
    primary_genre_id: str = ""
    content_rating: str = Field(default="4+", description="Age rating, e.g. '12+'")
    languages: list[str] = Field(default_factory=list, description="ISO 639-1 language codes")
    size: str = Field(default="0", description="File size in bytes")
    required_os_version: str = ""
    released: str = ""
    updated: str = ""
    release_notes: str = ""
    version: str = ""
    price: float = 0
    currency: str = "USD"
    free: bool = True
    developer_id: int = 0
    developer: str = ""
    developer_url: str = ""
    developer_website: Optional[str] = None
    score: float = Field(default=0, description="Average rating across all versions")
    reviews: int = Field(default=0, description="Rating count across all versions")
    current_version_score: float = 0
    current_version_reviews: int = 0
    screenshots: list[str] = Field(default_factory=list)
    ipad_screenshots: list[str] = Field(default_factory=list)
    appletv_screenshots: list[str] = Field(default_factory=list)
    supported_devices: list[str] = Field(default_factory=list)
    histogram: Optional[RatingHistogram] = Field(default=None, description="Only set when ratings are requested")


# ============================================================================
# Reviews & Suggestions
# ============================================================================

class Review(Record):
    """A user review from the customer reviews feed."""
    id: str = ""
    user_name: str = ""
    user_url: str = ""
    version: str = Field(default="", description="App version reviewed")
    score: int = Field(default=0, description="Star rating (1-5)")
    title: str = ""
    text: str = ""
    updated: str = Field(default="", description="Submission timestamp as sent upstream")


class Suggestion(Record):
    """A search-term autocomplete suggestion."""
    term: str


# ============================================================================
# Version History
# ============================================================================

class VersionHistory(Record):
    """A single version history entry."""
    version_display: str = ""
    release_date: str = ""
    release_notes: Optional[str] = None


# ============================================================================
# Privacy
# ============================================================================

class PrivacyType(Record):
    """One data-collection category of an app's privacy label."""
    privacy_type: str = Field(default="", description="Identifier, e.g. 'DATA_LINKED_TO_YOU'")
    name: str = Field(default="", description="Human-readable name")
    description: str = ""
    data_categories: Optional[list[Any]] = None
    purposes: Optional[list[Any]] = None


class PrivacyDetails(Record):
    """Privacy disclosure for an app. Every field may be missing."""
    manage_privacy_choices_url: Optional[str] = None
    privacy_policy_url: Optional[str] = None
    privacy_policy_text: Optional[str] = None
    privacy_types: Optional[list[PrivacyType]] = None
