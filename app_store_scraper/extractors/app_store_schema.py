"""Shapes of the upstream iTunes / App Store payloads.

Every field is optional: the endpoints routinely omit fields, so required
values are enforced by the crawlers, not here. Unknown fields are kept on
the model (``model_extra``) and named fields are type-checked strictly.
"""

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from ..errors import ValidationError
from ..utils.common import ensure_array


class UpstreamModel(BaseModel):
    model_config = ConfigDict(
        extra="allow",
        strict=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Label(UpstreamModel):
    """``{"label": "..."}`` wrapper used by the RSS JSON feeds."""
    label: Optional[str] = None


# ============================================================================
# Lookup / Search
# ============================================================================

class ITunesApp(UpstreamModel):
    """A software row from the lookup or search endpoints."""
    wrapper_type: Optional[str] = None
    kind: Optional[str] = None
    track_id: Optional[int] = None
    bundle_id: Optional[str] = None
    track_name: Optional[str] = None
    track_view_url: Optional[str] = None
    description: Optional[str] = None
    artwork_url512: Optional[str] = Field(default=None, alias="artworkUrl512")
    artwork_url100: Optional[str] = Field(default=None, alias="artworkUrl100")
    genres: Optional[list[str]] = None
    genre_ids: Optional[list[str]] = None
    primary_genre_name: Optional[str] = None
    primary_genre_id: Optional[int] = None
    content_advisory_rating: Optional[str] = None
    language_codes_iso2a: Optional[list[str]] = Field(default=None, alias="languageCodesISO2A")
    file_size_bytes: Optional[str] = None
    minimum_os_version: Optional[str] = None
    release_date: Optional[str] = None
    current_version_release_date: Optional[str] = None
    release_notes: Optional[str] = None
    version: Optional[str] = None
    price: Optional[float] = None
    currency: Optional[str] = None
    artist_id: Optional[int] = None
    artist_name: Optional[str] = None
    artist_view_url: Optional[str] = None
    seller_url: Optional[str] = None
    average_user_rating: Optional[float] = None
    user_rating_count: Optional[int] = None
    average_user_rating_for_current_version: Optional[float] = None
    user_rating_count_for_current_version: Optional[int] = None
    screenshot_urls: Optional[list[str]] = None
    ipad_screenshot_urls: Optional[list[str]] = None
    appletv_screenshot_urls: Optional[list[str]] = None
    supported_devices: Optional[list[str]] = None


class LookupResponse(UpstreamModel):
    result_count: int
    results: list[ITunesApp]


class SearchBubble(UpstreamModel):
    results: Optional[list[ITunesApp]] = None


class SearchResponse(UpstreamModel):
    bubbles: Optional[list[SearchBubble]] = None


# ============================================================================
# RSS feeds
# ============================================================================

class RssEntryAttributes(UpstreamModel):
    im_id: Optional[str] = Field(default=None, alias="im:id")


class RssEntryId(UpstreamModel):
    attributes: Optional[RssEntryAttributes] = None


class RssEntry(UpstreamModel):
    id: Optional[RssEntryId] = None


class RssFeedBody(UpstreamModel):
    entry: Optional[list[RssEntry]] = None

    @field_validator("entry", mode="before")
    @classmethod
    def _coerce_entry(cls, value: Any) -> Any:
        return None if value is None else ensure_array(value)


class RssFeed(UpstreamModel):
    feed: Optional[RssFeedBody] = None


class ReviewAuthor(UpstreamModel):
    uri: Optional[Label] = None
    name: Optional[Label] = None


class ReviewEntry(UpstreamModel):
    author: Optional[ReviewAuthor] = None
    im_version: Optional[Label] = Field(default=None, alias="im:version")
    im_rating: Optional[Label] = Field(default=None, alias="im:rating")
    title: Optional[Label] = None
    content: Optional[Label] = None
    id: Optional[Label] = None
    updated: Optional[Label] = None


class ReviewsFeedBody(UpstreamModel):
    # A single review arrives as a bare object rather than a one-element list
    entry: Optional[Union[list[ReviewEntry], ReviewEntry]] = None


class ReviewsFeed(UpstreamModel):
    feed: Optional[ReviewsFeedBody] = None


# ============================================================================
# Search hints (plist XML)
# ============================================================================

class SuggestDict(UpstreamModel):
    strings: Optional[Union[str, list[str]]] = Field(default=None, alias="string")


class SuggestArray(UpstreamModel):
    dicts: Optional[list[SuggestDict]] = Field(default=None, alias="dict")

    @field_validator("dicts", mode="before")
    @classmethod
    def _coerce_dicts(cls, value: Any) -> Any:
        # An empty <dict/> parses to "" and carries no term
        if value is None:
            return None
        return [hint for hint in ensure_array(value) if isinstance(hint, dict)]


class SuggestRoot(UpstreamModel):
    array: Optional[Union[str, SuggestArray]] = None


class SuggestPlist(UpstreamModel):
    body: Optional[SuggestRoot] = Field(default=None, alias="dict")


class SuggestResponse(UpstreamModel):
    plist: Optional[SuggestPlist] = None


# ============================================================================
# AMP API
# ============================================================================

class AmpPrivacyType(UpstreamModel):
    privacy_type: Optional[str] = None
    identifier: Optional[str] = None
    description: Optional[str] = None
    # Strings in older payloads, objects ({"dataCategory": ..., "dataTypes": [...]}) in current ones
    data_categories: Optional[list[Union[str, dict[str, Any]]]] = None
    purposes: Optional[list[Union[str, dict[str, Any]]]] = None


class AmpPrivacyDetails(UpstreamModel):
    manage_privacy_choices_url: Optional[str] = None
    privacy_policy_url: Optional[str] = None
    privacy_policy_text: Optional[str] = None
    privacy_types: Optional[list[AmpPrivacyType]] = None


class AmpPrivacyAttributes(UpstreamModel):
    privacy_details: Optional[AmpPrivacyDetails] = None


class AmpPrivacyResource(UpstreamModel):
    attributes: Optional[AmpPrivacyAttributes] = None


class AmpPrivacyResponse(UpstreamModel):
    data: Optional[list[AmpPrivacyResource]] = None


class AmpVersionEntry(UpstreamModel):
    version_display: Optional[str] = None
    release_date: Optional[str] = None
    release_notes: Optional[str] = None


class AmpIosAttributes(UpstreamModel):
    version_history: Optional[list[AmpVersionEntry]] = None


class AmpPlatformAttributes(UpstreamModel):
    ios: Optional[AmpIosAttributes] = None


class AmpVersionAttributes(UpstreamModel):
    platform_attributes: Optional[AmpPlatformAttributes] = None


class AmpVersionResource(UpstreamModel):
    attributes: Optional[AmpVersionAttributes] = None


class AmpVersionHistoryResponse(UpstreamModel):
    data: Optional[list[AmpVersionResource]] = None


# ============================================================================
# Similar apps
# ============================================================================

SIMILAR_APPS_SCHEMA = TypeAdapter(list[int])


# ============================================================================
# Validation
# ============================================================================

def _format_path(loc: tuple, data: Any, missing: bool) -> str:
    """
    Render a pydantic error location as a JSONPath into the upstream data.

    Location parts that do not index into ``data`` name union branches
    (``str``, ``SuggestArray``, ...) and are skipped. A missing key is only
    kept as the final part.
    """
    path = "$"
    node = data
    for index, part in enumerate(loc):
        if isinstance(part, int) and isinstance(node, list) and -len(node) <= part < len(node):
            path += f"[{part}]"
            node = node[part]
        elif isinstance(node, dict) and part in node:
            path += f".{part}"
            node = node[part]
        elif missing and index == len(loc) - 1:
            path += f".{part}"
    return path


def validate_payload(schema: Any, data: Any, label: str) -> Any:
    """
    Validate decoded upstream data against a schema model or TypeAdapter.

    Raises:
        ValidationError: naming the first offending path
    """
    try:
        if isinstance(schema, TypeAdapter):
            return schema.validate_python(data, strict=True)
        return schema.model_validate(data)
    except PydanticValidationError as e:
        error = e.errors()[0]
        path = _format_path(error["loc"], data, error["type"] == "missing")
        raise ValidationError(
            f"{label} response validation failed at {path}: {error['msg']}",
            path=path,
        ) from e
