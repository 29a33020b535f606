"""Map validated upstream payloads onto the scraper's output records.

All functions here are pure: no I/O, every missing upstream field gets a
fixed default.
"""

import json
import logging
import re
from typing import Any, Optional

from bs4 import BeautifulSoup, Tag

from ..errors import ValidationError
from ..models.schemas import (
    App,
    PrivacyDetails,
    PrivacyType,
    RatingHistogram,
    Review,
    Suggestion,
    VersionHistory,
    empty_histogram,
)
from ..utils.common import digits_to_int, parse_int
from .app_store_schema import (
    SIMILAR_APPS_SCHEMA,
    AmpPrivacyDetails,
    AmpPrivacyType,
    AmpVersionEntry,
    ITunesApp,
    ReviewEntry,
    SuggestResponse,
    validate_payload,
)

logger = logging.getLogger(__name__)

# URL-encoded JSON fragment embedded in the apps.apple.com page: token":"<token>"}
TOKEN_PATTERN = re.compile(r"token%22%3A%22([^%]+)%22%7D")

SIMILAR_APPS_MARKER = '"customersAlsoBoughtApps":'

STAR_LABEL_PATTERN = re.compile(r"(\d+)\s*(?:stars?|★)", re.IGNORECASE)


def clean_app(app: ITunesApp) -> App:
    """Project a lookup/search row onto an App, defaulting every missing field."""
    price = app.price or 0
    return App(
        id=app.track_id or 0,
        app_id=app.bundle_id or "",
        title=app.track_name or "",
        url=app.track_view_url or "",
        description=app.description or "",
        icon=app.artwork_url512 or app.artwork_url100 or "",
        genres=app.genres or [],
        genre_ids=[str(genre_id) for genre_id in app.genre_ids or []],
        primary_genre=app.primary_genre_name or "",
        primary_genre_id=str(app.primary_genre_id or ""),
        content_rating=app.content_advisory_rating or "4+",
        languages=app.language_codes_iso2a or [],
        size=app.file_size_bytes or "0",
        required_os_version=app.minimum_os_version or "",
        released=app.release_date or "",
        updated=app.current_version_release_date or "",
        release_notes=app.release_notes or "",
        version=app.version or "",
        price=price,
        currency=app.currency or "USD",
        free=price == 0,
        developer_id=app.artist_id or 0,
        developer=app.artist_name or "",
        developer_url=app.artist_view_url or "",
        developer_website=app.seller_url,
        score=app.average_user_rating or 0,
        reviews=app.user_rating_count or 0,
        current_version_score=app.average_user_rating_for_current_version or 0,
        current_version_reviews=app.user_rating_count_for_current_version or 0,
        screenshots=app.screenshot_urls or [],
        ipad_screenshots=app.ipad_screenshot_urls or [],
        appletv_screenshots=app.appletv_screenshot_urls or [],
        supported_devices=app.supported_devices or [],
    )


def _label(value: Any) -> str:
    return (value.label if value is not None else None) or ""


def map_review_entry(entry: ReviewEntry) -> Review:
    author = entry.author
    return Review(
        id=_label(entry.id),
        user_name=_label(author.name if author else None),
        user_url=_label(author.uri if author else None),
        version=_label(entry.im_version),
        score=parse_int(_label(entry.im_rating) or "0"),
        title=_label(entry.title),
        text=_label(entry.content),
        updated=_label(entry.updated),
    )


def map_privacy_entry(entry: AmpPrivacyType) -> PrivacyType:
    return PrivacyType(
        privacy_type=entry.identifier or entry.privacy_type or "",
        name=entry.privacy_type or "",
        description=entry.description or "",
        data_categories=entry.data_categories,
        purposes=entry.purposes,
    )


def map_privacy_details(details: Optional[AmpPrivacyDetails]) -> PrivacyDetails:
    """An absent disclosure maps to an empty PrivacyDetails, not an error."""
    if details is None:
        return PrivacyDetails()

    privacy_types = None
    if details.privacy_types is not None:
        privacy_types = [map_privacy_entry(entry) for entry in details.privacy_types]

    return PrivacyDetails(
        manage_privacy_choices_url=details.manage_privacy_choices_url,
        privacy_policy_url=details.privacy_policy_url,
        privacy_policy_text=details.privacy_policy_text,
        privacy_types=privacy_types,
    )


def map_version_entry(entry: AmpVersionEntry) -> VersionHistory:
    return VersionHistory(
        version_display=entry.version_display or "",
        release_date=entry.release_date or "",
        release_notes=entry.release_notes,
    )


def extract_suggestions(response: SuggestResponse) -> list[Suggestion]:
    """
    Pull search terms out of the plist hints structure.

    Each hint is a ``<dict>`` whose first ``<string>`` is the term. Anything
    other than an array of dicts yields no suggestions.
    """
    root = response.plist.body if response.plist else None
    array = root.array if root else None
    if not array or isinstance(array, str) or not array.dicts:
        return []

    suggestions = []
    for hint in array.dicts:
        strings = hint.strings if isinstance(hint.strings, list) else [hint.strings]
        term = strings[0] if strings else None
        if term:
            suggestions.append(Suggestion(term=term))
    return suggestions


def extract_token(html: str) -> Optional[str]:
    """Bearer token for the AMP API, scraped from an apps.apple.com page."""
    match = TOKEN_PATTERN.search(html)
    return match.group(1) if match else None


def extract_similar_ids(html: str) -> list[int]:
    """
    Read the "customers also bought" id array embedded in an app page.

    Returns an empty list when the marker is missing or the array after it
    is not a JSON list of integers.
    """
    start = html.find(SIMILAR_APPS_MARKER)
    if start == -1:
        return []

    rest = html[start + len(SIMILAR_APPS_MARKER):].lstrip()
    try:
        ids, _ = json.JSONDecoder().raw_decode(rest)
        return validate_payload(SIMILAR_APPS_SCHEMA, ids, "Similar apps")
    except (ValueError, ValidationError) as e:
        logger.debug(f"Malformed similar apps marker: {e}")
        return []


def _rating_container(element: Tag) -> Optional[Tag]:
    if "rating" in (element.get("class") or []):
        return element
    return element.find_parent(class_="rating")


def _select_text(element: Optional[Tag], selector: str) -> str:
    if element is None:
        return ""
    return "".join(node.get_text() for node in element.select(selector)).strip()


def parse_histogram(html: str) -> RatingHistogram:
    """
    Scrape the 1-5 star distribution from the legacy user reviews page.

    Two layouts are tried in order, the second overwriting the first:
    ``.rating-count`` labels ("5 stars") with a ``.total`` in the enclosing
    ``.rating``, then ``.vote`` rows listed 5-star first. Nothing found is
    not an error: every star defaults to 0.
    """
    soup = BeautifulSoup(html, "lxml")
    histogram = empty_histogram()

    for element in soup.select(".rating-count"):
        match = STAR_LABEL_PATTERN.search(element.get_text().strip())
        if not match:
            continue
        stars = int(match.group(1))
        count = digits_to_int(_select_text(_rating_container(element), ".total"))
        if 1 <= stars <= 5:
            histogram[stars] = count

    for index, element in enumerate(soup.select(".vote")):
        stars = 5 - index
        if 1 <= stars <= 5:
            histogram[stars] = digits_to_int(_select_text(element, ".total"))

    return histogram
