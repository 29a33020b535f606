"""Scrape application data from the iTunes / App Store."""

from .api import app, developer, list, privacy, ratings, reviews, search, similar, suggest, version_history
from .config import Settings, get_settings
from .constants import MARKETS, Category, Collection, Device, Sort
from .crawlers import AppStoreCrawler, BaseCrawler
from .errors import (
    AppStoreError,
    MissingFieldError,
    NotFoundError,
    RangeError,
    RequestError,
    TokenExtractionError,
    ValidationError,
)
from .models import (
    App,
    PrivacyDetails,
    PrivacyType,
    RatingHistogram,
    Review,
    Suggestion,
    VersionHistory,
)
from .utils import RateLimiter, ensure_array, store_id, validate_required_field

__all__ = [
    # Operations
    "app",
    "list",
    "search",
    "developer",
    "reviews",
    "ratings",
    "similar",
    "suggest",
    "privacy",
    "version_history",
    # Crawlers & config
    "AppStoreCrawler",
    "BaseCrawler",
    "RateLimiter",
    "Settings",
    "get_settings",
    # Constants
    "MARKETS",
    "Category",
    "Collection",
    "Device",
    "Sort",
    # Records
    "App",
    "PrivacyDetails",
    "PrivacyType",
    "RatingHistogram",
    "Review",
    "Suggestion",
    "VersionHistory",
    # Errors
    "AppStoreError",
    "MissingFieldError",
    "NotFoundError",
    "RangeError",
    "RequestError",
    "TokenExtractionError",
    "ValidationError",
    # Helpers
    "ensure_array",
    "store_id",
    "validate_required_field",
]
