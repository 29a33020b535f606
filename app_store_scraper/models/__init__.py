"""Pydantic models for scraper results."""

from .schemas import (
    App,
    PrivacyDetails,
    PrivacyType,
    RatingHistogram,
    Review,
    Suggestion,
    VersionHistory,
    empty_histogram,
)

__all__ = [
    "App",
    "PrivacyDetails",
    "PrivacyType",
    "RatingHistogram",
    "Review",
    "Suggestion",
    "VersionHistory",
    "empty_histogram",
]
