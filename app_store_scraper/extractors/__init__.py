"""Upstream payload schemas and the normalizers that map them to records."""

from .app_store_schema import ITunesApp, ReviewEntry, validate_payload
from .normalize import (
    clean_app,
    extract_similar_ids,
    extract_suggestions,
    extract_token,
    map_privacy_entry,
    map_review_entry,
    map_version_entry,
    parse_histogram,
)
from .plist import xml_to_dict

__all__ = [
    "ITunesApp",
    "ReviewEntry",
    "validate_payload",
    "clean_app",
    "extract_similar_ids",
    "extract_suggestions",
    "extract_token",
    "map_privacy_entry",
    "map_review_entry",
    "map_version_entry",
    "parse_histogram",
    "xml_to_dict",
]
