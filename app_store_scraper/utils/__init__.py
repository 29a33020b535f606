"""Utility modules for the scraper."""

from .common import ensure_array, store_id, validate_required_field
from .rate_limiter import RateLimiter

__all__ = ["RateLimiter", "ensure_array", "store_id", "validate_required_field"]
