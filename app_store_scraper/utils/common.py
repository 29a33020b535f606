"""Small helpers shared by the crawlers and extractors."""

import re
from typing import Any, Iterable, Mapping, Optional

from ..constants import MARKETS
from ..errors import MissingFieldError

US_STORE_ID = MARKETS["us"]


def store_id(country: str) -> int:
    """Storefront id for a country code; unknown codes fall back to the US store."""
    return MARKETS.get((country or "").lower(), US_STORE_ID)


def ensure_array(value: Any) -> list:
    """
    Coerce a value into a list.

    The iTunes XML-to-JSON feeds collapse a single child element into a bare
    object, so every repeated element must go through this before iteration.
    None becomes an empty list and an existing list is returned unchanged.
    """
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def validate_required_field(options: Mapping[str, Any], fields: Iterable[str], error_message: str) -> None:
    """Raise MissingFieldError unless at least one of ``fields`` is set in ``options``."""
    if not any(options.get(field) is not None for field in fields):
        raise MissingFieldError(error_message)


def parse_int(text: Optional[str], default: int = 0) -> int:
    """Parse the leading integer of a string, ignoring leading whitespace."""
    if not text:
        return default
    match = re.match(r"\s*([+-]?\d+)", text)
    return int(match.group(1)) if match else default


def digits_to_int(text: Optional[str]) -> int:
    """Strip every non-digit character and parse what is left, 0 if nothing."""
    digits = re.sub(r"\D", "", text or "")
    return int(digits) if digits else 0


def enum_value(value: Any) -> Any:
    """Raw value of an Enum member, or the value itself."""
    return getattr(value, "value", value)
