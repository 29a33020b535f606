"""Base crawler class with common functionality."""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Iterable, Literal, Optional, Union
from urllib.parse import urlencode

import httpx

from ..config import Settings, get_settings
from ..errors import RequestError, ValidationError
from ..extractors.app_store_schema import LookupResponse, validate_payload
from ..extractors.normalize import clean_app
from ..models.schemas import App
from ..utils.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

LOOKUP_URL = "https://itunes.apple.com/lookup"

IdField = Literal["id", "bundleId", "artistId"]


class BaseCrawler(ABC):
    """
    Base class for the App Store crawlers.

    Provides common functionality:
    - A single GET helper with browser-like default headers
    - Optional rate limiting
    - JSON decoding and the multi-id lookup endpoint
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        rate_limiter: Optional[RateLimiter] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize base crawler.

        Args:
            settings: Scraper settings, read from the environment when omitted
            rate_limiter: Optional rate limiter instance, built from
                ``settings.throttle`` when omitted
            transport: Optional httpx transport (e.g. ``httpx.MockTransport``)
        """
        self.settings = settings or get_settings()
        if rate_limiter is None and self.settings.throttle:
            rate_limiter = RateLimiter(requests_per_second=self.settings.throttle)
        self.rate_limiter = rate_limiter
        self.transport = transport

        self.default_headers = {
            "User-Agent": self.settings.user_agent,
            "Accept": self.settings.accept,
            "Accept-Language": self.settings.accept_language,
        }

    async def do_request(
        self,
        url: str,
        headers: Optional[dict[str, str]] = None,
        extra_headers: Optional[dict[str, str]] = None,
    ) -> str:
        """
        Fetch a URL and return the response body as text.

        Args:
            url: URL to fetch
            headers: Headers an operation needs (store front, auth)
            extra_headers: Caller-supplied headers, applied last

        Returns:
            The response body

        Raises:
            RequestError: on a non-2xx status or a transport failure
        """
        merged = {**self.default_headers, **(headers or {}), **(extra_headers or {})}

        if self.rate_limiter:
            await self.rate_limiter.acquire(url)

        logger.debug(f"GET {url}")
        try:
            async with httpx.AsyncClient(
                transport=self.transport,
                timeout=self.settings.timeout,
                follow_redirects=True,
            ) as client:
                response = await client.get(url, headers=merged)
        except httpx.HTTPError as e:
            raise RequestError(f"Request to {url} failed: {e}", url=url) from e
        finally:
            if self.rate_limiter:
                self.rate_limiter.release()

        if not response.is_success:
            raise RequestError(
                f"Request failed with status {response.status_code}",
                status_code=response.status_code,
                url=url,
            )

        return response.text

    @staticmethod
    def parse_json(body: str, label: str) -> Any:
        """Decode a JSON body, reporting garbage as a ValidationError."""
        try:
            return json.loads(body)
        except ValueError as e:
            raise ValidationError(f"{label} response is not valid JSON: {e}") from e

    async def lookup(
        self,
        ids: Union[int, str, Iterable[Union[int, str]]],
        id_field: IdField = "id",
        country: Optional[str] = None,
        lang: Optional[str] = None,
        extra_headers: Optional[dict[str, str]] = None,
    ) -> list[App]:
        """
        Look up apps by track id, bundle id or artist id.

        Args:
            ids: One id or several; several are sent comma-joined in one request
            id_field: Which kind of id ``ids`` holds
            country: Storefront country code
            lang: Optional response language

        Returns:
            Cleaned software rows, in upstream order
        """
        if isinstance(ids, (int, str)):
            ids = [ids]

        # Artist ids go in the "id" parameter
        param_name = "id" if id_field == "artistId" else id_field
        params = {
            param_name: ",".join(str(i) for i in ids),
            "country": country or self.settings.country,
            "entity": "software",
        }
        lang = lang or self.settings.lang
        if lang:
            params["lang"] = lang

        body = await self.do_request(f"{LOOKUP_URL}?{urlencode(params)}", extra_headers=extra_headers)
        response = validate_payload(LookupResponse, self.parse_json(body, "iTunes lookup"), "iTunes lookup")

        apps = [clean_app(row) for row in response.results if self._is_software(row)]
        logger.info(f"Lookup by {id_field} returned {len(apps)} of {response.result_count} rows")
        return apps

    @staticmethod
    def _is_software(row: Any) -> bool:
        # Developer lookups also return the artist row itself
        if row.kind is None and row.wrapper_type is None:
            return True
        return row.kind == "software" or row.wrapper_type == "software"

    @abstractmethod
    async def crawl(self, **kwargs) -> Any:
        """
        Perform the crawl operation.

        Must be implemented by subclasses.
        """
        pass
