"""App Store crawler for app metadata, charts, reviews, ratings and privacy labels."""

import logging
from typing import Dict, List, Optional, Union
from urllib.parse import quote

from ..constants import Collection, Sort
from ..errors import MissingFieldError, NotFoundError, RangeError, RequestError, TokenExtractionError
from ..extractors.app_store_schema import (
    AmpPrivacyResponse,
    AmpVersionHistoryResponse,
    ReviewsFeed,
    RssFeed,
    SearchResponse,
    SuggestResponse,
    validate_payload,
)
from ..extractors.normalize import (
    clean_app,
    extract_similar_ids,
    extract_suggestions,
    extract_token,
    map_privacy_details,
    map_review_entry,
    map_version_entry,
    parse_histogram,
)
from ..extractors.plist import xml_to_dict
from ..models.schemas import App, PrivacyDetails, RatingHistogram, Review, Suggestion, VersionHistory
from ..utils.common import ensure_array, enum_value, parse_int, store_id, validate_required_field
from .base import BaseCrawler

logger = logging.getLogger(__name__)

Headers = Optional[Dict[str, str]]

MAX_LIST_RESULTS = 200
MAX_REVIEW_PAGES = 10


class AppStoreCrawler(BaseCrawler):
    """
    Crawler for the unofficial iTunes / App Store endpoints:
    - App lookup, developer catalogs, top charts and search
    - Customer reviews feed and the legacy rating histogram page
    - Similar apps and search suggestions
    - Privacy labels and version history via the AMP API

    Every operation is a fresh, independent request sequence; results are
    never cached.

    Example:
        >>> crawler = AppStoreCrawler()
        >>> minecraft = await crawler.app(id=479516143, ratings=True)
        >>> reviews = await crawler.reviews(app_id="com.mojang.minecraftpe", page=2)
    """

    def _get_app_store_url(self, app_id: Union[int, str], country: str) -> str:
        return f"https://apps.apple.com/{country}/app/id{app_id}"

    def _get_amp_url(self, app_id: Union[int, str], country: str, query: str) -> str:
        return (
            f"https://amp-api-edge.apps.apple.com/v1/catalog/{country}/apps/{app_id}"
            f"?platform=web&{query}&l=en-US"
        )

    async def _resolve_id(
        self,
        id: Optional[int],
        app_id: Optional[str],
        country: str,
        headers: Headers,
    ) -> int:
        """Track id for the given options, looking the bundle id up when needed."""
        if app_id and not id:
            resolved = await self.app(app_id=app_id, country=country, headers=headers)
            id = resolved.id

        if not id:
            raise MissingFieldError("Could not resolve app id")
        return id

    # ========================================================================
    # Lookup based
    # ========================================================================

    async def app(
        self,
        id: Optional[int] = None,
        app_id: Optional[str] = None,
        country: Optional[str] = None,
        lang: Optional[str] = None,
        ratings: bool = False,
        headers: Headers = None,
    ) -> App:
        """
        Get the details of a single app.

        Args:
            id: Track id
            app_id: Bundle id, used when ``id`` is not given
            country: Storefront country code
            lang: Response language
            ratings: Attach the rating histogram (best effort)
            headers: Extra request headers

        Returns:
            The app

        Raises:
            MissingFieldError: if neither ``id`` nor ``app_id`` is given
            NotFoundError: if the lookup returns nothing
        """
        validate_required_field({"id": id, "appId": app_id}, ["id", "appId"], "Either id or appId is required")
        country = country or self.settings.country

        by_id = id is not None
        ident = id if by_id else app_id
        apps = await self.lookup(
            ident,
            "id" if by_id else "bundleId",
            country=country,
            lang=lang,
            extra_headers=headers,
        )
        if not apps:
            raise NotFoundError(f"App not found: {ident}")

        app = apps[0]

        if ratings:
            try:
                histogram = await self.ratings(id=app.id, country=country, headers=headers)
                app = app.model_copy(update={"histogram": histogram})
            except Exception as e:
                # The legacy ratings page is not served for every app
                logger.warning(f"Could not fetch ratings for {app.id}: {e}")

        return app

    async def developer(
        self,
        dev_id: Optional[int] = None,
        country: Optional[str] = None,
        lang: Optional[str] = None,
        headers: Headers = None,
    ) -> List[App]:
        """All apps published by a developer (artist id)."""
        if not dev_id:
            raise MissingFieldError("devId is required")

        return await self.lookup(dev_id, "artistId", country=country, lang=lang, extra_headers=headers)

    async def search(
        self,
        term: Optional[str] = None,
        num: int = 50,
        page: int = 1,
        country: Optional[str] = None,
        lang: str = "en-us",
        ids_only: bool = False,
        headers: Headers = None,
    ) -> Union[List[App], List[int]]:
        """
        Search the store.

        The endpoint returns one batch of results regardless of ``num`` and
        ``page``; those only choose the window sliced out of it, so a page
        past the end is an empty list.

        Args:
            term: Search term
            num: Results per page
            page: 1-based page number
            country: Storefront country code
            lang: Sent as Accept-Language
            ids_only: Return track ids instead of apps

        Returns:
            Apps, or track ids when ``ids_only`` is set
        """
        if not term:
            raise MissingFieldError("term is required")

        store = store_id(country or self.settings.country)
        url = (
            "https://search.itunes.apple.com/WebObjects/MZStore.woa/wa/search"
            f"?clientApplication=Software&media=software&term={quote(term, safe='')}"
        )

        body = await self.do_request(
            url,
            headers={"X-Apple-Store-Front": f"{store},24 t:native", "Accept-Language": lang or "en-us"},
            extra_headers=headers,
        )
        response = validate_payload(SearchResponse, self.parse_json(body, "Search"), "Search")

        bubble = response.bubbles[0] if response.bubbles else None
        results = (bubble.results if bubble else None) or []

        start = (page - 1) * num
        window = results[start:start + num]
        logger.info(f"Search '{term}' returned {len(results)} results, page {page} has {len(window)}")

        if ids_only:
            return [result.track_id for result in window if result.track_id is not None]

        return [clean_app(result) for result in window if result.track_id]

    # ========================================================================
    # Reviews & Ratings
    # ========================================================================

    async def reviews(
        self,
        id: Optional[int] = None,
        app_id: Optional[str] = None,
        page: int = 1,
        sort: Union[Sort, str] = Sort.RECENT,
        country: Optional[str] = None,
        headers: Headers = None,
    ) -> List[Review]:
        """
        Get one page of customer reviews.

        Args:
            id: Track id
            app_id: Bundle id, resolved to a track id first
            page: 1-10, the feed serves no more
            sort: ``Sort.RECENT`` or ``Sort.HELPFUL``
            country: Storefront country code

        Raises:
            MissingFieldError: if neither ``id`` nor ``app_id`` is given
            RangeError: if ``page`` is outside 1-10
        """
        validate_required_field({"id": id, "appId": app_id}, ["id", "appId"], "Either id or appId is required")

        if page < 1 or page > MAX_REVIEW_PAGES:
            raise RangeError(f"Page must be between 1 and {MAX_REVIEW_PAGES}")

        country = country or self.settings.country
        id = await self._resolve_id(id, app_id, country, headers)

        url = (
            f"https://itunes.apple.com/{country}/rss/customerreviews"
            f"/page={page}/id={id}/sortby={enum_value(sort)}/json"
        )
        body = await self.do_request(url, extra_headers=headers)
        feed = validate_payload(ReviewsFeed, self.parse_json(body, "Reviews"), "Reviews")

        entries = ensure_array(feed.feed.entry if feed.feed else None)

        # The first entry describes the app itself
        reviews = [map_review_entry(entry) for entry in entries[1:]]
        logger.info(f"Fetched {len(reviews)} reviews for {id} (page {page})")
        return reviews

    async def ratings(
        self,
        id: Optional[int] = None,
        country: Optional[str] = None,
        headers: Headers = None,
    ) -> RatingHistogram:
        """
        Get the 1-5 star rating histogram.

        Returns all zeros when the page carries no distribution.
        """
        if not id:
            raise MissingFieldError("id is required")

        store = store_id(country or self.settings.country)
        url = (
            "https://itunes.apple.com/WebObjects/MZStore.woa/wa/viewContentsUserReviews"
            f"?id={id}&pageNumber=0&sortOrdering=4&type=Purple+Software"
        )
        body = await self.do_request(url, headers={"X-Apple-Store-Front": f"{store},12"}, extra_headers=headers)
        return parse_histogram(body)

    # ========================================================================
    # Discovery
    # ========================================================================

    async def similar(
        self,
        id: Optional[int] = None,
        app_id: Optional[str] = None,
        country: Optional[str] = None,
        lang: Optional[str] = None,
        headers: Headers = None,
    ) -> List[App]:
        """
        Apps listed under "Customers Also Bought".

        The ids come from a JSON array embedded in the app page. A page that
        cannot be fetched or carries no such array gives an empty list.
        """
        validate_required_field({"id": id, "appId": app_id}, ["id", "appId"], "Either id or appId is required")

        country = country or self.settings.country
        id = await self._resolve_id(id, app_id, country, headers)

        try:
            body = await self.do_request(f"https://itunes.apple.com/us/app/app/id{id}", extra_headers=headers)
        except RequestError as e:
            logger.warning(f"Could not fetch app page for {id}: {e}")
            return []

        similar_ids = extract_similar_ids(body)
        if not similar_ids:
            return []

        return await self.lookup(similar_ids, "id", country=country, lang=lang, extra_headers=headers)

    async def suggest(
        self,
        term: Optional[str] = None,
        headers: Headers = None,
    ) -> List[Suggestion]:
        """Search term completions for ``term``."""
        if not term:
            raise MissingFieldError("term is required")

        url = (
            "https://search.itunes.apple.com/WebObjects/MZSearchHints.woa/wa/hints"
            f"?clientApplication=Software&term={quote(term, safe='')}"
        )
        body = await self.do_request(url, extra_headers=headers)
        response = validate_payload(SuggestResponse, xml_to_dict(body), "Suggest")
        return extract_suggestions(response)

    # ========================================================================
    # AMP API
    # ========================================================================

    async def _fetch_amp(self, id: int, country: str, query: str, headers: Headers) -> str:
        """Scrape a bearer token from the app page, then call the AMP catalog API."""
        page = await self.do_request(self._get_app_store_url(id, country), extra_headers=headers)

        token = extract_token(page)
        if not token:
            raise TokenExtractionError("Could not extract bearer token")

        return await self.do_request(
            self._get_amp_url(id, country, query),
            headers={"Origin": "https://apps.apple.com", "Authorization": f"Bearer {token}"},
            extra_headers=headers,
        )

    async def privacy(
        self,
        id: Optional[int] = None,
        country: Optional[str] = None,
        headers: Headers = None,
    ) -> PrivacyDetails:
        """
        Get the privacy label of an app.

        An app without a privacy disclosure gives an empty ``PrivacyDetails``.

        Raises:
            MissingFieldError: if ``id`` is not given
            TokenExtractionError: if the app page has no bearer token
        """
        if not id:
            raise MissingFieldError("id is required")

        country = country or self.settings.country
        body = await self._fetch_amp(id, country, "fields=privacyDetails", headers)
        response = validate_payload(AmpPrivacyResponse, self.parse_json(body, "Privacy"), "Privacy")

        resource = response.data[0] if response.data else None
        attributes = resource.attributes if resource else None
        return map_privacy_details(attributes.privacy_details if attributes else None)

    async def version_history(
        self,
        id: Optional[int] = None,
        country: Optional[str] = None,
        headers: Headers = None,
    ) -> List[VersionHistory]:
        """Release history of an app, newest first as sent upstream."""
        if not id:
            raise MissingFieldError("id is required")

        country = country or self.settings.country
        body = await self._fetch_amp(id, country, "extend=versionHistory", headers)
        response = validate_payload(
            AmpVersionHistoryResponse, self.parse_json(body, "Version History"), "Version History"
        )

        resource = response.data[0] if response.data else None
        attributes = resource.attributes if resource else None
        platform = attributes.platform_attributes if attributes else None
        ios = platform.ios if platform else None

        return [map_version_entry(entry) for entry in (ios.version_history if ios else None) or []]

    # ========================================================================
    # Charts
    # ========================================================================

    async def list(
        self,
        collection: Union[Collection, str] = Collection.TOP_FREE_IOS,
        category: Optional[Union[int, str]] = None,
        num: int = 50,
        country: Optional[str] = None,
        lang: Optional[str] = None,
        full_detail: bool = False,
        headers: Headers = None,
    ) -> List[App]:
        """
        Apps in an iTunes chart.

        Args:
            collection: Chart to read
            category: Optional genre id filter
            num: Number of apps, at most 200
            country: Storefront country code
            lang: Response language
            full_detail: Accepted for compatibility; apps are always looked
                up in full
        """
        country = country or self.settings.country
        limit = min(num, MAX_LIST_RESULTS)

        url = f"https://itunes.apple.com/{country}/rss/{enum_value(collection)}"
        if category:
            url += f"/genre={enum_value(category)}"
        url += f"/limit={limit}/json"

        body = await self.do_request(url, extra_headers=headers)
        feed = validate_payload(RssFeed, self.parse_json(body, "List"), "List")

        ids = []
        for entry in (feed.feed.entry if feed.feed else None) or []:
            attributes = entry.id.attributes if entry.id else None
            im_id = attributes.im_id if attributes else None
            if im_id and parse_int(im_id):
                ids.append(parse_int(im_id))

        if not ids:
            return []

        return await self.lookup(ids, "id", country=country, lang=lang, extra_headers=headers)

    async def crawl(self, **kwargs):
        """Generic crawl method - routes to a specific operation by ``type``."""
        crawl_type = kwargs.pop("type", "app")

        operations = {
            "app": self.app,
            "list": self.list,
            "search": self.search,
            "developer": self.developer,
            "reviews": self.reviews,
            "ratings": self.ratings,
            "similar": self.similar,
            "suggest": self.suggest,
            "privacy": self.privacy,
            "version_history": self.version_history,
        }
        if crawl_type not in operations:
            raise ValueError(f"Unknown crawl type: {crawl_type}")

        return await operations[crawl_type](**kwargs)
