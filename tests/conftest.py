"""Shared fixtures: an AppStoreCrawler wired to an in-memory httpx transport."""

import json
from typing import Any, Callable, Union

import httpx
import pytest

from app_store_scraper import AppStoreCrawler, Settings

Route = Union[Callable[[httpx.Request], httpx.Response], tuple]


def json_body(data: Any, status: int = 200) -> tuple:
    return (status, json.dumps(data))


class FakeStore:
    """
    Routes requests by URL prefix to canned responses and records them.

    A route is either ``(status, body)`` or a callable taking the request.
    The longest matching prefix wins; unmatched URLs get a 404.
    """

    def __init__(self):
        self.routes: dict[str, Route] = {}
        self.requests: list[httpx.Request] = []

    def add(self, prefix: str, route: Route) -> None:
        self.routes[prefix] = route

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)
        matches = [prefix for prefix in self.routes if url.startswith(prefix)]
        if not matches:
            return httpx.Response(404, text="not found")

        route = self.routes[max(matches, key=len)]
        if callable(route):
            return route(request)
        status, body = route
        return httpx.Response(status, text=body)

    def requested(self, prefix: str) -> list[httpx.Request]:
        return [request for request in self.requests if str(request.url).startswith(prefix)]


@pytest.fixture
def settings():
    return Settings(_env_file=None, country="us", lang=None, throttle=None)


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def crawler(store, settings):
    return AppStoreCrawler(settings=settings, transport=httpx.MockTransport(store.handler))


@pytest.fixture
def lookup_row():
    """A trimmed real lookup row (Minecraft)."""
    return {
        "wrapperType": "software",
        "kind": "software",
        "trackId": 479516143,
        "bundleId": "com.mojang.minecraftpe",
        "trackName": "Minecraft: Dream it, Build it!",
        "trackViewUrl": "https://apps.apple.com/us/app/minecraft-dream-it-build-it/id479516143",
        "description": "Explore infinite worlds.",
        "artworkUrl100": "https://is1-ssl.mzstatic.com/100x100bb.jpg",
        "artworkUrl512": "https://is1-ssl.mzstatic.com/512x512bb.jpg",
        "genres": ["Games", "Adventure", "Simulation"],
        "genreIds": ["6014", "7002", "7015"],
        "primaryGenreName": "Games",
        "primaryGenreId": 6014,
        "contentAdvisoryRating": "9+",
        "languageCodesISO2A": ["EN", "FR"],
        "fileSizeBytes": "826843136",
        "minimumOsVersion": "14.0",
        "releaseDate": "2011-11-17T08:00:00Z",
        "currentVersionReleaseDate": "2024-06-11T16:08:45Z",
        "releaseNotes": "Bug fixes.",
        "version": "1.21.2",
        "price": 6.99,
        "currency": "USD",
        "artistId": 479516146,
        "artistName": "Mojang",
        "artistViewUrl": "https://apps.apple.com/us/developer/mojang/id479516146",
        "sellerUrl": "https://www.minecraft.net",
        "averageUserRating": 4.55,
        "userRatingCount": 639000,
        "averageUserRatingForCurrentVersion": 4.55,
        "userRatingCountForCurrentVersion": 639000,
        "screenshotUrls": ["https://example.com/phone1.jpg"],
        "ipadScreenshotUrls": ["https://example.com/ipad1.jpg"],
        "appletvScreenshotUrls": [],
        "supportedDevices": ["iPhone15-iPhone15"],
    }
