"""Module-level shortcuts that run one operation on a default crawler.

Example:
    >>> import asyncio
    >>> import app_store_scraper as store
    >>> asyncio.run(store.app(id=553834731))
"""

from typing import Any

from .crawlers.app_store import AppStoreCrawler


async def app(**kwargs: Any):
    """See :meth:`AppStoreCrawler.app`."""
    return await AppStoreCrawler().app(**kwargs)


async def list(**kwargs: Any):
    """See :meth:`AppStoreCrawler.list`."""
    return await AppStoreCrawler().list(**kwargs)


async def search(**kwargs: Any):
    """See :meth:`AppStoreCrawler.search`."""
    return await AppStoreCrawler().search(**kwargs)


async def developer(**kwargs: Any):
    """See :meth:`AppStoreCrawler.developer`."""
    return await AppStoreCrawler().developer(**kwargs)


async def reviews(**kwargs: Any):
    """See :meth:`AppStoreCrawler.reviews`."""
    return await AppStoreCrawler().reviews(**kwargs)


async def ratings(**kwargs: Any):
    """See :meth:`AppStoreCrawler.ratings`."""
    return await AppStoreCrawler().ratings(**kwargs)


async def similar(**kwargs: Any):
    """See :meth:`AppStoreCrawler.similar`."""
    return await AppStoreCrawler().similar(**kwargs)


async def suggest(**kwargs: Any):
    """See :meth:`AppStoreCrawler.suggest`."""
    return await AppStoreCrawler().suggest(**kwargs)


async def privacy(**kwargs: Any):
    """See :meth:`AppStoreCrawler.privacy`."""
    return await AppStoreCrawler().privacy(**kwargs)


async def version_history(**kwargs: Any):
    """See :meth:`AppStoreCrawler.version_history`."""
    return await AppStoreCrawler().version_history(**kwargs)
