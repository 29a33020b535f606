"""Crawler modules for the App Store endpoints."""

from .base import BaseCrawler
from .app_store import AppStoreCrawler

__all__ = ["BaseCrawler", "AppStoreCrawler"]
