"""Setlist listing provider implementations."""

from src.providers.listing.setlistfm_provider import SetlistFmProvider

__all__ = ["SetlistFmProvider"]
