"""Service settings read from BEST_STORIES_* environment variables."""

from .app import AppSettings, get_settings


__all__ = ["AppSettings", "get_settings"]
