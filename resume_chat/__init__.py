"""Résumé upload and question-answering service."""

from .config import Settings, get_settings
from .logging_config import configure_logging
from .rate_limit import Decision, RateLimiter

__all__ = ["Settings", "get_settings", "configure_logging", "Decision", "RateLimiter"]
