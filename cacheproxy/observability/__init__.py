"""
Cache Proxy - Observability Module

Structured JSON logging for the cache proxy.

Usage:
    from cacheproxy.observability import setup_logging

    setup_logging("DEBUG")
"""

from .logging_setup import ROOT_LOGGER, JSONFormatter, setup_logging

__all__ = [
    "JSONFormatter",
    "ROOT_LOGGER",
    "setup_logging",
]
