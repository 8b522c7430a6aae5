"""
Cache utilities for the pick'em pool application
Caches the raw data documents so every request does not refetch them
"""

import functools

from flask import current_app

from pickem import cache
from pickem.utils.logging_config import get_logger

logger = get_logger(__name__)

DOCUMENT_KEY_PREFIX = "document"


def make_document_key(name):
    return f"{DOCUMENT_KEY_PREFIX}_{name}".replace("/", "_").replace(".", "_")


def cached_document(timeout=None):
    """
    Decorator for caching a document loader

    The wrapped function takes the document name as its first argument.

    Args:
        timeout: Cache timeout in seconds (default CACHE_DEFAULT_TIMEOUT)
    """

    def decorator(f):
        @functools.wraps(f)
        def wrapped(name, *args, **kwargs):
            cache_key = make_document_key(name)

            # Try to get from cache
            result = cache.get(cache_key)
            if result is not None:
                logger.debug(f"Cache hit for key: {cache_key}")
                return result

            # Execute function and cache result
            result = f(name, *args, **kwargs)
            cache.set(
                cache_key,
                result,
                timeout=timeout or current_app.config.get("CACHE_DEFAULT_TIMEOUT", 60),
            )
            logger.debug(f"Cache set for key: {cache_key}")

            return result

        return wrapped

    return decorator


def invalidate_documents(*names):
    """
    Drop cached documents so the next request reloads them

    Args:
        names: Document names; clears the whole cache when none are given
    """
    if not names:
        cache.clear()
        current_app.logger.info("Document cache cleared")
        return

    for name in names:
        cache.delete(make_document_key(name))
    current_app.logger.info(f"Document cache cleared for: {', '.join(names)}")


def get_cache_stats():
    """Get cache settings"""
    return {
        "type": current_app.config.get("CACHE_TYPE", "Unknown"),
        "timeout": current_app.config.get("CACHE_DEFAULT_TIMEOUT", 60),
    }
