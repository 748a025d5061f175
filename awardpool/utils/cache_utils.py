"""
Cache utilities for the award pool application
"""

import functools

from flask import current_app

from awardpool import cache

BALLOT_CACHE_KEY = "ballot"


def cached_value(key, timeout=300):
    """
    Decorator for caching a function's return value under a fixed key

    Args:
        key: Cache key shared by every call
        timeout: Cache timeout in seconds
    """

    def decorator(f):
        @functools.wraps(f)
        def wrapped(*args, **kwargs):
            result = cache.get(key)
            if result is not None:
                current_app.logger.debug(f"Cache hit for key: {key}")
                return result

            result = f(*args, **kwargs)
            cache.set(key, result, timeout=timeout)
            current_app.logger.debug(f"Cache set for key: {key}")

            return result

        return wrapped

    return decorator


def invalidate_ballot_cache():
    """Drop the cached category/nominee ballot after a registry mutation"""
    cache.delete(BALLOT_CACHE_KEY)
    current_app.logger.debug("Ballot cache invalidated")
