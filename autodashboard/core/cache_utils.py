"""
Caching utilities for expensive dashboard queries and reference-data option lists.
Uses Redis (django-redis) when configured, local memory otherwise.
"""
from django.core.cache import cache
from functools import wraps
import hashlib
import logging

logger = logging.getLogger(__name__)

# Cache TTLs (in seconds)
REFERENCE_OPTIONS_CACHE_TTL = 600  # 10 minutes
DASHBOARD_CACHE_TTL = 300  # 5 minutes

# Cache key prefixes
REFERENCE_OPTIONS_PREFIX = 'reference_options'
DASHBOARD_PREFIX = 'dashboard_stats'


def make_cache_key(prefix, *args, **kwargs):
    """Generate a unique cache key from arguments"""
    key_data = f"{prefix}:{args}:{sorted(kwargs.items())}"
    # Hash it to keep key length reasonable
    key_hash = hashlib.md5(key_data.encode()).hexdigest()
    return f"{prefix}:{key_hash}"


def cached_query(cache_ttl=60, key_prefix="query"):
    """
    Decorator to cache expensive queries

    Usage:
        @cached_query(cache_ttl=300, key_prefix=DASHBOARD_PREFIX)
        def get_dashboard_stats():
            return data
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            cache_key = make_cache_key(key_prefix, *args, **kwargs)

            cached_data = cache.get(cache_key)
            if cached_data is not None:
                logger.debug(f"Cache HIT for {key_prefix}: {cache_key}")
                return cached_data

            logger.debug(f"Cache MISS for {key_prefix}: {cache_key}")
            result = func(*args, **kwargs)
            cache.set(cache_key, result, cache_ttl)
            return result
        return wrapper
    return decorator


def invalidate_cache_pattern(pattern):
    """
    Invalidate all cache keys matching a pattern.
    With Redis this uses SCAN; other backends cannot enumerate keys, so the
    whole cache is cleared instead.
    """
    try:
        from django_redis import get_redis_connection
        redis_conn = get_redis_connection("default")
    except NotImplementedError:
        # Not a redis backend (locmem in development and tests)
        cache.clear()
        logger.debug(f"Cleared local cache for pattern: {pattern}")
        return
    except Exception as e:
        logger.warning(f"Could not invalidate cache pattern {pattern}: {str(e)}")
        return

    try:
        keys = []
        cursor = 0
        while True:
            cursor, partial_keys = redis_conn.scan(cursor, match=f"*{pattern}*", count=100)
            keys.extend(partial_keys)
            if cursor == 0:
                break

        if keys:
            redis_conn.delete(*keys)
            logger.info(f"Invalidated {len(keys)} cache keys matching pattern: {pattern}")
    except Exception as e:
        logger.warning(f"Could not invalidate cache pattern {pattern}: {str(e)}")


def invalidate_reference_cache():
    """Invalidate cached option lists (makes, statuses, ports, ...)"""
    invalidate_cache_pattern(REFERENCE_OPTIONS_PREFIX)
    logger.info("Invalidated reference options cache")


def invalidate_dashboard_cache():
    """Invalidate dashboard stats cache"""
    invalidate_cache_pattern(DASHBOARD_PREFIX)
    logger.info("Invalidated dashboard cache")
