"""Shared infrastructure dependencies.

Provides ONLY process-wide configuration values handlers need.
Does NOT import from bounded contexts to maintain DDD boundaries.
"""

from infrastructure.settings import get_settings


def get_api_base_url() -> str:
    """Get the public base URL used to build resource links.

    Returns:
        The configured API base URL without a trailing slash.
    """
    return get_settings().api_base_url


def get_cache_control() -> str:
    """Get the Cache-Control header value for cacheable GET responses."""
    return f"max-age={get_settings().cache_control_max_age}"
