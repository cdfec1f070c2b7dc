"""
Cache key generation and TTL lookup for upstream responses.
Key Format: upstream:{provider}:{path}:{sorted query}
"""

from typing import Any, Iterable, Mapping, Optional
from urllib.parse import urlencode

from liirat_api.config import Settings

# Query parameters never written into a cache key or a log line
SECRET_PARAMS = frozenset({"api_token", "apiKey", "apikey", "token"})


def public_params(params: Mapping[str, Any], secrets: Iterable[str] = SECRET_PARAMS) -> dict:
    hidden = set(secrets)
    return {key: value for key, value in params.items() if key not in hidden}


def generate_upstream_cache_key(provider: str, path: str, params: Mapping[str, Any]) -> str:
    """Generate deterministic cache key from request parameters (credentials excluded)"""
    query = urlencode(sorted(public_params(params).items()))
    return f"upstream:{provider.lower()}:{path.strip('/')}:{query}"


def masked_url(base_url: str, path: str, params: Mapping[str, Any]) -> str:
    """URL for logging with credentials replaced by ``***``."""
    shown = {key: ("***" if key in SECRET_PARAMS else value) for key, value in params.items()}
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}?{urlencode(shown)}"


def category_ttl(settings: Settings, category: Optional[str]) -> Optional[int]:
    """
    TTL (seconds) for a cache category, None when the category is not cached.

    Examples:
        prices -> 30, news -> 300, calendar -> 600
    """
    if not category:
        return None
    ttl = settings.CACHE_TTL_SECONDS.get(category)
    if not ttl or ttl <= 0:
        return None
    return int(ttl)
