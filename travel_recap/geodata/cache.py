"""
Optional Redis cache for non-personal GeoJSON (country boundaries).

Only public boundary datasets are cached here, never timeline data. Every
Redis failure is reported and treated as a cache miss, so loading still
works with Redis down or not installed.
"""

from typing import Any, Optional

import orjson
from rich.console import Console

from ..core.config import get_settings

console = Console(stderr=True)
settings = get_settings()


class GeodataCache:
    """Redis-backed GeoJSON cache keyed by dataset source."""

    key_prefix = "geodata:"

    def __init__(self, redis_client: Optional[object] = None, ttl_seconds: Optional[int] = None):
        """
        Initialize geodata cache.

        Args:
            redis_client: Optional Redis client; without one every call is a no-op
            ttl_seconds: Expiry for cached datasets (defaults to settings)
        """
        self.redis = redis_client
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.geodata_cache_ttl

        if self.redis:
            try:
                self.redis.ping()
            except Exception as e:
                console.print(f"[yellow]Redis unavailable, geodata cache disabled: {e}")
                self.redis = None

    @property
    def enabled(self) -> bool:
        return self.redis is not None

    def get(self, key: str) -> Optional[Any]:
        """
        Get a cached GeoJSON document.

        Args:
            key: Dataset key (usually its path or URL)

        Returns:
            Parsed GeoJSON or None on miss/error
        """
        if not self.redis:
            return None

        try:
            cached = self.redis.get(self.key_prefix + key)
            if cached:
                return orjson.loads(cached)
        except Exception as e:
            console.print(f"[yellow]Geodata cache read failed for {key}: {e}")
        return None

    def set(self, key: str, value: Any):
        """
        Store a GeoJSON document.

        Args:
            key: Dataset key
            value: JSON-serializable GeoJSON object
        """
        if not self.redis:
            return

        try:
            self.redis.setex(self.key_prefix + key, self.ttl_seconds, orjson.dumps(value))
        except Exception as e:
            console.print(f"[yellow]Geodata cache write failed for {key}: {e}")


def get_redis_client() -> Optional[object]:
    """
    Get Redis client if available.

    Returns:
        Redis client or None if unavailable
    """
    try:
        import redis

        client = redis.from_url(
            settings.redis_url,
            socket_connect_timeout=2,
            socket_timeout=2
        )

        # Test connection
        client.ping()
        return client

    except ImportError:
        console.print("[yellow]Redis package not installed, skipping geodata cache")
        return None

    except Exception as e:
        console.print(f"[yellow]Redis connection failed, skipping geodata cache: {e}")
        return None
