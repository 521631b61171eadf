"""
Load the country boundary dataset from a file or URL.

A failed load never raises: the caller gets None and country statistics are
simply left empty.
"""

from pathlib import Path
from typing import Any, Optional, Union

import httpx
import orjson
from rich.console import Console

from .cache import GeodataCache
from .country_lookup import CountryLookup
from ..core.config import get_settings

console = Console(stderr=True)
settings = get_settings()


def is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def fetch_geojson(url: str, timeout: Optional[float] = None) -> Any:
    """Download and parse a GeoJSON document."""
    response = httpx.get(
        url,
        timeout=timeout if timeout is not None else settings.http_timeout,
        follow_redirects=True
    )
    response.raise_for_status()
    return orjson.loads(response.content)


def read_geojson(path: Union[str, Path]) -> Any:
    """Read and parse a GeoJSON file."""
    with open(path, 'rb') as f:
        return orjson.loads(f.read())


def load_geojson(
    source: Union[str, Path],
    cache: Optional[GeodataCache] = None,
    timeout: Optional[float] = None
) -> Optional[Any]:
    """
    Load GeoJSON from a path or http(s) URL, consulting the cache first.

    Returns:
        Parsed GeoJSON, or None if it could not be loaded.
    """
    key = str(source)

    if cache is not None:
        cached = cache.get(key)
        if cached is not None:
            console.print(f"[dim]Country boundaries loaded from cache ({key})")
            return cached

    try:
        if isinstance(source, str) and is_url(source):
            geojson = fetch_geojson(source, timeout)
        else:
            geojson = read_geojson(source)
    except (OSError, httpx.HTTPError, httpx.InvalidURL, orjson.JSONDecodeError) as e:
        console.print(f"[yellow]Warning: Failed to load country boundaries from {key}: {e}")
        return None

    if cache is not None:
        cache.set(key, geojson)
    return geojson


def load_country_lookup(
    source: Optional[Union[str, Path]] = None,
    cache: Optional[GeodataCache] = None,
    timeout: Optional[float] = None
) -> Optional[CountryLookup]:
    """
    Build a CountryLookup from the configured boundary dataset.

    Args:
        source: Path or URL; defaults to COUNTRIES_GEOJSON
        cache: Optional geodata cache
        timeout: HTTP timeout in seconds

    Returns:
        CountryLookup, or None when no dataset is configured or loading failed
    """
    source = source or settings.countries_geojson
    if not source:
        return None

    geojson = load_geojson(source, cache=cache, timeout=timeout)
    if geojson is None:
        return None

    lookup = CountryLookup.from_geojson(geojson)
    if not len(lookup):
        console.print(f"[yellow]Warning: No usable country polygons in {source}")
        return None

    console.print(f"[green]Country boundaries loaded for offline geocoding ({len(lookup):,} features)")
    return lookup
