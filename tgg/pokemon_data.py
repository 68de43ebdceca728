"""Species metadata and local sprite indices.

Both indices are read-only, idempotent fetches. They are held by a
SpeciesIndex, which caches each one with at-most-one in-flight fetch:
callers arriving while a fetch is running wait for that fetch instead
of starting another.
"""

import logging
import threading
from concurrent.futures import Future
from pathlib import Path
from typing import Any, Callable, Optional

import requests

from .config import get_local_asset_dir, get_pokemon_data_url, get_request_timeout, get_user_agent
from .constants import LOCAL_SPRITE_EXT
from .exceptions import UpstreamError
from .models import PokemonMetadata

logger = logging.getLogger('tgg.pokemon_data')


class SingleFlightCache:
    """
    Thread-safe cache that runs at most one loader per key at a time.

    A failed load propagates to every waiting caller and is remembered:
    later calls for that key raise the same error without loading again,
    until the key is invalidated or the cache reset. Values cached earlier
    stay cached.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._values: dict[str, Any] = {}
        self._failures: dict[str, Exception] = {}
        self._in_flight: dict[str, Future] = {}

    def get(self, key: str, loader: Callable[[], Any]) -> Any:
        with self._lock:
            if key in self._values:
                return self._values[key]
            if key in self._failures:
                raise self._failures[key]
            future = self._in_flight.get(key)
            is_owner = future is None
            if is_owner:
                future = Future()
                self._in_flight[key] = future

        if not is_owner:
            return future.result()

        try:
            value = loader()
        except Exception as e:
            with self._lock:
                self._failures[key] = e
                self._in_flight.pop(key, None)
            future.set_exception(e)
            raise

        with self._lock:
            self._values[key] = value
            self._in_flight.pop(key, None)
        future.set_result(value)
        return value

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._values

    def invalidate(self, key: str) -> None:
        """Drop one cached value or failure (an in-flight fetch is left to finish)."""
        with self._lock:
            self._values.pop(key, None)
            self._failures.pop(key, None)

    def reset(self) -> None:
        """Drop every cached value and failure."""
        with self._lock:
            self._values.clear()
            self._failures.clear()


def parse_pokemon_metadata(data: Any) -> dict[str, PokemonMetadata]:
    """
    Parse the dracoviz pokemon.json payload.

    The payload is an object of entries (a plain list is accepted too);
    only speciesName, speciesId, sid and types are kept. Entries missing
    any of the first three are skipped.

    Returns:
        Dict mapping speciesId to PokemonMetadata
    """
    if isinstance(data, dict):
        entries = list(data.values())
    elif isinstance(data, list):
        entries = data
    else:
        entries = []

    metadata: dict[str, PokemonMetadata] = {}
    skipped = 0
    for entry in entries:
        if not isinstance(entry, dict):
            skipped += 1
            continue
        species_id = entry.get('speciesId')
        species_name = entry.get('speciesName')
        sid = entry.get('sid')
        if not species_id or not species_name or sid is None:
            skipped += 1
            continue
        try:
            sid = int(sid)
        except (TypeError, ValueError):
            skipped += 1
            continue
        types = [str(t).lower() for t in entry.get('types') or [] if t and t != 'none']
        metadata[species_id] = PokemonMetadata(
            species_name=species_name,
            species_id=species_id,
            sid=sid,
            types=types,
        )

    if skipped:
        logger.debug(f'Skipped {skipped} malformed Pokemon metadata entries')
    return metadata


def fetch_pokemon_metadata(
    url: Optional[str] = None,
    session: Optional[requests.Session] = None,
) -> dict[str, PokemonMetadata]:
    """
    Fetch the remote species metadata index.

    Raises:
        UpstreamError: On network errors, non-2xx responses or invalid JSON
    """
    url = url or get_pokemon_data_url()
    http = session or requests
    logger.info(f'Loading Pokemon metadata from {url}...')

    try:
        response = http.get(
            url,
            headers={'User-Agent': get_user_agent()},
            timeout=get_request_timeout(),
        )
        response.raise_for_status()
        data = response.json()
    except requests.HTTPError as e:
        status = e.response.status_code if e.response is not None else None
        logger.error(f'Failed to fetch Pokemon data: {status}')
        raise UpstreamError(f'Failed to fetch Pokemon data: {status}', status=status) from e
    except requests.RequestException as e:
        logger.error(f'Failed to fetch Pokemon data: {e}')
        raise UpstreamError(f'Failed to fetch Pokemon data: {e}') from e
    except ValueError as e:
        logger.error(f'Pokemon data is not valid JSON: {e}')
        raise UpstreamError('Pokemon data is not valid JSON') from e

    return parse_pokemon_metadata(data)


def list_local_assets(asset_dir: Optional[Path | str]) -> list[str]:
    """
    List sprite filenames (without extension) in the local asset directory.

    A missing or unset directory yields an empty list.
    """
    if not asset_dir:
        return []
    asset_dir = Path(asset_dir)
    if not asset_dir.is_dir():
        logger.debug(f'Local asset directory not found: {asset_dir}')
        return []
    return sorted(p.stem for p in asset_dir.glob(f'*{LOCAL_SPRITE_EXT}'))


class SpeciesIndex:
    """Owns and caches the remote metadata index and the local asset index."""

    REMOTE = 'remote'
    LOOKUP = 'remote_lookup'
    LOCAL = 'local'

    def __init__(
        self,
        remote_loader: Optional[Callable[[], dict[str, PokemonMetadata]]] = None,
        local_loader: Optional[Callable[[], list[str]]] = None,
        cache: Optional[SingleFlightCache] = None,
    ):
        self._remote_loader = remote_loader or fetch_pokemon_metadata
        self._local_loader = local_loader or (lambda: list_local_assets(get_local_asset_dir()))
        self._cache = cache or SingleFlightCache()

    def metadata(self) -> dict[str, PokemonMetadata]:
        """All remote metadata keyed by speciesId (fetched once)."""
        return self._cache.get(self.REMOTE, self._remote_loader)

    def _build_lookup(self) -> dict[str, PokemonMetadata]:
        lookup = {}
        for pokemon in self.metadata().values():
            lookup[pokemon.species_name.lower()] = pokemon
            lookup[pokemon.species_id.lower()] = pokemon
        return lookup

    def lookup(self, name: str) -> Optional[PokemonMetadata]:
        """Find metadata by species id or species name (case-insensitive)."""
        if not name:
            return None
        lookup = self._cache.get(self.LOOKUP, self._build_lookup)
        return lookup.get(name.strip().lower())

    def _build_local(self) -> dict[str, str]:
        return {filename.lower(): filename for filename in self._local_loader()}

    def local_assets(self) -> dict[str, str]:
        """Local sprite filenames keyed by their lowercased form."""
        return self._cache.get(self.LOCAL, self._build_local)

    def all_pokemon(self) -> list[PokemonMetadata]:
        """All Pokemon sorted by species name."""
        return sorted(self.metadata().values(), key=lambda p: p.species_name)

    def get_pokemon_by_id(self, species_id: str) -> Optional[PokemonMetadata]:
        if not species_id:
            return None
        return self.metadata().get(species_id)

    def search_pokemon(self, query: str, limit: int = 20) -> list[PokemonMetadata]:
        """
        Search Pokemon by name or id, best matches first.

        Scoring: exact match 1000, prefix 100, substring 10; ties are
        broken alphabetically by species name. An empty query returns the
        first `limit` Pokemon alphabetically.
        """
        if not query or not query.strip():
            return self.all_pokemon()[:limit]

        normalized = query.strip().lower()
        results = []
        for pokemon in self.metadata().values():
            name = pokemon.species_name.lower()
            species_id = pokemon.species_id.lower()
            if normalized in (name, species_id):
                score = 1000
            elif name.startswith(normalized) or species_id.startswith(normalized):
                score = 100
            elif normalized in name or normalized in species_id:
                score = 10
            else:
                continue
            results.append((score, pokemon))

        results.sort(key=lambda r: (-r[0], r[1].species_name))
        return [pokemon for _score, pokemon in results[:limit]]

    def invalidate(self, key: str) -> None:
        self._cache.invalidate(key)
        if key == self.REMOTE:
            self._cache.invalidate(self.LOOKUP)

    def reset(self) -> None:
        """Forget both indices; the next access fetches again."""
        self._cache.reset()
