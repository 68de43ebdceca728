"""Sprite resolution for species names and keys.

Resolution order, first hit wins:

1. exact (case-insensitive) match in the local asset index
2. the "Base (Form)" display variant in the local index
3. the base name alone in the local index, unless the form is distinct
4. the remote metadata index: exact key, base_form / form_base, then the
   key with underscores for spaces
5. an empty reference (the renderer shows a placeholder)

Distinct forms (regional, mega, legendary alternates, ...) never fall back
to the base species sprite.
"""

import logging
from typing import Optional

from .constants import DISTINCT_FORMS, LOCAL_SPRITE_DIR, LOCAL_SPRITE_EXT, REMOTE_SPRITE_URL
from .exceptions import UpstreamError
from .models import PokemonMetadata, SpriteAsset
from .normalizer import display_name, normalize_species_name, species_key, split_species_key
from .pokemon_data import SpeciesIndex

logger = logging.getLogger('tgg.sprites')


def local_sprite_path(filename: str) -> str:
    """Path of a local sprite, e.g. "Moltres (Galarian)" -> "/assets/.../Moltres (Galarian).svg"."""
    return f'{LOCAL_SPRITE_DIR}/{filename}{LOCAL_SPRITE_EXT}'


def remote_sprite_url(sid: int) -> str:
    """Remote sprite URL for a numeric sprite id."""
    return REMOTE_SPRITE_URL.format(sid=sid)


def is_distinct_form(form: Optional[str]) -> bool:
    """Exact, case-insensitive membership in the distinct form set."""
    if not form:
        return False
    cleaned = ' '.join(form.lower().split())
    return cleaned in DISTINCT_FORMS or cleaned.replace(' ', '_') in DISTINCT_FORMS


def parse_lookup_name(name: str) -> tuple[str, Optional[str]]:
    """
    Split a display name or species key into (base, form).

    Examples:
        "Moltres (Galarian)" -> ("Moltres", "galarian")
        "moltres_galarian" -> ("moltres", "galarian")
        "Altaria (Shadow)" -> ("Altaria", None)
    """
    normalized = normalize_species_name(name)
    if normalized.form:
        return normalized.base_name, normalized.form
    if '_' in normalized.base_name:
        base, form = split_species_key(normalized.base_name)
        return base.replace('_', ' '), form
    return normalized.base_name, None


def _unique(values: list[str]) -> list[str]:
    seen = set()
    result = []
    for value in values:
        if value and value not in seen:
            seen.add(value)
            result.append(value)
    return result


class SpeciesResolver:
    """Resolves species names/keys to sprite assets and display names."""

    def __init__(self, index: Optional[SpeciesIndex] = None):
        self.index = index or SpeciesIndex()

    def _local_assets(self) -> dict[str, str]:
        try:
            return self.index.local_assets()
        except OSError as e:
            logger.warning(f'Local asset index unavailable: {e}')
            return {}

    def _remote_lookup(self, name: str) -> Optional[PokemonMetadata]:
        try:
            return self.index.lookup(name)
        except UpstreamError as e:
            logger.warning(f'Remote metadata unavailable: {e}')
            return None

    def resolve(self, name: str) -> SpriteAsset:
        """
        Resolve a species name or key to a sprite asset.

        Never raises; an unresolvable name yields an empty SpriteAsset and a
        warning.
        """
        text = ' '.join((name or '').split())
        if not text:
            return SpriteAsset(key='')

        base, form = parse_lookup_name(text)
        local = self._local_assets()

        local_candidates = [text.lower()]
        if form:
            local_candidates.append(display_name(base, form).lower())
            if not is_distinct_form(form):
                local_candidates.append(base.lower())
        else:
            local_candidates.append(base.lower())

        for candidate in _unique(local_candidates):
            if candidate in local:
                return SpriteAsset(key=text, path=local_sprite_path(local[candidate]), source='local')

        remote_candidates = [text.lower()]
        if form:
            remote_candidates.append(species_key(base, form))
            remote_candidates.append(species_key(form, base))
        else:
            remote_candidates.append(species_key(base))
        remote_candidates.append(text.lower().replace(' ', '_'))

        for candidate in _unique(remote_candidates):
            pokemon = self._remote_lookup(candidate)
            if pokemon:
                return SpriteAsset(key=text, path=remote_sprite_url(pokemon.sid), source='remote')

        logger.warning(f'Pokemon not found: {text}')
        return SpriteAsset(key=text)

    def display_name_for(self, name: str) -> str:
        """
        Display name for a species key or name.

        Uses the remote species name when known, else builds one from the
        normalized base and form ("moltres_galarian" -> "Moltres (Galarian)").
        """
        if not name:
            return ''
        pokemon = self._remote_lookup(name)
        if pokemon:
            return pokemon.species_name
        base, form = parse_lookup_name(name)
        return display_name(base, form)

    def canonical_species_id(self, name: str) -> Optional[str]:
        """
        Map an imported name/key to a speciesId of the remote index.

        Exact id/name match first, then the best ranked search result. A
        regional or other distinct form is never collapsed onto its base
        species.

        Returns:
            The speciesId, None when nothing matches

        Raises:
            UpstreamError: If the remote index cannot be fetched
        """
        if not name:
            return None

        base, form = parse_lookup_name(name)
        key = species_key(base, form)

        pokemon = self.index.lookup(key) or self.index.lookup(name)
        if pokemon:
            return pokemon.species_id

        results = self.index.search_pokemon(key, limit=5)
        if form and is_distinct_form(form):
            results = [r for r in results if r.species_id.lower().endswith(species_key(form))]
        if results:
            exact = [r for r in results if r.species_id.lower() == key]
            return (exact or results)[0].species_id

        if form and not is_distinct_form(form):
            base_results = self.index.search_pokemon(species_key(base), limit=5)
            if base_results:
                return base_results[0].species_id

        return None
