"""Team ordering by usage and type preferences.

Slot preferences (priority order within each slot):
    1: ground, grass
    2: steel, poison
    3: dragon, flying, normal, bug
    4: flying, fairy, psychic
    5-6: any
"""

from typing import Callable, Optional

from .constants import SLOT_TYPE_PREFERENCES
from .models import PokemonMetadata
from .schemas import Pokemon

NO_MATCH_SCORE = 1000


def calculate_sort_score(metadata: Optional[PokemonMetadata]) -> int:
    """
    Type preference score (lower sorts earlier).

    slot_index * 100 + type_index for the first slot whose preferred types
    match, NO_MATCH_SCORE when nothing matches or the types are unknown.
    """
    if metadata is None or not metadata.types:
        return NO_MATCH_SCORE

    types = {t.lower() for t in metadata.types}
    for slot_index, preferred in enumerate(SLOT_TYPE_PREFERENCES):
        for type_index, type_name in enumerate(preferred):
            if type_name in types:
                return slot_index * 100 + type_index
    return NO_MATCH_SCORE


def sort_team(
    team: list[Pokemon],
    metadata_lookup: Callable[[str], Optional[PokemonMetadata]],
    usage_counts: Optional[dict[str, int]] = None,
) -> list[Pokemon]:
    """
    Reorder a team: most used across the tournament first, then by type
    preference score. Only reorders; returns new Pokemon objects.

    Args:
        team: Team slots
        metadata_lookup: Species id -> metadata (e.g. SpeciesIndex.get_pokemon_by_id)
        usage_counts: Species id -> usage count across all teams
    """
    usage_counts = usage_counts or {}
    scored = []
    for pokemon in team:
        metadata = metadata_lookup(pokemon.id) if pokemon.id else None
        usage = usage_counts.get(pokemon.id, 0) if pokemon.id else 0
        scored.append((-usage, calculate_sort_score(metadata), pokemon))

    scored.sort(key=lambda item: (item[0], item[1]))
    return [Pokemon(id=p.id, is_shadow=p.is_shadow) for _, _, p in scored]
