"""Positional layout of players for the 16 and 64 player graphics.

Partitioning is pure index slicing over the player order: the order itself
encodes column placement, nothing is searched or reordered here.

Top 16 (one graphic):
    winners1: 0-3    winners2: 4-7    losers1: 8-11    losers2: 12-15

Top 64 (two graphics, 32 players each):
    Winners graphic uses players 0-31, Losers graphic players 32-63.
    Each graphic has four columns with a top and a bottom block of 4:
    winners1_top: 0-3, winners1_bottom: 4-7, winners2_top: 8-11, ...
    losers1_top: 32-35, losers1_bottom: 36-39, ...
"""

from typing import Optional, Sequence, TypeVar

from .constants import BRACKET_GROUPS, BRACKET_SLOTS
from .exceptions import LayoutError
from .models import ResolvedBracketPositions

T = TypeVar('T')

GROUP_SIZE = 4

# name -> (start, end) index range, per tournament size
LAYOUT_16 = {
    'winners1': (0, 4),
    'winners2': (4, 8),
    'losers1': (8, 12),
    'losers2': (12, 16),
}


def _build_layout_64() -> dict[str, tuple[int, int]]:
    layout = {}
    for side, offset in (('winners', 0), ('losers', 32)):
        for column in range(1, 5):
            start = offset + (column - 1) * 2 * GROUP_SIZE
            layout[f'{side}{column}_top'] = (start, start + GROUP_SIZE)
            layout[f'{side}{column}_bottom'] = (start + GROUP_SIZE, start + 2 * GROUP_SIZE)
    return layout


LAYOUT_64 = _build_layout_64()

LAYOUTS = {16: LAYOUT_16, 64: LAYOUT_64}


def partition_players(order: Sequence[T], size: int) -> dict[str, list[T]]:
    """
    Slice an ordered player list into the named groups for a layout.

    Args:
        order: Player ids (or player objects) in placement order
        size: Tournament size (16 or 64)

    Returns:
        Dict mapping group name to the players in that group

    Raises:
        LayoutError: If the size is unsupported or the order has the wrong length
    """
    layout = LAYOUTS.get(size)
    if layout is None:
        raise LayoutError(f'Unsupported layout size: {size} (expected one of {sorted(LAYOUTS)})')
    if len(order) != size:
        raise LayoutError(f'Layout for {size} players needs exactly {size} players, got {len(order)}')

    return {name: list(order[start:end]) for name, (start, end) in layout.items()}


def split_halves_64(order: Sequence[T]) -> tuple[list[T], list[T]]:
    """Split a 64 player order into the Winners (0-31) and Losers (32-63) halves."""
    if len(order) != 64:
        raise LayoutError(f'Layout for 64 players needs exactly 64 players, got {len(order)}')
    return list(order[:32]), list(order[32:])


def column_of(group_name: str) -> str:
    """Column wrapper id a group belongs to ("winners1_top" -> "winners1")."""
    return group_name.split('_', 1)[0]


def pair_players(group: Sequence[T]) -> list[tuple[T, Optional[T]]]:
    """Consecutive pairs for paired-line display ([a, b, c] -> [(a, b), (c, None)])."""
    pairs = []
    for index in range(0, len(group), 2):
        second = group[index + 1] if index + 1 < len(group) else None
        pairs.append((group[index], second))
    return pairs


def default_bracket_info(index: int, player_count: int) -> tuple[str, str]:
    """
    Default (bracket side, group) for the player at `index`.

    Top 64: first 32 are Winners, next 32 Losers, two players per group A-P.
    Other sizes: first half Winners, groups cycling over at most 8 letters.
    """
    if player_count == 64:
        side = 'Winners' if index < 32 else 'Losers'
        index_in_bracket = index if index < 32 else index - 32
        return side, BRACKET_GROUPS[index_in_bracket // 2]

    side = 'Winners' if index < player_count / 2 else 'Losers'
    group_count = max(1, min(player_count // 2, 8))
    return side, BRACKET_GROUPS[index % group_count]


def default_placement(index: int):
    """Default placement for the player at `index` in placement order."""
    if index < 4:
        return index + 1
    if index < 8:
        return '5-8'
    if index < 16:
        return '9-16'
    if index < 24:
        return '17-24'
    if index < 32:
        return '25-32'
    return '33-64'


def bracket_slots_from_placements(order: Sequence[str], players: dict) -> dict[str, Optional[str]]:
    """
    Derive the bracket slot mapping from player placements.

    The first player placed 1, 2, 3 and 4 fill the matching slots; the first
    four players placed "5-8" (in player order) fill fifth1-fifth4.
    """
    slots: dict[str, Optional[str]] = {slot: None for slot in BRACKET_SLOTS}
    fifth_slots = iter(('fifth1', 'fifth2', 'fifth3', 'fifth4'))
    named = {1: 'first', 2: 'second', 3: 'third', 4: 'fourth'}

    for player_id in order:
        player = players.get(player_id)
        if player is None:
            continue
        placement = player.placement
        if placement in named and slots[named[placement]] is None:
            slots[named[placement]] = player_id
        elif placement == '5-8':
            slot = next(fifth_slots, None)
            if slot:
                slots[slot] = player_id
    return slots


def resolve_bracket_positions(
    slot_map: dict[str, Optional[str]], players: dict
) -> ResolvedBracketPositions:
    """
    Resolve a slot -> player id mapping to slot -> display name.

    An unmapped slot, an id with no matching player or a player with a blank
    name resolves to None.
    """
    resolved = {}
    for slot in BRACKET_SLOTS:
        player_id = slot_map.get(slot)
        player = players.get(player_id) if player_id else None
        name = player.name.strip() if player is not None and player.name else ''
        resolved[slot] = name or None
    return ResolvedBracketPositions(**resolved)
