"""Structural validation for players and tournament records."""

import re
from collections import Counter

from .constants import BRACKET_SLOTS, TEAM_SIZE

_FLAG_RE = re.compile(r'^[A-Z]{2}$')

# Expected placement counts per tournament size (Bracket overview)
PLACEMENT_DISTRIBUTION = {
    4: {1: 1, 2: 1, 3: 1, 4: 1},
    8: {1: 1, 2: 1, 3: 1, 4: 1, '5-8': 4},
    16: {1: 1, 2: 1, 3: 1, 4: 1, '5-8': 4, '9-16': 8},
    32: {1: 1, 2: 1, 3: 1, 4: 1, '5-8': 4, '9-16': 8, '17-24': 8, '25-32': 8},
    64: {1: 1, 2: 1, 3: 1, 4: 1, '5-8': 4, '9-16': 8, '17-24': 8, '25-32': 8, '33-64': 32},
}


def validate_team(team: list) -> list[str]:
    """Check that a team has exactly six slots."""
    if len(team) != TEAM_SIZE:
        return [f'Team must have exactly {TEAM_SIZE} Pokemon (got {len(team)})']
    return []


def validate_flags(flags: list[str]) -> list[str]:
    """
    Check a player's flag list.

    One or two entries; each entry is an ISO 3166-1 alpha-2 code or an
    empty string (an unfilled form value, dropped during composition).
    """
    errors = []
    if not 1 <= len(flags) <= 2:
        errors.append(f'Player must have 1-2 flags (got {len(flags)})')
    for flag in flags:
        if flag and not _FLAG_RE.match(flag):
            errors.append(f'Flag must be a 2-letter country code: {flag!r}')
    return errors


def validate_player_order(players: dict, player_order: list[str]) -> list[str]:
    """
    Check that the player order and the player map describe the same ids.

    Checks:
    - No duplicate ids in the order
    - Every ordered id exists in the map
    - Equal cardinality
    - Map keys match each player's own id
    """
    errors = []

    duplicates = sorted(pid for pid, count in Counter(player_order).items() if count > 1)
    if duplicates:
        errors.append(f'playerOrder has duplicate ids: {", ".join(duplicates)}')

    missing = [pid for pid in player_order if pid not in players]
    if missing:
        errors.append(f'playerOrder references unknown players: {", ".join(missing)}')

    if len(player_order) != len(players):
        errors.append(
            f'playerOrder has {len(player_order)} ids but there are {len(players)} players'
        )

    for key, player in players.items():
        if getattr(player, 'id', key) != key:
            errors.append(f'Player stored under {key!r} has id {player.id!r}')

    return errors


def validate_placements(players: dict, overview_type: str) -> list[str]:
    """
    Check mode-specific player attributes and the placement distribution.

    Bracket mode needs a placement for every player and the exact count per
    placement for the tournament size; Usage mode needs a bracket side and
    group for every player.
    """
    errors: list[str] = []
    values = list(players.values())

    if overview_type == 'Bracket':
        if any(p.placement is None for p in values):
            errors.append('In Bracket mode, all players must have a placement')
            return errors

        expected = PLACEMENT_DISTRIBUTION.get(len(values))
        if expected is None:
            errors.append(f'No placement distribution for {len(values)} players')
            return errors

        actual = Counter(p.placement for p in values)
        if dict(actual) != expected:
            errors.append(
                f'Invalid placement distribution for {len(values)} players: '
                f'{dict(actual)} (expected {expected})'
            )

    elif overview_type == 'Usage':
        if any(p.bracket_side is None or p.group is None for p in values):
            errors.append('In Usage mode, all players must have a bracket side and group')

    return errors


def validate_bracket_slot_keys(slot_map: dict) -> list[str]:
    """Check that a bracket position mapping only uses known slot names."""
    unknown = sorted(k for k in slot_map if k not in BRACKET_SLOTS)
    if unknown:
        return [f'Unknown bracket slots: {", ".join(unknown)}']
    return []


def validate_record(record) -> list[str]:
    """
    Validate a tournament record against its structural invariants.

    Per-player checks (team length, flags) are done by the player schema;
    this covers the cross-field rules.

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []
    errors.extend(validate_player_order(record.players, record.player_order))

    if len(record.players) != record.player_count:
        errors.append(
            f'Number of players ({len(record.players)}) must match '
            f'tournament size ({record.player_count})'
        )

    errors.extend(validate_placements(record.players, record.overview_type))
    errors.extend(validate_bracket_slot_keys(record.bracket_positions))
    return errors
