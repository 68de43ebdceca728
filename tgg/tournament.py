"""Operations on the canonical tournament record.

Structural operations (create, resize, overview switch, reorder) return a
new validated record. Player-level operations (update, clear, merge of
imports, roster flags, team sorting) change the record in place and keep
it valid, raising RecordValidationError instead of leaving it broken.
"""

import datetime
import logging
import random
from typing import Iterable, Optional

from pydantic import ValidationError

from .constants import BASE_COLUMN_IDS, COLUMN_IDS_64, COUNTRY_CODE_NORMALIZE, PLAYER_FLAG_MAPPINGS, TEAM_SIZE
from .exceptions import RecordValidationError, UpstreamError
from .layout import default_bracket_info, default_placement
from .models import ImportRecord, RosterPlayer
from .pokemon_data import SpeciesIndex
from .pokemon_sort import sort_team
from .schemas import ColumnWrapperConfig, Player, Pokemon, TournamentRecord
from .sprites import SpeciesResolver
from .usage import calculate_usage_counts
from .validators import validate_record

logger = logging.getLogger('tgg.tournament')

_FLAGS_BY_NAME = {name.lower(): flags for name, flags in PLAYER_FLAG_MAPPINGS.items()}


def get_flags_for_player(name: str) -> Optional[list[str]]:
    """Known flags for a player name (case-insensitive), None if unknown."""
    flags = _FLAGS_BY_NAME.get((name or '').strip().lower())
    return list(flags) if flags else None


def empty_team() -> list[Pokemon]:
    return [Pokemon() for _ in range(TEAM_SIZE)]


def default_player(player_id: str, index: int, player_count: int, overview_type: str) -> Player:
    """A blank player with the mode-specific defaults for its position."""
    player = Player(id=player_id, name='', team=empty_team(), flags=[''])
    if overview_type == 'Bracket':
        player.placement = default_placement(index)
    else:
        player.bracket_side, player.group = default_bracket_info(index, player_count)
    return player


def default_column_wrappers(player_count: int) -> dict[str, ColumnWrapperConfig]:
    column_ids = COLUMN_IDS_64 if player_count == 64 else BASE_COLUMN_IDS
    return {column_id: ColumnWrapperConfig() for column_id in column_ids}


def _validated(data: dict) -> TournamentRecord:
    try:
        return TournamentRecord.model_validate(data)
    except ValidationError as e:
        raise RecordValidationError([err['msg'] for err in e.errors()]) from e


def create_default_tournament(player_count: int = 16, overview_type: str = 'Usage') -> TournamentRecord:
    """
    Create a blank tournament record.

    Players are named player-1..player-N in order, each with one empty flag
    and six empty slots. Bracket mode assigns default placements; Usage
    mode assigns bracket sides and groups.
    """
    order = [f'player-{i + 1}' for i in range(player_count)]
    players = {
        pid: default_player(pid, index, player_count, overview_type)
        for index, pid in enumerate(order)
    }

    return _validated({
        'event_year': str(datetime.date.today().year),
        'overview_type': overview_type,
        'player_count': player_count,
        'players': players,
        'player_order': order,
        'column_wrappers': default_column_wrappers(player_count),
    })


def _next_player_id(existing: Iterable[str], start: int) -> str:
    existing = set(existing)
    index = start
    while f'player-{index}' in existing:
        index += 1
    return f'player-{index}'


def resize_tournament(record: TournamentRecord, player_count: int) -> TournamentRecord:
    """
    Change the tournament size.

    Switching to 64 players starts from 64 fresh players with all ten column
    wrappers. Growing otherwise appends default players; shrinking drops the
    players at the end of the order.
    """
    if player_count == record.player_count:
        return record

    if player_count == 64:
        fresh = create_default_tournament(64, record.overview_type)
        data = record.model_dump()
        data.update(
            player_count=64,
            players=fresh.players,
            player_order=fresh.player_order,
            column_wrappers=fresh.column_wrappers,
            bracket_positions={},
            bracket_matches=[],
        )
        return _validated(data)

    players = dict(record.players)
    order = list(record.player_order)

    if player_count > len(order):
        for index in range(len(order), player_count):
            pid = _next_player_id(players, index + 1)
            order.append(pid)
            players[pid] = default_player(pid, index, player_count, record.overview_type)
    else:
        for pid in order[player_count:]:
            del players[pid]
        order = order[:player_count]

    kept = set(order)
    data = record.model_dump()
    data.update(
        player_count=player_count,
        players=players,
        player_order=order,
        bracket_positions={slot: pid for slot, pid in record.bracket_positions.items() if pid in kept},
        bracket_matches=[],
    )
    return _validated(data)


def set_overview_type(record: TournamentRecord, overview_type: str) -> TournamentRecord:
    """
    Switch the overview type, filling in the per-player fields it needs.

    Bracket needs placements, Usage needs bracket side and group; players
    that already have them keep theirs.
    """
    players = {}
    for index, pid in enumerate(record.player_order):
        player = record.players[pid].model_copy()
        if overview_type == 'Bracket' and player.placement is None:
            player.placement = default_placement(index)
        elif overview_type == 'Usage' and (player.bracket_side is None or player.group is None):
            player.bracket_side, player.group = default_bracket_info(index, record.player_count)
        players[pid] = player

    data = record.model_dump()
    data.update(overview_type=overview_type, players=players)
    return _validated(data)


def reorder_players(record: TournamentRecord, new_order: list[str]) -> TournamentRecord:
    """Replace the player order (same ids, new sequence)."""
    data = record.model_dump()
    data['player_order'] = list(new_order)
    return _validated(data)


def bulk_reorder(record: TournamentRecord, assignments: dict[int, str], rng: Optional[random.Random] = None) -> TournamentRecord:
    """
    Place players at chosen positions; the rest fill the open positions in
    shuffled order.

    Args:
        assignments: Position index -> player id
        rng: Random source for the shuffle (module random if omitted)
    """
    assigned = set(assignments.values())
    unassigned = [pid for pid in record.player_order if pid not in assigned]
    (rng or random).shuffle(unassigned)

    remaining = iter(unassigned)
    new_order = []
    for index in range(len(record.player_order)):
        pid = assignments.get(index)
        new_order.append(pid if pid else next(remaining, None))

    if None in new_order:
        raise RecordValidationError(['Assignments leave positions without a player'])
    return reorder_players(record, new_order)


def _replace_player(record: TournamentRecord, player_id: str, data: dict) -> Player:
    if player_id not in record.players:
        raise RecordValidationError([f'Unknown player: {player_id}'])

    try:
        player = Player.model_validate(data)
    except ValidationError as e:
        raise RecordValidationError([err['msg'] for err in e.errors()]) from e

    previous = record.players[player_id]
    record.players[player_id] = player
    errors = validate_record(record)
    if errors:
        record.players[player_id] = previous
        raise RecordValidationError(errors)
    return player


def update_player(record: TournamentRecord, player_id: str, **changes) -> Player:
    """
    Update fields of one player in place.

    Raises:
        RecordValidationError: If the player is unknown or the change would
            break the record (the record is left unchanged)
    """
    if 'id' in changes and changes['id'] != player_id:
        raise RecordValidationError(['Player id cannot be changed'])
    current = record.players.get(player_id)
    if current is None:
        raise RecordValidationError([f'Unknown player: {player_id}'])
    return _replace_player(record, player_id, {**current.model_dump(), **changes})


def clear_player(record: TournamentRecord, player_id: str) -> Player:
    """Reset a player's name, flags and team; position attributes are kept."""
    return update_player(record, player_id, name='', flags=[''], team=[p.model_dump() for p in empty_team()])


def _resolve_species(
    slot, resolver: Optional[SpeciesResolver], player_name: str, diagnostics: list[str]
) -> str:
    if not slot.species_key or resolver is None:
        return slot.species_key

    try:
        species_id = resolver.canonical_species_id(slot.species_key)
    except UpstreamError as e:
        diagnostics.append(f'Player "{player_name}": species lookup unavailable ({e}), kept "{slot.species_key}"')
        return slot.species_key

    if not species_id:
        diagnostics.append(f'Player "{player_name}": Could not find Pokemon "{slot.species_key}"')
        return ''
    return species_id


def merge_import_records(
    record: TournamentRecord,
    records: list[ImportRecord],
    resolver: Optional[SpeciesResolver] = None,
    start_index: int = 0,
) -> list[str]:
    """
    Fill players in order from imported records.

    Records go to the players at player_order[start_index:], as many as fit.
    A record without a flag gets the known flags for its name, if any. With
    a resolver, species keys are mapped to index species ids; unknown
    species become empty slots.

    Returns:
        Diagnostics (unresolved species, records that did not fit)
    """
    diagnostics: list[str] = []
    targets = record.player_order[start_index:]

    if len(records) > len(targets):
        diagnostics.append(f'{len(records) - len(targets)} imported players did not fit and were skipped')

    for player_id, imported in zip(targets, records):
        flags = [f for f in imported.flags if f][:2] or get_flags_for_player(imported.name) or ['']

        team = []
        for slot in imported.team[:TEAM_SIZE]:
            species_id = _resolve_species(slot, resolver, imported.name, diagnostics)
            team.append({'id': species_id, 'is_shadow': slot.is_shadow if species_id else False})
        while len(team) < TEAM_SIZE:
            team.append({'id': '', 'is_shadow': False})

        changes = {'name': imported.name, 'flags': flags, 'team': team}
        current = record.players[player_id]
        if imported.group and current.group is not None:
            changes['group'] = imported.group
        if imported.bracket_side and current.bracket_side is not None:
            changes['bracket_side'] = imported.bracket_side

        try:
            update_player(record, player_id, **changes)
        except RecordValidationError as e:
            diagnostics.append(f'Player "{imported.name}": {e}')

    logger.info(f'Merged {min(len(records), len(targets))} imported players ({len(diagnostics)} diagnostics)')
    return diagnostics


def _find_roster_player(name: str, roster: list[RosterPlayer]) -> Optional[RosterPlayer]:
    target = name.strip().lower()
    for entry in roster:
        candidates = (
            entry.screen_name.lower(),
            f'{entry.first_name} {entry.last_name}'.lower(),
            entry.first_name.lower(),
            entry.last_name.lower(),
        )
        if target in candidates:
            return entry
    return None


def apply_roster_flags(record: TournamentRecord, roster: list[RosterPlayer]) -> dict[str, list[str]]:
    """
    Set flags from a scraped roster for players whose name matches.

    Matches by screen name, "first last", first name or last name
    (case-insensitive). Known player flag mappings win over the roster
    country; "UK" becomes "GB".

    Returns:
        Player id -> flags that were applied
    """
    applied = {}
    for player_id in record.player_order:
        player = record.players[player_id]
        if not player.name.strip():
            continue

        entry = _find_roster_player(player.name, roster)
        if entry is None or not entry.country:
            continue

        flags = get_flags_for_player(player.name)
        if flags is None:
            code = entry.country.strip().upper()
            flags = [COUNTRY_CODE_NORMALIZE.get(code, code)]

        try:
            update_player(record, player_id, flags=flags)
        except RecordValidationError as e:
            logger.warning(f'Roster flags for {player.name} rejected: {e}')
            continue
        applied[player_id] = flags

    logger.info(f'Applied roster flags to {len(applied)} players')
    return applied


def sort_player_teams(record: TournamentRecord, index: Optional[SpeciesIndex] = None) -> None:
    """Reorder every team by tournament usage, then type preference."""
    index = index or SpeciesIndex()
    usage_counts = calculate_usage_counts(p.team for p in record.players.values())

    def lookup(species_id):
        try:
            return index.get_pokemon_by_id(species_id)
        except UpstreamError:
            return None

    for player_id in record.player_order:
        player = record.players[player_id]
        player.team = sort_team(player.team, lookup, usage_counts)
