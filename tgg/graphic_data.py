"""Compose a tournament record into the render-ready graphic description."""

import logging
from dataclasses import asdict, dataclass, field, replace
from typing import Any, Optional

from pydantic import ValidationError

from .bracket import generate_bracket
from .config import get_usage_top_n
from .layout import (
    LAYOUTS,
    bracket_slots_from_placements,
    column_of,
    partition_players,
    resolve_bracket_positions,
)
from .models import ErrorCategory, OperationResult, ResolvedBracketPositions, SpriteAsset, UsageStat
from .schemas import TournamentRecord
from .sprites import SpeciesResolver
from .usage import calculate_usage_stats

logger = logging.getLogger('tgg.graphic_data')


@dataclass(frozen=True)
class GraphicPokemon:
    """A resolved team slot."""
    name: str  # Display name, empty for an unfilled slot
    species_id: str
    is_shadow: bool
    sprite: SpriteAsset


@dataclass(frozen=True)
class GraphicPlayer:
    """A player as shown on the graphic."""
    id: str
    name: str
    bracket_side: str
    group: str
    placement: Any
    flags: tuple[str, ...]
    team: tuple[GraphicPokemon, ...]


@dataclass(frozen=True)
class ColumnGroup:
    """A positional block of players and the wrapper of its column."""
    name: str
    column: str
    players: tuple[GraphicPlayer, ...]
    wrapper: Optional[dict] = None


@dataclass(frozen=True)
class GraphicData:
    """
    Render-ready description of one tournament graphic.

    Frozen, and built from tuples and frozen dataclasses, except the plain
    dict fields (column_wrappers, bracket_labels, event_date_range, the
    entries of bracket_matches and ColumnGroup.wrapper). Those are dumped
    from the record on every conversion and never shared with it, so
    editing them cannot change the record.
    """
    title_lines: tuple[str, ...]
    event_year: str
    event_type: str
    overview_type: str
    player_count: int
    players: tuple[GraphicPlayer, ...]
    usage_stats: tuple[UsageStat, ...]
    column_groups: tuple[ColumnGroup, ...] = ()
    bracket_positions: Optional[ResolvedBracketPositions] = None
    bracket_matches: tuple[dict, ...] = ()
    column_wrappers: dict = field(default_factory=dict)
    bracket_labels: dict = field(default_factory=dict)
    event_date_range: dict = field(default_factory=dict)
    diagnostics: tuple[str, ...] = ()


def _resolve_slot(slot, resolver: SpeciesResolver, cache: dict, diagnostics: list[str]) -> GraphicPokemon:
    if not slot.id:
        return GraphicPokemon(name='', species_id='', is_shadow=slot.is_shadow, sprite=SpriteAsset(key=''))

    if slot.id not in cache:
        sprite = resolver.resolve(slot.id)
        if not sprite.found:
            diagnostics.append(f'Pokemon not found: {slot.id}')
        cache[slot.id] = (resolver.display_name_for(slot.id), sprite)

    name, sprite = cache[slot.id]
    return GraphicPokemon(name=name, species_id=slot.id, is_shadow=slot.is_shadow, sprite=sprite)


def convert_to_graphic_data(
    record: TournamentRecord,
    resolver: Optional[SpeciesResolver] = None,
    top_n: Optional[int] = None,
) -> GraphicData:
    """
    Convert a validated tournament record into graphic data.

    Players follow the player order, with empty flag entries dropped and each
    team slot resolved to a display name and sprite. Usage is ranked over all
    players. Column groups are built for the 16 and 64 player layouts;
    bracket positions and matches only for the Bracket overview.

    Args:
        record: Validated tournament record
        resolver: Species resolver (a fresh one with the configured
            indexes if omitted)
        top_n: Usage ranking length (config value if omitted)

    Returns:
        GraphicData
    """
    resolver = resolver or SpeciesResolver()
    if top_n is None:
        top_n = get_usage_top_n()
    diagnostics: list[str] = []
    resolved: dict = {}

    players = []
    for player_id in record.player_order:
        player = record.players[player_id]
        players.append(GraphicPlayer(
            id=player.id,
            name=player.name or '',
            bracket_side=player.bracket_side or 'Winners',
            group=player.group or 'A',
            placement=player.placement,
            flags=tuple(f for f in player.flags if f),
            team=tuple(_resolve_slot(slot, resolver, resolved, diagnostics) for slot in player.team),
        ))

    usage = calculate_usage_stats(players, top_n=top_n)
    wrappers = {cid: w.model_dump() for cid, w in record.column_wrappers.items()}

    column_groups = []
    if record.player_count in LAYOUTS:
        for name, group in partition_players(players, record.player_count).items():
            column = column_of(name)
            column_groups.append(ColumnGroup(
                name=name, column=column, players=tuple(group), wrapper=wrappers.get(column)
            ))

    bracket_positions = None
    bracket_matches = ()
    if record.overview_type == 'Bracket':
        slot_map = record.bracket_positions or bracket_slots_from_placements(record.player_order, record.players)
        bracket_positions = resolve_bracket_positions(slot_map, record.players)
        matches = record.bracket_matches or generate_bracket(
            record.player_order, record.players, record.bracket_reset
        )
        bracket_matches = tuple(m.model_dump() for m in matches)

    if diagnostics:
        logger.info(f'{len(diagnostics)} species could not be resolved')

    return GraphicData(
        title_lines=tuple(record.title_lines),
        event_year=record.event_year,
        event_type=record.event_type,
        overview_type=record.overview_type,
        player_count=record.player_count,
        players=tuple(players),
        usage_stats=tuple(usage),
        column_groups=tuple(column_groups),
        bracket_positions=bracket_positions,
        bracket_matches=bracket_matches,
        column_wrappers=wrappers,
        bracket_labels=record.bracket_labels.model_dump(),
        event_date_range=record.event_date_range.model_dump(),
        diagnostics=tuple(diagnostics),
    )


def split_graphic_data_for_64(data: GraphicData) -> tuple[GraphicData, GraphicData]:
    """
    Split Top 64 graphic data into the Winners and Losers graphics.

    Both halves keep the usage ranking of the full 64 players.
    """
    if data.player_count != 64:
        raise ValueError(f'Expected 64 player graphic data, got {data.player_count}')

    def half(players, side):
        return replace(
            data,
            players=tuple(players),
            column_groups=tuple(g for g in data.column_groups if g.name.startswith(side)),
        )

    return half(data.players[:32], 'winners'), half(data.players[32:], 'losers')


def build_graphic(document: Any, resolver: Optional[SpeciesResolver] = None) -> OperationResult:
    """
    Validate a tournament document and compose its graphic data.

    Args:
        document: TournamentRecord or a plain dict in snapshot form

    Returns:
        OperationResult with GraphicData on success; a validation failure
        for a broken record, malformed input for anything else
    """
    if isinstance(document, TournamentRecord):
        record = document
    elif isinstance(document, dict):
        try:
            record = TournamentRecord.model_validate(document)
        except ValidationError as e:
            logger.error(f'Tournament record rejected: {e.error_count()} error(s)')
            return OperationResult.fail(ErrorCategory.VALIDATION_FAILURE, str(e))
    else:
        return OperationResult.fail(
            ErrorCategory.MALFORMED_INPUT, f'Expected a tournament document, got {type(document).__name__}'
        )

    return OperationResult.ok(convert_to_graphic_data(record, resolver))


def graphic_to_dict(data: GraphicData) -> dict:
    """Plain dict form of graphic data for JSON output."""
    return asdict(data)
