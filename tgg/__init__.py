from .models import (
    ErrorCategory,
    OperationResult,
    TeamSlot,
    ImportRecord,
    ImportResult,
    UsageStat,
    SpriteAsset,
    ResolvedBracketPositions,
)
from .schemas import TournamentRecord, Player, Pokemon, ColumnWrapperConfig
from .normalizer import normalize_species_name, species_key, display_name
from .csv_import import IMPORT_FORMATS, parse_teams_csv, parse_teams_xlsx
from .rk9_import import (
    import_team_list,
    import_roster,
    parse_team_list_html,
    parse_roster_html,
    team_list_to_import_record,
)
from .pokemon_data import SpeciesIndex, SingleFlightCache
from .sprites import SpeciesResolver, local_sprite_path, remote_sprite_url
from .usage import calculate_usage_stats, get_top_usage, calculate_usage_percentage
from .layout import partition_players, split_halves_64, resolve_bracket_positions
from .bracket import generate_bracket, validate_bracket
from .graphic_data import (
    GraphicData,
    convert_to_graphic_data,
    split_graphic_data_for_64,
    build_graphic,
    graphic_to_dict,
)
from .tournament import (
    create_default_tournament,
    resize_tournament,
    merge_import_records,
    apply_roster_flags,
    set_overview_type,
    reorder_players,
    bulk_reorder,
    update_player,
    clear_player,
    sort_player_teams,
)
from .snapshot import export_snapshot, import_snapshot, save_snapshot, load_snapshot

__all__ = [
    # Models
    'ErrorCategory',
    'OperationResult',
    'TeamSlot',
    'ImportRecord',
    'ImportResult',
    'UsageStat',
    'SpriteAsset',
    'ResolvedBracketPositions',
    'TournamentRecord',
    'Player',
    'Pokemon',
    'ColumnWrapperConfig',
    # Names
    'normalize_species_name',
    'species_key',
    'display_name',
    # Importers
    'IMPORT_FORMATS',
    'parse_teams_csv',
    'parse_teams_xlsx',
    'import_team_list',
    'import_roster',
    'parse_team_list_html',
    'parse_roster_html',
    'team_list_to_import_record',
    # Species resolution
    'SpeciesIndex',
    'SingleFlightCache',
    'SpeciesResolver',
    'local_sprite_path',
    'remote_sprite_url',
    # Usage
    'calculate_usage_stats',
    'get_top_usage',
    'calculate_usage_percentage',
    # Layout / bracket
    'partition_players',
    'split_halves_64',
    'resolve_bracket_positions',
    'generate_bracket',
    'validate_bracket',
    # Graphic data
    'GraphicData',
    'convert_to_graphic_data',
    'split_graphic_data_for_64',
    'build_graphic',
    'graphic_to_dict',
    # Record operations
    'create_default_tournament',
    'resize_tournament',
    'merge_import_records',
    'apply_roster_flags',
    'set_overview_type',
    'reorder_players',
    'bulk_reorder',
    'update_player',
    'clear_player',
    'sort_player_teams',
    'export_snapshot',
    'import_snapshot',
    'save_snapshot',
    'load_snapshot',
]
