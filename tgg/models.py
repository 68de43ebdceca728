"""Data models for the tournament graphic pipeline."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorCategory(str, Enum):
    """Failure categories reported by public entry points."""
    MALFORMED_INPUT = 'malformed_input'
    VALIDATION_FAILURE = 'validation_failure'
    RESOLUTION_MISS = 'resolution_miss'
    UPSTREAM_FAILURE = 'upstream_failure'
    INVALID_URL = 'invalid_url'
    UNPARSEABLE_PAGE = 'unparseable_page'


@dataclass
class OperationResult:
    """Success value or discriminated failure returned by public operations."""
    success: bool
    data: Any = None
    error: Optional[str] = None
    category: Optional[ErrorCategory] = None
    status: Optional[int] = None  # Upstream HTTP status, when there was one

    @classmethod
    def ok(cls, data: Any) -> 'OperationResult':
        return cls(success=True, data=data)

    @classmethod
    def fail(
        cls, category: ErrorCategory, error: str, status: Optional[int] = None
    ) -> 'OperationResult':
        return cls(success=False, error=error, category=category, status=status)


@dataclass
class TeamSlot:
    """One team slot produced by an importer."""
    species_key: str = ''  # Empty string = unfilled slot
    is_shadow: bool = False


@dataclass
class ImportRecord:
    """Unvalidated player produced by an importer, merged by the caller."""
    name: str
    flags: List[str] = field(default_factory=list)
    team: List[TeamSlot] = field(default_factory=list)
    group: Optional[str] = None
    bracket_side: Optional[str] = None


@dataclass
class ImportResult:
    """Importer output: accepted records plus per-row diagnostics."""
    records: List[ImportRecord] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


@dataclass
class PokemonMetadata:
    """Entry of the remote species metadata index."""
    species_name: str
    species_id: str
    sid: int  # Sprite ID for remote image addressing
    types: List[str] = field(default_factory=list)


@dataclass
class TeamListPokemon:
    """Pokemon as found on a scraped team list page."""
    name: str
    is_shadow: bool = False


@dataclass
class TeamListData:
    """Parsed rk9 team list page."""
    player_name: str
    event_name: str
    pokemon: List[TeamListPokemon] = field(default_factory=list)


@dataclass
class RosterPlayer:
    """One row of a scraped rk9 roster page."""
    first_name: str
    last_name: str
    screen_name: str
    country: str  # As shown on the page (e.g. "UK", "IT", "US")


@dataclass(frozen=True)
class UsageStat:
    """Usage of one species across the tournament."""
    pokemon: str  # Display name
    count: int = 0
    shadow_count: int = 0


@dataclass(frozen=True)
class SpriteAsset:
    """Resolved sprite reference. An empty path means "show a placeholder"."""
    key: str
    path: str = ''
    source: str = ''  # 'local', 'remote' or '' on a miss

    @property
    def found(self) -> bool:
        return bool(self.path)


@dataclass(frozen=True)
class ResolvedBracketPositions:
    """Display names for the fixed bracket slots (None = unresolved)."""
    first: Optional[str] = None
    second: Optional[str] = None
    third: Optional[str] = None
    fourth: Optional[str] = None
    fifth1: Optional[str] = None
    fifth2: Optional[str] = None
    fifth3: Optional[str] = None
    fifth4: Optional[str] = None

    def as_dict(self) -> Dict[str, Optional[str]]:
        return {
            'first': self.first,
            'second': self.second,
            'third': self.third,
            'fourth': self.fourth,
            'fifth1': self.fifth1,
            'fifth2': self.fifth2,
            'fifth3': self.fifth3,
            'fifth4': self.fifth4,
        }
