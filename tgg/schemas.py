"""Pydantic schemas for the canonical tournament record and configuration."""

from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .constants import COLUMN_IDS_64, POKEMON_DATA_URL, RK9_USER_AGENT
from .validators import validate_flags, validate_record, validate_team

Placement = Literal[1, 2, 3, 4, '5-8', '9-16', '17-24', '25-32', '33-64']
BracketGroup = Literal[
    'A', 'B', 'C', 'D', 'E', 'F', 'G', 'H', 'I', 'J', 'K', 'L', 'M', 'N', 'O', 'P'
]


class Pokemon(BaseModel):
    """One team slot. An empty id is an unfilled slot."""

    id: str = ''
    is_shadow: bool = False

    class Config:
        extra = 'forbid'


class Player(BaseModel):
    """Player entry of the canonical record."""

    id: str = Field(..., min_length=1)
    name: str = ''
    placement: Optional[Placement] = None
    bracket_side: Optional[Literal['Winners', 'Losers']] = None
    group: Optional[BracketGroup] = None
    team: list[Pokemon]
    flags: list[str]

    @field_validator('team')
    @classmethod
    def validate_team_size(cls, v):
        """Ensure the team has exactly six slots."""
        errors = validate_team(v)
        if errors:
            raise ValueError(errors[0])
        return v

    @field_validator('flags')
    @classmethod
    def validate_flag_codes(cls, v):
        """Ensure 1-2 ISO alpha-2 flags."""
        errors = validate_flags(v)
        if errors:
            raise ValueError('; '.join(errors))
        return v

    class Config:
        extra = 'forbid'


class BracketMatch(BaseModel):
    """A match in the double elimination bracket."""

    id: str
    round: int = Field(..., gt=0)
    is_winners_bracket: bool
    player1_id: Optional[str] = None
    player2_id: Optional[str] = None
    winner_id: Optional[str] = None
    is_grand_finals: bool = False
    is_grand_finals_reset: bool = False

    class Config:
        extra = 'forbid'


class BracketPairing(BaseModel):
    """Group pairing shown in Usage mode (e.g. Winners A vs Winners H)."""

    id: str
    group1: BracketGroup
    group2: BracketGroup
    description: Optional[str] = None

    class Config:
        extra = 'forbid'


class ColumnWrapperConfig(BaseModel):
    """Presentation instruction for one column region."""

    mode: Literal['lines', 'wrapper', 'hidden'] = 'lines'
    text: str = ''

    class Config:
        extra = 'forbid'


class BracketLabelConfig(BaseModel):
    """Header label for one bracket side."""

    enabled: bool = True
    text: str = ''

    class Config:
        extra = 'forbid'


class BracketLabels(BaseModel):
    """Labels for the Winners/Losers bracket headers."""

    winners: BracketLabelConfig = Field(
        default_factory=lambda: BracketLabelConfig(text='Winners Bracket')
    )
    losers: BracketLabelConfig = Field(
        default_factory=lambda: BracketLabelConfig(text='Losers Bracket')
    )

    class Config:
        extra = 'forbid'


class EventDateRange(BaseModel):
    """Event dates as entered in the form (ISO dates or empty)."""

    start_date: str = ''
    end_date: str = ''

    class Config:
        extra = 'forbid'


class TournamentRecord(BaseModel):
    """Canonical tournament record: players, their order and display config."""

    title_lines: list[str] = Field(default_factory=lambda: ['', '', ''], min_length=3, max_length=3)
    event_year: str = ''
    event_type: Literal['Regional', 'Generic', 'International', 'Worlds'] = 'Regional'
    overview_type: Literal['Usage', 'Bracket', 'None'] = 'Usage'
    player_count: Literal[4, 8, 16, 32, 64] = 16
    bracket_reset: bool = False
    players: dict[str, Player]
    player_order: list[str]
    bracket_matches: list[BracketMatch] = Field(default_factory=list)
    bracket_pairings: list[BracketPairing] = Field(default_factory=list)
    bracket_positions: dict[str, Optional[str]] = Field(default_factory=dict)
    column_wrappers: dict[str, ColumnWrapperConfig] = Field(default_factory=dict)
    bracket_labels: BracketLabels = Field(default_factory=BracketLabels)
    event_date_range: EventDateRange = Field(default_factory=EventDateRange)

    @field_validator('column_wrappers')
    @classmethod
    def validate_column_ids(cls, v):
        """Ensure all column ids are known."""
        for column_id in v:
            if column_id not in COLUMN_IDS_64:
                raise ValueError(f'Invalid column id: {column_id}')
        return v

    @model_validator(mode='after')
    def validate_structure(self):
        """Ensure order/map consistency, size and placement rules."""
        errors = validate_record(self)
        if errors:
            raise ValueError('; '.join(errors))
        return self

    class Config:
        extra = 'forbid'


class GraphicConfig(BaseModel):
    """Pipeline configuration settings."""

    pokemon_data_url: str = POKEMON_DATA_URL
    local_asset_dir: Optional[str] = None
    request_timeout: float = Field(10.0, gt=0, le=120)
    max_response_bytes: int = Field(2_000_000, ge=1024)
    user_agent: str = RK9_USER_AGENT
    usage_top_n: int = Field(12, ge=1, le=64)

    class Config:
        extra = 'forbid'

