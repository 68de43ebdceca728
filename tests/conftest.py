"""Shared fixtures: an offline species index and tournament records."""

import pytest

from tgg.pokemon_data import SpeciesIndex, parse_pokemon_metadata
from tgg.sprites import SpeciesResolver
from tgg.tournament import create_default_tournament

POKEMON_JSON = [
    {'speciesId': 'altaria', 'speciesName': 'Altaria', 'sid': 334, 'types': ['dragon', 'flying']},
    {'speciesId': 'azumarill', 'speciesName': 'Azumarill', 'sid': 184, 'types': ['water', 'fairy']},
    {'speciesId': 'medicham', 'speciesName': 'Medicham', 'sid': 308, 'types': ['fighting', 'psychic']},
    {'speciesId': 'registeel', 'speciesName': 'Registeel', 'sid': 379, 'types': ['steel', 'none']},
    {'speciesId': 'stunfisk', 'speciesName': 'Stunfisk', 'sid': 618, 'types': ['ground', 'electric']},
    {'speciesId': 'stunfisk_galarian', 'speciesName': 'Stunfisk (Galarian)', 'sid': 1618, 'types': ['ground', 'steel']},
    {'speciesId': 'moltres', 'speciesName': 'Moltres', 'sid': 146, 'types': ['fire', 'flying']},
    {'speciesId': 'moltres_galarian', 'speciesName': 'Moltres (Galarian)', 'sid': 1146, 'types': ['dark', 'flying']},
    {'speciesId': 'corviknight', 'speciesName': 'Corviknight', 'sid': 823, 'types': ['flying', 'steel']},
    {'speciesId': 'scizor', 'speciesName': 'Scizor', 'sid': 212, 'types': ['bug', 'steel']},
    {'speciesId': 'marowak', 'speciesName': 'Marowak', 'sid': 105, 'types': ['ground']},
    {'speciesId': 'lanturn', 'speciesName': 'Lanturn', 'sid': 171, 'types': ['water', 'electric']},
]

# Local sprite files (without extension)
LOCAL_ASSETS = ['Altaria', 'Azumarill', 'Medicham', 'Moltres', 'Stunfisk', 'Stunfisk (Galarian)']


@pytest.fixture
def metadata():
    return parse_pokemon_metadata(POKEMON_JSON)


@pytest.fixture
def species_index(metadata):
    """Species index backed by in-memory loaders."""
    return SpeciesIndex(remote_loader=lambda: metadata, local_loader=lambda: list(LOCAL_ASSETS))


@pytest.fixture
def resolver(species_index):
    return SpeciesResolver(species_index)


@pytest.fixture
def record_16():
    """Blank 16 player Usage record."""
    return create_default_tournament(16, 'Usage')


@pytest.fixture
def named_record_16(record_16):
    """16 player Usage record with players named "Player 1".."Player 16" in order."""
    for index, player_id in enumerate(record_16.player_order):
        record_16.players[player_id].name = f'Player {index + 1}'
    return record_16
