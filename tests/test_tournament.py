"""Tests for tournament record operations."""

import random
from unittest.mock import Mock

import pytest

from tgg.exceptions import RecordValidationError, UpstreamError
from tgg.models import ImportRecord, RosterPlayer, TeamSlot
from tgg.pokemon_data import SpeciesIndex
from tgg.pokemon_sort import NO_MATCH_SCORE, calculate_sort_score
from tgg.schemas import Pokemon
from tgg.sprites import SpeciesResolver
from tgg.tournament import (
    apply_roster_flags,
    bulk_reorder,
    clear_player,
    create_default_tournament,
    get_flags_for_player,
    merge_import_records,
    reorder_players,
    resize_tournament,
    set_overview_type,
    sort_player_teams,
    update_player,
)


def team(*keys, shadows=()):
    return [TeamSlot(species_key=k, is_shadow=i in shadows) for i, k in enumerate(keys)]


class TestCreateDefault:
    """Tests for create_default_tournament."""

    def test_usage_defaults(self):
        record = create_default_tournament(16, 'Usage')
        assert record.player_order == [f'player-{i}' for i in range(1, 17)]
        first = record.players['player-1']
        assert first.flags == ['']
        assert len(first.team) == 6
        assert (first.bracket_side, first.group) == ('Winners', 'A')
        assert first.placement is None
        assert set(record.column_wrappers) == {'winners1', 'winners2', 'losers1', 'losers2'}

    def test_bracket_defaults(self):
        record = create_default_tournament(16, 'Bracket')
        placements = [record.players[pid].placement for pid in record.player_order]
        assert placements[:5] == [1, 2, 3, 4, '5-8']
        assert placements[-1] == '9-16'
        assert record.players['player-1'].group is None

    def test_64_has_ten_wrappers(self):
        record = create_default_tournament(64)
        assert len(record.column_wrappers) == 10
        assert record.players['player-33'].bracket_side == 'Losers'

    def test_labels(self):
        record = create_default_tournament(8)
        assert record.bracket_labels.winners.text == 'Winners Bracket'
        assert record.bracket_labels.losers.enabled is True
        assert record.title_lines == ['', '', '']


class TestResize:
    """Tests for resize_tournament."""

    def test_grow(self):
        record = create_default_tournament(8)
        record.players['player-1'].name = 'Jinz'
        bigger = resize_tournament(record, 16)
        assert len(bigger.player_order) == 16
        assert bigger.players['player-1'].name == 'Jinz'
        assert bigger.players['player-16'].bracket_side == 'Losers'

    def test_shrink(self):
        smaller = resize_tournament(create_default_tournament(8, 'Bracket'), 4)
        assert smaller.player_order == ['player-1', 'player-2', 'player-3', 'player-4']
        assert set(smaller.players) == set(smaller.player_order)

    def test_shrink_drops_stale_positions(self):
        record = create_default_tournament(8, 'Bracket')
        record.bracket_positions.update(first='player-1', fifth1='player-5')
        smaller = resize_tournament(record, 4)
        assert smaller.bracket_positions == {'first': 'player-1'}

    def test_to_64_is_fresh(self):
        record = create_default_tournament(16)
        record.players['player-1'].name = 'Jinz'
        big = resize_tournament(record, 64)
        assert len(big.players) == 64
        assert big.players['player-1'].name == ''
        assert len(big.column_wrappers) == 10

    def test_same_size_is_noop(self):
        record = create_default_tournament(16)
        assert resize_tournament(record, 16) is record


class TestOverviewAndOrder:
    """Tests for overview switching and reordering."""

    def test_switch_to_bracket(self):
        record = create_default_tournament(8, 'Usage')
        switched = set_overview_type(record, 'Bracket')
        assert switched.overview_type == 'Bracket'
        assert switched.players['player-1'].placement == 1

    def test_switch_to_usage(self):
        record = create_default_tournament(8, 'Bracket')
        switched = set_overview_type(record, 'Usage')
        assert switched.players['player-5'].bracket_side == 'Losers'

    def test_reorder(self):
        record = create_default_tournament(4)
        reordered = reorder_players(record, ['player-4', 'player-3', 'player-2', 'player-1'])
        assert reordered.player_order[0] == 'player-4'

    def test_reorder_rejects_duplicates(self):
        record = create_default_tournament(4)
        with pytest.raises(RecordValidationError):
            reorder_players(record, ['player-1'] * 4)

    def test_bulk_reorder(self):
        record = create_default_tournament(8)
        reordered = bulk_reorder(record, {0: 'player-8', 1: 'player-7'}, rng=random.Random(0))
        assert reordered.player_order[:2] == ['player-8', 'player-7']
        assert sorted(reordered.player_order) == sorted(record.player_order)


class TestUpdatePlayer:
    """Tests for in-place player updates."""

    def test_update(self, record_16):
        update_player(record_16, 'player-2', name='Walker', flags=['TW'])
        assert record_16.players['player-2'].name == 'Walker'
        assert record_16.players['player-2'].flags == ['TW']

    def test_invalid_change_leaves_record(self, record_16):
        with pytest.raises(RecordValidationError):
            update_player(record_16, 'player-2', flags=['TW', 'JP', 'US'])
        assert record_16.players['player-2'].flags == ['']

    def test_record_rule_rolls_back(self):
        record = create_default_tournament(8, 'Bracket')
        with pytest.raises(RecordValidationError, match='placement distribution'):
            update_player(record, 'player-2', placement=1)
        assert record.players['player-2'].placement == 2

    def test_unknown_player(self, record_16):
        with pytest.raises(RecordValidationError, match='Unknown player'):
            update_player(record_16, 'ghost', name='x')

    def test_id_is_fixed(self, record_16):
        with pytest.raises(RecordValidationError):
            update_player(record_16, 'player-1', id='player-99')

    def test_clear(self, record_16):
        update_player(record_16, 'player-1', name='Jinz', flags=['AU', 'JP'],
                      team=[Pokemon(id='altaria')] + [Pokemon()] * 5)
        clear_player(record_16, 'player-1')
        player = record_16.players['player-1']
        assert (player.name, player.flags, player.team[0].id) == ('', [''], '')
        assert player.group == 'A'


class TestMergeImportRecords:
    """Tests for merging imported players."""

    def test_fills_in_order(self, record_16):
        records = [
            ImportRecord(name='MartoGalde', flags=['AR'], team=team('azumarill', 'scizor', shadows=(1,))),
            ImportRecord(name='Walker', flags=['TW'], team=team('altaria')),
        ]
        diagnostics = merge_import_records(record_16, records)
        assert diagnostics == []
        first = record_16.players['player-1']
        assert first.name == 'MartoGalde'
        assert [p.id for p in first.team] == ['azumarill', 'scizor', '', '', '', '']
        assert first.team[1].is_shadow is True
        assert record_16.players['player-2'].name == 'Walker'
        assert record_16.players['player-3'].name == ''

    def test_start_index(self, record_16):
        merge_import_records(record_16, [ImportRecord(name='Walker', team=team())], start_index=5)
        assert record_16.players['player-6'].name == 'Walker'

    def test_known_flags_when_missing(self, record_16):
        merge_import_records(record_16, [ImportRecord(name='jinz', team=team())])
        assert record_16.players['player-1'].flags == ['AU', 'JP']

    def test_no_flag_stays_blank(self, record_16):
        merge_import_records(record_16, [ImportRecord(name='Nobody', team=team())])
        assert record_16.players['player-1'].flags == ['']

    def test_overflow_reported(self):
        record = create_default_tournament(4)
        records = [ImportRecord(name=f'P{i}', team=team()) for i in range(6)]
        diagnostics = merge_import_records(record, records)
        assert diagnostics == ['2 imported players did not fit and were skipped']
        assert record.players['player-4'].name == 'P3'

    def test_group_from_import(self, record_16):
        merge_import_records(record_16, [
            ImportRecord(name='Jinz', team=team(), group='H', bracket_side='Losers'),
        ])
        player = record_16.players['player-1']
        assert (player.group, player.bracket_side) == ('H', 'Losers')

    def test_resolver_maps_species(self, record_16, resolver):
        records = [ImportRecord(name='Jinz', flags=['AU'], team=team('azumaril', 'corsola_galarian', 'altaria'))]
        diagnostics = merge_import_records(record_16, records, resolver=resolver)
        assert [p.id for p in record_16.players['player-1'].team[:3]] == ['azumarill', '', 'altaria']
        assert diagnostics == ['Player "Jinz": Could not find Pokemon "corsola_galarian"']

    def test_resolver_unavailable_keeps_key(self, record_16):
        def failing():
            raise UpstreamError('down')

        resolver = SpeciesResolver(SpeciesIndex(remote_loader=failing, local_loader=lambda: []))
        diagnostics = merge_import_records(
            record_16, [ImportRecord(name='Jinz', team=team('altaria'))], resolver=resolver,
        )
        assert record_16.players['player-1'].team[0].id == 'altaria'
        assert len(diagnostics) == 1

    def test_failed_index_fetch_not_retried_per_species(self, record_16):
        """Test one failed metadata fetch serves every species in the import."""
        loader = Mock(side_effect=UpstreamError('down'))
        resolver = SpeciesResolver(SpeciesIndex(remote_loader=loader, local_loader=lambda: []))
        records = [
            ImportRecord(name=f'P{i}', team=team('altaria', 'azumarill', 'scizor', 'medicham'))
            for i in range(8)
        ]
        diagnostics = merge_import_records(record_16, records, resolver=resolver)
        assert loader.call_count == 1
        assert len(diagnostics) == 32
        assert record_16.players['player-8'].team[3].id == 'medicham'


class TestRosterFlags:
    """Tests for roster flag import."""

    ROSTER = [
        RosterPlayer('Ho', 'Kassasin', 'hkassasin', 'UK'),
        RosterPlayer('Mario', 'Rossi', '', 'IT'),
        RosterPlayer('Ann', 'Lee', 'annl', 'UK'),
        RosterPlayer('No', 'Country', 'nocountry', ''),
    ]

    def test_matching(self, record_16):
        for pid, name in [('player-1', 'Mario Rossi'), ('player-2', 'annl'), ('player-3', 'Ann'),
                          ('player-4', 'nocountry'), ('player-5', 'stranger')]:
            record_16.players[pid].name = name

        applied = apply_roster_flags(record_16, self.ROSTER)
        assert applied == {'player-1': ['IT'], 'player-2': ['GB'], 'player-3': ['GB']}
        assert record_16.players['player-5'].flags == ['']

    def test_known_flags_win(self, record_16):
        record_16.players['player-1'].name = 'hkassasin'
        apply_roster_flags(record_16, self.ROSTER)
        assert record_16.players['player-1'].flags == ['HK', 'GB']

    def test_get_flags_for_player(self):
        assert get_flags_for_player('  SSTHORN ') == ['CO', 'CA']
        assert get_flags_for_player('nobody') is None


class TestSortTeams:
    """Tests for team sorting across the record."""

    def test_usage_then_type(self, record_16, species_index):
        update_player(record_16, 'player-1', team=[
            Pokemon(id='medicham'), Pokemon(id='altaria'), Pokemon(), Pokemon(id='registeel'),
            Pokemon(id='stunfisk', is_shadow=True), Pokemon(id='lanturn'),
        ])
        update_player(record_16, 'player-2', team=[Pokemon(id='lanturn')] + [Pokemon()] * 5)

        sort_player_teams(record_16, species_index)
        ids = [p.id for p in record_16.players['player-1'].team]
        assert ids == ['lanturn', 'stunfisk', 'registeel', 'altaria', 'medicham', '']
        assert record_16.players['player-1'].team[1].is_shadow is True

    def test_sort_score(self, species_index):
        assert calculate_sort_score(species_index.get_pokemon_by_id('marowak')) == 0
        assert calculate_sort_score(species_index.get_pokemon_by_id('corviknight')) == 100
        assert calculate_sort_score(species_index.get_pokemon_by_id('azumarill')) == 301
        assert calculate_sort_score(species_index.get_pokemon_by_id('lanturn')) == NO_MATCH_SCORE
        assert calculate_sort_score(None) == NO_MATCH_SCORE
