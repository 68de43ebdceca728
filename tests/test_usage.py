"""Tests for usage statistics."""

from types import SimpleNamespace

import pytest

from tgg.schemas import Pokemon
from tgg.usage import (
    calculate_usage_counts,
    calculate_usage_percentage,
    calculate_usage_stats,
    get_top_usage,
)


def make_player(*names, shadows=()):
    """Player stand-in whose team slots carry display names."""
    team = [SimpleNamespace(name=n, is_shadow=i in shadows) for i, n in enumerate(names)]
    return SimpleNamespace(team=team)


class TestUsageStats:
    """Tests for calculate_usage_stats."""

    def test_tie_keeps_first_seen_order(self):
        """Test [A: Foo, Bar] and [B: Bar, Foo] count 2 each, Foo first."""
        players = [make_player('Foo', 'Bar'), make_player('Bar', 'Foo')]
        stats = calculate_usage_stats(players)
        assert [(s.pokemon, s.count) for s in stats] == [('Foo', 2), ('Bar', 2)]

    def test_sorted_by_count(self):
        players = [make_player('Foo', 'Bar'), make_player('Bar', 'Baz'), make_player('Bar')]
        stats = calculate_usage_stats(players)
        assert [s.pokemon for s in stats] == ['Bar', 'Foo', 'Baz']

    def test_case_insensitive_grouping(self):
        """Test names group case-insensitively, keeping the first spelling."""
        players = [make_player('Moltres (Galarian)'), make_player('moltres (galarian)')]
        stats = calculate_usage_stats(players)
        assert len(stats) == 1
        assert stats[0].pokemon == 'Moltres (Galarian)'
        assert stats[0].count == 2

    def test_shadow_count(self):
        players = [make_player('Altaria', shadows=(0,)), make_player('Altaria')]
        stats = calculate_usage_stats(players)
        assert (stats[0].count, stats[0].shadow_count) == (2, 1)

    def test_empty_slots_skipped(self):
        players = [make_player('', 'Altaria', '  ')]
        stats = calculate_usage_stats(players)
        assert [s.pokemon for s in stats] == ['Altaria']

    def test_record_slots_use_species_id(self):
        player = SimpleNamespace(team=[Pokemon(id='altaria'), Pokemon(id='')])
        stats = calculate_usage_stats([player])
        assert [s.pokemon for s in stats] == ['altaria']

    def test_top_n(self):
        players = [make_player(*[f'Mon{i}' for i in range(6)]) for _ in range(3)]
        players.append(make_player(*[f'Other{i}' for i in range(6)]))
        players.append(make_player(*[f'Extra{i}' for i in range(6)]))
        assert len(get_top_usage(players)) == 12
        assert len(get_top_usage(players, top_n=3)) == 3
        assert len(calculate_usage_stats(players)) == 18


class TestUsageHelpers:
    """Tests for percentage and per-id counts."""

    def test_percentage(self):
        assert calculate_usage_percentage(4, 16) == pytest.approx(25.0)
        assert calculate_usage_percentage(3, 0) == 0.0

    def test_counts_by_id(self):
        teams = [
            [Pokemon(id='altaria'), Pokemon(id='medicham'), Pokemon()],
            [Pokemon(id='altaria', is_shadow=True)],
        ]
        assert calculate_usage_counts(teams) == {'altaria': 2, 'medicham': 1}
