"""Pokemon usage statistics across a tournament."""

from typing import Iterable, Optional

from .constants import DEFAULT_TOP_N
from .models import UsageStat


def _slot_name(slot) -> str:
    # Composed slots carry a display name; record slots only a species id
    return getattr(slot, 'name', None) or getattr(slot, 'id', '') or ''


def calculate_usage_stats(players: Iterable, top_n: Optional[int] = None) -> list[UsageStat]:
    """
    Count species usage over every player's team.

    Species are grouped by name case-insensitively; the first spelling seen
    is the one reported. Empty slots are skipped. Results are sorted by
    count descending, ties keeping first-encountered order.

    Args:
        players: Players in tournament order, each with a `team` of slots
            exposing `name` (or `id`) and `is_shadow`
        top_n: Truncate to the N most used (None = all)

    Returns:
        List of UsageStat
    """
    names: dict[str, str] = {}
    counts: dict[str, int] = {}
    shadows: dict[str, int] = {}

    for player in players:
        for slot in player.team:
            name = _slot_name(slot).strip()
            if not name:
                continue

            key = name.lower()
            names.setdefault(key, name)
            counts[key] = counts.get(key, 0) + 1
            if slot.is_shadow:
                shadows[key] = shadows.get(key, 0) + 1

    # sorted() is stable, so first-seen order breaks ties
    ranked = sorted(counts, key=lambda key: counts[key], reverse=True)
    stats = [UsageStat(pokemon=names[key], count=counts[key], shadow_count=shadows.get(key, 0)) for key in ranked]
    if top_n is not None:
        stats = stats[:top_n]
    return stats


def get_top_usage(players: Iterable, top_n: int = DEFAULT_TOP_N) -> list[UsageStat]:
    """Get the top N most used Pokemon (default 12)."""
    return calculate_usage_stats(players, top_n=top_n)


def calculate_usage_percentage(count: int, total_players: int) -> float:
    """
    Percentage of players that used a Pokemon (0-100).

    For the renderer; percentages are never stored.
    """
    if total_players == 0:
        return 0.0
    return count / total_players * 100


def calculate_usage_counts(teams: Iterable[Iterable]) -> dict[str, int]:
    """Count usage per species id across teams (empty slots skipped)."""
    counts: dict[str, int] = {}
    for team in teams:
        for slot in team:
            if slot.id:
                counts[slot.id] = counts.get(slot.id, 0) + 1
    return counts
