"""Bracket helpers for the Bracket overview.

The bracket is derived from the player order alone (index 0 = 1st place,
1 = 2nd, 2 = 3rd, 3 = 4th, 4-7 = 5th-8th). Only the final matches are
produced: grand finals (with an optional reset), losers finals and winners
finals. The winners finals opponent is always taken to be the 2nd place
player, which is not necessarily who the winner met there; the exact path
through a double elimination bracket cannot be recovered from placements.
"""

import logging

from .schemas import BracketMatch

logger = logging.getLogger('tgg.bracket')

GRAND_FINALS_ROUND = 99
GRAND_FINALS_RESET_ROUND = 100
LOSERS_FINALS_ROUND = 6
WINNERS_FINALS_ROUND = 3


def generate_bracket(player_order: list[str], players: dict, bracket_reset: bool = False) -> list[BracketMatch]:
    """
    Build the final bracket matches from the top 8 of the player order.

    Args:
        player_order: Ordered player ids
        players: Player map (id -> Player)
        bracket_reset: Whether grand finals went to a second set

    Returns:
        List of BracketMatch, empty when fewer than 8 known players are ranked
    """
    top8 = [players[pid] for pid in player_order[:8] if pid in players]
    if len(top8) < 8:
        logger.debug(f'Not enough players for a bracket ({len(top8)} of 8)')
        return []

    first, second, third = top8[0], top8[1], top8[2]

    matches = [
        BracketMatch(
            id='gf-1',
            round=GRAND_FINALS_ROUND,
            is_winners_bracket=False,
            player1_id=first.id,
            player2_id=second.id,
            winner_id=first.id,
            is_grand_finals=True,
        )
    ]

    if bracket_reset:
        matches.append(BracketMatch(
            id='gf-2',
            round=GRAND_FINALS_RESET_ROUND,
            is_winners_bracket=False,
            player1_id=first.id,
            player2_id=second.id,
            winner_id=first.id,
            is_grand_finals=True,
            is_grand_finals_reset=True,
        ))

    matches.append(BracketMatch(
        id='lf-1',
        round=LOSERS_FINALS_ROUND,
        is_winners_bracket=False,
        player1_id=second.id,
        player2_id=third.id,
        winner_id=second.id,
    ))

    matches.append(BracketMatch(
        id='wf-1',
        round=WINNERS_FINALS_ROUND,
        is_winners_bracket=True,
        player1_id=first.id,
        player2_id=second.id,
        winner_id=first.id,
    ))

    return matches


def validate_bracket(matches: list[BracketMatch], players: dict) -> list[str]:
    """
    Check that matches reference known players and winners took part.

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []
    for match in matches:
        for field_name in ('player1_id', 'player2_id', 'winner_id'):
            player_id = getattr(match, field_name)
            if player_id and player_id not in players:
                errors.append(f'Match {match.id}: unknown {field_name} {player_id!r}')

        if match.winner_id and match.winner_id not in (match.player1_id, match.player2_id):
            errors.append(f'Match {match.id}: winner {match.winner_id!r} did not play in the match')
    return errors


def get_matches_for_round(matches: list[BracketMatch], round_number: int, is_winners_bracket: bool) -> list[BracketMatch]:
    """Matches of one round on one side of the bracket."""
    return [
        m for m in matches
        if m.round == round_number and m.is_winners_bracket == is_winners_bracket
    ]
