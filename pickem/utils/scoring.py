"""
Scoring Engine for the pick'em pool application

This module grades games against their betting lines and scores entries.
For ranking entries within a pool, see build_leaderboard() in
pickem/utils/leaderboard.py
"""

import logging
from dataclasses import dataclass

from pickem.models import BetType

logger = logging.getLogger(__name__)

PUSH = "push"

# One point per bet type per game
POINTS_PER_GAME = len(BetType.ALL)


@dataclass(frozen=True)
class GameGrade:
    """Winning side of each bet type for one final game"""

    game_id: str
    spread_winner: str
    moneyline_winner: str
    total_winner: str
    total_points: float

    def winner_for(self, bet_type):
        if bet_type == BetType.SPREAD:
            return self.spread_winner
        if bet_type == BetType.MONEYLINE:
            return self.moneyline_winner
        if bet_type == BetType.TOTAL:
            return self.total_winner
        raise ValueError(f"Unknown bet type: {bet_type}")

    def to_dict(self):
        return {
            "spreadWinner": self.spread_winner,
            "moneylineWinner": self.moneyline_winner,
            "totalWinner": self.total_winner,
            "totalPoints": self.total_points,
        }


def grade_game(game, result):
    """
    Determine the winning side of every bet type for a game.

    Ties resolve to the away side for spread and moneyline because both
    comparisons are strict. A total equal to the line is a push.

    Args:
        game: Game carrying the spread and total lines
        result: GameResult for the game, or None

    Returns:
        GameGrade, or None when the game has no final score yet
    """
    if result is None or not result.is_final:
        return None

    home_score = result.home_score
    away_score = result.away_score

    home_win = home_score > away_score
    home_covers = home_score + game.spread.home > away_score + game.spread.away

    total_points = home_score + away_score
    if total_points > game.total:
        total_winner = "over"
    elif total_points < game.total:
        total_winner = "under"
    else:
        total_winner = PUSH

    return GameGrade(
        game_id=game.id,
        spread_winner="home" if home_covers else "away",
        moneyline_winner="home" if home_win else "away",
        total_winner=total_winner,
        total_points=total_points,
    )


def pick_matches(pick, grade, bet_type):
    """
    Check a user's choice for one bet type against the graded game.

    Returns:
        True when the pick records this bet type and it equals the winner.
        A push never matches.
    """
    if pick is None or grade is None:
        return False

    choice = pick.choice_for(bet_type)
    winner = grade.winner_for(bet_type)

    if choice is None or winner == PUSH:
        return False

    return choice == winner


def calculate_pick_score(pick, grade):
    """
    Calculate score for a single game's pick.

    Returns:
        1 point per bet type picked correctly (0-3), 0 for an ungraded game
    """
    if grade is None:
        return 0

    return sum(1 for bet_type in BetType.ALL if pick_matches(pick, grade, bet_type))


def score_entry(pool, entry, results):
    """
    Score one entry against the results known for its pool.

    Games without a pick or without a final result contribute nothing.
    Picks for game ids that are not in the pool are never visited.

    Args:
        pool: Pool whose games are scored
        entry: Entry with picks keyed by game id
        results: Game id mapped to GameResult for this pool

    Returns:
        int: Total score, between 0 and 3 per game
    """
    results = results or {}
    score = 0

    for game in pool.games:
        pick = entry.pick_for(game.id)
        result = results.get(game.id)

        if pick is None or result is None:
            continue

        grade = grade_game(game, result)
        if grade is None:
            logger.debug(f"Game {game.id} in pool {pool.id} has no final score yet")
            continue

        score += calculate_pick_score(pick, grade)

    return score


def score_breakdown(pool, entry, results):
    """
    Per-game scoring detail for one entry

    Returns:
        dict with the entry's user, total score, maximum score and one row
        per game in pool order
    """
    results = results or {}
    games = []
    total = 0

    for game in pool.games:
        pick = entry.pick_for(game.id)
        grade = grade_game(game, results.get(game.id))

        correct = {
            bet_type: (
                pick_matches(pick, grade, bet_type)
                if grade is not None and pick is not None
                and pick.choice_for(bet_type) is not None
                else None
            )
            for bet_type in BetType.ALL
        }
        points = calculate_pick_score(pick, grade) if pick is not None else 0
        total += points

        games.append(
            {
                "gameId": game.id,
                "matchup": game.matchup,
                "pick": pick.to_dict() if pick is not None else {},
                "grade": grade.to_dict() if grade is not None else None,
                "correct": correct,
                "points": points,
            }
        )

    return {
        "user": entry.user,
        "poolId": pool.id,
        "score": total,
        "maxScore": max_possible_score(pool),
        "games": games,
    }


def max_possible_score(pool):
    return POINTS_PER_GAME * len(pool.games)
