"""
Leaderboard builder for the pick'em pool application
"""

import logging
from dataclasses import dataclass

from pickem.utils.scoring import score_entry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LeaderboardRow:
    user: str
    score: int
    rank: int = 1

    def to_dict(self):
        return {"rank": self.rank, "user": self.user, "score": self.score}


def build_leaderboard(pool, entries, results):
    """
    Score every entry for a pool and rank them.

    Each entry produces one row, so a user with two entries appears twice.
    Rows are sorted by score descending; the sort is stable, so entries with
    equal scores keep the order they were submitted in. Ranks use standard
    competition ranking (1, 1, 3).

    Args:
        pool: Pool being ranked
        entries: Iterable of Entry; entries for another pool are skipped
        results: Game id mapped to GameResult for this pool

    Returns:
        list: LeaderboardRow objects, empty when there are no entries
    """
    rows = []

    for entry in entries or []:
        if entry.pool_id is not None and entry.pool_id != pool.id:
            logger.debug(
                f"Skipping entry for {entry.user}: pool {entry.pool_id} is not {pool.id}"
            )
            continue

        rows.append((entry.user, score_entry(pool, entry, results)))

    rows.sort(key=lambda row: row[1], reverse=True)

    leaderboard = []
    previous_score = None
    rank = 0
    for position, (user, score) in enumerate(rows, start=1):
        if score != previous_score:
            rank = position
            previous_score = score
        leaderboard.append(LeaderboardRow(user=user, score=score, rank=rank))

    return leaderboard
