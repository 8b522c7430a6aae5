"""
Entry submission for the pick'em pool application

There is no write path: submitting builds the entry record the user hands to
the admin, who pastes it into entries.json.
"""

import logging

from pickem.models import BetType, Entry, Pick, PoolStatus

logger = logging.getLogger(__name__)


class SubmissionError(ValueError):
    """Raised when submitted picks cannot form a valid entry."""

    pass


class PoolClosedError(SubmissionError):
    """Raised when picks are submitted for a pool that is not open."""

    def __init__(self, pool_id, status):
        self.pool_id = pool_id
        self.status = status
        super().__init__(f"Pool {pool_id} is {status}. Picks are locked.")


def validate_picks(pool, picks):
    """
    Check raw picks against a pool's games

    Args:
        pool: Pool the picks are for
        picks: Game id mapped to {betType: side}

    Returns:
        list: Error messages, empty when every pick is valid
    """
    if not isinstance(picks, dict):
        return ["Picks must be an object keyed by game id"]

    errors = []
    for game_id, choices in picks.items():
        if pool.get_game(game_id) is None:
            errors.append(f"Unknown game {game_id} in pool {pool.id}")
            continue

        if not isinstance(choices, dict):
            errors.append(f"Game {game_id}: picks must be an object keyed by bet type")
            continue

        for bet_type, side in choices.items():
            if bet_type not in BetType.ALL:
                errors.append(f"Game {game_id}: unknown bet type {bet_type}")
            elif side not in BetType.SIDES[bet_type]:
                allowed = "/".join(BetType.SIDES[bet_type])
                errors.append(
                    f"Game {game_id}: {bet_type} pick must be {allowed}, got {side!r}"
                )

    return errors


def build_entry(user, pool, picks, status=None):
    """
    Build the entry record for a user's picks

    Args:
        user: Username submitting the entry
        pool: Pool the picks are for
        picks: Game id mapped to {betType: side}
        status: Evaluated pool status; defaults to the status on the pool

    Returns:
        Entry: The entry to paste into entries.json

    Raises:
        PoolClosedError: If the pool is not open
        SubmissionError: If the user is missing or the picks are invalid
    """
    status = status or pool.status
    if status != PoolStatus.OPEN:
        raise PoolClosedError(pool.id, status)

    if not isinstance(user, str) or not user.strip():
        raise SubmissionError("You must provide a username")
    user = user.strip()

    if not picks:
        raise SubmissionError("No picks made")

    errors = validate_picks(pool, picks)
    if errors:
        raise SubmissionError("; ".join(errors))

    # Keep pool game order
    entry_picks = {
        game.id: Pick.from_dict(picks[game.id])
        for game in pool.games
        if game.id in picks
    }
    entry_picks = {
        game_id: pick for game_id, pick in entry_picks.items() if not pick.is_empty
    }
    if not entry_picks:
        raise SubmissionError("No picks made")

    logger.info(f"Built entry for {user} in pool {pool.id} ({len(entry_picks)} games)")
    return Entry(user=user, pool_id=pool.id, picks=entry_picks)
