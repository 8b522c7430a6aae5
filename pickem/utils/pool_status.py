"""
Pool lifecycle evaluation

Decides whether a pool is open, closed or completed from its deadline (or
first game start), the current time and the results recorded so far.
"""

import logging

from pickem.models import PoolStatus
from pickem.utils.timezone_utils import ensure_utc

logger = logging.getLogger(__name__)


class ClosingPolicy:
    """When an open pool stops accepting picks"""

    DEADLINE = "deadline"
    EARLIEST_GAME_START = "earliestGameStart"

    ALL = (DEADLINE, EARLIEST_GAME_START)

    @classmethod
    def validate(cls, policy):
        if policy not in cls.ALL:
            raise ValueError(
                f"Unknown closing policy {policy!r}, expected one of {', '.join(cls.ALL)}"
            )
        return policy


def closing_threshold(pool, policy=ClosingPolicy.DEADLINE):
    """
    Get the moment an open pool closes

    Args:
        pool: Pool to evaluate
        policy: ClosingPolicy value

    Returns:
        datetime: The pool deadline, or its earliest game start under
        EARLIEST_GAME_START (the deadline when the pool has no games)
    """
    ClosingPolicy.validate(policy)

    if policy == ClosingPolicy.EARLIEST_GAME_START:
        earliest = pool.earliest_game_start
        if earliest is not None:
            return ensure_utc(earliest)

    return ensure_utc(pool.deadline)


def is_pool_final(pool, results):
    """Check if every game in the pool has both scores recorded"""
    if not pool.games:
        return False

    results = results or {}
    for game in pool.games:
        result = results.get(game.id)
        if result is None or not result.is_final:
            return False
    return True


def evaluate_status(
    pool, results, now, override_open=False, closing_policy=ClosingPolicy.DEADLINE
):
    """
    Compute the current status of a pool.

    A pool whose games all have final scores is completed, even in preview
    mode. Otherwise preview mode (override_open) reports it open. Otherwise
    an open pool closes once now reaches the closing threshold. A stored
    closed or completed status is never moved backward.

    Args:
        pool: Pool to evaluate
        results: Game id mapped to GameResult for this pool
        now: Current time (naive values are treated as UTC)
        override_open: Preview mode, force open unless completed
        closing_policy: ClosingPolicy value

    Returns:
        str: A PoolStatus value
    """
    if pool.status == PoolStatus.COMPLETED or is_pool_final(pool, results):
        return PoolStatus.COMPLETED

    if override_open:
        return PoolStatus.OPEN

    if pool.status == PoolStatus.OPEN:
        threshold = closing_threshold(pool, closing_policy)
        if ensure_utc(now) >= threshold:
            return PoolStatus.CLOSED

    return pool.status


def annotate_pools(
    pools, results_document, now, override_open=False, closing_policy=ClosingPolicy.DEADLINE
):
    """
    Evaluate every pool and return copies carrying their computed status

    Args:
        pools: Iterable of Pool
        results_document: Pool id mapped to that pool's results
        now: Current time
        override_open: Preview mode flag
        closing_policy: ClosingPolicy value

    Returns:
        list: Pool copies with updated status, in input order
    """
    results_document = results_document or {}
    annotated = []

    for pool in pools:
        status = evaluate_status(
            pool,
            results_document.get(pool.id),
            now,
            override_open=override_open,
            closing_policy=closing_policy,
        )
        if status != pool.status:
            logger.debug(f"Pool {pool.id} status {pool.status} -> {status}")
        annotated.append(pool.with_status(status))

    return annotated
