"""
Pool service for the pick'em pool application

Loads the data documents through the configured DataStore (cached), applies
the pool lifecycle rules and exposes grading, scoring and leaderboards to
the API routes and the management CLI.
"""

import logging

from flask import current_app

from pickem.models import PoolsDocument, parse_results_document
from pickem.utils.cache_utils import cached_document
from pickem.utils.data_store import (
    ENTRIES_DOCUMENT,
    POOLS_DOCUMENT,
    RESULTS_DOCUMENT,
    normalize_entries,
)
from pickem.utils.leaderboard import build_leaderboard
from pickem.utils.pool_status import ClosingPolicy, annotate_pools, evaluate_status
from pickem.utils.scoring import grade_game, max_possible_score, score_breakdown
from pickem.utils.submission import build_entry
from pickem.utils.timezone_utils import get_utc_time

logger = logging.getLogger(__name__)


@cached_document()
def load_document(name, store):
    return store.load_raw(name)


class PoolService:
    """Read-side operations over the pools, results and entries documents"""

    def __init__(
        self,
        store,
        closing_policy=ClosingPolicy.DEADLINE,
        preview_mode=False,
        clock=get_utc_time,
    ):
        self.store = store
        self.closing_policy = ClosingPolicy.validate(closing_policy)
        self.preview_mode = preview_mode
        self.clock = clock

    @classmethod
    def from_app(cls, app=None):
        """Build the service from the application config and its DataStore"""
        app = app or current_app
        return cls(
            app.extensions["pickem_store"],
            closing_policy=app.config.get("CLOSING_POLICY", ClosingPolicy.DEADLINE),
            preview_mode=app.config.get("PREVIEW_MODE", False),
        )

    # Documents

    def raw_document(self, name):
        return load_document(name, self.store)

    def pools_document(self):
        """Pools document with every pool's status evaluated at the current time"""
        document = PoolsDocument.from_dict(self.raw_document(POOLS_DOCUMENT))
        pools = annotate_pools(
            document.pools,
            self.results_document(),
            self.clock(),
            override_open=self.preview_mode,
            closing_policy=self.closing_policy,
        )
        return document.with_pools(pools)

    def results_document(self):
        return parse_results_document(self.raw_document(RESULTS_DOCUMENT))

    def results_for(self, pool_id):
        return self.results_document().get(pool_id, {})

    def entries(self):
        return normalize_entries(self.raw_document(ENTRIES_DOCUMENT))

    def entries_for(self, pool_id):
        """Entries for a pool, including list records that carry no poolId"""
        return [entry for entry in self.entries() if entry.pool_id in (None, pool_id)]

    # Pools

    def get_pool(self, pool_id):
        return self.pools_document().get_pool(pool_id)

    def current_pool(self):
        return self.pools_document().current_pool

    def pools_for_sport(self, sport=None):
        pools = self.pools_document().pools
        if sport:
            pools = tuple(pool for pool in pools if pool.sport == sport)
        return pools

    def status_for(self, pool):
        return evaluate_status(
            pool,
            self.results_for(pool.id),
            self.clock(),
            override_open=self.preview_mode,
            closing_policy=self.closing_policy,
        )

    # Scoring

    def grades(self, pool):
        """Game id mapped to its grade dict, None for games without a final score"""
        results = self.results_for(pool.id)
        grades = {}
        for game in pool.games:
            grade = grade_game(game, results.get(game.id))
            grades[game.id] = grade.to_dict() if grade is not None else None
        return grades

    def leaderboard(self, pool):
        return build_leaderboard(
            pool, self.entries_for(pool.id), self.results_for(pool.id)
        )

    def max_score(self, pool):
        return max_possible_score(pool)

    def entry_breakdown(self, pool, user):
        """Scoring detail for the user's first entry in the pool, None if absent"""
        for entry in self.entries_for(pool.id):
            if entry.user == user:
                return score_breakdown(pool, entry, self.results_for(pool.id))
        return None

    # Submission

    def submit_entry(self, pool, user, picks):
        """Build the entry record to paste into entries.json"""
        return build_entry(user, pool, picks, status=self.status_for(pool))
