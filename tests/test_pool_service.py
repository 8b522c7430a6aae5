"""Tests for the pool service over a data directory."""

import json
from datetime import datetime, timezone

import pytest

from pickem.models import MalformedRecordError, PoolStatus
from pickem.services import PoolService
from pickem.utils.data_store import DataSourceError
from pickem.utils.pool_status import ClosingPolicy

from conftest import FUTURE_POOL_ID, PAST_POOL_ID

SEASON_START = datetime(2024, 8, 15, tzinfo=timezone.utc)


@pytest.fixture
def service(app):
    with app.app_context():
        yield PoolService.from_app(app)


def write_entries(data_dir, entries):
    (data_dir / "entries.json").write_text(json.dumps(entries), encoding="utf-8")


class TestDocuments:
    def test_pools_document(self, service):
        document = service.pools_document()

        assert document.current_pool_id == FUTURE_POOL_ID
        assert [p.id for p in document.pools] == [
            PAST_POOL_ID,
            FUTURE_POOL_ID,
            "nba-2099-opening",
        ]
        assert document.get_pool(PAST_POOL_ID).status == PoolStatus.COMPLETED

    def test_results_for(self, service):
        assert service.results_for(PAST_POOL_ID)["g2"].away_score == 27
        assert service.results_for(FUTURE_POOL_ID) == {}

    def test_entries_for(self, service):
        assert [e.user for e in service.entries()] == ["alice", "bob", "carol"]
        assert [e.user for e in service.entries_for(PAST_POOL_ID)] == ["alice", "bob"]
        assert service.entries_for("nope") == []

    def test_pool_keyed_entries(self, service, data_dir):
        write_entries(
            data_dir,
            {FUTURE_POOL_ID: [{"user": "erin", "picks": {"f1": {"total": "over"}}}]},
        )
        assert [e.user for e in service.entries_for(FUTURE_POOL_ID)] == ["erin"]

    def test_missing_document(self, service, data_dir):
        (data_dir / "pools.json").unlink()
        with pytest.raises(DataSourceError):
            service.pools_document()

    def test_malformed_results(self, service, data_dir):
        (data_dir / "results.json").write_text("[]", encoding="utf-8")
        with pytest.raises(MalformedRecordError):
            service.results_document()


class TestEntriesWithoutPool:
    """List records without a poolId count toward whichever pool is ranked."""

    def test_included_in_every_pool(self, service, data_dir, documents):
        write_entries(
            data_dir,
            documents["entries.json"] + [{"user": "dave", "picks": {"g1": {"moneyline": "home"}}}],
        )

        assert [e.user for e in service.entries_for(PAST_POOL_ID)] == ["alice", "bob", "dave"]
        assert [e.user for e in service.entries_for(FUTURE_POOL_ID)] == ["carol", "dave"]

    def test_leaderboard_ranks_them(self, service, data_dir, documents):
        write_entries(
            data_dir,
            documents["entries.json"] + [{"user": "dave", "picks": {"g1": {"moneyline": "home"}}}],
        )
        pool = service.get_pool(PAST_POOL_ID)

        rows = [(row.user, row.score) for row in service.leaderboard(pool)]
        assert rows == [("alice", 5), ("dave", 1), ("bob", 0)]


class TestClock:
    def test_status_follows_clock(self, app):
        with app.app_context():
            service = PoolService(app.extensions["pickem_store"], clock=lambda: SEASON_START)
            pools = {p.id: p.status for p in service.pools_document().pools}

        # Fully scored pools are completed whatever the time
        assert pools[PAST_POOL_ID] == PoolStatus.COMPLETED
        assert pools[FUTURE_POOL_ID] == PoolStatus.OPEN

    def test_unknown_closing_policy(self, app):
        with pytest.raises(ValueError):
            PoolService(app.extensions["pickem_store"], closing_policy="whenever")

    def test_earliest_game_policy(self, app):
        with app.app_context():
            service = PoolService(
                app.extensions["pickem_store"],
                closing_policy=ClosingPolicy.EARLIEST_GAME_START,
            )
            assert service.status_for(service.get_pool(FUTURE_POOL_ID)) == PoolStatus.OPEN
