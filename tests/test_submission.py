"""Tests for building entries from submitted picks."""

import pytest

from pickem.models import Pick, PoolStatus
from pickem.utils.submission import (
    PoolClosedError,
    SubmissionError,
    build_entry,
    validate_picks,
)


class TestValidatePicks:
    def test_valid_picks(self, pool):
        picks = {
            "g1": {"spread": "home", "total": "over"},
            "g2": {"moneyline": "away"},
        }
        assert validate_picks(pool, picks) == []

    def test_unknown_game(self, pool):
        errors = validate_picks(pool, {"g9": {"spread": "home"}})
        assert errors == [f"Unknown game g9 in pool {pool.id}"]

    def test_bad_sides_and_bet_types(self, pool):
        errors = validate_picks(
            pool,
            {"g1": {"spread": "over", "total": "home", "teaser": "away"}},
        )

        assert errors == [
            "Game g1: spread pick must be away/home, got 'over'",
            "Game g1: total pick must be over/under, got 'home'",
            "Game g1: unknown bet type teaser",
        ]

    def test_picks_must_be_objects(self, pool):
        assert validate_picks(pool, ["g1"]) == ["Picks must be an object keyed by game id"]
        assert validate_picks(pool, {"g1": "home"}) == [
            "Game g1: picks must be an object keyed by bet type"
        ]


class TestBuildEntry:
    def test_builds_entry_in_game_order(self, pool):
        entry = build_entry(
            "  alice ",
            pool,
            {"g2": {"moneyline": "away"}, "g1": {"spread": "home"}},
        )

        assert entry.user == "alice"
        assert entry.pool_id == pool.id
        assert list(entry.picks) == ["g1", "g2"]
        assert entry.pick_for("g2") == Pick(moneyline="away")

    def test_games_without_choices_are_dropped(self, pool):
        entry = build_entry("alice", pool, {"g1": {}, "g2": {"total": "under"}})
        assert list(entry.picks) == ["g2"]

    def test_closed_pool_is_locked(self, pool):
        with pytest.raises(PoolClosedError) as exc_info:
            build_entry("alice", pool, {"g1": {"spread": "home"}}, status=PoolStatus.CLOSED)

        assert exc_info.value.status == PoolStatus.CLOSED
        assert str(exc_info.value) == f"Pool {pool.id} is closed. Picks are locked."

    def test_stored_status_used_by_default(self, pool):
        completed = pool.with_status(PoolStatus.COMPLETED)
        with pytest.raises(PoolClosedError):
            build_entry("alice", completed, {"g1": {"spread": "home"}})

    def test_pool_closed_is_a_submission_error(self, pool):
        with pytest.raises(SubmissionError):
            build_entry("alice", pool, {"g1": {"spread": "home"}}, status=PoolStatus.CLOSED)

    @pytest.mark.parametrize("user", ["", "   ", None, 42])
    def test_username_required(self, pool, user):
        with pytest.raises(SubmissionError, match="username"):
            build_entry(user, pool, {"g1": {"spread": "home"}})

    @pytest.mark.parametrize("picks", [{}, None, {"g1": {}, "g2": {}}])
    def test_no_picks(self, pool, picks):
        with pytest.raises(SubmissionError, match="No picks made"):
            build_entry("alice", pool, picks)

    def test_invalid_picks_list_every_error(self, pool):
        with pytest.raises(SubmissionError) as exc_info:
            build_entry("alice", pool, {"g1": {"spread": "up"}, "g9": {"total": "over"}})

        message = str(exc_info.value)
        assert "Game g1: spread pick must be away/home" in message
        assert "Unknown game g9" in message

    def test_entry_round_trips_to_document(self, pool):
        entry = build_entry("alice", pool, {"g1": {"spread": "home", "total": "over"}})
        assert entry.to_dict() == {
            "user": "alice",
            "poolId": pool.id,
            "picks": {"g1": {"spread": "home", "total": "over"}},
        }
