"""Tests for game grading and entry scoring."""

import pytest

from pickem.models import Entry, GameResult, Pick, Pool
from pickem.utils.scoring import (
    PUSH,
    calculate_pick_score,
    grade_game,
    max_possible_score,
    pick_matches,
    score_breakdown,
    score_entry,
)


def result(away, home, game_id="g1"):
    return GameResult(game_id=game_id, away_score=away, home_score=home)


class TestGradeGame:
    """Test the winning side of each bet type."""

    def test_underdog_covers_while_favorite_wins(self, game):
        """Away +3 loses 20-24: home wins outright, away covers, total under."""
        grade = grade_game(game, result(20, 24))

        assert grade.spread_winner == "away"
        assert grade.moneyline_winner == "home"
        assert grade.total_winner == "under"
        assert grade.total_points == 44

    def test_tied_score_resolves_to_away(self, game):
        """22-22: strict comparison gives moneyline to away, not a push."""
        grade = grade_game(game, result(22, 22))

        assert grade.moneyline_winner == "away"
        assert grade.total_winner == "under"

    def test_adjusted_spread_tie_resolves_to_away(self, game):
        """Home by exactly 6 on a 3-point line: 24-3=21 vs 18+3=21."""
        grade = grade_game(game, result(18, 24))

        assert grade.spread_winner == "away"
        assert grade.moneyline_winner == "home"

    def test_home_covers(self, game):
        grade = grade_game(game, result(10, 31))

        assert grade.spread_winner == "home"
        assert grade.total_winner == "under"

    def test_total_on_the_line_is_push(self, game):
        grade = grade_game(game, result(23, 24))

        assert grade.total_points == 47
        assert grade.total_winner == PUSH

    def test_total_over(self, game):
        assert grade_game(game, result(30, 28)).total_winner == "over"

    @pytest.mark.parametrize("away,home", [(0, 0), (10, 10), (17, 14), (21, 20)])
    def test_moneyline_away_exactly_when_home_not_ahead(self, game, away, home):
        assert grade_game(game, result(away, home)).moneyline_winner == "away"

    def test_missing_result_is_ungraded(self, game):
        assert grade_game(game, None) is None

    def test_null_scores_are_ungraded(self, game):
        assert grade_game(game, GameResult(game_id="g1")) is None
        assert grade_game(game, GameResult(game_id="g1", away_score=7)) is None

    def test_grade_to_dict(self, game):
        assert grade_game(game, result(20, 24)).to_dict() == {
            "spreadWinner": "away",
            "moneylineWinner": "home",
            "totalWinner": "under",
            "totalPoints": 44,
        }


class TestPickMatches:
    """Test a pick against a graded game."""

    def test_matching_pick(self, game):
        grade = grade_game(game, result(20, 24))
        pick = Pick(spread="away", moneyline="home", total="under")

        assert pick_matches(pick, grade, "spread")
        assert pick_matches(pick, grade, "moneyline")
        assert pick_matches(pick, grade, "total")
        assert calculate_pick_score(pick, grade) == 3

    def test_push_never_matches(self, game):
        grade = grade_game(game, result(23, 24))

        assert not pick_matches(Pick(total="over"), grade, "total")
        assert not pick_matches(Pick(total="under"), grade, "total")
        # Pick values are not validated at this level; "push" still never scores
        assert not pick_matches(Pick(total="push"), grade, "total")

    def test_unrecorded_bet_type_does_not_match(self, game):
        grade = grade_game(game, result(20, 24))
        assert not pick_matches(Pick(spread="away"), grade, "moneyline")

    def test_ungraded_game_scores_zero(self):
        assert calculate_pick_score(Pick(spread="away"), None) == 0


class TestScoreEntry:
    """Test aggregating picks across a pool."""

    def test_perfect_game_scores_three(self, pool, make_entry):
        entry = make_entry(
            "alice", {"g1": {"spread": "away", "moneyline": "home", "total": "under"}}
        )
        results = {"g1": result(20, 24)}

        assert score_entry(pool, entry, results) == 3

    def test_sums_across_games(self, pool, make_entry, final_results):
        entry = make_entry(
            "alice",
            {
                "g1": {"spread": "away", "moneyline": "home", "total": "under"},
                "g2": {"spread": "away", "moneyline": "away", "total": "over"},
            },
        )
        assert score_entry(pool, entry, final_results) == 5

    def test_game_without_result_is_skipped(self, pool, make_entry):
        entry = make_entry(
            "alice",
            {
                "g1": {"moneyline": "home"},
                "g2": {"moneyline": "away"},
            },
        )
        assert score_entry(pool, entry, {"g1": result(20, 24)}) == 1

    def test_game_without_pick_is_skipped(self, pool, make_entry, final_results):
        entry = make_entry("alice", {"g2": {"moneyline": "away"}})
        assert score_entry(pool, entry, final_results) == 1

    def test_picks_for_unknown_games_are_ignored(self, pool, make_entry, final_results):
        entry = make_entry("alice", {"not-in-pool": {"moneyline": "home"}})
        assert score_entry(pool, entry, final_results) == 0

    def test_results_for_unknown_games_are_ignored(self, pool, make_entry):
        entry = make_entry("alice", {"g1": {"moneyline": "home"}})
        results = {"elsewhere": result(0, 100, game_id="elsewhere")}
        assert score_entry(pool, entry, results) == 0

    def test_no_results_scores_zero(self, pool, make_entry):
        entry = make_entry("alice", {"g1": {"moneyline": "home"}})
        assert score_entry(pool, entry, None) == 0
        assert score_entry(pool, entry, {}) == 0

    def test_score_within_bounds(self, pool, make_entry, final_results):
        for picks in (
            {},
            {"g1": {"spread": "home", "moneyline": "away", "total": "over"}},
            {
                "g1": {"spread": "away", "moneyline": "home", "total": "under"},
                "g2": {"spread": "home", "moneyline": "away", "total": "over"},
            },
        ):
            score = score_entry(pool, make_entry("x", picks), final_results)
            assert 0 <= score <= max_possible_score(pool)

    def test_every_pick_correct_reaches_max(self, pool, make_entry, final_results):
        entry = make_entry(
            "alice",
            {
                "g1": {"spread": "away", "moneyline": "home", "total": "under"},
                "g2": {"spread": "home", "moneyline": "away", "total": "over"},
            },
        )
        assert score_entry(pool, entry, final_results) == max_possible_score(pool) == 6

    def test_empty_pool_scores_zero(self, make_entry):
        empty = Pool.from_dict(
            {
                "id": "empty",
                "sport": "NFL",
                "label": "Empty",
                "deadline": "2024-09-01T00:00:00Z",
                "games": [],
            }
        )
        assert score_entry(empty, make_entry("x", {}), {}) == 0
        assert max_possible_score(empty) == 0


class TestScoreBreakdown:
    """Test per-game scoring detail."""

    def test_breakdown_matches_score(self, pool, make_entry, final_results):
        entry = make_entry(
            "alice",
            {
                "g1": {"spread": "away", "moneyline": "home", "total": "under"},
                "g2": {"spread": "away"},
            },
        )
        breakdown = score_breakdown(pool, entry, final_results)

        assert breakdown["score"] == score_entry(pool, entry, final_results) == 3
        assert breakdown["maxScore"] == 6
        assert [g["gameId"] for g in breakdown["games"]] == ["g1", "g2"]

        g2 = breakdown["games"][1]
        assert g2["points"] == 0
        assert g2["correct"] == {"spread": False, "moneyline": None, "total": None}

    def test_breakdown_for_unplayed_game(self, pool):
        entry = Entry(user="alice", pool_id=pool.id, picks={"g1": Pick(spread="home")})
        breakdown = score_breakdown(pool, entry, {})

        assert breakdown["score"] == 0
        assert breakdown["games"][0]["grade"] is None
        assert breakdown["games"][0]["correct"]["spread"] is None
        assert breakdown["games"][1]["pick"] == {}
