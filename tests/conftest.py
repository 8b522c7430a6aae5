import json
import os

# Must be set before manage.py builds its app at import time
os.environ.setdefault("PICKEM_CONFIG", "testing")

import pytest  # noqa: E402

from pickem import create_app  # noqa: E402
from pickem.models import Entry, GameResult, Pool  # noqa: E402
from pickem.utils.data_store import DataStore  # noqa: E402

PAST_POOL_ID = "nfl-2024-week-1"
FUTURE_POOL_ID = "nfl-2099-week-1"


def make_game(game_id, start_time="2024-09-08T17:00:00Z", spread=(3, -3), total=47):
    return {
        "id": game_id,
        "awayTeam": "Miami Dolphins",
        "homeTeam": "Buffalo Bills",
        "startTime": start_time,
        "spread": {"away": spread[0], "home": spread[1]},
        "moneyline": {"away": 150, "home": -180},
        "total": total,
    }


def make_pool(pool_id, deadline, games, status="open", sport="NFL"):
    return {
        "id": pool_id,
        "sport": sport,
        "label": pool_id.replace("-", " ").title(),
        "deadline": deadline,
        "status": status,
        "games": games,
    }


@pytest.fixture
def game_dict():
    return make_game("g1")


@pytest.fixture
def pool_dict():
    return make_pool(
        PAST_POOL_ID,
        "2024-09-01T00:00:00Z",
        [
            make_game("g1", start_time="2024-09-08T17:00:00Z"),
            make_game("g2", start_time="2024-09-05T00:20:00Z", spread=(-6.5, 6.5), total=44.5),
        ],
    )


@pytest.fixture
def pool(pool_dict):
    return Pool.from_dict(pool_dict)


@pytest.fixture
def game(pool):
    return pool.get_game("g1")


@pytest.fixture
def final_results():
    """Both games scored: g1 20-24, g2 27-20"""
    return {
        "g1": GameResult(game_id="g1", away_score=20, home_score=24),
        "g2": GameResult(game_id="g2", away_score=27, home_score=20),
    }


@pytest.fixture
def make_entry():
    def _make_entry(user, picks, pool_id=PAST_POOL_ID):
        return Entry.from_dict({"user": user, "poolId": pool_id, "picks": picks})

    return _make_entry


@pytest.fixture
def documents(pool_dict):
    future_pool = make_pool(
        FUTURE_POOL_ID,
        "2099-09-01T00:00:00Z",
        [make_game("f1", start_time="2099-09-06T17:00:00Z")],
    )
    nba_pool = make_pool(
        "nba-2099-opening",
        "2099-10-20T23:30:00Z",
        [make_game("n1", start_time="2099-10-20T23:30:00Z", total=221.5)],
        sport="NBA",
    )
    return {
        "pools.json": {
            "currentPoolId": FUTURE_POOL_ID,
            "pools": [pool_dict, future_pool, nba_pool],
        },
        "results.json": {
            PAST_POOL_ID: {
                "g1": {"awayScore": 20, "homeScore": 24},
                "g2": {"awayScore": 27, "homeScore": 20},
            },
        },
        "entries.json": [
            {
                "user": "alice",
                "poolId": PAST_POOL_ID,
                "picks": {
                    "g1": {"spread": "away", "moneyline": "home", "total": "under"},
                    "g2": {"spread": "away", "moneyline": "away", "total": "over"},
                },
            },
            {
                "user": "bob",
                "poolId": PAST_POOL_ID,
                "picks": {"g1": {"moneyline": "away"}},
            },
            {
                "user": "carol",
                "poolId": FUTURE_POOL_ID,
                "picks": {"f1": {"total": "over"}},
            },
        ],
    }


@pytest.fixture
def data_dir(tmp_path, documents):
    for name, content in documents.items():
        (tmp_path / name).write_text(json.dumps(content), encoding="utf-8")
    return tmp_path


@pytest.fixture
def app(data_dir):
    app = create_app("testing")
    app.extensions["pickem_store"] = DataStore(data_dir=str(data_dir))
    yield app


@pytest.fixture
def client(app):
    return app.test_client()
