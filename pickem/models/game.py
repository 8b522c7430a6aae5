from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from pickem.models.errors import MalformedRecordError, require_field, require_number
from pickem.utils.timezone_utils import parse_timestamp


@dataclass(frozen=True)
class Line:
    """A pair of away/home numbers (spread handicap or moneyline price)"""

    away: float
    home: float

    @classmethod
    def from_dict(cls, data, field_name):
        if not isinstance(data, dict):
            raise MalformedRecordError(f"{field_name} must be an object with away/home")
        return cls(
            away=require_number(data, "away", context=field_name),
            home=require_number(data, "home", context=field_name),
        )

    def for_side(self, side):
        if side == "home":
            return self.home
        if side == "away":
            return self.away
        raise ValueError(f"Unknown side: {side}")

    def to_dict(self):
        return {"away": self.away, "home": self.home}


@dataclass(frozen=True)
class Game:
    id: str
    away_team: str
    home_team: str
    start_time: datetime
    spread: Line
    moneyline: Line
    total: float

    def __repr__(self):
        return f"<Game {self.id} {self.away_team} @ {self.home_team}>"

    @classmethod
    def from_dict(cls, data):
        """Build a game from its pools-document representation"""
        if not isinstance(data, dict):
            raise MalformedRecordError("Game record must be an object")

        game_id = str(require_field(data, "id", context="game"))
        context = f"game {game_id}"

        return cls(
            id=game_id,
            away_team=require_field(data, "awayTeam", context=context),
            home_team=require_field(data, "homeTeam", context=context),
            start_time=parse_timestamp(
                require_field(data, "startTime", context=context)
            ),
            spread=Line.from_dict(
                require_field(data, "spread", context=context), f"{context} spread"
            ),
            moneyline=Line.from_dict(
                require_field(data, "moneyline", context=context),
                f"{context} moneyline",
            ),
            total=require_number(data, "total", context=context),
        )

    @property
    def matchup(self):
        return f"{self.away_team} @ {self.home_team}"

    def to_dict(self):
        """Convert game to its pools-document representation"""
        return {
            "id": self.id,
            "awayTeam": self.away_team,
            "homeTeam": self.home_team,
            "startTime": self.start_time.isoformat(),
            "spread": self.spread.to_dict(),
            "moneyline": self.moneyline.to_dict(),
            "total": self.total,
        }


@dataclass(frozen=True)
class GameResult:
    """Final score for one game; scores stay None until the game is played"""

    game_id: str
    away_score: Optional[int] = None
    home_score: Optional[int] = None

    @classmethod
    def from_dict(cls, game_id, data):
        if data is None:
            return cls(game_id=str(game_id))
        if not isinstance(data, dict):
            raise MalformedRecordError(f"Result for game {game_id} must be an object")

        return cls(
            game_id=str(game_id),
            away_score=_optional_score(data, "awayScore", game_id),
            home_score=_optional_score(data, "homeScore", game_id),
        )

    @property
    def is_final(self):
        """Both scores present"""
        return self.home_score is not None and self.away_score is not None

    @property
    def total_score(self):
        if not self.is_final:
            return None
        return self.home_score + self.away_score

    @property
    def margin_of_victory(self):
        if not self.is_final:
            return None
        return abs(self.home_score - self.away_score)

    def to_dict(self):
        return {"awayScore": self.away_score, "homeScore": self.home_score}


def _optional_score(data, key, game_id):
    value = data.get(key)
    if value is None:
        return None
    # bool is an int subclass but never a valid score
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedRecordError(
            f"Result for game {game_id}: {key} must be numeric, got {value!r}"
        )
    if isinstance(value, float):
        if not value.is_integer():
            raise MalformedRecordError(
                f"Result for game {game_id}: {key} must be a whole number, got {value!r}"
            )
        return int(value)
    return value


def parse_pool_results(data):
    """
    Parse the results recorded for one pool

    Args:
        data: Mapping of game id to {awayScore, homeScore}, or None

    Returns:
        dict: Game id mapped to GameResult
    """
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise MalformedRecordError("Pool results must be an object keyed by game id")

    return {
        str(game_id): GameResult.from_dict(game_id, result)
        for game_id, result in data.items()
    }


def parse_results_document(data):
    """Parse the results document into pool id -> game id -> GameResult"""
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise MalformedRecordError("Results document must be an object keyed by pool id")

    return {
        str(pool_id): parse_pool_results(pool_results)
        for pool_id, pool_results in data.items()
    }
