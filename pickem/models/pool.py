from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Optional, Tuple

from pickem.models.errors import MalformedRecordError, require_field
from pickem.models.game import Game
from pickem.utils.timezone_utils import parse_timestamp


class PoolStatus:
    OPEN = "open"
    CLOSED = "closed"
    COMPLETED = "completed"

    ALL = (OPEN, CLOSED, COMPLETED)


@dataclass(frozen=True)
class Pool:
    id: str
    sport: str
    label: str
    deadline: datetime
    status: str = PoolStatus.OPEN
    games: Tuple[Game, ...] = field(default_factory=tuple)

    def __repr__(self):
        return f"<Pool {self.id} {self.sport} {self.status} games={len(self.games)}>"

    @classmethod
    def from_dict(cls, data):
        """Build a pool (and its games) from its pools-document representation"""
        if not isinstance(data, dict):
            raise MalformedRecordError("Pool record must be an object")

        pool_id = str(require_field(data, "id", context="pool"))
        context = f"pool {pool_id}"

        status = data.get("status") or PoolStatus.OPEN
        if status not in PoolStatus.ALL:
            raise MalformedRecordError(f"{context}: unknown status {status!r}")

        raw_games = data.get("games") or []
        if not isinstance(raw_games, list):
            raise MalformedRecordError(f"{context}: games must be a list")

        return cls(
            id=pool_id,
            sport=require_field(data, "sport", context=context),
            label=require_field(data, "label", context=context),
            deadline=parse_timestamp(require_field(data, "deadline", context=context)),
            status=status,
            games=tuple(Game.from_dict(g) for g in raw_games),
        )

    @property
    def game_ids(self):
        return [game.id for game in self.games]

    @property
    def earliest_game_start(self):
        """Start time of the first game (None for a pool without games)"""
        if not self.games:
            return None
        return min(game.start_time for game in self.games)

    def get_game(self, game_id):
        for game in self.games:
            if game.id == game_id:
                return game
        return None

    def with_status(self, status):
        """Return a copy of this pool carrying the given status"""
        if status not in PoolStatus.ALL:
            raise ValueError(f"Unknown pool status: {status}")
        return replace(self, status=status)

    def to_dict(self):
        """Convert pool to its pools-document representation"""
        return {
            "id": self.id,
            "sport": self.sport,
            "label": self.label,
            "deadline": self.deadline.isoformat(),
            "status": self.status,
            "games": [game.to_dict() for game in self.games],
        }


@dataclass(frozen=True)
class PoolsDocument:
    """The pools document: every pool plus the id of the one currently featured"""

    current_pool_id: Optional[str]
    pools: Tuple[Pool, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict):
            raise MalformedRecordError("Pools document must be an object")

        raw_pools = data.get("pools") or []
        if not isinstance(raw_pools, list):
            raise MalformedRecordError("Pools document: pools must be a list")

        return cls(
            current_pool_id=data.get("currentPoolId"),
            pools=tuple(Pool.from_dict(p) for p in raw_pools),
        )

    @property
    def current_pool(self):
        """Pool named by currentPoolId, falling back to the first pool"""
        pool = self.get_pool(self.current_pool_id)
        if pool is None and self.pools:
            return self.pools[0]
        return pool

    @property
    def sports(self):
        """Distinct sport tags in document order"""
        seen = []
        for pool in self.pools:
            if pool.sport not in seen:
                seen.append(pool.sport)
        return seen

    def get_pool(self, pool_id):
        if pool_id is None:
            return None
        for pool in self.pools:
            if pool.id == pool_id:
                return pool
        return None

    def with_pools(self, pools):
        return replace(self, pools=tuple(pools))

    def with_current_pool_id(self, pool_id):
        return replace(self, current_pool_id=pool_id)

    def to_dict(self):
        return {
            "currentPoolId": self.current_pool_id,
            "pools": [pool.to_dict() for pool in self.pools],
        }
