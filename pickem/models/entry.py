from dataclasses import dataclass, field
from typing import Dict, Optional

from pickem.models.errors import MalformedRecordError, require_field


class BetType:
    SPREAD = "spread"
    MONEYLINE = "moneyline"
    TOTAL = "total"

    ALL = (SPREAD, MONEYLINE, TOTAL)

    # Sides a user may choose for each bet type
    SIDES = {
        SPREAD: ("away", "home"),
        MONEYLINE: ("away", "home"),
        TOTAL: ("over", "under"),
    }


@dataclass(frozen=True)
class Pick:
    """A user's choices for one game, at most one side per bet type"""

    spread: Optional[str] = None
    moneyline: Optional[str] = None
    total: Optional[str] = None

    @classmethod
    def from_dict(cls, data):
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise MalformedRecordError("Pick must be an object keyed by bet type")

        # Unknown bet types are ignored, they can never score
        return cls(**{bet_type: data.get(bet_type) for bet_type in BetType.ALL})

    @property
    def is_empty(self):
        return not any(self.choices.values())

    @property
    def choices(self):
        """Recorded bet types mapped to the chosen side"""
        return {
            bet_type: getattr(self, bet_type)
            for bet_type in BetType.ALL
            if getattr(self, bet_type) is not None
        }

    def choice_for(self, bet_type):
        if bet_type not in BetType.ALL:
            raise ValueError(f"Unknown bet type: {bet_type}")
        return getattr(self, bet_type)

    def to_dict(self):
        return dict(self.choices)


@dataclass(frozen=True)
class Entry:
    user: str
    pool_id: Optional[str]
    picks: Dict[str, Pick] = field(default_factory=dict)

    def __repr__(self):
        return f"<Entry user={self.user} pool={self.pool_id} games={len(self.picks)}>"

    @classmethod
    def from_dict(cls, data, pool_id=None):
        """
        Build an entry from an entries-document record

        Args:
            data: Raw record with user, picks and (optionally) poolId
            pool_id: Pool id to use when the record does not carry one inline

        Returns:
            Entry: Parsed entry
        """
        if not isinstance(data, dict):
            raise MalformedRecordError("Entry record must be an object")

        user = str(require_field(data, "user", context="entry"))

        raw_picks = data.get("picks") or {}
        if not isinstance(raw_picks, dict):
            raise MalformedRecordError(f"entry for {user}: picks must be an object")

        return cls(
            user=user,
            pool_id=data.get("poolId") or pool_id,
            picks={
                str(game_id): Pick.from_dict(pick)
                for game_id, pick in raw_picks.items()
            },
        )

    def pick_for(self, game_id):
        return self.picks.get(game_id)

    def to_dict(self):
        data = {"user": self.user}
        if self.pool_id is not None:
            data["poolId"] = self.pool_id
        data["picks"] = {
            game_id: pick.to_dict() for game_id, pick in self.picks.items()
        }
        return data
