from .entry import BetType, Entry, Pick
from .errors import MalformedRecordError
from .game import (
    Game,
    GameResult,
    Line,
    parse_pool_results,
    parse_results_document,
)
from .pool import Pool, PoolsDocument, PoolStatus

__all__ = [
    "BetType",
    "Entry",
    "Pick",
    "MalformedRecordError",
    "Game",
    "GameResult",
    "Line",
    "parse_pool_results",
    "parse_results_document",
    "Pool",
    "PoolsDocument",
    "PoolStatus",
]
