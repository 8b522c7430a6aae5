"""
Pool authoring helpers for the admin workflow

The admin edits pools.json and results.json by hand; these helpers check
and generate the documents so the JSON can be pasted back into place.
"""

import logging

from pickem.models import PoolStatus
from pickem.utils.timezone_utils import parse_timestamp

logger = logging.getLogger(__name__)


def _is_missing(value):
    return value is None or value == ""


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _valid_line(line):
    return (
        isinstance(line, dict)
        and _is_number(line.get("away"))
        and _is_number(line.get("home"))
    )


def _valid_timestamp(value):
    try:
        parse_timestamp(value)
    except ValueError:
        return False
    return True


def validate_pool(pool):
    """
    Validate one raw pool record

    Args:
        pool: Pool dict as authored in pools.json

    Returns:
        list: Error messages, empty when the pool is valid
    """
    errors = []

    if not isinstance(pool, dict):
        return ["Pool must be an object"]

    for key in ("id", "sport", "label", "deadline"):
        if _is_missing(pool.get(key)):
            errors.append(f"Missing pool.{key}")

    if not _is_missing(pool.get("deadline")) and not _valid_timestamp(pool["deadline"]):
        errors.append(f"Invalid pool.deadline {pool['deadline']!r}")

    status = pool.get("status")
    if status is not None and status not in PoolStatus.ALL:
        errors.append(f"Unknown pool.status {status!r}")

    games = pool.get("games")
    if not isinstance(games, list) or not games:
        errors.append("Pool must contain at least one game")
        return errors

    ids = set()
    for i, game in enumerate(games):
        prefix = f"Game[{i}]"

        if not isinstance(game, dict):
            errors.append(f"{prefix}: must be an object")
            continue

        game_id = game.get("id")
        if _is_missing(game_id):
            errors.append(f"{prefix}: missing id")
        elif game_id in ids:
            errors.append(f"{prefix}: duplicate id {game_id}")
        else:
            ids.add(game_id)

        if _is_missing(game.get("awayTeam")):
            errors.append(f"{prefix}: missing awayTeam")
        if _is_missing(game.get("homeTeam")):
            errors.append(f"{prefix}: missing homeTeam")

        if _is_missing(game.get("startTime")):
            errors.append(f"{prefix}: missing startTime")
        elif not _valid_timestamp(game["startTime"]):
            errors.append(f"{prefix}: invalid startTime {game['startTime']!r}")

        if not _valid_line(game.get("spread")):
            errors.append(f"{prefix}: invalid spread")
        if not _valid_line(game.get("moneyline")):
            errors.append(f"{prefix}: invalid moneyline")
        if not _is_number(game.get("total")):
            errors.append(f"{prefix}: missing total")

    return errors


def validate_pools_document(document):
    """
    Validate a raw pools document

    Args:
        document: Parsed pools.json

    Returns:
        list: Error messages prefixed with the pool they belong to
    """
    errors = []

    if not isinstance(document, dict):
        return ["Pools document must be an object"]

    if _is_missing(document.get("currentPoolId")):
        errors.append("Missing currentPoolId")

    pools = document.get("pools")
    if not isinstance(pools, list):
        errors.append("Missing pools list")
        return errors

    ids = set()
    for i, pool in enumerate(pools):
        pool_id = pool.get("id") if isinstance(pool, dict) else None

        if _is_missing(pool_id):
            errors.append(f"Pool[{i}]: missing id")
        elif pool_id in ids:
            errors.append(f"Pool[{i}]: duplicate id {pool_id}")
        else:
            ids.add(pool_id)

        label = pool_id if not _is_missing(pool_id) else i
        errors.extend(f"Pool[{label}]: {error}" for error in validate_pool(pool))

    current_pool_id = document.get("currentPoolId")
    if not _is_missing(current_pool_id) and current_pool_id not in ids:
        errors.append(f"currentPoolId {current_pool_id} does not match any pool")

    if errors:
        logger.info(f"Pools document has {len(errors)} validation error(s)")

    return errors


def create_pool(pool_id, sport, label, deadline, games):
    """
    Build a new open pool record ready to paste into pools.json

    Games without an id get "<pool_id>-game-<n>".
    """
    return {
        "id": pool_id,
        "sport": sport,
        "label": label,
        "deadline": deadline,
        "status": PoolStatus.OPEN,
        "games": [
            {
                "id": game.get("id") or f"{pool_id}-game-{index}",
                "awayTeam": game["awayTeam"],
                "homeTeam": game["homeTeam"],
                "startTime": game["startTime"],
                "spread": {
                    "away": game["spread"]["away"],
                    "home": game["spread"]["home"],
                },
                "moneyline": {
                    "away": game["moneyline"]["away"],
                    "home": game["moneyline"]["home"],
                },
                "total": game["total"],
            }
            for index, game in enumerate(games, start=1)
        ],
    }


def pools_by_sport(document):
    """Group pools by sport, each list ordered by deadline"""
    grouped = {}
    for pool in document.pools:
        grouped.setdefault(pool.sport, []).append(pool)

    for pools in grouped.values():
        pools.sort(key=lambda pool: pool.deadline)

    return grouped


def next_pool_id(document, sport, current_pool_id=None):
    """
    Get the pool that follows current_pool_id among pools of one sport

    Wraps to the earliest pool when the current pool is the last one or is
    not a pool of that sport.

    Returns:
        str: Pool id, or None if the sport has no pools
    """
    pools = pools_by_sport(document).get(sport, [])
    if not pools:
        return None

    ids = [pool.id for pool in pools]
    if current_pool_id not in ids or ids.index(current_pool_id) == len(ids) - 1:
        return ids[0]

    return ids[ids.index(current_pool_id) + 1]


def rotate_current_pool(document, sport):
    """Return a copy of the pools document featuring the next pool of a sport"""
    next_id = next_pool_id(document, sport, document.current_pool_id)
    if next_id is None:
        logger.warning(f"No pools found for sport {sport}, current pool unchanged")
        return document

    logger.info(f"Rotating current pool {document.current_pool_id} -> {next_id}")
    return document.with_current_pool_id(next_id)


def results_template(pool, existing=None):
    """
    Build the results block for a pool with a slot for every game

    Args:
        pool: Pool to build results for
        existing: Raw results already recorded for this pool

    Returns:
        dict: Game id mapped to {awayScore, homeScore}; scores not yet
        recorded are None. Games not in the pool are dropped.
    """
    existing = existing or {}
    template = {}

    for game in pool.games:
        recorded = existing.get(game.id) or {}
        template[game.id] = {
            "awayScore": recorded.get("awayScore"),
            "homeScore": recorded.get("homeScore"),
        }

    return template
