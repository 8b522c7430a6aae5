import logging
from functools import wraps

from flask import jsonify, request

from pickem import limiter
from pickem.routes.api import bp
from pickem.services import PoolService
from pickem.utils.submission import PoolClosedError, SubmissionError
from pickem.utils.timezone_utils import get_utc_time

logger = logging.getLogger(__name__)


def add_cache_headers(f):
    """Keep browsers from holding on to pool status and scores"""

    @wraps(f)
    def decorated_function(*args, **kwargs):
        response = f(*args, **kwargs)
        if hasattr(response, "headers"):
            response.headers["Cache-Control"] = (
                "no-store, no-cache, must-revalidate, max-age=0"
            )
        return response

    return decorated_function


def _get_pool_or_404(service, pool_id):
    pool = service.get_pool(pool_id)
    if pool is None:
        return None, (jsonify({"error": f"Pool {pool_id} not found"}), 404)
    return pool, None


@bp.route("/health")
@limiter.exempt
def health():
    """Health check endpoint - exempt from rate limiting for monitoring systems"""
    return jsonify(
        {"status": "healthy", "timestamp": get_utc_time().isoformat()}
    )


@bp.route("/pools")
@add_cache_headers
def pools():
    """Get all pools with their current status"""
    service = PoolService.from_app()
    document = service.pools_document()

    sport = request.args.get("sport")
    pools = service.pools_for_sport(sport) if sport else document.pools

    return jsonify(
        {
            "currentPoolId": document.current_pool_id,
            "sports": document.sports,
            "pools": [pool.to_dict() for pool in pools],
        }
    )


@bp.route("/pools/current")
@add_cache_headers
def current_pool():
    """Get the featured pool"""
    pool = PoolService.from_app().current_pool()
    if pool is None:
        return jsonify({"error": "No pools available"}), 404
    return jsonify(pool.to_dict())


@bp.route("/pools/<pool_id>")
@add_cache_headers
def pool_detail(pool_id):
    """Get one pool"""
    pool, error = _get_pool_or_404(PoolService.from_app(), pool_id)
    if error:
        return error
    return jsonify(pool.to_dict())


@bp.route("/pools/<pool_id>/grades")
@add_cache_headers
def pool_grades(pool_id):
    """Get the winning side of each bet type for every finished game"""
    service = PoolService.from_app()
    pool, error = _get_pool_or_404(service, pool_id)
    if error:
        return error

    return jsonify({"poolId": pool.id, "grades": service.grades(pool)})


@bp.route("/pools/<pool_id>/leaderboard")
@add_cache_headers
def pool_leaderboard(pool_id):
    """Get the ranked leaderboard for a pool"""
    service = PoolService.from_app()
    pool, error = _get_pool_or_404(service, pool_id)
    if error:
        return error

    leaderboard = service.leaderboard(pool)

    return jsonify(
        {
            "poolId": pool.id,
            "label": pool.label,
            "status": pool.status,
            "maxScore": service.max_score(pool),
            "leaderboard": [row.to_dict() for row in leaderboard],
        }
    )


@bp.route("/pools/<pool_id>/entries/<user>")
@add_cache_headers
def entry_score(pool_id, user):
    """Get the per-game scoring breakdown for a user's entry"""
    service = PoolService.from_app()
    pool, error = _get_pool_or_404(service, pool_id)
    if error:
        return error

    breakdown = service.entry_breakdown(pool, user)
    if breakdown is None:
        return jsonify({"error": f"No entry for {user} in pool {pool_id}"}), 404

    return jsonify(breakdown)


@bp.route("/pools/<pool_id>/entry", methods=["POST"])
@limiter.limit("30 per minute")
def submit_entry(pool_id):
    """Build the entry record for submitted picks"""
    service = PoolService.from_app()
    pool, error = _get_pool_or_404(service, pool_id)
    if error:
        return error

    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Request body must be a JSON object"}), 400

    try:
        entry = service.submit_entry(pool, data.get("user"), data.get("picks"))
    except PoolClosedError as e:
        return jsonify({"error": str(e), "status": e.status}), 409
    except SubmissionError as e:
        logger.info(f"Rejected entry for pool {pool_id}: {e}")
        return jsonify({"error": str(e)}), 400

    return jsonify(
        {
            "entry": entry.to_dict(),
            "instructions": "Copy this into data/entries.json",
        }
    )
