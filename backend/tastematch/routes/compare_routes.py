from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request, session

from tastematch.services.auth_service import get_access_token
from tastematch.services.comparison_service import get_comparison_service
from tastematch.utils.validation import parse_time_range

compare_bp = Blueprint("compare", __name__, url_prefix="/api/compare")


def _session_not_found():
    return jsonify({"error": "Session not found"}), 404


def _comparison_response(comparison_session, result):
    return jsonify(
        {
            "comparison": result.to_dict(),
            "user1": comparison_session.user1_profile.to_dict(),
            "user2": comparison_session.user2_profile.to_dict(),
        }
    ), 200


@compare_bp.get("/<session_id>")
def get_comparison_session(session_id: str):
    """
    GET /api/compare/<sessionId>

    Returns the public session summary (listener names, no listening data):
    { "sessionId", "user1", "user2", "hasUser2", "timeRange", "createdAt", "expiresAt" }
    """
    comparison_session = get_comparison_service().store.get(session_id)
    if comparison_session is None:
        return _session_not_found()

    return jsonify(comparison_session.to_dict()), 200


@compare_bp.post("/<session_id>")
def run_comparison(session_id: str):
    """
    POST /api/compare/<sessionId>
    Body:
    {
      "timeRange"?: "short_term" | "medium_term" | "long_term",
      "checkStatus"?: boolean,
      "trackMetricsOnly"?: boolean,
      "genresOnly"?: boolean,
      "topArtistsTracksOnly"?: boolean
    }

    Without flags the caller joins (if the seat is open) or both profiles
    are refetched, then the full comparison is returned.
    """
    data = request.get_json(silent=True) or {}
    service = get_comparison_service()

    comparison_session = service.store.get(session_id)
    if comparison_session is None:
        return _session_not_found()

    if data.get("checkStatus"):
        return jsonify(service.status(comparison_session)), 200

    access_token = get_access_token(session)
    time_range = parse_time_range(data.get("timeRange") or comparison_session.time_range)

    if not comparison_session.has_user2:
        joined = service.join(comparison_session, access_token, time_range)
        result = service.compare(joined, time_range)
        return _comparison_response(joined, result)

    service.authorize_participant(comparison_session, access_token)

    if data.get("trackMetricsOnly"):
        metrics1, metrics2 = service.track_metrics(comparison_session, time_range)
        return jsonify(
            {"trackMetricsComparison": {"user1": metrics1.to_dict(), "user2": metrics2.to_dict()}}
        ), 200

    if data.get("genresOnly"):
        return jsonify(service.genre_refresh(comparison_session, time_range)), 200

    if data.get("topArtistsTracksOnly"):
        updated, result = service.refresh_top_items(comparison_session, time_range)
        return _comparison_response(updated, result)

    updated, result = service.refresh(comparison_session, time_range)
    current_app.logger.info(
        "Session %s refreshed for %s: score=%d", session_id, time_range, result.compatibility_score
    )
    return _comparison_response(updated, result)
