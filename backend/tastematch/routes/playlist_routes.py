from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request, session

from tastematch.services.auth_service import get_access_token
from tastematch.services.comparison_service import get_comparison_service
from tastematch.utils.validation import require_fields

playlist_bp = Blueprint("playlist", __name__, url_prefix="/api/playlist")


@playlist_bp.post("/create")
def create_playlist():
    """
    POST /api/playlist/create
    Body: { "sessionId": string }

    Returns:
    {
      "playlistId": string,
      "playlistUrl": string,
      "trackCount": number,
      "name": string
    }
    """
    data = request.get_json(silent=True) or {}
    require_fields(data, ["sessionId"])
    session_id = str(data["sessionId"]).strip()

    access_token = get_access_token(session)

    service = get_comparison_service()
    comparison_session = service.store.get(session_id)
    if comparison_session is None or not comparison_session.has_user2:
        return jsonify({"error": "Session not found or incomplete"}), 404

    result = service.create_blended_playlist(comparison_session, access_token)
    current_app.logger.info("Blended playlist %s for session %s", result["playlistId"], session_id)
    return jsonify(result), 200
