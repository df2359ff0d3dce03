from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request, session

from tastematch.services.auth_service import get_access_token
from tastematch.services.comparison_service import get_comparison_service
from tastematch.utils.validation import parse_time_range

user_bp = Blueprint("user", __name__, url_prefix="/api/user")


@user_bp.get("/profile")
def get_profile():
    """
    GET /api/user/profile?timeRange=medium_term

    Fetches the caller's taste profile and opens a comparison session.

    Returns:
    {
      "user": { ...taste profile... },
      "sessionId": string,
      "shareUrl": string
    }
    """
    access_token = get_access_token(session)
    time_range = parse_time_range(request.args.get("timeRange"))

    comparison_session = get_comparison_service().start_session(access_token, time_range)
    base_url = current_app.config.get("PUBLIC_BASE_URL", "").rstrip("/")

    return jsonify(
        {
            "user": comparison_session.user1_profile.to_dict(),
            "sessionId": comparison_session.session_id,
            "shareUrl": f"{base_url}/compare/{comparison_session.session_id}",
        }
    ), 200
