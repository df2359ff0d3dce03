from __future__ import annotations

import re

from flask import Blueprint, current_app, jsonify, redirect, request, session

from tastematch.services.auth_service import (
    SpotifyAuthError,
    SpotifyAuthService,
    clear_token,
    store_token,
)

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")

DEFAULT_LANDING_PATH = "/dashboard"
_COMPARE_PATH = re.compile(r"^/compare/[A-Za-z0-9_-]+$")


def _landing_url(state: str | None) -> str:
    """Only relative compare links are honoured as post-login targets."""
    base_url = current_app.config.get("PUBLIC_BASE_URL", "").rstrip("/")
    path = state if state and _COMPARE_PATH.match(state) else DEFAULT_LANDING_PATH
    return f"{base_url}{path}"


@auth_bp.get("/login/spotify")
def login():
    """
    GET /api/auth/login/spotify?callbackUrl=/compare/<sessionId>

    Redirects to Spotify's consent screen; callbackUrl travels in ``state``.
    """
    auth = SpotifyAuthService.from_config(current_app.config)
    callback_url = (request.args.get("callbackUrl") or "").strip() or None
    return redirect(auth.build_authorize_url(state=callback_url))


@auth_bp.get("/callback/spotify")
def callback():
    error = request.args.get("error")
    if error:
        current_app.logger.info("Spotify authorization declined: %s", error)
        return jsonify({"error": f"Spotify authorization failed: {error}"}), 400

    code = (request.args.get("code") or "").strip()
    if not code:
        return jsonify({"error": "code is required"}), 400

    auth = SpotifyAuthService.from_config(current_app.config)
    try:
        token = auth.exchange_code(code)
    except SpotifyAuthError as exc:
        return jsonify({"error": str(exc)}), 502

    store_token(session, token)
    return redirect(_landing_url(request.args.get("state")))


@auth_bp.get("/logout")
def logout():
    clear_token(session)
    return jsonify({"status": "ok"}), 200
