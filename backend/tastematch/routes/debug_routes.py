# tastematch/routes/debug_routes.py
from flask import Blueprint, current_app, jsonify, request

# All routes in this blueprint will be under /api
debug_bp = Blueprint("debug", __name__, url_prefix="/api")


def _presence(value: str | None) -> dict:
    # Never echo secrets back, only whether they are set
    return {"set": bool(value), "length": len(value or "")}


@debug_bp.get("/debug")
def debug_config():
    config = current_app.config
    if config.get("FLASK_ENV") == "production":
        expected = config.get("DEBUG_KEY")
        if not expected or request.args.get("key") != expected:
            return jsonify({"error": "Unauthorized"}), 401

    return jsonify(
        {
            "status": "ok",
            "environment": config.get("FLASK_ENV"),
            "spotifyClientId": _presence(config.get("SPOTIFY_CLIENT_ID")),
            "spotifyClientSecret": _presence(config.get("SPOTIFY_CLIENT_SECRET")),
            "spotifyRedirectUri": config.get("SPOTIFY_REDIRECT_URI"),
            "publicBaseUrl": config.get("PUBLIC_BASE_URL"),
            "secretKey": _presence(config.get("SECRET_KEY")),
        }
    )
