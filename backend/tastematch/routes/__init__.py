from flask import Flask, jsonify

from tastematch.services.auth_service import SpotifyAuthError
from tastematch.services.comparison_service import IncompleteSessionError, NotAParticipantError
from tastematch.services.spotify_service import SpotifyServiceError
from tastematch.session_store import SessionConflictError
from tastematch.utils.validation import ValidationError

from .auth_routes import auth_bp
from .compare_routes import compare_bp
from .debug_routes import debug_bp
from .health_routes import health_bp
from .playlist_routes import playlist_bp
from .user_routes import user_bp

__all__ = ["register_routes"]


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def handle_validation_error(exc: ValidationError):
        return jsonify({"error": str(exc)}), 400

    @app.errorhandler(SpotifyAuthError)
    def handle_auth_error(exc: SpotifyAuthError):
        return jsonify({"error": str(exc)}), 401

    @app.errorhandler(NotAParticipantError)
    def handle_not_a_participant(exc: NotAParticipantError):
        return jsonify({"error": str(exc)}), 403

    @app.errorhandler(IncompleteSessionError)
    def handle_incomplete_session(exc: IncompleteSessionError):
        return jsonify({"error": str(exc)}), 404

    @app.errorhandler(SessionConflictError)
    def handle_session_conflict(exc: SessionConflictError):
        return jsonify({"error": str(exc)}), 409

    @app.errorhandler(SpotifyServiceError)
    def handle_spotify_error(exc: SpotifyServiceError):
        app.logger.warning("Spotify request failed (status=%s): %s", exc.status_code, exc)
        return jsonify({"error": str(exc), "spotifyStatus": exc.status_code}), 502


def register_routes(app: Flask) -> None:
    app.register_blueprint(health_bp)
    app.register_blueprint(debug_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(user_bp)
    app.register_blueprint(compare_bp)
    app.register_blueprint(playlist_bp)
    register_error_handlers(app)
