from __future__ import annotations

import os
from typing import Any, Dict

from flask import Flask, jsonify, g, request

from portfolio.config import Config
from portfolio.content_types import register_case_study_type
from portfolio.errors import InvalidEntityError, NotFoundError, PersistenceError
from portfolio.extensions import db, migrate, limiter
from portfolio.hooks import APP_READY, REGISTER_CONTENT_TYPES, REGISTER_ROUTES, HookRegistry
from portfolio.logging_config import configure_logging
from portfolio.security import apply_security_headers
import portfolio.models  # noqa: F401  ensure models imported for migrations


def _register_api(app: Flask) -> None:
    from portfolio.blueprints.api.case_studies import bp as case_studies_bp

    app.register_blueprint(case_studies_bp, url_prefix=f"/{app.config['API_NAMESPACE']}")


def create_app(config_overrides: Dict[str, Any] | None = None, hooks: HookRegistry | None = None) -> Flask:
    """Build the application. Extra behaviour is plugged in through ``hooks``;
    the built-in content type and routes are registered ahead of it."""
    app = Flask(__name__, instance_relative_config=False)

    # Load config
    app.config.from_object(Config())
    if config_overrides:
        app.config.update(config_overrides)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    # Init extensions
    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)

    registry = HookRegistry()
    registry.register(REGISTER_CONTENT_TYPES, register_case_study_type)
    registry.register(REGISTER_ROUTES, _register_api)
    if hooks is not None:
        for stage in (REGISTER_CONTENT_TYPES, REGISTER_ROUTES, APP_READY):
            for callback in hooks.callbacks(stage):
                registry.register(stage, callback)
    app.extensions["portfolio.hooks"] = registry

    # Request context enrichment for logging
    @app.before_request
    def add_request_context() -> None:
        g.request_id = request.headers.get("X-Request-ID") or os.urandom(8).hex()

    # Security headers
    @app.after_request
    def set_headers(resp):
        resp.headers.setdefault("X-Request-ID", getattr(g, "request_id", ""))
        return apply_security_headers(resp)

    registry.run(REGISTER_CONTENT_TYPES, app)
    registry.run(REGISTER_ROUTES, app)

    # Health route
    @app.get("/health")
    def health():
        try:
            db.session.execute(db.text("SELECT 1"))
            db_ok = "connected"
        except Exception:
            db_ok = "error"
        return jsonify({"status": "ok", "db": db_ok}), 200

    # Domain errors
    @app.errorhandler(NotFoundError)
    def domain_not_found(e: NotFoundError):
        return jsonify(e.to_dict()), e.status

    @app.errorhandler(InvalidEntityError)
    def invalid_entity(e: InvalidEntityError):
        return jsonify({"code": "invalid_case_study", "message": e.reason, "status": 400}), 400

    @app.errorhandler(PersistenceError)
    def persistence_error(e: PersistenceError):
        app.logger.error(f"Storage failure: {e}", exc_info=True)
        return jsonify({"code": "persistence_error", "message": "storage failure", "status": 500}), 500

    # Error handlers (JSON)
    @app.errorhandler(400)
    def bad_request(e):
        return jsonify({"error": "bad_request", "message": str(e)}), 400

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"error": "not_found", "message": "resource not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({"error": "method_not_allowed", "message": "method not allowed"}), 405

    @app.errorhandler(429)
    def rate_limited(e):
        return jsonify({"error": "rate_limited", "message": "too many requests"}), 429

    @app.errorhandler(500)
    def server_error(e):
        return jsonify({"error": "server_error", "message": "internal server error"}), 500

    # CLI: flask case-studies ...
    from portfolio.cli import case_studies_cli

    app.cli.add_command(case_studies_cli)

    registry.run(APP_READY, app)
    return app
