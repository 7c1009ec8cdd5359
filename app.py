"""Application factory."""

import json
import logging
import os
import signal
import uuid

from flask import Flask, g, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException, NotFound, ServiceUnavailable

from config import Config, parse_duration, validate_settings
from models import MongoDB
from models.task import COLLECTION as TASKS
from models.user import COLLECTION as USERS
from routes.auth import auth_bp
from routes.docs import docs_bp
from routes.tasks import tasks_bp
from services import AuthService, TaskStore
from utils.errors import ValidationError
from utils.security import TokenIssuer

API_PREFIX = "/api/v1"
HEALTH_PATH = f"{API_PREFIX}/health"


def create_app(config_class: type[Config] = Config, mongo_client=None) -> Flask:
    """Create and configure the Flask application.

    ``mongo_client`` replaces the pymongo client built from ``MONGO_URI``;
    an injected client is connected synchronously, otherwise the connection
    is retried in the background until the server answers.
    """
    app = Flask(__name__)
    app.config.from_object(config_class)
    validate_settings(app.config)

    # Core subsystems
    token_issuer = TokenIssuer(
        app.config["JWT_SECRET"],
        parse_duration(app.config.get("JWT_EXPIRES_IN", "7d")),
        algorithm=app.config.get("JWT_ALGORITHM", "HS256"),
    )
    mongo = MongoDB(app, client=mongo_client)
    auth_service = AuthService(mongo.collection(USERS), token_issuer)
    task_store = TaskStore(mongo.collection(TASKS))
    mongo.on_connect(auth_service.ensure_indexes)
    mongo.on_connect(task_store.ensure_indexes)

    app.extensions["token_issuer"] = token_issuer
    app.extensions["auth_service"] = auth_service
    app.extensions["task_store"] = task_store

    # CORS
    CORS(
        app,
        resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}},
        supports_credentials=True,
    )

    # Blueprints
    app.register_blueprint(auth_bp, url_prefix=f"{API_PREFIX}/auth")
    app.register_blueprint(tasks_bp, url_prefix=f"{API_PREFIX}/tasks")
    app.register_blueprint(docs_bp, url_prefix="/api-docs")

    # Health
    @app.route(HEALTH_PATH, methods=["GET"])
    def health_check():
        healthy = mongo.connected
        return (
            jsonify(
                {
                    "status": "ok" if healthy else "degraded",
                    "database": mongo.state,
                }
            ),
            200 if healthy else 503,
        )

    _register_error_handlers(app)
    _register_database_gate(app, mongo)

    if mongo_client is not None:
        mongo.connect()
    else:
        mongo.start_background_connect()

    return app


def _register_database_gate(app: Flask, mongo: MongoDB) -> None:
    """Reject API calls with 503 until the database is reachable."""

    @app.before_request
    def _require_database():
        if request.method == "OPTIONS" or request.path == HEALTH_PATH:
            return None
        if request.path.startswith("/api/") and not mongo.connected:
            raise ServiceUnavailable("Database not connected")
        return None


def _register_error_handlers(app: Flask) -> None:
    """Register JSON error handlers with request IDs."""

    @app.before_request
    def _assign_request_id():
        g.request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    @app.after_request
    def _add_request_id_header(response):
        request_id = g.get("request_id")
        if request_id:
            response.headers.setdefault("X-Request-ID", request_id)
        return response

    @app.errorhandler(HTTPException)
    def _handle_http_exception(error: HTTPException):
        payload = {"message": error.description}
        if isinstance(error, NotFound) and request.url_rule is None:
            payload["message"] = "Route not found"
        if isinstance(error, ValidationError):
            payload["details"] = error.details
        response = error.get_response()
        response.data = json.dumps(payload)
        response.content_type = "application/json"
        return response

    @app.errorhandler(Exception)
    def _handle_unexpected(error: Exception):
        app.logger.exception("Unhandled application error", exc_info=error)
        response = jsonify({"message": "Internal server error"})
        response.status_code = 500
        return response


def _raise_keyboard_interrupt(signum, frame):
    raise KeyboardInterrupt


if __name__ == "__main__":
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", Config.LOG_LEVEL),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # SIGTERM takes the same shutdown path as Ctrl-C.
    signal.signal(signal.SIGTERM, _raise_keyboard_interrupt)
    application = create_app()
    try:
        application.run(host="0.0.0.0", port=application.config["PORT"])
    except KeyboardInterrupt:
        pass
    finally:
        application.extensions["mongo"].close()
        logging.getLogger(__name__).info("Server stopped")
