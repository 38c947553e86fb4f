import logging

from flask import Flask
from flasgger import Swagger
from flask_cors import CORS

from .config import get_config
from .errors import register_error_handlers
from .request_logging import register_request_logging
from models import storage

# Exposes /swagger.json and the UI at /api-docs/
SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "Github Search API",
        "version": "1.0.0",
        "description": "User sign-up/login with JWT access and refresh tokens, and a GitHub repository search proxy.",
    },
    "basePath": "/",
    "schemes": ["http", "https"],
    "securityDefinitions": {
        "Bearer": {
            "type": "apiKey",
            "name": "Authorization",
            "in": "header",
            "description": "Enter the token with the `Bearer ` prefix, e.g. \"Bearer abcde12345\"."
        }
    }
}

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec_1",
            "route": "/swagger.json",
            "rule_filter": lambda rule: True,   # include all endpoints
            "model_filter": lambda tag: True,   # include all models
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/api-docs/",
}

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def configure_logging(level: str):
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, datefmt="%H:%M:%S")
    # basicConfig is a no-op once handlers exist; keep the level in sync anyway
    logging.getLogger().setLevel(level.upper())


def create_app(config_name: str | None = None, overrides: dict | None = None) -> Flask:
    """
    Application factory: creates and configures the Flask app.
    `overrides` are applied on top of the selected config class (tests use it
    to point DATABASE_URL at a temporary file).
    """
    app = Flask(__name__)

    # Load configuration (reads .env via get_config)
    app.config.from_object(get_config(config_name))
    if overrides:
        app.config.update(overrides)

    configure_logging(app.config["LOG_LEVEL"])

    # Bind the DBStorage singleton to this app's database
    storage.reload(app.config["DATABASE_URL"], echo=app.config["SQL_ECHO"])

    CORS(app, resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}})

    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)

    register_error_handlers(app)
    register_request_logging(app)

    from .health import bp as health_bp
    from .auth import bp as auth_bp
    from .github import bp as github_bp

    app.register_blueprint(health_bp, url_prefix="/api")
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(github_bp, url_prefix="/api/github")

    # Ensure the DB session is removed at the end of each request/app context
    @app.teardown_appcontext
    def remove_session(exception=None):
        storage.close()

    @app.route("/")
    def root():
        return {
            "message": "Welcome to Github Search API",
            "docs": "/api-docs/",
            "health": "/api/health",
        }, 200

    return app
