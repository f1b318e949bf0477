from flask import Flask, jsonify
from flask_cors import CORS
from dotenv import load_dotenv
import os
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from sqlalchemy.exc import SQLAlchemyError
from cems.extensions import db, migrate, jwt
from cems.exceptions import CemsError
from datetime import timedelta
import logging

# Load environment variables
load_dotenv()


def create_app(test_config=None):
    app = Flask(__name__)

    # Set testing mode from environment variable
    app.config["TESTING"] = os.getenv("FLASK_ENV") in ["development", "testing"]

    # Configure logging
    logging.basicConfig(level=logging.INFO)
    app.logger.setLevel(logging.INFO)

    # Configure database
    app.config["SQLALCHEMY_DATABASE_URI"] = os.getenv(
        "DATABASE_URL", "sqlite:///cems.db"
    )
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False

    # Configure JWT
    app.config["JWT_SECRET_KEY"] = os.getenv("JWT_SECRET_KEY", "your-secret-key")
    app.config["JWT_ACCESS_TOKEN_EXPIRES"] = timedelta(days=1)
    app.config["JWT_TOKEN_LOCATION"] = ["headers"]
    app.config["JWT_HEADER_NAME"] = "Authorization"
    app.config["JWT_HEADER_TYPE"] = "Bearer"

    app.config["RATELIMIT_ENABLED"] = os.getenv("RATELIMIT_ENABLED", "true").lower() in ["true", "1", "t"]

    if test_config:
        app.config.update(test_config)

    # Implement rate limiting using flask-limiter
    Limiter(
        get_remote_address,
        app=app,
        default_limits=["150 per minute, 10000 per hour, 100000 per day"],
        storage_uri=os.getenv("LIMITER_STORAGE_URI", "memory://"),
        strategy="fixed-window",
    )

    # Initialize Flask extensions
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    # Registers the JWT error loaders on the shared manager
    import cems.auth  # noqa: F401

    # Register blueprints
    from cems.routes.auth_routes import auth_bp
    from cems.routes.event_routes import event_bp
    from cems.routes.user_routes import user_bp
    from cems.routes.dashboard_routes import dashboard_bp
    from cems.routes.interest_routes import interest_bp

    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(event_bp, url_prefix="/api")
    app.register_blueprint(user_bp, url_prefix="/api")
    app.register_blueprint(dashboard_bp, url_prefix="/api")
    app.register_blueprint(interest_bp, url_prefix="/api")

    register_error_handlers(app)

    # Set up CORS
    cors_origins = os.getenv(
        "CORS_ORIGINS",
        "http://localhost:3000,http://127.0.0.1:3000,http://localhost:4000",
    ).split(",")
    app.logger.info(f"Initializing CORS with origins: {cors_origins}")

    CORS(
        app,
        resources={
            r"/api/*": {"origins": cors_origins},
        },
        supports_credentials=True,
        methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "Accept"],
        expose_headers=["Content-Type"],
    )

    return app


def register_error_handlers(app):
    @app.errorhandler(CemsError)
    def handle_cems_error(error):
        app.logger.info(f"{type(error).__name__}: {error.message}")
        body = {"message": error.message}
        if getattr(error, "fields", None):
            body["missing_fields"] = error.fields
        return jsonify(body), error.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(error):
        db.session.rollback()
        app.logger.error(f"Database error: {str(error)}")
        return jsonify({"message": "A database error occurred"}), 500

    @app.errorhandler(404)
    def handle_not_found(error):
        return jsonify({"message": "Resource not found"}), 404

    @app.errorhandler(405)
    def handle_method_not_allowed(error):
        return jsonify({"message": "Method not allowed"}), 405
