import logging
import os
from pathlib import Path
from flask import Flask
from .config import get_config
from .logging_config import setup_logging
from .extensions import db, migrate, socketio
from .routes.flights import flights_bp
from .routes.results import results_bp
from .routes.nominations import nominations_bp
from .routes.login import login_bp
from . import models  # Import models so they are registered with SQLAlchemy
from .real_time.event_handlers import register_all_handlers


logger = logging.getLogger(__name__)


def create_app(config_name: str | None = None, overrides: dict | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    config = get_config(config_name)
    app.config.from_object(config)
    if overrides:
        app.config.update(overrides)

    # Only take over logging when FLASK_LOG_LEVEL is set; otherwise keep Flask's defaults
    flask_log_level = os.environ.get('FLASK_LOG_LEVEL')
    if flask_log_level:
        setup_logging(flask_log_level)

    logger.info(f"Starting Flask app with config: {config.__name__}")

    # Init extensions
    db.init_app(app)
    migrate.init_app(app, db)
    socketio.init_app(
        app,
        cors_allowed_origins=app.config["SOCKETIO_CORS_ORIGINS"],
        async_mode=app.config["SOCKETIO_ASYNC_MODE"],
    )
    logger.debug("Database and WebSocket extensions initialized")

    with app.app_context():
        _initialize_database(config, app.config["SQLALCHEMY_DATABASE_URI"], app.instance_path)
        _seed_admin_user(app.config.get("ADMIN_EMAIL"), app.config.get("ADMIN_PASSWORD"))

    # Register blueprints
    app.register_blueprint(flights_bp)
    app.register_blueprint(results_bp)
    app.register_blueprint(nominations_bp)
    app.register_blueprint(login_bp)

    register_all_handlers()
    logger.info("Flask app created successfully")
    return app


def _initialize_database(config, db_uri: str, instance_path: str) -> None:
    """Create the schema when the database is new."""
    try:
        db_path = config.get_db_path(instance_path, db_uri)
        if db_path:
            # Ensure the directory for the SQLite file exists
            Path(os.path.dirname(db_path)).mkdir(parents=True, exist_ok=True)

        inspector = db.inspect(db.engine)
        if not inspector.get_table_names():
            logger.info("No tables found. Creating database tables...")
            db.create_all()
            logger.info("Database tables created successfully!")
        else:
            logger.info("Database tables already exist")
    except Exception as e:
        logger.error(f"Error during database initialization: {e}")
        logger.error(f"Database URI: {db_uri}")
        logger.error(f"Instance path: {instance_path}")
        raise


def _seed_admin_user(email: str | None, password: str | None) -> None:
    """Create the configured admin account if it doesn't exist."""
    if not email or not password:
        return
    try:
        from .models import User
        from werkzeug.security import generate_password_hash

        if User.query.filter_by(email=email).first():
            logger.info("Admin user already exists")
            return

        logger.info("Creating default admin user...")
        db.session.add(User(
            email=email,
            password_hash=generate_password_hash(password),
            first_name="Admin",
            last_name="User",
            is_active=True
        ))
        db.session.commit()
        logger.info("Default admin user created successfully!")
    except Exception as e:
        logger.error(f"Error creating admin user: {e}")
        db.session.rollback()
        raise
