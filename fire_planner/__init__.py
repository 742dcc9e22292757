"""FIRE Planner Flask Application Factory."""

import logging
from typing import Optional

from flask import Flask

from fire_planner.config import get_global_settings


def create_app(config_name: Optional[str] = None) -> Flask:
    """Create and configure the Flask application.

    Args:
        config_name: Configuration name (development, testing, production);
            defaults to the APP_ENV setting

    Returns:
        Flask: Configured Flask application instance
    """
    app = Flask(__name__)

    # Configuration from Pydantic Settings
    settings = get_global_settings()
    app.config["SECRET_KEY"] = settings.secret_key
    app.config["APP_ENV"] = config_name or settings.app_env
    app.config["DEBUG"] = app.config["APP_ENV"] == "development"
    app.config["TESTING"] = app.config["APP_ENV"] == "testing"
    app.config["MONTE_CARLO_WORKERS"] = settings.monte_carlo_workers
    app.config["MONTE_CARLO_MAX_TRIALS"] = settings.monte_carlo_max_trials
    app.config["MONTE_CARLO_DEFAULT_SEED"] = settings.monte_carlo_default_seed

    logging.basicConfig(level=settings.log_level)
    app.logger.setLevel(settings.log_level)

    # Register blueprints
    from fire_planner.blueprints.health import health_bp
    from fire_planner.blueprints.simulation import simulation_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(simulation_bp)

    return app
