"""Personal site calculators Flask Application Factory."""

from typing import Optional

from flask import Flask

from moneylab.config import get_global_settings


def create_app(config_name: Optional[str] = None) -> Flask:
    """Create and configure the Flask application.

    Args:
        config_name: Configuration name (development, testing, production)

    Returns:
        Flask: Configured Flask application instance
    """
    app = Flask(__name__)

    # Configuration from Pydantic Settings
    settings = get_global_settings()
    app.config["SECRET_KEY"] = settings.secret_key
    app.config["ENV"] = config_name or settings.flask_env
    app.config["DEBUG"] = settings.is_development
    app.config["TESTING"] = (config_name or settings.app_env) == "testing"
    app.config["TAX_YEAR"] = settings.tax_year
    app.logger.setLevel(settings.log_level)

    # Register blueprints
    from moneylab.blueprints.die_with_zero import die_with_zero_bp
    from moneylab.blueprints.health import health_bp
    from moneylab.blueprints.tax_calculator import tax_calculator_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(die_with_zero_bp)
    app.register_blueprint(tax_calculator_bp)

    return app
