"""
Flask application factory.

Creates and configures the Flask app, ensures the schema exists and registers
the app history blueprint.
"""
from flask import Flask


def create_app():
    """Create and configure the Flask application."""
    from apptracker.logging_config import configure_logging
    from apptracker.database import init_db

    app = Flask(__name__)

    configure_logging(app)

    # Embedded store: create the table on startup. Managed deployments run
    # the alembic revision instead; create_all is a no-op once it exists.
    init_db()

    from apptracker.routes.history import bp as history_bp
    app.register_blueprint(history_bp)

    return app
