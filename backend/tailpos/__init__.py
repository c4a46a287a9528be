# backend/tailpos/__init__.py
import os

from flask import Flask

from .config import Config
from .extensions import db, migrate


def create_app(config_overrides: dict | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    os.makedirs(app.instance_path, exist_ok=True)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Import models so Alembic can discover metadata reliably
    from . import models  # noqa: F401

    # Register blueprints
    from .routes.system import system_bp
    from .routes.auth import auth_bp
    from .routes.products import products_bp
    from .routes.pos import pos_bp
    from .routes.sales import sales_bp

    app.register_blueprint(system_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(products_bp)
    app.register_blueprint(pos_bp)
    app.register_blueprint(sales_bp)

    from .services.receipt_service import price_format, number_format
    app.add_template_filter(price_format, "price")
    app.add_template_filter(number_format, "number")

    # One till session per running app
    from .services.register_service import PosSession, EXTENSION_KEY
    app.extensions[EXTENSION_KEY] = PosSession()

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    return app
