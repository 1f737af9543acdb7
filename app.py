import click
from flask import Flask
from flask_migrate import Migrate

from config import Config, validate_config
from errors import AppError, register_error_handlers
from models import db
from routes import health_bp, auth_bp, users_bp, products_bp, booking_bp
from services import EXTENSION_KEY, build_services, get_services
from utils.auth_context import load_current_user
from utils.logger import configure_logging, register_request_logging


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    # No token may be issued without a secret: refuse to start instead
    validate_config(app.config)

    # Database init
    db.init_app(app)

    # Migrations
    Migrate(app, db)

    # Components are built once and share the request-scoped db session
    app.extensions[EXTENSION_KEY] = build_services(db.session, app.config)

    # Register routes
    app.register_blueprint(health_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(products_bp)
    app.register_blueprint(booking_bp)

    register_error_handlers(app)
    register_request_logging(app)

    @app.before_request
    def _load_user():
        load_current_user()

    @app.after_request
    def add_security_headers(resp):
        resp.headers["X-Content-Type-Options"] = "nosniff"
        resp.headers["X-Frame-Options"] = "DENY"
        resp.headers["Referrer-Policy"] = "no-referrer"
        resp.headers["Cache-Control"] = "no-store"
        resp.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none';"
        return resp

    register_cli(app)

    return app

#-------------------------

def register_cli(app):
    @app.cli.command("create-user")
    @click.argument("username")
    @click.argument("email")
    @click.option("--name", default=None, help="Display name.")
    @click.password_option()
    def create_user(username, email, name, password):
        """Register a user from the command line (bootstrap)."""
        try:
            user = get_services().auth.register(
                {"username": username, "email": email, "name": name, "password": password}
            )
        except AppError as exc:
            raise click.ClickException(str(exc.message))
        click.echo(f"{user.username} registered with id {user.id}")

#-------------------------


if __name__ == "__main__":
    app = create_app()
    # Run locally
    app.run(host="127.0.0.1", port=5002)
