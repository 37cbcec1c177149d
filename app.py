import logging
from datetime import time

import click
from flask import Flask, request, jsonify
from flask_migrate import Migrate
from werkzeug.exceptions import HTTPException

from config import Config
from models import db
from routes import ALL_BLUEPRINTS
from security.csrf import init_csrf
from utils.auth_context import load_current_user
from utils.emailer import Mailer
from utils.errors import AppError
from utils.seed import seed_roles

logger = logging.getLogger(__name__)


def configure_logging(app):
    logging.basicConfig(
        level=getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def register_error_handlers(app):
    @app.errorhandler(AppError)
    def _app_error(exc):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.path, exc.message)
            return jsonify(error="Internal server error"), exc.status_code
        return jsonify(error=exc.message), exc.status_code

    @app.errorhandler(HTTPException)
    def _http_error(exc):
        if exc.code is None or exc.code < 400:
            # routing redirects
            return exc
        return jsonify(error=exc.description), exc.code

    @app.errorhandler(Exception)
    def _unexpected(exc):
        db.session.rollback()
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify(error="Internal server error"), 500


def create_app(overrides=None, mailer=None, clock=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    configure_logging(app)

    # Collaborators live on the app instead of module globals
    app.extensions["mailer"] = mailer or Mailer.from_config(app.config)
    if clock is not None:
        app.extensions["clock"] = clock

    for bp in ALL_BLUEPRINTS:
        app.register_blueprint(bp)

    # Database init
    db.init_app(app)

    # Migrations
    Migrate(app, db)

    with app.app_context():
        if app.config.get("AUTO_CREATE_TABLES"):
            db.create_all()
        seed_roles()

    @app.before_request
    def _load_user():
        load_current_user()

    init_csrf(app)

    @app.after_request
    def add_security_headers(resp):
        resp.headers["X-Content-Type-Options"] = "nosniff"
        resp.headers["X-Frame-Options"] = "DENY"
        resp.headers["Referrer-Policy"] = "no-referrer"
        resp.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none';"
        return resp

    register_error_handlers(app)
    register_cli(app)

    logger.info("App created (database: %s)", app.config["SQLALCHEMY_DATABASE_URI"].split("://", 1)[0])
    return app

#-------------------------
from decimal import Decimal

from models.availability import Availability
from models.service import Service
from models.user import User
from security.password import hash_password
from utils.seed import get_role


def register_cli(app):
    @app.cli.command("make-provider")
    @click.argument("email")
    def make_provider(email):
        """Grant the PROVIDER role to a user by email."""
        user = User.query.filter_by(email=email.strip().lower()).first()
        if not user:
            click.echo("User not found")
            return

        role = get_role("PROVIDER")
        if role not in user.roles:
            user.roles.append(role)
        db.session.commit()
        click.echo(f"{user.email} is now a PROVIDER")

    @app.cli.command("seed-demo")
    def seed_demo():
        """Create a demo provider and customer with services and weekday availability."""
        if User.query.filter_by(email="provider@example.com").first():
            click.echo("Demo data already present")
            return

        provider = User(
            email="provider@example.com",
            name="Jane Provider",
            phone="555-123-4567",
            address="123 Provider St, Business City",
            password_hash=hash_password("provider123"),
            roles=[get_role("PROVIDER")],
        )
        customer = User(
            email="customer@example.com",
            name="John Customer",
            phone="555-987-6543",
            address="456 Customer Ave, Hometown",
            password_hash=hash_password("customer123"),
            roles=[get_role("CUSTOMER")],
        )
        db.session.add_all([provider, customer])
        db.session.flush()

        db.session.add_all([
            Service(provider_id=provider.id, name="Haircut", description="Professional haircut service",
                    duration_minutes=60, price=Decimal("45.00")),
            Service(provider_id=provider.id, name="Manicure", description="Professional nail care for your hands",
                    duration_minutes=45, price=Decimal("35.00")),
        ])
        # Monday and Wednesday, 9:00 to 17:00
        for day in (1, 3):
            db.session.add(Availability(provider_id=provider.id, day_of_week=day,
                                        start_time=time(9, 0), end_time=time(17, 0), is_recurring=True))
        db.session.commit()
        click.echo("Demo provider and customer created")

#-------------------------


if __name__ == "__main__":
    app = create_app()
    # Run locally
    app.run(host="127.0.0.1", port=5002)
