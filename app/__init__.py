from logging.config import dictConfig

import click
from flask import Flask, flash, redirect, render_template, url_for

from .errors import ProfileRequired, StoreUnavailable
from .extensions import db, migrate, login_manager, oauth

def configure_logging(level):
    dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": {
            "format": "[%(asctime)s] %(levelname)s in %(name)s: %(message)s",
        }},
        "handlers": {"wsgi": {
            "class": "logging.StreamHandler",
            "stream": "ext://flask.logging.wsgi_errors_stream",
            "formatter": "default",
        }},
        "root": {"level": level, "handlers": ["wsgi"]},
    })

def register_error_handlers(app):
    @app.errorhandler(ProfileRequired)
    def profile_required(err):
        flash("Please fill in your details first")
        return redirect(url_for("student.main"))

    @app.errorhandler(StoreUnavailable)
    def store_unavailable(err):
        return render_template("error.html"), 500

    @app.errorhandler(500)
    def internal_error(err):
        return render_template("error.html"), 500

def register_commands(app):
    @app.cli.command("init-db")
    def init_db():
        """Create all tables without going through migrations."""
        db.create_all()
        click.echo("Database initialised")

def create_app(config_object="config.Config"):
    app = Flask(__name__)
    app.config.from_object(config_object)
    configure_logging(app.config["LOG_LEVEL"])

    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    login_manager.login_view = "auth.login"
    login_manager.login_message = None

    oauth.init_app(app)
    oauth.register(
        "google",
        client_id=app.config["GOOGLE_CLIENT_ID"],
        client_secret=app.config["GOOGLE_CLIENT_SECRET"],
        server_metadata_url=app.config["GOOGLE_DISCOVERY_URL"],
        client_kwargs={"scope": "openid email profile"},
        overwrite=True,
    )

    from . import models
    from .services.identity import IdentityManager

    identity = IdentityManager(hash_method=app.config["PASSWORD_HASH_METHOD"])
    app.extensions["identity"] = identity

    @login_manager.user_loader
    def load_user(user_id):
        return identity.deserialize(user_id)

    from .blueprints.auth import bp as auth_bp
    from .blueprints.student import bp as student_bp
    app.register_blueprint(auth_bp)
    app.register_blueprint(student_bp)
    register_error_handlers(app)
    register_commands(app)

    return app
