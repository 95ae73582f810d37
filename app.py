import logging

from flask import Flask, redirect, request, session, url_for

from config import Config
from services.geo_capability import GeoCapabilityRegistry
from utils.db import init_db_connection

# Import controllers
from controllers.auth_controller import auth_bp
from controllers.config_controller import odoo_config_bp
from controllers.face_attendance_controller import face_attendance_bp
from controllers.attendance_controller import attendance_bp

# Reachable without an Odoo login
PUBLIC_ENDPOINTS = ["auth.index", "auth.login", "auth.logout", "odoo_config.index", "static"]


def configure_logging(app):
    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(config_object=Config):
    app = Flask(__name__)               # Initialize Flask app
    app.config.from_object(config_object)
    configure_logging(app)
    init_db_connection(app)             # Initialize MongoDB connection

    # Geo field support, discovered per Odoo server for the process lifetime
    app.extensions["geo_capabilities"] = GeoCapabilityRegistry()

    # Register Blueprint
    app.register_blueprint(auth_bp)
    app.register_blueprint(odoo_config_bp)
    app.register_blueprint(face_attendance_bp)
    app.register_blueprint(attendance_bp)

    # Globally injects user_name from the session into all templates
    @app.context_processor
    def inject_user():
        return dict(user_name=session.get("user_name"))

    # Block all routes except the public ones if not logged in
    @app.before_request
    def require_login():
        if "odoo_token" not in session and request.endpoint not in PUBLIC_ENDPOINTS:
            return redirect(url_for("auth.login"))
        return None

    return app


app = create_app()


# Run the app
if __name__ == "__main__":
    app.run(debug=app.config["DEBUG"])
