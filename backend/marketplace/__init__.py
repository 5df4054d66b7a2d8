import pymysql
pymysql.install_as_MySQLdb()
from flask import Flask
from flask_cors import CORS

from .config import DevConfig
from .extensions import db, migrate, jwt, ma
from .utils.errors import register_error_handlers
from .cli import register_cli
from .api import (
    rental_routes,
    equipment_routes,
    provider_routes,
    chat_routes,
    admin_routes,
)

CORS_ALLOWED_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]


def create_app(config_class=DevConfig) -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    origins = app.config.get("CORS_ORIGINS") or "*"
    if origins != "*":
        origins = [o.strip() for o in origins.split(",") if o.strip()]

    # Preflight (OPTIONS) is answered by flask-cors with an empty 200
    CORS(
        app,
        resources={r"/api/*": {"origins": origins}},
        allow_headers=CORS_ALLOWED_HEADERS,
    )

    # Extensions
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    ma.init_app(app)

    # Blueprints
    app.register_blueprint(rental_routes.bp, url_prefix="/api/rentals")
    app.register_blueprint(equipment_routes.bp, url_prefix="/api/equipment")
    app.register_blueprint(provider_routes.bp, url_prefix="/api/providers")
    app.register_blueprint(chat_routes.bp, url_prefix="/api/chat")
    app.register_blueprint(admin_routes.bp, url_prefix="/api/admin")

    register_error_handlers(app)
    register_cli(app)

    @app.get("/api/health")
    def health_check():
        return {"status": "ok", "service": "service-marketplace-backend"}

    return app
