import logging

from flask import Flask, request
from config.config import Config
from flask_migrate import Migrate
from extensions import db, login_manager

# Route Imports
from routes.report_routes import reports_bp
from routes.department_routes import departments_bp
from routes.publication_routes import publications_bp

# Model Imports (registers every table with the metadata used by migrations)
import models  # noqa: F401

from services import auth_service
from utils.errors import AuthenticationError, register_error_handlers

migrate = Migrate()


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    # Initialize Extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)

    # Sessions live in the external auth service; every request is checked there
    @login_manager.request_loader
    def load_user_from_request(req):
        return auth_service.fetch_session_user(req.headers.get("Cookie"))

    @login_manager.unauthorized_handler
    def unauthorized():
        app.logger.info("Unauthenticated request to %s", request.path)
        raise AuthenticationError()

    # Register Blueprints
    app.register_blueprint(reports_bp)
    app.register_blueprint(departments_bp)
    app.register_blueprint(publications_bp)

    register_error_handlers(app)

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(host="0.0.0.0", port=5000, debug=True)
