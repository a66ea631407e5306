from flask import Flask, jsonify
from flask_cors import CORS
from rentacar.config import settings
from rentacar.api.middleware import register_error_handlers
from rentacar.api.routes.bookings import bookings_bp
from rentacar.api.routes.vehicles import vehicles_bp
import logging

logger = logging.getLogger(__name__)


def create_app() -> Flask:
    logging.basicConfig(level=settings.log_level)

    app = Flask(__name__)
    app.config["SECRET_KEY"] = settings.secret_key

    app.register_blueprint(bookings_bp)
    app.register_blueprint(vehicles_bp)
    register_error_handlers(app)

    CORS(
        app,
        origins=[settings.frontend_url],
        supports_credentials=True,
    )

    @app.route("/")
    def root():
        return jsonify({"message": "Rent-a-Car Booking API", "version": "1.0.0"})

    @app.route("/health")
    def health():
        return jsonify({"status": "healthy"})

    logger.info(f"Application created (development mode: {settings.is_dev()})")
    return app


app = create_app()
