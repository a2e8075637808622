# pethub/__init__.py

# =====================================================================================
# 1. Environment (loaded before anything reads os.environ)
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. Imports
# =====================================================================================
import os
import logging
from flask import Flask, jsonify
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException
from flask_jwt_extended import JWTManager
import firebase_admin
from firebase_admin import credentials

# - configuration
from pethub.core.config import config_by_name

# - blueprints
from pethub.api.pet_status.routes import pet_status_bp

# - services
from pethub.api.pet_status.services import PetStatusService
from pethub.services.record_repository import (
    RecordRepository, ADVENTURE_LOGS, SERVICE_BOOKINGS
)


def create_app(config_name=None, record_repository=None):
    """
    Flask application factory.

    Args:
        config_name: key of config_by_name (defaults to FLASK_ENV, then 'development')
        record_repository: record source to use instead of Firestore; when
                           given, Firebase is not initialized
    """
    # =====================================================================================
    # 3. App and base configuration
    # =====================================================================================
    config_name = config_name or os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.json.ensure_ascii = False

    # =====================================================================================
    # 4. Extensions and external services
    # =====================================================================================
    JWTManager(app)

    if record_repository is None:
        _init_firebase(app)
        record_repository = RecordRepository(capabilities={
            ADVENTURE_LOGS: app.config['ADVENTURE_LOGS_ENABLED'],
            SERVICE_BOOKINGS: app.config['SERVICE_BOOKINGS_ENABLED'],
        })

    # =====================================================================================
    # 5. Service instances on 'app.services' (dependency injection)
    # =====================================================================================
    app.services = {}
    app.services['records'] = record_repository
    app.services['pet_status'] = PetStatusService(
        repository=record_repository,
        max_workers=app.config['STATUS_SCORING_WORKERS']
    )
    logging.info("Pet status service initialized successfully")

    # =====================================================================================
    # 6. Blueprints
    # =====================================================================================
    app.register_blueprint(pet_status_bp, url_prefix='/api/pets')

    # =====================================================================================
    # 7. Global error handlers
    # =====================================================================================
    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        response = {"error_code": "VALIDATION_ERROR", "details": err.messages}
        return jsonify(response), 400

    @app.errorhandler(HTTPException)
    def handle_http_exception(err):
        response = {"error_code": err.name.upper().replace(' ', '_'), "message": err.description}
        return jsonify(response), err.code

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        # Anything the blueprints did not handle themselves
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        response = {"error_code": "INTERNAL_SERVER_ERROR", "message": "Ocurrió un error inesperado en el servidor."}
        return jsonify(response), 500

    # =====================================================================================
    # 8. Logging
    # =====================================================================================
    if not app.debug and not app.testing:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    logging.info(f"Flask app created for '{config_name}' environment.")

    return app


def _init_firebase(app):
    """Initializes the default Firebase app once per process."""
    if firebase_admin._apps:
        return

    cred_path = app.config.get('FIREBASE_CREDENTIALS_PATH')
    if not cred_path or not os.path.exists(cred_path):
        raise FileNotFoundError(f"Firebase credentials file not found: {cred_path}")

    options = {}
    if app.config.get('FIREBASE_PROJECT_ID'):
        options['projectId'] = app.config['FIREBASE_PROJECT_ID']
    firebase_admin.initialize_app(credentials.Certificate(cred_path), options or None)
    logging.info("Firebase app initialized")
