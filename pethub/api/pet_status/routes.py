# pethub/api/pet_status/routes.py
"""
Pet status endpoints.

Resource: /api/pets/{pet_id}/status
- the five status bars, recommendations and mood of a pet
- computed on every request from the care records; nothing is stored
"""

import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError

from pethub.core.exceptions import PetNotFoundError, RecordSourceError, StatusTimeoutError
from .schemas import (
    StatusQuerySchema,
    PetStatusReportSchema,
    RecommendationsResponseSchema
)

logger = logging.getLogger(__name__)

pet_status_bp = Blueprint('pet_status_bp', __name__)


def get_pet_status_service():
    return current_app.services['pet_status']


@pet_status_bp.route('/<string:pet_id>/status', methods=['GET'])
@jwt_required()
def get_pet_status(pet_id: str):
    """
    Current status card of a pet.

    Query Parameters:
        as_of (optional): reference day, YYYY-MM-DD (defaults to today)

    Response:
        200: status bars, recommendations and mood
        400: invalid parameters
        403: pet belongs to another user
        404: pet not found
        502: a care collection could not be read
        504: calculation timed out
    """
    user_id = get_jwt_identity()
    service = get_pet_status_service()
    try:
        params = StatusQuerySchema().load(request.args)
        report = service.get_status_report(
            pet_id, user_id,
            today=params.get('as_of'),
            timeout=current_app.config.get('STATUS_COMPUTE_TIMEOUT_SECONDS')
        )
        return jsonify(PetStatusReportSchema().dump(report)), 200

    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except PetNotFoundError as e:
        return jsonify({"error_code": "PET_NOT_FOUND", "message": str(e)}), 404
    except PermissionError as e:
        logger.warning(f"Pet status access denied: {user_id} -> {pet_id}")
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except StatusTimeoutError as e:
        logger.error(f"Pet status timed out ({pet_id}): {e}")
        return jsonify({"error_code": "STATUS_TIMEOUT", "message": "El cálculo del estado tardó demasiado."}), 504
    except RecordSourceError as e:
        logger.error(f"Pet status source error ({pet_id}): {e}", exc_info=True)
        return jsonify({"error_code": "RECORD_SOURCE_UNAVAILABLE", "message": "No se pudieron leer los registros de la mascota."}), 502
    except Exception as e:
        logger.error(f"Pet status API error ({pet_id}): {e}", exc_info=True)
        return jsonify({"error_code": "STATUS_CALCULATION_FAILED", "message": "Error al calcular el estado de la mascota."}), 500


@pet_status_bp.route('/<string:pet_id>/status/recommendations', methods=['GET'])
@jwt_required()
def get_pet_status_recommendations(pet_id: str):
    """Recommendations only, highest priority first."""
    user_id = get_jwt_identity()
    service = get_pet_status_service()
    try:
        params = StatusQuerySchema().load(request.args)
        report = service.get_status_report(
            pet_id, user_id,
            today=params.get('as_of'),
            timeout=current_app.config.get('STATUS_COMPUTE_TIMEOUT_SECONDS')
        )
        return jsonify(RecommendationsResponseSchema().dump(report)), 200

    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except PetNotFoundError as e:
        return jsonify({"error_code": "PET_NOT_FOUND", "message": str(e)}), 404
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except StatusTimeoutError:
        return jsonify({"error_code": "STATUS_TIMEOUT", "message": "El cálculo del estado tardó demasiado."}), 504
    except RecordSourceError as e:
        logger.error(f"Recommendations source error ({pet_id}): {e}", exc_info=True)
        return jsonify({"error_code": "RECORD_SOURCE_UNAVAILABLE", "message": "No se pudieron leer los registros de la mascota."}), 502
    except Exception as e:
        logger.error(f"Recommendations API error ({pet_id}): {e}", exc_info=True)
        return jsonify({"error_code": "RECOMMENDATIONS_FAILED", "message": "Error al generar las recomendaciones."}), 500
