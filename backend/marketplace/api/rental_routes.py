from flask import Blueprint, request
from flask_jwt_extended import jwt_required

from marketplace.services import rental_service
from marketplace.utils.errors import InvalidRequest
from marketplace.utils.responses import success_response
from marketplace.utils.security import current_user_id

bp = Blueprint("rentals", __name__)


@bp.get("/ping")
def ping():
    return success_response(message="rentals ok")


@bp.post("/update-status")
@jwt_required()
def update_rental_status():
    """
    Provider moves one of its rentals to a new status.
    Body JSON:
    {
      "rentalId": "<uuid>",
      "newStatus": "pending" | "active" | "completed" | "cancelled"
    }
    """
    caller_id = current_user_id()
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        raise InvalidRequest("Missing rentalId or newStatus")

    result = rental_service.update_rental_status(
        payload.get("rentalId"),
        payload.get("newStatus"),
        caller_id,
    )
    return success_response(
        message="Rental status updated successfully",
        extra={"equipmentAvailability": result["equipmentAvailability"]},
    )


@bp.get("/provider")
@jwt_required()
def list_provider_rentals():
    """Rentals of the caller's provider profile. Optional ?status=."""
    caller_id = current_user_id()
    status = request.args.get("status") or None

    items = rental_service.list_provider_rentals(caller_id, status=status)
    return success_response(data={"items": items}, message="OK")
