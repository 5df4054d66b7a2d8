from flask import Blueprint, request
from flask_jwt_extended import jwt_required

from marketplace.schemas.equipment_schemas import EquipmentSchema, EquipmentUpdateSchema
from marketplace.services import equipment_service
from marketplace.utils.errors import InvalidRequest
from marketplace.utils.responses import success_response
from marketplace.utils.security import current_user_id

bp = Blueprint("equipment", __name__)

equipment_schema = EquipmentSchema()
equipment_update_schema = EquipmentUpdateSchema()


def _parse_bool_arg(name: str) -> bool | None:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return None
    value = raw.strip().lower()
    if value in ("1", "true", "yes"):
        return True
    if value in ("0", "false", "no"):
        return False
    raise InvalidRequest(f"Invalid value for '{name}'")


@bp.get("")
def list_equipment():
    """Public catalogue. Query params: ?provider_id=, ?available=true|false"""
    items = equipment_service.list_equipment(
        provider_id=request.args.get("provider_id") or None,
        available=_parse_bool_arg("available"),
    )
    return success_response(data={"items": items}, message="OK")


@bp.get("/<string:equipment_id>")
def get_equipment(equipment_id: str):
    return success_response(data=equipment_service.get_equipment(equipment_id), message="OK")


@bp.post("")
@jwt_required()
def create_equipment():
    caller_id = current_user_id()
    data = equipment_schema.load(request.get_json(silent=True) or {})

    equipment = equipment_service.create_equipment(data, caller_id)
    return success_response(data=equipment, message="Equipment created", status_code=201)


@bp.put("/<string:equipment_id>")
@jwt_required()
def update_equipment(equipment_id: str):
    caller_id = current_user_id()
    data = equipment_update_schema.load(request.get_json(silent=True) or {})

    equipment = equipment_service.update_equipment(equipment_id, data, caller_id)
    return success_response(data=equipment, message="Equipment updated")


@bp.delete("/<string:equipment_id>")
@jwt_required()
def delete_equipment(equipment_id: str):
    caller_id = current_user_id()
    equipment_service.delete_equipment(equipment_id, caller_id)
    return success_response(message="Equipment deleted")
