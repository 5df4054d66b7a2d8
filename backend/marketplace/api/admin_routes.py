from flask import Blueprint, request
from flask_jwt_extended import jwt_required

from marketplace.schemas.role_schemas import RoleChangeSchema
from marketplace.services import role_service
from marketplace.utils.responses import success_response
from marketplace.utils.security import current_user_id, require_admin

bp = Blueprint("admin", __name__)

role_change_schema = RoleChangeSchema()


@bp.get("/ping")
def ping_admin():
    return success_response(message="admin ok")


@bp.post("/roles")
@jwt_required()
def change_user_role():
    """Body JSON: {"userId", "role": admin|customer|service_provider, "action": add|remove}"""
    admin_id = current_user_id()
    require_admin(admin_id)

    data = role_change_schema.load(request.get_json(silent=True) or {})
    role_service.change_role(admin_id, data["user_id"], data["role"], data["action"])
    return success_response(message="Role updated successfully")


@bp.get("/roles/<string:user_id>")
@jwt_required()
def list_user_roles(user_id: str):
    require_admin(current_user_id())
    return success_response(data={"user_id": user_id, "roles": role_service.roles_for(user_id)}, message="OK")
