from flask import Blueprint, request
from flask_jwt_extended import jwt_required

from marketplace.schemas.provider_schemas import ProviderRegisterSchema
from marketplace.services import provider_service
from marketplace.utils.responses import success_response
from marketplace.utils.security import current_user_id

bp = Blueprint("providers", __name__)

provider_register_schema = ProviderRegisterSchema()


@bp.post("/register")
@jwt_required()
def register_provider():
    """
    Creates the caller's service provider profile.
    Body JSON: {"businessName", "description"?, "address", "zipCode", "phone"?}
    """
    user_id = current_user_id()
    data = provider_register_schema.load(request.get_json(silent=True) or {})

    provider = provider_service.register_provider(data, user_id)
    return success_response(data=provider, message="Service provider registered")


@bp.get("/me")
@jwt_required()
def my_provider():
    user_id = current_user_id()
    return success_response(data=provider_service.get_provider_for_user(user_id), message="OK")
