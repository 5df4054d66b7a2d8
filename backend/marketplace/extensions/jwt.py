from flask_jwt_extended import JWTManager

from marketplace.utils.responses import error_response

jwt = JWTManager()


# flask-jwt-extended answers with {"msg": ...} by default; keep the
# same error envelope as the rest of the API.

@jwt.unauthorized_loader
def _missing_token(reason: str):
    return error_response("Unauthorized", status_code=401)


@jwt.invalid_token_loader
def _invalid_token(reason: str):
    return error_response("Invalid token", status_code=401)


@jwt.expired_token_loader
def _expired_token(jwt_header, jwt_payload):
    return error_response("Token expired", status_code=401)
