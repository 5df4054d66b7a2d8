from flask_jwt_extended import get_jwt_identity

from marketplace.models.user_role import UserRole
from marketplace.utils.errors import Forbidden, Unauthenticated


def current_user_id() -> str:
	"""Caller identity from the verified JWT (call inside @jwt_required())."""
	identity = get_jwt_identity()
	user_id = str(identity or "").strip()
	if not user_id:
		raise Unauthenticated("Unauthorized")
	return user_id


def has_role(user_id: str, role: str) -> bool:
	return (
		UserRole.query.filter_by(user_id=str(user_id), role=role).first()
		is not None
	)


def require_admin(user_id: str) -> None:
	if not has_role(user_id, "admin"):
		raise Forbidden("Admin access required")
