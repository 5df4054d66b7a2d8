from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from marketplace.extensions import db
from marketplace.models.user_role import UserRole, APP_ROLES
from marketplace.utils.errors import Conflict, DependencyFailure, InvalidRequest, NotFound


def roles_for(user_id: str) -> list[str]:
	rows = UserRole.query.filter_by(user_id=str(user_id)).order_by(UserRole.role.asc()).all()
	return [r.role for r in rows]


def add_role(user_id: str, role: str) -> None:
	if role not in APP_ROLES:
		raise InvalidRequest("Invalid role")

	if UserRole.query.filter_by(user_id=str(user_id), role=role).first() is not None:
		raise Conflict("Role already assigned")

	db.session.add(UserRole(user_id=str(user_id), role=role))
	try:
		db.session.commit()
	except IntegrityError:
		db.session.rollback()
		raise Conflict("Role already assigned")
	except SQLAlchemyError:
		db.session.rollback()
		current_app.logger.exception("[roles] failed to add role=%s user=%s", role, user_id)
		raise DependencyFailure("Failed to add role")


def remove_role(user_id: str, role: str) -> None:
	row = UserRole.query.filter_by(user_id=str(user_id), role=role).first()
	if row is None:
		raise NotFound("Role not found")

	db.session.delete(row)
	try:
		db.session.commit()
	except SQLAlchemyError:
		db.session.rollback()
		current_app.logger.exception("[roles] failed to remove role=%s user=%s", role, user_id)
		raise DependencyFailure("Failed to remove role")


def change_role(admin_id: str, user_id: str, role: str, action: str) -> None:
	"""Admin adds/removes a role. The caller must already be an admin."""

	if action == "remove" and role == "admin":
		if str(user_id) == str(admin_id):
			raise InvalidRequest("Cannot remove your own admin role")

		admins = UserRole.query.filter_by(role="admin").count()
		if admins <= 1:
			raise InvalidRequest("Cannot remove the last admin")

	if action == "add":
		add_role(user_id, role)
		current_app.logger.info("[roles] admin=%s added role=%s to user=%s", admin_id, role, user_id)
	elif action == "remove":
		remove_role(user_id, role)
		current_app.logger.info("[roles] admin=%s removed role=%s from user=%s", admin_id, role, user_id)
	else:
		raise InvalidRequest("Invalid action")
