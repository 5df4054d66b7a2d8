from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from marketplace.extensions import db
from marketplace.models.equipment import Equipment
from marketplace.models.equipment_rental import EquipmentRental
from marketplace.models.service_provider import ServiceProvider
from marketplace.utils.clock import isoformat
from marketplace.utils.errors import Conflict, DependencyFailure, Forbidden, InvalidRequest, NotFound
from marketplace.utils.security import has_role


EDITABLE_FIELDS = ("name", "description", "price_per_day", "image_url", "is_active", "is_available")


def equipment_to_dict(e: Equipment) -> dict:
	return {
		"id": e.id,
		"provider_id": e.provider_id,
		"name": e.name,
		"description": e.description,
		"price_per_day": float(e.price_per_day) if e.price_per_day is not None else None,
		"image_url": e.image_url,
		"is_active": bool(e.is_active),
		"is_available": bool(e.is_available),
		"created_at": isoformat(e.created_at),
	}


def _resolve_provider_id(requested_provider_id: str | None, caller_id: str, is_admin: bool) -> str:
	"""Provider the caller may write equipment for."""
	if requested_provider_id:
		provider = db.session.get(ServiceProvider, requested_provider_id)
		if provider is None:
			raise NotFound("Service provider not found")
		if provider.user_id != str(caller_id) and not is_admin:
			raise Forbidden("You can only manage your own equipment")
		return provider.id

	own = ServiceProvider.query.filter_by(user_id=str(caller_id)).first()
	if own is None:
		raise Forbidden("A service provider profile is required")
	return own.id


def _require_editable(equipment_id: str, caller_id: str) -> Equipment:
	equipment: Equipment | None = db.session.get(Equipment, equipment_id)
	if equipment is None:
		raise NotFound("Equipment not found")

	if has_role(caller_id, "admin"):
		return equipment

	provider = db.session.get(ServiceProvider, equipment.provider_id) if equipment.provider_id else None
	if provider is None or provider.user_id != str(caller_id):
		raise Forbidden("You can only manage your own equipment")
	return equipment


def _commit(action: str, equipment_id: str | None = None) -> None:
	try:
		db.session.commit()
	except SQLAlchemyError:
		db.session.rollback()
		current_app.logger.exception("[equipment] %s failed id=%s", action, equipment_id)
		raise DependencyFailure(f"Failed to {action} equipment")


def list_equipment(provider_id: str | None = None, available: bool | None = None) -> list[dict]:
	q = Equipment.query.filter(Equipment.is_active.is_(True))
	if provider_id:
		q = q.filter(Equipment.provider_id == provider_id)
	if available is not None:
		q = q.filter(Equipment.is_available.is_(bool(available)))
	return [equipment_to_dict(e) for e in q.order_by(Equipment.created_at.desc()).all()]


def get_equipment(equipment_id: str) -> dict:
	equipment = db.session.get(Equipment, equipment_id)
	if equipment is None:
		raise NotFound("Equipment not found")
	return equipment_to_dict(equipment)


def create_equipment(data: dict, caller_id: str) -> dict:
	is_admin = has_role(caller_id, "admin")
	provider_id = _resolve_provider_id(data.get("provider_id"), caller_id, is_admin)

	equipment = Equipment(provider_id=provider_id)
	for field in EDITABLE_FIELDS:
		if field in data:
			setattr(equipment, field, data[field])

	db.session.add(equipment)
	_commit("create")
	current_app.logger.info("[equipment] created id=%s by user=%s", equipment.id, caller_id)
	return equipment_to_dict(equipment)


def update_equipment(equipment_id: str, data: dict, caller_id: str) -> dict:
	equipment = _require_editable(equipment_id, caller_id)

	if data.get("provider_id") and data["provider_id"] != equipment.provider_id:
		equipment.provider_id = _resolve_provider_id(data["provider_id"], caller_id, has_role(caller_id, "admin"))

	changed = [f for f in EDITABLE_FIELDS if f in data]
	if not changed and "provider_id" not in data:
		raise InvalidRequest("Nothing to update")
	for field in changed:
		setattr(equipment, field, data[field])

	_commit("update", equipment_id)
	current_app.logger.info("[equipment] updated id=%s fields=%s by user=%s", equipment_id, changed, caller_id)
	return equipment_to_dict(equipment)


def delete_equipment(equipment_id: str, caller_id: str) -> None:
	equipment = _require_editable(equipment_id, caller_id)

	if EquipmentRental.query.filter_by(equipment_id=equipment.id).first() is not None:
		raise Conflict("Equipment has rentals; deactivate it instead")

	db.session.delete(equipment)
	_commit("delete", equipment_id)
	current_app.logger.info("[equipment] deleted id=%s by user=%s", equipment_id, caller_id)
