from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from marketplace.extensions.db import db
from marketplace.models.equipment import Equipment
from marketplace.models.equipment_rental import EquipmentRental, RENTAL_STATUSES
from marketplace.models.service_provider import ServiceProvider
from marketplace.utils.clock import isoformat
from marketplace.utils.errors import DependencyFailure, Forbidden, InvalidRequest, NotFound


def rental_to_dict(rental: EquipmentRental) -> dict:
    equipment = getattr(rental, "equipment", None)
    return {
        "id": rental.id,
        "equipment_id": rental.equipment_id,
        "equipment_name": equipment.name if equipment is not None else None,
        "provider_id": rental.provider_id,
        "customer_id": rental.customer_id,
        "rental_start_date": isoformat(rental.rental_start_date),
        "rental_end_date": isoformat(rental.rental_end_date),
        "total_price": float(rental.total_price) if rental.total_price is not None else None,
        "notes": rental.notes,
        "status": rental.status,
        "created_at": isoformat(rental.created_at),
    }


def availability_for_status(new_status: str) -> bool | None:
    """Equipment availability implied by a rental status.

    None means "leave it as it is" (only possible for pending, when
    RENTAL_PENDING_RELEASES_EQUIPMENT is off).
    """
    if new_status == "active":
        return False
    if new_status in ("completed", "cancelled"):
        return True
    if current_app.config.get("RENTAL_PENDING_RELEASES_EQUIPMENT", True):
        return True
    return None


def _require_owned_rental(rental_id: str, caller_id: str) -> EquipmentRental:
    rental: EquipmentRental | None = db.session.get(EquipmentRental, rental_id)
    if rental is None:
        raise NotFound("Rental not found")

    provider = ServiceProvider.query.filter_by(id=rental.provider_id, user_id=str(caller_id)).first()
    if provider is None:
        current_app.logger.warning(
            "[rentals] ownership check failed rental=%s caller=%s", rental_id, caller_id
        )
        raise Forbidden("Unauthorized - not your rental")

    return rental


def _apply_equipment_availability(equipment_id: str, is_available: bool) -> int:
    return (
        Equipment.query.filter_by(id=equipment_id)
        .update({"is_available": is_available}, synchronize_session="fetch")
    )


def update_rental_status(rental_id: str | None, new_status: str | None, caller_id: str) -> dict:
    """
    Sets the rental status and derives the equipment availability from it.

    The status write is the primary effect. The availability write runs in a
    SAVEPOINT inside the same transaction: when it succeeds both commit
    together, when it fails only the savepoint is rolled back and the status
    change is still committed.
    """
    if not rental_id or not new_status:
        raise InvalidRequest("Missing rentalId or newStatus")
    if new_status not in RENTAL_STATUSES:
        raise InvalidRequest("Invalid status")

    rental = _require_owned_rental(str(rental_id), caller_id)
    current_app.logger.info("[rentals] updating rental=%s %s -> %s", rental.id, rental.status, new_status)

    try:
        rental.status = new_status
        db.session.flush()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("[rentals] failed to update status rental=%s", rental_id)
        raise DependencyFailure("Failed to update rental status")

    should_be_available = availability_for_status(new_status)
    equipment_id = rental.equipment_id

    if should_be_available is None:
        equipment = db.session.get(Equipment, equipment_id)
        should_be_available = bool(equipment.is_available) if equipment is not None else True
    else:
        try:
            with db.session.begin_nested():
                updated = _apply_equipment_availability(equipment_id, should_be_available)
            if not updated:
                current_app.logger.warning(
                    "[rentals] equipment %s not found for rental=%s; availability not synced",
                    equipment_id,
                    rental_id,
                )
        except SQLAlchemyError:
            # Status stays authoritative; availability drift is only logged
            current_app.logger.exception(
                "[rentals] failed to update equipment availability equipment=%s rental=%s",
                equipment_id,
                rental_id,
            )

    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("[rentals] commit failed rental=%s", rental_id)
        raise DependencyFailure("Failed to update rental status")

    current_app.logger.info(
        "[rentals] rental=%s status=%s equipment=%s available=%s",
        rental_id,
        new_status,
        equipment_id,
        should_be_available,
    )
    return {"success": True, "equipmentAvailability": should_be_available}


def list_provider_rentals(caller_id: str, status: str | None = None) -> list[dict]:
    provider = ServiceProvider.query.filter_by(user_id=str(caller_id)).first()
    if provider is None:
        raise NotFound("Service provider profile not found")

    q = EquipmentRental.query.filter_by(provider_id=provider.id)
    if status:
        if status not in RENTAL_STATUSES:
            raise InvalidRequest("Invalid status")
        q = q.filter_by(status=status)

    rentals = q.order_by(EquipmentRental.created_at.desc()).all()
    return [rental_to_dict(r) for r in rentals]
