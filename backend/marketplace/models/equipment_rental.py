from marketplace.extensions import db
from marketplace.utils.clock import utcnow
from marketplace.utils.ids import new_uuid


RENTAL_STATUSES = ("pending", "active", "completed", "cancelled")


class EquipmentRental(db.Model):
    __tablename__ = "equipment_rentals"

    id = db.Column(db.String(36), primary_key=True, default=new_uuid)

    equipment_id = db.Column(
        db.String(36),
        db.ForeignKey("equipment.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    provider_id = db.Column(
        db.String(36),
        db.ForeignKey("service_providers.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    customer_id = db.Column(db.String(36), nullable=False, index=True)

    rental_start_date = db.Column(db.Date, nullable=False)
    rental_end_date = db.Column(db.Date, nullable=False)
    total_price = db.Column(db.Numeric(10, 2), nullable=False)
    notes = db.Column(db.Text, nullable=True)

    status = db.Column(db.String(20), nullable=False, default="pending")

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    equipment = db.relationship("Equipment", lazy="joined")
    provider = db.relationship("ServiceProvider", lazy="joined")

    def __repr__(self) -> str:
        return f"<EquipmentRental id={self.id} equipment={self.equipment_id} status={self.status}>"
