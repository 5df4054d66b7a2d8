from marketplace.extensions import db
from marketplace.utils.clock import utcnow
from marketplace.utils.ids import new_uuid


class Equipment(db.Model):
    __tablename__ = "equipment"

    id = db.Column(db.String(36), primary_key=True, default=new_uuid)

    provider_id = db.Column(
        db.String(36),
        db.ForeignKey("service_providers.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    price_per_day = db.Column(db.Numeric(10, 2), nullable=False)
    image_url = db.Column(db.String(500), nullable=True)

    is_active = db.Column(db.Boolean, default=True, nullable=False)

    # Projection of the latest rental status (see rental_service)
    is_available = db.Column(db.Boolean, default=True, nullable=False)

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    provider = db.relationship("ServiceProvider", back_populates="equipment")

    def __repr__(self) -> str:
        return f"<Equipment id={self.id} available={self.is_available}>"
