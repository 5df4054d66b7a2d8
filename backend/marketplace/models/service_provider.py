from marketplace.extensions import db
from marketplace.utils.clock import utcnow
from marketplace.utils.ids import new_uuid


class ServiceProvider(db.Model):
    __tablename__ = "service_providers"

    id = db.Column(db.String(36), primary_key=True, default=new_uuid)

    # Identity (JWT subject) of the account that owns this profile
    user_id = db.Column(db.String(36), nullable=False, unique=True, index=True)

    business_name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    address = db.Column(db.String(500), nullable=False)
    zip_code = db.Column(db.String(20), nullable=False)
    phone = db.Column(db.String(20), nullable=True)

    is_active = db.Column(db.Boolean, default=True, nullable=False)
    rating = db.Column(db.Numeric(3, 2), default=0)
    total_reviews = db.Column(db.Integer, default=0)

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    equipment = db.relationship(
        "Equipment",
        back_populates="provider",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<ServiceProvider id={self.id} user={self.user_id}>"
