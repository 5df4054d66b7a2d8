from marketplace.extensions import db
from marketplace.utils.clock import utcnow
from marketplace.utils.ids import new_uuid


class Conversation(db.Model):
    __tablename__ = "conversations"

    id = db.Column(db.String(36), primary_key=True, default=new_uuid)

    # Both are user identities; provider_id is the provider's account, not its profile
    customer_id = db.Column(db.String(36), nullable=False, index=True)
    provider_id = db.Column(db.String(36), nullable=False, index=True)

    customer_name = db.Column(db.String(200), nullable=False)
    provider_name = db.Column(db.String(200), nullable=False)

    last_message = db.Column(db.Text, nullable=True)
    last_message_at = db.Column(db.DateTime, default=utcnow, nullable=True, index=True)

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    messages = db.relationship(
        "Message",
        back_populates="conversation",
        cascade="all, delete-orphan",
        order_by="Message.created_at",
    )

    __table_args__ = (
        db.UniqueConstraint("customer_id", "provider_id", name="uq_conversations_customer_provider"),
    )

    def __repr__(self) -> str:
        return f"<Conversation id={self.id} customer={self.customer_id} provider={self.provider_id}>"
