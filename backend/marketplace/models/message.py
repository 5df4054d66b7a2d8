from marketplace.extensions import db
from marketplace.utils.clock import utcnow
from marketplace.utils.ids import new_uuid


SENDER_TYPES = ("customer", "provider")


class Message(db.Model):
    __tablename__ = "messages"

    id = db.Column(db.String(36), primary_key=True, default=new_uuid)
    conversation_id = db.Column(
        db.String(36),
        db.ForeignKey("conversations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    sender_id = db.Column(db.String(36), nullable=False, index=True)
    sender_type = db.Column(db.String(20), nullable=False)

    message = db.Column(db.Text, nullable=False)
    read = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)

    conversation = db.relationship("Conversation", back_populates="messages")

    def __repr__(self) -> str:
        return f"<Message id={self.id} conversation={self.conversation_id} sender={self.sender_id}>"
