from flask import current_app
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from marketplace.extensions.db import db
from marketplace.models.conversation import Conversation
from marketplace.models.message import Message, SENDER_TYPES
from marketplace.services import message_feed
from marketplace.utils.clock import isoformat, utcnow
from marketplace.utils.errors import DependencyFailure, Forbidden, InvalidRequest, NotFound


CHAT_MESSAGE_MAX_LENGTH_DEFAULT = 2000
CHAT_HISTORY_LIMIT_DEFAULT = 500


def _get_message_max_length() -> int:
    try:
        v = int(current_app.config.get("CHAT_MESSAGE_MAX_LENGTH", CHAT_MESSAGE_MAX_LENGTH_DEFAULT))
        return max(1, v)
    except (TypeError, ValueError):
        return CHAT_MESSAGE_MAX_LENGTH_DEFAULT


def _get_history_limit() -> int:
    try:
        v = int(current_app.config.get("CHAT_HISTORY_LIMIT", CHAT_HISTORY_LIMIT_DEFAULT))
        return max(1, v)
    except (TypeError, ValueError):
        return CHAT_HISTORY_LIMIT_DEFAULT


def conversation_to_dict(c: Conversation) -> dict:
    return {
        "id": c.id,
        "customer_id": c.customer_id,
        "provider_id": c.provider_id,
        "customer_name": c.customer_name,
        "provider_name": c.provider_name,
        "last_message": c.last_message,
        "last_message_at": isoformat(c.last_message_at),
        "created_at": isoformat(c.created_at),
    }


def message_to_dict(m: Message) -> dict:
    return {
        "id": m.id,
        "conversation_id": m.conversation_id,
        "sender_id": m.sender_id,
        "sender_type": m.sender_type,
        "message": m.message,
        "read": bool(m.read),
        "created_at": isoformat(m.created_at),
    }


def _validate_text(text: str | None) -> str:
    m = (text or "").strip()
    if not m:
        raise InvalidRequest("Message cannot be empty")
    limit = _get_message_max_length()
    if len(m) > limit:
        raise InvalidRequest(f"Message cannot exceed {limit} characters")
    return m


def get_conversation(conversation_id: str) -> Conversation:
    conversation: Conversation | None = db.session.get(Conversation, conversation_id)
    if conversation is None:
        raise NotFound("Conversation not found")
    return conversation


def require_participant(conversation: Conversation, user_id: str) -> None:
    if str(user_id) not in (conversation.customer_id, conversation.provider_id):
        raise Forbidden("You are not a participant of this conversation")


def sender_type_for(conversation: Conversation, user_id: str) -> str:
    return "customer" if str(user_id) == conversation.customer_id else "provider"


def list_conversations(user_id: str) -> list[dict]:
    uid = str(user_id)
    items = (
        Conversation.query.filter(or_(Conversation.customer_id == uid, Conversation.provider_id == uid))
        .order_by(Conversation.last_message_at.desc(), Conversation.created_at.desc())
        .all()
    )
    return [conversation_to_dict(c) for c in items]


def list_messages(conversation_id: str) -> list[dict]:
    # Newest N, returned oldest first
    latest = (
        Message.query.filter_by(conversation_id=conversation_id)
        .order_by(Message.created_at.desc(), Message.id.desc())
        .limit(_get_history_limit())
        .all()
    )
    return [message_to_dict(m) for m in reversed(latest)]


def send_message(conversation_id: str, sender_id: str, sender_type: str, text: str | None) -> dict:
    """
    Appends a message and mirrors it on the conversation
    (last_message / last_message_at) in the same commit.
    """
    if sender_type not in SENDER_TYPES:
        raise InvalidRequest("Invalid sender type")
    body = _validate_text(text)

    conversation = get_conversation(conversation_id)
    require_participant(conversation, sender_id)

    now = utcnow()
    msg = Message(
        conversation_id=conversation.id,
        sender_id=str(sender_id),
        sender_type=sender_type,
        message=body,
        read=False,
        created_at=now,
    )
    db.session.add(msg)
    conversation.last_message = body
    conversation.last_message_at = now

    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("[chat] failed to send message conversation=%s", conversation_id)
        raise DependencyFailure("Failed to send message")

    data = message_to_dict(msg)
    current_app.logger.debug("[chat] message=%s conversation=%s sender=%s", msg.id, conversation.id, sender_id)

    message_feed.publish(current_app._get_current_object(), data)
    return data


def start_conversation(
    customer_id: str,
    customer_name: str,
    provider_id: str,
    provider_name: str,
    initial_message: str | None,
) -> dict:
    """
    Opens the customer/provider conversation and sends the first message as
    the customer. There is one conversation per customer/provider pair: if it
    already exists it is reused.
    """
    first_message = _validate_text(initial_message)
    if str(customer_id) == str(provider_id):
        raise InvalidRequest("Cannot start a conversation with yourself")

    conversation = Conversation.query.filter_by(customer_id=str(customer_id), provider_id=str(provider_id)).first()
    if conversation is None:
        conversation = Conversation(
            customer_id=str(customer_id),
            provider_id=str(provider_id),
            customer_name=(customer_name or "").strip(),
            provider_name=(provider_name or "").strip(),
            last_message=first_message,
            last_message_at=utcnow(),
        )
        db.session.add(conversation)
        try:
            db.session.commit()
        except IntegrityError:
            # Lost a race against another request creating the same pair
            db.session.rollback()
            conversation = Conversation.query.filter_by(
                customer_id=str(customer_id), provider_id=str(provider_id)
            ).first()
            if conversation is None:
                raise DependencyFailure("Failed to start conversation")
        except SQLAlchemyError:
            db.session.rollback()
            current_app.logger.exception("[chat] failed to create conversation customer=%s", customer_id)
            raise DependencyFailure("Failed to start conversation")
        else:
            current_app.logger.info(
                "[chat] conversation=%s started customer=%s provider=%s", conversation.id, customer_id, provider_id
            )

    send_message(conversation.id, customer_id, "customer", first_message)
    return conversation_to_dict(conversation)


def mark_conversation_read(conversation_id: str, user_id: str) -> int:
    """Marks the other participant's messages as read; returns how many changed."""
    conversation = get_conversation(conversation_id)
    require_participant(conversation, user_id)

    updated = (
        Message.query.filter(
            Message.conversation_id == conversation.id,
            Message.sender_id != str(user_id),
            Message.read.is_(False),
        )
        .update({"read": True}, synchronize_session="fetch")
    )
    db.session.commit()
    return int(updated or 0)


def unread_count(conversation_id: str, user_id: str) -> int:
    conversation = get_conversation(conversation_id)
    require_participant(conversation, user_id)

    return int(
        Message.query.filter(
            Message.conversation_id == conversation.id,
            Message.sender_id != str(user_id),
            Message.read.is_(False),
        ).count()
    )


def unread_total(user_id: str) -> int:
    """Unread messages across every conversation the user takes part in."""
    uid = str(user_id)
    total = (
        db.session.query(func.count(Message.id))
        .join(Conversation, Message.conversation_id == Conversation.id)
        .filter(
            or_(Conversation.customer_id == uid, Conversation.provider_id == uid),
            Message.sender_id != uid,
            Message.read.is_(False),
        )
        .scalar()
    )
    return int(total or 0)
