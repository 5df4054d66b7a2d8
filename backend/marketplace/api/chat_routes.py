from flask import Blueprint, request
from flask_jwt_extended import jwt_required

from marketplace.schemas.chat_schemas import ConversationCreateSchema, MessageCreateSchema
from marketplace.services import chat_service
from marketplace.utils.responses import success_response
from marketplace.utils.security import current_user_id

bp = Blueprint("chat", __name__)

conversation_create_schema = ConversationCreateSchema()
message_create_schema = MessageCreateSchema()


@bp.get("/conversations")
@jwt_required()
def list_conversations():
    user_id = current_user_id()
    items = chat_service.list_conversations(user_id)
    return success_response(data={"items": items}, message="OK")


@bp.post("/conversations")
@jwt_required()
def start_conversation():
    """
    The caller (customer) opens a chat with a provider.
    Body JSON: {"providerId", "providerName", "customerName", "message"}
    """
    user_id = current_user_id()
    data = conversation_create_schema.load(request.get_json(silent=True) or {})

    conversation = chat_service.start_conversation(
        user_id,
        data["customer_name"],
        data["provider_id"],
        data["provider_name"],
        data["message"],
    )
    return success_response(data=conversation, message="Conversation started", status_code=201)


@bp.get("/conversations/<string:conversation_id>/messages")
@jwt_required()
def list_messages(conversation_id: str):
    user_id = current_user_id()
    conversation = chat_service.get_conversation(conversation_id)
    chat_service.require_participant(conversation, user_id)

    items = chat_service.list_messages(conversation.id)
    return success_response(data={"items": items}, message="OK")


@bp.post("/conversations/<string:conversation_id>/messages")
@jwt_required()
def send_message(conversation_id: str):
    user_id = current_user_id()
    data = message_create_schema.load(request.get_json(silent=True) or {})

    conversation = chat_service.get_conversation(conversation_id)
    chat_service.require_participant(conversation, user_id)

    msg = chat_service.send_message(
        conversation.id,
        user_id,
        chat_service.sender_type_for(conversation, user_id),
        data["message"],
    )
    return success_response(data=msg, message="Message sent", status_code=201)


@bp.post("/conversations/<string:conversation_id>/read")
@jwt_required()
def mark_read(conversation_id: str):
    user_id = current_user_id()
    updated = chat_service.mark_conversation_read(conversation_id, user_id)
    return success_response(data={"updated": updated}, message="OK")


@bp.get("/conversations/<string:conversation_id>/unread-count")
@jwt_required()
def unread_count(conversation_id: str):
    user_id = current_user_id()
    unread = chat_service.unread_count(conversation_id, user_id)
    return success_response(data={"unread": unread}, message="OK")


@bp.get("/unread-total")
@jwt_required()
def unread_total():
    user_id = current_user_id()
    return success_response(data={"total": chat_service.unread_total(user_id)}, message="OK")
