from datetime import datetime, timedelta

import pytest

from marketplace.extensions import db
from marketplace.models.conversation import Conversation
from marketplace.services import chat_service
from marketplace.utils.errors import Forbidden, InvalidRequest, NotFound


def test_send_message_updates_conversation(new_user_id, make_conversation):
	customer = new_user_id()
	provider = new_user_id()
	conv = make_conversation(customer, provider, last_message="Hi", last_message_at=datetime(2025, 1, 1))

	msg = chat_service.send_message(conv.id, customer, "customer", "Hello")

	db.session.expire_all()
	fresh = db.session.get(Conversation, conv.id)
	assert fresh.last_message == "Hello"
	assert fresh.last_message_at.isoformat() == msg["created_at"]
	assert msg["sender_type"] == "customer"
	assert msg["read"] is False


def test_list_conversations_only_mine_sorted_desc(new_user_id, make_conversation):
	me = new_user_id()
	base = datetime(2025, 3, 1, 12, 0, 0)
	old = make_conversation(me, new_user_id(), last_message="old", last_message_at=base)
	new = make_conversation(new_user_id(), me, last_message="new", last_message_at=base + timedelta(hours=1))
	make_conversation(new_user_id(), new_user_id(), last_message="not mine", last_message_at=base + timedelta(hours=2))

	items = chat_service.list_conversations(me)
	assert [c["id"] for c in items] == [new.id, old.id]

	chat_service.send_message(old.id, me, "customer", "bump")
	items = chat_service.list_conversations(me)
	assert [c["id"] for c in items] == [old.id, new.id]


def test_list_messages_ascending(new_user_id, make_conversation):
	customer = new_user_id()
	provider = new_user_id()
	conv = make_conversation(customer, provider)

	chat_service.send_message(conv.id, customer, "customer", "one")
	chat_service.send_message(conv.id, provider, "provider", "two")
	chat_service.send_message(conv.id, customer, "customer", "three")

	texts = [m["message"] for m in chat_service.list_messages(conv.id)]
	assert texts == ["one", "two", "three"]


def test_start_conversation_sends_first_message_as_customer(new_user_id):
	customer = new_user_id()
	provider = new_user_id()

	conv = chat_service.start_conversation(customer, "Ana", provider, "Acme", "Is the mixer free?")

	assert conv["customer_id"] == customer
	assert conv["provider_name"] == "Acme"
	msgs = chat_service.list_messages(conv["id"])
	assert len(msgs) == 1
	assert msgs[0]["sender_type"] == "customer"
	assert msgs[0]["sender_id"] == customer

	# Same pair reuses the conversation
	again = chat_service.start_conversation(customer, "Ana", provider, "Acme", "Hello again")
	assert again["id"] == conv["id"]
	assert len(chat_service.list_messages(conv["id"])) == 2


def test_send_message_validation(new_user_id, make_conversation):
	customer = new_user_id()
	conv = make_conversation(customer, new_user_id())

	with pytest.raises(InvalidRequest):
		chat_service.send_message(conv.id, customer, "customer", "   ")
	with pytest.raises(InvalidRequest):
		chat_service.send_message(conv.id, customer, "customer", "x" * 51)
	with pytest.raises(InvalidRequest):
		chat_service.send_message(conv.id, customer, "admin", "hi")
	with pytest.raises(Forbidden):
		chat_service.send_message(conv.id, new_user_id(), "customer", "hi")
	with pytest.raises(NotFound):
		chat_service.send_message("missing", customer, "customer", "hi")


def test_unread_count_and_mark_read(new_user_id, make_conversation):
	customer = new_user_id()
	provider = new_user_id()
	conv = make_conversation(customer, provider)

	chat_service.send_message(conv.id, provider, "provider", "hola")
	chat_service.send_message(conv.id, provider, "provider", "are you there?")
	chat_service.send_message(conv.id, customer, "customer", "yes")

	assert chat_service.unread_count(conv.id, customer) == 2
	assert chat_service.unread_count(conv.id, provider) == 1
	assert chat_service.unread_total(customer) == 2

	assert chat_service.mark_conversation_read(conv.id, customer) == 2
	assert chat_service.unread_count(conv.id, customer) == 0
	assert chat_service.unread_count(conv.id, provider) == 1


def test_chat_http_flow(client, new_user_id, auth_header):
	customer = new_user_id()
	provider = new_user_id()

	start = client.post(
		"/api/chat/conversations",
		json={"providerId": provider, "providerName": "Acme", "customerName": "Ana", "message": "Hi"},
		headers=auth_header(customer),
	)
	assert start.status_code == 201
	conv_id = start.get_json()["data"]["id"]

	reply = client.post(
		f"/api/chat/conversations/{conv_id}/messages",
		json={"message": "Hello"},
		headers=auth_header(provider),
	)
	assert reply.status_code == 201
	assert reply.get_json()["data"]["sender_type"] == "provider"

	convs = client.get("/api/chat/conversations", headers=auth_header(customer))
	assert convs.status_code == 200
	items = convs.get_json()["data"]["items"]
	assert len(items) == 1
	assert items[0]["last_message"] == "Hello"

	msgs = client.get(f"/api/chat/conversations/{conv_id}/messages", headers=auth_header(customer))
	assert [m["message"] for m in msgs.get_json()["data"]["items"]] == ["Hi", "Hello"]

	unread = client.get(f"/api/chat/conversations/{conv_id}/unread-count", headers=auth_header(customer))
	assert unread.get_json()["data"]["unread"] == 1

	mark = client.post(f"/api/chat/conversations/{conv_id}/read", headers=auth_header(customer))
	assert mark.status_code == 200

	total = client.get("/api/chat/unread-total", headers=auth_header(customer))
	assert total.get_json()["data"]["total"] == 0


def test_chat_http_rejects_outsiders(client, new_user_id, auth_header, make_conversation):
	conv = make_conversation(new_user_id(), new_user_id())
	outsider = new_user_id()

	resp = client.get(f"/api/chat/conversations/{conv.id}/messages", headers=auth_header(outsider))
	assert resp.status_code == 403

	resp2 = client.post(
		f"/api/chat/conversations/{conv.id}/messages",
		json={"message": "let me in"},
		headers=auth_header(outsider),
	)
	assert resp2.status_code == 403


def test_start_conversation_requires_fields(client, new_user_id, auth_header):
	resp = client.post("/api/chat/conversations", json={"message": "Hi"}, headers=auth_header(new_user_id()))
	assert resp.status_code == 400
	errors = resp.get_json()["errors"]
	assert "providerId" in errors


def test_history_limit_keeps_latest_messages(app, new_user_id, make_conversation):
	customer = new_user_id()
	conv = make_conversation(customer, new_user_id())

	for text in ("one", "two", "three"):
		chat_service.send_message(conv.id, customer, "customer", text)

	previous = app.config["CHAT_HISTORY_LIMIT"]
	app.config["CHAT_HISTORY_LIMIT"] = 2
	try:
		texts = [m["message"] for m in chat_service.list_messages(conv.id)]
	finally:
		app.config["CHAT_HISTORY_LIMIT"] = previous

	assert texts == ["two", "three"]


def test_start_conversation_stores_trimmed_first_message(new_user_id):
	customer = new_user_id()

	conv = chat_service.start_conversation(customer, "Ana", new_user_id(), "Acme", "  Is it free?  ")

	assert conv["last_message"] == "Is it free?"
	assert [m["message"] for m in chat_service.list_messages(conv["id"])] == ["Is it free?"]
