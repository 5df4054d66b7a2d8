"""
Conversation/message view state for one chat session.

A `ChatRelay` keeps the conversations and messages a user is looking at,
and folds the live feed of inserted messages into them. It is used
in-process (dashboards, workers, tests) and must run inside an app context
for the fetch/send operations.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from marketplace.services import chat_service, message_feed


@dataclass(frozen=True)
class ChatSession:
	"""The user a relay acts for."""

	user_id: str
	display_name: str | None = None


def _sort_key(conversation: dict) -> datetime:
	raw = conversation.get("last_message_at")
	if not raw:
		return datetime.min
	try:
		return datetime.fromisoformat(str(raw))
	except ValueError:
		return datetime.min


class ChatRelay:
	def __init__(self, session: ChatSession):
		self.session = session
		self.conversations: list[dict] = []
		self.messages: dict[str, list[dict]] = {}
		self._message_ids: set[str] = set()
		self._subscription: message_feed.Subscription | None = None

	# -----------------
	# Fetch
	# -----------------

	def fetch_conversations(self) -> list[dict]:
		self.conversations = chat_service.list_conversations(self.session.user_id)
		self._sort_conversations()
		return self.conversations

	def fetch_messages(self, conversation_id: str) -> list[dict]:
		conversation = chat_service.get_conversation(conversation_id)
		chat_service.require_participant(conversation, self.session.user_id)

		fetched = chat_service.list_messages(conversation_id)
		# Keep live-feed messages that raced ahead of the fetch
		fetched_ids = {m["id"] for m in fetched}
		pending = [m for m in self.messages.get(conversation_id, []) if m["id"] not in fetched_ids]

		self.messages[conversation_id] = fetched + pending
		self._message_ids.update(fetched_ids)
		return self.messages[conversation_id]

	def messages_for(self, conversation_id: str) -> list[dict]:
		return self.messages.get(conversation_id, [])

	def get_conversation(self, conversation_id: str) -> dict | None:
		return next((c for c in self.conversations if c["id"] == conversation_id), None)

	# -----------------
	# Send
	# -----------------

	def send_message(self, conversation_id: str, text: str) -> dict:
		conversation = chat_service.get_conversation(conversation_id)
		sender_type = chat_service.sender_type_for(conversation, self.session.user_id)
		message = chat_service.send_message(conversation_id, self.session.user_id, sender_type, text)
		# The feed may already have delivered it; apply is idempotent
		self.apply_message(message)
		return message

	def start_conversation(self, provider_id: str, provider_name: str, initial_message: str) -> dict:
		conversation = chat_service.start_conversation(
			self.session.user_id,
			self.session.display_name or "",
			provider_id,
			provider_name,
			initial_message,
		)
		if self.get_conversation(conversation["id"]) is None:
			self.conversations.append(conversation)
		self.fetch_messages(conversation["id"])
		self._refresh_from_messages(conversation["id"])
		return conversation

	# -----------------
	# Live feed
	# -----------------

	def subscribe(self) -> "ChatRelay":
		if self._subscription is None or not self._subscription.active:
			self._subscription = message_feed.subscribe(self._on_message_inserted)
		return self

	def close(self) -> None:
		if self._subscription is not None:
			self._subscription.unsubscribe()
			self._subscription = None

	@property
	def subscribed(self) -> bool:
		return self._subscription is not None and self._subscription.active

	def __enter__(self) -> "ChatRelay":
		return self.subscribe()

	def __exit__(self, exc_type, exc, tb) -> None:
		self.close()

	def _on_message_inserted(self, sender, message: dict | None = None, **extra) -> None:
		if message:
			self.apply_message(message)

	def apply_message(self, message: dict) -> bool:
		"""
		Folds one inserted message into the local state.

		Returns False when the message is ignored: its conversation is not
		held locally, or it was already seen.
		"""
		conversation = self.get_conversation(message.get("conversation_id"))
		if conversation is None:
			return False

		message_id = message.get("id")
		if message_id in self._message_ids:
			return False

		self._message_ids.add(message_id)
		self.messages.setdefault(conversation["id"], []).append(message)

		conversation["last_message"] = message.get("message")
		conversation["last_message_at"] = message.get("created_at")
		self._sort_conversations()
		return True

	def _refresh_from_messages(self, conversation_id: str) -> None:
		conversation = self.get_conversation(conversation_id)
		msgs = self.messages.get(conversation_id) or []
		if conversation is None or not msgs:
			return
		last = msgs[-1]
		conversation["last_message"] = last.get("message")
		conversation["last_message_at"] = last.get("created_at")
		self._sort_conversations()

	def _sort_conversations(self) -> None:
		self.conversations.sort(key=_sort_key, reverse=True)
