"""
In-process feed of newly inserted chat messages.

`chat_service.send_message` publishes every committed message here;
subscribers (see `chat_relay.ChatRelay`) receive it as a plain dict.
"""

from blinker import Namespace

_signals = Namespace()

message_inserted = _signals.signal("message-inserted")


class Subscription:
    """Handle returned by `subscribe`; `unsubscribe()` is idempotent."""

    def __init__(self, receiver):
        self._receiver = receiver
        self.active = True

    def unsubscribe(self) -> None:
        if not self.active:
            return
        message_inserted.disconnect(self._receiver)
        self.active = False


def subscribe(receiver) -> Subscription:
    """`receiver(sender, message=dict)` is called for every inserted message."""
    message_inserted.connect(receiver, weak=False)
    return Subscription(receiver)


def publish(sender, message: dict) -> None:
    message_inserted.send(sender, message=message)
