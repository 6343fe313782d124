"""
FloatChat — Chat transcript
Keeps the conversation shown in the chat widget and relays each new user
message, with the turns before it, to the hosted model.
"""

import logging
import time
import uuid
from typing import Any, Callable, Dict, Iterable, List, NamedTuple, Optional

from . import llm
from .prompts import ERROR_BUBBLE, GREETING

log = logging.getLogger("floatchat.chat")

SENDER_USER  = "user"
SENDER_MODEL = "model"


class ChatMessage(NamedTuple):
    id:        str
    role:      str      # "user" | "model"
    text:      str
    timestamp: float
    is_error:  bool = False


def new_message(role: str, text: str, is_error: bool = False) -> ChatMessage:
    return ChatMessage(uuid.uuid4().hex[:12], role, text, time.time(), is_error)


class ChatSession:
    """
    Transcript opened with the ARGO link greeting. A failed exchange appends
    the connection-interrupted bubble instead of raising.
    """

    def __init__(
        self,
        history: Optional[Iterable[ChatMessage]] = None,
        sender:  Optional[Callable[[str, List[ChatMessage]], str]] = None,
    ):
        self.messages: List[ChatMessage] = (
            list(history) if history is not None else [new_message(SENDER_MODEL, GREETING)]
        )
        self._sender = sender

    def send(self, text: str) -> Optional[ChatMessage]:
        """Post *text*; returns the model (or error) message, None for blank input."""
        text = (text or "").strip()
        if not text:
            return None

        prior = list(self.messages)
        self.messages.append(new_message(SENDER_USER, text))

        send = self._sender or llm.send_message
        try:
            reply = new_message(SENDER_MODEL, send(text, prior))
        except (llm.ChatConfigurationError, llm.ChatLinkError) as exc:
            log.warning(f"Chat exchange failed: {exc}")
            reply = new_message(SENDER_MODEL, ERROR_BUBBLE, is_error=True)

        self.messages.append(reply)
        return reply

    def transcript(self) -> List[Dict[str, Any]]:
        return [m._asdict() for m in self.messages]
