"""
FloatChat — Anthropic LLM Client

Thin pass-through to the hosted model used by the chat endpoint and the
route briefing node. Clients are created lazily and cached per API key.

Calling modes:
  - send_message()   : chat reply with prior-turn history; raises on failure
  - stream_message() : async generator of text tokens for SSE endpoints
  - call_llm()       : one-shot prompt; returns "" when the service is unavailable
"""

import logging
from typing import AsyncIterator, Iterable, List, Optional

from . import config
from .prompts import SYSTEM_INSTRUCTION

log = logging.getLogger("floatchat.llm")

LINK_ERROR_MESSAGE = "Link to ARGO network unstable. Retrying connection..."
NO_KEY_MESSAGE     = "API Key not configured in environment."

_ROLE_MAP = {"user": "user", "model": "assistant"}

_client = None
_client_key: Optional[str] = None
_async_client = None
_async_client_key: Optional[str] = None


class ChatConfigurationError(RuntimeError):
    """The LLM API key is missing."""


class ChatLinkError(RuntimeError):
    """The hosted model could not produce a reply."""

    def __init__(self, message: str = LINK_ERROR_MESSAGE):
        super().__init__(message)


def _get_client():
    """Return a cached sync Anthropic client, or None if no key is configured."""
    global _client, _client_key
    key = config.api_key()
    if not key:
        return None
    if _client is None or _client_key != key:
        from anthropic import Anthropic
        _client, _client_key = Anthropic(api_key=key), key
    return _client


def _get_async_client():
    """Return a cached async Anthropic client, or None if no key is configured."""
    global _async_client, _async_client_key
    key = config.api_key()
    if not key:
        return None
    if _async_client is None or _async_client_key != key:
        from anthropic import AsyncAnthropic
        _async_client, _async_client_key = AsyncAnthropic(api_key=key), key
    return _async_client


def build_messages(message: str, history: Iterable = ()) -> List[dict]:
    """
    Map the chat transcript onto the Messages API turn list.

    History items need ``role`` ("user" | "model") and ``text``. The API
    wants a user turn first and strictly alternating roles, so leading model
    turns (the greeting) are dropped and consecutive same-role turns merged.
    Error bubbles are display-only and never sent.
    """
    turns: List[dict] = []
    for item in list(history) + [_Turn("user", message)]:
        role = _ROLE_MAP.get(getattr(item, "role", ""), "user")
        text = getattr(item, "text", "")
        if not text or getattr(item, "is_error", False):
            continue
        if not turns and role != "user":
            continue
        if turns and turns[-1]["role"] == role:
            turns[-1]["content"] += "\n\n" + text
        else:
            turns.append({"role": role, "content": text})
    return turns


class _Turn:
    __slots__ = ("role", "text")

    def __init__(self, role: str, text: str):
        self.role = role
        self.text = text


def _request(message: str, history: Iterable, system: str) -> dict:
    return {
        "model":       config.LLM_MODEL,
        "max_tokens":  config.LLM_MAX_TOKENS,
        "temperature": config.LLM_TEMPERATURE,
        "system":      system,
        "messages":    build_messages(message, history),
    }


def _reply_text(response) -> str:
    return "".join(
        getattr(block, "text", "") for block in (response.content or [])
    ).strip()


def send_message(message: str, history: Iterable = (), system: str = SYSTEM_INSTRUCTION) -> str:
    """
    Send *message* with the prior turns in *history* and return the reply.

    Raises ChatConfigurationError without an API key, ChatLinkError for any
    upstream failure or an empty reply.
    """
    client = _get_client()
    if client is None:
        raise ChatConfigurationError(NO_KEY_MESSAGE)

    try:
        response = client.messages.create(**_request(message, history, system))
    except Exception as exc:
        log.error(f"LLM API error: {exc}")
        raise ChatLinkError() from exc

    text = _reply_text(response)
    if not text:
        log.error("LLM API error: empty response from model")
        raise ChatLinkError()
    return text


async def stream_message(
    message: str,
    history: Iterable = (),
    system: str = SYSTEM_INSTRUCTION,
) -> AsyncIterator[str]:
    """
    Stream reply tokens as they arrive. Same error contract as send_message,
    raised before the first token or mid-stream.
    """
    client = _get_async_client()
    if client is None:
        raise ChatConfigurationError(NO_KEY_MESSAGE)

    try:
        async with client.messages.stream(**_request(message, history, system)) as stream:
            async for token in stream.text_stream:
                yield token
    except Exception as exc:
        log.error(f"LLM stream error: {exc}")
        raise ChatLinkError() from exc


def call_llm(prompt: str, system: str = SYSTEM_INSTRUCTION) -> str:
    """
    One-shot prompt for pipeline nodes. Falls back to "" when the service
    is unavailable so callers can substitute a static text.
    """
    try:
        return send_message(prompt, (), system)
    except (ChatConfigurationError, ChatLinkError) as exc:
        log.warning(f"LLM unavailable for one-shot call: {exc}")
        return ""
