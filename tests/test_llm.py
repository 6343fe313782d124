import asyncio
from types import SimpleNamespace

import pytest

from floatchat import llm
from floatchat.chat import ChatSession, new_message
from floatchat.prompts import ERROR_BUBBLE, GREETING


class _FakeMessages:
    def __init__(self, reply="", error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        return SimpleNamespace(content=[SimpleNamespace(text=self.reply)])


def _fake_client(monkeypatch, reply="", error=None):
    messages = _FakeMessages(reply, error)
    monkeypatch.setattr(llm, "_get_client", lambda: SimpleNamespace(messages=messages))
    return messages


def test_missing_key_raises_configuration_error(monkeypatch):
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    monkeypatch.setattr(llm.config, "ANTHROPIC_API_KEY", "")
    with pytest.raises(llm.ChatConfigurationError, match="API Key not configured"):
        llm.send_message("hello")


def test_reply_text_returned(monkeypatch):
    messages = _fake_client(monkeypatch, reply="## 🌊 Sea State\n- Calm")
    assert llm.send_message("Gulf Stream Status") == "## 🌊 Sea State\n- Calm"

    call = messages.calls[0]
    assert call["temperature"] == llm.config.LLM_TEMPERATURE
    assert "FloatChat" in call["system"]
    assert call["messages"][-1] == {"role": "user", "content": "Gulf Stream Status"}


def test_upstream_failure_becomes_link_error(monkeypatch):
    _fake_client(monkeypatch, error=RuntimeError("socket closed"))
    with pytest.raises(llm.ChatLinkError, match="Link to ARGO network unstable"):
        llm.send_message("hello")


def test_empty_reply_becomes_link_error(monkeypatch):
    _fake_client(monkeypatch, reply="   ")
    with pytest.raises(llm.ChatLinkError):
        llm.send_message("hello")


def test_call_llm_degrades_to_empty_string(monkeypatch):
    _fake_client(monkeypatch, error=RuntimeError("boom"))
    assert llm.call_llm("brief me") == ""


def test_history_mapping_drops_greeting_and_merges_turns():
    history = [
        new_message("model", GREETING),
        new_message("user", "Analyze North Atlantic"),
        new_message("model", "## Report"),
        new_message("model", "> Alert"),
    ]
    turns = llm.build_messages("And the Pacific?", history)
    assert turns == [
        {"role": "user", "content": "Analyze North Atlantic"},
        {"role": "assistant", "content": "## Report\n\n> Alert"},
        {"role": "user", "content": "And the Pacific?"},
    ]


def test_chat_session_records_exchange():
    seen = {}

    def sender(text, history):
        seen["history"] = history
        return "Float #5902 reports 24.2°C"

    session = ChatSession(sender=sender)
    reply = session.send("Latest Float Telemetry")

    assert reply.role == "model"
    assert reply.text == "Float #5902 reports 24.2°C"
    assert [m.role for m in session.messages] == ["model", "user", "model"]
    assert [m.text for m in seen["history"]] == [GREETING]


def test_chat_session_appends_error_bubble():
    def sender(text, history):
        raise llm.ChatLinkError()

    session = ChatSession(sender=sender)
    reply = session.send("Route Safety: NY to London")
    assert reply.is_error
    assert reply.text == ERROR_BUBBLE
    assert len(session.messages) == 3


def test_chat_session_ignores_blank_input():
    session = ChatSession(sender=lambda text, history: "unused")
    assert session.send("   ") is None
    assert len(session.messages) == 1


class _FakeStream:
    def __init__(self, tokens, error=None):
        self.tokens = tokens
        self.error = error

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    @property
    def text_stream(self):
        return self._iter()

    async def _iter(self):
        for token in self.tokens:
            yield token
        if self.error:
            raise self.error


def _fake_async_client(monkeypatch, tokens=(), error=None):
    calls = []

    def stream(**kwargs):
        calls.append(kwargs)
        return _FakeStream(tokens, error)

    client = SimpleNamespace(messages=SimpleNamespace(stream=stream))
    monkeypatch.setattr(llm, "_get_async_client", lambda: client)
    return calls


def _drain(message, received):
    async def run():
        async for token in llm.stream_message(message):
            received.append(token)
    asyncio.run(run())


def test_stream_yields_tokens(monkeypatch):
    calls = _fake_async_client(monkeypatch, tokens=["## 🌊 ", "Sea State"])
    received = []
    _drain("Gulf Stream Status", received)

    assert received == ["## 🌊 ", "Sea State"]
    assert calls[0]["messages"] == [{"role": "user", "content": "Gulf Stream Status"}]
    assert calls[0]["temperature"] == llm.config.LLM_TEMPERATURE


def test_stream_failure_midway_becomes_link_error(monkeypatch):
    _fake_async_client(monkeypatch, tokens=["Swell "], error=RuntimeError("connection reset"))
    received = []
    with pytest.raises(llm.ChatLinkError, match="Link to ARGO network unstable"):
        _drain("hello", received)
    assert received == ["Swell "]


def test_stream_without_key_raises_configuration_error(monkeypatch):
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    monkeypatch.setattr(llm.config, "ANTHROPIC_API_KEY", "")
    with pytest.raises(llm.ChatConfigurationError, match="API Key not configured"):
        _drain("hello", [])


def test_transcript_serialises_messages():
    session = ChatSession(sender=lambda text, history: "Copy.")
    session.send("Ping")
    transcript = session.transcript()
    assert [m["role"] for m in transcript] == ["model", "user", "model"]
    assert set(transcript[0]) == {"id", "role", "text", "timestamp", "is_error"}


def test_error_bubbles_are_not_sent_back():
    history = [
        new_message("user", "Analyze North Atlantic"),
        new_message("model", ERROR_BUBBLE, is_error=True),
    ]
    turns = llm.build_messages("Analyze North Atlantic", history)
    assert turns == [{"role": "user", "content": "Analyze North Atlantic\n\nAnalyze North Atlantic"}]
