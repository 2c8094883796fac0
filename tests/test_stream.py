"""
Tests for the chat-completion client and server-sent-event parsing.

No network: urllib.request.urlopen is replaced with a scripted response.

Run with:
    pytest tests/test_stream.py -v
"""

import io
import json
import socket
import urllib.error
import urllib.request

import pytest

from changelog_gen.llm import (
    OpenAIClient, MissingAPIKeyError, RequestError, StreamError,
    iter_events, parse_delta, DONE_SENTINEL,
)


def chunk(content=None, role=None):
    """Build one chat.completion.chunk payload."""
    delta = {}
    if role:
        delta["role"] = role
    if content is not None:
        delta["content"] = content
    return json.dumps({"object": "chat.completion.chunk", "choices": [{"index": 0, "delta": delta}]})


class FakeResponse:
    """Iterable of raw SSE lines, usable as a context manager like urlopen's result."""

    def __init__(self, lines, fail_with=None):
        self._lines = [line.encode("utf-8") for line in lines]
        self._fail_with = fail_with

    def __enter__(self):
        return self

    def __exit__(self, *args):
        return False

    def __iter__(self):
        yield from self._lines
        if self._fail_with:
            raise self._fail_with


@pytest.fixture
def api_key(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.delenv("OPENAI_BASE_URL", raising=False)
    monkeypatch.delenv("CLOG_TIMEOUT", raising=False)


@pytest.fixture
def fake_urlopen(monkeypatch):
    """Install a fake urlopen; set .response or .error before streaming."""
    def _urlopen(req, timeout=None):
        _urlopen.requests.append((req, timeout))
        if _urlopen.error is not None:
            raise _urlopen.error
        return _urlopen.response

    _urlopen.requests = []
    _urlopen.response = FakeResponse([])
    _urlopen.error = None
    monkeypatch.setattr(urllib.request, "urlopen", _urlopen)
    return _urlopen


MESSAGES = [
    {"role": "system", "content": "Write a changelog."},
    {"role": "user", "content": "abc123 feat: add plugins\n"},
]


# ---------------------------------------------------------------------------
# parse_delta
# ---------------------------------------------------------------------------

class TestParseDelta:

    def test_content_delta(self):
        assert parse_delta(chunk("### Added")) == "### Added"

    def test_empty_string_is_kept(self):
        assert parse_delta(chunk("")) == ""

    @pytest.mark.parametrize("payload", [
        pytest.param("not json", id="bad-json"),
        pytest.param("null", id="null"),
        pytest.param("[1, 2]", id="list"),
        pytest.param(json.dumps({"choices": []}), id="no-choices"),
        pytest.param(json.dumps({"choices": [{"delta": "text"}]}), id="delta-not-object"),
        pytest.param(json.dumps({"choices": [{"delta": {"content": 42}}]}), id="content-not-string"),
        pytest.param(json.dumps({"error": {"message": "boom"}}), id="error-object"),
    ])
    def test_malformed_payload_is_none(self, payload):
        assert parse_delta(payload) is None

    def test_role_only_chunk_is_none(self):
        assert parse_delta(chunk(role="assistant")) is None


# ---------------------------------------------------------------------------
# iter_events
# ---------------------------------------------------------------------------

class TestIterEvents:

    def test_yields_data_lines_only(self):
        lines = [
            ": keep-alive",
            "event: message",
            f"data: {chunk('a')}",
            "",
            f"data:{chunk('b')}",
            "",
        ]
        assert list(iter_events(lines)) == ["a", "b"]

    def test_stops_at_sentinel(self):
        consumed = []

        def lines():
            for line in [f"data: {chunk('a')}", f"data: {DONE_SENTINEL}", f"data: {chunk('late')}"]:
                consumed.append(line)
                yield line

        assert list(iter_events(lines())) == ["a"]
        assert len(consumed) == 2

    def test_malformed_event_yields_none_and_continues(self):
        lines = [f"data: {chunk('a')}", "data: {broken", f"data: {chunk('b')}"]
        assert list(iter_events(lines)) == ["a", None, "b"]


# ---------------------------------------------------------------------------
# OpenAIClient
# ---------------------------------------------------------------------------

class TestOpenAIClient:

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_missing_key(self, monkeypatch, value):
        if value is None:
            monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        else:
            monkeypatch.setenv("OPENAI_API_KEY", value)
        with pytest.raises(MissingAPIKeyError, match="export OPENAI_API_KEY"):
            OpenAIClient()

    def test_defaults(self, api_key):
        client = OpenAIClient()
        assert client.model == "gpt-3.5-turbo"
        assert client.url == "https://api.openai.com/v1/chat/completions"
        assert client.name == "OpenAI (gpt-3.5-turbo)"

    def test_base_url_from_env(self, api_key, monkeypatch):
        monkeypatch.setenv("OPENAI_BASE_URL", "http://localhost:8080/v1/")
        assert OpenAIClient().url == "http://localhost:8080/v1/chat/completions"

    def test_build_body(self, api_key):
        body = json.loads(OpenAIClient(model="gpt-4").build_body(MESSAGES, 0.7, 0.3))
        assert body == {
            "model": "gpt-4",
            "messages": MESSAGES,
            "temperature": 0.7,
            "frequency_penalty": 0.3,
            "stream": True,
        }

    def test_unencodable_body_raises_before_network(self, api_key, fake_urlopen):
        with pytest.raises(RequestError):
            OpenAIClient().stream(MESSAGES, temperature=float("nan"))
        assert fake_urlopen.requests == []

    def test_stream_request_headers(self, api_key, fake_urlopen):
        fake_urlopen.response = FakeResponse([f"data: {DONE_SENTINEL}"])
        list(OpenAIClient().stream(MESSAGES))

        req, timeout = fake_urlopen.requests[0]
        assert req.get_method() == "POST"
        assert req.get_header("Authorization") == "Bearer sk-test"
        assert req.get_header("Accept") == "text/event-stream"
        assert timeout == OpenAIClient.DEFAULT_TIMEOUT

    def test_stream_yields_deltas_until_sentinel(self, api_key, fake_urlopen):
        fake_urlopen.response = FakeResponse([
            f"data: {chunk(role='assistant')}\n",
            "\n",
            f"data: {chunk('### Fixed')}\r\n",
            "\n",
            f"data: {chunk(chr(10) + '- crash')}\n",
            f"data: {DONE_SENTINEL}\n",
            f"data: {chunk('ignored')}\n",
        ])
        deltas = list(OpenAIClient().stream(MESSAGES))
        assert deltas == [None, "### Fixed", "\n- crash"]

    def test_opening_is_lazy(self, api_key, fake_urlopen):
        OpenAIClient().stream(MESSAGES)
        assert fake_urlopen.requests == []

    def test_unauthorized(self, api_key, fake_urlopen):
        fake_urlopen.error = urllib.error.HTTPError("url", 401, "Unauthorized", None, None)
        with pytest.raises(StreamError, match="Invalid API key"):
            list(OpenAIClient().stream(MESSAGES))

    def test_server_error_message_from_body(self, api_key, fake_urlopen):
        body = io.BytesIO(json.dumps({"error": {"message": "model overloaded"}}).encode())
        fake_urlopen.error = urllib.error.HTTPError("url", 503, "Service Unavailable", None, body)
        with pytest.raises(StreamError, match=r"API error \(503\): model overloaded"):
            list(OpenAIClient().stream(MESSAGES))

    def test_connection_refused(self, api_key, fake_urlopen):
        fake_urlopen.error = urllib.error.URLError(ConnectionRefusedError("refused"))
        with pytest.raises(StreamError, match="Could not reach"):
            list(OpenAIClient().stream(MESSAGES))

    def test_connection_lost_mid_stream(self, api_key, fake_urlopen):
        fake_urlopen.response = FakeResponse(
            [f"data: {chunk('a')}\n"],
            fail_with=ConnectionResetError("reset by peer"),
        )
        received = []
        with pytest.raises(StreamError, match="Connection lost"):
            for delta in OpenAIClient().stream(MESSAGES):
                received.append(delta)
        assert received == ["a"]

    def test_connect_timeout(self, api_key, fake_urlopen):
        fake_urlopen.error = urllib.error.URLError(socket.timeout("timed out"))
        with pytest.raises(StreamError, match="Request timed out after 120"):
            list(OpenAIClient().stream(MESSAGES))

    def test_read_timeout_mid_stream(self, api_key, fake_urlopen):
        fake_urlopen.response = FakeResponse(
            [f"data: {chunk('a')}\n"],
            fail_with=socket.timeout("timed out"),
        )
        received = []
        with pytest.raises(StreamError, match="Stream stalled for 120"):
            for delta in OpenAIClient().stream(MESSAGES):
                received.append(delta)
        assert received == ["a"]
