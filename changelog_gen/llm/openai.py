"""OpenAI Chat Completions Client (streaming)"""

import http.client
import json
import os
import socket
import urllib.error
import urllib.request
from typing import Iterable, Iterator

from changelog_gen import DEFAULT_MODEL
from changelog_gen.llm.base import RequestError, StreamError, get_api_key, OPENAI_API_KEY_ENV

DONE_SENTINEL = "[DONE]"


def parse_delta(payload: str) -> str | None:
    """Extract the content delta from one chunk payload.

    Returns None when the payload is malformed or carries no text
    (role-only first chunk, finish_reason chunk).
    """
    try:
        chunk = json.loads(payload)
        content = chunk["choices"][0]["delta"].get("content")
    except (json.JSONDecodeError, KeyError, IndexError, TypeError, AttributeError):
        return None
    return content if isinstance(content, str) else None


def iter_events(lines: Iterable[str]) -> Iterator[str | None]:
    """Parse server-sent-event lines into deltas, stopping at the sentinel."""
    for line in lines:
        if not line.startswith("data:"):
            continue  # blank separator, ": comment", "event: ..."
        payload = line[5:].strip()
        if payload == DONE_SENTINEL:
            return
        yield parse_delta(payload)


def _decode_lines(response) -> Iterator[str]:
    for raw in response:
        yield raw.decode("utf-8", errors="replace").rstrip("\r\n")


class OpenAIClient:
    """Streaming chat-completion client. Requires OPENAI_API_KEY env var."""

    DEFAULT_BASE_URL = "https://api.openai.com/v1"
    DEFAULT_TIMEOUT = 120

    def __init__(self, api_key: str | None = None, model: str | None = None, base_url: str | None = None):
        self.api_key = api_key or get_api_key()
        self.model = model or DEFAULT_MODEL
        self.base_url = (base_url or os.environ.get("OPENAI_BASE_URL") or self.DEFAULT_BASE_URL).rstrip("/")
        self.timeout = int(os.environ.get("CLOG_TIMEOUT", self.DEFAULT_TIMEOUT))

    @property
    def name(self) -> str:
        return f"OpenAI ({self.model})"

    @property
    def url(self) -> str:
        return f"{self.base_url}/chat/completions"

    def build_body(self, messages: list[dict], temperature: float, frequency_penalty: float) -> bytes:
        payload = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "frequency_penalty": frequency_penalty,
            "stream": True,
        }
        try:
            return json.dumps(payload, allow_nan=False).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise RequestError(f"Could not encode request body: {e}")

    def stream(self, messages: list[dict], temperature: float = 0.5,
               frequency_penalty: float = 0.0) -> Iterator[str | None]:
        """Open the streaming request and return an iterator of deltas.

        The body is encoded eagerly so RequestError surfaces before any
        network activity; transport failures surface as StreamError while
        iterating.
        """
        data = self.build_body(messages, temperature, frequency_penalty)
        req = urllib.request.Request(
            self.url,
            data=data,
            method="POST",
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
                "Accept": "text/event-stream",
            },
        )
        return self._stream(req)

    def _stream(self, req: urllib.request.Request) -> Iterator[str | None]:
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as response:
                yield from iter_events(_decode_lines(response))
        except urllib.error.HTTPError as e:
            # HTTPError must come before URLError (it's a subclass)
            raise StreamError(self._describe_http_error(e))
        except urllib.error.URLError as e:
            if isinstance(e.reason, socket.timeout):
                raise StreamError(f"Request timed out after {self.timeout}s. Increase with: export CLOG_TIMEOUT=300")
            raise StreamError(f"Could not reach {self.base_url}: {e.reason}")
        except socket.timeout:
            raise StreamError(f"Stream stalled for {self.timeout}s. Increase with: export CLOG_TIMEOUT=300")
        except http.client.HTTPException as e:
            raise StreamError(f"Incomplete response from {self.base_url}: {e!r}")
        except OSError as e:
            raise StreamError(f"Connection lost: {e}")

    def _describe_http_error(self, e: urllib.error.HTTPError) -> str:
        if e.code == 401:
            return f"Invalid API key. Check your {OPENAI_API_KEY_ENV}."
        if e.code == 404:
            return f"Model '{self.model}' not found or not available to this key."
        if e.code == 429:
            return "Rate limited or out of quota. Check your plan and billing details."

        detail = e.reason
        try:
            body = json.loads(e.read().decode("utf-8"))
            detail = body["error"]["message"]
        except (OSError, ValueError, KeyError, TypeError):
            pass
        return f"API error ({e.code}): {detail}"
