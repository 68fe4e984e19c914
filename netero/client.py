"""Completion service client.

Plain completions go through LiteLLM against an OpenAI-compatible
endpoint. Streaming reads the raw HTTP body so the frame decoder sees the
event stream exactly as sent.
"""

import json
import os
import urllib.error
import urllib.request
from typing import Callable

from . import fmt
from .errors import CompletionError, ConfigError
from .stream import decode_stream

CODESTRAL_BASE_URL = "https://codestral.mistral.ai/v1"
CODESTRAL_MODEL = "codestral-latest"
CHAT_COMPLETIONS_PATH = "/chat/completions"
STREAM_CHUNK_SIZE = 1024
STREAM_TIMEOUT = 300


def normalize_base_url(url: str) -> str:
    """Accept either a base URL or a full ``.../chat/completions`` endpoint."""
    url = url.rstrip("/")
    if url.endswith(CHAT_COMPLETIONS_PATH):
        url = url[: -len(CHAT_COMPLETIONS_PATH)]
    return url


def resolve_provider(
    provider: str,
    model: str | None = None,
    api_key: str | None = None,
    base_url: str | None = None,
) -> tuple[str, str, str | None]:
    """Resolve (base_url, model, api_key) for *provider*.

    Explicit values win; environment variables fill the gaps.
    """
    if provider == "codestral":
        key = api_key or os.environ.get("CODE_API_KEY")
        if not key:
            raise ConfigError("codestral provider requires --api-key or CODE_API_KEY")
        return (
            normalize_base_url(base_url or CODESTRAL_BASE_URL),
            model or CODESTRAL_MODEL,
            key,
        )
    if provider == "generic":
        url = base_url or os.environ.get("NETERO_URL")
        if not url:
            raise ConfigError("generic provider requires --base-url or NETERO_URL")
        model_id = model or os.environ.get("NETERO_MODEL")
        if not model_id:
            raise ConfigError("generic provider requires --model or NETERO_MODEL")
        key = api_key or os.environ.get("NETERO_API_KEY") or None
        return normalize_base_url(url), model_id, key
    raise ConfigError(f"unknown provider {provider!r}")


class CompletionClient:
    """Single-message chat completion against one endpoint."""

    def __init__(self, base_url: str, model: str, api_key: str | None = None):
        self.base_url = base_url
        self.model = model
        self.api_key = api_key

    def _messages(self, prompt: str) -> list[dict]:
        return [{"role": "user", "content": prompt}]

    def complete(self, prompt: str) -> str:
        """Return the full answer for *prompt*."""
        import litellm

        litellm.suppress_debug_info = True

        try:
            response = litellm.completion(
                model=f"openai/{self.model}",
                messages=self._messages(prompt),
                api_base=self.base_url,
                api_key=self.api_key or "none",
            )
        except Exception as e:
            raise CompletionError(f"LLM call failed: {e}")

        if not response.choices:
            raise CompletionError("no choices returned")
        return response.choices[0].message.content or ""

    def _stream_request(self, prompt: str) -> urllib.request.Request:
        body = {
            "model": self.model,
            "messages": self._messages(prompt),
            "stream": True,
        }
        headers = {
            "Content-Type": "application/json",
            "Accept": "text/event-stream",
        }
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return urllib.request.Request(
            self.base_url + CHAT_COMPLETIONS_PATH,
            data=json.dumps(body).encode(),
            headers=headers,
            method="POST",
        )

    def complete_stream(
        self, prompt: str, emit: Callable[[str], None] = fmt.stream_delta
    ) -> str:
        """Stream the answer for *prompt*, emitting deltas as they arrive.

        Returns the full text. Text already emitted is not retracted if the
        stream fails part-way.
        """
        req = self._stream_request(prompt)
        try:
            with urllib.request.urlopen(req, timeout=STREAM_TIMEOUT) as resp:
                chunks = iter(lambda: resp.read1(STREAM_CHUNK_SIZE), b"")
                return decode_stream(chunks, emit)
        except urllib.error.HTTPError as e:
            raise CompletionError(f"HTTP {e.code} from {self.base_url}: {e.reason}")
        except (urllib.error.URLError, OSError) as e:
            raise CompletionError(f"could not stream from {self.base_url}: {e}")
