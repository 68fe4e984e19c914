"""Decoder for server-sent-event completion streams.

The body is a sequence of ``data: {...}`` lines ending with ``data: [DONE]``.
Each text delta is handed to ``emit`` before the next chunk is pulled, so
callers can display output as it arrives. A malformed frame aborts the
stream; anything already emitted stays emitted.
"""

import json
from typing import Callable, Iterable, Iterator

from .errors import StreamDecodeError

FRAME_PREFIX = "data:"
DONE = "[DONE]"


def iter_lines(chunks: Iterable[bytes]) -> Iterator[str]:
    """Reassemble newline-delimited lines from arbitrarily split byte chunks."""
    buf = b""
    for chunk in chunks:
        buf += chunk
        while True:
            nl = buf.find(b"\n")
            if nl < 0:
                break
            line, buf = buf[:nl], buf[nl + 1 :]
            yield line.decode("utf-8", errors="replace")
    if buf:
        yield buf.decode("utf-8", errors="replace")


def frame_delta(payload: str) -> str | None:
    """Text delta carried by one frame payload, if any."""
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise StreamDecodeError(f"malformed stream frame: {e}") from e
    if not isinstance(data, dict):
        return None
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    if not isinstance(choices[0], dict):
        return None
    delta = choices[0].get("delta") or {}
    content = delta.get("content") if isinstance(delta, dict) else None
    return content if isinstance(content, str) else None


def decode_stream(chunks: Iterable[bytes], emit: Callable[[str], None]) -> str:
    """Consume *chunks*, emitting each delta, and return the full text."""
    parts: list[str] = []
    for raw in iter_lines(chunks):
        line = raw.strip()
        if not line or not line.startswith(FRAME_PREFIX):
            continue
        payload = line[len(FRAME_PREFIX) :].strip()
        if payload == DONE:
            break
        delta = frame_delta(payload)
        if delta:
            parts.append(delta)
            emit(delta)
    return "".join(parts)
