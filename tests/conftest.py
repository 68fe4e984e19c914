"""Shared fixtures: a scripted completion client, a session, and captured output."""

from io import StringIO
from types import SimpleNamespace

import pytest
from rich.console import Console

from netero import fmt
from netero.context import Ambient
from netero.session import Session

FIXED_NOW = "2026-10-17 14:03:22"


class FakeClient:
    """Completion client that replays canned answers and records prompts."""

    def __init__(self, answers=None, error=None):
        self.answers = list(answers or [])
        self.error = error
        self.prompts: list[str] = []
        self.streamed = 0

    def _next(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.answers.pop(0) if self.answers else "ok"

    def complete(self, prompt):
        return self._next(prompt)

    def complete_stream(self, prompt, emit):
        self.streamed += 1
        text = self._next(prompt)
        half = len(text) // 2
        for piece in (text[:half], text[half:]):
            if piece:
                emit(piece)
        return text


@pytest.fixture
def make_session():
    def _make(answers=None, error=None, **kwargs):
        ambient = Ambient(user="Ana", lang="es_AR.UTF-8", clock=lambda: FIXED_NOW)
        kwargs.setdefault("shell", "/bin/sh")
        return Session(
            client=FakeClient(answers, error), ambient=ambient, **kwargs
        )

    return _make


@pytest.fixture
def output():
    """Route both fmt consoles to buffers; returns .out / .err readers."""
    out_buf, err_buf = StringIO(), StringIO()
    old = fmt._console, fmt._out
    fmt._console = Console(file=err_buf, no_color=True, width=1000)
    fmt._out = Console(file=out_buf, no_color=True, width=1000)
    try:
        yield SimpleNamespace(out=out_buf.getvalue, err=err_buf.getvalue)
    finally:
        fmt._console, fmt._out = old
