"""Interactive session state and the chat turn.

A :class:`Session` lives for one REPL run. It is owned by the loop and
handed explicitly to every command handler; nothing else keeps a
reference to it.
"""

from dataclasses import dataclass, field
from pathlib import Path

from . import fmt
from .attach import extract_attachments_from_input, format_attached_files
from .client import CompletionClient
from .context import Ambient
from .parse import strip_inline_commands
from .prompt import DEFAULT_ASSISTANT_NAME, build_chat_prompt
from .shell import run_inline_commands

_encoder = None


def estimate_tokens(text: str) -> int:
    """Count tokens in *text* using tiktoken."""
    global _encoder
    if _encoder is None:
        import tiktoken

        _encoder = tiktoken.get_encoding("cl100k_base")
    return len(_encoder.encode(text))


@dataclass
class Session:
    client: CompletionClient
    ambient: Ambient
    history: list[str] = field(default_factory=list)
    pending_attachment: str | None = None
    stream_enabled: bool = False
    verbose: bool = False
    shell: str | None = None
    assistant_name: str = DEFAULT_ASSISTANT_NAME
    save_dir: str = "."
    save_file: Path | None = None

    def show_prompt(self, prompt: str) -> None:
        """Dump an outgoing prompt when running verbose."""
        if not self.verbose:
            return
        fmt.prompt_dump(prompt)
        fmt.context_stats("Prompt size", estimate_tokens(prompt))


def _merge_attachments(pending: str | None, files: str | None) -> str | None:
    parts = [p for p in (pending, files) if p]
    return "\n\n".join(parts) if parts else None


def chat_turn(session: Session, line: str) -> str:
    """Run one free-form message through the model and record it.

    Inline commands run first and their report goes into the prompt; the
    message itself is sent with the spans removed. The pending attachment
    is consumed here whether or not the completion succeeds.
    """
    command_output = run_inline_commands(line, session.shell)
    cleaned = strip_inline_commands(line)
    files = format_attached_files(None, extract_attachments_from_input(cleaned))

    prompt = build_chat_prompt(
        user=session.ambient.user,
        datetime=session.ambient.now(),
        lang=session.ambient.lang,
        history="\n".join(session.history),
        message=cleaned,
        command_output=command_output,
        attachment=_merge_attachments(session.pending_attachment, files),
        assistant_name=session.assistant_name,
    )
    session.pending_attachment = None
    session.show_prompt(prompt)

    if session.stream_enabled:
        fmt.stream_start()
        try:
            response = session.client.complete_stream(prompt, fmt.stream_delta)
        finally:
            fmt.stream_end()
    else:
        response = session.client.complete(prompt)
        fmt.answer(response)

    session.history.append(f"{session.ambient.user}: {cleaned}")
    session.history.append(f"Assistant: {response}\n")
    return response
