"""Path-shaped tokens become file attachments."""

import os
from dataclasses import dataclass
from pathlib import Path

from .parse import tokenize

PATH_PREFIXES = ("/", "./", "../", "~/")
INDENT = "      "


@dataclass
class Attachment:
    path: str  # as typed, not expanded
    content: str


def is_path_candidate(token: str) -> bool:
    return token.startswith(PATH_PREFIXES)


def expand_path(token: str) -> str:
    """Expand a leading ``~/`` against ``$HOME``; leave anything else alone."""
    if token.startswith("~/"):
        home = os.environ.get("HOME")
        if home:
            return f"{home}/{token[2:]}"
    return token


def _read_text(path: str) -> str | None:
    p = Path(path)
    if not p.is_file():
        return None
    try:
        return p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None


def extract_attachments(tokens: list[str]) -> tuple[list[str], list[Attachment]]:
    """Split *tokens* into pass-through tokens and readable file attachments."""
    remaining: list[str] = []
    attachments: list[Attachment] = []
    for token in tokens:
        if not is_path_candidate(token):
            remaining.append(token)
            continue
        content = _read_text(expand_path(token))
        if content is None:
            remaining.append(token)
        else:
            attachments.append(Attachment(path=token, content=content))
    return remaining, attachments


def extract_attachments_from_input(text: str) -> list[Attachment]:
    _, attachments = extract_attachments(tokenize(text))
    return attachments


def format_file_block(path: str, content: str) -> str:
    """Raw ``-- FILE --`` block, the shape ``/add`` queues for the next prompt."""
    return f"\n-- FILE: {path} --\n{content}\n"


def format_attachments(attachments: list[Attachment]) -> str | None:
    if not attachments:
        return None
    return "".join(format_file_block(a.path, a.content) for a in attachments)


def indent_block(content: str, prefix: str = INDENT) -> str:
    """Prefix every line of *content*; a trailing newline keeps a prefixed last line."""
    if not content:
        return ""
    out = "\n".join(prefix + line for line in content.splitlines())
    if content.endswith("\n"):
        out += "\n" + prefix
    return out


def format_attached_files(
    stdin: str | None, attachments: list[Attachment]
) -> str | None:
    """Merge piped stdin and file attachments into one ATTACHED FILES block."""
    sections = []
    if stdin and stdin.strip():
        sections.append(f"-- FILE: STDIN --\n{indent_block(stdin)}")
    for attachment in attachments:
        sections.append(
            f"-- FILE: {attachment.path} --\n{indent_block(attachment.content)}"
        )
    if not sections:
        return None
    body = "\n\n".join(sections)
    return f":: ATTACHED FILES ::\n\n{body}\n\n:: END ATTACHED FILES ::"
