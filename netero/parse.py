"""Line-level parsing: argument tokenizing, inline command spans, directives."""

import re

INLINE_MARKER = "#!("

_DIRECTIVE_RE = re.compile(r"^[A-Za-z0-9_:-]+$")


def tokenize(text: str) -> list[str]:
    """Split *text* into arguments, honoring quotes and backslash escapes.

    Backslash escapes the next character except inside single quotes.
    Unterminated quotes and a trailing backslash close the last token.
    """
    args: list[str] = []
    current: list[str] = []
    quote: str | None = None
    escape = False

    for ch in text:
        if escape:
            current.append(ch)
            escape = False
            continue

        if ch == "\\" and quote != "'":
            escape = True
            continue

        if quote is not None:
            if ch == quote:
                quote = None
            else:
                current.append(ch)
            continue

        if ch in ("'", '"'):
            quote = ch
            continue

        if ch.isspace():
            if current:
                args.append("".join(current))
                current = []
            continue

        current.append(ch)

    if current:
        args.append("".join(current))
    return args


def _find_spans(text: str) -> list[tuple[int, int]]:
    """Return (start, end) offsets of every balanced ``#!(...)`` span.

    ``end`` is one past the closing parenthesis. Scanning stops at the
    first unbalanced span, which is left in place.
    """
    spans = []
    i = 0
    width = len(INLINE_MARKER)
    while True:
        start = text.find(INLINE_MARKER, i)
        if start < 0:
            break
        depth = 1
        j = start + width
        while j < len(text):
            if text[j] == "(":
                depth += 1
            elif text[j] == ")":
                depth -= 1
                if depth == 0:
                    break
            j += 1
        if depth != 0:
            break
        spans.append((start, j + 1))
        i = j + 1
    return spans


def extract_inline_commands(text: str) -> list[str]:
    """Return the trimmed, non-empty commands of every ``#!(...)`` span."""
    width = len(INLINE_MARKER)
    commands = []
    for start, end in _find_spans(text):
        cmd = text[start + width : end - 1].strip()
        if cmd:
            commands.append(cmd)
    return commands


def strip_inline_commands(text: str) -> str:
    """Remove every span :func:`extract_inline_commands` sees, then trim."""
    parts = []
    pos = 0
    for start, end in _find_spans(text):
        parts.append(text[pos:start])
        pos = end
    parts.append(text[pos:])
    return "".join(parts).strip()


def inline_command_open(text: str) -> bool:
    """True when *text* ends inside an unclosed ``#!(`` span."""
    start = text.rfind(INLINE_MARKER)
    if start < 0:
        return False
    depth = 1
    for ch in text[start + len(INLINE_MARKER) :]:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return False
    return True


def parse_lang_directive(text: str) -> tuple[str | None, str | None, str]:
    """Split an optional ``in:out`` language directive off the front of *text*.

    Returns (source_lang, target_lang, remaining_text). The first word is a
    directive only if it is made of ``[A-Za-z0-9_:-]``, holds a colon, and
    names at least one language; otherwise *text* comes back untouched.
    """
    parts = text.split(None, 1)
    if not parts:
        return None, None, ""
    first = parts[0]
    if ":" not in first or not _DIRECTIVE_RE.match(first):
        return None, None, text

    source, _, target = first.partition(":")
    source_lang = source.strip() or None
    target_lang = target.strip() or None
    if source_lang is None and target_lang is None:
        return None, None, text

    rest = parts[1].strip() if len(parts) > 1 else ""
    return source_lang, target_lang, rest
