"""Read-eval-print loop: line input, completion, and the dispatch loop."""

import sys
from typing import Callable, TextIO

from prompt_toolkit.completion import Completer, Completion, PathCompleter
from prompt_toolkit.document import Document

from . import fmt
from .attach import PATH_PREFIXES
from .commands import classify, dispatch
from .errors import CompletionError
from .parse import INLINE_MARKER, inline_command_open
from .session import Session

TTY_PATH = "/dev/tty"
PROMPT = "➜ "

SLASH_COMMANDS = ["/add", "/clean", "/eval", "/help", "/save", "/stream", "/trans"]
INLINE_COMMANDS = ["ls", "cat", "rg", "git", "pwd", "grep", "sed", "awk", "head", "tail"]
GIT_SUBCOMMANDS = [
    "status", "add", "commit", "push", "pull", "fetch", "log", "diff", "show",
    "branch", "checkout", "switch", "merge", "rebase", "stash", "reset", "restore",
]


def _words(candidates: list[str], word: str):
    for name in candidates:
        if name.startswith(word):
            yield Completion(name, start_position=-len(word))


class CommandCompleter(Completer):
    """Slash commands at line start, paths for path-shaped words, and
    command names right inside an open ``#!(`` span."""

    def __init__(self):
        self._paths = PathCompleter(expanduser=True)

    def _complete_path(self, word: str, complete_event):
        yield from self._paths.get_completions(Document(word, len(word)), complete_event)

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        word = "" if not text or text[-1].isspace() else text.split()[-1]

        if inline_command_open(text):
            inside = text[text.rfind(INLINE_MARKER) + len(INLINE_MARKER) :]
            word = "" if not inside or inside[-1].isspace() else inside.split()[-1]
            if word.startswith(PATH_PREFIXES):
                yield from self._complete_path(word, complete_event)
                return
            before = inside[: len(inside) - len(word)].split()
            if not before:
                yield from _words(INLINE_COMMANDS, word)
            elif before == ["git"]:
                yield from _words(GIT_SUBCOMMANDS, word)
            return

        if text == word and word.startswith("/"):
            matches = list(_words(SLASH_COMMANDS, word))
            if matches or word == "/":
                yield from matches
                return

        if word.startswith(PATH_PREFIXES) or text.startswith("/add "):
            yield from self._complete_path(word, complete_event)


class PromptReader:
    """Line editor with history and completion for an interactive terminal."""

    def __init__(self, history_path: str | None = None):
        from prompt_toolkit import PromptSession
        from prompt_toolkit.formatted_text import FormattedText
        from prompt_toolkit.history import FileHistory, InMemoryHistory

        history = FileHistory(history_path) if history_path else InMemoryHistory()
        self._session = PromptSession(
            history=history,
            completer=CommandCompleter(),
            complete_while_typing=False,
        )
        self._prompt = FormattedText([("bold fg:ansicyan", PROMPT)])

    def __call__(self) -> str | None:
        try:
            print(file=sys.stderr)  # blank line before prompt
            return self._session.prompt(self._prompt)
        except (EOFError, KeyboardInterrupt):
            return None


class TtyReader:
    """Plain line reader on the controlling terminal, for when stdin is a pipe."""

    def __init__(self, stream: TextIO):
        self._stream = stream

    @classmethod
    def open(cls) -> "TtyReader":
        return cls(open(TTY_PATH, encoding="utf-8"))

    def __call__(self) -> str | None:
        sys.stdout.write(f"\n\x1b[36m{PROMPT}")
        sys.stdout.flush()
        try:
            line = self._stream.readline()
        except KeyboardInterrupt:
            line = ""
        sys.stdout.write("\x1b[0m")
        sys.stdout.flush()
        if not line:
            return None
        return line.strip()

    def close(self) -> None:
        self._stream.close()


def repl_loop(session: Session, read_line: Callable[[], str | None]) -> None:
    """Read, classify and dispatch lines until end of input or a fatal error.

    ``read_line`` returns None at end of input and may raise OSError.
    """
    while True:
        try:
            line = read_line()
        except OSError as e:
            fmt.error(f"reading input: {e}")
            break
        if line is None:
            break

        line = line.strip()
        if not line:
            continue

        try:
            dispatch(session, classify(line))
        except CompletionError as e:
            fmt.error(f"AI error: {e}")
            break
        except KeyboardInterrupt:
            fmt.warning("interrupted, ending session.")
            break


def run_repl(
    session: Session, *, stdin_is_piped: bool, history_path: str | None = None
) -> None:
    """Start the interactive session on the right input surface."""
    fmt.repl_banner()
    if not stdin_is_piped:
        repl_loop(session, PromptReader(history_path))
        return

    try:
        reader = TtyReader.open()
    except OSError as e:
        fmt.error(f"cannot open {TTY_PATH}: {e}")
        return
    try:
        repl_loop(session, reader)
    finally:
        reader.close()
