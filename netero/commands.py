"""Slash-command classification and handlers.

:func:`classify` turns a raw line into a :class:`Command` value using a
fixed priority order; :func:`dispatch` runs the matching handler against
the session. Lines that match no slash-command become :class:`Chat`.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from . import fmt
from .arith import EvalError, evaluate, format_eval_error
from .attach import expand_path, format_file_block
from .lang import lang_display_name, normalize_lang_tag
from .parse import parse_lang_directive, strip_inline_commands, tokenize
from .prompt import build_save_prompt, build_translation_prompt
from .session import Session, chat_turn

SAVE_PREFIX = "netero"

HELP_TEXT = """\
Commands:
  /help                    Show this help message
  /clean                   Clear chat history and the screen
  /add <path...>           Attach file contents to the next message
  /trans [in:out] <text>   Translate text (uses the model)
  /eval <expr>             Evaluate an integer arithmetic expression
  /save [hint]             Save a report about the chat to a Markdown file
  /stream on|off           Toggle streaming output

Inline commands: #!(command) anywhere in a message runs the command
and shows its output to the model."""

ADD_USAGE = "/add <path> [path2 path3 ...]"
STREAM_USAGE = "/stream on|off"
TRANS_USAGE = "/trans [INPUT_LANG:OUTPUT_LANG] <text>"
EVAL_USAGE = "/eval <expression>"


# -- Command variants ---------------------------------------------------------


@dataclass(frozen=True)
class Help:
    pass


@dataclass(frozen=True)
class Clean:
    pass


@dataclass(frozen=True)
class Add:
    paths: tuple[str, ...]


@dataclass(frozen=True)
class Stream:
    enabled: bool


@dataclass(frozen=True)
class Trans:
    source_lang: str | None
    target_lang: str | None
    text: str


@dataclass(frozen=True)
class Eval:
    expr: str


@dataclass(frozen=True)
class Save:
    hint: str | None


@dataclass(frozen=True)
class Chat:
    text: str


@dataclass(frozen=True)
class Usage:
    """A recognised slash-command whose arguments cannot be used."""

    message: str


Command = Help | Clean | Add | Stream | Trans | Eval | Save | Chat | Usage


# -- Classification -----------------------------------------------------------


def _classify_add(rest: str) -> Command:
    paths = tokenize(rest.strip())
    if not paths:
        return Usage(ADD_USAGE)
    return Add(tuple(paths))


def _classify_stream(rest: str) -> Command:
    mode = rest.strip().lower()
    if mode == "on":
        return Stream(True)
    if mode == "off":
        return Stream(False)
    return Usage(STREAM_USAGE)


def _classify_trans(rest: str) -> Command:
    raw = strip_inline_commands(rest)
    source, target, text = parse_lang_directive(raw)
    if not text:
        return Usage(TRANS_USAGE)
    return Trans(source, target, text)


def _classify_eval(rest: str) -> Command:
    expr = strip_inline_commands(rest)
    if not expr:
        return Usage(EVAL_USAGE)
    return Eval(expr)


def _classify_save(rest: str) -> Command:
    return Save(strip_inline_commands(rest) or None)


# (prefix, builder) in priority order, after the exact-match commands.
_PREFIX_COMMANDS: list[tuple[str, Callable[[str], Command]]] = [
    ("/add", _classify_add),
    ("/stream", _classify_stream),
    ("/trans", _classify_trans),
    ("/eval", _classify_eval),
    ("/save", _classify_save),
]


def classify(line: str) -> Command:
    """Map one non-blank input line to the command it invokes."""
    if line == "/clean":
        return Clean()
    if line == "/help":
        return Help()
    for prefix, build in _PREFIX_COMMANDS:
        if line.startswith(prefix):
            return build(line[len(prefix) :])
    return Chat(line)


# -- Handlers -----------------------------------------------------------------


def handle_clean(session: Session) -> None:
    session.history.clear()
    fmt.clear_screen()


def handle_help() -> None:
    fmt.plain(HELP_TEXT)


def handle_add(session: Session, paths: tuple[str, ...]) -> None:
    """Read each path; queue the readable ones as the next attachment."""
    combined = []
    for path in paths:
        try:
            content = Path(expand_path(path)).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            fmt.error(f"reading {path}: {e}")
            continue
        combined.append(format_file_block(path, content))
        session.history.append(f"Attachment: {path}\n{content}\n")
        fmt.added(path)

    if combined:
        session.pending_attachment = "".join(combined)


def handle_stream(session: Session, enabled: bool) -> None:
    session.stream_enabled = enabled
    fmt.info(f"stream: {'on' if enabled else 'off'}")


def handle_trans(session: Session, cmd: Trans) -> None:
    """Translate through the model. Completion errors propagate."""
    target = normalize_lang_tag(cmd.target_lang or session.ambient.lang)
    source = normalize_lang_tag(cmd.source_lang) if cmd.source_lang else "auto-detect"
    prompt = build_translation_prompt(
        source, target, lang_display_name(target), cmd.text
    )
    session.show_prompt(prompt)
    fmt.answer(session.client.complete(prompt))


def handle_eval(session: Session, expr: str) -> None:
    try:
        value = evaluate(expr)
    except EvalError as e:
        fmt.error(format_eval_error(e, normalize_lang_tag(session.ambient.lang)))
        return
    fmt.plain(str(value))


def save_path(datetime: str, directory: str = ".") -> Path:
    """Filesystem-safe transcript path for a ``YYYY-MM-DD HH:MM:SS`` stamp."""
    stamp = datetime.replace(" ", ".").replace(":", "_")
    return Path(directory) / f"{SAVE_PREFIX}.{stamp}.md"


def handle_save(session: Session, hint: str | None) -> None:
    """Summarize the transcript into this session's timestamped file.

    The first save of a session names the file; later saves append to it.
    """
    prompt = build_save_prompt(
        "\n".join(session.history), session.ambient.lang, hint
    )
    session.show_prompt(prompt)
    output = session.client.complete(prompt).rstrip()

    if session.save_file is None:
        session.save_file = save_path(session.ambient.now(), session.save_dir)
    path = session.save_file
    try:
        with path.open("a", encoding="utf-8") as f:
            f.write(output + "\n")
    except OSError as e:
        fmt.error(f"file error: {e}")
        return
    fmt.saved(str(path))


def dispatch(session: Session, command: Command) -> None:
    """Run the handler for *command*.

    Raises CompletionError when a handler needs the model and it fails.
    """
    if isinstance(command, Clean):
        handle_clean(session)
    elif isinstance(command, Help):
        handle_help()
    elif isinstance(command, Add):
        handle_add(session, command.paths)
    elif isinstance(command, Stream):
        handle_stream(session, command.enabled)
    elif isinstance(command, Trans):
        handle_trans(session, command)
    elif isinstance(command, Eval):
        handle_eval(session, command.expr)
    elif isinstance(command, Save):
        handle_save(session, command.hint)
    elif isinstance(command, Usage):
        fmt.usage(command.message)
    elif isinstance(command, Chat):
        chat_turn(session, command.text)
    else:
        raise TypeError(f"unknown command {command!r}")
