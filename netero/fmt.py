"""ANSI-formatted output using Rich.

Diagnostics go to stderr; model answers go to stdout.
"""

import sys

from rich.console import Console
from rich.markdown import Markdown
from rich.text import Text

_console = Console(stderr=True)
_out = Console()

CLEAR_SCREEN = "\x1b[2J\x1b[H"


def init(*, color: bool = False, no_color: bool = False) -> None:
    """Reconfigure the module-level consoles from CLI flags.

    Call once at startup, before any output.
    """
    global _console, _out
    kwargs: dict = {}
    if color:
        kwargs["force_terminal"] = True
        kwargs["no_color"] = False
    if no_color:
        kwargs["no_color"] = True
    _console = Console(stderr=True, **kwargs)
    _out = Console(**kwargs)


# -- Model output ------------------------------------------------------------


def answer(text: str) -> None:
    """Render a complete answer as Markdown on stdout."""
    _out.print()
    _out.print(Markdown(text))


def stream_start() -> None:
    """Blank line ahead of a streamed answer, matching :func:`answer`."""
    sys.stdout.write("\n")
    sys.stdout.flush()


def stream_delta(text: str) -> None:
    """Write one streamed fragment and flush so it shows up immediately."""
    sys.stdout.write(text)
    sys.stdout.flush()


def stream_end() -> None:
    sys.stdout.write("\n")
    sys.stdout.flush()


def plain(text: str) -> None:
    """Print text on stdout without markup processing."""
    _out.print()
    _out.print(Text(text))


def clear_screen() -> None:
    sys.stdout.write(CLEAR_SCREEN)
    sys.stdout.flush()


# -- Diagnostics -------------------------------------------------------------


def info(msg: str) -> None:
    _console.print(Text(f"  {msg}", style="dim"))


def usage(msg: str) -> None:
    line = Text()
    line.append("  Usage: ", style="bold yellow")
    line.append(msg, style="yellow")
    _console.print(line)


def prompt_dump(prompt: str) -> None:
    _console.print(Text(prompt, style="green"))


def context_stats(label: str, tokens: int) -> None:
    _console.print(Text(f"  {label}: ~{tokens} tokens", style="dim"))


def saved(path: str) -> None:
    line = Text()
    line.append("  ✓ saved: ", style="bold green")
    line.append(path, style="green")
    _console.print(line)


def added(path: str) -> None:
    _console.print(Text(f"  + added: {path}", style="green"))


def warning(msg: str) -> None:
    line = Text()
    line.append("  ⚠ Warning: ", style="yellow")
    line.append(msg, style="yellow")
    _console.print(line)


def error(msg: str) -> None:
    line = Text()
    line.append("Error: ", style="bold red")
    line.append(msg, style="red")
    _console.print(line)


def repl_banner() -> None:
    _console.print(
        Text("Interactive mode. Type /help for commands, Ctrl-D to quit.", style="dim")
    )
