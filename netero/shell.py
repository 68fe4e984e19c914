"""Run inline ``#!(...)`` commands and format their results for the prompt.

The report is advisory context for the model; nothing in it is executed
remotely.
"""

import os
import subprocess

from .parse import extract_inline_commands

EMPTY = "<empty>"
DEFAULT_SHELL = "/bin/sh"


def default_shell() -> str:
    return os.environ.get("SHELL") or DEFAULT_SHELL


def _or_empty(text: str) -> str:
    text = text.rstrip()
    return text if text.strip() else EMPTY


def _decode(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def run_one(command: str, shell: str | None = None) -> str:
    """Run *command* through a login shell and return its report section."""
    shell = shell or default_shell()
    try:
        proc = subprocess.run(
            [shell, "-lc", command],
            capture_output=True,
            stdin=subprocess.DEVNULL,
        )
    except OSError as e:
        return "\n".join(
            [
                "[section]",
                "[command]",
                command,
                "[error]",
                f"failed to start shell: {e}",
                "[stderr]",
                EMPTY,
                "[stdout]",
                EMPTY,
                "[end section]",
            ]
        )

    stdout = _decode(proc.stdout)
    stderr = _decode(proc.stderr)

    if proc.returncode == 0:
        lines = ["[section]", "[command]", command, "[stdout]", _or_empty(stdout)]
        if stderr.strip():
            lines += ["[stderr]", stderr.rstrip()]
        lines.append("[end section]")
        return "\n".join(lines)

    return "\n".join(
        [
            "[section]",
            "[command]",
            command,
            "[status]",
            f"exit status {proc.returncode}",
            "[stderr]",
            _or_empty(stderr),
            "[stdout]",
            _or_empty(stdout),
            "[end section]",
        ]
    )


def run_commands(commands: list[str], shell: str | None = None) -> str:
    """Run each command in order and join their sections with a blank line."""
    return "\n\n".join(run_one(cmd, shell) for cmd in commands)


def run_inline_commands(raw_input: str, shell: str | None = None) -> str | None:
    """Execute every inline command found in *raw_input*.

    Returns None when the line carries no inline commands.
    """
    commands = extract_inline_commands(raw_input)
    if not commands:
        return None
    return run_commands(commands, shell)
