"""Commit message generation from the staged git changes."""

from .prompt import cover
from .shell import run_commands

STAGED_COMMANDS = [
    "git status -sb",
    "git diff --cached --quiet && echo 'No staged changes' || "
    "(git diff --staged --stat --no-color && git diff --staged --no-color)",
]

INSTRUCTION = """\
Write a git commit message for the staged changes below.
Return only the commit message, without code fences or commentary.
Use the imperative mood in the title and keep it under 72 characters.
Leave one blank line between the title and the body.
Explain what changed and why in the body; omit the body for trivial changes."""

CONVENTION = """\
<type>(<optional scope>): <title>

<body>

Types: feat, fix, docs, style, refactor, perf, test, build, ci, chore."""


def staged_changes(shell: str | None = None) -> str:
    """Report of git status and the staged diff, in shell-runner format."""
    return run_commands(STAGED_COMMANDS, shell)


def build_commit_prompt(changes: str, hint: str | None = None) -> str:
    parts = [
        cover("instruction", INSTRUCTION),
        cover("convention", CONVENTION),
    ]
    if hint:
        parts.append(cover("hint", hint.strip()))
    parts.append(cover("staged changes", changes))
    return "\n\n".join(parts) + "\n"


def normalize_commit_message(message: str) -> str:
    """Ensure exactly one blank line separates the title from the body."""
    lines = message.rstrip().split("\n")
    if len(lines) <= 1:
        return lines[0]
    if lines[1] != "":
        return lines[0] + "\n\n" + "\n".join(lines[1:])
    return "\n".join(lines)
