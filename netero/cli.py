"""Command-line entry point: one-shot questions, commit messages, and the REPL."""

import argparse
import sys
from importlib import metadata
from pathlib import Path

from . import fmt
from .attach import extract_attachments_from_input, format_attached_files
from .client import CompletionClient, resolve_provider
from .commands import classify, dispatch
from .commit import build_commit_prompt, normalize_commit_message, staged_changes
from .config import (
    _UNSET,
    PROVIDERS,
    apply_config_to_args,
    generate_config,
    load_config,
)
from .context import Ambient, read_piped_stdin, stdin_is_piped
from .errors import CompletionError, ConfigError, NeteroError
from .prompt import build_oneshot_prompt
from .repl import run_repl
from .session import Session, estimate_tokens


def build_parser():
    """Build and return the argument parser."""
    parser = argparse.ArgumentParser(
        prog="netero",
        usage="%(prog)s [options] [question]\n"
        "       %(prog)s --repl [options] [question]\n"
        "       %(prog)s --commit [options] [hint]",
        description="A terminal assistant: one-shot questions, commit messages, "
        "and an interactive chat with inline shell commands.",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print the version and exit.",
    )
    parser.add_argument(
        "question",
        nargs="?",
        default=None,
        help="Question for the model (or the hint with --commit).",
    )

    mode_group = parser.add_mutually_exclusive_group()
    mode_group.add_argument(
        "--repl",
        action="store_true",
        help="Start an interactive session (the default without a question).",
    )
    mode_group.add_argument(
        "--commit",
        action="store_true",
        help="Write a commit message for the staged git changes.",
    )

    parser.add_argument(
        "--provider",
        choices=PROVIDERS,
        default=_UNSET,
        help="Completion provider: generic (NETERO_URL/NETERO_MODEL) or codestral.",
    )
    parser.add_argument(
        "--model",
        default=_UNSET,
        help="Model identifier (overrides NETERO_MODEL).",
    )
    parser.add_argument(
        "--api-key",
        default=_UNSET,
        help="API key for the provider (overrides env var).",
    )
    parser.add_argument(
        "--base-url",
        default=_UNSET,
        help="OpenAI-compatible base URL or chat/completions endpoint.",
    )
    parser.add_argument(
        "--stream",
        action="store_const",
        const=True,
        default=_UNSET,
        help="Start the session with streaming output on.",
    )
    parser.add_argument(
        "--shell",
        default=_UNSET,
        help="Shell used for #!(...) inline commands (default: $SHELL).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_const",
        const=True,
        default=_UNSET,
        help="Print every prompt sent to the model.",
    )
    parser.add_argument(
        "--no-history",
        action="store_const",
        const=True,
        default=_UNSET,
        help="Don't keep a line-editor history file.",
    )

    color_group = parser.add_mutually_exclusive_group()
    color_group.add_argument(
        "--color",
        action="store_const",
        const=True,
        default=_UNSET,
        help="Force ANSI color even when output is not a TTY.",
    )
    color_group.add_argument(
        "--no-color",
        action="store_const",
        const=True,
        default=_UNSET,
        help="Disable ANSI color even when output is a TTY.",
    )

    parser.add_argument(
        "--init-config",
        action="store_true",
        help="Print a commented config template and exit.",
    )
    parser.add_argument(
        "--project",
        action="store_true",
        help="With --init-config, print the project (netero.toml) template.",
    )
    return parser


def main():
    parser = build_parser()
    args = parser.parse_args()

    if args.version:
        try:
            version = metadata.version("netero")
        except metadata.PackageNotFoundError:
            version = "unknown"
        print(version)
        sys.exit(0)

    if args.init_config:
        print(generate_config(project=args.project))
        sys.exit(0)

    try:
        config = load_config(Path.cwd())
    except ConfigError as e:
        fmt.error(str(e))
        sys.exit(1)
    apply_config_to_args(args, config)
    args.config_dir = config["config_dir"]

    fmt.init(color=args.color, no_color=args.no_color)

    piped = stdin_is_piped()
    stdin = read_piped_stdin()

    try:
        _run_main(args, stdin, piped)
    except NeteroError as e:
        fmt.error(str(e))
        sys.exit(1)


def _show_prompt(args, prompt: str) -> None:
    if args.verbose:
        fmt.prompt_dump(prompt)
        fmt.context_stats("Prompt size", estimate_tokens(prompt))


def _run_main(args, stdin: str, piped: bool) -> None:
    base_url, model, api_key = resolve_provider(
        args.provider, args.model, args.api_key, args.base_url
    )
    client = CompletionClient(base_url, model, api_key)
    ambient = Ambient.from_env()

    if args.commit:
        prompt = build_commit_prompt(staged_changes(args.shell), args.question)
        _show_prompt(args, prompt)
        print(normalize_commit_message(client.complete(prompt)))
        return

    if args.question and not args.repl:
        attached = format_attached_files(
            stdin, extract_attachments_from_input(args.question)
        )
        prompt = build_oneshot_prompt(
            user=ambient.user,
            datetime=ambient.now(),
            lang=ambient.lang,
            request=args.question,
            attached=attached,
        )
        _show_prompt(args, prompt)
        fmt.answer(client.complete(prompt).strip())
        return

    session = Session(
        client=client,
        ambient=ambient,
        pending_attachment=stdin if stdin.strip() else None,
        stream_enabled=args.stream,
        verbose=args.verbose,
        shell=args.shell,
        assistant_name=args.assistant_name,
    )

    history_path = None
    if not args.no_history:
        try:
            args.config_dir.mkdir(parents=True, exist_ok=True)
            history_path = str(args.config_dir / "repl_history")
        except OSError as e:
            fmt.warning(f"no line history: {e}")

    if args.question:
        try:
            dispatch(session, classify(args.question.strip()))
        except CompletionError as e:
            fmt.error(f"AI error: {e}")
            return

    run_repl(session, stdin_is_piped=piped, history_path=history_path)


if __name__ == "__main__":
    main()
