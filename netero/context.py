"""Ambient context: who is typing, in which locale, when, and what was piped in."""

import os
import sys
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_user() -> str:
    """Display name for the current user (capitalized ``$USER``)."""
    user = os.environ.get("USER") or os.environ.get("USERNAME") or "user"
    return user[:1].upper() + user[1:]


def get_user_lang() -> str:
    """Raw locale tag from the environment, e.g. ``es_AR.UTF-8``."""
    for var in ("LC_ALL", "LC_MESSAGES", "LANG"):
        value = os.environ.get(var, "").strip()
        if value and value not in ("C", "POSIX"):
            return value
    return "en"


def current_datetime() -> str:
    return datetime.now().strftime(DATETIME_FORMAT)


def stdin_is_piped() -> bool:
    return not sys.stdin.isatty()


def read_piped_stdin() -> str:
    """Drain piped stdin; empty string when stdin is a terminal."""
    if not stdin_is_piped():
        return ""
    return sys.stdin.read()


@dataclass
class Ambient:
    """User name, locale tag and clock handed to the session."""

    user: str
    lang: str
    clock: Callable[[], str] = current_datetime

    @classmethod
    def from_env(cls) -> "Ambient":
        return cls(user=get_user(), lang=get_user_lang())

    def now(self) -> str:
        return self.clock()
