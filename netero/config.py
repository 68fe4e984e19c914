"""Configuration file loading and merging for netero.

Reads TOML config from ~/.config/netero/config.toml (global) and
./netero.toml (project). Precedence: CLI > project > global > defaults.
Provider credentials fall back to environment variables (see client.py).
"""

import argparse
import os
import sys
import tomllib
from pathlib import Path
from typing import Any

from .errors import ConfigError

_UNSET = object()  # Sentinel for "not set by CLI"


# --- Schema ---

CONFIG_KEYS: dict[str, type | tuple[type, ...]] = {
    "provider": str,
    "model": str,
    "api_key": str,
    "base_url": str,
    "stream": bool,
    "verbose": bool,
    "color": bool,
    "shell": str,
    "assistant_name": str,
    "no_history": bool,
}

PROVIDERS = ("generic", "codestral")

# Argparse dest -> hardcoded default
_ARGPARSE_DEFAULTS: dict[str, Any] = {
    "provider": "generic",
    "model": None,
    "api_key": None,
    "base_url": None,
    "stream": False,
    "verbose": False,
    "color": False,
    "no_color": False,
    "shell": None,
    "assistant_name": "Netero",
    "no_history": False,
}


# --- Internal helpers ---


def global_config_dir() -> Path:
    """Return the global config directory, respecting XDG_CONFIG_HOME."""
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "netero"
    return Path.home() / ".config" / "netero"


def _type_name(expected: type | tuple[type, ...]) -> str:
    if isinstance(expected, tuple):
        return " or ".join(t.__name__ for t in expected)
    return expected.__name__


def _validate_config(config: dict, source: str) -> None:
    """Validate value types in a parsed config dict.

    Raises ConfigError for type mismatches. Prints warnings for unknown keys.
    """
    for key, value in config.items():
        if key not in CONFIG_KEYS:
            print(f"warning: {source}: unknown config key {key!r}", file=sys.stderr)
            continue

        expected = CONFIG_KEYS[key]
        # bool is a subclass of int; reject it for non-bool fields.
        if isinstance(value, bool) and expected is not bool:
            raise ConfigError(
                f"{source}: {key!r} expected {_type_name(expected)}, got bool"
            )
        if not isinstance(value, expected):
            raise ConfigError(
                f"{source}: {key!r} expected {_type_name(expected)}, got {type(value).__name__}"
            )

    provider = config.get("provider")
    if provider is not None and provider not in PROVIDERS:
        raise ConfigError(
            f"{source}: 'provider' must be one of {', '.join(PROVIDERS)}, got {provider!r}"
        )


def _load_single(path: Path, label: str) -> dict:
    """Load and validate a single TOML config file. Returns empty dict if missing."""
    if not path.is_file():
        return {}
    try:
        with open(path, "rb") as f:
            config = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"{label}: invalid TOML: {e}") from e

    _validate_config(config, label)
    return {k: v for k, v in config.items() if k in CONFIG_KEYS}


# --- Public API ---


def load_config(base_dir: Path) -> dict:
    """Load and merge global + project config.

    Returns a flat dict with only the keys actually set in config files,
    plus ``config_dir`` pointing at the resolved global config directory.
    """
    config_dir = global_config_dir()
    global_path = config_dir / "config.toml"
    global_config = _load_single(global_path, str(global_path))

    project_path = Path(base_dir).resolve() / "netero.toml"
    project_config = _load_single(project_path, str(project_path))

    merged = {**global_config, **project_config}
    merged["config_dir"] = config_dir
    return merged


def apply_config_to_args(args: argparse.Namespace, config: dict) -> None:
    """Apply config values to argparse namespace where CLI didn't set a value.

    After processing all config keys, sweeps remaining _UNSET sentinels and
    replaces them with hardcoded defaults from _ARGPARSE_DEFAULTS.
    """

    def _is_unset(dest: str) -> bool:
        return getattr(args, dest, _UNSET) is _UNSET

    # A single config key controls the mutually exclusive color pair.
    if "color" in config:
        if _is_unset("color") and _is_unset("no_color"):
            args.color = config["color"]
            args.no_color = not config["color"]

    for key, value in config.items():
        if key in ("color", "config_dir"):
            continue
        if _is_unset(key):
            setattr(args, key, value)

    for dest, default in _ARGPARSE_DEFAULTS.items():
        if _is_unset(dest):
            setattr(args, dest, default)


def generate_config(project: bool = False) -> str:
    """Return a commented-out template config string."""
    lines = [
        "# netero configuration file",
        f"# {'Project' if project else 'Global'} config: "
        f"{'./netero.toml' if project else '~/.config/netero/config.toml'}",
        "#",
        "# CLI flags override these values. Only uncomment what you need.",
        "",
        "# --- Provider / model ---",
        '# provider = "generic"          # "generic" | "codestral"',
        '# model = "llama3.1"            # generic falls back to NETERO_MODEL',
        '# base_url = "http://localhost:11434/v1"  # or NETERO_URL',
        '# api_key = "sk-..."            # prefer NETERO_API_KEY / CODE_API_KEY',
        "",
        "# --- Session ---",
        "# stream = false",
        '# shell = "/bin/bash"           # shell for #!(...) commands',
        '# assistant_name = "Netero"',
        "# no_history = false            # don't keep a line-editor history file",
        "",
        "# --- UI ---",
        "# color = true       # true = force color, false = force no-color, absent = auto",
        "# verbose = false",
        "",
    ]
    return "\n".join(lines)
