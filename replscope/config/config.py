#!/usr/bin/env python3
# replscope/config/config.py
from __future__ import annotations

"""
Session configuration.

Sources, later ones overriding earlier ones:
  1) built-in defaults (DEFAULTS)
  2) files in the search directory, in CONFIG_FILES order
  3) REPLSCOPE_* environment variables

Keys are case-insensitive; nested tables in JSON/TOML are joined with '_'
({'log': {'level': 'debug'}} sets LOG_LEVEL). A .env file only contributes
REPLSCOPE_-prefixed assignments. Unknown keys end up in AppConfig.extra.
Invalid values raise ValueError naming the key.
"""

import configparser
import json
import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Mapping

log = logging.getLogger(__name__)

ENV_PREFIX = "REPLSCOPE_"

_TRUE_WORDS = frozenset({"1", "true", "yes", "y", "on"})
_FALSE_WORDS = frozenset({"0", "false", "no", "n", "off"})
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
INTERRUPT_ACTIONS = ("quit", "exit")


@dataclass(frozen=True)
class AppConfig:
    """
    Settings shared by the run loop, the line readers and logging setup.

    history_file_path is None here; load_config() supplies the per-user
    default so that a bare AppConfig() never touches the filesystem.
    """

    prompt: str = ">"
    empty_line_is_error: bool = False
    interrupt_action: str = "quit"
    echo: bool = False
    enable_completion: bool = True
    history_file_path: Path | None = None
    log_level: str = "WARNING"
    log_file_path: Path | None = None
    extra: dict[str, Any] = field(default_factory=dict)


DEFAULT_CONFIG = AppConfig()


# ---------- value coercion ----------

def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    word = str(value).strip().lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    raise ValueError(f"expected a boolean, got {value!r}")


def _to_prompt(value: Any) -> str:
    text = "" if value is None else str(value)
    if not text.strip():
        raise ValueError("prompt must not be blank")
    return text


def _to_choice(choices: tuple[str, ...], *, upper: bool = False) -> Callable[[Any], str]:
    def coerce(value: Any) -> str:
        word = str(value).strip()
        word = word.upper() if upper else word.lower()
        if word not in choices:
            raise ValueError(f"expected one of {', '.join(choices)}, got {value!r}")
        return word
    return coerce


def _to_path(value: Any) -> Path | None:
    """'', 'none' and None disable the path; '~' and $VARS are expanded."""
    if value is None:
        return None
    text = str(value).strip()
    if text.lower() in ("", "none"):
        return None
    return Path(os.path.expandvars(text)).expanduser().resolve()


# KEY -> (AppConfig attribute, default, coercer)
_FIELDS: dict[str, tuple[str, Any, Callable[[Any], Any]]] = {
    "PROMPT": ("prompt", ">", _to_prompt),
    "EMPTY_LINE_IS_ERROR": ("empty_line_is_error", False, _to_bool),
    "INTERRUPT_ACTION": ("interrupt_action", "quit", _to_choice(INTERRUPT_ACTIONS)),
    "ECHO": ("echo", False, _to_bool),
    "ENABLE_COMPLETION": ("enable_completion", True, _to_bool),
    "HISTORY_FILE_PATH": ("history_file_path", "~/.replscope_history", _to_path),
    "LOG_LEVEL": ("log_level", "WARNING", _to_choice(_LOG_LEVELS, upper=True)),
    "LOG_FILE_PATH": ("log_file_path", None, _to_path),
}

DEFAULTS: dict[str, Any] = {key: default for key, (_, default, _) in _FIELDS.items()}


# ---------- file sources ----------

def _flatten(data: Mapping[str, Any], parents: tuple[str, ...] = ()) -> dict[str, Any]:
    flat: dict[str, Any] = {}
    for key, value in data.items():
        path = (*parents, str(key))
        if isinstance(value, Mapping):
            flat.update(_flatten(value, path))
        else:
            flat["_".join(path)] = value
    return flat


def _read_dotenv(path: Path) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        key, value = key.strip().upper(), value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
            value = value[1:-1]
        if key.startswith(ENV_PREFIX):
            values[key[len(ENV_PREFIX):]] = value
    return values


def _read_ini(path: Path) -> dict[str, Any]:
    parser = configparser.ConfigParser()
    parser.read(path, encoding="utf-8")
    # Section names only group keys; they are not part of the key
    return {key: value for section in parser.sections()
            for key, value in parser.items(section)}


def _read_json(path: Path) -> dict[str, Any]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("top level must be an object")
    return _flatten(data)


def _read_toml(path: Path) -> dict[str, Any]:
    with path.open("rb") as handle:
        return _flatten(tomllib.load(handle))


CONFIG_FILES: tuple[tuple[str, Callable[[Path], dict[str, Any]]], ...] = (
    (".env", _read_dotenv),
    ("replscope.ini", _read_ini),
    ("replscope.json", _read_json),
    ("replscope.toml", _read_toml),
)


def _read_files(search_dir: Path) -> dict[str, Any]:
    merged: dict[str, Any] = {}
    for filename, reader in CONFIG_FILES:
        path = search_dir / filename
        if not path.is_file():
            continue
        try:
            values = reader(path)
        except (OSError, ValueError, configparser.Error) as exc:
            # tomllib.TOMLDecodeError and json.JSONDecodeError are ValueErrors
            log.warning("Ignoring unreadable config file %s: %s", path, exc)
            continue
        log.debug("Loaded %d setting(s) from %s", len(values), path)
        merged.update(_upper_keys(values))
    return merged


def _read_environ(environ: Mapping[str, str]) -> dict[str, Any]:
    return {key[len(ENV_PREFIX):]: value for key, value in environ.items()
            if key.startswith(ENV_PREFIX) and key.isupper()}


# ---------- building ----------

def _upper_keys(values: Mapping[str, Any]) -> dict[str, Any]:
    return {str(key).upper(): value for key, value in values.items()}


def _build(values: Mapping[str, Any]) -> AppConfig:
    kwargs: dict[str, Any] = {}
    for key, (attribute, default, coerce) in _FIELDS.items():
        raw = values.get(key, default)
        try:
            kwargs[attribute] = coerce(raw)
        except ValueError as exc:
            raise ValueError(f"Invalid {key}: {exc}") from None
    extra = {key: value for key, value in values.items() if key not in _FIELDS}
    return AppConfig(extra=extra, **kwargs)


def config_from_mapping(values: Mapping[str, Any]) -> AppConfig:
    """Build a config from DEFAULTS overridden by `values`."""
    return _build(_upper_keys(values))


def load_config(
    search_dir: str | os.PathLike[str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> AppConfig:
    """
    Merge defaults, config files in `search_dir` (default: the current
    directory) and the environment into a validated AppConfig.

    Reads only; nothing is created on disk.
    """
    base = Path.cwd() if search_dir is None else Path(search_dir)
    values = _read_files(base)
    values.update(_read_environ(os.environ if environ is None else environ))
    return _build(values)
