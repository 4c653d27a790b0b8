"""Configuration file holding the todo contexts.

The file is TOML::

    active_ctx_name = "work"

    [[ctxs]]
    ide = "vim"
    name = "work"
    timezone = "Europe/Paris"
    folder_location = "/home/me/todo/work"

It is read in full and rewritten in full; there is no locking.
"""

from __future__ import annotations

import json
import logging
import os
import tomllib
from pathlib import Path
from typing import Optional

from .errors import ConfigurationError
from .models import Configuration, Context

logger = logging.getLogger("todoctx.config")

CONFIG_PATH_ENV = "TODO_CONFIG_PATH"
DEFAULT_CONFIG_PATH = Path("~/.todo/config")


def default_config_path() -> Path:
    """Return ``$TODO_CONFIG_PATH`` or ``~/.todo/config``."""
    env_path = os.getenv(CONFIG_PATH_ENV)
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_PATH.expanduser()


def parse_configuration(raw: str) -> Configuration:
    """Parse and validate raw TOML configuration."""
    try:
        data = tomllib.loads(raw)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Configuration is not valid TOML: {e}") from e

    configuration = Configuration.from_dict(data)
    if not configuration.is_valid():
        raise ConfigurationError(
            "Invalid configuration because no contexts correspond to active context"
        )
    logger.debug(f"Active configuration '{configuration.active_ctx_name}' is valid")
    return configuration


def load_configuration(path: Optional[Path] = None, raw: Optional[str] = None) -> Configuration:
    """Return the configuration, from ``raw`` when given, else from ``path``.

    A missing file raises FileNotFoundError so callers may offer to create
    one.
    """
    if raw is not None:
        return parse_configuration(raw)

    path = Path(path) if path is not None else default_config_path()
    logger.debug(f"Opening configuration file {path}")
    content = path.read_text(encoding="utf-8")
    return parse_configuration(content)


def _toml_string(value: str) -> str:
    # JSON string escapes are a subset of TOML basic string escapes; JSON
    # leaves DEL raw but TOML forbids it
    return json.dumps(value, ensure_ascii=False).replace("\x7f", "\\u007f")


def dumps_configuration(configuration: Configuration) -> str:
    """Serialize the configuration to TOML."""
    lines = [f"active_ctx_name = {_toml_string(configuration.active_ctx_name)}"]
    for ctx in configuration.ctxs:
        lines.append("")
        lines.append("[[ctxs]]")
        for key, value in ctx.to_dict().items():
            lines.append(f"{key} = {_toml_string(value)}")
    return "\n".join(lines) + "\n"


def save_configuration(configuration: Configuration, path: Optional[Path] = None) -> Path:
    """Rewrite the configuration file and return its path."""
    if not configuration.is_valid():
        raise ConfigurationError("No contexts matched active context")
    path = Path(path) if path is not None else default_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    raw = dumps_configuration(configuration)
    logger.debug(f"Writing configuration to {path}:\n{raw}")
    path.write_text(raw, encoding="utf-8")
    return path


def add_context(configuration: Configuration, ctx: Context) -> None:
    """Append ``ctx`` and make it the active context."""
    if not ctx.name:
        raise ConfigurationError("Context has no name")
    if configuration.find_context(ctx.name) is not None:
        raise ConfigurationError(f"Context \"{ctx.name}\" already exists")
    configuration.ctxs.append(ctx)
    configuration.update_active_ctx(ctx.name)
