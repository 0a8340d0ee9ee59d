"""Configuration loading for devlog.

Settings come from three places, later ones winning:
1. Built-in defaults
2. An optional .toml or .json config file
3. Environment variables (DEVLOG_REPO, DEVLOG_EDITOR)
"""

from __future__ import annotations

import json
import os
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

# Python 3.11+ has tomllib in stdlib; fall back to tomli for older versions
try:
    import tomllib  # Python 3.11+
except ImportError:
    try:
        import tomli as tomllib  # Python <3.11
    except ImportError:  # pragma: no cover
        tomllib = None

from .errors import ConfigError

DEFAULT_EDITOR = "nano"
DEFAULT_TAIL_LIMIT = 2

CONFIG_ENV = "DEVLOG_CONFIG"
REPO_ENV = "DEVLOG_REPO"
EDITOR_ENV = "DEVLOG_EDITOR"


def default_repo_dir() -> Path:
    return Path.home() / "devlogs"


@dataclass
class DevlogConfig:
    """Configuration for one devlog repository."""

    repo_dir: Path = field(default_factory=default_repo_dir)
    editor: str = DEFAULT_EDITOR
    tail_limit: int = DEFAULT_TAIL_LIMIT
    assume_yes: bool = False


def load_toml_config(path: Path) -> dict[str, Any]:
    """Load configuration from TOML file."""
    if tomllib is None:
        raise ConfigError("tomli required for TOML config: pip install tomli")
    with open(path, "rb") as f:
        return tomllib.load(f)


def load_json_config(path: Path) -> dict[str, Any]:
    """Load configuration from JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def config_table(data: dict[str, Any], name: str) -> dict[str, Any]:
    """Get a top-level table, or an empty one if the file omits it."""
    table = data.get(name, {})
    if not isinstance(table, dict):
        raise ConfigError(f"[{name}] must be a table, got {table!r}")
    return table


def validate_editor(command: Any) -> str:
    """Check that an editor command names a program to run."""
    if not isinstance(command, str):
        raise ConfigError(f"editor.command must be a string, got {command!r}")
    try:
        argv = shlex.split(command)
    except ValueError as e:
        raise ConfigError(f"Invalid editor command {command!r}: {e}") from e
    if not argv:
        raise ConfigError("editor.command must not be empty")
    return command


def dict_to_config(data: dict[str, Any], config: Optional[DevlogConfig] = None) -> DevlogConfig:
    """Apply a config file's tables to a DevlogConfig.

    Raises:
        ConfigError: If a table or value has the wrong type
    """
    if not isinstance(data, dict):
        raise ConfigError(f"Config must be a table at the top level, got {data!r}")
    config = config or DevlogConfig()

    repo = config_table(data, "repository")
    if "dir" in repo:
        if not isinstance(repo["dir"], str):
            raise ConfigError(f"repository.dir must be a string, got {repo['dir']!r}")
        config.repo_dir = Path(repo["dir"]).expanduser()

    editor = config_table(data, "editor")
    if "command" in editor:
        config.editor = validate_editor(editor["command"])

    tail = config_table(data, "tail")
    if "limit" in tail:
        limit = tail["limit"]
        if not isinstance(limit, int) or isinstance(limit, bool) or limit < 1:
            raise ConfigError(f"tail.limit must be an integer >= 1, got {limit!r}")
        config.tail_limit = limit

    prompts = config_table(data, "prompts")
    if "assume_yes" in prompts:
        config.assume_yes = bool(prompts["assume_yes"])

    return config


def find_config_file(repo_dir: Path) -> Optional[Path]:
    """Find a configuration file in the repository directory.

    Search order:
    1. devlog.toml
    2. devlog.json
    """
    for name in ("devlog.toml", "devlog.json"):
        path = repo_dir / name
        if path.exists():
            return path
    return None


def read_config_file(path: Path) -> dict[str, Any]:
    suffix = path.suffix.lower()
    try:
        if suffix == ".toml":
            return load_toml_config(path)
        elif suffix == ".json":
            return load_json_config(path)
    except OSError as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e
    except ValueError as e:
        # json.JSONDecodeError and tomllib.TOMLDecodeError are ValueErrors
        raise ConfigError(f"Malformed config {path}: {e}") from e
    raise ConfigError(f"Unsupported config file type: {suffix}")


def load_config(
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> DevlogConfig:
    """Load devlog configuration.

    Args:
        config_path: Optional explicit path to config file
        environ: Environment mapping (default: os.environ)

    Returns:
        DevlogConfig instance
    """
    env = os.environ if environ is None else environ
    config = DevlogConfig()

    # The repository location decides where to look for a config file
    if env.get(REPO_ENV):
        config.repo_dir = Path(env[REPO_ENV]).expanduser()

    if config_path is None and env.get(CONFIG_ENV):
        config_path = Path(env[CONFIG_ENV]).expanduser()
    if config_path is None:
        config_path = find_config_file(config.repo_dir)

    if config_path is not None:
        config = dict_to_config(read_config_file(config_path), config)

    if env.get(REPO_ENV):
        config.repo_dir = Path(env[REPO_ENV]).expanduser()
    if env.get(EDITOR_ENV):
        config.editor = validate_editor(env[EDITOR_ENV])

    return config
