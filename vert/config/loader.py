"""
Configuration loading for vert.

vert reads a single optional YAML file (default: vert.yaml in the working
directory):

    state_file: state/packages.json
    timeout: 30
    max_workers: 10
    check_interval_hours: 2
    github:
      account: octocat
      token: ${GITHUB_TOKEN}

Every key is optional. A missing file yields the defaults, so vert works
out of the box for anonymous checks.

Environment Expansion
---------------------
String values of the form ``${NAME}`` are replaced with the environment
variable NAME. A .env file in the working directory is loaded first with
python-dotenv, so tokens can stay out of the YAML file. Unset variables
become None.

Error Handling
--------------
- ConfigError: YAML parse errors, non-mapping top level, bad value types
- All errors are chained with "from err" for better debugging
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
import os
from pathlib import Path
from typing import Any

from dotenv import find_dotenv, load_dotenv
import yaml

from vert.core import DEFAULT_CHECK_INTERVAL, DEFAULT_MAX_WORKERS
from vert.discovery import Credentials
from vert.exceptions import ConfigError
from vert.io.http import DEFAULT_TIMEOUT
from vert.logging import get_global_logger

DEFAULT_CONFIG_PATH = Path("vert.yaml")
DEFAULT_STATE_FILE = Path("state/packages.json")

# -------------------------------
# Data types
# -------------------------------


@dataclass(frozen=True)
class VertConfig:
    """Effective configuration.

    Attributes:
        state_file: JSON package store.
        timeout: Per-request timeout in seconds.
        max_workers: Concurrent checks during 'check' of all packages.
        check_interval: Packages checked more recently are skipped.
        github_account: Basic-auth user for the GitHub API.
        github_token: Basic-auth password (personal access token).

    """

    state_file: Path = DEFAULT_STATE_FILE
    timeout: float = DEFAULT_TIMEOUT
    max_workers: int = DEFAULT_MAX_WORKERS
    check_interval: timedelta = DEFAULT_CHECK_INTERVAL
    github_account: str | None = None
    github_token: str | None = None

    @property
    def credentials(self) -> Credentials | None:
        """GitHub credentials, or None for anonymous requests."""
        if not self.github_account:
            return None
        return Credentials(account=self.github_account, token=self.github_token)


# -------------------------------
# YAML helpers
# -------------------------------


def _load_yaml_file(p: Path) -> Any:
    """
    Load a YAML file and return the parsed Python object.

    Raises:
      ConfigError - for invalid YAML (parse error) with chained context
    """
    try:
        with p.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as err:
        raise ConfigError(f"Error parsing YAML: {p}: {err}") from err


def _expand_env(value: Any) -> Any:
    """Expand a whole-value ``${NAME}`` reference; other values pass through."""
    if isinstance(value, str) and value.startswith("${") and value.endswith("}"):
        env_var = value[2:-1]
        expanded = os.environ.get(env_var)
        if not expanded:
            get_global_logger().verbose(
                "CONFIG", f"Warning: Environment variable {env_var} not set"
            )
            return None
        return expanded
    return value


def _positive_number(data: dict[str, Any], key: str, default: float) -> float:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(f"{key} must be a positive number, got {value!r}")
    return value


def _optional_str(data: dict[str, Any], key: str) -> str | None:
    value = _expand_env(data.get(key))
    if value is not None and not isinstance(value, str):
        raise ConfigError(f"github.{key} must be a string, got {value!r}")
    return value


# -------------------------------
# Public API
# -------------------------------


def load_config(
    config_path: Path | None = None,
    *,
    state_file: Path | None = None,
) -> VertConfig:
    """
    Load the effective configuration.

    Steps
      1) Load .env into the environment (existing variables win).
      2) Read the YAML file if it exists.
      3) Validate and expand values.
      4) Apply the 'state_file' override (command line beats file).

    Returns
      A frozen VertConfig.

    Raises
      ConfigError on YAML errors or invalid values.
    """
    logger = get_global_logger()
    load_dotenv(find_dotenv(usecwd=True))

    path = config_path or DEFAULT_CONFIG_PATH
    data: Any = {}
    if path.exists():
        logger.verbose("CONFIG", f"Loading config: {path}")
        data = _load_yaml_file(path)
        if data is None:
            data = {}
    else:
        logger.verbose("CONFIG", f"No config file at {path}, using defaults")

    if not isinstance(data, dict):
        raise ConfigError(f"top-level YAML must be a mapping (dict): {path}")

    github = data.get("github") or {}
    if not isinstance(github, dict):
        raise ConfigError(f"'github' must be a mapping: {path}")

    max_workers = _positive_number(data, "max_workers", DEFAULT_MAX_WORKERS)
    if not isinstance(max_workers, int):
        raise ConfigError(f"max_workers must be an integer, got {max_workers!r}")

    interval_hours = _positive_number(
        data, "check_interval_hours", DEFAULT_CHECK_INTERVAL.total_seconds() / 3600
    )

    configured_state = _expand_env(data.get("state_file"))
    if state_file is not None:
        resolved_state = state_file
    elif configured_state:
        resolved_state = Path(configured_state)
    else:
        resolved_state = DEFAULT_STATE_FILE

    config = VertConfig(
        state_file=resolved_state,
        timeout=_positive_number(data, "timeout", DEFAULT_TIMEOUT),
        max_workers=max_workers,
        check_interval=timedelta(hours=interval_hours),
        github_account=_optional_str(github, "account"),
        github_token=_optional_str(github, "token"),
    )
    logger.debug("CONFIG", f"Effective config: {config!r}")
    return config
