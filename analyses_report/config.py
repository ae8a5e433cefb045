"""Configuration loading and validation.

Usage:
    config = load("analyses-config.yaml")        # raises ConfigError on bad config
    config = load(None)                          # defaults + environment overrides
    client = ResultsClient(config.timeout, config.headers)
    generate_template("analyses-config.yaml")    # writes example file to disk
"""

import math
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from analyses_report.client import DEFAULT_TIMEOUT
from analyses_report.models import FORMAT_VERSION


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class ConfigError(Exception):
    """Raised when the configuration is missing or invalid."""


# ---------------------------------------------------------------------------
# Config dataclass
# ---------------------------------------------------------------------------

@dataclass
class Config:
    timeout: float = DEFAULT_TIMEOUT
    headers: dict[str, str] = field(default_factory=dict)
    accepted_versions: list[int] = field(default_factory=lambda: [FORMAT_VERSION])


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------

def load(config_path: str | None = None) -> Config:
    """Load and validate configuration from an optional YAML file.

    Without a path the defaults are used. The ANALYSES_TIMEOUT environment
    variable overrides ``http.timeout`` either way.

    Raises:
        ConfigError: if the file is missing or malformed, or if a value
                     fails validation.
    """
    raw: dict = {}
    if config_path is not None:
        raw = _read_yaml(Path(config_path))

    http = raw.get("http") or {}
    fmt = raw.get("format") or {}
    if not isinstance(http, dict) or not isinstance(fmt, dict):
        raise ConfigError("'http' and 'format' must be YAML mappings.")

    timeout = os.environ.get("ANALYSES_TIMEOUT") or http.get("timeout", DEFAULT_TIMEOUT)
    if isinstance(timeout, bool):
        raise ConfigError(
            f"Invalid configuration:\n  - 'http.timeout' is not a number: {timeout!r}"
        )
    try:
        timeout = float(timeout)
    except (TypeError, ValueError) as exc:
        raise ConfigError(
            f"Invalid configuration:\n  - 'http.timeout' is not a number: {timeout!r}"
        ) from exc

    config = Config(
        timeout=timeout,
        headers=http.get("headers") or {},
        accepted_versions=fmt.get("accepted_versions", [FORMAT_VERSION]),
    )
    _validate(config)
    return config


def _read_yaml(path: Path) -> dict:
    if not path.exists():
        raise ConfigError(
            f"Config file not found: '{path}'\n"
            "Run `python -m analyses_report init` to generate a template."
        )

    try:
        with path.open(encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse '{path}': {exc}") from exc

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"'{path}' must be a YAML mapping at the top level.")
    return raw


def _validate(config: Config) -> None:
    """Raise ConfigError if any value is out of range or of the wrong type."""
    errors: list[str] = []

    if not math.isfinite(config.timeout) or config.timeout <= 0:
        errors.append(
            "  - 'http.timeout' must be a positive finite number"
            " (or set the ANALYSES_TIMEOUT environment variable)"
        )
    if not isinstance(config.headers, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in config.headers.items()
    ):
        errors.append("  - 'http.headers' must map header names to string values")
    versions = config.accepted_versions
    if (
        not isinstance(versions, list)
        or not versions
        or not all(isinstance(v, int) and not isinstance(v, bool) for v in versions)
    ):
        errors.append("  - 'format.accepted_versions' must be a non-empty list of integers")

    if errors:
        raise ConfigError("Invalid configuration:\n" + "\n".join(errors))


# ---------------------------------------------------------------------------
# Template generator (used by `init` command)
# ---------------------------------------------------------------------------

TEMPLATE = """\
http:
  timeout: 30                     # seconds, overridden by ANALYSES_TIMEOUT
  headers: {}                     # extra headers sent with every results request

format:
  # Report format versions to accept when reading git notes
  accepted_versions: [0]
"""


def generate_template(output_path: str = "analyses-config.yaml") -> None:
    """Write a template analyses-config.yaml to *output_path*.

    Raises:
        ConfigError: if the file already exists.
    """
    path = Path(output_path)
    if path.exists():
        raise ConfigError(
            f"'{output_path}' already exists. Remove it first or choose a different path."
        )
    path.write_text(TEMPLATE, encoding="utf-8")
