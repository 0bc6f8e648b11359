"""
Configuration file support for gha-pin.

Looks for a .gha-pin.yml file in the repository root and loads settings
that control which files are scanned, which actions are left alone and
which GitHub API endpoint is used.

Example .gha-pin.yml:

    # Workflow files to exclude (glob patterns relative to the repository root)
    exclude:
      - ".github/workflows/legacy.yml"
      - "**/experimental-*.yml"

    # Actions that every command should leave untouched
    ignore_repos:
      - my-org/internal-action

    # GitHub Enterprise Server API root
    api_url: https://github.example.com/api/v3
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from gha_pin.github.client import DEFAULT_API_URL

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = ".gha-pin.yml"


@dataclass
class Config:
    """Parsed gha-pin configuration."""
    exclude: list[str] = field(default_factory=list)
    ignore_repos: list[str] = field(default_factory=list)
    api_url: str = DEFAULT_API_URL


def load_config(config_path: Optional[str] = None, root: Optional[str] = None) -> Config:
    """
    Load configuration from a .gha-pin.yml file.

    Search order:
      1. Explicit config_path if provided
      2. .gha-pin.yml in the repository root
      3. .gha-pin.yml in the current working directory

    Returns a Config with defaults if no config file is found.
    """
    path = _find_config_file(config_path, root)

    if path is None:
        logger.debug("No config file found, using defaults")
        return Config()

    logger.info("Loading config from %s", path)

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    if not isinstance(raw, dict):
        logger.warning("Config file is not a YAML mapping, using defaults")
        return Config()

    return Config(
        exclude=list(raw.get("exclude") or []),
        ignore_repos=list(raw.get("ignore_repos") or []),
        api_url=raw.get("api_url") or DEFAULT_API_URL,
    )


def _find_config_file(
    config_path: Optional[str] = None,
    root: Optional[str] = None,
) -> Optional[str]:
    """Find the config file, returning its path or None."""
    if config_path:
        p = Path(config_path)
        if p.is_file():
            return str(p)
        logger.warning("Config file not found: %s", config_path)
        return None

    if root:
        candidate = Path(root) / DEFAULT_CONFIG_FILENAME
        if candidate.is_file():
            return str(candidate)

    cwd_candidate = Path.cwd() / DEFAULT_CONFIG_FILENAME
    if cwd_candidate.is_file():
        return str(cwd_candidate)

    return None
