"""Utilities for resolving and managing application paths."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping

DEFAULT_CONFIG_DIR = "~/.ledgersync"
DEFAULT_DATA_DIR = "~/.ledgersync/data"
DEFAULT_CONFIG_FILE = "config.yaml"
DEFAULT_LEDGER_DIR = "~/.ledgersync/ledgers"

CONFIG_DIR_ENV = "LEDGER_SYNC_CONFIG_DIR"
DATA_DIR_ENV = "LEDGER_SYNC_DATA_DIR"
CONFIG_FILE_ENV = "LEDGER_SYNC_CONFIG_PATH"


def _expand(path_str: str) -> Path:
    """Return a Path with user and environment variables expanded."""
    return Path(os.path.expandvars(path_str)).expanduser()


def get_config_dir(create: bool = False, env: Mapping[str, str] | None = None) -> Path:
    """Return the configuration directory, optionally creating it."""
    env = env or os.environ
    raw = env.get(CONFIG_DIR_ENV, DEFAULT_CONFIG_DIR)
    path = _expand(raw)
    if create:
        path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir(create: bool = False, env: Mapping[str, str] | None = None) -> Path:
    """Return the directory holding cleaned extracts, optionally creating it."""
    env = env or os.environ
    raw = env.get(DATA_DIR_ENV, DEFAULT_DATA_DIR)
    path = _expand(raw)
    if create:
        path.mkdir(parents=True, exist_ok=True)
    return path


def default_config_path(create_parents: bool = False, env: Mapping[str, str] | None = None) -> Path:
    """Return the default config file path, optionally ensuring parent dirs exist."""
    env = env or os.environ
    override = env.get(CONFIG_FILE_ENV)
    if override:
        path = _expand(override)
        if create_parents:
            path.parent.mkdir(parents=True, exist_ok=True)
        return path
    config_dir = get_config_dir(create=create_parents, env=env)
    return config_dir / DEFAULT_CONFIG_FILE


def default_ledger_path(environment: str) -> Path:
    """Return the conventional ledger workbook path for an environment."""
    return _expand(DEFAULT_LEDGER_DIR) / f"{environment}.xlsx"


def resolve_path(path_str: str | Path) -> Path:
    """Expand user and environment variables for arbitrary paths."""
    if isinstance(path_str, Path):
        return _expand(str(path_str))
    return _expand(path_str)
