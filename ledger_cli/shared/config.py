"""Configuration loading utilities for ledger sync."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping, MutableMapping

import yaml

from . import paths
from .exceptions import ConfigurationError

DEFAULT_METADATA_MARKERS = (
    ";Cartola",
    ";Numero Cuenta",
    ";Fecha Desde",
    ";Fecha Hasta",
    ";Ejecutivo",
    ";Sucursal",
    ";Email",
    ";Fono",
)
DEFAULT_HEADER_KEYWORDS = ("Fecha", "Descripcion", "Cargos", "Abonos", "Saldo")


@dataclass(frozen=True, slots=True)
class LedgerSettings:
    """Ledger locations and the bounded scan window used to find the tail."""

    environments: Mapping[str, Path]
    scan_start_row: int
    scan_window: int

    def ledger_path(self, environment: str) -> Path:
        try:
            return self.environments[environment]
        except KeyError as exc:
            raise ConfigurationError(f"No ledger configured for environment '{environment}'.") from exc


@dataclass(frozen=True, slots=True)
class ExtractSettings:
    """Bank extract parsing configuration."""

    delimiter: str
    metadata_markers: tuple[str, ...]
    header_keywords: tuple[str, ...]
    min_year: int


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Top-level application configuration."""

    source_path: Path
    data_dir: Path
    ledger: LedgerSettings
    extract: ExtractSettings

    def with_ledger_path(self, environment: str, new_path: str | Path) -> AppConfig:
        """Return a copy pointing one environment at a different ledger file."""
        environments = dict(self.ledger.environments)
        environments[environment] = paths.resolve_path(new_path)
        new_ledger = replace(self.ledger, environments=environments)
        return replace(self, ledger=new_ledger)


def _default_config(env: Mapping[str, str]) -> dict[str, Any]:
    return {
        "data_dir": str(paths.get_data_dir(env=env)),
        "ledger": {
            "environments": {
                "dev": str(paths.default_ledger_path("dev")),
                "prod": str(paths.default_ledger_path("prod")),
            },
            "scan_start_row": 3,
            "scan_window": 300,
        },
        "extract": {
            "delimiter": ";",
            "metadata_markers": list(DEFAULT_METADATA_MARKERS),
            "header_keywords": list(DEFAULT_HEADER_KEYWORDS),
            "min_year": 2024,
        },
    }


ENV_OVERRIDE_SPEC: dict[str, tuple[str, type]] = {
    "data_dir": (paths.DATA_DIR_ENV, str),
    "ledger.environments.dev": ("LEDGER_SYNC_LEDGER_DEV", str),
    "ledger.environments.prod": ("LEDGER_SYNC_LEDGER_PROD", str),
    "ledger.scan_start_row": ("LEDGER_SYNC_SCAN_START_ROW", int),
    "ledger.scan_window": ("LEDGER_SYNC_SCAN_WINDOW", int),
    "extract.delimiter": ("LEDGER_SYNC_DELIMITER", str),
    "extract.min_year": ("LEDGER_SYNC_MIN_YEAR", int),
}


def load_config(
    config_path: str | Path | None = None,
    env: Mapping[str, str] | None = None,
) -> AppConfig:
    """Load configuration from defaults, YAML file, and env overrides."""
    env = dict(env or os.environ)
    resolved_config_path = _resolve_config_path(config_path, env)
    file_data = _load_yaml(resolved_config_path)
    defaults = _default_config(env)
    merged: dict[str, Any] = _deep_merge(defaults, file_data)
    merged = _apply_env_overrides(merged, env)
    return _build_config(merged, resolved_config_path)


def _resolve_config_path(
    config_path: str | Path | None, env: Mapping[str, str]
) -> Path:
    if config_path:
        return paths.resolve_path(config_path)
    return paths.default_config_path(env=env)


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
        if not isinstance(data, MutableMapping):
            raise ConfigurationError(f"Config file at {path} must define a mapping root object.")
        return dict(data)


def _deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], Mapping) and isinstance(value, Mapping):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _apply_env_overrides(config: dict[str, Any], env: Mapping[str, str]) -> dict[str, Any]:
    config_copy = _deep_merge(config, {})
    for dotted_key, (env_key, expected_type) in ENV_OVERRIDE_SPEC.items():
        if env_key not in env:
            continue
        raw_value = env[env_key]
        try:
            value = _coerce_env_value(raw_value, expected_type)
        except ValueError as exc:
            raise ConfigurationError(
                f"Environment override {env_key} has invalid value '{raw_value}': {exc}"
            ) from exc
        _assign_nested(config_copy, dotted_key.split("."), value)
    return config_copy


def _coerce_env_value(raw: str, expected_type: type) -> Any:
    if expected_type is int:
        return int(raw.strip())
    # Delimiters may legitimately be whitespace, so strings are not stripped.
    return raw


def _assign_nested(target: MutableMapping[str, Any], keys: list[str], value: Any) -> None:
    current = target
    for key in keys[:-1]:
        if key not in current or not isinstance(current[key], MutableMapping):
            current[key] = {}
        else:
            current[key] = dict(current[key])
        current = current[key]  # type: ignore[assignment]
    current[keys[-1]] = value


def _build_config(data: Mapping[str, Any], source_path: Path) -> AppConfig:
    try:
        ledger_cfg = data["ledger"]
        environments = {
            str(name): paths.resolve_path(str(location))
            for name, location in dict(ledger_cfg["environments"]).items()
        }
        ledger = LedgerSettings(
            environments=environments,
            scan_start_row=int(ledger_cfg["scan_start_row"]),
            scan_window=int(ledger_cfg["scan_window"]),
        )
        extract_cfg = data["extract"]
        extract = ExtractSettings(
            delimiter=str(extract_cfg["delimiter"]),
            metadata_markers=tuple(str(marker) for marker in extract_cfg["metadata_markers"]),
            header_keywords=tuple(str(keyword) for keyword in extract_cfg["header_keywords"]),
            min_year=int(extract_cfg["min_year"]),
        )
        data_dir = paths.resolve_path(str(data["data_dir"]))
    except (KeyError, TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid configuration structure: {exc}") from exc

    if not environments:
        raise ConfigurationError("At least one ledger environment must be configured.")
    if ledger.scan_start_row < 1:
        raise ConfigurationError("ledger.scan_start_row must be 1 or greater.")
    if ledger.scan_window < 1:
        raise ConfigurationError("ledger.scan_window must be 1 or greater.")
    if len(extract.delimiter) != 1:
        raise ConfigurationError("extract.delimiter must be a single character.")

    return AppConfig(
        source_path=source_path,
        data_dir=data_dir,
        ledger=ledger,
        extract=extract,
    )
