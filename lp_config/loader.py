"""
Configuration Loader (``lp_config.loader``).

Responsibility
--------------
Loads the YAML configuration file and parses it into the frozen
``lp_config.schema`` dataclasses.  This is internal tooling -- services and
scripts obtain configuration through ``lp_config.get_active_config()``.

Invariants enforced
-------------------
* All parse errors raise ``ValueError`` or ``KeyError`` with descriptive
  messages; no silent defaults for required fields.
* ``compute_checksum`` produces a deterministic SHA-256 hash of the parsed
  document for change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys  -> ``KeyError`` propagates.
* Unknown log level, non-positive pool size, unknown granularity
  -> ``ValueError``.
"""

from __future__ import annotations

import hashlib
import json
import logging
from pathlib import Path
from typing import Any

import yaml

from lp_config.schema import DatabaseConfig, HistoryConfig, LoggingConfig, LpKernelConfig
from lp_kernel.domain.intervals import Granularity
from lp_kernel.exceptions import UnknownGranularityError


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 over the canonical JSON form of a parsed document."""
    canonical = json.dumps(data, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def _positive_int(data: dict[str, Any], key: str, default: int) -> int:
    value = int(data.get(key, default))
    if value < 1:
        raise ValueError(f"database.{key} must be >= 1, got {value}")
    return value


def parse_database(data: dict[str, Any]) -> DatabaseConfig:
    """Parse the ``database`` section; ``url`` is required."""
    return DatabaseConfig(
        url=data["url"],
        echo=bool(data.get("echo", False)),
        pool_size=_positive_int(data, "pool_size", 20),
        max_overflow=int(data.get("max_overflow", 10)),
        pool_timeout=_positive_int(data, "pool_timeout", 30),
        pool_recycle=_positive_int(data, "pool_recycle", 1800),
    )


def parse_logging(data: dict[str, Any]) -> LoggingConfig:
    """Parse the optional ``logging`` section."""
    level = str(data.get("level", "INFO")).upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"Unknown logging.level: {level!r}")
    return LoggingConfig(level=level)


def parse_history(data: dict[str, Any]) -> HistoryConfig:
    """Parse the optional ``history`` section."""
    try:
        granularity = Granularity.parse(data.get("default_granularity"))
    except UnknownGranularityError as exc:
        raise ValueError(f"Invalid history.default_granularity: {exc}") from exc
    return HistoryConfig(default_granularity=granularity)


def parse_config(data: dict[str, Any], database_url: str | None = None) -> LpKernelConfig:
    """
    Parse a whole configuration document.

    Args:
        data: Parsed YAML document.
        database_url: Optional override for ``database.url``.

    Raises:
        KeyError: if ``config_id`` or ``database.url`` is missing.
        ValueError: on invalid values.
    """
    database_data = dict(data.get("database") or {})
    if database_url:
        database_data["url"] = database_url

    return LpKernelConfig(
        config_id=data["config_id"],
        version=int(data.get("version", 1)),
        database=parse_database(database_data),
        logging=parse_logging(data.get("logging") or {}),
        history=parse_history(data.get("history") or {}),
        checksum=compute_checksum(data),
    )
