"""
lp_config -- single public entrypoint for LP kernel configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  No other component reads configuration files or
    environment variables directly.

Architecture position:
    Configuration sits above ``lp_kernel`` and below ``scripts``.  The kernel
    never imports from ``lp_config``; callers pass the parsed values in
    (database URL to init_engine_from_url, level to configure_logging, ...).

Environment:
    ``LP_KERNEL_CONFIG``        path of the YAML file (default: sets/default.yaml)
    ``LP_KERNEL_DATABASE_URL``  overrides ``database.url``

Audit relevance:
    Every successful ``get_active_config()`` call emits an ``lp_config_loaded``
    log entry with the config id, version and checksum.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping

from lp_config.loader import load_yaml_file, parse_config
from lp_config.schema import DatabaseConfig, HistoryConfig, LoggingConfig, LpKernelConfig

_logger = logging.getLogger("lp_kernel.config")

_DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "default.yaml"

CONFIG_PATH_ENV = "LP_KERNEL_CONFIG"
DATABASE_URL_ENV = "LP_KERNEL_DATABASE_URL"

__all__ = [
    "get_active_config",
    "LpKernelConfig",
    "DatabaseConfig",
    "LoggingConfig",
    "HistoryConfig",
]


def get_active_config(
    config_path: Path | str | None = None,
    environ: Mapping[str, str] | None = None,
) -> LpKernelConfig:
    """The ONLY public configuration entrypoint.

    Args:
        config_path: Explicit YAML file.  Falls back to ``LP_KERNEL_CONFIG``
            and then to the bundled ``sets/default.yaml``.
        environ: Environment mapping (defaults to ``os.environ``).

    Returns:
        Frozen LpKernelConfig.

    Raises:
        FileNotFoundError: If the configuration file does not exist.
        KeyError: If a required key is missing.
        ValueError: If a value is invalid.
    """
    env = os.environ if environ is None else environ
    path = Path(config_path or env.get(CONFIG_PATH_ENV) or _DEFAULT_CONFIG_PATH)

    config = parse_config(load_yaml_file(path), database_url=env.get(DATABASE_URL_ENV))

    _logger.info(
        "lp_config_loaded",
        extra={
            "config_id": config.config_id,
            "config_version": config.version,
            "checksum": config.checksum,
            "config_path": str(path),
            "default_granularity": config.history.default_granularity.value,
        },
    )
    return config
