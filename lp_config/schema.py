"""
LP kernel configuration schema.

Defines the typed, frozen form of the YAML configuration file.  The loader
parses YAML into these types; ``get_active_config()`` hands the result to
callers.  Nothing at runtime reads YAML or environment variables directly.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from lp_kernel.domain.intervals import Granularity


@dataclass(frozen=True)
class DatabaseConfig:
    """Connection settings passed to init_engine_from_url()."""

    url: str
    echo: bool = False
    pool_size: int = 20
    max_overflow: int = 10
    pool_timeout: int = 30
    pool_recycle: int = 1800


@dataclass(frozen=True)
class LoggingConfig:
    """Settings passed to configure_logging()."""

    level: str = "INFO"


@dataclass(frozen=True)
class HistoryConfig:
    """Defaults for balance-history queries."""

    default_granularity: Granularity = Granularity.DAILY


@dataclass(frozen=True)
class LpKernelConfig:
    """Root configuration artifact."""

    config_id: str
    version: int
    database: DatabaseConfig
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    history: HistoryConfig = field(default_factory=HistoryConfig)
    checksum: str = ""
