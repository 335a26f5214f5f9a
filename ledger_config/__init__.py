"""
ledger_config -- public entrypoint for reporting configuration.

Responsibility:
    Provides ``get_active_config()``, the single way runtime callers obtain
    a ``ReportingConfig``.  Configuration sets are YAML files; without an
    explicit path the packaged ``sets/default.yaml`` is used.

Architecture position:
    Configuration -- sits above ``ledger_kernel`` and ``ledger_reports``.
    The kernel MUST NEVER import from ``ledger_config``.

Failure modes:
    - ``FileNotFoundError`` -- the requested configuration file is missing.
    - ``yaml.YAMLError`` -- the file is not valid YAML.
    - ``ConfigurationError`` -- an option is unknown or out of range.

Audit relevance:
    Every successful ``get_active_config()`` call emits a
    ``ledger_config_loaded`` log entry with the config id, version and
    checksum, tying each report bundle to the configuration that shaped it.
"""

from __future__ import annotations

from pathlib import Path

from ledger_config.loader import (
    LoadedConfig,
    compute_checksum,
    load_config_set,
    load_yaml_file,
    parse_config_set,
    parse_reporting_config,
)
from ledger_kernel.logging_config import get_logger
from ledger_reports.config import ReportingConfig

_logger = get_logger("config")

# Default configuration sets directory
DEFAULT_CONFIG_DIR = Path(__file__).parent / "sets"
DEFAULT_CONFIG_PATH = DEFAULT_CONFIG_DIR / "default.yaml"


def get_active_config(path: Path | str | None = None) -> ReportingConfig:
    """
    Load the reporting configuration.

    Args:
        path: YAML configuration file. Defaults to the packaged
            ``sets/default.yaml``.

    Returns:
        ReportingConfig built from the file's ``reporting`` section.
    """
    source = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    loaded = load_config_set(source)

    _logger.info(
        "ledger_config_loaded",
        extra={
            "config_id": loaded.config_id,
            "config_version": loaded.version,
            "checksum": loaded.checksum,
            "source": str(source),
        },
    )
    return loaded.reporting


__all__ = [
    "DEFAULT_CONFIG_DIR",
    "DEFAULT_CONFIG_PATH",
    "LoadedConfig",
    "compute_checksum",
    "get_active_config",
    "load_config_set",
    "load_yaml_file",
    "parse_config_set",
    "parse_reporting_config",
]
