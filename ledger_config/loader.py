"""
Configuration Loader (``ledger_config.loader``).

Responsibility
--------------
Loads a YAML configuration set and parses its ``reporting`` section into a
``ReportingConfig``.  Runtime callers go through
``ledger_config.get_active_config()``; the functions here are the pieces
it is built from.

Architecture position
---------------------
**Config layer** -- sits above ``ledger_kernel`` and beside
``ledger_reports``.  The kernel MUST NEVER import from ``ledger_config``.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* A document that is not a mapping, or an invalid option value  ->
  ``ConfigurationError``.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from ledger_kernel.exceptions import ConfigurationError
from ledger_reports.config import ReportingConfig

# Top-level keys that describe the set rather than configure reporting
_SET_KEYS = ("config_id", "version", "description")


@dataclass(frozen=True)
class LoadedConfig:
    """A parsed configuration set plus its identity."""

    config_id: str
    version: int
    checksum: str
    reporting: ReportingConfig
    source: Path | None = None


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ConfigurationError: if the document is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(str(path), type(data).__name__, "document must be a mapping")
    return data


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 of the canonical JSON serialization of ``data``."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()


def parse_reporting_config(data: dict[str, Any]) -> ReportingConfig:
    """
    Build a ``ReportingConfig`` from a configuration document.

    Accepts either a full set (options nested under ``reporting``) or a bare
    mapping of options.  Missing options keep their defaults.
    """
    if "reporting" in data:
        section = data["reporting"] or {}
    else:
        section = {k: v for k, v in data.items() if k not in _SET_KEYS}
    if not isinstance(section, dict):
        raise ConfigurationError("reporting", section, "must be a mapping")
    return ReportingConfig.from_dict(section)


def parse_config_set(data: dict[str, Any], source: Path | None = None) -> LoadedConfig:
    """Parse a whole configuration set document."""
    version = data.get("version", 1)
    if isinstance(version, bool) or not isinstance(version, int):
        raise ConfigurationError("version", version, "must be an integer")
    return LoadedConfig(
        config_id=str(data.get("config_id") or (source.stem if source else "inline")),
        version=version,
        checksum=compute_checksum(data),
        reporting=parse_reporting_config(data),
        source=source,
    )


def load_config_set(path: Path) -> LoadedConfig:
    return parse_config_set(load_yaml_file(path), source=path)
