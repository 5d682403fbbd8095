"""Configuration loading and validation."""

from __future__ import annotations

import codecs
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from sepomex_importer.common.constants import (
    DEFAULT_STATE_RENAMES,
    INSERT_BATCH_SIZE,
    SOURCE_ENCODING,
    SOURCE_HEADER_LINES,
)
from sepomex_importer.common.errors import ConfigError
from sepomex_importer.common.fs import read_yaml
from sepomex_importer.common.schema import validate_import_config


@dataclass(frozen=True)
class ImportSettings:
    database_url: str = "sqlite:///sepomex.sqlite3"
    encoding: str = SOURCE_ENCODING
    header_lines: int = SOURCE_HEADER_LINES
    batch_size: int = INSERT_BATCH_SIZE
    malformed_policy: str = "abort"
    state_renames: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_STATE_RENAMES))


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _load_yaml_with_overlay(path: Path, overlay_path: Path | None) -> dict:
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    base = read_yaml(path) or {}
    if overlay_path is None or not overlay_path.exists():
        return base
    overlay = read_yaml(overlay_path)
    if overlay is None:
        return base
    return _deep_merge(base, overlay)


def load_import_config(
    path: Path,
    *,
    allow_unknown: bool = False,
    overlay_path: Path | None = None,
) -> ImportSettings:
    cfg = validate_import_config(_load_yaml_with_overlay(path, overlay_path), allow_unknown=allow_unknown)
    source = cfg["source"]
    try:
        codecs.lookup(source["encoding"])
    except LookupError as exc:
        raise ConfigError(f"Unknown source encoding: {source['encoding']}") from exc

    return ImportSettings(
        database_url=cfg["database_url"],
        encoding=source["encoding"],
        header_lines=source["header_lines"],
        batch_size=source["batch_size"],
        malformed_policy=source["malformed_policy"],
        state_renames=dict(cfg["state_renames"]),
    )
