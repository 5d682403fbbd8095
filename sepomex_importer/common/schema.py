"""Minimal strict schemas for YAML config validation."""

from __future__ import annotations

from sepomex_importer.common.constants import MALFORMED_POLICIES
from sepomex_importer.common.errors import ConfigError


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def _assert_positive_int(value: object, ctx: str, *, allow_zero: bool = False) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{ctx} must be an integer")
    if value < 0 or (value == 0 and not allow_zero):
        raise ConfigError(f"{ctx} must be positive")


def validate_import_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    if not isinstance(cfg, dict):
        raise ConfigError("importer config must be a mapping")

    top_required = {"database_url", "source", "state_renames"}
    _assert_required_keys(cfg, top_required, "importer config")
    _assert_no_unknown_keys(cfg, top_required, "importer config", allow_unknown)

    if not isinstance(cfg["database_url"], str) or not cfg["database_url"]:
        raise ConfigError("database_url must be a non-empty string")

    source = cfg["source"]
    if not isinstance(source, dict):
        raise ConfigError("source must be a mapping")
    source_keys = {"encoding", "header_lines", "batch_size", "malformed_policy"}
    _assert_required_keys(source, source_keys, "source")
    _assert_no_unknown_keys(source, source_keys, "source", allow_unknown)
    _assert_positive_int(source["header_lines"], "source.header_lines", allow_zero=True)
    _assert_positive_int(source["batch_size"], "source.batch_size")
    if source["malformed_policy"] not in MALFORMED_POLICIES:
        allowed = ", ".join(MALFORMED_POLICIES)
        raise ConfigError(f"source.malformed_policy must be one of: {allowed}")

    renames = cfg["state_renames"]
    if renames is None:
        cfg["state_renames"] = {}
    elif not isinstance(renames, dict):
        raise ConfigError("state_renames must be a mapping of old name to new name")
    else:
        for old, new in renames.items():
            if not isinstance(old, str) or not isinstance(new, str):
                raise ConfigError(f"state_renames entry must map text to text: {old!r}")

    return cfg
