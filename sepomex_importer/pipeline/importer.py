"""Full-rebuild import of the postal-code catalogue.

Stages run strictly in order and each one commits its own transaction:
staging load, states, location types, state renames, districts, cities,
settlements, zip codes, settlement/zip-code links and staging cleanup.
A failing stage propagates its error and leaves staging untouched.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Mapping

from sqlalchemy.engine import Engine

from sepomex_importer.common.config_loader import ImportSettings
from sepomex_importer.common.constants import STAGES, TABLE_BY_STAGE
from sepomex_importer.common.errors import ImporterError
from sepomex_importer.common.ids import generate_run_id
from sepomex_importer.common.logging import log_event
from sepomex_importer.common.models import StageResult
from sepomex_importer.common.time_utils import elapsed_ms
from sepomex_importer.pipeline.hierarchy import populate_cities, populate_districts
from sepomex_importer.pipeline.raw_loader import RawLoadResult, clear_raw_records, load_raw_records
from sepomex_importer.pipeline.references import populate_location_types, populate_states
from sepomex_importer.pipeline.rename import rename_states
from sepomex_importer.pipeline.settlements import populate_settlements
from sepomex_importer.pipeline.zip_codes import populate_settlement_zip_codes, populate_zip_codes

module_logger = logging.getLogger("sepomex_importer")


@dataclass
class ImportResult:
    run_id: str
    source_path: str
    stages: list[StageResult] = field(default_factory=list)
    skipped_malformed: int = 0
    malformed_samples: list[dict] = field(default_factory=list)

    @property
    def warnings(self) -> list[str]:
        return [warning for stage in self.stages for warning in stage.warnings]

    @property
    def table_counts(self) -> dict[str, int]:
        return {
            TABLE_BY_STAGE[stage.stage]: stage.rows_out
            for stage in self.stages
            if stage.stage in TABLE_BY_STAGE
        }

    @property
    def status(self) -> str:
        return "partial" if self.skipped_malformed else "success"


def _load_stage(engine: Engine, source_path: Path, settings: ImportSettings, result: ImportResult) -> StageResult:
    loaded: RawLoadResult = load_raw_records(engine, source_path, settings)
    result.skipped_malformed = loaded.skipped_malformed
    result.malformed_samples = loaded.malformed_samples
    warnings = []
    if loaded.skipped_malformed:
        warnings.append(f"{loaded.skipped_malformed} malformed lines skipped")
    return StageResult(
        stage="load-raw",
        rows_in=loaded.lines_read,
        rows_out=loaded.records_loaded,
        warnings=warnings,
    )


def _cleanup_stage(engine: Engine) -> StageResult:
    return StageResult(stage="cleanup", rows_in=clear_raw_records(engine), rows_out=0)


def _run_stage(
    logger: logging.Logger,
    run_id: str,
    stage: str,
    action: Callable[[], StageResult],
) -> StageResult:
    log_event(logger, "stage start", run_id=run_id, stage=stage, event="STAGE_START", status="ok")
    started = time.monotonic()
    try:
        stage_result = action()
    except ImporterError as exc:
        log_event(
            logger,
            f"stage {stage} failed: {exc}",
            level=logging.ERROR,
            run_id=run_id,
            stage=stage,
            event="STAGE_FAIL",
            status="error",
            duration_ms=elapsed_ms(started),
            error_code=exc.error_code,
        )
        raise
    stage_result.duration_ms = elapsed_ms(started)

    for warning in stage_result.warnings:
        log_event(
            logger,
            warning,
            level=logging.WARNING,
            run_id=run_id,
            stage=stage,
            event="DATA_WARNING",
            status="warning",
        )
    log_event(
        logger,
        "stage end",
        run_id=run_id,
        stage=stage,
        event="STAGE_END",
        status="ok",
        duration_ms=stage_result.duration_ms,
        rows_in=stage_result.rows_in,
        rows_out=stage_result.rows_out,
    )
    return stage_result


def run_import(
    engine: Engine,
    source_path: Path,
    state_renames: Mapping[str, str] | None = None,
    *,
    settings: ImportSettings | None = None,
    logger: logging.Logger | None = None,
    run_id: str | None = None,
) -> ImportResult:
    """Rebuild every normalized table from ``source_path``.

    ``state_renames`` defaults to ``settings.state_renames``; pass an empty
    mapping to keep the official state names.
    """
    settings = settings or ImportSettings()
    logger = logger or module_logger
    run_id = run_id or generate_run_id()
    renames = settings.state_renames if state_renames is None else state_renames
    source_path = Path(source_path)

    result = ImportResult(run_id=run_id, source_path=str(source_path))
    actions: dict[str, Callable[[], StageResult]] = {
        "load-raw": lambda: _load_stage(engine, source_path, settings, result),
        "states": lambda: populate_states(engine),
        "location-types": lambda: populate_location_types(engine),
        "rename-states": lambda: rename_states(engine, renames),
        "districts": lambda: populate_districts(engine),
        "cities": lambda: populate_cities(engine),
        "settlements": lambda: populate_settlements(engine),
        "zip-codes": lambda: populate_zip_codes(engine),
        "settlement-zip-codes": lambda: populate_settlement_zip_codes(engine),
        "cleanup": lambda: _cleanup_stage(engine),
    }

    log_event(logger, f"import of {source_path} started", run_id=run_id, event="RUN_START", status="ok")
    for stage in STAGES:
        result.stages.append(_run_stage(logger, run_id, stage, actions[stage]))
    log_event(logger, "import finished", run_id=run_id, event="RUN_END", status=result.status)
    return result
