"""Import run report."""

from __future__ import annotations

from pathlib import Path

from sepomex_importer.common.fs import write_json
from sepomex_importer.pipeline.importer import ImportResult


def build_import_summary(result: ImportResult) -> dict:
    warnings = result.warnings
    return {
        "run_id": result.run_id,
        "source_path": result.source_path,
        "status": result.status,
        "stages": {
            stage.stage: {
                "rows_in": stage.rows_in,
                "rows_out": stage.rows_out,
                "duration_ms": stage.duration_ms,
                "warning_count": len(stage.warnings),
            }
            for stage in result.stages
        },
        "table_counts": result.table_counts,
        "skipped_malformed": result.skipped_malformed,
        "malformed_samples": result.malformed_samples,
        "warning_count": len(warnings),
        "warnings": warnings,
    }


def write_import_report(path: Path, result: ImportResult) -> Path:
    write_json(path, build_import_summary(result))
    return path
