"""CLI entrypoint for the SEPOMEX catalogue importer."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from sepomex_importer.common.config_loader import load_import_config
from sepomex_importer.common.constants import EXIT_HARD_FAIL, EXIT_PARTIAL, EXIT_SUCCESS
from sepomex_importer.common.errors import ImporterError
from sepomex_importer.common.ids import generate_run_id
from sepomex_importer.common.logging import build_logger, log_event
from sepomex_importer.common.store import create_schema, create_store_engine
from sepomex_importer.pipeline.importer import run_import
from sepomex_importer.pipeline.reports import write_import_report


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("source")
    parser.add_argument("--config", default="./config/importer.yml")
    parser.add_argument("--overlay-config", default=None)
    parser.add_argument("--database-url", default=None)
    parser.add_argument("--create-schema", action="store_true")
    parser.add_argument("--skip-malformed", action="store_true")
    parser.add_argument("--no-rename", action="store_true")
    parser.add_argument("--run-id", default=None)
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARN", "ERROR"])
    parser.add_argument("--log-dir", default=None)
    parser.add_argument("--report-path", default=None)
    return parser.parse_args(argv)


def run_command(args: argparse.Namespace) -> int:
    run_id = args.run_id or generate_run_id()
    log_dir = Path(args.log_dir) if args.log_dir else None
    logger = build_logger(run_id, log_dir=log_dir, level=args.log_level)

    try:
        overlay_path = Path(args.overlay_config) if args.overlay_config else None
        settings = load_import_config(Path(args.config), overlay_path=overlay_path)
    except ImporterError as exc:
        log_event(
            logger,
            str(exc),
            level=logging.ERROR,
            run_id=run_id,
            event="RUN_FAIL",
            status="error",
            error_code=exc.error_code,
        )
        return EXIT_HARD_FAIL

    if args.database_url:
        settings = replace(settings, database_url=args.database_url)
    if args.skip_malformed:
        settings = replace(settings, malformed_policy="skip")

    engine = create_store_engine(settings.database_url)
    try:
        if args.create_schema:
            create_schema(engine)
        result = run_import(
            engine,
            Path(args.source),
            {} if args.no_rename else None,
            settings=settings,
            logger=logger,
            run_id=run_id,
        )
    except ImporterError as exc:
        log_event(
            logger,
            f"import failed: {exc}",
            level=logging.ERROR,
            run_id=run_id,
            event="RUN_FAIL",
            status="error",
            error_code=exc.error_code,
        )
        return EXIT_HARD_FAIL
    finally:
        engine.dispose()

    if args.report_path:
        write_import_report(Path(args.report_path), result)
    if result.status == "partial":
        return EXIT_PARTIAL
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    try:
        return run_command(args)
    except ImporterError:
        return EXIT_HARD_FAIL


if __name__ == "__main__":
    raise SystemExit(main())
