from pathlib import Path

import pytest

from sepomex_importer.cli import parse_args, run_command
from sepomex_importer.common.constants import EXIT_HARD_FAIL, EXIT_PARTIAL, EXIT_SUCCESS
from sepomex_importer.common.fs import read_json


def _args(source: Path, tmp_path: Path, *extra: str):
    return parse_args(
        [
            str(source),
            "--config",
            "config/importer.yml",
            "--database-url",
            f"sqlite:///{tmp_path / 'cli.sqlite3'}",
            "--create-schema",
            "--run-id",
            "run-cli",
            "--log-dir",
            str(tmp_path / "logs"),
            "--report-path",
            str(tmp_path / "reports" / "import_summary.json"),
            *extra,
        ]
    )


@pytest.mark.integration
def test_cli_import_writes_report_and_log(tmp_path: Path, write_source, make_line):
    source = write_source([make_line(), make_line(zip_code="01010", settlement_name="Los Alpes")])

    exit_code = run_command(_args(source, tmp_path))

    assert exit_code == EXIT_SUCCESS
    report = read_json(tmp_path / "reports" / "import_summary.json")
    assert report["run_id"] == "run-cli"
    assert report["status"] == "success"
    assert report["table_counts"]["settlements"] == 2
    assert report["table_counts"]["zip_codes"] == 2
    assert report["stages"]["load-raw"]["rows_out"] == 2
    assert (tmp_path / "logs" / "run-cli.log.jsonl").exists()


@pytest.mark.integration
def test_cli_skip_malformed_returns_partial(tmp_path: Path, write_source, make_line):
    source = write_source([make_line(), "broken|line"])

    exit_code = run_command(_args(source, tmp_path, "--skip-malformed"))

    assert exit_code == EXIT_PARTIAL
    report = read_json(tmp_path / "reports" / "import_summary.json")
    assert report["skipped_malformed"] == 1
    assert report["malformed_samples"][0]["line_number"] == 4


@pytest.mark.integration
def test_cli_missing_source_is_hard_failure(tmp_path: Path):
    exit_code = run_command(_args(tmp_path / "missing.txt", tmp_path))

    assert exit_code == EXIT_HARD_FAIL
    assert not (tmp_path / "reports" / "import_summary.json").exists()
