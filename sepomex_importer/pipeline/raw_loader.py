"""Stream the catalogue text file into the staging table."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator

from sqlalchemy.engine import Connection, Engine

from sepomex_importer.common.codes import is_numeric_code
from sepomex_importer.common.config_loader import ImportSettings
from sepomex_importer.common.constants import (
    FIELD_SEPARATOR,
    MAX_MALFORMED_SAMPLES,
    RAW_COLUMNS,
    RAW_FIELD_COUNT,
    REQUIRED_NUMERIC_COLUMNS,
)
from sepomex_importer.common.errors import MalformedRecord, SourceUnavailable
from sepomex_importer.common.fs import is_readable_file
from sepomex_importer.common.models import RawRecord
from sepomex_importer.common.store import raw_records, transaction


@dataclass
class RawLoadResult:
    lines_read: int = 0
    records_loaded: int = 0
    skipped_blank: int = 0
    skipped_malformed: int = 0
    malformed_samples: list[dict] = field(default_factory=list)


def _split_line(line: str) -> list[str]:
    return line.rstrip("\r\n").split(FIELD_SEPARATOR)


def _malformed_reason(fields: list[str]) -> str | None:
    if len(fields) != RAW_FIELD_COUNT:
        return f"expected {RAW_FIELD_COUNT} fields, found {len(fields)}"
    record = dict(zip(RAW_COLUMNS, fields))
    for column in REQUIRED_NUMERIC_COLUMNS:
        if not is_numeric_code(record[column]):
            return f"column {column} is not numeric: {record[column]!r}"
    city_code = record["city_code"]
    if city_code.strip() and not is_numeric_code(city_code):
        return f"column city_code is not numeric: {city_code!r}"
    return None


def iter_source_lines(source_path: Path, *, encoding: str, header_lines: int) -> Iterator[tuple[int, str]]:
    """Yield ``(line_number, text)`` for every line after the header block."""
    try:
        with source_path.open("r", encoding=encoding, newline="") as f:
            for line_number, line in enumerate(f, start=1):
                if line_number <= header_lines:
                    continue
                yield line_number, line
    except OSError as exc:
        raise SourceUnavailable(f"File {source_path} could not be read: {exc}") from exc


def _flush(conn: Connection, batch: list[dict]) -> None:
    if batch:
        conn.execute(raw_records.insert(), batch)
        batch.clear()


def load_raw_records(engine: Engine, source_path: Path, settings: ImportSettings) -> RawLoadResult:
    if not is_readable_file(source_path):
        raise SourceUnavailable(f"File {source_path} not found or not readable")

    result = RawLoadResult()
    batch: list[dict] = []

    with transaction(engine) as conn:
        conn.execute(raw_records.delete())
        for line_number, line in iter_source_lines(
            source_path,
            encoding=settings.encoding,
            header_lines=settings.header_lines,
        ):
            result.lines_read += 1
            if not line.strip():
                result.skipped_blank += 1
                continue

            fields = _split_line(line)
            reason = _malformed_reason(fields)
            if reason is not None:
                if settings.malformed_policy == "abort":
                    raise MalformedRecord(
                        f"Malformed record at line {line_number}: {reason}",
                        line_number=line_number,
                        field_count=len(fields),
                    )
                result.skipped_malformed += 1
                if len(result.malformed_samples) < MAX_MALFORMED_SAMPLES:
                    result.malformed_samples.append(
                        {
                            "line_number": line_number,
                            "field_count": len(fields),
                            "reason": reason,
                        }
                    )
                continue

            batch.append(RawRecord.from_fields(fields).to_dict())
            result.records_loaded += 1
            if len(batch) >= settings.batch_size:
                _flush(conn, batch)
        _flush(conn, batch)

    return result


def clear_raw_records(engine: Engine) -> int:
    with transaction(engine) as conn:
        deleted = conn.execute(raw_records.delete()).rowcount
    return deleted
