from __future__ import annotations

from pathlib import Path

import pytest

from sepomex_importer.common.constants import RAW_COLUMNS
from sepomex_importer.common.store import create_schema, create_store_engine

HEADER_LINES = [
    "El Catálogo Nacional de Códigos Postales, es elaborado por Correos de México.",
    "d_codigo|d_asenta|d_tipo_asenta|D_mnpio|d_estado|d_ciudad|d_CP|c_estado|c_oficina|c_CP"
    "|c_tipo_asenta|c_mnpio|id_asenta_cpcons|d_zona|c_cve_ciudad",
]

BASE_RECORD = {
    "zip_code": "01000",
    "settlement_name": "San Ángel",
    "settlement_type_name": "Colonia",
    "district_name": "Álvaro Obregón",
    "state_name": "Ciudad de México",
    "city_name": "Ciudad de México",
    "office_zip_code": "01001",
    "state_code": "09",
    "office_code": "01001",
    "zip_region_code": "",
    "settlement_type_code": "09",
    "district_code": "010",
    "settlement_cpcons_id": "0001",
    "zone": "Urbano",
    "city_code": "01",
}


def _make_line(**overrides: str) -> str:
    record = dict(BASE_RECORD)
    record.update(overrides)
    return "|".join(record[name] for name in RAW_COLUMNS)


@pytest.fixture
def make_line():
    return _make_line


@pytest.fixture
def write_source(tmp_path: Path):
    def _write(lines: list[str], name: str = "CPdescarga.txt") -> Path:
        path = tmp_path / name
        content = HEADER_LINES + list(lines)
        path.write_bytes("\r\n".join(content).encode("iso-8859-1") + b"\r\n")
        return path

    return _write


@pytest.fixture
def engine(tmp_path: Path):
    store = create_store_engine(f"sqlite:///{tmp_path / 'sepomex.sqlite3'}")
    create_schema(store)
    yield store
    store.dispose()
