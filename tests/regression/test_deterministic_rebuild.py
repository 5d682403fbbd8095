from pathlib import Path

import pytest

from sepomex_importer.common.store import NORMALIZED_TABLES, create_schema, create_store_engine, fetch_table
from sepomex_importer.pipeline.importer import run_import


def _snapshot(engine) -> dict[str, list[dict]]:
    with engine.connect() as conn:
        return {table.name: fetch_table(conn, table) for table in NORMALIZED_TABLES}


def _fixture_lines(make_line) -> list[str]:
    return [
        make_line(),
        make_line(),
        make_line(zip_code="01049", settlement_name="Tlacopac"),
        make_line(city_name="", city_code="", settlement_name="Chimalistac"),
        make_line(state_code="14", state_name="Jalisco", district_code="039", district_name="Guadalajara",
                  city_name="Guadalajara", city_code="02", zip_code="44100", settlement_name="Centro"),
        make_line(state_code="14", state_name="Jalisco", district_code="010", district_name="Arandas",
                  city_name="", city_code="", zip_code="47180", settlement_name="Centro",
                  settlement_type_code="28", settlement_type_name="Pueblo"),
        make_line(state_code="05", state_name="Coahuila de Zaragoza", district_code="010", district_name="Castaños",
                  city_name="", city_code="", zip_code="25870", settlement_name="Centro"),
    ]


@pytest.mark.regression
def test_rerun_on_same_store_is_identical(engine, write_source, make_line):
    source = write_source(_fixture_lines(make_line))

    run_import(engine, source)
    first = _snapshot(engine)
    run_import(engine, source)
    second = _snapshot(engine)

    assert first == second
    assert len(first["settlements"]) == 6


@pytest.mark.regression
def test_independent_stores_receive_identical_content(tmp_path: Path, write_source, make_line):
    source = write_source(_fixture_lines(make_line))
    snapshots = []
    for name in ("first", "second"):
        engine = create_store_engine(f"sqlite:///{tmp_path / f'{name}.sqlite3'}")
        create_schema(engine)
        run_import(engine, source, run_id=f"run-{name}")
        snapshots.append(_snapshot(engine))
        engine.dispose()

    assert snapshots[0] == snapshots[1]
    assert snapshots[0]["states"] == [
        {"id": 5, "name": "Coahuila"},
        {"id": 9, "name": "CDMX"},
        {"id": 14, "name": "Jalisco"},
    ]
