from sepomex_importer.common.config_loader import ImportSettings
from sepomex_importer.common.store import fetch_table, settlement_zip_codes, settlements, zip_codes
from sepomex_importer.pipeline.hierarchy import populate_cities, populate_districts
from sepomex_importer.pipeline.raw_loader import load_raw_records
from sepomex_importer.pipeline.references import populate_location_types
from sepomex_importer.pipeline.settlements import populate_settlements
from sepomex_importer.pipeline.zip_codes import populate_settlement_zip_codes, populate_zip_codes


def _build(engine, source):
    load_raw_records(engine, source, ImportSettings())
    populate_location_types(engine)
    populate_districts(engine)
    populate_cities(engine)
    populate_settlements(engine)
    zip_result = populate_zip_codes(engine)
    link_result = populate_settlement_zip_codes(engine)
    return zip_result, link_result


def _rows(engine, table):
    with engine.connect() as conn:
        return fetch_table(conn, table)


def test_zip_codes_one_row_per_code(engine, write_source, make_line):
    source = write_source(
        [
            make_line(),
            make_line(settlement_name="Tlacopac"),
            make_line(zip_code="01010", settlement_name="Los Alpes"),
        ]
    )

    zip_result, _link_result = _build(engine, source)

    assert zip_result.warnings == []
    assert _rows(engine, zip_codes) == [
        {"id": 1000, "district_id": 1},
        {"id": 1010, "district_id": 1},
    ]


def test_zip_code_in_two_districts_keeps_first_and_warns(engine, write_source, make_line):
    source = write_source(
        [
            make_line(district_code="012", district_name="Tlalpan", settlement_name="Pedregal"),
            make_line(),
        ]
    )

    zip_result, link_result = _build(engine, source)

    assert _rows(engine, zip_codes) == [{"id": 1000, "district_id": 1}]
    assert zip_result.warnings == ["zip code 01000 belongs to districts [1, 2]; kept district 1"]
    assert _rows(engine, settlement_zip_codes) == [{"settlement_id": 1, "zip_code": 1000}]
    assert link_result.rows_out == 1
    assert link_result.warnings == ["settlement 2 not linked to zip code 01000 stored under district 1"]


def test_links_pair_settlements_with_each_of_their_zip_codes(engine, write_source, make_line):
    source = write_source(
        [
            make_line(),
            make_line(),
            make_line(zip_code="01049"),
            make_line(zip_code="01010", settlement_name="Los Alpes"),
        ]
    )

    _zip_result, link_result = _build(engine, source)

    assert link_result.rows_out == 3
    assert _rows(engine, settlement_zip_codes) == [
        {"settlement_id": 1, "zip_code": 1010},
        {"settlement_id": 2, "zip_code": 1000},
        {"settlement_id": 2, "zip_code": 1049},
    ]


def test_links_reference_existing_settlements_and_zip_codes(engine, write_source, make_line):
    source = write_source(
        [
            make_line(),
            make_line(state_code="14", state_name="Jalisco", district_code="039", district_name="Guadalajara",
                      city_name="Guadalajara", city_code="02", zip_code="44100", settlement_name="Centro"),
            make_line(state_code="14", state_name="Jalisco", district_code="039", district_name="Guadalajara",
                      city_name="", city_code="", zip_code="44130", settlement_name="Centro"),
        ]
    )

    _build(engine, source)

    settlement_ids = {row["id"] for row in _rows(engine, settlements)}
    zip_ids = {row["id"] for row in _rows(engine, zip_codes)}
    links = _rows(engine, settlement_zip_codes)
    assert len(links) == 3
    assert all(link["settlement_id"] in settlement_ids for link in links)
    assert all(link["zip_code"] in zip_ids for link in links)
