"""Zip-code table and the settlement to zip-code association."""

from __future__ import annotations

from collections import defaultdict

from sqlalchemy.engine import Engine

from sepomex_importer.common.codes import parse_code
from sepomex_importer.common.models import SettlementZipLink, StageResult, ZipCode
from sepomex_importer.common.store import distinct_raw, replace_rows, settlement_zip_codes, transaction, zip_codes
from sepomex_importer.pipeline.lookups import (
    load_district_index,
    load_location_type_ids,
    load_settlement_index,
    load_zip_code_districts,
)


def populate_zip_codes(engine: Engine) -> StageResult:
    """Store one district per zip code.

    A zip code seen under several districts keeps the lowest district id and
    is reported in the stage warnings.
    """
    with transaction(engine) as conn:
        district_index = load_district_index(conn)
        projection = distinct_raw(conn, "zip_code", "state_code", "district_code")

        districts_by_zip: dict[int, set[int]] = defaultdict(set)
        for zip_code, state_code, district_code in projection:
            district_id = district_index.get((parse_code(state_code), parse_code(district_code)))
            if district_id is None:
                continue
            districts_by_zip[parse_code(zip_code)].add(district_id)

        rows = []
        warnings = []
        for zip_code in sorted(districts_by_zip):
            candidates = sorted(districts_by_zip[zip_code])
            if len(candidates) > 1:
                warnings.append(
                    f"zip code {zip_code:05d} belongs to districts {candidates}; kept district {candidates[0]}"
                )
            rows.append(ZipCode(id=zip_code, district_id=candidates[0]).to_dict())
        written = replace_rows(conn, zip_codes, rows)

    return StageResult(stage="zip-codes", rows_in=len(projection), rows_out=written, warnings=warnings)


def populate_settlement_zip_codes(engine: Engine) -> StageResult:
    with transaction(engine) as conn:
        type_ids = load_location_type_ids(conn)
        district_index = load_district_index(conn)
        settlement_index = load_settlement_index(conn)
        known_zip_codes = load_zip_code_districts(conn)

        projection = distinct_raw(
            conn,
            "settlement_type_code",
            "state_code",
            "district_code",
            "settlement_name",
            "zip_code",
        )

        links: set[tuple[int, int]] = set()
        foreign: set[tuple[int, int, int]] = set()
        for type_code, state_code, district_code, name, zip_code in projection:
            type_id = parse_code(type_code)
            if type_id not in type_ids:
                continue
            district_id = district_index.get((parse_code(state_code), parse_code(district_code)))
            settlement_id = settlement_index.get((type_id, district_id, name))
            zip_value = parse_code(zip_code)
            if settlement_id is None or zip_value not in known_zip_codes:
                continue
            if known_zip_codes[zip_value] != district_id:
                foreign.add((settlement_id, zip_value, known_zip_codes[zip_value]))
                continue
            links.add((settlement_id, zip_value))

        rows = [
            SettlementZipLink(settlement_id=settlement_id, zip_code=zip_value).to_dict()
            for settlement_id, zip_value in sorted(links)
        ]
        written = replace_rows(conn, settlement_zip_codes, rows)

    warnings = [
        f"settlement {settlement_id} not linked to zip code {zip_value:05d} stored under district {owner}"
        for settlement_id, zip_value, owner in sorted(foreign)
    ]
    return StageResult(
        stage="settlement-zip-codes",
        rows_in=len(projection),
        rows_out=written,
        warnings=warnings,
    )
