"""Settlement table reconciled from location types, districts and cities."""

from __future__ import annotations

from collections import defaultdict

from sqlalchemy.engine import Engine

from sepomex_importer.common.codes import has_text, parse_code
from sepomex_importer.common.deterministic import assign_surrogate_ids
from sepomex_importer.common.models import Settlement, StageResult
from sepomex_importer.common.store import distinct_raw, replace_rows, settlements, transaction
from sepomex_importer.pipeline.lookups import load_city_index, load_district_index, load_location_type_ids

SettlementKey = tuple[int, int, str]


def _pick_city(city_ids: set[int | None]) -> int | None:
    known = sorted(city_id for city_id in city_ids if city_id is not None)
    return known[0] if known else None


def populate_settlements(engine: Engine) -> StageResult:
    with transaction(engine) as conn:
        type_ids = load_location_type_ids(conn)
        district_index = load_district_index(conn)
        city_index = load_city_index(conn)

        projection = distinct_raw(
            conn,
            "settlement_type_code",
            "state_code",
            "district_code",
            "city_name",
            "city_code",
            "settlement_name",
        )

        cities_by_key: dict[SettlementKey, set[int | None]] = defaultdict(set)
        unmatched = 0
        for type_code, state_code, district_code, city_name, city_code, name in projection:
            type_id = parse_code(type_code)
            state_id = parse_code(state_code)
            district_id = district_index.get((state_id, parse_code(district_code)))
            if type_id not in type_ids or district_id is None:
                unmatched += 1
                continue

            city_id = None
            if has_text(city_name):
                city_id = city_index.get((state_id, parse_code(city_code)))
            cities_by_key[(type_id, district_id, name)].add(city_id)

        ids = assign_surrogate_ids(cities_by_key, sort_key=lambda key: (key[1], key[0], key[2]))
        rows = []
        warnings = []
        for key in sorted(cities_by_key, key=ids.__getitem__):
            type_id, district_id, name = key
            city_id = _pick_city(cities_by_key[key])
            if len(cities_by_key[key]) > 1:
                warnings.append(
                    f"settlement {name!r} (type {type_id}, district {district_id}) "
                    f"matches several cities; kept city {city_id}"
                )
            rows.append(
                Settlement(
                    id=ids[key],
                    location_type_id=type_id,
                    district_id=district_id,
                    city_id=city_id,
                    name=name,
                ).to_dict()
            )
        written = replace_rows(conn, settlements, rows)

    if unmatched:
        warnings.append(f"{unmatched} staging rows matched no location type or district")
    return StageResult(stage="settlements", rows_in=len(projection), rows_out=written, warnings=warnings)
