"""State-scoped tables with surrogate ids: districts and cities."""

from __future__ import annotations

from sqlalchemy.engine import Engine

from sepomex_importer.common.codes import has_text, parse_code
from sepomex_importer.common.deterministic import assign_surrogate_ids, choose_names
from sepomex_importer.common.models import City, District, StageResult
from sepomex_importer.common.store import cities, distinct_raw, districts, replace_rows, transaction


def populate_districts(engine: Engine) -> StageResult:
    with transaction(engine) as conn:
        triples = distinct_raw(conn, "state_code", "district_code", "district_name")
        chosen, conflicts = choose_names(
            ((parse_code(state), parse_code(code)), name) for state, code, name in triples
        )
        ids = assign_surrogate_ids(chosen, sort_key=lambda key: key)
        rows = [
            District(id=ids[key], state_id=key[0], name=chosen[key], source_code=key[1]).to_dict()
            for key in sorted(chosen, key=ids.__getitem__)
        ]
        written = replace_rows(conn, districts, rows)

    warnings = [
        f"district code {code} in state {state} has {len(names)} names {names}; kept {chosen[(state, code)]!r}"
        for (state, code), names in sorted(conflicts.items())
    ]
    return StageResult(stage="districts", rows_in=len(triples), rows_out=written, warnings=warnings)


def _city_sort_key(key: tuple[int, int | None, str]) -> tuple:
    state, code, name = key
    return (state, code is not None, code or 0, name)


def populate_cities(engine: Engine) -> StageResult:
    with transaction(engine) as conn:
        triples = distinct_raw(conn, "state_code", "city_code", "city_name")
        keys = {
            (parse_code(state), parse_code(code), name)
            for state, code, name in triples
            if has_text(name)
        }
        ids = assign_surrogate_ids(keys, sort_key=_city_sort_key)
        rows = [
            City(id=ids[key], state_id=key[0], name=key[2], source_code=key[1]).to_dict()
            for key in sorted(keys, key=ids.__getitem__)
        ]
        written = replace_rows(conn, cities, rows)

    return StageResult(stage="cities", rows_in=len(triples), rows_out=written)
