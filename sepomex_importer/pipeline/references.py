"""Reference tables built straight from staging: states and location types."""

from __future__ import annotations

from sqlalchemy import Table
from sqlalchemy.engine import Engine

from sepomex_importer.common.codes import parse_code
from sepomex_importer.common.deterministic import choose_names
from sepomex_importer.common.models import LocationType, StageResult, State
from sepomex_importer.common.store import distinct_raw, location_types, replace_rows, states, transaction


def _name_conflict_warnings(label: str, chosen: dict[int, str], conflicts: dict[int, list[str]]) -> list[str]:
    return [
        f"{label} code {code} has {len(names)} names {names}; kept {chosen[code]!r}"
        for code, names in sorted(conflicts.items())
    ]


def _populate_coded_names(
    engine: Engine,
    *,
    stage: str,
    label: str,
    table: Table,
    model: type[State] | type[LocationType],
    code_column: str,
    name_column: str,
) -> StageResult:
    with transaction(engine) as conn:
        pairs = distinct_raw(conn, code_column, name_column)
        chosen, conflicts = choose_names((parse_code(code), name) for code, name in pairs)
        rows = [model(id=code, name=chosen[code]).to_dict() for code in sorted(chosen)]
        written = replace_rows(conn, table, rows)

    return StageResult(
        stage=stage,
        rows_in=len(pairs),
        rows_out=written,
        warnings=_name_conflict_warnings(label, chosen, conflicts),
    )


def populate_states(engine: Engine) -> StageResult:
    return _populate_coded_names(
        engine,
        stage="states",
        label="state",
        table=states,
        model=State,
        code_column="state_code",
        name_column="state_name",
    )


def populate_location_types(engine: Engine) -> StageResult:
    return _populate_coded_names(
        engine,
        stage="location-types",
        label="settlement type",
        table=location_types,
        model=LocationType,
        code_column="settlement_type_code",
        name_column="settlement_type_name",
    )
