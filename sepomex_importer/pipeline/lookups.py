"""In-memory indexes over committed tables, used in place of SQL joins."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.engine import Connection

from sepomex_importer.common.store import cities, districts, location_types, settlements, zip_codes


def load_location_type_ids(conn: Connection) -> set[int]:
    return {row.id for row in conn.execute(select(location_types.c.id))}


def load_district_index(conn: Connection) -> dict[tuple[int, int], int]:
    """Map ``(state_id, source district code)`` to the district surrogate id."""
    rows = conn.execute(select(districts.c.id, districts.c.state_id, districts.c.source_code))
    return {(row.state_id, row.source_code): row.id for row in rows}


def load_city_index(conn: Connection) -> dict[tuple[int, int | None], int]:
    """Map ``(state_id, source city code)`` to a city id; lowest id wins on shared codes."""
    index: dict[tuple[int, int | None], int] = {}
    rows = conn.execute(
        select(cities.c.id, cities.c.state_id, cities.c.source_code).order_by(cities.c.id)
    )
    for row in rows:
        index.setdefault((row.state_id, row.source_code), row.id)
    return index


def load_settlement_index(conn: Connection) -> dict[tuple[int, int, str], int]:
    rows = conn.execute(
        select(
            settlements.c.id,
            settlements.c.location_type_id,
            settlements.c.district_id,
            settlements.c.name,
        )
    )
    return {(row.location_type_id, row.district_id, row.name): row.id for row in rows}


def load_zip_code_districts(conn: Connection) -> dict[int, int]:
    return {row.id: row.district_id for row in conn.execute(select(zip_codes.c.id, zip_codes.c.district_id))}
