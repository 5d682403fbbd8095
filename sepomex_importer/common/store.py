"""Relational store access: table definitions, engine and transactions."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterable, Iterator, Mapping

from sqlalchemy import Column, Integer, MetaData, Table, Text, create_engine, select
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from sepomex_importer.common.constants import RAW_COLUMNS
from sepomex_importer.common.errors import StoreError

metadata = MetaData()

raw_records = Table(
    "raw_records",
    metadata,
    *(Column(name, Text) for name in RAW_COLUMNS),
)

states = Table(
    "states",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=False),
    Column("name", Text, nullable=False),
)

districts = Table(
    "districts",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=False),
    Column("state_id", Integer, nullable=False),
    Column("name", Text, nullable=False),
    Column("source_code", Integer, nullable=False),
)

cities = Table(
    "cities",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=False),
    Column("state_id", Integer, nullable=False),
    Column("name", Text, nullable=False),
    Column("source_code", Integer, nullable=True),
)

location_types = Table(
    "location_types",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=False),
    Column("name", Text, nullable=False),
)

settlements = Table(
    "settlements",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=False),
    Column("location_type_id", Integer, nullable=False),
    Column("district_id", Integer, nullable=False),
    Column("city_id", Integer, nullable=True),
    Column("name", Text, nullable=False),
)

zip_codes = Table(
    "zip_codes",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=False),
    Column("district_id", Integer, nullable=False),
)

settlement_zip_codes = Table(
    "settlement_zip_codes",
    metadata,
    Column("settlement_id", Integer, primary_key=True, autoincrement=False),
    Column("zip_code", Integer, primary_key=True, autoincrement=False),
)

NORMALIZED_TABLES = (
    states,
    location_types,
    districts,
    cities,
    settlements,
    zip_codes,
    settlement_zip_codes,
)


def create_store_engine(database_url: str, *, echo: bool = False) -> Engine:
    return create_engine(database_url, echo=echo)


def create_schema(engine: Engine) -> None:
    with transaction(engine) as conn:
        metadata.create_all(conn)


@contextmanager
def transaction(engine: Engine) -> Iterator[Connection]:
    """Scoped transaction; store failures surface as ``StoreError``.

    Any exception raised inside the block rolls the transaction back.
    """
    try:
        with engine.begin() as conn:
            yield conn
    except SQLAlchemyError as exc:
        raise StoreError(f"Store operation failed: {exc}") from exc


def replace_rows(conn: Connection, table: Table, rows: Iterable[Mapping[str, object]]) -> int:
    conn.execute(table.delete())
    batch = [dict(row) for row in rows]
    if batch:
        conn.execute(table.insert(), batch)
    return len(batch)


def distinct_raw(conn: Connection, *column_names: str) -> list[tuple]:
    columns = [raw_records.c[name] for name in column_names]
    result = conn.execute(select(*columns).distinct())
    return [tuple(row) for row in result]


def fetch_table(conn: Connection, table: Table) -> list[dict]:
    primary = list(table.primary_key.columns) or list(table.columns)
    result = conn.execute(select(table).order_by(*primary))
    return [dict(row) for row in result.mappings()]
