"""Data models used across the pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Sequence

from sepomex_importer.common.constants import RAW_COLUMNS


@dataclass(frozen=True)
class RawRecord:
    zip_code: str
    settlement_name: str
    settlement_type_name: str
    district_name: str
    state_name: str
    city_name: str
    office_zip_code: str
    state_code: str
    office_code: str
    zip_region_code: str
    settlement_type_code: str
    district_code: str
    settlement_cpcons_id: str
    zone: str
    city_code: str

    @classmethod
    def from_fields(cls, fields: Sequence[str]) -> "RawRecord":
        return cls(**dict(zip(RAW_COLUMNS, fields, strict=True)))

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class State:
    id: int
    name: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class LocationType:
    id: int
    name: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class District:
    id: int
    state_id: int
    name: str
    source_code: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class City:
    id: int
    state_id: int
    name: str
    source_code: int | None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Settlement:
    id: int
    location_type_id: int
    district_id: int
    city_id: int | None
    name: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ZipCode:
    id: int
    district_id: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class SettlementZipLink:
    settlement_id: int
    zip_code: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class StageResult:
    stage: str
    rows_in: int = 0
    rows_out: int = 0
    duration_ms: int = 0
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
