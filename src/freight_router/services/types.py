from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(slots=True, frozen=True)
class GeoPoint:
    latitude: float
    longitude: float


@dataclass(slots=True, frozen=True)
class ResolvedAddress:
    address: str
    city: str
    state: str
    postal_code: str
    point: GeoPoint


@dataclass(slots=True, frozen=True)
class Location:
    address: str
    city: str
    state: str
    postal_code: str
    date: str
    time: str


@dataclass(slots=True, frozen=True)
class RouteOption:
    """One alternative returned by the route query, prior to enrichment."""

    polylines: list[str]
    toll_cost: float
    fuel_cost: float
    miles: float
    duration_hours: float
    geometry_error: str | None = None


@dataclass(slots=True)
class RouteCandidate:
    toll_cost: float
    fuel_cost: float
    miles: float
    duration_hours: float
    adverse_conditions: list[str] = field(default_factory=list)
    score: float | None = None
    rank: int | None = None


class StageStatus(str, Enum):
    OK = "ok"
    PARTIAL = "partial"
    FAILED = "failed"


@dataclass(slots=True, frozen=True)
class StageResult(Generic[T]):
    status: StageStatus
    value: T | None = None
    errors: tuple[str, ...] = ()

    @classmethod
    def ok(cls, value: T) -> StageResult[T]:
        return cls(status=StageStatus.OK, value=value)

    @classmethod
    def partial(cls, value: T, errors: list[str]) -> StageResult[T]:
        return cls(status=StageStatus.PARTIAL, value=value, errors=tuple(errors))

    @classmethod
    def failed(cls, error: str) -> StageResult[T]:
        return cls(status=StageStatus.FAILED, errors=(error,))

    @property
    def usable(self) -> bool:
        return self.status is not StageStatus.FAILED
