"""
Measurement Models

Per-call results and the query-family vocabulary.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import NamedTuple, Optional

from pydantic import BaseModel, Field


class QueryFamily(str, Enum):
    """Query family: decides the decode shape of a query response."""

    PERSON = "Person"
    MOVIE = "Movie"
    USER = "User"
    JSON = "JSON"

    @classmethod
    def structured(cls) -> tuple["QueryFamily", ...]:
        """Families decoded into typed entities."""
        return (cls.PERSON, cls.MOVIE, cls.USER)


class Measurement(NamedTuple):
    """One executor invocation: elapsed seconds and the serialized payload."""

    duration_s: float
    payload: str

    @property
    def duration_ms(self) -> float:
        return self.duration_s * 1000.0


class MeasurementRecord(BaseModel):
    """A measurement as written to the results stream."""

    identifier: str = Field(..., description="Identifier the query was run for")
    family: QueryFamily = Field(..., description="Query family")
    duration_ms: float = Field(..., ge=0.0, description="Measured round trip (ms)")
    payload: Optional[str] = Field(None, description="Serialized result")
    worker_id: int = Field(0, description="Worker that produced the measurement")
    recorded_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC), description="Record timestamp (UTC)"
    )

    @classmethod
    def from_measurement(
        cls,
        identifier: str,
        family: QueryFamily,
        measurement: Measurement,
        *,
        include_payload: bool = True,
        worker_id: int = 0,
    ) -> "MeasurementRecord":
        return cls(
            identifier=identifier,
            family=family,
            duration_ms=measurement.duration_ms,
            payload=measurement.payload if include_payload else None,
            worker_id=worker_id,
        )
