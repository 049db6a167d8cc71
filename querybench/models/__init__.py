"""
Data models for querybench.

This package contains Pydantic models for:
- Entity decode targets (Person, Movie, Review, User)
- Per-call measurements and the query-family vocabulary
"""

from querybench.models.entities import (
    EntityModel,
    Person,
    Movie,
    Review,
    User,
)

from querybench.models.measurement import (
    QueryFamily,
    Measurement,
    MeasurementRecord,
)

__all__ = [
    # entities
    "EntityModel",
    "Person",
    "Movie",
    "Review",
    "User",
    # measurement
    "QueryFamily",
    "Measurement",
    "MeasurementRecord",
]
