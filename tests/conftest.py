"""
Shared fixtures for querybench tests.
"""

from __future__ import annotations

import json
from typing import Any

import pytest

from tests.fakes import (
    DIRECTOR_ID,
    MOVIE_ID,
    OTHER_MOVIE_ID,
    PERSON_ID,
    USER_ID,
    FakeConnection,
    movie_row,
    person_row,
    review_row,
    user_row,
)


@pytest.fixture
def movie_scenario_row() -> dict[str, Any]:
    """Movie with a director, one cast member and one fully denormalized review."""
    director = person_row(DIRECTOR_ID, full_name="Dee Director")
    actor = person_row(PERSON_ID, full_name="Ada Actor")
    review = review_row(
        movie=movie_row(MOVIE_ID),
        author=user_row(USER_ID),
    )
    return movie_row(
        MOVIE_ID,
        directors=[director],
        cast=[actor],
        reviews=[review],
    )


@pytest.fixture
def fake_connection(movie_scenario_row: dict[str, Any]) -> FakeConnection:
    return FakeConnection(
        rows={
            MOVIE_ID: movie_scenario_row,
            OTHER_MOVIE_ID: movie_row(OTHER_MOVIE_ID, title="The Second Movie", year=2001),
        },
        json_rows={
            MOVIE_ID: json.dumps(movie_scenario_row),
            OTHER_MOVIE_ID: json.dumps(movie_row(OTHER_MOVIE_ID)),
        },
    )
