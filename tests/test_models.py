"""
Unit tests for entity and measurement models.
"""

from __future__ import annotations

import json
from typing import Any
from uuid import UUID

import pytest
from pydantic import ValidationError

from querybench.models import (
    Measurement,
    MeasurementRecord,
    Movie,
    Person,
    QueryFamily,
    Review,
    User,
)
from querybench.models.entities import NIL_UUID
from tests.fakes import (
    MOVIE_ID,
    PERSON_ID,
    REVIEW_ID,
    USER_ID,
    movie_row,
    person_row,
    review_row,
    user_row,
)


class TestEntityDecode:
    """Tests for decoding rows into entity models."""

    def test_movie_decodes_nested_relations(self, movie_scenario_row: dict[str, Any]) -> None:
        """Movie decodes directors, cast and reviews with full embedded copies."""
        movie = Movie.model_validate(movie_scenario_row)

        assert movie.id == UUID(MOVIE_ID)
        assert [p.full_name for p in movie.directors] == ["Dee Director"]
        assert [p.full_name for p in movie.cast] == ["Ada Actor"]
        assert len(movie.reviews) == 1
        review = movie.reviews[0]
        assert isinstance(review.movie, Movie)
        assert isinstance(review.author, User)
        assert review.author.id == UUID(USER_ID)

    def test_person_decodes_filmography(self) -> None:
        row = person_row(
            acted_in=[movie_row(title="A")],
            directed=[movie_row(title="B"), movie_row(title="C")],
        )
        person = Person.model_validate(row)

        assert person.id == UUID(PERSON_ID)
        assert [m.title for m in person.acted_in] == ["A"]
        assert [m.title for m in person.directed] == ["B", "C"]

    def test_user_decodes_latest_reviews(self) -> None:
        user = User.model_validate(
            user_row(latest_reviews=[review_row(body="one"), review_row(body="two")])
        )
        assert [r.body for r in user.latest_reviews] == ["one", "two"]

    def test_missing_field_takes_zero_value(self) -> None:
        row = movie_row()
        del row["avg_rating"]
        del row["reviews"]

        movie = Movie.model_validate(row)

        assert movie.avg_rating == 0.0
        assert movie.reviews == []

    def test_extra_field_is_rejected(self) -> None:
        row = user_row()
        row["email"] = "x@example.com"
        with pytest.raises(ValidationError):
            User.model_validate(row)

    def test_nested_extra_field_is_rejected(self) -> None:
        row = review_row()
        row["author"]["email"] = "x@example.com"
        with pytest.raises(ValidationError):
            Review.model_validate(row)

    def test_wrong_type_is_rejected(self) -> None:
        row = movie_row()
        row["year"] = "nineteen ninety-nine"
        with pytest.raises(ValidationError):
            Movie.model_validate(row)

    def test_empty_row_is_all_zero(self) -> None:
        payload = json.loads(Review.model_validate({}).model_dump_json())

        assert payload["id"] == str(NIL_UUID)
        assert payload["body"] == ""
        assert payload["rating"] == 0
        assert payload["movie"]["title"] == ""
        assert payload["movie"]["cast"] == []
        assert payload["author"]["latest_reviews"] == []

    def test_entities_are_frozen(self) -> None:
        movie = Movie.model_validate(movie_row())
        with pytest.raises(ValidationError):
            movie.title = "changed"  # type: ignore[misc]


class TestPartialProjections:
    """Nested relations carry only the attributes the query projects."""

    def test_person_with_partial_movies(self) -> None:
        row = person_row(
            acted_in=[
                {
                    "id": MOVIE_ID,
                    "image": "m.jpg",
                    "title": "T",
                    "year": 1999,
                    "avg_rating": 4.0,
                }
            ],
            directed=[{"id": MOVIE_ID, "title": "T"}],
        )

        person = Person.model_validate(row)
        payload = json.loads(person.model_dump_json())

        movie = payload["acted_in"][0]
        assert movie["title"] == "T"
        assert movie["year"] == 1999
        assert movie["description"] == ""
        assert movie["directors"] == []
        assert movie["cast"] == []
        assert movie["reviews"] == []
        assert payload["directed"][0]["avg_rating"] == 0.0

    def test_movie_with_partial_people_and_reviews(self) -> None:
        row = movie_row(
            directors=[{"id": PERSON_ID, "full_name": "Dee Director", "image": "d.jpg"}],
            cast=[{"id": PERSON_ID, "full_name": "Ada Actor", "image": "a.jpg"}],
            reviews=[
                {
                    "id": REVIEW_ID,
                    "body": "Loved it",
                    "rating": 5,
                    "author": {"id": USER_ID, "name": "Rita", "image": "r.jpg"},
                }
            ],
        )

        movie = Movie.model_validate(row)

        assert movie.cast[0].full_name == "Ada Actor"
        assert movie.cast[0].bio == ""
        assert movie.cast[0].acted_in == []
        assert movie.directors[0].directed == []
        review = movie.reviews[0]
        assert review.author.name == "Rita"
        assert review.author.latest_reviews == []
        assert review.movie.id == NIL_UUID

    def test_user_with_partial_reviews(self) -> None:
        row = user_row(
            latest_reviews=[
                {
                    "id": REVIEW_ID,
                    "body": "Loved it",
                    "rating": 5,
                    "movie": {"id": MOVIE_ID, "image": "m.jpg", "title": "T", "avg_rating": 4.5},
                }
            ]
        )

        user = User.model_validate(row)

        review = user.latest_reviews[0]
        assert review.movie.title == "T"
        assert review.movie.reviews == []
        assert review.movie.year == 0
        assert review.author.id == NIL_UUID


class TestEntitySerialization:
    """Tests for JSON output of entities."""

    def test_movie_attribute_names_and_order(self, movie_scenario_row: dict[str, Any]) -> None:
        payload = json.loads(Movie.model_validate(movie_scenario_row).model_dump_json())

        assert list(payload) == [
            "id",
            "image",
            "title",
            "year",
            "description",
            "avg_rating",
            "directors",
            "cast",
            "reviews",
        ]
        assert list(payload["reviews"][0]) == ["id", "body", "rating", "movie", "author"]
        assert list(payload["cast"][0]) == [
            "id",
            "full_name",
            "image",
            "bio",
            "acted_in",
            "directed",
        ]
        assert list(payload["reviews"][0]["author"]) == [
            "id",
            "name",
            "image",
            "latest_reviews",
        ]

    def test_sequence_order_is_preserved(self) -> None:
        names = ["Zed", "Amy", "Moe"]
        row = movie_row(cast=[person_row(full_name=n) for n in names])

        payload = json.loads(Movie.model_validate(row).model_dump_json())

        assert [p["full_name"] for p in payload["cast"]] == names

    def test_serialization_is_deterministic(self, movie_scenario_row: dict[str, Any]) -> None:
        movie = Movie.model_validate(movie_scenario_row)
        assert movie.model_dump_json() == movie.model_dump_json()
        assert Movie.model_validate_json(movie.model_dump_json()) == movie


class TestMeasurementModels:
    """Tests for Measurement and MeasurementRecord."""

    def test_measurement_unpacks_as_pair(self) -> None:
        duration, payload = Measurement(0.25, "{}")
        assert duration == 0.25
        assert payload == "{}"
        assert Measurement(0.25, "{}").duration_ms == 250.0

    def test_record_from_measurement(self) -> None:
        record = MeasurementRecord.from_measurement(
            MOVIE_ID, QueryFamily.MOVIE, Measurement(0.002, '{"id": 1}')
        )
        assert record.duration_ms == pytest.approx(2.0)
        assert record.payload == '{"id": 1}'
        assert record.family is QueryFamily.MOVIE

    def test_record_without_payload(self) -> None:
        record = MeasurementRecord.from_measurement(
            MOVIE_ID,
            QueryFamily.JSON,
            Measurement(0.001, "{}"),
            include_payload=False,
            worker_id=3,
        )
        assert record.payload is None
        assert record.worker_id == 3

    def test_structured_families(self) -> None:
        assert QueryFamily.structured() == (
            QueryFamily.PERSON,
            QueryFamily.MOVIE,
            QueryFamily.USER,
        )
