"""
Entity Models

Decode targets for the three query families. Nested relations are partial,
denormalized projections (a Person's ``acted_in`` movies carry only a few
attributes), so every field falls back to its zero value when the query does
not project it. Unknown attributes are still rejected.

Field order is the JSON attribute order; sequences keep server order.
"""

from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

# Zero value for ``id`` when a projection leaves it out
NIL_UUID = UUID(int=0)


class EntityModel(BaseModel):
    """Base for decoded entities: immutable, rejects unknown attributes."""

    model_config = ConfigDict(frozen=True, extra="forbid")


class Person(EntityModel):
    """A person with the movies they acted in and directed."""

    id: UUID = Field(NIL_UUID, description="Person id")
    full_name: str = Field("", description="Display name")
    image: str = Field("", description="Image reference")
    bio: str = Field("", description="Biography text")
    acted_in: list[Movie] = Field(default_factory=list, description="Movies acted in")
    directed: list[Movie] = Field(default_factory=list, description="Movies directed")


class Movie(EntityModel):
    """A movie with its crew and reviews."""

    id: UUID = Field(NIL_UUID, description="Movie id")
    image: str = Field("", description="Image reference")
    title: str = Field("", description="Title")
    year: int = Field(0, description="Release year")
    description: str = Field("", description="Synopsis")
    avg_rating: float = Field(0.0, description="Average review rating")
    directors: list[Person] = Field(default_factory=list, description="Directors")
    cast: list[Person] = Field(default_factory=list, description="Cast")
    reviews: list[Review] = Field(default_factory=list, description="Reviews")


class Review(EntityModel):
    """A review, embedding copies of its movie and author."""

    id: UUID = Field(NIL_UUID, description="Review id")
    body: str = Field("", description="Review text")
    rating: int = Field(0, description="Rating")
    movie: Movie = Field(default_factory=lambda: Movie(), description="Reviewed movie")
    author: User = Field(default_factory=lambda: User(), description="Review author")


class User(EntityModel):
    """A user with their most recent reviews."""

    id: UUID = Field(NIL_UUID, description="User id")
    name: str = Field("", description="Display name")
    image: str = Field("", description="Image reference")
    latest_reviews: list[Review] = Field(
        default_factory=list, description="Most recent reviews"
    )


Person.model_rebuild()
Movie.model_rebuild()
Review.model_rebuild()
User.model_rebuild()
