"""
Structured executor.

One generic executor parameterized over the entity model. The row is decoded
into the model inside the timed window; marshaling to JSON happens after the
clock stops.
"""

from typing import Any, Generic, Optional, TypeVar

from pydantic import ValidationError

from querybench.connectors.base import QueryConnection
from querybench.core.errors import DecodeError, HarnessError
from querybench.core.executor.base import TimedExecutor
from querybench.core.executor.types import Serializer
from querybench.models.entities import EntityModel
from querybench.models.measurement import QueryFamily

EntityT = TypeVar("EntityT", bound=EntityModel)


class StructuredExecutor(TimedExecutor, Generic[EntityT]):
    """Executor decoding each row into ``model``."""

    def __init__(
        self,
        connection: QueryConnection,
        family: QueryFamily,
        model: type[EntityT],
        query: str,
        *,
        serializer: Optional[Serializer] = None,
        param_name: str = "id",
    ) -> None:
        self.model = model
        # Decode target slot; replaced wholesale by each successful decode.
        self._target: Optional[EntityT] = None
        super().__init__(
            connection,
            family,
            query,
            serializer=serializer,
            param_name=param_name,
        )

    @property
    def target(self) -> Optional[EntityT]:
        """Most recently decoded entity."""
        return self._target

    def _round_trip(self, identifier: str) -> EntityT:
        try:
            row = self.connection.query_single(self.query, self._params)
        except HarnessError:
            raise
        except Exception as e:
            raise self._query_error(identifier, e) from e

        try:
            self._target = self.model.model_validate(row)
        except ValidationError as e:
            raise DecodeError(
                f"{self.family.value} row does not match {self.model.__name__} "
                f"for id={identifier}: {e.error_count()} error(s): {e}",
                identifier=identifier,
            ) from e
        return self._target

    def default_serializer(self, value: Any) -> str:
        return value.model_dump_json()
