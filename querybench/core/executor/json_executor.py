"""
Raw-JSON executor.

Asks the database for the response already serialized as JSON. The clock
stops as soon as the JSON text is in hand; there is no structured decode and,
by default, no further transformation.
"""

from typing import Any, Optional

from querybench.connectors.base import QueryConnection
from querybench.core.errors import DecodeError, HarnessError
from querybench.core.executor.base import TimedExecutor
from querybench.core.executor.types import Serializer
from querybench.models.measurement import QueryFamily


class JsonExecutor(TimedExecutor):
    """Executor returning the driver's JSON text as the payload."""

    def __init__(
        self,
        connection: QueryConnection,
        query: str,
        *,
        serializer: Optional[Serializer] = None,
        param_name: str = "id",
    ) -> None:
        # Last JSON response; overwritten each call.
        self._buffer: Optional[str] = None
        super().__init__(
            connection,
            QueryFamily.JSON,
            query,
            serializer=serializer,
            param_name=param_name,
        )

    @property
    def buffer(self) -> Optional[str]:
        """Most recent JSON response."""
        return self._buffer

    def _round_trip(self, identifier: str) -> str:
        try:
            rsp = self.connection.query_single_json(self.query, self._params)
        except HarnessError:
            raise
        except Exception as e:
            raise self._query_error(identifier, e) from e

        if not isinstance(rsp, str):
            raise DecodeError(
                f"JSON response for id={identifier} is {type(rsp).__name__}, not text",
                identifier=identifier,
            )
        self._buffer = rsp
        return rsp

    def default_serializer(self, value: Any) -> str:
        return value
