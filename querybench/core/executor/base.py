"""
Timed round-trip executor.

Holds the parts every executor kind shares: the reused parameter slot, the
state machine, the timed window and the error policy. Subclasses supply the
round trip (query + decode) and the serializer.

Timed window: the identifier is parsed and written into the parameter slot
before the clock starts; the clock stops once the decoded value is in hand;
serialization always runs after the clock stops.

Executors are not thread-safe. The parameter slot and decode target are
overwritten in place on every call, so concurrent workers need one executor
each.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Optional
from uuid import UUID

from querybench.connectors.base import QueryConnection
from querybench.core.errors import (
    ConcurrentInvocationError,
    ExecutorFailedError,
    HarnessError,
    InvocationError,
    QueryExecutionError,
    SerializationError,
)
from querybench.core.executor.helpers import (
    classify_driver_error,
    parse_identifier,
    preview_query_for_log,
    sql_error_meta_for_log,
)
from querybench.core.executor.types import ExecutorState, Serializer
from querybench.models.measurement import Measurement, QueryFamily

logger = logging.getLogger(__name__)


class TimedExecutor(ABC):
    """Base executor: one connection, one query, one call per identifier."""

    def __init__(
        self,
        connection: QueryConnection,
        family: QueryFamily,
        query: str,
        *,
        serializer: Optional[Serializer] = None,
        param_name: str = "id",
    ) -> None:
        self.connection = connection
        self.family = family
        self.query = query
        self.param_name = param_name
        self._serializer: Serializer = serializer or self.default_serializer

        # Single reused parameter slot; overwritten before each timed window.
        self._params: dict[str, Any] = {param_name: None}
        self._state = ExecutorState.READY
        self._error: Optional[HarnessError] = None
        self._calls = 0

        logger.info(
            f"{family.value} executor ready: "
            f"query={preview_query_for_log(query, max_chars=200)}"
        )

    @property
    def state(self) -> ExecutorState:
        return self._state

    @property
    def error(self) -> Optional[HarnessError]:
        """The failure that made this executor FATAL, if any."""
        return self._error

    @property
    def calls(self) -> int:
        """Number of successful invocations."""
        return self._calls

    @abstractmethod
    def _round_trip(self, identifier: str) -> Any:
        """Issue the query with the bound parameters and decode the result.

        Runs inside the timed window. Must store the decoded value in the
        executor's slot and return it.
        """

    @abstractmethod
    def default_serializer(self, value: Any) -> str:
        """Serializer used when none is supplied."""

    def invoke(self, identifier: str) -> Measurement:
        """Run the query for ``identifier``; return (duration, payload)."""
        if self._state is ExecutorState.FATAL:
            raise ExecutorFailedError(
                f"{self.family.value} executor failed earlier: "
                f"{self._error or 'interrupted'}"
            ) from self._error
        if self._state is ExecutorState.EXECUTING:
            raise ConcurrentInvocationError(
                f"{self.family.value} executor is already executing; "
                "use one executor per worker"
            )

        self._state = ExecutorState.EXECUTING
        try:
            self._bind(identifier)

            start = time.perf_counter()
            value = self._round_trip(identifier)
            duration = time.perf_counter() - start

            payload = self._serialize(value, identifier)
        except HarnessError as e:
            self._fail(identifier, e)
            raise
        except BaseException as e:
            # Interrupts and other non-harness exceptions still end the executor.
            self._state = ExecutorState.FATAL
            logger.error(
                f"{self.family.value} executor interrupted for id={identifier}: "
                f"{type(e).__name__}"
            )
            raise

        self._state = ExecutorState.READY
        self._calls += 1
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                f"{self.family.value} id={identifier} duration_ms={duration * 1000.0:.3f}"
            )
        return Measurement(duration, payload)

    __call__ = invoke

    def _bind(self, identifier: str) -> UUID:
        parsed = parse_identifier(identifier)
        self._params[self.param_name] = parsed
        return parsed

    def _query_error(self, identifier: str, exc: Exception) -> QueryExecutionError:
        return QueryExecutionError(
            f"{self.family.value} query failed for id={identifier} "
            f"[{classify_driver_error(exc)}]: {exc}",
            identifier=identifier,
        )

    def _serialize(self, value: Any, identifier: str) -> str:
        try:
            return self._serializer(value)
        except HarnessError:
            raise
        except Exception as e:
            raise SerializationError(
                f"could not serialize {self.family.value} id={identifier}: {e}",
                identifier=identifier,
            ) from e

    def _fail(self, identifier: str, exc: HarnessError) -> None:
        if isinstance(exc, InvocationError) and exc.identifier is None:
            exc.identifier = identifier
        self._state = ExecutorState.FATAL
        self._error = exc

        cause = exc.__cause__
        meta = sql_error_meta_for_log(cause) if cause is not None else {}
        logger.error(
            f"{self.family.value} executor failed for id={identifier}: {exc} "
            f"query={preview_query_for_log(self.query, max_chars=500)}"
            + (f" meta={meta}" if meta else "")
        )
