"""
Execution Dispatcher

Turns an explicit query-family tag and a query text into an
``(executor, teardown)`` pair that owns one connection.

The family is always an explicit argument. It is never inferred from the
query text, where an unrelated mention (a comment naming another entity,
say) would misclassify the query.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional, Union

from querybench.connectors.base import ConnectFn, QueryConnection
from querybench.core.errors import (
    AlreadyClosedError,
    ConnectionOpenError,
    HarnessError,
    UnknownQueryFamilyError,
)
from querybench.core.executor.base import TimedExecutor
from querybench.core.executor.factory import build_executor
from querybench.core.executor.types import Serializer
from querybench.models.measurement import QueryFamily

logger = logging.getLogger(__name__)


def resolve_query_family(tag: Union[str, QueryFamily]) -> QueryFamily:
    """
    Resolve a classification tag to one of the structured families.

    A string tag must contain exactly one of ``Person``, ``Movie`` or
    ``User`` (case-sensitive). No match, or more than one, is an
    UnknownQueryFamilyError.
    """
    if isinstance(tag, QueryFamily):
        if tag not in QueryFamily.structured():
            raise UnknownQueryFamilyError(tag)
        return tag
    if not isinstance(tag, str):
        raise UnknownQueryFamilyError(tag)

    matches = [f for f in QueryFamily.structured() if f.value in tag]
    if len(matches) != 1:
        raise UnknownQueryFamilyError(tag, [m.value for m in matches])
    return matches[0]


class Teardown:
    """
    One-shot release of a connection.

    Calling it a second time raises AlreadyClosedError; never calling it
    leaks the connection. Both are caller bugs.
    """

    def __init__(self, connection: QueryConnection, label: str = "") -> None:
        self._connection = connection
        self._label = label
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def __call__(self) -> None:
        if self._closed:
            raise AlreadyClosedError(f"teardown already called ({self._label})")
        self._closed = True
        logger.info(f"Releasing connection ({self._label})")
        self._connection.close()


def _default_connect(*, json_mode: bool = False) -> QueryConnection:
    from querybench.connectors.postgres_connection import connect_postgres

    return connect_postgres(json_mode=json_mode)


def _open(connect: Optional[ConnectFn], json_mode: bool) -> QueryConnection:
    connect_fn = connect or _default_connect
    try:
        return connect_fn(json_mode=json_mode)
    except HarnessError:
        raise
    except Exception as e:
        raise ConnectionOpenError(f"could not open connection: {e}") from e


def _bind(
    connection: QueryConnection,
    family: QueryFamily,
    query: str,
    serializer: Optional[Serializer],
) -> tuple[TimedExecutor, Teardown]:
    try:
        executor = build_executor(connection, family, query, serializer=serializer)
    except BaseException:
        connection.close()
        raise
    return executor, Teardown(connection, label=family.value)


def build(
    tag: Union[str, QueryFamily],
    query: str,
    *,
    connect: Optional[ConnectFn] = None,
    serializer: Optional[Serializer] = None,
) -> tuple[TimedExecutor, Teardown]:
    """
    Build a structured executor and its teardown.

    The tag is resolved before any connection is opened, so an unknown
    family fails without touching the database.
    """
    family = resolve_query_family(tag)
    connection = _open(connect, json_mode=False)
    return _bind(connection, family, query, serializer)


def build_json(
    query: str,
    *,
    connect: Optional[ConnectFn] = None,
    serializer: Optional[Serializer] = None,
) -> tuple[TimedExecutor, Teardown]:
    """Build a raw-JSON executor and its teardown."""
    connection = _open(connect, json_mode=True)
    return _bind(connection, QueryFamily.JSON, query, serializer)


@contextmanager
def open_executor(
    tag: Union[str, QueryFamily, None],
    query: str,
    *,
    json_mode: bool = False,
    connect: Optional[ConnectFn] = None,
    serializer: Optional[Serializer] = None,
) -> Iterator[TimedExecutor]:
    """
    Scoped executor: teardown runs exactly once when the block exits.

    Usage:
        with open_executor("Movie", query) as executor:
            duration, payload = executor(movie_id)
    """
    if json_mode:
        executor, teardown = build_json(query, connect=connect, serializer=serializer)
    else:
        if tag is None:
            raise UnknownQueryFamilyError(tag)
        executor, teardown = build(tag, query, connect=connect, serializer=serializer)
    try:
        yield executor
    finally:
        teardown()
