"""
Executor factory.

Maps a query family to its executor. The three structured families share
one generic implementation; the JSON family gets the raw-JSON executor.
"""

from typing import Optional

from querybench.connectors.base import QueryConnection
from querybench.core.errors import UnknownQueryFamilyError
from querybench.core.executor.base import TimedExecutor
from querybench.core.executor.json_executor import JsonExecutor
from querybench.core.executor.structured import StructuredExecutor
from querybench.core.executor.types import Serializer
from querybench.models.entities import EntityModel, Movie, Person, User
from querybench.models.measurement import QueryFamily

ENTITY_MODELS: dict[QueryFamily, type[EntityModel]] = {
    QueryFamily.PERSON: Person,
    QueryFamily.MOVIE: Movie,
    QueryFamily.USER: User,
}


def build_executor(
    connection: QueryConnection,
    family: QueryFamily,
    query: str,
    *,
    serializer: Optional[Serializer] = None,
) -> TimedExecutor:
    """Build the executor for ``family`` bound to ``connection`` and ``query``.

    The query's result shape is not checked here; a mismatch surfaces as a
    DecodeError on the first invocation.
    """
    if family is QueryFamily.JSON:
        return JsonExecutor(connection, query, serializer=serializer)

    model = ENTITY_MODELS.get(family)
    if model is None:
        raise UnknownQueryFamilyError(family)
    return StructuredExecutor(connection, family, model, query, serializer=serializer)
