"""Connection protocol the executors are written against."""

from typing import Any, Callable, Mapping, Protocol


class QueryConnection(Protocol):
    """Blocking single-row query interface.

    Implementations require exactly one result row and raise
    ``RowCountError`` otherwise.
    """

    def query_single(self, query: str, params: Mapping[str, Any]) -> Mapping[str, Any]:
        """Run ``query`` and return its only row, nested JSON already decoded."""
        ...

    def query_single_json(self, query: str, params: Mapping[str, Any]) -> str:
        """Run ``query`` and return its only row's single column as JSON text."""
        ...

    def close(self) -> None:
        """Release the connection."""
        ...


# Opens one connection; called as connect(json_mode=...)
ConnectFn = Callable[..., QueryConnection]
