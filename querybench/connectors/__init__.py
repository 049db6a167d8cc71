"""Database connections for the harness."""

from querybench.connectors.base import ConnectFn, QueryConnection

__all__ = ["ConnectFn", "QueryConnection"]
