"""
Static helper functions for executors.
"""

import re
from typing import Any
from uuid import UUID

from querybench.core.errors import IdentifierParseError


def parse_identifier(identifier: str) -> UUID:
    """
    Parse a canonical textual UUID.

    Anything that is not a 128-bit UUID string is a harness misconfiguration,
    so this raises IdentifierParseError instead of returning a sentinel.
    """
    if not isinstance(identifier, str):
        raise IdentifierParseError(
            f"identifier must be a string, got {type(identifier).__name__}",
            identifier=None,
        )
    try:
        return UUID(identifier)
    except ValueError as e:
        raise IdentifierParseError(
            f"invalid UUID {truncate_str_for_log(identifier, max_chars=80)!r}: {e}",
            identifier=identifier,
        ) from e


def classify_driver_error(exc: BaseException) -> str:
    """
    Return a stable, low-cardinality category for a driver error.

    Prefers the SQLSTATE carried by asyncpg errors.
    """
    sqlstate = getattr(exc, "sqlstate", None)
    if sqlstate:
        return f"PG_SQLSTATE_{sqlstate}"
    return type(exc).__name__


def truncate_str_for_log(value: Any, *, max_chars: int = 800) -> str:
    """Truncate a string value for logging."""
    text = str(value if value is not None else "")
    if len(text) > max_chars:
        return text[:max_chars] + "…[truncated]"
    return text


def preview_query_for_log(query: str, *, max_chars: int = 2000) -> str:
    """Preview a query for logging, collapsing whitespace."""
    q = re.sub(r"\s+", " ", str(query or "")).strip()
    if len(q) > max_chars:
        return q[:max_chars] + "…[truncated]"
    return q


def sql_error_meta_for_log(exc: BaseException, *, max_chars: int = 500) -> dict[str, Any]:
    """
    Extract common SQL error fields from asyncpg errors.
    """
    out: dict[str, Any] = {}
    for key in (
        "sqlstate",
        "schema_name",
        "table_name",
        "column_name",
        "detail",
        "hint",
    ):
        raw = getattr(exc, key, None)
        if raw is None:
            continue
        val = str(raw)
        if not val:
            continue
        if len(val) > max_chars:
            val = val[:max_chars] + "…[truncated]"
        out[key] = val
    return out
