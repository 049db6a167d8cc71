"""
Harness error taxonomy.

Every failure is fatal to a benchmark run: nothing here is retried and no
partial results are reported after one is raised. The core raises to its
immediate caller; only the command-line driver decides to exit the process.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional


class ErrorPolicy(str, Enum):
    """How the harness treats per-call failures.

    STRICT is the only policy: a failed call invalidates the whole run.
    Retrying would change the measured timings.
    """

    STRICT = "STRICT"


class HarnessError(Exception):
    """Base class for all harness failures."""


class ConfigurationError(HarnessError):
    """The harness was set up with inputs it cannot use."""


class UnknownQueryFamilyError(ConfigurationError):
    def __init__(self, tag: Any, matches: Optional[list[str]] = None) -> None:
        self.tag = tag
        self.matches = list(matches or [])
        if self.matches:
            detail = f"ambiguous query family tag {tag!r}: matches {self.matches}"
        else:
            detail = f"unknown query family tag {tag!r}"
        super().__init__(detail)


class ConnectionOpenError(HarnessError):
    """Opening the connection resource failed."""


class InvocationError(HarnessError):
    """A single executor invocation failed."""

    def __init__(self, message: str, *, identifier: Optional[str] = None) -> None:
        self.identifier = identifier
        super().__init__(message)


class IdentifierParseError(InvocationError):
    """The identifier is not a textual 128-bit UUID."""


class QueryExecutionError(InvocationError):
    """The driver failed to execute the query."""


class RowCountError(QueryExecutionError):
    """The query returned anything other than exactly one row."""

    def __init__(self, row_count: int, *, identifier: Optional[str] = None) -> None:
        self.row_count = row_count
        super().__init__(
            f"expected exactly one row, got {row_count}", identifier=identifier
        )


class DecodeError(InvocationError):
    """The row does not match the decode target's shape."""


class SerializationError(InvocationError):
    """Marshaling the decoded value to its output form failed."""


class ExecutorStateError(HarnessError):
    """The executor was invoked in a state that does not allow it."""


class ConcurrentInvocationError(ExecutorStateError):
    """The executor was invoked while another invocation was in flight."""


class ExecutorFailedError(ExecutorStateError):
    """The executor already failed; it stays failed."""


class AlreadyClosedError(HarnessError):
    """A teardown or connection was released more than once."""
