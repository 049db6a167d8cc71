"""
Type definitions for executors.
"""

from enum import Enum
from typing import Any, Callable, Protocol

from querybench.models.measurement import Measurement


class ExecutorState(str, Enum):
    """Lifecycle of an executor.

    READY -> EXECUTING -> READY on success; any failure moves to FATAL,
    which is terminal.
    """

    READY = "READY"
    EXECUTING = "EXECUTING"
    FATAL = "FATAL"


class Executor(Protocol):
    """Callable bound to one connection and one query."""

    def invoke(self, identifier: str) -> Measurement: ...

    def __call__(self, identifier: str) -> Measurement: ...


# Turns a decoded value into the payload string handed back to the caller
Serializer = Callable[[Any], str]
