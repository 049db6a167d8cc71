"""
Executors: timed single-row round trips, one call per identifier.
"""

from querybench.core.executor.base import TimedExecutor
from querybench.core.executor.factory import ENTITY_MODELS, build_executor
from querybench.core.executor.json_executor import JsonExecutor
from querybench.core.executor.structured import StructuredExecutor
from querybench.core.executor.types import Executor, ExecutorState, Serializer

__all__ = [
    "ENTITY_MODELS",
    "Executor",
    "ExecutorState",
    "JsonExecutor",
    "Serializer",
    "StructuredExecutor",
    "TimedExecutor",
    "build_executor",
]
