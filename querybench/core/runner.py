"""
Run loops.

Drive executors over identifiers and hand back one measurement per call.
Nothing is aggregated here; statistics are the caller's business.

Concurrency is arena-per-worker: each worker builds its own executor and
connection, runs its own batch, and releases its connection exactly once.
Executors are never shared between workers.
"""

import logging
import threading
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from typing import Callable, Iterable, Iterator, Optional, Sequence

from querybench.core.errors import ErrorPolicy
from querybench.core.executor.types import Executor
from querybench.models.measurement import Measurement

logger = logging.getLogger(__name__)

# Builds a fresh (executor, teardown) pair for one worker
BuildFn = Callable[[], tuple[Executor, Callable[[], None]]]


def run_identifiers(
    executor: Executor,
    identifiers: Iterable[str],
    *,
    warmup: int = 0,
    policy: ErrorPolicy = ErrorPolicy.STRICT,
    stop_signal: Optional[threading.Event] = None,
) -> Iterator[tuple[str, Measurement]]:
    """
    Invoke ``executor`` once per identifier, yielding (identifier, measurement).

    ``warmup`` untimed-for-the-caller calls are made against the first
    identifier before anything is yielded. Under the STRICT policy the first
    error propagates and the loop ends.
    """
    if policy is not ErrorPolicy.STRICT:
        raise ValueError(f"Unsupported error policy: {policy}")

    it = iter(identifiers)
    first = next(it, None)
    if first is None:
        return

    for _ in range(max(0, int(warmup))):
        executor(first)

    for identifier in _chain_first(first, it):
        if stop_signal is not None and stop_signal.is_set():
            logger.info("Stop signal set; ending run loop")
            return
        yield identifier, executor(identifier)


def _chain_first(first: str, rest: Iterator[str]) -> Iterator[str]:
    yield first
    yield from rest


def shard_identifiers(identifiers: Sequence[str], worker_count: int) -> list[list[str]]:
    """Round-robin identifiers across ``worker_count`` batches."""
    worker_count = max(1, int(worker_count))
    batches: list[list[str]] = [[] for _ in range(worker_count)]
    for idx, identifier in enumerate(identifiers):
        batches[idx % worker_count].append(identifier)
    return batches


def run_workers(
    build_fn: BuildFn,
    batches: Sequence[Sequence[str]],
    *,
    warmup: int = 0,
) -> list[list[tuple[str, Measurement]]]:
    """
    Run one worker per batch, each with its own executor.

    Returns per-worker measurement lists in batch order. If any worker fails,
    the others are told to stop, every worker's teardown still runs, and the
    first failure is raised; no results are returned.
    """
    stop_signal = threading.Event()

    def _worker(worker_id: int, batch: Sequence[str]) -> list[tuple[str, Measurement]]:
        executor, teardown = build_fn()
        try:
            return list(
                run_identifiers(
                    executor, batch, warmup=warmup, stop_signal=stop_signal
                )
            )
        except BaseException:
            stop_signal.set()
            logger.error(f"Worker {worker_id} failed; stopping remaining workers")
            raise
        finally:
            teardown()

    if not batches:
        return []

    with ThreadPoolExecutor(
        max_workers=len(batches), thread_name_prefix="querybench-worker"
    ) as pool:
        futures = [pool.submit(_worker, i, batch) for i, batch in enumerate(batches)]
        done, _ = wait(futures, return_when=FIRST_EXCEPTION)
        for fut in done:
            if fut.exception() is not None:
                stop_signal.set()
                break
        # Wait for everyone so teardowns finish before we report.
        wait(futures)

    for fut in futures:
        exc = fut.exception()
        if exc is not None:
            raise exc
    return [fut.result() for fut in futures]
