"""Command-line driver: run one query family over a list of identifiers."""

from __future__ import annotations

import argparse
import logging
import sys
from functools import partial
from pathlib import Path
from typing import Optional, Sequence

from querybench.config import settings
from querybench.core.dispatcher import (
    build,
    build_json,
    open_executor,
    resolve_query_family,
)
from querybench.core.errors import HarnessError
from querybench.core.results import MeasurementWriter
from querybench.core.runner import run_identifiers, run_workers, shard_identifiers
from querybench.logging_setup import configure_logging
from querybench.models.measurement import QueryFamily

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Time one parameterized entity query per identifier."
    )
    parser.add_argument(
        "--family",
        default=None,
        help="Query family tag: Person, Movie or User (structured mode).",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Use the raw-JSON executor (the database returns JSON text).",
    )
    query = parser.add_mutually_exclusive_group(required=True)
    query.add_argument("--query", help="Query text.")
    query.add_argument("--query-file", help="File containing the query text.")
    parser.add_argument(
        "--ids-file",
        default="-",
        help="File with one UUID per line ('-' for stdin).",
    )
    parser.add_argument(
        "--output",
        default="-",
        help="JSON-lines output path ('-' for stdout).",
    )
    parser.add_argument(
        "--warmup",
        type=int,
        default=None,
        help="Warmup calls per worker before measuring.",
    )
    parser.add_argument(
        "--concurrency",
        type=int,
        default=1,
        help="Workers, each with its own connection and executor.",
    )
    parser.add_argument(
        "--no-payload",
        action="store_true",
        help="Write timings only.",
    )
    return parser


def _read_query(args: argparse.Namespace) -> str:
    if args.query is not None:
        return args.query
    return Path(args.query_file).read_text(encoding="utf-8")


def _read_identifiers(path: str) -> list[str]:
    if path == "-":
        lines = sys.stdin.read().splitlines()
    else:
        lines = Path(path).read_text(encoding="utf-8").splitlines()
    return [line.strip() for line in lines if line.strip()]


def _run(args: argparse.Namespace) -> int:
    query = _read_query(args)
    identifiers = _read_identifiers(args.ids_file)
    warmup = settings.BENCH_WARMUP_ITERATIONS if args.warmup is None else args.warmup
    include_payload = settings.BENCH_INCLUDE_PAYLOAD and not args.no_payload

    if args.json:
        family = QueryFamily.JSON
        build_fn = partial(build_json, query)
    else:
        family = resolve_query_family(args.family or "")
        build_fn = partial(build, family, query)

    # A failed run writes nothing: results are collected before any output.
    if args.concurrency <= 1:
        with open_executor(family, query, json_mode=args.json) as executor:
            per_worker = [list(run_identifiers(executor, identifiers, warmup=warmup))]
    else:
        batches = shard_identifiers(identifiers, args.concurrency)
        per_worker = run_workers(build_fn, batches, warmup=warmup)

    with MeasurementWriter(args.output, include_payload=include_payload) as writer:
        for worker_id, results in enumerate(per_worker):
            writer.write_all(family, results, worker_id=worker_id)
        logger.info(f"Wrote {writer.count} measurements")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(settings)
    try:
        return _run(args)
    except HarnessError as e:
        logger.error(f"Benchmark aborted: {e}")
        return 1
    except KeyboardInterrupt:
        print("[worker] interrupted", file=sys.stderr)
        return 130
