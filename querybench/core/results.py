"""
Results output.

Writes one JSON object per measurement (JSON lines). No statistics are
computed; downstream tooling aggregates.
"""

import logging
import sys
from pathlib import Path
from typing import IO, Iterable, Union

from querybench.models.measurement import Measurement, MeasurementRecord, QueryFamily

logger = logging.getLogger(__name__)


class MeasurementWriter:
    """JSON-lines writer for measurement records."""

    def __init__(
        self,
        target: Union[str, Path, IO[str], None] = None,
        *,
        include_payload: bool = True,
    ) -> None:
        """
        Args:
            target: Output path, an open text stream, or None/"-" for stdout.
            include_payload: Write the serialized payload alongside timings.
        """
        self.include_payload = include_payload
        self._owns_stream = False
        self._count = 0
        if target is None or target == "-":
            self._stream: IO[str] = sys.stdout
        elif isinstance(target, (str, Path)):
            self._stream = open(target, "w", encoding="utf-8")
            self._owns_stream = True
            logger.info(f"Writing measurements to {target}")
        else:
            self._stream = target

    @property
    def count(self) -> int:
        return self._count

    def write(self, record: MeasurementRecord) -> None:
        self._stream.write(record.model_dump_json())
        self._stream.write("\n")
        self._count += 1

    def write_measurement(
        self,
        identifier: str,
        family: QueryFamily,
        measurement: Measurement,
        *,
        worker_id: int = 0,
    ) -> MeasurementRecord:
        record = MeasurementRecord.from_measurement(
            identifier,
            family,
            measurement,
            include_payload=self.include_payload,
            worker_id=worker_id,
        )
        self.write(record)
        return record

    def write_all(
        self,
        family: QueryFamily,
        results: Iterable[tuple[str, Measurement]],
        *,
        worker_id: int = 0,
    ) -> int:
        """Write every (identifier, measurement) pair; return how many."""
        n = 0
        for identifier, measurement in results:
            self.write_measurement(identifier, family, measurement, worker_id=worker_id)
            n += 1
        return n

    def close(self) -> None:
        self._stream.flush()
        if self._owns_stream:
            self._stream.close()

    def __enter__(self) -> "MeasurementWriter":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
