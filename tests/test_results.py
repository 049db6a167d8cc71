"""
Unit tests for the JSON-lines measurement writer.
"""

from __future__ import annotations

import io
import json
from pathlib import Path

from querybench.core.results import MeasurementWriter
from querybench.models import Measurement, QueryFamily
from tests.fakes import MOVIE_ID, OTHER_MOVIE_ID


class TestMeasurementWriter:
    """Tests for MeasurementWriter."""

    def test_writes_one_line_per_measurement(self) -> None:
        stream = io.StringIO()
        writer = MeasurementWriter(stream)

        n = writer.write_all(
            QueryFamily.MOVIE,
            [
                (MOVIE_ID, Measurement(0.001, '{"id": "a"}')),
                (OTHER_MOVIE_ID, Measurement(0.002, '{"id": "b"}')),
            ],
            worker_id=2,
        )

        lines = stream.getvalue().splitlines()
        assert n == 2
        assert writer.count == 2
        first = json.loads(lines[0])
        assert first["identifier"] == MOVIE_ID
        assert first["family"] == "Movie"
        assert first["duration_ms"] == 1.0
        assert first["payload"] == '{"id": "a"}'
        assert first["worker_id"] == 2
        assert "recorded_at" in first
        assert json.loads(lines[1])["identifier"] == OTHER_MOVIE_ID

    def test_without_payload(self) -> None:
        stream = io.StringIO()
        writer = MeasurementWriter(stream, include_payload=False)

        writer.write_measurement(MOVIE_ID, QueryFamily.JSON, Measurement(0.5, "{}"))

        record = json.loads(stream.getvalue())
        assert record["payload"] is None
        assert record["family"] == "JSON"

    def test_writes_to_path(self, tmp_path: Path) -> None:
        out = tmp_path / "results.jsonl"

        with MeasurementWriter(out) as writer:
            writer.write_measurement(MOVIE_ID, QueryFamily.USER, Measurement(0.0, "{}"))

        lines = out.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 1
        assert json.loads(lines[0])["family"] == "User"

    def test_does_not_close_foreign_stream(self) -> None:
        stream = io.StringIO()
        with MeasurementWriter(stream):
            pass
        assert not stream.closed
