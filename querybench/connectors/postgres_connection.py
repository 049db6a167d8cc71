"""
Postgres Connection

Blocking single-connection facade over asyncpg. The connection owns a private
event loop and runs every call to completion on it, so from the caller's
point of view each query is one blocking round trip.
"""

import asyncio
import json
import logging
import re
from typing import Any, Mapping, Optional

import asyncpg

from querybench.config import Settings, settings as default_settings
from querybench.core.errors import (
    AlreadyClosedError,
    ConnectionOpenError,
    DecodeError,
    RowCountError,
)

logger = logging.getLogger(__name__)

_NAMED_PARAM_RE = re.compile(r":([A-Za-z_][A-Za-z0-9_]*)")
_DOLLAR_QUOTE_RE = re.compile(r"\$(?:[A-Za-z_][A-Za-z0-9_]*)?\$")


def _quoted_end(query: str, start: int) -> int:
    """Index just past the quote that closes the literal opened at `start`."""
    quote = query[start]
    i = start + 1
    while True:
        j = query.find(quote, i)
        if j == -1:
            return len(query)
        if query[j - 1] != "\\":
            return j + 1
        i = j + 1


def _skipped_span_end(query: str, i: int) -> Optional[int]:
    """
    End of a span starting at `i` that must not be rewritten, or None.

    Covers string literals, quoted identifiers, `--` and `/* */` comments,
    and `$tag$ ... $tag$` dollar-quoted bodies. Unterminated spans run to the
    end of the query.
    """
    ch = query[i]
    if ch in ("'", '"'):
        return _quoted_end(query, i)
    if query.startswith("--", i):
        end = query.find("\n", i)
        return len(query) if end == -1 else end
    if query.startswith("/*", i):
        end = query.find("*/", i + 2)
        return len(query) if end == -1 else end + 2
    if ch == "$":
        m = _DOLLAR_QUOTE_RE.match(query, i)
        if m:
            end = query.find(m.group(0), m.end())
            return len(query) if end == -1 else end + len(m.group(0))
    return None


def convert_named_placeholders(query: str) -> tuple[str, tuple[str, ...]]:
    """
    Convert `:name` placeholders to `$1, $2, ...` for asyncpg.

    Returns the converted query and the parameter names in positional order.
    A name used twice maps to the same position. `::type` casts, string
    literals, comments and dollar-quoted bodies are left alone.
    """
    result = []
    names: list[str] = []
    i = 0

    while i < len(query):
        end = _skipped_span_end(query, i)
        if end is not None:
            result.append(query[i:end])
            i = end
            continue

        ch = query[i]
        if ch == ":":
            if query.startswith("::", i):
                result.append("::")
                i += 2
                continue
            m = _NAMED_PARAM_RE.match(query, i)
            if m:
                name = m.group(1)
                if name not in names:
                    names.append(name)
                result.append(f"${names.index(name) + 1}")
                i = m.end()
                continue

        result.append(ch)
        i += 1

    return "".join(result), tuple(names)


class PostgresConnection:
    """
    One asyncpg connection driven synchronously.

    In structured mode `json`/`jsonb` columns decode to Python values so a
    row maps straight onto an entity model. In JSON mode they stay as text
    and `query_single_json` hands them back untouched.

    Not thread-safe: use one instance per worker.
    """

    def __init__(
        self,
        host: str,
        port: int,
        database: str,
        user: str,
        password: str,
        *,
        json_mode: bool = False,
        connect_timeout: float = 60.0,
        command_timeout: Optional[float] = None,
    ):
        self.host = host
        self.port = port
        self.database = database
        self.user = user
        self.password = password
        self.json_mode = json_mode
        self.connect_timeout = connect_timeout
        self.command_timeout = command_timeout

        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._conn: Optional[asyncpg.Connection] = None
        # query text -> (converted text, parameter names)
        self._prepared: dict[str, tuple[str, tuple[str, ...]]] = {}
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def connect(self) -> "PostgresConnection":
        """Open the connection. Returns self for chaining."""
        if self._conn is not None:
            return self

        loop = asyncio.new_event_loop()
        try:
            conn = loop.run_until_complete(
                asyncpg.connect(
                    host=self.host,
                    port=self.port,
                    database=self.database,
                    user=self.user,
                    password=self.password,
                    timeout=self.connect_timeout,
                    command_timeout=self.command_timeout,
                )
            )
            if not self.json_mode:
                loop.run_until_complete(self._register_json_codecs(conn))
        except Exception as e:
            loop.close()
            logger.error(
                f"Postgres connect failed: {self.user}@{self.host}:{self.port}/{self.database}: {e}"
            )
            raise ConnectionOpenError(
                f"could not connect to {self.host}:{self.port}/{self.database}: {e}"
            ) from e

        self._loop = loop
        self._conn = conn
        logger.info(
            f"Postgres connection open: {self.user}@{self.host}:{self.port}/{self.database} "
            f"(json_mode={self.json_mode})"
        )
        return self

    @staticmethod
    async def _register_json_codecs(conn: asyncpg.Connection) -> None:
        for typename in ("json", "jsonb"):
            await conn.set_type_codec(
                typename,
                encoder=json.dumps,
                decoder=json.loads,
                schema="pg_catalog",
            )

    def _prepare(self, query: str) -> tuple[str, tuple[str, ...]]:
        prepared = self._prepared.get(query)
        if prepared is None:
            prepared = convert_named_placeholders(query)
            self._prepared[query] = prepared
        return prepared

    def _fetch(self, query: str, params: Mapping[str, Any]) -> list[asyncpg.Record]:
        if self._closed:
            raise AlreadyClosedError("Postgres connection is closed")
        conn, loop = self._conn, self._loop
        if conn is None or loop is None:
            # Connect cost must stay outside timed calls.
            raise ConnectionOpenError(
                "Postgres connection is not open; call connect() first"
            )

        converted, names = self._prepare(query)
        args = [params[name] for name in names]
        return loop.run_until_complete(conn.fetch(converted, *args))

    def query_single(self, query: str, params: Mapping[str, Any]) -> dict[str, Any]:
        rows = self._fetch(query, params)
        if len(rows) != 1:
            raise RowCountError(len(rows))
        return dict(rows[0].items())

    def query_single_json(self, query: str, params: Mapping[str, Any]) -> str:
        rows = self._fetch(query, params)
        if len(rows) != 1:
            raise RowCountError(len(rows))
        row = rows[0]
        if len(row) != 1:
            raise DecodeError(f"JSON query must return one column, got {len(row)}")
        value = row[0]
        if isinstance(value, (bytes, bytearray)):
            return bytes(value).decode("utf-8")
        if not isinstance(value, str):
            raise DecodeError(
                f"JSON query must return json or text, got {type(value).__name__}"
            )
        return value

    def close(self) -> None:
        """Close the connection and its event loop. A second close raises."""
        if self._closed:
            raise AlreadyClosedError("Postgres connection already closed")
        self._closed = True

        loop, conn = self._loop, self._conn
        self._loop = None
        self._conn = None
        if loop is None:
            return
        try:
            if conn is not None:
                loop.run_until_complete(conn.close())
        finally:
            loop.close()
        logger.info(f"Postgres connection closed: {self.host}:{self.port}/{self.database}")

    def __enter__(self) -> "PostgresConnection":
        return self.connect()

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if not self._closed:
            self.close()


def connect_postgres(
    *, json_mode: bool = False, settings: Optional[Settings] = None
) -> PostgresConnection:
    """Open a Postgres connection configured from settings."""
    cfg = settings or default_settings
    logger.info(f"Connecting to {cfg.postgres_dsn} (json_mode={json_mode})")
    return PostgresConnection(
        host=cfg.POSTGRES_HOST,
        port=cfg.POSTGRES_PORT,
        database=cfg.POSTGRES_DATABASE,
        user=cfg.POSTGRES_USER,
        password=cfg.POSTGRES_PASSWORD,
        json_mode=json_mode,
        connect_timeout=cfg.POSTGRES_CONNECT_TIMEOUT,
        command_timeout=cfg.POSTGRES_COMMAND_TIMEOUT,
    ).connect()
