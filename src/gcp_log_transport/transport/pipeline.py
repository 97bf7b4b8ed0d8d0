"""
gcp_log_transport.transport.pipeline

Linear transport: source -> transform -> serialize -> sink.

Responsibilities:
- Build a transport from destination options (`compose`).
- Push records through every stage in arrival order.
- Surface any stage failure and refuse further writes afterwards.
"""

from __future__ import annotations

import inspect
import json
from collections.abc import AsyncIterable, Iterable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from gcp_log_transport.constants import DEFAULT_IGNORE_KEYS
from gcp_log_transport.exceptions import TransportClosedError
from gcp_log_transport.transport.records import TransformConfig
from gcp_log_transport.transport.sinks import FileSink
from gcp_log_transport.transport.transform import transform

Chunk = str | bytes | Mapping[str, Any]


class TransportOptions(BaseModel):
    """
    Options accepted by `compose`; unknown keys (e.g. project_id) are ignored.
    """

    model_config = ConfigDict(extra="ignore", arbitrary_types_allowed=True, frozen=True)

    # fd number, path, or an object with a `write` method receiving dicts.
    destination: Any = 1
    ignore_keys: tuple[str, ...] = Field(default=DEFAULT_IGNORE_KEYS)
    append: bool = True
    sync: bool = False
    mkdir: bool = False

    @field_validator("ignore_keys", mode="before")
    @classmethod
    def _default_ignore_keys(cls, value: Any) -> Any:
        return DEFAULT_IGNORE_KEYS if value is None else value

    @field_validator("destination")
    @classmethod
    def _check_destination(cls, value: Any) -> Any:
        if value is None:
            return 1
        if isinstance(value, str) and value.isdigit():
            return int(value)
        if isinstance(value, (int, str)) or callable(getattr(value, "write", None)):
            return value
        raise ValueError("destination must be an fd, a path or an object with write()")


def _refuse_awaitable(result: Any, method: str) -> None:
    # Async destinations must be fed through `Transport.consume`.
    if not inspect.isawaitable(result):
        return
    close = getattr(result, "close", None)
    if callable(close):
        close()
    raise TypeError(f"destination.{method} returned an awaitable; use Transport.consume")


def serialize(record: Mapping[str, Any]) -> bytes:
    return (json.dumps(record, separators=(",", ":"), ensure_ascii=False, default=str) + "\n").encode("utf-8")


class Transport:
    """
    One pipeline instance owning one sink.

    `serialized=False` hands record dicts to the sink unchanged.
    """

    def __init__(self, *, sink: Any, config: TransformConfig, serialized: bool = True) -> None:
        self._sink = sink
        self._config = config
        self._serialized = serialized
        self._closed = False
        self._error: BaseException | None = None

    @property
    def sink(self) -> Any:
        return self._sink

    @property
    def config(self) -> TransformConfig:
        return self._config

    @property
    def closed(self) -> bool:
        return self._closed

    def _ensure_open(self) -> None:
        if self._closed:
            raise TransportClosedError("transport is closed") from self._error

    def _fail(self, exc: BaseException) -> None:
        self._error = exc
        self.close()

    def _push(self, chunk: Chunk) -> Any:
        record = transform(chunk, self._config).to_dict()
        payload: Any = serialize(record) if self._serialized else record
        return self._sink.write(payload)

    def write(self, chunk: Chunk) -> None:
        """
        Transform and write one record synchronously.
        """

        self._ensure_open()
        try:
            result = self._push(chunk)
        except Exception as exc:
            self._fail(exc)
            raise
        _refuse_awaitable(result, "write")

    async def consume(self, source: AsyncIterable[Chunk] | Iterable[Chunk]) -> None:
        """
        Pull records from `source` one at a time, waiting on sink backpressure.
        """

        if isinstance(source, AsyncIterable):
            async for chunk in source:
                await self._apush(chunk)
        else:
            for chunk in source:
                await self._apush(chunk)
        result = self._flush_sink()
        if inspect.isawaitable(result):
            await result

    async def _apush(self, chunk: Chunk) -> None:
        self._ensure_open()
        try:
            result = self._push(chunk)
            if inspect.isawaitable(result):
                await result
            drain = getattr(self._sink, "drain", None)
            if callable(drain):
                waiter = drain()
                if inspect.isawaitable(waiter):
                    await waiter
        except Exception as exc:
            self._fail(exc)
            raise

    def _flush_sink(self) -> Any:
        self._ensure_open()
        flush = getattr(self._sink, "flush", None)
        return flush() if callable(flush) else None

    def flush(self) -> None:
        _refuse_awaitable(self._flush_sink(), "flush")

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        # Object destinations are owned by the caller; only our file sinks are closed.
        if isinstance(self._sink, FileSink):
            self._sink.close()

    def __enter__(self) -> Transport:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def compose(**options: Any) -> Transport:
    """
    Build a transport from destination options.

    Without a destination, records go to stdout (fd 1) as NDJSON.
    """

    opts = TransportOptions(**options)
    config = TransformConfig.from_keys(opts.ignore_keys)

    if callable(getattr(opts.destination, "write", None)):
        return Transport(sink=opts.destination, config=config, serialized=False)

    sink = FileSink(opts.destination, append=opts.append, sync=opts.sync, mkdir=opts.mkdir)
    return Transport(sink=sink, config=config, serialized=True)


# --- Module Notes -----------------------------------------------------------
# Only the transport writes to its sink, so no locking is needed under asyncio.
