"""
gcp_log_transport.transport.sinks

Byte sinks for serialized records.

Responsibilities:
- Write newline-delimited JSON to a file descriptor or a file path.
- Hand every record to the descriptor as soon as it is written.
- Honour `append`, `sync` and `mkdir` destination options.
"""

from __future__ import annotations

import os
from typing import BinaryIO


class FileSink:
    """
    Write-through writer over an fd or a path.

    Each `write` leaves the process before returning. With `sync=True` a path
    sink is additionally fsynced so the record survives a host crash.
    An fd sink never closes the descriptor it was given (stdout stays usable).
    """

    def __init__(
        self,
        dest: int | str | os.PathLike[str] = 1,
        *,
        append: bool = True,
        sync: bool = False,
        mkdir: bool = False,
    ) -> None:
        self.dest = dest
        self._closed = False

        self._file: BinaryIO
        if isinstance(dest, int):
            self._file = open(dest, "wb", closefd=False)  # noqa: SIM115
            # Pipes and ttys reject fsync.
            self._sync = False
        else:
            path = os.fspath(dest)
            if mkdir:
                os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
            self._file = open(path, "ab" if append else "wb")  # noqa: SIM115
            self._sync = sync

    def __repr__(self) -> str:
        return f"FileSink(dest={self.dest!r})"

    @property
    def closed(self) -> bool:
        return self._closed

    def write(self, data: bytes) -> int:
        written = self._file.write(data)
        # BufferedWriter.flush retries short writes until the record is out.
        self._file.flush()
        if self._sync:
            os.fsync(self._file.fileno())
        return written

    def flush(self) -> None:
        if not self._closed:
            self._file.flush()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._file.flush()
        finally:
            self._file.close()


# --- Module Notes -----------------------------------------------------------
# Writes are not retried; an OSError surfaces to the transport and its caller.
