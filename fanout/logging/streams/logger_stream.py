import asyncio
import pathlib
import sys
from collections import defaultdict
from typing import (
    BinaryIO,
    Callable,
    Dict,
    TypeVar,
)

import msgspec

from fanout.logging.config.logging_config import LoggingConfig
from fanout.logging.config.stream_type import StreamType
from fanout.logging.models import Entry, Log

T = TypeVar('T', bound=Entry)

DEFAULT_TEMPLATE = "{timestamp} - {level} - {thread_id} - {filename}:{function_name}.{line_number} - {message}"


class LoggerStream:
    """
    Writes the logs of one named logger. Entries go to stdout or stderr
    as formatted lines unless a log file path is given, in which case
    the whole Log is appended to the file as a msgspec JSON line.
    """

    def __init__(
        self,
        name: str,
        template: str | None = None,
        path: str | None = None,
    ) -> None:
        self.name = name
        self.template = template or DEFAULT_TEMPLATE
        self.path = path

        self._config = LoggingConfig()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._files: Dict[pathlib.Path, BinaryIO] = {}
        self._file_locks: Dict[pathlib.Path, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._closed = False

    def accepts(
        self,
        entry: T,
        filter: Callable[[T], bool] | None = None,
    ) -> bool:
        if self._closed or self._config.enabled(self.name, entry.level) is False:
            return False

        return filter is None or filter(entry)

    async def write(
        self,
        log: Log[T],
        template: str | None = None,
        path: str | None = None,
        filter: Callable[[T], bool] | None = None,
    ):
        if not self.accepts(log.entry, filter=filter):
            return

        if self._loop is None:
            self._loop = asyncio.get_running_loop()

        path = path or self.path
        if path:
            await self._append(log, pathlib.Path(path).absolute())
            return

        line = log.entry.to_template(
            template or self.template,
            context={
                "filename": log.filename,
                "function_name": log.function_name,
                "line_number": log.line_number,
                "thread_id": log.thread_id,
                "timestamp": log.timestamp,
            },
        )

        try:
            await self._loop.run_in_executor(
                None,
                self._write_line,
                self._config.output,
                line,
            )

        except OSError as err:
            sys.__stderr__.write(f"{log.timestamp} - {self.name} - failed to write log: {err}\n")

    def _write_line(self, output: StreamType, line: str):
        stream = sys.stdout if output == StreamType.STDOUT else sys.stderr
        stream.write(f"{line}\n")
        stream.flush()

    async def _append(self, log: Log[T], logfile_path: pathlib.Path):
        async with self._file_locks[logfile_path]:
            if logfile_path not in self._files:
                self._files[logfile_path] = await self._loop.run_in_executor(
                    None,
                    self._open,
                    logfile_path,
                )

            await self._loop.run_in_executor(
                None,
                self._write_record,
                self._files[logfile_path],
                msgspec.json.encode(log),
            )

    def _open(self, logfile_path: pathlib.Path) -> BinaryIO:
        logfile_path.parent.mkdir(parents=True, exist_ok=True)
        return open(logfile_path, "ab")

    def _write_record(self, logfile: BinaryIO, record: bytes):
        logfile.write(record + b"\n")
        logfile.flush()

    async def close(self):
        self._closed = True

        for logfile_path, logfile in list(self._files.items()):
            async with self._file_locks[logfile_path]:
                await self._loop.run_in_executor(None, logfile.close)

        self._files.clear()
