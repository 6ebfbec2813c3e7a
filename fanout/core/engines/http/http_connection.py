import asyncio
from typing import Dict, Tuple

from fanout.core.errors import ResponseParseError

NEW_LINE = "\r\n"


class HTTPConnection:
    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
    ) -> None:
        self.reader = reader
        self.writer = writer

    def write(self, data: bytes):
        self.writer.write(data)

    async def drain(self):
        await self.writer.drain()

    async def readline(self) -> bytes:
        return await self.reader.readline()

    async def readexactly(self, size: int) -> bytes:
        return await self.reader.readexactly(size)

    async def read_to_end(self) -> bytes:
        return await self.reader.read()

    async def read_status(self) -> int:
        status_line = await self.reader.readline()
        if not status_line:
            raise ResponseParseError("Server closed the connection without a response")

        status_parts = status_line.split()
        if len(status_parts) < 2 or not status_parts[0].startswith(b"HTTP/"):
            raise ResponseParseError(f"Invalid status line: {status_line!r}")

        try:
            return int(status_parts[1])

        except ValueError:
            raise ResponseParseError(f"Invalid status code: {status_parts[1]!r}")

    async def read_headers(self) -> Dict[str, str]:
        headers: Dict[str, str] = {}

        while True:
            line = await self.reader.readline()
            if line in (b"\r\n", b"\n", b""):
                return headers

            header_name, separator, header_value = line.decode("iso-8859-1").partition(":")
            if not separator:
                raise ResponseParseError(f"Invalid header line: {line!r}")

            header_name = header_name.strip().lower()
            header_value = header_value.strip()

            if existing := headers.get(header_name):
                header_value = f"{existing}, {header_value}"

            headers[header_name] = header_value

    async def read_response_head(self) -> Tuple[int, Dict[str, str]]:
        status = await self.read_status()
        headers = await self.read_headers()

        # Interim responses carry no body, the final response follows them.
        while 100 <= status < 200 and status != 101:
            status = await self.read_status()
            headers = await self.read_headers()

        return status, headers

    async def read_chunked(self) -> bytes:
        body = bytearray()

        while True:
            size_line = await self.reader.readline()
            if not size_line:
                raise ResponseParseError("Connection closed while reading a chunk")

            try:
                chunk_size = int(size_line.split(b";")[0].strip(), 16)

            except ValueError:
                raise ResponseParseError(f"Invalid chunk size: {size_line!r}")

            if not chunk_size:
                # trailers end with an empty line
                await self.read_headers()
                break

            chunk = await self.reader.readexactly(chunk_size + 2)
            body.extend(chunk[:-2])

        return bytes(body)

    def close(self):
        if self.writer.is_closing() is False:
            self.writer.close()
