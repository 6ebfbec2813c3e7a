import asyncio
import ssl
from typing import Dict
from urllib.parse import SplitResult, urlsplit

from fanout.core.errors import ResponseParseError
from fanout.core.rendering import RenderedRequest
from fanout.core.results import ExecutionResult, RequestFailure, RequestSuccess
from fanout.logging import Logger
from fanout.logging.fanout_logging_models import (
    RequestDebug,
    RequestError,
    RequestInfo,
)

from .http_connection import NEW_LINE, HTTPConnection
from .timeouts import Timeouts

DEFAULT_PORTS = {
    "http": 80,
    "https": 443,
}


class RequestExecutor:
    def __init__(
        self,
        timeouts: Timeouts = Timeouts(),
        logger: Logger | None = None,
    ) -> None:
        self.timeouts = timeouts
        self._logger = logger or Logger()
        self._client_ssl_context: ssl.SSLContext | None = None

    async def execute(
        self,
        protocol: str,
        rendered_request: RenderedRequest,
    ) -> ExecutionResult:
        uri = rendered_request.uri(protocol)

        await self._logger.log(
            RequestDebug(
                message="Making HTTP request",
                method=rendered_request.method,
                uri=uri,
            ),
            name="fanout.requests",
        )

        try:
            result = await asyncio.wait_for(
                self._execute(
                    protocol,
                    uri,
                    rendered_request,
                ),
                timeout=self.timeouts.request_timeout,
            )

        except asyncio.TimeoutError:
            return await self._to_failure(
                f"Request to {uri} timed out"
            )

        except (
            OSError,
            EOFError,
            ValueError,
            ResponseParseError,
        ) as err:
            return await self._to_failure(
                f"{type(err).__name__}: {err}"
            )

        await self._logger.log(
            RequestInfo(
                message="Received HTTP response",
                method=rendered_request.method,
                uri=uri,
                status=result.status,
            ),
            name="fanout.requests",
        )

        return result

    async def _execute(
        self,
        protocol: str,
        uri: str,
        rendered_request: RenderedRequest,
    ) -> RequestSuccess:
        if protocol not in DEFAULT_PORTS:
            raise ValueError(f"Unsupported protocol: {protocol}")

        url = urlsplit(uri)
        if not url.hostname:
            raise ValueError(f"Invalid URI: {uri}")

        port = url.port or DEFAULT_PORTS[protocol]

        ssl_context: ssl.SSLContext | None = None
        if protocol == "https":
            ssl_context = self._get_ssl_context()

        reader, writer = await asyncio.wait_for(
            asyncio.open_connection(
                url.hostname,
                port,
                ssl=ssl_context,
            ),
            timeout=self.timeouts.connect_timeout,
        )

        connection = HTTPConnection(reader, writer)

        try:
            encoded_body: bytes | None = None
            if rendered_request.body is not None:
                encoded_body = rendered_request.body.encode()

            connection.write(
                self._encode_headers(url, rendered_request, encoded_body)
            )

            if encoded_body:
                connection.write(encoded_body)

            await connection.drain()

            status, headers = await connection.read_response_head()
            body = await self._read_body(
                connection,
                rendered_request.method,
                status,
                headers,
            )

        finally:
            connection.close()

        return RequestSuccess(
            headers=headers,
            body=body.decode(errors="replace"),
            status=status,
            hostname=rendered_request.host,
        )

    def _encode_headers(
        self,
        url: SplitResult,
        rendered_request: RenderedRequest,
        encoded_body: bytes | None,
    ) -> bytes:
        url_path = url.path or "/"
        if url.query:
            url_path += f"?{url.query}"

        header_items = f"{rendered_request.method} {url_path} {rendered_request.version}{NEW_LINE}"

        header_names = set()
        for key, value in rendered_request.headers.items():
            header_items += f"{key}: {value}{NEW_LINE}"
            header_names.add(key.lower())

        if encoded_body is not None and "content-length" not in header_names:
            header_items += f"Content-Length: {len(encoded_body)}{NEW_LINE}"

        if "connection" not in header_names:
            header_items += f"Connection: close{NEW_LINE}"

        return f"{header_items}{NEW_LINE}".encode()

    async def _read_body(
        self,
        connection: HTTPConnection,
        method: str,
        status: int,
        headers: Dict[str, str],
    ) -> bytes:
        if method.upper() == "HEAD" or status in (204, 304) or status < 200:
            return b""

        transfer_encoding = headers.get("transfer-encoding", "")
        content_length = headers.get("content-length")

        if "chunked" in transfer_encoding.lower():
            return await connection.read_chunked()

        elif content_length is not None:
            try:
                size = int(content_length)

            except ValueError:
                raise ResponseParseError(f"Invalid Content-Length: {content_length!r}")

            return await connection.readexactly(size)

        return await connection.read_to_end()

    def _get_ssl_context(self) -> ssl.SSLContext:
        if self._client_ssl_context is None:
            self._client_ssl_context = ssl.create_default_context()

        return self._client_ssl_context

    async def _to_failure(self, error: str) -> RequestFailure:
        await self._logger.log(
            RequestError(
                message="HTTP request failed",
                error=error,
            ),
            name="fanout.requests",
        )

        return RequestFailure(error=error)
