"""
Tests for RequestExecutor against in-process asyncio servers.

Covers:
- Happy path: Content-Length, chunked and read-to-EOF bodies
- Any status code is a success carrying status, headers and body
- Request encoding: verbatim headers, Content-Length, Connection: close
- Failure mode: refused connection, timeout, malformed response,
  unsupported protocol
"""

import socket

import pytest

from fanout.core.engines import RequestExecutor, Timeouts
from fanout.core.rendering import render
from fanout.core.results import RequestFailure, RequestSuccess

from tests.unit.mocks import HTTPTestServer


def unused_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


def local_request(port: int, method: str = "GET", body: str = "", headers: str = ""):
    return render(
        f"{method} /items?id=ID HTTP/1.1\r\nHost: 127.0.0.1:{port}\r\n{headers}\r\n{body}",
        {"ID": "7"},
    )


class TestRequestExecutorResponses:
    @pytest.mark.asyncio
    async def test_reads_content_length_body(self, fast_timeouts: Timeouts) -> None:
        response = b"HTTP/1.1 200 OK\r\nContent-Type: text/plain\r\nContent-Length: 5\r\n\r\nhello"

        async with HTTPTestServer(response) as server:
            result = await RequestExecutor(timeouts=fast_timeouts).execute(
                "http",
                local_request(server.port),
            )

        assert isinstance(result, RequestSuccess)
        assert result.status == 200
        assert result.body == "hello"
        assert result.headers["content-type"] == "text/plain"
        assert result.hostname == f"127.0.0.1:{server.port}"

    @pytest.mark.asyncio
    async def test_reads_chunked_body(self, fast_timeouts: Timeouts) -> None:
        response = (
            b"HTTP/1.1 200 OK\r\nTransfer-Encoding: chunked\r\n\r\n"
            b"5\r\nhello\r\n6;ext=1\r\n world\r\n0\r\n\r\n"
        )

        async with HTTPTestServer(response) as server:
            result = await RequestExecutor(timeouts=fast_timeouts).execute(
                "http",
                local_request(server.port),
            )

        assert isinstance(result, RequestSuccess)
        assert result.body == "hello world"

    @pytest.mark.asyncio
    async def test_reads_body_until_close(self, fast_timeouts: Timeouts) -> None:
        response = b"HTTP/1.0 200 OK\r\nContent-Type: text/plain\r\n\r\nno length"

        async with HTTPTestServer(response) as server:
            result = await RequestExecutor(timeouts=fast_timeouts).execute(
                "http",
                local_request(server.port),
            )

        assert isinstance(result, RequestSuccess)
        assert result.body == "no length"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [301, 404, 500, 599])
    async def test_any_status_is_a_success(self, status: int, fast_timeouts: Timeouts) -> None:
        response = f"HTTP/1.1 {status} Whatever\r\nContent-Length: 2\r\n\r\nno".encode()

        async with HTTPTestServer(response) as server:
            result = await RequestExecutor(timeouts=fast_timeouts).execute(
                "http",
                local_request(server.port),
            )

        assert isinstance(result, RequestSuccess)
        assert result.status == status
        assert result.body == "no"

    @pytest.mark.asyncio
    async def test_skips_interim_responses(self, fast_timeouts: Timeouts) -> None:
        response = b"HTTP/1.1 100 Continue\r\n\r\nHTTP/1.1 201 Created\r\nContent-Length: 0\r\n\r\n"

        async with HTTPTestServer(response) as server:
            result = await RequestExecutor(timeouts=fast_timeouts).execute(
                "http",
                local_request(server.port),
            )

        assert isinstance(result, RequestSuccess)
        assert result.status == 201
        assert result.body == ""

    @pytest.mark.asyncio
    async def test_joins_repeated_headers(self, fast_timeouts: Timeouts) -> None:
        response = b"HTTP/1.1 204 No Content\r\nSet-Cookie: a=1\r\nSet-Cookie: b=2\r\n\r\n"

        async with HTTPTestServer(response) as server:
            result = await RequestExecutor(timeouts=fast_timeouts).execute(
                "http",
                local_request(server.port),
            )

        assert isinstance(result, RequestSuccess)
        assert result.headers["set-cookie"] == "a=1, b=2"


class TestRequestExecutorEncoding:
    @pytest.mark.asyncio
    async def test_sends_rendered_request(self, fast_timeouts: Timeouts) -> None:
        response = b"HTTP/1.1 200 OK\r\nContent-Length: 0\r\n\r\n"

        async with HTTPTestServer(response) as server:
            await RequestExecutor(timeouts=fast_timeouts).execute(
                "http",
                local_request(
                    server.port,
                    method="POST",
                    body="{\"id\": \"ID\"}",
                    headers="X-Trace: ID\r\n",
                ),
            )

        sent = server.requests[0].decode()

        assert sent.startswith("POST /items?id=7 HTTP/1.1\r\n")
        assert f"Host: 127.0.0.1:{server.port}\r\n" in sent
        assert "X-Trace: 7\r\n" in sent
        assert "Content-Length: 11\r\n" in sent
        assert "Connection: close\r\n" in sent
        assert sent.endswith("\r\n\r\n{\"id\": \"7\"}")

    @pytest.mark.asyncio
    async def test_keeps_template_content_length_and_connection(self, fast_timeouts: Timeouts) -> None:
        response = b"HTTP/1.1 200 OK\r\nContent-Length: 0\r\n\r\n"

        async with HTTPTestServer(response) as server:
            await RequestExecutor(timeouts=fast_timeouts).execute(
                "http",
                local_request(
                    server.port,
                    method="PUT",
                    body="abc",
                    headers="content-length: 3\r\nconnection: close\r\n",
                ),
            )

        sent = server.requests[0].decode().lower()

        assert sent.count("content-length") == 1
        assert sent.count("connection") == 1

    @pytest.mark.asyncio
    async def test_no_body_sends_no_content_length(self, fast_timeouts: Timeouts) -> None:
        response = b"HTTP/1.1 200 OK\r\nContent-Length: 0\r\n\r\n"

        async with HTTPTestServer(response) as server:
            await RequestExecutor(timeouts=fast_timeouts).execute(
                "http",
                local_request(server.port),
            )

        assert b"content-length" not in server.requests[0].lower()


class TestRequestExecutorFailures:
    @pytest.mark.asyncio
    async def test_refused_connection_is_a_failure(self, fast_timeouts: Timeouts) -> None:
        result = await RequestExecutor(timeouts=fast_timeouts).execute(
            "http",
            local_request(unused_port()),
        )

        assert isinstance(result, RequestFailure)
        assert result.error

    @pytest.mark.asyncio
    async def test_timeout_is_a_failure(self) -> None:
        response = b"HTTP/1.1 200 OK\r\nContent-Length: 0\r\n\r\n"
        timeouts = Timeouts(connect_timeout=1, request_timeout=0.1)

        async with HTTPTestServer(response, delay=1) as server:
            result = await RequestExecutor(timeouts=timeouts).execute(
                "http",
                local_request(server.port),
            )

        assert isinstance(result, RequestFailure)
        assert "timed out" in result.error

    @pytest.mark.asyncio
    async def test_malformed_status_line_is_a_failure(self, fast_timeouts: Timeouts) -> None:
        async with HTTPTestServer(b"garbage\r\n\r\n") as server:
            result = await RequestExecutor(timeouts=fast_timeouts).execute(
                "http",
                local_request(server.port),
            )

        assert isinstance(result, RequestFailure)
        assert "Invalid status line" in result.error

    @pytest.mark.asyncio
    async def test_empty_response_is_a_failure(self, fast_timeouts: Timeouts) -> None:
        async with HTTPTestServer(b"") as server:
            result = await RequestExecutor(timeouts=fast_timeouts).execute(
                "http",
                local_request(server.port),
            )

        assert isinstance(result, RequestFailure)

    @pytest.mark.asyncio
    async def test_truncated_body_is_a_failure(self, fast_timeouts: Timeouts) -> None:
        response = b"HTTP/1.1 200 OK\r\nContent-Length: 50\r\n\r\nshort"

        async with HTTPTestServer(response) as server:
            result = await RequestExecutor(timeouts=fast_timeouts).execute(
                "http",
                local_request(server.port),
            )

        assert isinstance(result, RequestFailure)

    @pytest.mark.asyncio
    async def test_unsupported_protocol_is_a_failure(self, fast_timeouts: Timeouts) -> None:
        result = await RequestExecutor(timeouts=fast_timeouts).execute(
            "ftp",
            local_request(80),
        )

        assert isinstance(result, RequestFailure)
        assert "Unsupported protocol" in result.error


def test_timeouts_from_env() -> None:
    from fanout.env import Env

    timeouts = Timeouts.from_env(
        Env(
            FANOUT_CONNECT_TIMEOUT="2s",
            FANOUT_REQUEST_TIMEOUT="1m",
        )
    )

    assert timeouts.connect_timeout == 2
    assert timeouts.request_timeout == 60
