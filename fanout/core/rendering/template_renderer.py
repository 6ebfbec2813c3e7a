import re
from typing import Dict, List, Tuple

from fanout.core.errors import MalformedRequestError, MissingHostError

from .rendered_request import RenderedRequest

Payload = Dict[str, str]

line_pattern = re.compile(r"\r?\n")


def substitute(raw_request_template: str, payload: Payload) -> str:
    """
    Replace every literal occurrence of each payload key in the template,
    one key at a time in the payload's insertion order. Keys are not
    patterns, and a later key will match text inserted by an earlier one.
    """
    rendered = raw_request_template
    for placeholder, value in payload.items():
        rendered = rendered.replace(placeholder, str(value))

    return rendered


def parse_request(raw_request: str) -> RenderedRequest:
    lines = line_pattern.split(raw_request)

    request_line = lines[0].split()
    if len(request_line) < 2:
        raise MalformedRequestError(
            f"Invalid request line: {lines[0]!r}"
        )

    method = request_line[0]
    path = request_line[1]
    version = request_line[2] if len(request_line) > 2 else "HTTP/1.1"

    headers, body_start = _parse_headers(lines)

    host: str | None = None
    for header_name, header_value in headers.items():
        if header_name.lower() == "host":
            host = header_value

    if not host:
        raise MissingHostError()

    body = "\r\n".join(lines[body_start:])

    return RenderedRequest(
        method=method,
        path=path,
        host=host,
        headers=headers,
        body=body if body else None,
        version=version,
    )


def _parse_headers(lines: List[str]) -> Tuple[Dict[str, str], int]:
    headers: Dict[str, str] = {}

    for idx, line in enumerate(lines[1:], start=1):
        if line == "":
            return headers, idx + 1

        header_name, separator, header_value = line.partition(":")
        if not separator:
            raise MalformedRequestError(
                f"Invalid header line: {line!r}"
            )

        headers[header_name.strip()] = header_value.strip()

    return headers, len(lines)


def render(raw_request_template: str, payload: Payload) -> RenderedRequest:
    return parse_request(
        substitute(raw_request_template, payload)
    )
