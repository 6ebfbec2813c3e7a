from typing import Dict

import msgspec


class RenderedRequest(msgspec.Struct, frozen=True):
    method: str
    path: str
    host: str
    headers: Dict[str, str]
    body: str | None = None
    version: str = "HTTP/1.1"

    def uri(self, protocol: str) -> str:
        return f"{protocol}://{self.host}{self.path}"
