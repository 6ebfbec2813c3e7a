from typing import Protocol


class ObjectStore(Protocol):
    async def put(self, key: str, content: bytes) -> None:
        ...

    async def close(self) -> None:
        ...
