from typing import Protocol

from .models import WorkPacket


class Invoker(Protocol):
    async def invoke(self, identity: str, packet: WorkPacket) -> None:
        ...
