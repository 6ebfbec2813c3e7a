import asyncio
from typing import List, Set

import orjson

from fanout.core.dispatch import DispatchReport, FanOutDispatcher, WorkPacket


class LocalInvoker:
    """
    Runs continuation invocations as tasks on the current event loop so a
    whole fan-out tree can execute in one process. Packets are passed through
    the same JSON encoding a remote invocation would use.
    """

    def __init__(self) -> None:
        self._dispatcher: FanOutDispatcher | None = None
        self._pending: Set[asyncio.Task] = set()
        self._reports: List[DispatchReport] = []

    def bind(self, dispatcher: FanOutDispatcher):
        self._dispatcher = dispatcher

    async def invoke(self, identity: str, packet: WorkPacket) -> None:
        if self._dispatcher is None:
            raise RuntimeError("LocalInvoker has no dispatcher bound")

        invocation_input = orjson.loads(
            orjson.dumps(packet.to_invocation_input())
        )

        self._pending.add(
            asyncio.create_task(
                self._dispatcher.run(
                    WorkPacket.from_invocation_input(invocation_input),
                    identity,
                )
            )
        )

    async def wait(self) -> List[DispatchReport]:
        """
        Wait for every invocation in the tree, including those queued while
        waiting, then raise the first invocation failure if there was one.
        """
        errors: List[BaseException] = []

        while self._pending:
            running = list(self._pending)
            self._pending.difference_update(running)

            for result in await asyncio.gather(*running, return_exceptions=True):
                if isinstance(result, BaseException):
                    errors.append(result)

                else:
                    self._reports.append(result)

        if errors:
            raise errors[0]

        return self._reports

    async def close(self):
        await self.wait()
