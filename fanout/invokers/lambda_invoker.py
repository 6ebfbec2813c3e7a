import asyncio
import functools
from concurrent.futures import ThreadPoolExecutor

import boto3
import orjson
import psutil

from fanout.core.dispatch import WorkPacket


class LambdaInvoker:
    def __init__(
        self,
        region_name: str | None = None,
        max_workers: int | None = None,
    ) -> None:
        if max_workers is None:
            max_workers = psutil.cpu_count(logical=False) or 1

        self.region_name = region_name

        self._executor = ThreadPoolExecutor(max_workers=max_workers)
        self._loop: asyncio.AbstractEventLoop | None = None
        self._connect_lock = asyncio.Lock()
        self._client = None

    async def connect(self):
        async with self._connect_lock:
            if self._client is not None:
                return

            self._loop = asyncio.get_running_loop()
            self._client = await self._loop.run_in_executor(
                self._executor,
                self._create_client,
            )

    def _create_client(self):
        # Sessions are not thread safe, so each client gets its own.
        session = boto3.session.Session(region_name=self.region_name)
        return session.client("lambda")

    async def invoke(self, identity: str, packet: WorkPacket) -> None:
        if self._client is None:
            await self.connect()

        # "Event" only waits for Lambda to queue the invocation.
        await self._loop.run_in_executor(
            self._executor,
            functools.partial(
                self._client.invoke,
                FunctionName=identity,
                InvocationType="Event",
                Payload=orjson.dumps(packet.to_invocation_input()),
            ),
        )

    async def close(self):
        self._executor.shutdown(wait=True)
