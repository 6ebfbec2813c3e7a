import asyncio
import functools
from concurrent.futures import ThreadPoolExecutor

import boto3
import psutil


class S3Store:
    def __init__(
        self,
        bucket_name: str,
        region_name: str | None = None,
        max_workers: int | None = None,
    ) -> None:
        if max_workers is None:
            max_workers = psutil.cpu_count(logical=False) or 1

        self.bucket_name = bucket_name
        self.region_name = region_name

        self._executor = ThreadPoolExecutor(max_workers=max_workers)
        self._loop: asyncio.AbstractEventLoop | None = None
        self._connect_lock = asyncio.Lock()
        self.client = None

    async def connect(self):
        async with self._connect_lock:
            if self.client is not None:
                return

            self._loop = asyncio.get_running_loop()
            self.client = await self._loop.run_in_executor(
                self._executor,
                self._create_client,
            )

    def _create_client(self):
        session = boto3.session.Session(region_name=self.region_name)
        return session.client("s3")

    async def put(self, key: str, content: bytes) -> None:
        if self.client is None:
            await self.connect()

        await self._loop.run_in_executor(
            self._executor,
            functools.partial(
                self.client.put_object,
                Bucket=self.bucket_name,
                Key=key,
                Body=content,
                ContentType="application/json",
            ),
        )

    async def close(self) -> None:
        self._executor.shutdown(wait=True)
