from .logger_stream import LoggerStream


class LoggerContext:
    def __init__(
        self,
        name: str,
        template: str | None = None,
        path: str | None = None,
        persistent: bool = True,
    ) -> None:
        self.name = name
        self.persistent = persistent
        self.stream = LoggerStream(
            name,
            template=template,
            path=path,
        )

    async def __aenter__(self):
        return self.stream

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        # Persistent contexts keep their files open until Logger.close().
        if self.persistent is False:
            await self.stream.close()
