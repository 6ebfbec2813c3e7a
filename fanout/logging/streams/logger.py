from __future__ import annotations

import asyncio
import sys
from typing import (
    Callable,
    Dict,
    TypeVar,
)

from fanout.logging.models import Entry, Log

from .logger_context import LoggerContext

T = TypeVar('T', bound=Entry)


class Logger:
    """
    Async structured logger. Each logger name ("fanout.dispatch",
    "fanout.requests", ...) gets its own context and stream, so names can
    be disabled or pointed at a log file independently.
    """

    def __init__(self) -> None:
        self._contexts: Dict[str, LoggerContext] = {}

    def context(
        self,
        name: str = 'default',
        template: str | None = None,
        path: str | None = None,
        persistent: bool = True,
    ) -> LoggerContext:
        context = self._contexts.get(name)

        if context is None:
            context = LoggerContext(
                name,
                template=template,
                path=path,
                persistent=persistent,
            )
            self._contexts[name] = context

        else:
            context.stream.template = template or context.stream.template
            context.stream.path = path or context.stream.path

        return context

    async def log(
        self,
        entry: T,
        name: str = 'default',
        template: str | None = None,
        path: str | None = None,
        filter: Callable[[T], bool] | None = None,
    ):
        frame = sys._getframe(1)

        async with self.context(name) as stream:
            await stream.write(
                Log(
                    entry=entry,
                    filename=frame.f_code.co_filename,
                    function_name=frame.f_code.co_name,
                    line_number=frame.f_lineno,
                ),
                template=template,
                path=path,
                filter=filter,
            )

    async def close(self):
        if self._contexts:
            await asyncio.gather(*[
                context.stream.close() for context in self._contexts.values()
            ])
