import asyncio
from typing import Dict, List

from fanout.core.engines import RequestExecutor
from fanout.core.errors import PersistenceError, RenderError
from fanout.core.rendering import render
from fanout.core.results import (
    ExecutionResult,
    RequestFailure,
    ResultSink,
)
from fanout.logging import Logger
from fanout.logging.fanout_logging_models import (
    DispatchDebug,
    DispatchError,
    DispatchInfo,
)

from .invoker import Invoker
from .models import DispatchReport, WorkPacket
from .split import split_packet


class FanOutDispatcher:
    def __init__(
        self,
        invoker: Invoker,
        sink: ResultSink,
        executor: RequestExecutor,
        logger: Logger | None = None,
    ) -> None:
        self._invoker = invoker
        self._sink = sink
        self._executor = executor
        self._logger = logger or Logger()

    async def run(
        self,
        packet: WorkPacket,
        identity: str,
    ) -> DispatchReport:
        plan = split_packet(packet)

        await self._logger.log(
            DispatchInfo(
                message="Claimed local work",
                identity=identity,
                claimed=len(plan.local),
                delegated=plan.delegated,
            ),
            name="fanout.dispatch",
        )

        # Continuations are not awaited for their work, only for the
        # enqueue call to complete before this invocation returns.
        dispatches = [
            asyncio.ensure_future(
                self._dispatch(identity, continuation)
            ) for continuation in plan.continuations
        ]

        results: List[ExecutionResult | BaseException] = await asyncio.gather(
            *[
                self._process(
                    packet.protocol,
                    packet.raw_request_template,
                    payload,
                ) for payload in plan.local
            ],
            return_exceptions=True,
        )

        dispatched: List[bool] = await asyncio.gather(*dispatches)

        report = DispatchReport(
            identity=identity,
            claimed=len(plan.local),
            continuations=len(dispatched),
            dispatch_errors=dispatched.count(False),
        )

        unexpected: List[BaseException] = []
        for result in results:
            if isinstance(result, PersistenceError):
                report.persistence_errors += 1

            elif isinstance(result, BaseException):
                unexpected.append(result)

            elif result.successful:
                report.succeeded += 1

            else:
                report.failed += 1

        if unexpected:
            raise unexpected[0]

        return report

    async def _process(
        self,
        protocol: str,
        raw_request_template: str,
        payload: Dict[str, str],
    ) -> ExecutionResult:
        try:
            rendered_request = render(raw_request_template, payload)
            outcome = await self._executor.execute(protocol, rendered_request)

        except RenderError as err:
            outcome = RequestFailure(error=str(err))

        await self._sink.persist(outcome)

        return outcome

    async def _dispatch(
        self,
        identity: str,
        packet: WorkPacket,
    ) -> bool:
        try:
            await self._invoker.invoke(identity, packet)

        except Exception as err:
            await self._logger.log(
                DispatchError(
                    message="Failed to trigger continuation invocation",
                    identity=identity,
                    payloads=len(packet.payloads),
                    error=str(err),
                ),
                name="fanout.dispatch",
            )

            return False

        await self._logger.log(
            DispatchDebug(
                message="Triggered continuation invocation",
                identity=identity,
                claimed=0,
                delegated=len(packet.payloads),
            ),
            name="fanout.dispatch",
        )

        return True
