import uuid

import orjson

from fanout.core.errors import PersistenceError
from fanout.logging import Logger
from fanout.logging.fanout_logging_models import SinkDebug, SinkError
from fanout.stores import ObjectStore

from .execution_result import ExecutionResult, RequestSuccess


class ResultSink:
    def __init__(
        self,
        store: ObjectStore,
        logger: Logger | None = None,
    ) -> None:
        self._store = store
        self._logger = logger or Logger()

    def to_key(self, outcome: ExecutionResult) -> str:
        if isinstance(outcome, RequestSuccess):
            return f"responses/{outcome.hostname}-{uuid.uuid4()}.json"

        return f"errors/{uuid.uuid4()}.json"

    async def persist(self, outcome: ExecutionResult) -> str:
        key = self.to_key(outcome)
        content = orjson.dumps(
            outcome.to_record(),
            option=orjson.OPT_INDENT_2,
        )

        try:
            await self._store.put(key, content)

        except Exception as err:
            await self._logger.log(
                SinkError(
                    message=f"Failed to persist result to {key}",
                    error=str(err),
                ),
                name="fanout.results",
            )

            raise PersistenceError(key, err) from err

        await self._logger.log(
            SinkDebug(
                message="Persisted result",
                key=key,
            ),
            name="fanout.results",
        )

        return key
