from typing import Any

from fanout.core.dispatch import (
    DispatchReport,
    FanOutDispatcher,
    Invoker,
    WorkPacket,
)
from fanout.core.engines import RequestExecutor, Timeouts
from fanout.core.errors import ConfigurationError, InputContractError
from fanout.core.results import ResultSink
from fanout.env import Env
from fanout.invokers import LambdaInvoker
from fanout.logging import Logger, LoggingConfig
from fanout.logging.fanout_logging_models import InputFatal
from fanout.stores import ObjectStore, S3Store


def configure_logging(env: Env) -> Logger:
    LoggingConfig().update(
        log_level=env.FANOUT_LOG_LEVEL,
        log_output=env.FANOUT_LOG_OUTPUT,
    )

    return Logger()


def create_dispatcher(
    env: Env,
    invoker: Invoker,
    store: ObjectStore,
    logger: Logger,
) -> FanOutDispatcher:
    return FanOutDispatcher(
        invoker,
        ResultSink(store, logger=logger),
        RequestExecutor(
            timeouts=Timeouts.from_env(env),
            logger=logger,
        ),
        logger=logger,
    )


async def run_invocation(
    invocation_input: Any,
    identity: str,
    env: Env,
    invoker: Invoker | None = None,
    store: ObjectStore | None = None,
) -> DispatchReport:
    logger = configure_logging(env)

    try:
        packet = WorkPacket.from_invocation_input(invocation_input)

    except InputContractError as err:
        await logger.log(
            InputFatal(
                message="Invalid invocation input, quitting out",
                error=str(err),
            ),
            name="fanout.dispatch",
        )
        await logger.close()

        raise

    s3_store: S3Store | None = None
    if store is None:
        if env.FANOUT_S3_BUCKET is None:
            await logger.close()
            raise ConfigurationError("FANOUT_S3_BUCKET is not set")

        store = s3_store = S3Store(
            env.FANOUT_S3_BUCKET,
            region_name=env.FANOUT_AWS_REGION,
            max_workers=env.FANOUT_EXECUTOR_MAX_THREADS,
        )

    lambda_invoker: LambdaInvoker | None = None
    if invoker is None:
        invoker = lambda_invoker = LambdaInvoker(
            region_name=env.FANOUT_AWS_REGION,
            max_workers=env.FANOUT_EXECUTOR_MAX_THREADS,
        )

    dispatcher = create_dispatcher(env, invoker, store, logger)

    try:
        # AWS clients are created before local work and continuations
        # start using them concurrently.
        if s3_store:
            await s3_store.connect()

        if lambda_invoker:
            await lambda_invoker.connect()

        return await dispatcher.run(packet, identity)

    finally:
        if lambda_invoker:
            await lambda_invoker.close()

        await store.close()
        await logger.close()
