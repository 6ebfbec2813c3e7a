import pathlib
from typing import Any, Dict, List

import click
import orjson
import uvloop

from fanout.core.dispatch import WorkPacket, walk_fan_out
from fanout.env import Env, load_env
from fanout.invokers import LambdaInvoker, LocalInvoker
from fanout.stores import FilesystemStore
from fanout.worker import configure_logging, create_dispatcher

LOCAL_IDENTITY = "local"


def load_invocation_input(
    protocol: str,
    template_file: str,
    payloads_file: str,
) -> Dict[str, Any]:
    return {
        "protocol": protocol,
        "raw_request": pathlib.Path(template_file).read_text(),
        "payloads": orjson.loads(pathlib.Path(payloads_file).read_bytes()),
    }


@click.group(help="Fan a batch of templated HTTP requests out across self-invoking workers.")
def run():
    pass


@run.command(help="Trigger the top-level invocation of a deployed worker function.")
@click.argument("template_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("payloads_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--function-name", required=True, type=str)
@click.option("--protocol", default="https", type=click.Choice(["http", "https"]))
@click.option("--env-file", default=".env", type=str)
def start(
    template_file: str,
    payloads_file: str,
    function_name: str,
    protocol: str,
    env_file: str,
):
    env = load_env(Env, env_file=env_file)
    packet = WorkPacket.from_invocation_input(
        load_invocation_input(protocol, template_file, payloads_file)
    )

    async def trigger():
        invoker = LambdaInvoker(
            region_name=env.FANOUT_AWS_REGION,
            max_workers=env.FANOUT_EXECUTOR_MAX_THREADS,
        )

        try:
            await invoker.connect()
            await invoker.invoke(function_name, packet)

        finally:
            await invoker.close()

    uvloop.run(trigger())
    click.echo(f"Triggered {function_name} with {len(packet.payloads)} payloads")


@run.command(name="run", help="Run the whole fan-out tree in this process.")
@click.argument("template_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("payloads_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", default="results", type=click.Path(file_okay=False))
@click.option("--protocol", default="https", type=click.Choice(["http", "https"]))
@click.option("--env-file", default=".env", type=str)
def run_local(
    template_file: str,
    payloads_file: str,
    output: str,
    protocol: str,
    env_file: str,
):
    env = load_env(Env, env_file=env_file)
    packet = WorkPacket.from_invocation_input(
        load_invocation_input(protocol, template_file, payloads_file)
    )

    async def run_tree():
        logger = configure_logging(env)
        invoker = LocalInvoker()
        dispatcher = create_dispatcher(
            env,
            invoker,
            FilesystemStore(output),
            logger,
        )
        invoker.bind(dispatcher)

        try:
            root = await dispatcher.run(packet, LOCAL_IDENTITY)
            return [root, *await invoker.wait()]

        finally:
            await logger.close()

    reports = uvloop.run(run_tree())

    click.echo(f"Invocations: {len(reports)}")
    click.echo(f"Succeeded: {sum(report.succeeded for report in reports)}")
    click.echo(f"Failed: {sum(report.failed for report in reports)}")
    click.echo(f"Persistence errors: {sum(report.persistence_errors for report in reports)}")
    click.echo(f"Results written to: {output}")


@run.command(help="Show the invocation tree a payload list of COUNT items produces.")
@click.argument("count", type=click.IntRange(min=0))
def plan(count: int):
    packet = WorkPacket(
        protocol="http",
        raw_request_template="",
        payloads=[{"index": str(idx)} for idx in range(count)],
    )

    invocations = 0
    depth = 0
    claims: List[int] = []

    for plan_depth, split_plan in walk_fan_out(packet):
        invocations += 1
        depth = max(depth, plan_depth)
        claims.append(len(split_plan.local))

    click.echo(f"Invocations: {invocations}")
    click.echo(f"Depth: {depth}")
    click.echo(f"Claimed locally: {sum(claims)}")
