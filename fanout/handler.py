import uvloop

from fanout.env import Env, load_env
from fanout.worker import run_invocation


def handler(event, context):
    env = load_env(Env)

    report = uvloop.run(
        run_invocation(
            event,
            context.invoked_function_arn,
            env,
        )
    )

    return report.to_dict()
