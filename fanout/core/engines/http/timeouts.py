from pydantic import BaseModel, StrictFloat, StrictInt

from fanout.env import Env, TimeParser


class Timeouts(BaseModel):
    connect_timeout: StrictInt | StrictFloat = 10
    request_timeout: StrictInt | StrictFloat = 30

    @classmethod
    def from_env(cls, env: Env):
        parser = TimeParser()

        return cls(
            connect_timeout=parser.parse(env.FANOUT_CONNECT_TIMEOUT),
            request_timeout=parser.parse(env.FANOUT_REQUEST_TIMEOUT),
        )
