from typing import Callable, Dict, Literal, Union

import psutil
from pydantic import BaseModel, StrictInt, StrictStr

PrimaryType = Union[str, int, float, bytes, bool]


class Env(BaseModel):
    FANOUT_S3_BUCKET: StrictStr | None = None
    FANOUT_AWS_REGION: StrictStr | None = None
    FANOUT_CONNECT_TIMEOUT: StrictStr = "10s"
    FANOUT_REQUEST_TIMEOUT: StrictStr = "30s"
    FANOUT_LOG_LEVEL: StrictStr = "info"
    FANOUT_LOG_OUTPUT: Literal["stdout", "stderr"] = "stdout"
    FANOUT_EXECUTOR_MAX_THREADS: StrictInt = psutil.cpu_count(logical=False) or 1

    @classmethod
    def types_map(cls) -> Dict[str, Callable[[str], PrimaryType]]:
        return {
            "FANOUT_S3_BUCKET": str,
            "FANOUT_AWS_REGION": str,
            "FANOUT_CONNECT_TIMEOUT": str,
            "FANOUT_REQUEST_TIMEOUT": str,
            "FANOUT_LOG_LEVEL": str,
            "FANOUT_LOG_OUTPUT": str,
            "FANOUT_EXECUTOR_MAX_THREADS": int,
        }
