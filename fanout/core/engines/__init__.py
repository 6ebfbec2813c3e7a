from .http import (
    RequestExecutor as RequestExecutor,
    Timeouts as Timeouts,
)
