from .execution_result import (
    ExecutionResult as ExecutionResult,
    RequestFailure as RequestFailure,
    RequestSuccess as RequestSuccess,
)
from .result_sink import ResultSink as ResultSink
