from .http_connection import HTTPConnection as HTTPConnection
from .request_executor import RequestExecutor as RequestExecutor
from .timeouts import Timeouts as Timeouts
