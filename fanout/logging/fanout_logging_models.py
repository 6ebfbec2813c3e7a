from .models import Entry, LogLevel


class DispatchInfo(Entry, kw_only=True):
    identity: str
    claimed: int
    delegated: int
    level: LogLevel = LogLevel.INFO

class DispatchDebug(Entry, kw_only=True):
    identity: str
    claimed: int
    delegated: int
    level: LogLevel = LogLevel.DEBUG

class DispatchError(Entry, kw_only=True):
    identity: str
    payloads: int
    error: str
    level: LogLevel = LogLevel.ERROR

class InputFatal(Entry, kw_only=True):
    error: str
    level: LogLevel = LogLevel.FATAL

class RequestDebug(Entry, kw_only=True):
    method: str
    uri: str
    level: LogLevel = LogLevel.DEBUG

class RequestInfo(Entry, kw_only=True):
    method: str
    uri: str
    status: int
    level: LogLevel = LogLevel.INFO

class RequestError(Entry, kw_only=True):
    error: str
    level: LogLevel = LogLevel.ERROR

class SinkDebug(Entry, kw_only=True):
    key: str
    level: LogLevel = LogLevel.DEBUG

class SinkError(Entry, kw_only=True):
    error: str
    level: LogLevel = LogLevel.ERROR
