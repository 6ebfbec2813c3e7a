import datetime
import threading
from typing import Generic, TypeVar

import msgspec

from .entry import Entry

T = TypeVar('T', bound=Entry)


def utc_timestamp() -> str:
    return datetime.datetime.now(datetime.UTC).isoformat()


class Log(msgspec.Struct, Generic[T], kw_only=True):
    """An entry plus the call site that logged it."""

    entry: T
    filename: str
    function_name: str
    line_number: int
    thread_id: int = msgspec.field(default_factory=threading.get_native_id)
    timestamp: str = msgspec.field(default_factory=utc_timestamp)
