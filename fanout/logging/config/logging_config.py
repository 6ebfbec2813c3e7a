import contextvars
from typing import FrozenSet, Literal

import msgspec

from fanout.logging.models import LogLevel, LogLevelName

from .stream_type import StreamType

LogOutput = Literal['stdout', 'stderr']


class LoggingSettings(msgspec.Struct, frozen=True):
    level: LogLevel = LogLevel.INFO
    output: StreamType = StreamType.STDOUT
    disabled: FrozenSet[str] = frozenset()


_logging_settings = contextvars.ContextVar(
    "_logging_settings",
    default=LoggingSettings(),
)


class LoggingConfig:
    """
    Process-wide logging settings. Settings are held in a context var so
    tasks spawned after an update see the new level and output.
    """

    def update(
        self,
        log_level: LogLevelName | str | None = None,
        log_output: LogOutput | None = None,
    ):
        settings = _logging_settings.get()

        if log_level:
            settings = msgspec.structs.replace(
                settings,
                level=LogLevel.to_level(log_level),
            )

        if log_output:
            settings = msgspec.structs.replace(
                settings,
                output=StreamType(log_output.upper()),
            )

        _logging_settings.set(settings)

    def disable(self, *logger_names: str):
        settings = _logging_settings.get()
        _logging_settings.set(
            msgspec.structs.replace(
                settings,
                disabled=settings.disabled.union(logger_names),
            )
        )

    def enabled(self, logger_name: str, log_level: LogLevel) -> bool:
        settings = _logging_settings.get()

        return (
            logger_name not in settings.disabled
            and log_level.at_least(settings.level)
        )

    @property
    def level(self) -> LogLevel:
        return _logging_settings.get().level

    @property
    def output(self) -> StreamType:
        return _logging_settings.get().output
