from .config import LoggingConfig as LoggingConfig
from .models import Entry as Entry, LogLevel as LogLevel
from .streams import Logger as Logger
