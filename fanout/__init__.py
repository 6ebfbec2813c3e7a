from .core.dispatch import (
    DispatchReport as DispatchReport,
    FanOutDispatcher as FanOutDispatcher,
    WorkPacket as WorkPacket,
    split_packet as split_packet,
)
from .core.rendering import render as render
