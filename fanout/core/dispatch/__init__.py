from .fan_out_dispatcher import FanOutDispatcher as FanOutDispatcher
from .invoker import Invoker as Invoker
from .models import (
    DispatchReport as DispatchReport,
    SplitPlan as SplitPlan,
    WorkPacket as WorkPacket,
)
from .split import split_packet as split_packet, walk_fan_out as walk_fan_out
