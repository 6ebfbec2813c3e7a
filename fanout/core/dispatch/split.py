from collections import deque
from typing import Deque, Iterator, Tuple

from .models import SplitPlan, WorkPacket


def split_packet(packet: WorkPacket) -> SplitPlan:
    """
    Claim one or two payloads from the end of the packet for local work
    and divide what is left into two contiguous halves for continuation
    invocations. The remainder is always even by the time it is divided,
    and the input packet is left unchanged.
    """
    remaining = list(packet.payloads)

    if len(remaining) == 0:
        return SplitPlan()

    local = [remaining.pop()]

    if len(remaining) == 1:
        local.append(remaining.pop())

    elif len(remaining) % 2 == 1:
        local.append(remaining.pop())

    if len(remaining) == 0:
        return SplitPlan(local=local)

    midpoint = len(remaining) // 2

    return SplitPlan(
        local=local,
        continuations=[
            packet.model_copy(update={"payloads": remaining[:midpoint]}),
            packet.model_copy(update={"payloads": remaining[midpoint:]}),
        ],
    )


def walk_fan_out(packet: WorkPacket) -> Iterator[Tuple[int, SplitPlan]]:
    """
    Yield the (depth, plan) of every invocation the packet would produce,
    breadth first, without issuing requests or invocations.
    """
    pending: Deque[Tuple[int, WorkPacket]] = deque([(0, packet)])

    while pending:
        depth, current = pending.popleft()
        plan = split_packet(current)

        yield depth, plan

        pending.extend(
            (depth + 1, continuation) for continuation in plan.continuations
        )
