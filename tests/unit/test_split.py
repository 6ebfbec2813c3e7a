"""
Tests for the fan-out split policy.

Covers:
- Scenarios for 0, 1, 2, 3 and 5 payloads
- Local claim bound of one or two payloads
- Half-split balance of the delegated remainder
- Completeness of the whole recursion tree (no payload lost or duplicated)
"""

import math
from collections import Counter

import pytest

from fanout.core.dispatch import WorkPacket, split_packet, walk_fan_out


def make_packet(count: int) -> WorkPacket:
    return WorkPacket(
        protocol="https",
        raw_request="GET /{{id}} HTTP/1.1\r\nHost: x.com\r\n\r\n",
        payloads=[{"{{id}}": str(idx)} for idx in range(count)],
    )


class TestSplitPacket:
    def test_empty_packet_claims_nothing(self) -> None:
        plan = split_packet(make_packet(0))

        assert plan.local == []
        assert plan.continuations == []

    def test_single_payload_is_claimed(self) -> None:
        plan = split_packet(make_packet(1))

        assert plan.local == [{"{{id}}": "0"}]
        assert plan.continuations == []

    def test_two_payloads_are_both_claimed(self) -> None:
        plan = split_packet(make_packet(2))

        assert plan.local == [{"{{id}}": "1"}, {"{{id}}": "0"}]
        assert plan.continuations == []

    def test_three_payloads_claim_one_and_split_even_remainder(self) -> None:
        plan = split_packet(make_packet(3))

        assert plan.local == [{"{{id}}": "2"}]
        assert [packet.payloads for packet in plan.continuations] == [
            [{"{{id}}": "0"}],
            [{"{{id}}": "1"}],
        ]

    def test_five_payloads_claim_one_and_split_two_by_two(self) -> None:
        plan = split_packet(make_packet(5))

        assert plan.local == [{"{{id}}": "4"}]
        assert [packet.payloads for packet in plan.continuations] == [
            [{"{{id}}": "0"}, {"{{id}}": "1"}],
            [{"{{id}}": "2"}, {"{{id}}": "3"}],
        ]

    def test_four_payloads_claim_two(self) -> None:
        plan = split_packet(make_packet(4))

        assert plan.local == [{"{{id}}": "3"}, {"{{id}}": "2"}]
        assert [len(packet.payloads) for packet in plan.continuations] == [1, 1]

    def test_continuations_keep_protocol_and_template(self) -> None:
        packet = make_packet(9)

        plan = split_packet(packet)

        for continuation in plan.continuations:
            assert continuation.protocol == packet.protocol
            assert continuation.raw_request_template == packet.raw_request_template

    def test_input_packet_is_unchanged(self) -> None:
        packet = make_packet(7)

        split_packet(packet)

        assert len(packet.payloads) == 7


class TestSplitProperties:
    @pytest.mark.parametrize("count", range(1, 40))
    def test_every_invocation_claims_one_or_two(self, count: int) -> None:
        claims = [
            len(plan.local) for _, plan in walk_fan_out(make_packet(count))
        ]

        assert all(claim in (1, 2) for claim in claims)

    @pytest.mark.parametrize("count", [0, 1, 2, 3, 4, 5, 6, 7, 8, 15, 16, 17, 31, 100, 257])
    def test_tree_covers_every_payload_exactly_once(self, count: int) -> None:
        packet = make_packet(count)

        claimed = Counter()
        for _, plan in walk_fan_out(packet):
            claimed.update(payload["{{id}}"] for payload in plan.local)

        assert claimed == Counter(payload["{{id}}"] for payload in packet.payloads)

    @pytest.mark.parametrize("count", [4, 5, 8, 9, 20, 21, 99])
    def test_remainder_halves_are_balanced(self, count: int) -> None:
        plan = split_packet(make_packet(count))
        remainder = count - len(plan.local)

        first, second = [len(packet.payloads) for packet in plan.continuations]

        assert first == remainder // 2
        assert second == math.ceil(remainder / 2)

    def test_tree_depth_grows_logarithmically(self) -> None:
        depth = max(
            plan_depth for plan_depth, _ in walk_fan_out(make_packet(1024))
        )

        assert depth <= math.ceil(math.log2(1024))
