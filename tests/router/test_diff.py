"""
tests/router/test_diff.py - allocations_differ 테스트
"""

import pytest

from nat_router.core.types import NatInstanceAllocation
from nat_router.router.allocation import allocate_routes, observe_routes
from nat_router.router.diff import allocations_differ


@pytest.fixture
def gateways(make_instance):
    return (
        make_instance("i-g1", zone="a", offset=0),
        make_instance("i-g2", zone="b", offset=10),
    )


class TestAllocationsDiffer:
    """allocations_differ 함수 테스트"""

    def test_reflexive(self, gateways, make_table):
        """같은 집합은 차이 없음"""
        g1, g2 = gateways
        x = [
            NatInstanceAllocation(g1, [make_table("rtb-1"), make_table("rtb-2")]),
            NatInstanceAllocation(g2, [make_table("rtb-3")]),
        ]

        assert allocations_differ(x, x) is False

    def test_order_independent(self, gateways, make_table):
        """인스턴스/테이블 순서가 달라도 차이 없음"""
        g1, g2 = gateways
        x = [
            NatInstanceAllocation(g1, [make_table("rtb-1"), make_table("rtb-2")]),
            NatInstanceAllocation(g2, [make_table("rtb-3")]),
        ]
        y = [
            NatInstanceAllocation(g2, [make_table("rtb-3")]),
            NatInstanceAllocation(g1, [make_table("rtb-2"), make_table("rtb-1")]),
        ]

        assert allocations_differ(x, y) is False
        assert allocations_differ(y, x) is False

    def test_single_table_moved(self, gateways, make_table):
        """테이블 하나의 인스턴스가 바뀌면 차이"""
        g1, g2 = gateways
        x = [
            NatInstanceAllocation(g1, [make_table("rtb-1"), make_table("rtb-2")]),
            NatInstanceAllocation(g2, [make_table("rtb-3"), make_table("rtb-4")]),
        ]
        y = [
            NatInstanceAllocation(g1, [make_table("rtb-1"), make_table("rtb-4")]),
            NatInstanceAllocation(g2, [make_table("rtb-3"), make_table("rtb-2")]),
        ]

        assert allocations_differ(x, y) is True

    def test_different_bucket_sizes(self, gateways, make_table):
        """버킷 크기가 다르면 차이"""
        g1, g2 = gateways
        x = [
            NatInstanceAllocation(g1, [make_table("rtb-1")]),
            NatInstanceAllocation(g2, [make_table("rtb-2"), make_table("rtb-3")]),
        ]
        y = [
            NatInstanceAllocation(g1, [make_table("rtb-1"), make_table("rtb-2")]),
            NatInstanceAllocation(g2, [make_table("rtb-3")]),
        ]

        assert allocations_differ(x, y) is True

    def test_different_instance(self, gateways, make_instance, make_table):
        """같은 테이블이 다른 인스턴스로 가면 차이"""
        g1, _ = gateways
        g3 = make_instance("i-g3", offset=20)

        x = [NatInstanceAllocation(g1, [make_table("rtb-1")])]
        y = [NatInstanceAllocation(g3, [make_table("rtb-1")])]

        assert allocations_differ(x, y) is True

    def test_different_non_empty_count(self, gateways, make_table):
        """비어 있지 않은 할당 수가 다르면 차이"""
        g1, g2 = gateways
        x = [NatInstanceAllocation(g1, [make_table("rtb-1"), make_table("rtb-2")])]
        y = [
            NatInstanceAllocation(g1, [make_table("rtb-1")]),
            NatInstanceAllocation(g2, [make_table("rtb-2")]),
        ]

        assert allocations_differ(x, y) is True

    def test_idle_instance_is_not_a_difference(self, gateways, make_table):
        """빈 할당은 비교에서 제외 (Scenario D)"""
        g1, g2 = gateways
        observed = [NatInstanceAllocation(g1, [make_table("rtb-1")])]
        desired = [
            NatInstanceAllocation(g1, [make_table("rtb-1")]),
            NatInstanceAllocation(g2, []),
        ]

        assert allocations_differ(observed, desired) is False

    def test_empty_sets(self):
        """양쪽 모두 비어 있으면 차이 없음"""
        assert allocations_differ([], []) is False

    def test_unassigned_table_is_a_difference(self, gateways, make_table):
        """dead 인스턴스를 가리키던 테이블은 재적용 대상"""
        g1, g2 = gateways
        tables = [make_table("rtb-1", zone="a", egress="i-g1"), make_table("rtb-2", zone="b", egress="i-dead")]

        observed = observe_routes([g1, g2], tables)
        desired = allocate_routes([g1, g2], tables)

        assert allocations_differ(observed, desired) is True

    def test_converged_state(self, gateways, make_table):
        """적용이 끝난 상태는 차이 없음"""
        g1, g2 = gateways
        tables = [
            make_table("rtb-1", zone="a", egress="i-g1"),
            make_table("rtb-2", zone="b", egress="i-g2"),
            make_table("rtb-3", zone="", egress="i-g1"),
        ]

        observed = observe_routes([g1, g2], tables)
        desired = allocate_routes([g1, g2], tables)

        assert allocations_differ(observed, desired) is False
