"""
nat_router/router/diff.py - 할당 변경 감지

목표 할당이 현재 적용 상태와 같으면 EC2 쓰기 API를 호출하지 않도록
두 할당 집합을 순서와 무관하게 비교합니다.

비교 규칙:
    1. 테이블이 없는 할당은 양쪽 모두에서 제외
       (새로 살아난 유휴 인스턴스는 변경으로 보지 않음)
    2. 남은 할당 수가 다르면 변경
    3. (LaunchTime, ID) 순으로 정렬 후 위치별로 인스턴스 ID, 테이블 수,
       ID순 정렬된 테이블 ID를 비교
"""

from __future__ import annotations

from collections.abc import Sequence

from nat_router.core.types import NatInstanceAllocation, allocation_order_key, table_order_key


def _non_empty(allocations: Sequence[NatInstanceAllocation]) -> list[NatInstanceAllocation]:
    return sorted((a for a in allocations if not a.is_empty), key=allocation_order_key)


def allocations_differ(
    observed: Sequence[NatInstanceAllocation],
    desired: Sequence[NatInstanceAllocation],
) -> bool:
    """두 할당 집합이 의미 있게 다른지 판단

    Args:
        observed: 현재 적용된 할당
        desired: 새로 계산된 목표 할당

    Returns:
        다르면 True
    """
    current = _non_empty(observed)
    target = _non_empty(desired)

    if len(current) != len(target):
        return True

    for a, b in zip(current, target):
        if a.nat_instance.id != b.nat_instance.id:
            return True
        if len(a.routing_tables) != len(b.routing_tables):
            return True
        a_tables = sorted(a.routing_tables, key=table_order_key)
        b_tables = sorted(b.routing_tables, key=table_order_key)
        for x, y in zip(a_tables, b_tables):
            if x.id != y.id:
                return True

    return False
