"""
nat_router/router/allocation.py - 라우팅 테이블 할당

주요 구성 요소:
- allocate_routes: 목표 할당 계산 (zone 우선 + 최소 부하)
- observe_routes: 현재 적용된 할당 재구성

두 함수 모두 입력 순서가 같으면 같은 결과를 내는 순수 함수입니다.
"""

from __future__ import annotations

from collections.abc import Sequence

from nat_router.core.types import NatInstance, NatInstanceAllocation, RoutingTable


def allocate_routes(
    nat_instances: Sequence[NatInstance],
    routing_tables: Sequence[RoutingTable],
) -> list[NatInstanceAllocation]:
    """라우팅 테이블을 정상 NAT 인스턴스에 할당

    같은 zone의 NAT 인스턴스가 있으면 그 중에서, 없으면 전체 중에서
    할당된 테이블이 가장 적은 인스턴스를 선택합니다. 동률이면 먼저 나온
    인스턴스가 선택됩니다.

    Args:
        nat_instances: 정상 NAT 인스턴스 목록 (모두 healthy 가정)
        routing_tables: 라우팅 테이블 목록

    Returns:
        인스턴스별 할당 목록 (빈 할당 포함). 인스턴스가 없으면 빈 리스트.
    """
    if not nat_instances:
        return []

    all_allocations: list[NatInstanceAllocation] = []
    zoned: dict[str, list[NatInstanceAllocation]] = {}
    for ni in nat_instances:
        allocation = NatInstanceAllocation(nat_instance=ni)
        all_allocations.append(allocation)
        zoned.setdefault(ni.zone, []).append(allocation)

    for rt in routing_tables:
        candidates = zoned.get(rt.zone) or all_allocations
        _least_loaded(candidates).routing_tables.append(rt)

    return all_allocations


def _least_loaded(candidates: Sequence[NatInstanceAllocation]) -> NatInstanceAllocation:
    chosen = candidates[0]
    for allocation in candidates:
        if len(allocation.routing_tables) < len(chosen.routing_tables):
            chosen = allocation
    return chosen


def observe_routes(
    nat_instances: Sequence[NatInstance],
    routing_tables: Sequence[RoutingTable],
) -> list[NatInstanceAllocation]:
    """라우팅 테이블의 현재 기본 라우트로부터 적용된 할당을 재구성

    기본 라우트가 없거나 live 목록에 없는 인스턴스를 가리키는 테이블은
    어느 할당에도 포함되지 않으며, 목표 할당과 비교 시 차이로 드러납니다.

    Returns:
        테이블이 하나 이상 있는 인스턴스의 할당 목록 (최초 등장 순서)
    """
    by_id = {ni.id: ni for ni in nat_instances}
    observed: dict[str, NatInstanceAllocation] = {}

    for rt in routing_tables:
        if not rt.egress_instance_id:
            continue
        ni = by_id.get(rt.egress_instance_id)
        if ni is None:
            continue
        if ni.id not in observed:
            observed[ni.id] = NatInstanceAllocation(nat_instance=ni)
        observed[ni.id].routing_tables.append(rt)

    return list(observed.values())
