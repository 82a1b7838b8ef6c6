"""
nat_router/core/types.py - 도메인 데이터 타입

사이클 시작 시 한 번 조회되는 읽기 전용 스냅샷(NatInstance, RoutingTable)과
매 사이클 새로 계산되는 할당(NatInstanceAllocation)을 정의합니다.

정렬 기준은 별도 함수로 분리되어 있어 독립적으로 테스트할 수 있습니다.
여러 레플리카가 같은 스냅샷을 보면 항상 같은 순서를 얻어야 합니다.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class NatInstance:
    """NAT 인스턴스 스냅샷

    Attributes:
        id: EC2 인스턴스 ID
        state: 인스턴스 상태 (running, stopped 등, 정보용)
        private_ip: Private IP (없으면 빈 문자열)
        public_ip: Public IP (없으면 빈 문자열)
        zone: zone 태그 값 (없으면 빈 문자열 = zone 없음)
        source_dest_check: Source/Dest Check 활성 여부 (NAT 동작에는 False 필요)
        launch_time: 시작 시각 (선출/정렬 기준)
    """

    id: str
    launch_time: datetime
    state: str = ""
    private_ip: str = ""
    public_ip: str = ""
    zone: str = ""
    source_dest_check: bool = False


@dataclass(frozen=True)
class RoutingTable:
    """라우팅 테이블 스냅샷

    Attributes:
        id: 라우팅 테이블 ID
        zone: zone 태그 값
        egress_instance_id: 현재 기본 라우트가 가리키는 인스턴스 ID
    """

    id: str
    zone: str = ""
    egress_instance_id: str = ""


@dataclass
class NatInstanceAllocation:
    """NAT 인스턴스 하나와 그 인스턴스로 라우팅되는 테이블 목록"""

    nat_instance: NatInstance
    routing_tables: list[RoutingTable] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.routing_tables

    def table_ids(self) -> list[str]:
        return [rt.id for rt in self.routing_tables]


def launch_order_key(ni: NatInstance) -> tuple[datetime, str]:
    """NAT 인스턴스 정렬 키: LaunchTime 오름차순, 동일 시각이면 ID"""
    return (ni.launch_time, ni.id)


def table_order_key(rt: RoutingTable) -> str:
    """라우팅 테이블 정렬 키: ID 오름차순"""
    return rt.id


def allocation_order_key(allocation: NatInstanceAllocation) -> tuple[datetime, str]:
    return launch_order_key(allocation.nat_instance)
