"""
nat_router/aws/memory.py - 인메모리 클라우드 fake

Finder, Router, Identifier를 모두 구현하는 테스트/드라이런용 구현입니다.
라우트 변경은 내부 상태에 반영되므로 다음 조회에서 관찰 상태로 나타납니다.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from dataclasses import dataclass, replace

from nat_router.core.exceptions import ApplyError, DiscoveryError, IdentityError
from nat_router.core.types import NatInstance, RoutingTable


@dataclass(frozen=True)
class RecordedCall:
    """Router 호출 기록"""

    operation: str
    resource_id: str
    target: str = ""


class InMemoryCloud:
    """인메모리 Finder + Router + Identifier

    Attributes:
        identity: get_identity 반환값 (None이면 IdentityError)
        fail_discovery: True이면 조회 시 DiscoveryError
        fail_tables: upsert 실패시킬 라우팅 테이블 ID
        fail_instances: Source/Dest Check 변경 실패시킬 인스턴스 ID
        calls: Router 호출 기록 (호출 순서)
    """

    def __init__(
        self,
        instances: Iterable[NatInstance] = (),
        tables: Iterable[RoutingTable] = (),
        identity: str | None = None,
    ):
        self._lock = threading.Lock()
        self._instances: dict[str, NatInstance] = {ni.id: ni for ni in instances}
        self._tables: dict[str, RoutingTable] = {rt.id: rt for rt in tables}
        self.identity = identity
        self.fail_discovery = False
        self.fail_tables: set[str] = set()
        self.fail_instances: set[str] = set()
        self.calls: list[RecordedCall] = []

    # ---- 상태 조회/변경 헬퍼

    @property
    def instances(self) -> list[NatInstance]:
        with self._lock:
            return list(self._instances.values())

    @property
    def tables(self) -> list[RoutingTable]:
        with self._lock:
            return list(self._tables.values())

    def add_instance(self, ni: NatInstance) -> None:
        with self._lock:
            self._instances[ni.id] = ni

    def remove_instance(self, instance_id: str) -> None:
        with self._lock:
            self._instances.pop(instance_id, None)

    def egress_of(self, table_id: str) -> str:
        with self._lock:
            return self._tables[table_id].egress_instance_id

    # ---- Finder

    def find_nat_instances(self, cluster_id: str, vpc_id: str) -> list[NatInstance]:
        if self.fail_discovery:
            raise DiscoveryError("nat-instances", "Unable to Find Nat Instances")
        return self.instances

    def find_routing_tables(self, cluster_id: str, vpc_id: str) -> list[RoutingTable]:
        if self.fail_discovery:
            raise DiscoveryError("routing-tables", "Unable to find RoutingTables")
        return self.tables

    # ---- Router

    def upsert_nat_route(self, destination_cidr: str, ni: NatInstance, rt: RoutingTable) -> None:
        with self._lock:
            self.calls.append(RecordedCall("upsert_nat_route", rt.id, ni.id))
            if rt.id in self.fail_tables:
                raise ApplyError("replace_route", rt.id, error_code="InternalError")
            current = self._tables.get(rt.id, rt)
            self._tables[rt.id] = replace(current, egress_instance_id=ni.id)

    def prevent_source_dest_check(self, ni: NatInstance) -> None:
        if not ni.source_dest_check:
            return
        with self._lock:
            self.calls.append(RecordedCall("prevent_source_dest_check", ni.id))
            if ni.id in self.fail_instances:
                raise ApplyError("modify_instance_attribute", ni.id, error_code="InternalError")
            current = self._instances.get(ni.id, ni)
            self._instances[ni.id] = replace(current, source_dest_check=False)

    # ---- Identifier

    def get_identity(self) -> str:
        if not self.identity:
            raise IdentityError("Metadata is not available")
        return self.identity
