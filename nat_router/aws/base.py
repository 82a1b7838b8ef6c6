"""
nat_router/aws/base.py - 클라우드 어댑터 인터페이스

제어 루프는 구체적인 클라우드 클라이언트에 의존하지 않고 아래 Protocol에만
의존합니다. 운영용 구현은 AwsFinder/AwsRouter/AwsIdentifier,
테스트용 구현은 InMemoryCloud 입니다.
"""

from __future__ import annotations

from typing import Protocol

from nat_router.core.types import NatInstance, RoutingTable


class Finder(Protocol):
    """라우터 대상 리소스 조회

    실패 시 DiscoveryError를 발생시킵니다.
    """

    def find_nat_instances(self, cluster_id: str, vpc_id: str) -> list[NatInstance]: ...

    def find_routing_tables(self, cluster_id: str, vpc_id: str) -> list[RoutingTable]: ...


class Router(Protocol):
    """NAT 인스턴스 및 VPC 라우트 변경

    실패 시 ApplyError를 발생시킵니다.
    """

    def upsert_nat_route(self, destination_cidr: str, ni: NatInstance, rt: RoutingTable) -> None: ...

    def prevent_source_dest_check(self, ni: NatInstance) -> None: ...


class Identifier(Protocol):
    """현재 프로세스의 인스턴스 ID 확인

    실패 시 IdentityError를 발생시킵니다.
    """

    def get_identity(self) -> str: ...
