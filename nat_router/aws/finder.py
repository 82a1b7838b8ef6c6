"""
nat_router/aws/finder.py - NAT 인스턴스 / 라우팅 테이블 조회

클러스터 태그와 VPC ID로 필터링한 EC2 인스턴스와 라우팅 테이블을
도메인 스냅샷으로 변환합니다.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from nat_router.core.config import CLUSTER_TAG, DEFAULT_DESTINATION_CIDR, ZONE_TAG
from nat_router.core.exceptions import DiscoveryError
from nat_router.core.types import NatInstance, RoutingTable

from .session import get_client

logger = logging.getLogger(__name__)

# 라우팅 대상에서 제외하는 인스턴스 상태
EXCLUDED_STATES = {"shutting-down", "terminated"}


def parse_tags(tags: list[dict[str, str]] | None) -> dict[str, str]:
    """AWS 태그 리스트를 딕셔너리로 변환"""
    if not tags:
        return {}
    return {t["Key"]: t.get("Value", "") for t in tags if "Key" in t}


def _filters(cluster_id: str, vpc_id: str) -> list[dict[str, Any]]:
    return [
        {"Name": f"tag:{CLUSTER_TAG}", "Values": [cluster_id]},
        {"Name": "vpc-id", "Values": [vpc_id]},
    ]


def parse_nat_instance(instance: dict[str, Any]) -> NatInstance:
    """describe_instances 응답의 인스턴스 하나를 NatInstance로 변환"""
    tags = parse_tags(instance.get("Tags"))
    launch_time = instance.get("LaunchTime") or datetime.fromtimestamp(0, tz=timezone.utc)
    return NatInstance(
        id=instance["InstanceId"],
        state=instance.get("State", {}).get("Name", ""),
        private_ip=instance.get("PrivateIpAddress") or "",
        public_ip=instance.get("PublicIpAddress") or "",
        zone=tags.get(ZONE_TAG, ""),
        source_dest_check=bool(instance.get("SourceDestCheck", True)),
        launch_time=launch_time,
    )


def parse_routing_table(route_table: dict[str, Any], destination_cidr: str = DEFAULT_DESTINATION_CIDR) -> RoutingTable:
    """describe_route_tables 응답의 테이블 하나를 RoutingTable로 변환"""
    tags = parse_tags(route_table.get("Tags"))
    egress = ""
    for route in route_table.get("Routes", []):
        if route.get("DestinationCidrBlock") == destination_cidr and route.get("InstanceId"):
            egress = route["InstanceId"]
    return RoutingTable(
        id=route_table["RouteTableId"],
        zone=tags.get(ZONE_TAG, ""),
        egress_instance_id=egress,
    )


class AwsFinder:
    """EC2 API 기반 Finder 구현"""

    def __init__(self, ec2: Any, destination_cidr: str = DEFAULT_DESTINATION_CIDR):
        self.ec2 = ec2
        self.destination_cidr = destination_cidr

    @classmethod
    def from_session(cls, session, region: str | None = None, **kwargs: Any) -> AwsFinder:
        return cls(get_client(session, "ec2", region_name=region), **kwargs)

    def find_nat_instances(self, cluster_id: str, vpc_id: str) -> list[NatInstance]:
        """클러스터 태그가 붙은 NAT 인스턴스 목록 조회

        Raises:
            DiscoveryError: EC2 API 호출 실패
        """
        logger.debug(f"Finding Instances with 'tag:{CLUSTER_TAG}={cluster_id}' and 'vpc-id={vpc_id}'")
        nat_instances: list[NatInstance] = []
        try:
            paginator = self.ec2.get_paginator("describe_instances")
            for page in paginator.paginate(Filters=_filters(cluster_id, vpc_id)):
                for reservation in page.get("Reservations", []):
                    for instance in reservation.get("Instances", []):
                        ni = parse_nat_instance(instance)
                        if ni.state in EXCLUDED_STATES:
                            logger.debug(f"Instance {ni.id} is {ni.state}, skipping")
                            continue
                        nat_instances.append(ni)
        except (ClientError, BotoCoreError) as e:
            raise DiscoveryError("nat-instances", "Unable to Find Nat Instances", cause=e) from e

        return nat_instances

    def find_routing_tables(self, cluster_id: str, vpc_id: str) -> list[RoutingTable]:
        """클러스터 태그가 붙은 라우팅 테이블 목록 조회

        Raises:
            DiscoveryError: EC2 API 호출 실패
        """
        logger.debug(f"Finding RoutingTables with 'tag:{CLUSTER_TAG}={cluster_id}' and 'vpc-id={vpc_id}'")
        routing_tables: list[RoutingTable] = []
        try:
            paginator = self.ec2.get_paginator("describe_route_tables")
            for page in paginator.paginate(Filters=_filters(cluster_id, vpc_id)):
                for route_table in page.get("RouteTables", []):
                    routing_tables.append(parse_routing_table(route_table, self.destination_cidr))
        except (ClientError, BotoCoreError) as e:
            raise DiscoveryError("routing-tables", "Unable to find RoutingTables", cause=e) from e

        return routing_tables
