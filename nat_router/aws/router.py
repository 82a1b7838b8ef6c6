"""
nat_router/aws/router.py - VPC 라우트 및 NAT 인스턴스 속성 변경
"""

from __future__ import annotations

import logging
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from nat_router.core.exceptions import ApplyError, is_access_denied, is_throttling
from nat_router.core.parallel import get_error_code
from nat_router.core.types import NatInstance, RoutingTable

from .session import get_client

logger = logging.getLogger(__name__)


class AwsRouter:
    """EC2 API 기반 Router 구현"""

    def __init__(self, ec2: Any):
        self.ec2 = ec2

    @classmethod
    def from_session(cls, session, region: str | None = None) -> AwsRouter:
        return cls(get_client(session, "ec2", region_name=region))

    def upsert_nat_route(self, destination_cidr: str, ni: NatInstance, rt: RoutingTable) -> None:
        """지정한 NAT 인스턴스를 통하는 라우트로 교체, 없으면 생성

        Raises:
            ApplyError: replace/create 모두 실패
        """
        params = {
            "DestinationCidrBlock": destination_cidr,
            "InstanceId": ni.id,
            "RouteTableId": rt.id,
        }

        logger.debug(f"Routing {rt.id} ({rt.zone}) via {ni.id} ({ni.zone})")
        try:
            self.ec2.replace_route(**params)
            logger.debug("\tUpdated")
            return
        except ClientError as e:
            # 라우트가 없으면 EC2는 InvalidParameterValue를 반환
            if is_access_denied(e) or is_throttling(e):
                raise ApplyError.from_client_error("replace_route", rt.id, e) from e
            logger.debug(f"\treplace_route failed ({get_error_code(e)}), creating route")
        except BotoCoreError as e:
            raise ApplyError("replace_route", rt.id, error_message=str(e), cause=e) from e

        try:
            self.ec2.create_route(**params)
        except ClientError as e:
            raise ApplyError.from_client_error("create_route", rt.id, e) from e
        except BotoCoreError as e:
            raise ApplyError("create_route", rt.id, error_message=str(e), cause=e) from e
        logger.debug("\tCreated")

    def prevent_source_dest_check(self, ni: NatInstance) -> None:
        """NAT 동작에 필요한 Source/Dest Check 비활성화 (이미 꺼져 있으면 no-op)

        Raises:
            ApplyError: modify_instance_attribute 실패
        """
        if not ni.source_dest_check:
            return

        logger.debug(f"SourceDestCheck for {ni.id} is enabled, disabling ...")
        try:
            self.ec2.modify_instance_attribute(
                InstanceId=ni.id,
                SourceDestCheck={"Value": False},
            )
        except ClientError as e:
            raise ApplyError.from_client_error("modify_instance_attribute", ni.id, e) from e
        except BotoCoreError as e:
            raise ApplyError("modify_instance_attribute", ni.id, error_message=str(e), cause=e) from e
