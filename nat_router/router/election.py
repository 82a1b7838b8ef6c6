"""
nat_router/router/election.py - 리더 선출

분산 락 없이 레플리카 간 상호 배제를 보장합니다. 모든 레플리카가 같은
스냅샷을 보면 같은 결과를 내야 하므로 부수 효과 없는 순수 함수입니다.

규칙:
    - live 인스턴스가 없으면 항상 passive
    - 선출 비활성화 시 active
    - 선출 활성화 시 가장 먼저 시작된 live 인스턴스가 자기 자신이면 active
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from nat_router.aws.base import Identifier
from nat_router.core.exceptions import ConfigError, IdentityError
from nat_router.core.types import NatInstance, launch_order_key

logger = logging.getLogger(__name__)


def elect(live: Sequence[NatInstance], local_identity: str | None, election_enabled: bool) -> bool:
    """현재 프로세스가 변경을 적용할 수 있는지 판단

    Args:
        live: 정상 NAT 인스턴스 목록
        local_identity: 현재 프로세스의 인스턴스 ID
        election_enabled: 리더 선출 사용 여부

    Returns:
        active이면 True
    """
    if not live:
        return False
    if not election_enabled:
        return True
    leader = min(live, key=launch_order_key)
    return bool(local_identity) and leader.id == local_identity


def resolve_identity(identifier: Identifier, election_enabled: bool) -> str | None:
    """시작 시 현재 프로세스의 인스턴스 ID 확인

    선출이 활성화된 상태에서 ID를 확인할 수 없으면 선출 없이 실행되지 않도록
    ConfigError를 발생시킵니다.

    Raises:
        ConfigError: 선출 활성화 + ID 확인 실패
    """
    try:
        identity = identifier.get_identity()
    except IdentityError as e:
        if election_enabled:
            raise ConfigError(
                "ec2-election",
                "EC2 Election requested but not possible, disable --ec2-election",
                cause=e,
            ) from e
        logger.debug(f"인스턴스 ID 확인 불가 (선출 비활성화): {e}")
        return None

    logger.debug(f"Local identity: {identity}")
    return identity
