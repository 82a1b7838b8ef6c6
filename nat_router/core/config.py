"""
nat_router/core/config.py - 중앙 설정 관리

CLI/환경 변수에서 파싱된 값으로 시작 시 한 번 생성되는 불변 설정 객체입니다.
검증 실패 시 ConfigError를 발생시키며, 이 경우 제어 루프에 진입하지 않습니다.

Usage:
    from nat_router.core.config import RouterConfig

    config = RouterConfig(vpc_id="vpc-0123", interval=10)
"""

from __future__ import annotations

from dataclasses import dataclass

from nat_router import __version__

from .exceptions import ConfigError

# 리소스 태그 키
CLUSTER_TAG = "aws-nat-router/id"
ZONE_TAG = "aws-nat-router/zone"

# 기본값
DEFAULT_CLUSTER_ID = "squid"
DEFAULT_REGION = "ap-southeast-1"
DEFAULT_DESTINATION_CIDR = "0.0.0.0/0"
DEFAULT_INTERVAL = 10.0  # 초
DEFAULT_PORT = 3128
DEFAULT_TIMEOUT = 0.05  # 초
DEFAULT_PROBE_WORKERS = 10

MIN_INTERVAL = 1.0


def get_version() -> str:
    """버전 문자열 반환"""
    return __version__


@dataclass(frozen=True)
class RouterConfig:
    """제어 루프 설정

    Attributes:
        vpc_id: NAT 인스턴스가 위치한 VPC ID (필수)
        cluster_id: NAT 인스턴스/라우팅 테이블에 태그된 클러스터 ID
        region: AWS 리전
        interval: 사이클 간 대기 시간 (초, 1 이상)
        port: TCP 헬스체크 포트
        timeout: 헬스체크 타임아웃 (초)
        use_public_ip: 헬스체크에 Public IP 사용 여부
        ec2_election: EC2 메타데이터 기반 리더 선출 사용 여부
        probe_workers: 동시 헬스체크 워커 수
        destination_cidr: NAT 인스턴스로 향하는 기본 라우트 CIDR
    """

    vpc_id: str
    cluster_id: str = DEFAULT_CLUSTER_ID
    region: str = DEFAULT_REGION
    interval: float = DEFAULT_INTERVAL
    port: int = DEFAULT_PORT
    timeout: float = DEFAULT_TIMEOUT
    use_public_ip: bool = False
    ec2_election: bool = False
    probe_workers: int = DEFAULT_PROBE_WORKERS
    destination_cidr: str = DEFAULT_DESTINATION_CIDR

    def __post_init__(self) -> None:
        if not self.vpc_id or not self.vpc_id.strip():
            raise ConfigError("vpc-id", "vpc-id can not be blank")
        if not self.cluster_id:
            raise ConfigError("cluster-id", "cluster-id can not be blank")
        if self.interval < MIN_INTERVAL:
            raise ConfigError("interval", f"interval must be >= {MIN_INTERVAL:g}s, got {self.interval:g}")
        if not 1 <= self.port <= 65535:
            raise ConfigError("port", f"port must be in 1..65535, got {self.port}")
        if self.timeout <= 0:
            raise ConfigError("timeout", f"timeout must be > 0, got {self.timeout:g}")
        if self.probe_workers < 1:
            raise ConfigError("workers", f"workers must be >= 1, got {self.probe_workers}")
