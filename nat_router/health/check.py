"""
nat_router/health/check.py - TCP 헬스체크

NAT 인스턴스 하나를 TCP 연결 시도로 alive/dead 분류합니다.
연결 실패(타임아웃, 거부, 도달 불가, 이름 해석 실패)는 예상된 결과이며
예외로 전파되지 않습니다.

주요 구성 요소:
- ProbeStatus: alive/dead
- tcp_check: host:port 주소에 대한 단일 연결 시도
- probe_address: 설정에 따라 Public/Private IP로 주소 생성
- check_instances: 모든 인스턴스를 동시에 검사하고 live/dead로 분리
"""

from __future__ import annotations

import ipaddress
import logging
import socket
import time
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass, field
from enum import Enum

from nat_router.core.parallel import parallel_map
from nat_router.core.types import NatInstance, launch_order_key

logger = logging.getLogger(__name__)

# 이름 해석 전용 (getaddrinfo 자체는 timeout을 받지 않음)
_resolver = ThreadPoolExecutor(max_workers=4, thread_name_prefix="resolve")


class ProbeStatus(Enum):
    """헬스체크 결과"""

    ALIVE = "alive"
    DEAD = "dead"


def _split_address(address: str) -> tuple[str, int]:
    host, sep, port = address.rpartition(":")
    if not sep or not host:
        raise ValueError(f"invalid address: {address!r}")
    number = int(port)
    if not 0 < number < 65536:
        raise ValueError(f"invalid port: {address!r}")
    return host.strip("[]"), number


def _resolve(host: str, port: int, timeout: float) -> tuple[int, tuple]:
    """(address family, sockaddr) 반환, 이름 해석은 timeout 안에 끝나야 함"""
    try:
        ip = ipaddress.ip_address(host)
    except ValueError:
        pass
    else:
        if ip.version == 6:
            return socket.AF_INET6, (host, port, 0, 0)
        return socket.AF_INET, (host, port)

    future = _resolver.submit(socket.getaddrinfo, host, port, 0, socket.SOCK_STREAM)
    try:
        infos = future.result(timeout=timeout)
    except FutureTimeoutError:
        future.cancel()
        raise TimeoutError(f"resolving {host} timed out") from None
    if not infos:
        raise OSError(f"no address for {host}")
    family, _, _, _, sockaddr = infos[0]
    return family, sockaddr


def tcp_check(address: str, timeout: float) -> ProbeStatus:
    """TCP 연결 가능 여부로 대상을 분류

    이름 해석과 연결을 합쳐 timeout 안에 끝나지 않으면 DEAD입니다.
    연결에 성공하면 즉시 닫습니다.

    Args:
        address: "host:port" 형식 주소
        timeout: 이름 해석 + 연결 타임아웃 (초)

    Returns:
        ProbeStatus.ALIVE 또는 ProbeStatus.DEAD
    """
    deadline = time.monotonic() + timeout
    try:
        host, port = _split_address(address)
        family, sockaddr = _resolve(host, port, timeout)
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise TimeoutError("deadline exceeded before connect")
        with socket.socket(family, socket.SOCK_STREAM) as conn:
            conn.settimeout(remaining)
            conn.connect(sockaddr)
    except (OSError, ValueError) as e:
        logger.debug(f"{address} 연결 실패: {e}")
        return ProbeStatus.DEAD

    return ProbeStatus.ALIVE


def probe_address(ni: NatInstance, port: int, use_public_ip: bool) -> str:
    """헬스체크 대상 주소 생성 (IP가 없으면 빈 문자열)"""
    ip = ni.public_ip if use_public_ip else ni.private_ip
    if not ip:
        return ""
    if ":" in ip:
        return f"[{ip}]:{port}"
    return f"{ip}:{port}"


@dataclass
class HealthReport:
    """헬스체크 결과 집계

    Attributes:
        live: 정상 인스턴스 (LaunchTime, ID 오름차순)
        dead: 비정상 인스턴스 (조회 순서)
    """

    live: list[NatInstance] = field(default_factory=list)
    dead: list[NatInstance] = field(default_factory=list)


Probe = Callable[[str, float], ProbeStatus]


def check_instances(
    instances: Sequence[NatInstance],
    port: int,
    timeout: float,
    use_public_ip: bool = False,
    max_workers: int = 10,
    probe: Probe = tcp_check,
) -> HealthReport:
    """모든 NAT 인스턴스를 동시에 검사하고 live/dead로 분리

    모든 검사가 끝난 후에만 반환합니다. 검사 중 예기치 않은 예외가
    발생한 인스턴스는 dead로 분류합니다.

    Args:
        instances: 조회된 NAT 인스턴스 목록
        port: 헬스체크 포트
        timeout: 인스턴스별 타임아웃 (초)
        use_public_ip: Public IP 사용 여부
        max_workers: 동시 검사 워커 수
        probe: 단일 주소 검사 함수

    Returns:
        HealthReport
    """

    def _check(ni: NatInstance) -> ProbeStatus:
        address = probe_address(ni, port, use_public_ip)
        if not address:
            logger.debug(f"Instance {ni.id} has no {'public' if use_public_ip else 'private'} IP")
            return ProbeStatus.DEAD
        status = probe(address, timeout)
        if status is ProbeStatus.ALIVE:
            logger.debug(f"Instance {ni.id} ({address}) is alive")
        else:
            logger.debug(f"Instance {ni.id} ({address}) is dead")
        return status

    result = parallel_map(_check, instances, key=lambda ni: ni.id, max_workers=max_workers)

    report = HealthReport()
    for ni, task in zip(instances, result.results):
        if task.success and task.data is ProbeStatus.ALIVE:
            report.live.append(ni)
        else:
            if task.error is not None:
                logger.warning(f"헬스체크 실패 [{ni.id}]: {task.error.message}")
            report.dead.append(ni)

    report.live.sort(key=launch_order_key)
    return report
