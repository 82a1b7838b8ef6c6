"""
nat_router/router/loop.py - 조정(reconcile) 제어 루프

한 사이클:
    1. 조회: NAT 인스턴스 / 라우팅 테이블 (DiscoveryError → 사이클 중단)
    2. 헬스체크: 모든 인스턴스 동시 검사 후 live/dead 분리
    3. 선출: passive이면 종료
    4. 관찰 상태 + 목표 할당 계산, diff
    5. 변경이 있으면 Source/Dest Check 보정 + 기본 라우트 upsert (best effort)

사이클 간에는 설정된 interval 만큼 대기하며, 종료 이벤트가 설정되면
대기 중에도 즉시 빠져나옵니다. 사이클 간 상태는 유지하지 않습니다.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field

from nat_router.aws.base import Finder, Router
from nat_router.core.config import RouterConfig
from nat_router.core.exceptions import ApplyError, DiscoveryError
from nat_router.core.parallel import ErrorCollector
from nat_router.core.types import NatInstanceAllocation, table_order_key
from nat_router.health import Probe, check_instances, tcp_check

from .allocation import allocate_routes, observe_routes
from .diff import allocations_differ
from .election import elect

logger = logging.getLogger(__name__)


@dataclass
class CycleResult:
    """사이클 실행 결과

    Attributes:
        live: 정상 인스턴스 ID (LaunchTime 순)
        dead: 비정상 인스턴스 ID
        active: 리더 여부
        changed: 목표 할당이 관찰 상태와 달랐는지 여부
        applied: 성공한 변경 작업 수
        errors: 수집된 에러 (조회 실패 포함)
        allocations: 목표 할당 (active일 때만)
    """

    live: list[str] = field(default_factory=list)
    dead: list[str] = field(default_factory=list)
    active: bool = False
    changed: bool = False
    applied: int = 0
    errors: ErrorCollector = field(default_factory=lambda: ErrorCollector("ec2"))
    allocations: list[NatInstanceAllocation] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors.has_errors


class ReconcileLoop:
    """NAT 라우팅 조정 루프

    Example:
        loop = ReconcileLoop(config, finder, router, identity="i-0123")
        loop.run()  # 종료 이벤트가 설정될 때까지 반복
    """

    def __init__(
        self,
        config: RouterConfig,
        finder: Finder,
        router: Router,
        identity: str | None = None,
        probe: Probe = tcp_check,
        shutdown_event: threading.Event | None = None,
    ):
        self.config = config
        self.finder = finder
        self.router = router
        self.identity = identity
        self.probe = probe
        self.shutdown_event = shutdown_event or threading.Event()

    def stop(self) -> None:
        """진행 중인 사이클이 끝나면 루프를 종료하도록 요청"""
        self.shutdown_event.set()

    def run(self, max_cycles: int | None = None) -> int:
        """종료 이벤트가 설정될 때까지 사이클 반복

        Args:
            max_cycles: 최대 사이클 수 (None이면 무제한)

        Returns:
            실행한 사이클 수
        """
        cycles = 0
        logger.info(f"조정 루프 시작: vpc={self.config.vpc_id}, cluster={self.config.cluster_id}, interval={self.config.interval:g}s")

        while not self.shutdown_event.is_set():
            try:
                self.run_once()
            except Exception as e:
                # 다음 사이클이 유일한 재시도 수단
                logger.warning(f"사이클 실행 중 예기치 않은 오류: {e}", exc_info=True)
            cycles += 1

            if max_cycles is not None and cycles >= max_cycles:
                break
            self.shutdown_event.wait(self.config.interval)

        logger.info(f"조정 루프 종료: {cycles}회 실행")
        return cycles

    def run_once(self) -> CycleResult:
        """단일 사이클 실행

        사이클 단위 실패는 로깅 후 결과에 담아 반환하며 예외로 전파하지 않습니다.
        """
        result = CycleResult()
        start_time = time.monotonic()

        try:
            instances = self.finder.find_nat_instances(self.config.cluster_id, self.config.vpc_id)
        except DiscoveryError as e:
            result.errors.collect(e, "find_nat_instances")
            return result

        report = check_instances(
            instances,
            port=self.config.port,
            timeout=self.config.timeout,
            use_public_ip=self.config.use_public_ip,
            max_workers=self.config.probe_workers,
            probe=self.probe,
        )
        result.live = [ni.id for ni in report.live]
        result.dead = [ni.id for ni in report.dead]
        logger.info(f"Healthy NAT Instances found: {len(report.live)} (dead: {len(report.dead)})")

        result.active = elect(report.live, self.identity, self.config.ec2_election)
        if not result.active:
            logger.debug("PASSIVE")
            return result
        logger.debug("ACTIVE")

        try:
            tables = self.finder.find_routing_tables(self.config.cluster_id, self.config.vpc_id)
        except DiscoveryError as e:
            result.errors.collect(e, "find_routing_tables")
            return result

        # API 응답 순서와 무관하게 같은 목표 할당을 얻도록 정렬
        tables = sorted(tables, key=table_order_key)

        observed = observe_routes(report.live, tables)
        desired = allocate_routes(report.live, tables)
        result.allocations = desired

        result.changed = allocations_differ(observed, desired)
        if not result.changed:
            logger.debug("할당 변경 없음, 적용 생략")
        else:
            self._apply(desired, result)

        elapsed = (time.monotonic() - start_time) * 1000
        if result.errors.has_errors:
            logger.warning(f"사이클 완료 ({elapsed:.0f}ms): {result.applied}건 적용, {result.errors.get_summary()}")
        else:
            logger.info(f"사이클 완료 ({elapsed:.0f}ms): {result.applied}건 적용")
        return result

    def _apply(self, allocations: list[NatInstanceAllocation], result: CycleResult) -> None:
        """목표 할당 적용 (실패해도 나머지 작업 계속)"""
        for allocation in allocations:
            ni = allocation.nat_instance
            try:
                if ni.source_dest_check:
                    self.router.prevent_source_dest_check(ni)
                    result.applied += 1
            except ApplyError as e:
                result.errors.collect(e, "prevent_source_dest_check", resource_id=ni.id)

            for rt in allocation.routing_tables:
                try:
                    self.router.upsert_nat_route(self.config.destination_cidr, ni, rt)
                    result.applied += 1
                except ApplyError as e:
                    result.errors.collect(e, "upsert_nat_route", resource_id=rt.id)
