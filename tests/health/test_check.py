"""
tests/health/test_check.py - TCP 헬스체크 테스트
"""

import socket
import threading
import time
from unittest.mock import patch

import pytest

from nat_router.health.check import ProbeStatus, check_instances, probe_address, tcp_check


@pytest.fixture
def listening_port():
    """로컬에서 연결을 받는 TCP 포트"""
    server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    server.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    server.bind(("127.0.0.1", 0))
    server.listen(16)
    yield server.getsockname()[1]
    server.close()


@pytest.fixture
def closed_port():
    """아무도 listen하지 않는 포트"""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return port


class TestTcpCheck:
    """tcp_check 함수 테스트"""

    def test_alive(self, listening_port):
        assert tcp_check(f"127.0.0.1:{listening_port}", timeout=1.0) is ProbeStatus.ALIVE

    def test_refused_is_dead(self, closed_port):
        assert tcp_check(f"127.0.0.1:{closed_port}", timeout=1.0) is ProbeStatus.DEAD

    def test_malformed_address_is_dead(self):
        assert tcp_check("no-port", timeout=0.1) is ProbeStatus.DEAD
        assert tcp_check(":3128", timeout=0.1) is ProbeStatus.DEAD
        assert tcp_check("127.0.0.1:notaport", timeout=0.1) is ProbeStatus.DEAD
        assert tcp_check("127.0.0.1:70000", timeout=0.1) is ProbeStatus.DEAD

    def test_resolution_failure_is_dead(self):
        assert tcp_check("does-not-exist.invalid:3128", timeout=0.5) is ProbeStatus.DEAD

    def test_slow_resolution_bounded_by_timeout(self):
        """이름 해석이 느려도 timeout 안에 DEAD로 판정"""

        def slow_getaddrinfo(*args, **kwargs):
            time.sleep(1.0)
            return []

        with patch("nat_router.health.check.socket.getaddrinfo", side_effect=slow_getaddrinfo):
            started = time.monotonic()
            status = tcp_check("slow.example:3128", timeout=0.1)
            elapsed = time.monotonic() - started

        assert status is ProbeStatus.DEAD
        assert elapsed < 0.5

    def test_hostname_resolved(self, listening_port):
        resolved = [(socket.AF_INET, socket.SOCK_STREAM, 6, "", ("127.0.0.1", listening_port))]

        with patch("nat_router.health.check.socket.getaddrinfo", return_value=resolved) as mock_resolve:
            assert tcp_check(f"nat.internal:{listening_port}", timeout=1.0) is ProbeStatus.ALIVE

        mock_resolve.assert_called_once_with("nat.internal", listening_port, 0, socket.SOCK_STREAM)

    def test_ip_literal_skips_resolution(self, listening_port):
        with patch("nat_router.health.check.socket.getaddrinfo") as mock_resolve:
            assert tcp_check(f"127.0.0.1:{listening_port}", timeout=1.0) is ProbeStatus.ALIVE

        mock_resolve.assert_not_called()


class TestProbeAddress:
    """probe_address 함수 테스트"""

    def test_private_ip(self, make_instance):
        ni = make_instance("i-1", private_ip="10.0.0.5", public_ip="54.1.2.3")
        assert probe_address(ni, 3128, use_public_ip=False) == "10.0.0.5:3128"

    def test_public_ip(self, make_instance):
        ni = make_instance("i-1", private_ip="10.0.0.5", public_ip="54.1.2.3")
        assert probe_address(ni, 3128, use_public_ip=True) == "54.1.2.3:3128"

    def test_missing_ip(self, make_instance):
        ni = make_instance("i-1", private_ip="10.0.0.5", public_ip="")
        assert probe_address(ni, 3128, use_public_ip=True) == ""

    def test_ipv6(self, make_instance):
        ni = make_instance("i-1", private_ip="fd00::1")
        assert probe_address(ni, 3128, use_public_ip=False) == "[fd00::1]:3128"


class TestCheckInstances:
    """check_instances 함수 테스트"""

    def test_partition_and_sort(self, make_instance, listening_port, closed_port):
        """live는 LaunchTime 순, dead는 조회 순"""
        instances = [
            make_instance("i-new", offset=10, private_ip="127.0.0.1"),
            make_instance("i-noip", offset=0, private_ip=""),
            make_instance("i-old", offset=0, private_ip="127.0.0.1"),
        ]

        report = check_instances(instances, port=listening_port, timeout=1.0)

        assert [ni.id for ni in report.live] == ["i-old", "i-new"]
        assert [ni.id for ni in report.dead] == ["i-noip"]

    def test_all_dead(self, make_instance, closed_port):
        instances = [make_instance(f"i-{n}", private_ip="127.0.0.1") for n in range(3)]

        report = check_instances(instances, port=closed_port, timeout=1.0)

        assert report.live == []
        assert len(report.dead) == 3

    def test_probes_run_concurrently(self, make_instance):
        """동시에 실행되며 모든 검사가 끝난 후 반환"""
        barrier = threading.Barrier(4, timeout=5)

        def slow_probe(address, timeout):
            barrier.wait()
            time.sleep(0.05)
            return ProbeStatus.ALIVE

        instances = [make_instance(f"i-{n}", offset=n, private_ip=f"10.0.0.{n + 1}") for n in range(4)]

        report = check_instances(instances, port=3128, timeout=1.0, max_workers=4, probe=slow_probe)

        assert [ni.id for ni in report.live] == ["i-0", "i-1", "i-2", "i-3"]

    def test_probe_exception_is_dead(self, make_instance):
        """검사 함수 예외는 dead로 분류"""

        def broken_probe(address, timeout):
            raise RuntimeError("boom")

        report = check_instances([make_instance("i-1")], port=3128, timeout=1.0, probe=broken_probe)

        assert [ni.id for ni in report.dead] == ["i-1"]

    def test_empty(self):
        report = check_instances([], port=3128, timeout=1.0)

        assert report.live == []
        assert report.dead == []
