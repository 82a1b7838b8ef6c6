"""
tests/router/test_election.py - 리더 선출 테스트
"""

import pytest

from nat_router.aws import InMemoryCloud
from nat_router.core.exceptions import ConfigError
from nat_router.core.types import launch_order_key
from nat_router.router.election import elect, resolve_identity


class TestElect:
    """elect 함수 테스트"""

    def test_no_live_instances_is_passive(self):
        """live 인스턴스가 없으면 선출 여부와 무관하게 passive"""
        assert elect([], "i-1", election_enabled=False) is False
        assert elect([], "i-1", election_enabled=True) is False

    def test_election_disabled_is_active(self, make_instance):
        """선출 비활성화 시 active"""
        assert elect([make_instance("i-1")], None, election_enabled=False) is True

    def test_oldest_instance_is_active(self, make_instance):
        """가장 먼저 시작된 인스턴스가 리더"""
        live = [make_instance("i-g1", offset=0), make_instance("i-g2", offset=5)]

        assert elect(live, "i-g1", election_enabled=True) is True

    def test_scenario_c(self, make_instance):
        """리더가 아니면 passive"""
        live = [make_instance("i-g1", offset=0), make_instance("i-g2", offset=5)]

        assert elect(live, "i-g2", election_enabled=True) is False

    def test_unknown_identity_is_passive(self, make_instance):
        """ID를 모르면 passive"""
        live = [make_instance("i-g1")]

        assert elect(live, None, election_enabled=True) is False
        assert elect(live, "", election_enabled=True) is False

    def test_same_launch_time_tie_break(self, make_instance):
        """LaunchTime이 같으면 ID가 작은 인스턴스가 리더 (입력 순서 무관)"""
        a = make_instance("i-aaa", offset=0)
        b = make_instance("i-bbb", offset=0)

        assert elect([a, b], "i-aaa", election_enabled=True) is True
        assert elect([b, a], "i-aaa", election_enabled=True) is True
        assert elect([b, a], "i-bbb", election_enabled=True) is False

    def test_deterministic(self, make_instance):
        """같은 스냅샷이면 항상 같은 결과"""
        live = [make_instance(f"i-{n}", offset=10 - n) for n in range(5)]

        outcomes = {elect(live, "i-4", election_enabled=True) for _ in range(20)}
        assert outcomes == {True}


class TestLaunchOrderKey:
    """launch_order_key 정렬 기준 테스트"""

    def test_sorts_by_launch_time_then_id(self, make_instance):
        instances = [
            make_instance("i-c", offset=1),
            make_instance("i-b", offset=0),
            make_instance("i-a", offset=1),
        ]

        assert [ni.id for ni in sorted(instances, key=launch_order_key)] == ["i-b", "i-a", "i-c"]


class TestResolveIdentity:
    """resolve_identity 함수 테스트"""

    def test_returns_identity(self):
        assert resolve_identity(InMemoryCloud(identity="i-self"), election_enabled=True) == "i-self"

    def test_missing_identity_with_election_is_fatal(self):
        """선출 활성화 + ID 확인 실패 → ConfigError"""
        with pytest.raises(ConfigError) as exc_info:
            resolve_identity(InMemoryCloud(identity=None), election_enabled=True)

        assert exc_info.value.config_key == "ec2-election"

    def test_missing_identity_without_election(self):
        """선출 비활성화 시 ID 확인 실패는 무시"""
        assert resolve_identity(InMemoryCloud(identity=None), election_enabled=False) is None
