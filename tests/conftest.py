"""
tests/conftest.py - pytest 공통 픽스처

- make_instance / make_table: 도메인 스냅샷 팩토리
- client_error: botocore ClientError 생성
- moto_ec2: VPC + 서브넷이 준비된 moto EC2 클라이언트

Usage:
    def test_something(make_instance, make_table, moto_ec2):
        ni = make_instance("i-1", zone="a")
        ec2, vpc_id, subnet_id = moto_ec2
"""

from datetime import datetime, timedelta, timezone

import pytest
from botocore.exceptions import ClientError

from nat_router.core.types import NatInstance, RoutingTable

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)
TEST_REGION = "ap-southeast-1"

FAKE_CREDENTIALS = {
    "AWS_ACCESS_KEY_ID": "testing",
    "AWS_SECRET_ACCESS_KEY": "testing",
    "AWS_SESSION_TOKEN": "testing",
    "AWS_DEFAULT_REGION": TEST_REGION,
}


@pytest.fixture(autouse=True)
def fake_aws_environment(monkeypatch):
    """실제 AWS 자격 증명/프로파일이 테스트에 섞이지 않도록 격리"""
    for name, value in FAKE_CREDENTIALS.items():
        monkeypatch.setenv(name, value)
    monkeypatch.delenv("AWS_PROFILE", raising=False)


@pytest.fixture
def make_instance():
    """NatInstance 팩토리 (offset: BASE_TIME 기준 LaunchTime 오프셋, 분)"""

    def _make(
        instance_id: str,
        zone: str = "",
        offset: int = 0,
        private_ip: str = "10.0.0.1",
        public_ip: str = "",
        source_dest_check: bool = False,
        state: str = "running",
    ) -> NatInstance:
        return NatInstance(
            id=instance_id,
            launch_time=BASE_TIME + timedelta(minutes=offset),
            state=state,
            private_ip=private_ip,
            public_ip=public_ip,
            zone=zone,
            source_dest_check=source_dest_check,
        )

    return _make


@pytest.fixture
def make_table():
    def _make(table_id: str, zone: str = "", egress: str = "") -> RoutingTable:
        return RoutingTable(id=table_id, zone=zone, egress_instance_id=egress)

    return _make


def make_client_error(code: str, message: str = "Test error", operation: str = "TestOperation") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)  # type: ignore[arg-type]


@pytest.fixture
def client_error():
    """ClientError 생성 헬퍼: client_error("InvalidRoute.NotFound")"""
    return make_client_error


@pytest.fixture
def moto_ec2():
    """moto EC2 (VPC 10.0.0.0/16 + 서브넷 10.0.1.0/24)"""
    moto = pytest.importorskip("moto")

    with moto.mock_aws():
        import boto3

        ec2 = boto3.client("ec2", region_name=TEST_REGION)
        vpc_id = ec2.create_vpc(CidrBlock="10.0.0.0/16")["Vpc"]["VpcId"]
        subnet_id = ec2.create_subnet(VpcId=vpc_id, CidrBlock="10.0.1.0/24")["Subnet"]["SubnetId"]
        yield ec2, vpc_id, subnet_id
