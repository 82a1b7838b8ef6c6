"""
tests/aws/test_session.py - build_session 테스트
"""

import logging
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ProfileNotFound

from nat_router.aws.session import build_session, get_client
from nat_router.core.exceptions import ConfigError


@patch("nat_router.aws.session.boto3.Session")
def test_static_credentials(mock_session):
    build_session("eu-west-1", "AKIA", "secret", profile="ignored")

    mock_session.assert_called_once_with(
        aws_access_key_id="AKIA",
        aws_secret_access_key="secret",
        region_name="eu-west-1",
    )


@patch("nat_router.aws.session.boto3.Session")
def test_default_chain(mock_session):
    build_session("ap-southeast-1")

    mock_session.assert_called_once_with(profile_name=None, region_name="ap-southeast-1")


@patch("nat_router.aws.session.boto3.Session")
def test_profile(mock_session):
    build_session("ap-southeast-1", profile="prod")

    mock_session.assert_called_once_with(profile_name="prod", region_name="ap-southeast-1")


@patch("nat_router.aws.session.boto3.Session")
def test_partial_static_credentials(mock_session, caplog):
    """Access Key만 있으면 경고 후 기본 체인 사용"""
    with caplog.at_level(logging.WARNING, logger="nat_router.aws.session"):
        build_session("ap-southeast-1", access_key="AKIA")

    mock_session.assert_called_once_with(profile_name=None, region_name="ap-southeast-1")
    assert "aws-secret-key" in caplog.text


def test_get_client_config():
    session = MagicMock()

    get_client(session, "ec2", region_name="eu-west-1")

    args, kwargs = session.client.call_args
    assert args == ("ec2",)
    assert kwargs["region_name"] == "eu-west-1"
    assert kwargs["config"].retries == {"max_attempts": 3, "mode": "adaptive"}
    assert kwargs["config"].connect_timeout == 5


@patch("nat_router.aws.session.boto3.Session", side_effect=ProfileNotFound(profile="missing"))
def test_unknown_profile(mock_session):
    """없는 프로파일은 시작 시 설정 오류"""
    with pytest.raises(ConfigError) as exc_info:
        build_session("ap-southeast-1", profile="missing")

    assert exc_info.value.config_key == "profile"
    assert "missing" in str(exc_info.value)
