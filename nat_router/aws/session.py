"""
nat_router/aws/session.py - boto3 세션 및 클라이언트 생성

정적 Access Key가 모두 주어지면 사용하고, 아니면 boto3 기본 자격 증명 체인
(환경 변수, 공유 자격 증명 파일, EC2 인스턴스 역할)을 따릅니다.

클라이언트 재시도는 짧게 유지합니다. 실패한 변경은 다음 사이클이 다시 시도합니다.
"""

from __future__ import annotations

import logging
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ProfileNotFound

from nat_router.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

CLIENT_MAX_ATTEMPTS = 3
CLIENT_CONNECT_TIMEOUT = 5  # 초
CLIENT_READ_TIMEOUT = 15  # 초


def build_session(
    region: str,
    access_key: str | None = None,
    secret_key: str | None = None,
    profile: str | None = None,
) -> boto3.Session:
    """boto3 Session 생성

    Args:
        region: AWS 리전
        access_key: 정적 Access Key ID (선택)
        secret_key: 정적 Secret Access Key (선택)
        profile: 공유 자격 증명 프로파일 이름 (선택)

    Raises:
        ConfigError: 프로파일이 없거나 세션 생성 실패
    """
    if access_key and secret_key:
        logger.debug("정적 자격 증명 사용")
        return boto3.Session(
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            region_name=region,
        )

    if access_key or secret_key:
        logger.warning("aws-access-key와 aws-secret-key는 함께 지정해야 합니다. 기본 자격 증명 체인을 사용합니다.")

    try:
        return boto3.Session(profile_name=profile or None, region_name=region)
    except ProfileNotFound as e:
        raise ConfigError("profile", f"profile '{profile}' could not be found", cause=e) from e
    except BotoCoreError as e:
        raise ConfigError("profile", "Unable to create AWS session", cause=e) from e


def get_client(session: boto3.Session, service_name: str = "ec2", region_name: str | None = None, **kwargs: Any) -> Any:
    """adaptive 재시도와 연결/읽기 타임아웃이 설정된 클라이언트 생성

    kwargs로 config가 주어지면 기본 설정 위에 병합합니다.
    """
    config = Config(
        retries={"max_attempts": CLIENT_MAX_ATTEMPTS, "mode": "adaptive"},
        connect_timeout=CLIENT_CONNECT_TIMEOUT,
        read_timeout=CLIENT_READ_TIMEOUT,
    )
    if "config" in kwargs:
        config = config.merge(kwargs.pop("config"))

    return session.client(service_name, region_name=region_name, config=config, **kwargs)
