"""
nat_router/aws/identity.py - EC2 인스턴스 메타데이터 기반 식별

IMDSv2 토큰을 발급받아 instance identity document에서 인스턴스 ID를 읽습니다.
EC2 밖에서 실행되면 짧은 타임아웃 후 IdentityError가 발생합니다.
"""

from __future__ import annotations

import logging

import requests

from nat_router.core.exceptions import IdentityError

logger = logging.getLogger(__name__)

METADATA_ENDPOINT = "http://169.254.169.254"
TOKEN_PATH = "/latest/api/token"
IDENTITY_DOCUMENT_PATH = "/latest/dynamic/instance-identity/document"
TOKEN_TTL_SECONDS = 21600
DEFAULT_TIMEOUT = 1.0


class AwsIdentifier:
    """EC2 메타데이터 서비스 기반 Identifier 구현"""

    def __init__(
        self,
        endpoint: str = METADATA_ENDPOINT,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ):
        self.endpoint = endpoint.rstrip("/")
        self.timeout = timeout
        self.http = session or requests.Session()

    def _get_token(self) -> str:
        response = self.http.put(
            f"{self.endpoint}{TOKEN_PATH}",
            headers={"X-aws-ec2-metadata-token-ttl-seconds": str(TOKEN_TTL_SECONDS)},
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.text

    def get_identity(self) -> str:
        """현재 인스턴스 ID 반환

        Raises:
            IdentityError: 메타데이터 서비스 사용 불가 또는 응답 이상
        """
        try:
            token = self._get_token()
            response = self.http.get(
                f"{self.endpoint}{IDENTITY_DOCUMENT_PATH}",
                headers={"X-aws-ec2-metadata-token": token},
                timeout=self.timeout,
            )
            response.raise_for_status()
            document = response.json()
        except requests.RequestException as e:
            raise IdentityError("Metadata is not available", cause=e) from e
        except ValueError as e:
            raise IdentityError("Unable to retrieve Instance Identity", cause=e) from e

        instance_id = document.get("instanceId") if isinstance(document, dict) else None
        if not instance_id:
            raise IdentityError("Unable to retrieve Instance Identity")
        return instance_id
