"""
nat_router/aws - 클라우드 어댑터

주요 구성 요소:
- Finder / Router / Identifier: 제어 루프가 의존하는 인터페이스
- AwsFinder / AwsRouter / AwsIdentifier: EC2 구현
- InMemoryCloud: 인메모리 fake
- build_session: boto3 세션 생성
"""

from .base import Finder, Identifier, Router
from .finder import AwsFinder
from .identity import AwsIdentifier
from .memory import InMemoryCloud
from .router import AwsRouter
from .session import build_session, get_client

__all__: list[str] = [
    "Finder",
    "Identifier",
    "Router",
    "AwsFinder",
    "AwsIdentifier",
    "AwsRouter",
    "InMemoryCloud",
    "build_session",
    "get_client",
]
