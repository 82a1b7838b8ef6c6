# nat_router/__init__.py
"""
nat_router - AWS NAT 인스턴스 라우팅 컨트롤러

태그된 NAT 인스턴스의 상태를 주기적으로 확인하고, private subnet의
라우팅 테이블 기본 라우트를 정상 NAT 인스턴스로 재할당합니다.

아키텍처:
    nat_router/
    ├── core/       # 설정, 예외, 병렬 실행
    ├── health/     # TCP 헬스체크
    ├── router/     # 선출, 할당, diff, 제어 루프
    ├── aws/        # EC2 어댑터 + 인메모리 fake
    └── cli/        # Click CLI, 로깅 설정
"""

__version__ = "0.1.0"
