# nat_router/core/__init__.py
"""
nat_router.core - 공통 인프라

설정(config), 예외 계층(exceptions), 데이터 타입(types),
병렬 실행 및 에러 수집(parallel)을 포함합니다.
"""
