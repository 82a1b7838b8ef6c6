"""
nat_router/cli - Click CLI 및 콘솔/로깅 설정
"""
