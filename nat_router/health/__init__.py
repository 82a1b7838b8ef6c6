"""
nat_router/health - NAT 인스턴스 헬스체크
"""

from .check import HealthReport, Probe, ProbeStatus, check_instances, probe_address, tcp_check

__all__: list[str] = [
    "HealthReport",
    "Probe",
    "ProbeStatus",
    "check_instances",
    "probe_address",
    "tcp_check",
]
