"""
nat_router/router - 선출, 할당, 변경 감지, 제어 루프
"""

from .allocation import allocate_routes, observe_routes
from .diff import allocations_differ
from .election import elect, resolve_identity
from .loop import CycleResult, ReconcileLoop

__all__: list[str] = [
    "allocate_routes",
    "observe_routes",
    "allocations_differ",
    "elect",
    "resolve_identity",
    "CycleResult",
    "ReconcileLoop",
]
