"""
fallback package

Ordered connection strategies and the plans that drive them.
"""

from printer_discovery.fallback.chain import (
    AttemptRecord,
    FallbackChain,
    FallbackSuccess,
    try_in_order,
)
from printer_discovery.fallback.plans import (
    build_plan,
    discovery_plan,
    plan_from_config,
    plan_from_environment,
)

__all__ = [
    "AttemptRecord",
    "FallbackChain",
    "FallbackSuccess",
    "try_in_order",
    "build_plan",
    "discovery_plan",
    "plan_from_config",
    "plan_from_environment",
]
