"""
scanner package

TCP reachability probing and candidate sweeps.
"""

from printer_discovery.scanner.prober import probe
from printer_discovery.scanner.sweep import (
    Scanner,
    SweepOutcome,
    expand_candidates,
    find_first_reachable,
    scan,
)

__all__ = [
    "probe",
    "Scanner",
    "SweepOutcome",
    "expand_candidates",
    "find_first_reachable",
    "scan",
]
