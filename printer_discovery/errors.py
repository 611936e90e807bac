"""
errors.py

Exception taxonomy. Routine network conditions (refused, timed out,
unresolved) are ProbeOutcome values and never raised.
"""

from typing import Optional, Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from printer_discovery.fallback.chain import AttemptRecord
    from printer_discovery.models import FallbackPlan


class DiscoveryError(Exception):
    """Base class for every error raised by printer_discovery."""
    pass


class ResolutionError(DiscoveryError):
    """Raised when an identifier cannot be turned into an IPv4 address."""

    def __init__(self, message: str, value: Optional[str] = None) -> None:
        super().__init__(message)
        self.value = value


class InvalidAddress(ResolutionError):
    """Raised when a literal or hardware address is malformed."""
    pass


class NameNotFound(ResolutionError):
    """Raised when a hostname has no IPv4 record."""
    pass


class ResolutionTimeout(ResolutionError):
    """Raised when a name lookup exceeds its time bound."""
    pass


class HardwareAddressNotFound(ResolutionError):
    """Raised when no neighbor cache entry matches a hardware address."""
    pass


class TransportError(DiscoveryError):
    """Raised when handing a discovered endpoint to a printer client fails."""

    def __init__(self, message: str, detail: Optional[str] = None) -> None:
        super().__init__(message)
        self.detail = detail


class AllMethodsExhausted(DiscoveryError):
    """
    Raised when no fallback entry produced a reachable endpoint.

    Carries the attempted plan and one attempt record per evaluated entry.
    """

    def __init__(self, plan: "FallbackPlan", attempts: Sequence["AttemptRecord"]) -> None:
        self.plan = plan
        self.attempts = tuple(attempts)
        summary = "; ".join(f"{a.label}: {a.outcome.value}" for a in self.attempts)
        super().__init__(
            f"All {len(self.attempts)} connection methods exhausted"
            + (f" ({summary})" if summary else "")
        )
