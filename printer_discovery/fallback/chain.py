"""
chain.py

Ordered fallback over connection strategies: explicit endpoint, symbolic
endpoint (hostname or hardware address) and scans. The first entry that
yields a reachable endpoint wins and later entries are never evaluated.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from printer_discovery.errors import AllMethodsExhausted, ResolutionError
from printer_discovery.models import (
    Endpoint,
    FallbackEntry,
    FallbackPlan,
    ProbeOutcome,
    ProbeResult,
    ScanSpec,
    SymbolicEndpoint,
)
from printer_discovery.resolver import Resolver
from printer_discovery.scanner import Scanner
from printer_discovery.utils import app_logger


@dataclass(frozen=True)
class AttemptRecord:
    """Terminal outcome of one fallback entry."""
    label: str
    outcome: ProbeOutcome
    detail: Optional[str] = None
    results: Tuple[ProbeResult, ...] = ()


@dataclass(frozen=True)
class FallbackSuccess:
    """Which entry succeeded and the endpoint a printer client should open."""
    label: str
    endpoint: Endpoint
    result: ProbeResult
    attempts: Tuple[AttemptRecord, ...] = ()


class FallbackChain:
    """
    Evaluates a FallbackPlan strictly in order.
    """

    def __init__(
        self,
        scanner: Optional[Scanner] = None,
        resolver: Optional[Resolver] = None,
    ) -> None:
        self.scanner = scanner or Scanner()
        self.resolver = resolver or Resolver()
        self.logger = app_logger

    def try_in_order(self, plan: FallbackPlan) -> FallbackSuccess:
        """
        Return the first entry of ``plan`` that reaches a printer.

        Raises:
            AllMethodsExhausted: no entry produced a reachable endpoint
        """
        attempts: List[AttemptRecord] = []

        for position, entry in enumerate(plan, start=1):
            self.logger.info(
                f"[{position}/{len(plan)}] Trying {entry.label} "
                f"({entry.target}, timeout={entry.timeout_ms}ms)"
            )

            found, attempt = self._evaluate(entry)
            attempts.append(attempt)

            if found is not None:
                self.logger.info(f"Connected via {entry.label}: {found.endpoint}")
                return FallbackSuccess(
                    label=entry.label,
                    endpoint=found.endpoint,
                    result=found,
                    attempts=tuple(attempts),
                )

            self.logger.warning(
                f"{entry.label} failed: {attempt.outcome.value}"
                + (f" ({attempt.detail})" if attempt.detail else "")
            )

        error = AllMethodsExhausted(plan, attempts)
        self.logger.error(str(error))
        raise error

    def _evaluate(self, entry: FallbackEntry) -> Tuple[Optional[ProbeResult], AttemptRecord]:
        target = entry.target

        if isinstance(target, SymbolicEndpoint):
            try:
                address = self.resolver.resolve(target.request)
            except ResolutionError as e:
                return None, AttemptRecord(entry.label, ProbeOutcome.UNRESOLVED, str(e))
            target = Endpoint(address, target.port)

        if isinstance(target, Endpoint):
            target = ScanSpec.explicit([target])

        outcome = self.scanner.first_reachable(target, entry.timeout_ms)

        if outcome.found is not None:
            attempt = AttemptRecord(
                entry.label, ProbeOutcome.REACHABLE, None, outcome.results
            )
            return outcome.found, attempt

        if not outcome.results:
            return None, AttemptRecord(entry.label, ProbeOutcome.ERROR, "no candidates")

        last = outcome.results[-1]
        return None, AttemptRecord(entry.label, last.outcome, last.detail, outcome.results)


def try_in_order(plan: FallbackPlan) -> FallbackSuccess:
    """Evaluate ``plan`` with a default FallbackChain."""
    return FallbackChain().try_in_order(plan)
