"""
summary.py

Console-ready tables for probe results, fallback attempts and discovered
printers.
"""

from typing import Iterable, List

from colorama import Fore, Style, init as colorama_init
from tabulate import tabulate

from printer_discovery.discovery import DiscoveredPrinter
from printer_discovery.errors import AllMethodsExhausted
from printer_discovery.fallback.chain import AttemptRecord
from printer_discovery.models import ProbeOutcome, ProbeResult

colorama_init(autoreset=True)


OUTCOME_COLORS = {
    ProbeOutcome.REACHABLE: Fore.GREEN,
    ProbeOutcome.REFUSED: Fore.YELLOW,
    ProbeOutcome.TIMED_OUT: Fore.YELLOW,
    ProbeOutcome.UNRESOLVED: Fore.RED,
    ProbeOutcome.ERROR: Fore.RED,
}


def format_outcome(outcome: ProbeOutcome, color: bool = True) -> str:
    if not color:
        return outcome.value
    return f"{OUTCOME_COLORS[outcome]}{outcome.value}{Style.RESET_ALL}"


def format_probe_results(results: Iterable[ProbeResult], color: bool = True) -> str:
    """Render probe results as a grid table."""
    rows = [
        [
            r.endpoint.host,
            r.endpoint.port,
            format_outcome(r.outcome, color),
            r.elapsed_ms,
            r.detail or "",
        ]
        for r in results
    ]
    return tabulate(
        rows,
        headers=["Host", "Port", "Outcome", "Elapsed (ms)", "Detail"],
        tablefmt="grid",
    )


def format_attempts(attempts: Iterable[AttemptRecord], color: bool = True) -> str:
    rows = [
        [
            position,
            a.label,
            format_outcome(a.outcome, color),
            len(a.results),
            a.detail or "",
        ]
        for position, a in enumerate(attempts, start=1)
    ]
    return tabulate(
        rows,
        headers=["#", "Method", "Outcome", "Probes", "Detail"],
        tablefmt="grid",
    )


def format_exhaustion(error: AllMethodsExhausted, color: bool = True) -> str:
    """Describe every attempted fallback entry of a failed plan."""
    lines: List[str] = []
    title = f"All {len(error.attempts)} connection method(s) failed"
    lines.append(f"{Fore.RED}{title}{Style.RESET_ALL}" if color else title)
    if error.attempts:
        lines.append(format_attempts(error.attempts, color))
    return "\n".join(lines)


def format_discovered(printers: Iterable[DiscoveredPrinter]) -> str:
    rows = [
        [index, p.endpoint.host, p.endpoint.port, p.method, p.mac or ""]
        for index, p in enumerate(printers, start=1)
    ]
    if not rows:
        return "No thermal printers found on the network"
    return tabulate(
        rows,
        headers=["#", "IP", "Port", "Found via", "MAC"],
        tablefmt="grid",
    )
