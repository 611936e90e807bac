"""
discovery.py

Multi-method printer discovery. Unlike the fallback chain, every method runs
and every reachable printer is reported, labelled with the method that found
it first.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from printer_discovery.fallback.plans import discovery_port, discovery_specs
from printer_discovery.models import Endpoint, ScanSpec
from printer_discovery.resolver.neighbors import NeighborTable
from printer_discovery.scanner import Scanner
from printer_discovery.utils import app_logger, config


METHOD_COMMON = "common IP"
METHOD_SWEEP = "network scan"
METHOD_NEIGHBORS = "device discovery"


@dataclass(frozen=True)
class DiscoveredPrinter:
    endpoint: Endpoint
    method: str
    mac: Optional[str] = None


def discover_printers(
    scanner: Optional[Scanner] = None,
    timeout_ms: Optional[int] = None,
    settings: Optional[Dict[str, Any]] = None,
    neighbor_table: Optional[NeighborTable] = None,
) -> List[DiscoveredPrinter]:
    """
    Probe common printer addresses, the configured range sweep and the
    neighbor cache, and return every reachable printer.

    Args:
        scanner: Scanner to probe with (default: configured Scanner)
        timeout_ms: Per-probe bound (default: ``probe.timeout_ms``)
        settings: ``discovery`` settings mapping (default: from config)
        neighbor_table: Neighbor cache to enumerate (default: system table)

    Returns:
        Discovered printers in method order, one per endpoint
    """
    scanner = scanner or Scanner()
    timeout_ms = timeout_ms or int(config.get("probe.timeout_ms", 3000))
    settings = settings if settings is not None else config.get("discovery", {})
    method_names = {"common_hosts": METHOD_COMMON, "sweep": METHOD_SWEEP}
    methods = [(method_names[key], spec, {}) for key, spec in discovery_specs(settings)]
    port = discovery_port(settings)

    if settings.get("use_neighbor_table", True):
        table = neighbor_table or NeighborTable()
        neighbors = table.entries()
        if neighbors:
            macs = {n.ip: n.mac for n in neighbors}
            spec = ScanSpec.explicit(Endpoint(n.ip, port) for n in neighbors)
            methods.append((METHOD_NEIGHBORS, spec, macs))

    found: Dict[Endpoint, DiscoveredPrinter] = {}

    for method, spec, macs in methods:
        app_logger.info(f"Discovery method '{method}': {len(spec)} candidate(s)")
        for result in scanner.scan(spec, timeout_ms):
            if not result.reachable or result.endpoint in found:
                continue
            printer = DiscoveredPrinter(
                endpoint=result.endpoint,
                method=method,
                mac=macs.get(result.endpoint.host),
            )
            found[result.endpoint] = printer
            app_logger.info(f"Found printer at {result.endpoint} via {method}")

    if not found:
        app_logger.warning("No printers found on the network")

    return list(found.values())
