"""
printer_discovery

Finds network-attached receipt printers: bounded TCP probes, name and
hardware-address resolution, candidate sweeps and ordered fallback plans.
"""

from printer_discovery.errors import (
    AllMethodsExhausted,
    DiscoveryError,
    HardwareAddressNotFound,
    InvalidAddress,
    NameNotFound,
    ResolutionError,
    ResolutionTimeout,
    TransportError,
)
from printer_discovery.models import (
    Endpoint,
    FallbackEntry,
    FallbackPlan,
    ProbeOutcome,
    ProbeResult,
    RangeSweep,
    ResolutionKind,
    ResolutionRequest,
    ScanMode,
    ScanSpec,
    SymbolicEndpoint,
    Transport,
)
from printer_discovery.scanner import Scanner, find_first_reachable, probe, scan
from printer_discovery.resolver import Resolver, resolve
from printer_discovery.fallback import FallbackChain, FallbackSuccess, build_plan, try_in_order
from printer_discovery.discovery import DiscoveredPrinter, discover_printers
from printer_discovery.client import PrinterClient, PrinterSession, connect_printer

__version__ = "0.1.0"
