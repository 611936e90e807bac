"""
plans.py

Builds FallbackPlan values from configuration settings and environment
variables. Raw text parsing (YAML) happens in utils.config; this module only
turns already-loaded values into validated model objects.
"""

import os
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from printer_discovery.models import (
    Endpoint,
    FallbackEntry,
    FallbackPlan,
    ResolutionRequest,
    ScanSpec,
    SymbolicEndpoint,
)
from printer_discovery.utils import app_logger, config


ENV_IP = "PRINTER_IP"
ENV_HOSTNAME = "PRINTER_HOSTNAME"
ENV_MAC = "PRINTER_MAC"
ENV_PORT = "PRINTER_PORT"

TARGET_KEYS = ("ip", "hostname", "mac", "hosts", "sweep")


def _default_port() -> int:
    return int(config.get("discovery.port", 9100))


def _default_timeout() -> int:
    return int(config.get("probe.timeout_ms", 3000))


def _parse_port(raw: Any, source: str) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValueError(f"{source}: port must be an integer, got {raw!r}")


def hosts_spec(value: Any, port: int, source: str) -> ScanSpec:
    """Explicit scan over a list of hosts sharing ``port``."""
    if isinstance(value, str) or not isinstance(value, Sequence):
        raise ValueError(f"{source}: hosts must be a list")
    return ScanSpec.explicit(Endpoint(str(host), port) for host in value)


def sweep_spec(value: Any, port: int, source: str) -> ScanSpec:
    """Range sweep from a ``base_subnet`` / ``start_host`` / ``end_host`` mapping."""
    if not isinstance(value, dict):
        raise ValueError(f"{source}: sweep must be a mapping")
    try:
        return ScanSpec.range_sweep(
            str(value["base_subnet"]),
            int(value.get("start_host", 1)),
            int(value.get("end_host", 254)),
            port,
        )
    except KeyError:
        raise ValueError(f"{source}: sweep requires base_subnet")


def discovery_port(settings: Dict[str, Any]) -> int:
    return _parse_port(settings.get("port", _default_port()), "discovery")


def discovery_specs(settings: Dict[str, Any]) -> List[Tuple[str, ScanSpec]]:
    """
    Scan specs for the ``discovery`` settings, as ``(key, spec)`` pairs.

    ``common_hosts`` comes before ``sweep``; either is skipped when unset.
    """
    port = discovery_port(settings)
    specs: List[Tuple[str, ScanSpec]] = []

    hosts = settings.get("common_hosts")
    if hosts:
        specs.append(("common_hosts", hosts_spec(hosts, port, "discovery.common_hosts")))

    sweep = settings.get("sweep")
    if sweep:
        specs.append(("sweep", sweep_spec(sweep, port, "discovery.sweep")))

    return specs


def plan_from_environment(
    environ: Optional[Mapping[str, str]] = None,
    timeout_ms: Optional[int] = None,
) -> FallbackPlan:
    """
    Build a plan from PRINTER_HOSTNAME, PRINTER_MAC, PRINTER_IP and PRINTER_PORT.

    Entries are ordered hostname, hardware address, IP; unset variables are
    skipped. PRINTER_PORT defaults to the configured discovery port.
    """
    env = os.environ if environ is None else environ
    timeout_ms = timeout_ms or _default_timeout()

    raw_port = env.get(ENV_PORT)
    port = _parse_port(raw_port, ENV_PORT) if raw_port else _default_port()

    entries: List[FallbackEntry] = []

    hostname = (env.get(ENV_HOSTNAME) or "").strip()
    if hostname:
        entries.append(FallbackEntry(
            "Hostname", SymbolicEndpoint(ResolutionRequest.hostname(hostname), port), timeout_ms
        ))

    mac = (env.get(ENV_MAC) or "").strip()
    if mac:
        entries.append(FallbackEntry(
            "Hardware address", SymbolicEndpoint(ResolutionRequest.hardware_address(mac), port), timeout_ms
        ))

    ip = (env.get(ENV_IP) or "").strip()
    if ip:
        entries.append(FallbackEntry(
            "Primary IP", SymbolicEndpoint(ResolutionRequest.literal(ip), port), timeout_ms
        ))

    return FallbackPlan(tuple(entries))


def _entry_from_settings(index: int, raw: Dict[str, Any]) -> FallbackEntry:
    source = f"fallback.entries[{index}]"

    if not isinstance(raw, dict):
        raise ValueError(f"{source}: expected a mapping, got {type(raw).__name__}")

    label = raw.get("label") or f"Entry {index + 1}"
    timeout_ms = int(raw.get("timeout_ms", _default_timeout()))
    port = _parse_port(raw.get("port", _default_port()), source)

    present = [key for key in TARGET_KEYS if key in raw]
    if len(present) != 1:
        raise ValueError(
            f"{source}: exactly one of {', '.join(TARGET_KEYS)} is required, got {present or 'none'}"
        )
    kind = present[0]
    value = raw[kind]

    if kind == "ip":
        target = SymbolicEndpoint(ResolutionRequest.literal(str(value)), port)
    elif kind == "hostname":
        target = SymbolicEndpoint(ResolutionRequest.hostname(str(value)), port)
    elif kind == "mac":
        target = SymbolicEndpoint(ResolutionRequest.hardware_address(str(value)), port)
    elif kind == "hosts":
        target = hosts_spec(value, port, source)
    else:
        target = sweep_spec(value, port, source)

    return FallbackEntry(str(label), target, timeout_ms)


def plan_from_config(entries: Optional[Sequence[Dict[str, Any]]] = None) -> FallbackPlan:
    """
    Build a plan from ``fallback.entries`` settings.

    Each entry carries a ``label``, exactly one target key (``ip``,
    ``hostname``, ``mac``, ``hosts`` or ``sweep``) and optional ``port`` and
    ``timeout_ms``.
    """
    if entries is None:
        entries = config.get("fallback.entries", []) or []

    return FallbackPlan(tuple(
        _entry_from_settings(index, raw) for index, raw in enumerate(entries)
    ))


DISCOVERY_LABELS = {"common_hosts": "Common IPs", "sweep": "Network scan"}


def discovery_plan(settings: Optional[Dict[str, Any]] = None) -> FallbackPlan:
    """
    Plan over the configured common printer addresses, then the configured sweep.
    """
    settings = settings if settings is not None else config.get("discovery", {})
    timeout_ms = _default_timeout()

    return FallbackPlan(tuple(
        FallbackEntry(DISCOVERY_LABELS[key], spec, timeout_ms)
        for key, spec in discovery_specs(settings)
    ))


def build_plan(
    environ: Optional[Mapping[str, str]] = None,
    entries: Optional[Sequence[Dict[str, Any]]] = None,
) -> FallbackPlan:
    """
    Environment entries first, then configured entries. With neither, fall
    back to the discovery plan.
    """
    combined = plan_from_environment(environ).entries + plan_from_config(entries).entries

    if not combined:
        app_logger.info("No printer configured; falling back to discovery defaults")
        return discovery_plan()

    return FallbackPlan(combined)
