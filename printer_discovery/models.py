"""
models.py

Immutable value types shared by the probe, resolver, scanner and fallback chain.
Every type validates itself on construction and is read-only afterwards.
"""

import ipaddress
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, Optional, Tuple, Union


MIN_PORT = 1
MAX_PORT = 65535


def _check_port(port: int) -> None:
    if isinstance(port, bool) or not isinstance(port, int):
        raise ValueError(f"Port must be an integer, got {port!r}")
    if port < MIN_PORT or port > MAX_PORT:
        raise ValueError(f"Port out of range [{MIN_PORT}, {MAX_PORT}]: {port}")


class Transport(Enum):
    TCP = "tcp"


class ProbeOutcome(Enum):
    """Classification of a single connection attempt."""
    REACHABLE = "reachable"
    REFUSED = "refused"
    TIMED_OUT = "timed_out"
    UNRESOLVED = "unresolved"
    ERROR = "error"


class ResolutionKind(Enum):
    HOSTNAME = "hostname"
    HARDWARE_ADDRESS = "hardware_address"
    LITERAL_ADDRESS = "literal_address"


class ScanMode(Enum):
    EXPLICIT_LIST = "explicit_list"
    RANGE_SWEEP = "range_sweep"


@dataclass(frozen=True)
class Endpoint:
    """
    A TCP destination. ``host`` is an IP literal or a hostname.
    """
    host: str
    port: int
    transport: Transport = Transport.TCP

    def __post_init__(self) -> None:
        if not isinstance(self.host, str) or not self.host.strip():
            raise ValueError("Endpoint host must be a non-empty string")
        _check_port(self.port)

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


@dataclass(frozen=True)
class ProbeResult:
    """
    Terminal record of one probe attempt. A retry produces a new result.
    """
    endpoint: Endpoint
    outcome: ProbeOutcome
    elapsed_ms: int
    detail: Optional[str] = None

    @property
    def reachable(self) -> bool:
        return self.outcome is ProbeOutcome.REACHABLE


@dataclass(frozen=True)
class ResolutionRequest:
    kind: ResolutionKind
    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.kind, ResolutionKind):
            raise ValueError(f"Unknown resolution kind: {self.kind!r}")
        if not isinstance(self.value, str):
            raise ValueError("Resolution value must be a string")

    @classmethod
    def hostname(cls, value: str) -> "ResolutionRequest":
        return cls(ResolutionKind.HOSTNAME, value)

    @classmethod
    def hardware_address(cls, value: str) -> "ResolutionRequest":
        return cls(ResolutionKind.HARDWARE_ADDRESS, value)

    @classmethod
    def literal(cls, value: str) -> "ResolutionRequest":
        return cls(ResolutionKind.LITERAL_ADDRESS, value)


@dataclass(frozen=True)
class SymbolicEndpoint:
    """
    An endpoint whose address is only known once ``request`` is resolved.
    """
    request: ResolutionRequest
    port: int

    def __post_init__(self) -> None:
        _check_port(self.port)

    def __str__(self) -> str:
        return f"{self.request.kind.value}:{self.request.value}:{self.port}"


def normalize_subnet_prefix(base_subnet: str) -> str:
    """
    Reduce ``base_subnet`` to a three-octet prefix such as ``192.168.1``.

    Accepts ``192.168.1``, ``192.168.1.`` and ``/24`` (or narrower) networks
    such as ``192.168.1.0/24``.
    """
    if not isinstance(base_subnet, str) or not base_subnet.strip():
        raise ValueError("Subnet prefix must be a non-empty string")

    text = base_subnet.strip()

    if "/" in text:
        try:
            network = ipaddress.IPv4Network(text, strict=False)
        except ValueError as e:
            raise ValueError(f"Invalid subnet: {base_subnet}") from e
        if network.prefixlen < 24:
            raise ValueError(f"Subnet wider than /24 cannot be swept by last octet: {base_subnet}")
        return ".".join(str(network.network_address).split(".")[:3])

    text = text.rstrip(".")
    octets = text.split(".")
    if len(octets) != 3:
        raise ValueError(f"Subnet prefix must have three octets: {base_subnet}")

    try:
        ipaddress.IPv4Address(f"{text}.0")
    except ValueError as e:
        raise ValueError(f"Invalid subnet prefix: {base_subnet}") from e

    return text


@dataclass(frozen=True)
class RangeSweep:
    """
    Last-octet sweep of ``base_subnet`` from ``start_host`` to ``end_host`` inclusive.
    """
    base_subnet: str
    start_host: int
    end_host: int
    port: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "base_subnet", normalize_subnet_prefix(self.base_subnet))
        _check_port(self.port)
        for name in ("start_host", "end_host"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 255:
                raise ValueError(f"{name} must be an integer in [0, 255], got {value!r}")
        if self.start_host > self.end_host:
            raise ValueError(
                f"start_host ({self.start_host}) must not exceed end_host ({self.end_host})"
            )

    def __len__(self) -> int:
        return self.end_host - self.start_host + 1

    def endpoints(self) -> Iterator[Endpoint]:
        for octet in range(self.start_host, self.end_host + 1):
            yield Endpoint(f"{self.base_subnet}.{octet}", self.port)


@dataclass(frozen=True)
class ScanSpec:
    """
    Target space for the scanner: an explicit candidate list or a range sweep.
    """
    mode: ScanMode
    candidates: Tuple[Endpoint, ...] = ()
    sweep: Optional[RangeSweep] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "candidates", tuple(self.candidates))
        if self.mode is ScanMode.EXPLICIT_LIST:
            if self.sweep is not None:
                raise ValueError("An explicit-list scan cannot carry a range sweep")
            for candidate in self.candidates:
                if not isinstance(candidate, Endpoint):
                    raise ValueError(f"Candidate is not an Endpoint: {candidate!r}")
        elif self.mode is ScanMode.RANGE_SWEEP:
            if self.sweep is None:
                raise ValueError("A range-sweep scan requires a RangeSweep")
            if self.candidates:
                raise ValueError("A range-sweep scan cannot carry explicit candidates")
        else:
            raise ValueError(f"Unknown scan mode: {self.mode!r}")

    @classmethod
    def explicit(cls, endpoints: Iterable[Endpoint]) -> "ScanSpec":
        return cls(ScanMode.EXPLICIT_LIST, candidates=tuple(endpoints))

    @classmethod
    def range_sweep(cls, base_subnet: str, start_host: int, end_host: int, port: int) -> "ScanSpec":
        return cls(ScanMode.RANGE_SWEEP, sweep=RangeSweep(base_subnet, start_host, end_host, port))

    def __len__(self) -> int:
        if self.mode is ScanMode.RANGE_SWEEP:
            return len(self.sweep)
        return len(self.candidates)

    def __str__(self) -> str:
        if self.mode is ScanMode.RANGE_SWEEP:
            s = self.sweep
            return f"{s.base_subnet}.{s.start_host}-{s.end_host}:{s.port}"
        return ", ".join(str(c) for c in self.candidates) or "(empty)"


FallbackTarget = Union[Endpoint, ScanSpec, SymbolicEndpoint]


@dataclass(frozen=True)
class FallbackEntry:
    label: str
    target: FallbackTarget
    timeout_ms: int

    def __post_init__(self) -> None:
        if not isinstance(self.label, str) or not self.label:
            raise ValueError("Fallback entry label must be a non-empty string")
        if not isinstance(self.target, (Endpoint, ScanSpec, SymbolicEndpoint)):
            raise ValueError(f"Unsupported fallback target: {self.target!r}")
        if isinstance(self.timeout_ms, bool) or not isinstance(self.timeout_ms, int) or self.timeout_ms <= 0:
            raise ValueError(f"timeout_ms must be a positive integer, got {self.timeout_ms!r}")


@dataclass(frozen=True)
class FallbackPlan:
    """Ordered connection strategies, tried first to last."""
    entries: Tuple[FallbackEntry, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", tuple(self.entries))

    def __iter__(self) -> Iterator[FallbackEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(e.label for e in self.entries)
