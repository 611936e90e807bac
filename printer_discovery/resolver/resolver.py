"""
resolver.py

Turns a ResolutionRequest into a literal IPv4 address.
"""

import socket
from concurrent.futures import TimeoutError as LookupTimeout
from typing import Callable, List, Optional

from printer_discovery.errors import (
    HardwareAddressNotFound,
    InvalidAddress,
    NameNotFound,
    ResolutionError,
    ResolutionTimeout,
)
from printer_discovery.models import ResolutionKind, ResolutionRequest
from printer_discovery.resolver.lookup import as_ipv4_literal, lookup_ipv4
from printer_discovery.resolver.neighbors import NeighborTable, normalize_mac
from printer_discovery.utils import app_logger, config


LookupFn = Callable[[str, float], List[str]]


class Resolver:
    """
    Resolves literal addresses, hostnames and hardware addresses.

    Hostnames go through the system resolver and return the first IPv4
    address. Hardware addresses are matched against the passive neighbor
    cache only, so they resolve for devices on the local subnet that this
    host has recently exchanged traffic with.
    """

    def __init__(
        self,
        timeout_ms: Optional[int] = None,
        neighbor_table: Optional[NeighborTable] = None,
        lookup: Optional[LookupFn] = None,
    ) -> None:
        if timeout_ms is None:
            timeout_ms = int(config.get("resolver.timeout_ms", 5000))
        if isinstance(timeout_ms, bool) or not isinstance(timeout_ms, int) or timeout_ms <= 0:
            raise ValueError(f"timeout_ms must be a positive integer, got {timeout_ms!r}")
        self.timeout_ms = timeout_ms
        self.neighbor_table = neighbor_table or NeighborTable()
        self.lookup = lookup or lookup_ipv4
        self.logger = app_logger

    def resolve(self, request: ResolutionRequest) -> str:
        """
        Resolve ``request`` to a dotted IPv4 literal.

        Raises:
            InvalidAddress: literal or hardware address is malformed
            NameNotFound: hostname has no IPv4 record
            ResolutionTimeout: hostname lookup exceeded the time bound
            HardwareAddressNotFound: no neighbor cache entry matches
        """
        if request.kind is ResolutionKind.LITERAL_ADDRESS:
            return self._resolve_literal(request.value)
        if request.kind is ResolutionKind.HOSTNAME:
            return self._resolve_hostname(request.value)
        if request.kind is ResolutionKind.HARDWARE_ADDRESS:
            return self._resolve_hardware_address(request.value)
        raise ResolutionError(f"Unsupported resolution kind: {request.kind}", request.value)

    def _resolve_literal(self, value: str) -> str:
        if as_ipv4_literal(value) is None or value != value.strip():
            self.logger.error(f"Invalid IPv4 literal: {value!r}")
            raise InvalidAddress(f"Invalid IPv4 address: {value!r}", value)
        return value

    def _resolve_hostname(self, hostname: str) -> str:
        name = hostname.strip()
        if not name:
            raise NameNotFound("Empty hostname", hostname)

        try:
            addresses = self.lookup(name, self.timeout_ms / 1000.0)
        except LookupTimeout:
            self.logger.warning(f"Lookup for {name} exceeded {self.timeout_ms}ms")
            raise ResolutionTimeout(
                f"Lookup for {name!r} timed out after {self.timeout_ms}ms", hostname
            )
        except socket.gaierror as e:
            self.logger.warning(f"Could not resolve hostname {name}: {e}")
            raise NameNotFound(f"Could not resolve hostname {name!r}: {e}", hostname) from e

        if not addresses:
            raise NameNotFound(f"No IPv4 address for hostname {name!r}", hostname)

        if len(addresses) > 1:
            self.logger.debug(f"{name} has {len(addresses)} addresses, using {addresses[0]}")
        self.logger.info(f"Resolved {name} -> {addresses[0]}")
        return addresses[0]

    def _resolve_hardware_address(self, value: str) -> str:
        mac = normalize_mac(value)
        if mac is None:
            self.logger.error(f"Invalid hardware address: {value!r}")
            raise InvalidAddress(f"Invalid hardware address: {value!r}", value)

        ip = self.neighbor_table.lookup(mac)
        if ip is None:
            self.logger.warning(f"{mac} not found in neighbor table {self.neighbor_table.path}")
            raise HardwareAddressNotFound(
                f"Hardware address {mac} not found in the local neighbor cache", value
            )

        self.logger.info(f"Resolved {mac} -> {ip}")
        return ip


def resolve(request: ResolutionRequest) -> str:
    """Resolve ``request`` with a default Resolver."""
    return Resolver().resolve(request)
