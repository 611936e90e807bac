"""
resolver package

Name, literal and hardware-address resolution to IPv4 literals.
"""

from printer_discovery.resolver.neighbors import NeighborEntry, NeighborTable, normalize_mac
from printer_discovery.resolver.resolver import Resolver, resolve

__all__ = ["NeighborEntry", "NeighborTable", "normalize_mac", "Resolver", "resolve"]
