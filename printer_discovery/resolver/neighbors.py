"""
neighbors.py

Read-only access to the operating system's neighbor (ARP) cache.

Only the passive cache is consulted: nothing is sent on the wire, so a device
that has not talked to this host recently will not be listed. Entries are
local-subnet only; this is not a general address lookup.
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from printer_discovery.utils import app_logger, config


_MAC_PATTERN = re.compile(r"^[0-9a-f]{2}([:-])[0-9a-f]{2}(\1[0-9a-f]{2}){4}$")
_BARE_MAC_PATTERN = re.compile(r"^[0-9a-f]{12}$")

INCOMPLETE_FLAGS = "0x0"
NULL_MAC = "00:00:00:00:00:00"


def normalize_mac(value: str) -> Optional[str]:
    """
    Return ``value`` as lower-case colon-separated hex, or None if malformed.

    Accepts ``AA:BB:CC:DD:EE:FF``, ``aa-bb-cc-dd-ee-ff`` and ``aabbccddeeff``.
    """
    text = (value or "").strip().lower()
    if _MAC_PATTERN.match(text):
        return text.replace("-", ":")
    if _BARE_MAC_PATTERN.match(text):
        return ":".join(text[i:i + 2] for i in range(0, 12, 2))
    return None


@dataclass(frozen=True)
class NeighborEntry:
    ip: str
    mac: str
    device: Optional[str] = None


class NeighborTable:
    """
    Parses the Linux neighbor cache exposed at ``/proc/net/arp``.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None) -> None:
        self.path = Path(path or config.get("resolver.neighbor_table", "/proc/net/arp"))
        self.logger = app_logger

    def _read(self) -> str:
        try:
            return self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            self.logger.warning(
                f"Neighbor table not available at {self.path} ({e}); "
                "hardware address lookups will find nothing"
            )
            return ""

    def entries(self) -> List[NeighborEntry]:
        """Return complete cache entries in table order."""
        return parse_proc_arp(self._read())

    def lookup(self, mac: str) -> Optional[str]:
        """Return the IPv4 address cached for ``mac`` (case-insensitive), or None."""
        wanted = normalize_mac(mac)
        if wanted is None:
            return None
        for entry in self.entries():
            if entry.mac == wanted:
                return entry.ip
        return None


def parse_proc_arp(text: str) -> List[NeighborEntry]:
    """
    Parse ``/proc/net/arp`` content.

    Columns: IP address, HW type, Flags, HW address, Mask, Device.
    Incomplete entries (flags 0x0 or an all-zero address) are skipped.
    """
    entries: List[NeighborEntry] = []
    lines = text.splitlines()

    for line in lines[1:]:
        fields = line.split()
        if len(fields) < 4:
            continue

        ip, _hw_type, flags, hw_address = fields[:4]
        device = fields[5] if len(fields) > 5 else None

        mac = normalize_mac(hw_address)
        if mac is None or mac == NULL_MAC or flags == INCOMPLETE_FLAGS:
            continue

        entries.append(NeighborEntry(ip=ip, mac=mac, device=device))

    return entries
