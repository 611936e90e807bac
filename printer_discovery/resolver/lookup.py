"""
lookup.py

Time-bounded IPv4 name lookups. ``getaddrinfo`` cannot be interrupted, so it
runs on a small worker pool and the caller stops waiting once its budget is
spent; a stuck lookup finishes in the background and its answer is dropped.
"""

import ipaddress
import socket
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional


_lookup_pool = ThreadPoolExecutor(max_workers=8, thread_name_prefix="pd-lookup")


def as_ipv4_literal(host: str) -> Optional[str]:
    """Return ``host`` if it is a dotted IPv4 literal, else None."""
    try:
        return str(ipaddress.IPv4Address(host))
    except ValueError:
        return None


def lookup_ipv4(hostname: str, timeout_s: float) -> List[str]:
    """
    Resolve ``hostname`` to its IPv4 addresses in resolver order.

    Raises:
        socket.gaierror: the name has no usable record, or is not a valid
            DNS name (empty or over-long label, embedded NUL)
        concurrent.futures.TimeoutError: the lookup did not finish in time
    """
    future = _lookup_pool.submit(
        socket.getaddrinfo, hostname, None, socket.AF_INET, socket.SOCK_STREAM
    )
    try:
        infos = future.result(timeout=timeout_s)
    except (UnicodeError, ValueError) as e:
        # IDNA encoding rejects the name before any query is sent
        raise socket.gaierror(socket.EAI_NONAME, f"invalid hostname {hostname!r}: {e}") from e
    except BaseException:
        future.cancel()
        raise

    addresses: List[str] = []
    for _family, _type, _proto, _canon, sockaddr in infos:
        ip = sockaddr[0]
        if ip not in addresses:
            addresses.append(ip)
    return addresses
