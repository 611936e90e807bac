"""
prober.py

Single bounded-time TCP connect probe.
"""

import socket
import time
from concurrent.futures import TimeoutError as LookupTimeout
from typing import Optional

from printer_discovery.models import Endpoint, ProbeOutcome, ProbeResult
from printer_discovery.resolver.lookup import as_ipv4_literal, lookup_ipv4
from printer_discovery.utils import app_logger


def probe(endpoint: Endpoint, timeout_ms: int) -> ProbeResult:
    """
    Attempt one TCP handshake with ``endpoint`` and classify the outcome.

    Name resolution for non-literal hosts shares the same budget as the
    connect. Nothing is sent on success; the socket is closed on every path.

    Args:
        endpoint: Destination to probe
        timeout_ms: Upper bound for the whole attempt, in milliseconds

    Returns:
        ProbeResult describing the attempt

    Raises:
        ValueError: If timeout_ms is not positive
    """
    if isinstance(timeout_ms, bool) or not isinstance(timeout_ms, int) or timeout_ms <= 0:
        raise ValueError(f"timeout_ms must be a positive integer, got {timeout_ms!r}")

    budget_s = timeout_ms / 1000.0
    start = time.perf_counter()

    def finish(outcome: ProbeOutcome, detail: Optional[str] = None) -> ProbeResult:
        elapsed_ms = int(round((time.perf_counter() - start) * 1000))
        result = ProbeResult(
            endpoint=endpoint,
            outcome=outcome,
            elapsed_ms=elapsed_ms,
            detail=detail,
        )
        app_logger.debug(
            f"Probe {endpoint}: {outcome.value} in {elapsed_ms}ms"
            + (f" ({detail})" if detail else "")
        )
        return result

    address = as_ipv4_literal(endpoint.host)
    if address is None:
        try:
            addresses = lookup_ipv4(endpoint.host, budget_s)
        except LookupTimeout:
            return finish(ProbeOutcome.TIMED_OUT, f"name lookup for {endpoint.host} timed out")
        except socket.gaierror as e:
            return finish(ProbeOutcome.UNRESOLVED, str(e))
        except OSError as e:
            return finish(ProbeOutcome.ERROR, str(e))

        if not addresses:
            return finish(ProbeOutcome.UNRESOLVED, f"no IPv4 address for {endpoint.host}")
        address = addresses[0]

    remaining_s = budget_s - (time.perf_counter() - start)
    if remaining_s <= 0:
        return finish(ProbeOutcome.TIMED_OUT, "budget spent on name lookup")

    try:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
            sock.settimeout(remaining_s)
            sock.connect((address, endpoint.port))
    except socket.timeout:
        return finish(ProbeOutcome.TIMED_OUT)
    except ConnectionRefusedError:
        return finish(ProbeOutcome.REFUSED)
    except socket.gaierror as e:
        return finish(ProbeOutcome.UNRESOLVED, str(e))
    except OSError as e:
        return finish(ProbeOutcome.ERROR, str(e) or e.__class__.__name__)

    return finish(ProbeOutcome.REACHABLE)
