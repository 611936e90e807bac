"""
client.py

Boundary with the printer protocol client. Discovery only ever hands the
client a validated Endpoint; it never builds protocol bytes itself.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from printer_discovery.errors import TransportError
from printer_discovery.fallback.chain import FallbackChain, FallbackSuccess
from printer_discovery.models import Endpoint, FallbackPlan
from printer_discovery.utils import app_logger


class PrinterClient(Protocol):
    """What a printer protocol client session must offer."""

    def send_command(self, data: bytes) -> None:
        ...

    def read_status(self) -> bytes:
        ...

    def close(self) -> None:
        ...


ClientFactory = Callable[[Endpoint], PrinterClient]


@dataclass
class PrinterSession:
    """An open client together with how its endpoint was found."""
    client: PrinterClient
    discovery: FallbackSuccess

    @property
    def endpoint(self) -> Endpoint:
        return self.discovery.endpoint

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "PrinterSession":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def connect_printer(
    plan: FallbackPlan,
    client_factory: ClientFactory,
    chain: Optional[FallbackChain] = None,
) -> PrinterSession:
    """
    Run ``plan`` and open a client session on the first reachable endpoint.

    Raises:
        AllMethodsExhausted: no plan entry reached a printer
        TransportError: the client factory failed to open the session
    """
    chain = chain or FallbackChain()
    success = chain.try_in_order(plan)

    try:
        client = client_factory(success.endpoint)
    except OSError as e:
        app_logger.error(f"Printer client could not open {success.endpoint}: {e}")
        raise TransportError(f"Could not open printer session on {success.endpoint}", str(e)) from e

    app_logger.info(f"Printer session opened on {success.endpoint} via {success.label}")
    return PrinterSession(client=client, discovery=success)
