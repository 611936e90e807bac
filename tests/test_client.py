import pytest

from printer_discovery.client import PrinterSession, connect_printer
from printer_discovery.errors import AllMethodsExhausted, TransportError
from printer_discovery.fallback import FallbackChain
from printer_discovery.models import Endpoint, FallbackEntry, FallbackPlan
from printer_discovery.scanner import Scanner


class RecordingClient:
    def __init__(self, endpoint):
        self.endpoint = endpoint
        self.sent = []
        self.closed = False

    def send_command(self, data):
        self.sent.append(data)

    def read_status(self):
        return b"\x16"

    def close(self):
        self.closed = True


@pytest.fixture
def plan():
    return FallbackPlan((
        FallbackEntry("Primary IP", Endpoint("10.0.0.1", 9100), 1000),
        FallbackEntry("Alternative IP", Endpoint("10.0.0.2", 9100), 1000),
    ))


def test_connect_printer_hands_endpoint_to_client(plan, fake_probe):
    chain = FallbackChain(scanner=Scanner(concurrency=1, probe_fn=fake_probe(reachable={"10.0.0.2"})))

    session = connect_printer(plan, RecordingClient, chain=chain)

    assert isinstance(session, PrinterSession)
    assert session.client.endpoint == Endpoint("10.0.0.2", 9100)
    assert session.discovery.label == "Alternative IP"
    with session:
        session.client.send_command(b"\x1b@")
    assert session.client.closed


def test_connect_printer_wraps_client_failures(plan, fake_probe):
    chain = FallbackChain(scanner=Scanner(concurrency=1, probe_fn=fake_probe(reachable={"10.0.0.1"})))

    def broken(endpoint):
        raise ConnectionResetError(104, "Connection reset by peer")

    with pytest.raises(TransportError) as excinfo:
        connect_printer(plan, broken, chain=chain)
    assert "reset" in excinfo.value.detail


def test_connect_printer_propagates_exhaustion(plan, fake_probe):
    chain = FallbackChain(scanner=Scanner(concurrency=1, probe_fn=fake_probe()))
    with pytest.raises(AllMethodsExhausted):
        connect_printer(plan, RecordingClient, chain=chain)
