import socket
import threading
import time

import pytest

from printer_discovery.models import Endpoint, ProbeOutcome, ProbeResult


class FakeProbe:
    """
    Stand-in for probe(): hosts in ``reachable`` answer, everything else gets
    ``default``. ``delays`` maps host -> seconds to sleep before answering.
    """

    def __init__(self, reachable=(), delays=None, default=ProbeOutcome.REFUSED):
        self.reachable = set(reachable)
        self.delays = dict(delays or {})
        self.default = default
        self.calls = []
        self.in_flight = 0
        self.max_in_flight = 0
        self._lock = threading.Lock()

    def __call__(self, endpoint, timeout_ms):
        with self._lock:
            self.calls.append(endpoint)
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            delay = self.delays.get(endpoint.host, 0)
            if delay:
                time.sleep(delay)
            outcome = ProbeOutcome.REACHABLE if endpoint.host in self.reachable else self.default
            return ProbeResult(endpoint, outcome, int(delay * 1000))
        finally:
            with self._lock:
                self.in_flight -= 1

    @property
    def probed_hosts(self):
        return [e.host for e in self.calls]


@pytest.fixture
def fake_probe():
    return FakeProbe


@pytest.fixture
def listening_endpoint():
    server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    server.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    server.bind(("127.0.0.1", 0))
    server.listen(64)
    try:
        yield Endpoint("127.0.0.1", server.getsockname()[1])
    finally:
        server.close()


@pytest.fixture
def closed_endpoint():
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return Endpoint("127.0.0.1", port)


ARP_TABLE = """\
IP address       HW type     Flags       HW address            Mask     Device
192.168.1.1      0x1         0x2         aa:bb:cc:00:11:22     *        eth0
192.168.1.50     0x1         0x2         00:11:22:33:44:55     *        eth0
192.168.1.60     0x1         0x0         00:00:00:00:00:00     *        eth0
192.168.1.11     0x1         0x2         DE:AD:BE:EF:00:01     *        wlan0
"""


@pytest.fixture
def arp_file(tmp_path):
    path = tmp_path / "arp"
    path.write_text(ARP_TABLE, encoding="utf-8")
    return path
