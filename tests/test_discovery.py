from printer_discovery.discovery import (
    METHOD_COMMON,
    METHOD_NEIGHBORS,
    METHOD_SWEEP,
    DiscoveredPrinter,
    discover_printers,
)
from printer_discovery.models import Endpoint
from printer_discovery.resolver import NeighborTable
from printer_discovery.scanner import Scanner


SETTINGS = {
    "port": 9100,
    "common_hosts": ["192.168.0.100", "192.168.1.11"],
    "sweep": {"base_subnet": "192.168.1", "start_host": 10, "end_host": 12},
    "use_neighbor_table": True,
}


def test_discovery_collects_every_method(fake_probe, arp_file):
    probe_fn = fake_probe(reachable={"192.168.0.100", "192.168.1.11", "192.168.1.12", "192.168.1.50"})

    printers = discover_printers(
        scanner=Scanner(concurrency=2, probe_fn=probe_fn),
        timeout_ms=500,
        settings=SETTINGS,
        neighbor_table=NeighborTable(arp_file),
    )

    assert printers == [
        DiscoveredPrinter(Endpoint("192.168.0.100", 9100), METHOD_COMMON),
        DiscoveredPrinter(Endpoint("192.168.1.11", 9100), METHOD_COMMON),
        DiscoveredPrinter(Endpoint("192.168.1.12", 9100), METHOD_SWEEP),
        DiscoveredPrinter(Endpoint("192.168.1.50", 9100), METHOD_NEIGHBORS, "00:11:22:33:44:55"),
    ]


def test_discovery_probes_every_candidate(fake_probe, arp_file):
    probe_fn = fake_probe()

    printers = discover_printers(
        scanner=Scanner(concurrency=1, probe_fn=probe_fn),
        timeout_ms=500,
        settings=SETTINGS,
        neighbor_table=NeighborTable(arp_file),
    )

    assert printers == []
    assert len(probe_fn.calls) == 2 + 3 + 3


def test_discovery_without_neighbor_table(fake_probe, arp_file):
    probe_fn = fake_probe(reachable={"192.168.1.50"})
    settings = dict(SETTINGS, use_neighbor_table=False)

    printers = discover_printers(
        scanner=Scanner(concurrency=1, probe_fn=probe_fn),
        timeout_ms=500,
        settings=settings,
        neighbor_table=NeighborTable(arp_file),
    )

    assert printers == []
    assert "192.168.1.50" not in probe_fn.probed_hosts
