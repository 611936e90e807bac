import pytest

from printer_discovery.fallback import build_plan, discovery_plan, plan_from_config, plan_from_environment
from printer_discovery.fallback.plans import discovery_specs
from printer_discovery.models import (
    Endpoint,
    ResolutionKind,
    ScanMode,
    ScanSpec,
    SymbolicEndpoint,
)


def test_environment_plan_order_and_port():
    plan = plan_from_environment(
        {
            "PRINTER_IP": "192.168.1.87",
            "PRINTER_HOSTNAME": "thermal-printer.local",
            "PRINTER_PORT": "9101",
        },
        timeout_ms=10000,
    )

    assert plan.labels == ("Hostname", "Primary IP")
    hostname, ip = plan.entries
    assert hostname.target.request.kind is ResolutionKind.HOSTNAME
    assert ip.target.request.kind is ResolutionKind.LITERAL_ADDRESS
    assert ip.target.port == 9101
    assert ip.timeout_ms == 10000


def test_environment_plan_with_mac_uses_default_port():
    plan = plan_from_environment({"PRINTER_MAC": "00:11:22:33:44:55"})
    (entry,) = plan.entries
    assert entry.target == SymbolicEndpoint(entry.target.request, 9100)
    assert entry.target.request.kind is ResolutionKind.HARDWARE_ADDRESS


def test_environment_plan_empty():
    assert len(plan_from_environment({})) == 0


def test_environment_plan_bad_port():
    with pytest.raises(ValueError):
        plan_from_environment({"PRINTER_IP": "10.0.0.1", "PRINTER_PORT": "lp"})


def test_config_plan_entries():
    plan = plan_from_config([
        {"label": "Primary IP", "ip": "192.168.1.87", "timeout_ms": 10000},
        {"label": "Hostname", "hostname": "thermal-printer.local", "port": 9100},
        {"label": "Common IPs", "hosts": ["192.168.1.100", "192.168.1.200"]},
        {"label": "Network scan", "sweep": {"base_subnet": "192.168.1", "start_host": 80, "end_host": 120}},
    ])

    assert plan.labels == ("Primary IP", "Hostname", "Common IPs", "Network scan")
    common = plan.entries[2].target
    assert isinstance(common, ScanSpec)
    assert common.candidates == (Endpoint("192.168.1.100", 9100), Endpoint("192.168.1.200", 9100))
    sweep = plan.entries[3].target
    assert sweep.mode is ScanMode.RANGE_SWEEP
    assert len(sweep) == 41


def test_config_plan_default_label():
    plan = plan_from_config([{"ip": "10.0.0.1"}])
    assert plan.labels == ("Entry 1",)


@pytest.mark.parametrize(
    "entry",
    [
        {"label": "none"},
        {"label": "two", "ip": "10.0.0.1", "hostname": "printer"},
        {"label": "hosts", "hosts": "10.0.0.1"},
        {"label": "sweep", "sweep": {"start_host": 1}},
        {"label": "port", "ip": "10.0.0.1", "port": "abc"},
        "not a mapping",
    ],
)
def test_config_plan_rejects(entry):
    with pytest.raises(ValueError):
        plan_from_config([entry])


def test_discovery_plan_from_settings():
    plan = discovery_plan({
        "port": 9100,
        "common_hosts": ["10.0.0.100"],
        "sweep": {"base_subnet": "10.0.0", "start_host": 1, "end_host": 5},
    })
    assert plan.labels == ("Common IPs", "Network scan")


def test_discovery_specs_shared_by_plan_and_discovery():
    settings = {
        "port": "9101",
        "common_hosts": ["10.0.0.100"],
        "sweep": {"base_subnet": "10.0.0", "start_host": 1, "end_host": 5},
    }

    specs = discovery_specs(settings)

    assert [key for key, _ in specs] == ["common_hosts", "sweep"]
    assert specs[0][1].candidates == (Endpoint("10.0.0.100", 9101),)
    assert len(specs[1][1]) == 5
    assert [entry.target for entry in discovery_plan(settings).entries] == [spec for _, spec in specs]


def test_discovery_specs_skip_unset_methods():
    assert discovery_specs({"port": 9100}) == []
    with pytest.raises(ValueError):
        discovery_specs({"sweep": {"start_host": 1}})


def test_build_plan_environment_first():
    plan = build_plan(
        environ={"PRINTER_IP": "10.0.0.1"},
        entries=[{"label": "Backup", "ip": "10.0.0.2"}],
    )
    assert plan.labels == ("Primary IP", "Backup")


def test_build_plan_falls_back_to_discovery():
    plan = build_plan(environ={}, entries=[])
    assert plan.labels == ("Common IPs", "Network scan")
