"""
Tests for interface listing, capability and configuration queries
against real provider scripts.
"""
import logging
import os

import pytest

from conftest import posix_only, write_provider

from extcap import (
    CapabilityQueryError,
    ConfigurationQueryError,
    ExtcapConfig,
    NoConfigurationError,
    create_discovery,
    default_registry,
    DiscoveryScanner,
    ExtcapDiscovery,
    InterfaceRegistry,
    InterfaceType,
    InterfaceUnknownError,
    NoLinkTypesError,
)
from extcap.models import InvocationResult

pytestmark = posix_only


class TestListInterfaces:

    def test_lists_interfaces_from_all_providers(self, discovery, extcap_dir):
        a = write_provider(extcap_dir, "a_prov", interfaces=(
            "interface {value=eth0}{display=Ethernet A}\n"
            "interface {value=usb0}{display=USB A}"))
        b = write_provider(extcap_dir, "b_prov", interfaces="interface {value=wlan0}{display=Wifi B}")

        found = discovery.list_interfaces()

        assert [i.name for i in found] == ["eth0", "usb0", "wlan0"]
        assert [i.provider_path for i in found] == [a, a, b]
        assert found[0].friendly_name == "Ethernet A"
        assert all(i.kind is InterfaceType.EXTCAP for i in found)
        assert discovery.registry.lookup("wlan0") == b

    def test_conflicting_interface_goes_to_first_provider(self, discovery, extcap_dir, caplog):
        a = write_provider(extcap_dir, "a_prov", interfaces="interface {value=eth0}{display=From A}")
        b = write_provider(extcap_dir, "b_prov", interfaces="interface {value=eth0}{display=From B}")

        with caplog.at_level(logging.WARNING, logger="extcap.discovery"):
            found = discovery.list_interfaces()

        assert len(found) == 1
        assert found[0].name == "eth0"
        assert found[0].provider_path == a
        assert discovery.registry.lookup("eth0") == a
        assert any(a in rec.getMessage() and b in rec.getMessage() for rec in caplog.records)

    def test_rerun_after_reordering_picks_new_first_claimant(self, discovery, extcap_dir):
        write_provider(extcap_dir, "a_prov", interfaces="interface {value=eth0}{display=A}")
        write_provider(extcap_dir, "b_prov", interfaces="interface {value=eth0}{display=B}")
        discovery.list_interfaces()
        assert discovery.registry.lookup("eth0").endswith("a_prov")

        # Swap scan order by swapping names
        os.rename(extcap_dir / "a_prov", extcap_dir / "tmp_prov")
        os.rename(extcap_dir / "b_prov", extcap_dir / "a_prov")
        os.rename(extcap_dir / "tmp_prov", extcap_dir / "b_prov")

        found = discovery.list_interfaces()
        assert found[0].friendly_name == "B"
        assert discovery.registry.lookup("eth0").endswith("a_prov")

    def test_listing_resets_previous_registrations(self, discovery, extcap_dir, registry):
        registry.register("stale0", "/nowhere")
        write_provider(extcap_dir, "a_prov", interfaces="interface {value=eth0}{display=A}")

        discovery.list_interfaces()

        assert "stale0" not in registry
        assert "eth0" in registry

    def test_broken_provider_does_not_block_others(self, discovery, extcap_dir):
        write_provider(extcap_dir, "a_prov", interfaces="interface {value=eth0}{display=A}")
        write_provider(extcap_dir, "b_broken", interfaces="interface {value=x}{display=X}")
        (extcap_dir / "b_broken").write_text("#!/bin/sh\nexit 3\n")
        (extcap_dir / "c_notes.txt").write_text("not executable")
        write_provider(extcap_dir, "d_prov", interfaces="interface {value=wlan0}{display=D}")

        found = discovery.list_interfaces()

        assert [i.name for i in found] == ["eth0", "wlan0"]


class TestGetCapabilities:

    def test_link_types_in_provider_order(self, discovery, extcap_dir):
        write_provider(extcap_dir, "a_prov",
                       interfaces="interface {value=eth0}{display=A}",
                       dlts=("dlt {number=1}{name=EN10MB}{display=Ethernet}\n"
                             "dlt {number=147}{name=USER0}{display=User 0}"))
        discovery.list_interfaces()

        caps = discovery.get_capabilities("eth0")

        assert caps.can_set_monitor_mode is False
        assert [(lt.number, lt.name) for lt in caps.link_types] == [(1, "EN10MB"), (147, "USER0")]

    def test_unknown_interface(self, discovery):
        with pytest.raises(InterfaceUnknownError):
            discovery.get_capabilities("eth9")

    def test_zero_link_types(self, discovery, extcap_dir):
        write_provider(extcap_dir, "a_prov", interfaces="interface {value=eth0}{display=A}", dlts="")
        discovery.list_interfaces()

        with pytest.raises(NoLinkTypesError, match="no DLTs"):
            discovery.get_capabilities("eth0")

    def test_owner_not_answering(self, discovery, extcap_dir):
        write_provider(extcap_dir, "a_prov", interfaces="interface {value=eth0}{display=A}")
        discovery.list_interfaces()
        (extcap_dir / "a_prov").write_text("#!/bin/sh\nexit 1\n")

        with pytest.raises(CapabilityQueryError) as excinfo:
            discovery.get_capabilities("eth0")
        assert not isinstance(excinfo.value, NoLinkTypesError)

    def test_only_owner_is_queried(self, discovery, extcap_dir, tmp_path):
        log = tmp_path / "calls.log"
        write_provider(extcap_dir, "a_prov", interfaces="interface {value=eth0}{display=A}",
                       dlts="dlt {number=1}{name=EN10MB}{display=Ethernet}", log_file=log)
        write_provider(extcap_dir, "b_prov", interfaces="interface {value=wlan0}{display=B}",
                       dlts="dlt {number=105}{name=IEEE802_11}{display=Wifi}", log_file=log)
        discovery.list_interfaces()
        log.write_text("")

        caps = discovery.get_capabilities("wlan0")

        assert [lt.number for lt in caps.link_types] == [105]
        calls = log.read_text().splitlines()
        assert len(calls) == 1
        assert calls[0].endswith("b_prov --extcap-dlts --extcap-interface wlan0")


class TestGetConfiguration:

    def test_returns_argument_schema(self, discovery, extcap_dir):
        write_provider(extcap_dir, "a_prov",
                       interfaces="interface {value=eth0}{display=A}",
                       config=("arg {number=0}{call=--delay}{display=Delay}{type=integer}\n"
                               "arg {number=1}{call=--verbose}{display=Verbose}{type=boolflag}"))
        discovery.list_interfaces()

        schemas = discovery.get_configuration("eth0")

        assert len(schemas) == 1
        assert [a.call for a in schemas[0]] == ["--delay", "--verbose"]

    def test_unknown_interface_is_empty(self, discovery):
        assert discovery.get_configuration("eth9") == []


class _TwiceScanner(DiscoveryScanner):
    """Offers the owning provider twice, to observe early termination."""

    def candidates(self):
        owner = self.registry.lookup("eth0")
        return [owner, owner]


class _SequenceInvoker:
    def __init__(self, outputs):
        self.outputs = list(outputs)
        self.calls = 0

    def invoke(self, provider_path, args):
        self.calls += 1
        return InvocationResult(success=True, exit_code=0, output=self.outputs.pop(0))


def test_configuration_keeps_first_response_only():
    registry = InterfaceRegistry()
    registry.register("eth0", "/extcap/a_prov")
    invoker = _SequenceInvoker([
        "arg {number=0}{call=--first}{display=First}{type=string}",
        "arg {number=0}{call=--second}{display=Second}{type=string}",
    ])
    discovery = ExtcapDiscovery(_TwiceScanner("/extcap", registry, invoker=invoker))

    schemas = discovery.get_configuration("eth0")

    assert invoker.calls == 1
    assert [[a.call for a in schema] for schema in schemas] == [["--first"]]


class TestGetConfigurationFailures:

    def test_zero_arguments(self, discovery, extcap_dir):
        write_provider(extcap_dir, "a_prov", interfaces="interface {value=eth0}{display=A}", config="")
        discovery.list_interfaces()

        with pytest.raises(NoConfigurationError, match="no configuration"):
            discovery.get_configuration("eth0")

    def test_owner_not_answering(self, discovery, extcap_dir):
        write_provider(extcap_dir, "a_prov", interfaces="interface {value=eth0}{display=A}")
        discovery.list_interfaces()
        (extcap_dir / "a_prov").write_text("#!/bin/sh\nexit 1\n")

        with pytest.raises(ConfigurationQueryError) as excinfo:
            discovery.get_configuration("eth0")
        assert not isinstance(excinfo.value, NoConfigurationError)


def test_create_discovery_uses_injected_registry(extcap_dir):
    mine = InterfaceRegistry()
    write_provider(extcap_dir, "a_prov", interfaces="interface {value=eth0}{display=A}")

    discovery = create_discovery(ExtcapConfig(extcap_dir=str(extcap_dir)), registry=mine)
    discovery.list_interfaces()

    assert discovery.registry is mine
    assert mine.lookup("eth0").endswith("a_prov")
    assert default_registry().lookup("eth0") is None
