"""
Extcap discovery queries.

Three entry points share the directory scanner, each with its own
argument vector and per-provider callback:

- list_interfaces(): rebuilds the registry from every provider
- get_capabilities(): link types of one interface, from its owner
- get_configuration(): argument schema of one interface, from its owner
"""
from __future__ import annotations

import logging
from typing import List, Optional

from .config import ARG_CONFIG, ARG_INTERFACE, ARG_LIST_DLTS, ARG_LIST_INTERFACES
from .exceptions import (
    CapabilityQueryError,
    ConfigurationQueryError,
    InterfaceUnknownError,
    NoConfigurationError,
    NoLinkTypesError,
)
from .models import ArgumentDescriptor, CapabilityResult, InterfaceDescriptor, InterfaceType
from .registry import InterfaceRegistry
from .scanner import DiscoveryScanner, ScanAction, ScanReport
from .sentences import ExtcapSentenceParser, ISentenceParser

logger = logging.getLogger(__name__)


class ExtcapDiscovery:
    def __init__(self,
                 scanner: DiscoveryScanner,
                 parser: Optional[ISentenceParser] = None):
        self.scanner = scanner
        self.parser = parser or ExtcapSentenceParser()

    @property
    def registry(self) -> InterfaceRegistry:
        return self.scanner.registry

    def list_interfaces(self) -> List[InterfaceDescriptor]:
        """Query every provider for its interfaces and rebuild the registry."""
        interfaces: List[InterfaceDescriptor] = []
        registry = self.registry
        registry.reset()

        def on_output(provider_path: str, output: str, report: ScanReport) -> ScanAction:
            for record in self.parser.parse_interfaces(output):
                owner = registry.lookup(record.call)
                if owner is not None:
                    logger.warning('Extcap interface "%s" is already provided by "%s", ignoring "%s"',
                                   record.call, owner, provider_path)
                    continue

                logger.debug('  Interface [%s] "%s"', record.call, record.display)
                registry.register(record.call, provider_path)
                interfaces.append(InterfaceDescriptor(
                    name=record.call,
                    friendly_name=record.display,
                    provider_path=provider_path,
                    kind=InterfaceType.EXTCAP,
                ))
            return ScanAction.CONTINUE

        self.scanner.scan([ARG_LIST_INTERFACES], on_output)
        return interfaces

    def get_capabilities(self, interface: str) -> CapabilityResult:
        """
        Link types of an extcap interface.

        Raises:
            InterfaceUnknownError: no provider registered the interface
            NoLinkTypesError: the owner answered with zero link types
            CapabilityQueryError: the owner did not answer
        """
        if self.registry.lookup(interface) is None:
            raise InterfaceUnknownError(interface)

        found: List[CapabilityResult] = []

        def on_output(provider_path: str, output: str, report: ScanReport) -> ScanAction:
            link_types = self.parser.parse_dlts(output)
            for lt in link_types:
                logger.debug('  DLT %d name="%s" display="%s"', lt.number, lt.name, lt.description)
            if link_types:
                found.append(CapabilityResult(link_types=list(link_types),
                                              can_set_monitor_mode=False))
            else:
                logger.debug("  %s returned no DLTs", provider_path)
                report.last_error = "Extcap returned no DLTs"
            # One owner per interface
            return ScanAction.STOP

        report = self.scanner.scan([ARG_LIST_DLTS, ARG_INTERFACE, interface],
                                   on_output, interface=interface)
        if found:
            return found[0]
        if report.last_error:
            raise NoLinkTypesError(report.last_error)
        raise CapabilityQueryError(f"No extcap provider answered for {interface}")

    def get_configuration(self, interface: str) -> List[List[ArgumentDescriptor]]:
        """
        Argument schema of an extcap interface; empty if unknown.

        Raises:
            NoConfigurationError: the owner answered with zero arguments
            ConfigurationQueryError: the owner did not answer
        """
        results: List[List[ArgumentDescriptor]] = []
        if self.registry.lookup(interface) is None:
            return results

        logger.debug("Extcap path %s", self.scanner.extcap_dir)

        def on_output(provider_path: str, output: str, report: ScanReport) -> ScanAction:
            arguments = self.parser.parse_args(output)
            if arguments:
                results.append(arguments)
            else:
                logger.debug("  %s returned no arguments", provider_path)
                report.last_error = "Extcap returned no configuration"
            return ScanAction.STOP

        report = self.scanner.scan([ARG_CONFIG, ARG_INTERFACE, interface],
                                   on_output, interface=interface)
        if results:
            return results
        if report.last_error:
            raise NoConfigurationError(report.last_error)
        raise ConfigurationQueryError(f"No extcap provider answered for {interface}")
