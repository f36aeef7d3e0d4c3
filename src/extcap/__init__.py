"""
Extcap provider orchestration: discovery, capability and configuration
queries, and live capture sessions over pipes.
"""

from .config import ExtcapConfig, get_config, load_config_from_env
from .discovery import ExtcapDiscovery
from .exceptions import (
    ExtcapError,
    InterfaceUnknownError,
    CapabilityQueryError,
    NoLinkTypesError,
    PipeCreationError,
    ConfigurationQueryError,
    NoConfigurationError,
)
from .invoker import ProviderInvoker
from .models import (
    ArgumentDescriptor,
    ArgumentValue,
    CapabilityResult,
    CaptureOptions,
    InterfaceDescriptor,
    InterfaceType,
    LinkType,
    SessionEntry,
)
from .pipes import IPipeFactory, FifoPipeFactory, NamedPipeFactory, default_pipe_factory
from .registry import InterfaceRegistry, default_registry
from .scanner import DiscoveryScanner, ScanAction, ScanReport
from .sentences import ISentenceParser, ExtcapSentenceParser
from .session import SessionManager, build_capture_args


def create_discovery(config: ExtcapConfig = None,
                     registry: InterfaceRegistry = None) -> ExtcapDiscovery:
    """Discovery wired to the configured provider directory."""
    config = config or get_config()
    if registry is None:
        registry = default_registry()
    scanner = DiscoveryScanner(config.extcap_dir, registry)
    return ExtcapDiscovery(scanner)


__all__ = [
    'ExtcapConfig',
    'get_config',
    'load_config_from_env',
    'ExtcapDiscovery',
    'create_discovery',
    'ExtcapError',
    'InterfaceUnknownError',
    'CapabilityQueryError',
    'NoLinkTypesError',
    'PipeCreationError',
    'ConfigurationQueryError',
    'NoConfigurationError',
    'ProviderInvoker',
    'ArgumentDescriptor',
    'ArgumentValue',
    'CapabilityResult',
    'CaptureOptions',
    'InterfaceDescriptor',
    'InterfaceType',
    'LinkType',
    'SessionEntry',
    'IPipeFactory',
    'FifoPipeFactory',
    'NamedPipeFactory',
    'default_pipe_factory',
    'InterfaceRegistry',
    'default_registry',
    'DiscoveryScanner',
    'ScanAction',
    'ScanReport',
    'ISentenceParser',
    'ExtcapSentenceParser',
    'SessionManager',
    'build_capture_args',
]
