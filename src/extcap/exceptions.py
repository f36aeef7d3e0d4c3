"""
Custom exceptions for extcap provider orchestration.
"""

class ExtcapError(Exception):
    """Base exception for all extcap-related errors."""
    pass

class InterfaceUnknownError(ExtcapError):
    """Raised when an interface is not registered by any provider."""

    def __init__(self, interface: str):
        super().__init__(f"Unknown extcap interface: {interface}")
        self.interface = interface

class CapabilityQueryError(ExtcapError):
    """Raised when no provider answered a capability query."""
    pass

class NoLinkTypesError(CapabilityQueryError):
    """Raised when the owning provider answered with zero link types."""
    pass

class PipeCreationError(ExtcapError):
    """Raised when a named pipe or FIFO could not be created."""
    pass

class ConfigurationQueryError(ExtcapError):
    """Raised when no provider answered a configuration query."""
    pass

class NoConfigurationError(ConfigurationQueryError):
    """Raised when the owning provider answered with zero arguments."""
    pass
