"""
Extcap data models.

Records crossing the parser boundary (interfaces, link types, argument
descriptors) and the session entries the lifecycle manager mutates.
"""
from __future__ import annotations

import subprocess
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Dict, List, Optional


class InterfaceType(Enum):
    NATIVE = "native"
    EXTCAP = "extcap"


@dataclass
class InterfaceDescriptor:
    """Interface advertised by a provider during a listing pass."""
    name: str
    friendly_name: str
    provider_path: str
    kind: InterfaceType = InterfaceType.EXTCAP

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "friendly_name": self.friendly_name,
            "provider_path": self.provider_path,
            "kind": self.kind.value,
        }


@dataclass
class LinkType:
    number: int
    name: str
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class CapabilityResult:
    """Link-layer capabilities of one extcap interface."""
    link_types: List[LinkType] = field(default_factory=list)
    can_set_monitor_mode: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "can_set_monitor_mode": self.can_set_monitor_mode,
            "link_types": [lt.to_dict() for lt in self.link_types],
        }


@dataclass
class ArgumentValue:
    arg_number: int
    value: str
    display: str
    is_default: bool = False


@dataclass
class ArgumentDescriptor:
    """One configurable provider option, as reported by --extcap-config."""
    number: int
    call: str
    display: str
    arg_type: str = "unknown"
    tooltip: Optional[str] = None
    range_start: Optional[str] = None
    range_end: Optional[str] = None
    default: Optional[str] = None
    required: bool = False
    values: List[ArgumentValue] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class InvocationResult:
    success: bool
    exit_code: Optional[int]
    output: str = ""


@dataclass
class SessionEntry:
    """
    Per-interface capture configuration.

    name, provider_path, interface_type and extra_arguments are inputs;
    pipe_path and process are written at spawn time and cleared at
    cleanup time.
    """
    name: str
    provider_path: Optional[str] = None
    interface_type: InterfaceType = InterfaceType.EXTCAP
    extra_arguments: Dict[str, Optional[str]] = field(default_factory=dict)
    pipe_path: Optional[str] = None
    process: Optional[subprocess.Popen] = None

    @property
    def is_extcap(self) -> bool:
        return self.interface_type is InterfaceType.EXTCAP

    @property
    def pid(self) -> int:
        """Provider process id, -1 when no valid process is recorded."""
        if self.process is None:
            return -1
        return self.process.pid


@dataclass
class CaptureOptions:
    """Capture session store: the configured interfaces, in order."""
    interfaces: List[SessionEntry] = field(default_factory=list)

    def extcap_interfaces(self) -> List[SessionEntry]:
        return [entry for entry in self.interfaces if entry.is_extcap]
