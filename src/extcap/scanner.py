"""
Provider directory scanner.

Every entry of the provider directory is a candidate; each surviving
candidate is run synchronously and its output handed to a callback
that decides whether scanning continues.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Sequence

from .invoker import ProviderInvoker
from .registry import InterfaceRegistry

logger = logging.getLogger(__name__)


class ScanAction(Enum):
    CONTINUE = "continue"
    STOP = "stop"


@dataclass
class ScanReport:
    """Outcome of one scan. last_error is written by callbacks."""
    tried: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    answered: List[str] = field(default_factory=list)
    stopped: bool = False
    last_error: Optional[str] = None


ScanCallback = Callable[[str, str, ScanReport], ScanAction]


class DiscoveryScanner:
    def __init__(self,
                 extcap_dir: str,
                 registry: InterfaceRegistry,
                 invoker: Optional[ProviderInvoker] = None):
        self.extcap_dir = extcap_dir
        self.registry = registry
        self.invoker = invoker or ProviderInvoker(working_dir=extcap_dir)

    def candidates(self) -> List[str]:
        """Full paths of every directory entry, in name order."""
        try:
            names = sorted(os.listdir(self.extcap_dir))
        except OSError as e:
            logger.debug("Cannot read extcap directory %s: %s", self.extcap_dir, e)
            return []
        return [os.path.join(self.extcap_dir, name) for name in names]

    def scan(self,
             extra_args: Sequence[str],
             callback: ScanCallback,
             interface: Optional[str] = None) -> ScanReport:
        report = ScanReport()
        filtered = self.registry.lookup(interface) is not None

        for provider_path in self.candidates():
            # Filter only applies once the interface has a known owner
            if filtered and not self.registry.owns(interface, provider_path):
                continue

            report.tried.append(provider_path)
            result = self.invoker.invoke(provider_path, extra_args)
            if not result.success:
                report.failed.append(provider_path)
                continue

            report.answered.append(provider_path)
            logger.debug("Extcap pipe %s", provider_path)
            if callback(provider_path, result.output, report) is ScanAction.STOP:
                report.stopped = True
                break

        return report
