"""
Live capture session lifecycle.

start_sessions() gives every configured extcap interface a pipe and a
running provider writing into it; cleanup_sessions() tears both down.
"""
from __future__ import annotations

import logging
import subprocess
from typing import Callable, List, Optional, Sequence

from .config import ARG_INTERFACE, ARG_RUN_CAPTURE, ARG_RUN_PIPE, ExtcapConfig
from .exceptions import PipeCreationError
from .models import CaptureOptions, SessionEntry
from .pipes import IPipeFactory, default_pipe_factory

logger = logging.getLogger(__name__)

PopenFactory = Callable[[Sequence[str]], subprocess.Popen]


def build_capture_args(entry: SessionEntry) -> List[str]:
    """Argument vector for a live capture into entry.pipe_path."""
    argv = [
        entry.provider_path,
        ARG_RUN_CAPTURE,
        ARG_INTERFACE, entry.name,
        ARG_RUN_PIPE, entry.pipe_path,
    ]
    for key, value in entry.extra_arguments.items():
        if key is None:
            continue
        argv.append(key)
        if value is not None:
            argv.append(value)
    return argv


class SessionManager:
    def __init__(self,
                 pipe_factory: Optional[IPipeFactory] = None,
                 popen: Optional[PopenFactory] = None,
                 config: Optional[ExtcapConfig] = None):
        self.config = config or ExtcapConfig()
        self.pipe_factory = pipe_factory or default_pipe_factory(self.config)
        self._popen = popen or subprocess.Popen

    def start_sessions(self, options: CaptureOptions) -> bool:
        """
        Create a pipe and spawn a provider for every extcap interface.

        Returns False if any pipe could not be created. Entries started
        earlier in the same call are cleaned up again in that case, so a
        failed batch leaves nothing running.
        """
        started: List[SessionEntry] = []

        for entry in options.interfaces:
            if not entry.is_extcap:
                continue

            try:
                entry.pipe_path = self.pipe_factory.create()
            except PipeCreationError as e:
                logger.warning("Extcap [%s] - %s", entry.name, e)
                for done in started:
                    self._cleanup_entry(done)
                return False

            entry.process = self._spawn(entry)
            started.append(entry)

        return True

    def _spawn(self, entry: SessionEntry) -> Optional[subprocess.Popen]:
        argv = build_capture_args(entry)
        logger.debug("Extcap [%s] - Spawning %s", entry.name, " ".join(argv))
        try:
            return self._popen(argv)
        except (OSError, ValueError, TypeError) as e:
            logger.warning("Extcap [%s] - Failed to spawn %s: %s",
                           entry.name, entry.provider_path, e)
            return None

    def cleanup_sessions(self, options: CaptureOptions) -> None:
        """Release pipes and providers of every extcap interface. Idempotent."""
        for entry in options.extcap_interfaces():
            self._cleanup_entry(entry)

    def _cleanup_entry(self, entry: SessionEntry) -> None:
        logger.debug("Extcap [%s] - Cleaning up fifo: %s; PID: %d",
                     entry.name, entry.pipe_path, entry.pid)

        # pipe_path itself belongs to the session store
        try:
            self.pipe_factory.release(entry.pipe_path)
        except OSError as e:
            logger.warning("Extcap [%s] - Could not release pipe %s: %s",
                           entry.name, entry.pipe_path, e)

        if entry.process is not None:
            logger.debug("Extcap [%s] - Closing spawned PID: %d", entry.name, entry.pid)
            self._reap(entry.process)
            entry.process = None

    def _reap(self, process: subprocess.Popen) -> None:
        try:
            if process.poll() is None:
                process.terminate()
                try:
                    process.wait(timeout=self.config.terminate_timeout)
                except subprocess.TimeoutExpired:
                    process.kill()
                    process.wait()
        except OSError as e:
            logger.debug("Process %d already gone: %s", process.pid, e)
