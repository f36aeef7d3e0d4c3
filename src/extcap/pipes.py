"""
Pipe strategies for live capture.

A provider writes captured frames into a pipe whose name is passed with
--fifo. POSIX platforms use a FIFO special file; Windows uses a named
pipe created through kernel32.
"""
from __future__ import annotations

import logging
import os
import tempfile
import time
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from .config import ExtcapConfig, EXTCAP_PIPE_PREFIX
from .exceptions import PipeCreationError

logger = logging.getLogger(__name__)


class IPipeFactory(ABC):
    """Pipe strategy interface."""

    @abstractmethod
    def create(self) -> str:
        """Create a pipe, return the path the provider should write to."""
        pass

    @abstractmethod
    def release(self, pipe_path: Optional[str]) -> None:
        """Tear down a pipe. Must be a no-op for unknown or released pipes."""
        pass


class FifoPipeFactory(IPipeFactory):
    """FIFO special files in the temp directory, owner read/write only."""

    def __init__(self, prefix: str = EXTCAP_PIPE_PREFIX, tmp_dir: Optional[str] = None):
        self.prefix = prefix
        self.tmp_dir = tmp_dir

    def create(self) -> str:
        try:
            fd, path = tempfile.mkstemp(prefix=f"{self.prefix}_", dir=self.tmp_dir)
            os.close(fd)
            logger.debug("Extcap - Creating fifo: %s", path)
            if os.path.exists(path):
                os.unlink(path)
            os.mkfifo(path, 0o600)
        except OSError as e:
            raise PipeCreationError(f"Failed to create fifo: {e}") from e
        return path

    def release(self, pipe_path: Optional[str]) -> None:
        if not pipe_path or not os.path.exists(pipe_path):
            return
        try:
            os.unlink(pipe_path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Could not remove fifo %s: %s", pipe_path, e)


class NamedPipeFactory(IPipeFactory):
    """Duplex, message-typed named pipes with inheritable handles."""

    PIPE_ACCESS_DUPLEX = 0x00000003
    PIPE_TYPE_MESSAGE = 0x00000004
    PIPE_READMODE_MESSAGE = 0x00000002
    PIPE_WAIT = 0x00000000

    def __init__(self,
                 prefix: str = EXTCAP_PIPE_PREFIX,
                 instances: int = 5,
                 buffer_size: int = 65536,
                 default_timeout_ms: int = 300):
        import ctypes
        from ctypes import wintypes

        class SECURITY_ATTRIBUTES(ctypes.Structure):
            _fields_ = [
                ("nLength", wintypes.DWORD),
                ("lpSecurityDescriptor", wintypes.LPVOID),
                ("bInheritHandle", wintypes.BOOL),
            ]

        self.prefix = prefix
        self.instances = instances
        self.buffer_size = buffer_size
        self.default_timeout_ms = default_timeout_ms
        self._handles: Dict[str, List[int]] = {}

        self._ctypes = ctypes
        self._security_cls = SECURITY_ATTRIBUTES
        self._invalid_handle = ctypes.c_void_p(-1).value
        self._kernel32 = ctypes.WinDLL("kernel32", use_last_error=True)
        self._kernel32.CreateNamedPipeW.restype = wintypes.HANDLE
        self._kernel32.CreateNamedPipeW.argtypes = [
            wintypes.LPCWSTR, wintypes.DWORD, wintypes.DWORD, wintypes.DWORD,
            wintypes.DWORD, wintypes.DWORD, wintypes.DWORD,
            ctypes.POINTER(SECURITY_ATTRIBUTES),
        ]
        for name in ("FlushFileBuffers", "DisconnectNamedPipe", "CloseHandle"):
            func = getattr(self._kernel32, name)
            func.argtypes = [wintypes.HANDLE]
            func.restype = wintypes.BOOL

    def pipe_name(self) -> str:
        timestr = time.strftime("%Y%m%d%H%M%S", time.localtime())
        return "\\\\.\\pipe\\" + f"{self.prefix}_{timestr}"

    def create(self) -> str:
        name = self.pipe_name()
        security = self._security_cls()
        security.nLength = self._ctypes.sizeof(self._security_cls)
        security.lpSecurityDescriptor = None
        security.bInheritHandle = True

        handle = self._kernel32.CreateNamedPipeW(
            name,
            self.PIPE_ACCESS_DUPLEX,
            self.PIPE_TYPE_MESSAGE | self.PIPE_READMODE_MESSAGE | self.PIPE_WAIT,
            self.instances,
            self.buffer_size,
            self.buffer_size,
            self.default_timeout_ms,
            self._ctypes.byref(security),
        )
        if handle is None or handle == self._invalid_handle:
            error = self._ctypes.get_last_error()
            raise PipeCreationError(f"Error creating pipe {name} => ({error})")

        logger.debug("Created pipe => (%s)", name)
        self._handles.setdefault(name, []).append(handle)
        return name

    def release(self, pipe_path: Optional[str]) -> None:
        handles = self._handles.get(pipe_path) if pipe_path else None
        if not handles:
            return
        # Same-second pipes share a name; release them oldest first
        handle = handles.pop(0)
        if not handles:
            del self._handles[pipe_path]
        logger.debug("Closing pipe %s", pipe_path)
        self._kernel32.FlushFileBuffers(handle)
        self._kernel32.DisconnectNamedPipe(handle)
        self._kernel32.CloseHandle(handle)


def default_pipe_factory(config: Optional[ExtcapConfig] = None) -> IPipeFactory:
    """Select the pipe strategy for the running platform."""
    config = config or ExtcapConfig()
    if os.name == "nt":
        return NamedPipeFactory(
            prefix=config.pipe_prefix,
            instances=config.pipe_instances,
            buffer_size=config.pipe_buffer_size,
            default_timeout_ms=config.pipe_default_timeout_ms,
        )
    return FifoPipeFactory(prefix=config.pipe_prefix)
