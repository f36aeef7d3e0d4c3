"""
Configuration for extcap provider orchestration.
"""
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

EXTCAP_PIPE_PREFIX = "wireshark_extcap"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Provider protocol flags
ARG_LIST_INTERFACES = "--extcap-interfaces"
ARG_LIST_DLTS = "--extcap-dlts"
ARG_CONFIG = "--extcap-config"
ARG_INTERFACE = "--extcap-interface"
ARG_RUN_CAPTURE = "--capture"
ARG_RUN_PIPE = "--fifo"


def _default_extcap_dir() -> str:
    return str(Path(sys.prefix) / "lib" / "extcap")


@dataclass
class ExtcapConfig:
    """Extcap orchestration settings"""
    extcap_dir: str = field(default_factory=_default_extcap_dir)
    pipe_prefix: str = EXTCAP_PIPE_PREFIX

    # Named pipe parameters (pipe-based platforms)
    pipe_instances: int = 5
    pipe_buffer_size: int = 65536
    pipe_default_timeout_ms: int = 300

    terminate_timeout: float = 2.0  # Seconds before a stopped provider is killed
    log_level: str = "WARNING"


def get_config() -> ExtcapConfig:
    """Get the default configuration"""
    return ExtcapConfig()


def load_config_from_env() -> ExtcapConfig:
    """Load configuration with environment variable overrides"""
    config = ExtcapConfig()

    if extcap_dir := os.getenv("EXTCAP_DIR"):
        config.extcap_dir = extcap_dir

    if timeout := os.getenv("EXTCAP_TERMINATE_TIMEOUT"):
        try:
            config.terminate_timeout = float(timeout)
        except ValueError:
            raise ValueError(f"EXTCAP_TERMINATE_TIMEOUT must be a number, got {timeout!r}")
        if config.terminate_timeout < 0:
            raise ValueError(f"EXTCAP_TERMINATE_TIMEOUT must not be negative, got {timeout!r}")

    if level := os.getenv("EXTCAP_LOG_LEVEL"):
        level = level.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"EXTCAP_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {level!r}")
        config.log_level = level

    return config
