"""
Shared fixtures: throwaway provider directories populated with /bin/sh
providers that answer the discovery protocol from canned output.
"""
import os
import stat
from pathlib import Path
from typing import Optional

import pytest

from extcap import DiscoveryScanner, ExtcapDiscovery, InterfaceRegistry


def write_provider(directory: Path,
                   name: str,
                   interfaces: str = "",
                   dlts: str = "",
                   config: str = "",
                   capture: str = "exit 0",
                   log_file: Optional[Path] = None) -> str:
    """Write an executable provider script and return its full path."""
    log_line = f'echo "$0 $*" >> "{log_file}"\n' if log_file else ""
    script = (
        "#!/bin/sh\n"
        f"{log_line}"
        'case "$1" in\n'
        "  --extcap-interfaces)\n"
        f"cat <<'EOF'\n{interfaces}\nEOF\n"
        "    ;;\n"
        "  --extcap-dlts)\n"
        f"cat <<'EOF'\n{dlts}\nEOF\n"
        "    ;;\n"
        "  --extcap-config)\n"
        f"cat <<'EOF'\n{config}\nEOF\n"
        "    ;;\n"
        "  --capture)\n"
        f"    {capture}\n"
        "    ;;\n"
        "  *)\n"
        "    exit 1\n"
        "    ;;\n"
        "esac\n"
    )
    path = directory / name
    path.write_text(script)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return os.path.join(str(directory), name)


@pytest.fixture
def extcap_dir(tmp_path):
    directory = tmp_path / "extcap"
    directory.mkdir()
    return directory


@pytest.fixture
def registry():
    return InterfaceRegistry()


@pytest.fixture
def discovery(extcap_dir, registry):
    return ExtcapDiscovery(DiscoveryScanner(str(extcap_dir), registry))


posix_only = pytest.mark.skipif(os.name == "nt", reason="requires /bin/sh and FIFOs")
