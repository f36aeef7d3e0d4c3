"""Well-known DLT numbers, from scapy's link-type constants."""
from typing import Dict, Optional

from scapy import data as scapy_data

_DLT_NAMES: Dict[int, str] = {}


def _load_names() -> Dict[int, str]:
    if not _DLT_NAMES:
        for attr, value in vars(scapy_data).items():
            if not attr.startswith("DLT_") or not isinstance(value, int):
                continue
            _DLT_NAMES.setdefault(value, attr[len("DLT_"):])
    return _DLT_NAMES


def dlt_name(number: int) -> Optional[str]:
    """Short name for a DLT number (1 -> "EN10MB"), None if unknown."""
    return _load_names().get(number)
