"""Generational-index slot map.

``SlotMap.insert`` returns a small ``Key`` (index, generation) that resolves
back to the stored value in O(1) and reliably stops resolving once the value
is removed, even after the slot is reused.
"""

from slotmap.backend.table import SlotMap
from slotmap.buffer.layout import (
    Key,
    format_generation,
    format_key,
    format_optional_key,
    pack_key,
    to_optional,
    unpack_key,
)
from slotmap.config import DEFAULT_KEY_OPTIONS, KeyOptions
from slotmap.errors.fatal import (
    AllocationError,
    ConfigurationError,
    ForeignKeyError,
    SlotMapError,
    SlotMapOverflowError,
)
from slotmap.runtime import build_table

__all__ = [
    "SlotMap",
    "Key",
    "KeyOptions",
    "DEFAULT_KEY_OPTIONS",
    "format_generation",
    "format_key",
    "format_optional_key",
    "pack_key",
    "unpack_key",
    "to_optional",
    "build_table",
    "SlotMapError",
    "ConfigurationError",
    "AllocationError",
    "SlotMapOverflowError",
    "ForeignKeyError",
]
