# FILE: slotmap/config.py
# ------------------------------------------------------------------------------
from dataclasses import dataclass

import numpy as np

from slotmap.errors.fatal import ConfigurationError

_DTYPES = {
    8: np.uint8,
    16: np.uint16,
    32: np.uint32,
    64: np.uint64,
}


@dataclass(frozen=True)
class KeyOptions:
    index_bits: int = 32
    generation_bits: int = 32

    def __post_init__(self):
        for field_name in ("index_bits", "generation_bits"):
            bits = getattr(self, field_name)
            if isinstance(bits, bool) or bits not in _DTYPES:
                raise ConfigurationError(
                    f"Unsupported {field_name}",
                    context={field_name: bits, "supported": sorted(_DTYPES)},
                )

    @classmethod
    def from_settings(cls, table_settings) -> "KeyOptions":
        return cls(
            index_bits=table_settings.index_bits,
            generation_bits=table_settings.generation_bits,
        )

    @property
    def index_dtype(self):
        return _DTYPES[self.index_bits]

    @property
    def generation_dtype(self):
        return _DTYPES[self.generation_bits]

    @property
    def max_index(self) -> int:
        return (1 << self.index_bits) - 1

    @property
    def invalid_generation(self) -> int:
        return (1 << self.generation_bits) - 1

    @property
    def key_bits(self) -> int:
        return self.index_bits + self.generation_bits


DEFAULT_KEY_OPTIONS = KeyOptions()
