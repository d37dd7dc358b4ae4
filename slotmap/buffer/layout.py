# FILE: slotmap/buffer/layout.py
# ------------------------------------------------------------------------------
from dataclasses import dataclass
from typing import Optional

from slotmap.config import DEFAULT_KEY_OPTIONS, KeyOptions


@dataclass(frozen=True, slots=True)
class Key:
    """Persistent slot map key: the slot index plus the generation it was issued at.

    Keys are plain values. They compare structurally and own nothing; whether a
    key is still live is a question for the table that issued it.
    """

    index: int
    generation: int

    def __str__(self) -> str:
        return format_key(self)


def format_generation(generation: int, options: KeyOptions = DEFAULT_KEY_OPTIONS) -> str:
    if generation == options.invalid_generation:
        return ".invalid"
    return f"0x{generation:x}"


def format_key(key: Key, options: KeyOptions = DEFAULT_KEY_OPTIONS) -> str:
    return f"0x{key.index:x}:{format_generation(key.generation, options)}"


def format_optional_key(key: Optional[Key], options: KeyOptions = DEFAULT_KEY_OPTIONS) -> str:
    if key is None:
        return ".none"
    if key.generation == options.invalid_generation:
        # only index 0 carries the none sentinel
        if key.index != 0:
            raise ValueError(f"key 0x{key.index:x} has an invalid generation")
        return ".none"
    return format_key(key, options)


def to_optional(key: Key, options: KeyOptions = DEFAULT_KEY_OPTIONS) -> Optional[Key]:
    # invalid is only allowed on the packed none sentinel
    assert key.generation != options.invalid_generation
    return key


def pack_key(key: Optional[Key], options: KeyOptions = DEFAULT_KEY_OPTIONS) -> int:
    """Pack a key into one integer: index in the low bits, generation above it.

    ``None`` packs to the sentinel (index 0, generation ``invalid``).
    """
    if key is None:
        return options.invalid_generation << options.index_bits
    if not 0 <= key.index <= options.max_index:
        raise ValueError(f"index {key.index} does not fit in {options.index_bits} bits")
    if not 0 <= key.generation < options.invalid_generation:
        raise ValueError(f"generation {key.generation} is not a live generation")
    return key.index | (key.generation << options.index_bits)


def unpack_key(raw: int, options: KeyOptions = DEFAULT_KEY_OPTIONS) -> Optional[Key]:
    if not 0 <= raw < (1 << options.key_bits):
        raise ValueError(f"packed key {raw:#x} does not fit in {options.key_bits} bits")
    index = raw & options.max_index
    generation = raw >> options.index_bits
    if generation == options.invalid_generation:
        if index != 0:
            raise ValueError(f"packed key {raw:#x} has an invalid generation")
        return None
    return Key(index=index, generation=generation)
