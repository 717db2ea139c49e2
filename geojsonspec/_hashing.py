import dataclasses
from typing import Any

import msgspec

_MASK = (1 << 64) - 1
_FACTOR = 397


def fold(*hashes: int) -> int:
    """Combine hashes in order, as ``h = (h * 397) ^ x``."""
    out = 0
    for i, h in enumerate(hashes):
        out = h & _MASK if i == 0 else ((out * _FACTOR) ^ h) & _MASK
    return out


def structural_hash(obj: Any) -> int:
    """Hash ``obj`` by value, even if it or one of its members is unhashable.

    Dicts, lists, structs and dataclasses are hashed from their contents,
    whether frozen or not.
    """
    if isinstance(obj, dict):
        return hash(frozenset((k, structural_hash(v)) for k, v in obj.items()))
    if isinstance(obj, (list, tuple)):
        return hash(tuple(structural_hash(v) for v in obj))
    if isinstance(obj, msgspec.Struct):
        return hash((type(obj), structural_hash(msgspec.structs.astuple(obj))))
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        values = tuple(getattr(obj, f.name) for f in dataclasses.fields(obj))
        return hash((type(obj), structural_hash(values)))
    return hash(obj)
