"""Helpers for performing tests."""
from typing import Mapping
import struct

from dirty_equals import DirtyEquals

from q3bsp.bsp import BSP_MAGIC, BSP_VERSION, LUMPS


__all__ = ['ExactType', 'HEADER_SIZE', 'build_bsp', 'pack_name']

# Magic, version, then the 17 lump entries.
HEADER_SIZE = 8 + 8 * len(LUMPS)


class ExactType(DirtyEquals[object]):
    """Proxy object which verifies both value and types match."""
    def __init__(self, val: object) -> None:
        super().__init__(val)
        self.compare = val

    def equals(self, other: object) -> bool:
        if isinstance(other, ExactType):
            other = other.compare
        return type(self.compare) is type(other) and self.compare == other


def pack_name(name: str) -> bytes:
    """Pack a name into a null-padded 64-byte field."""
    return struct.pack('<64s', name.encode('ascii'))


def build_bsp(
    lumps: Mapping[LUMPS, bytes],
    magic: bytes = BSP_MAGIC,
    version: int = BSP_VERSION,
) -> bytes:
    """Build a BSP file containing the specified lumps.

    Lumps are laid out in directory order, directly after the header. Missing lumps are empty.
    """
    header = [struct.pack('<4si', magic, version)]
    body = []
    offset = HEADER_SIZE
    for lump in LUMPS:
        data = lumps.get(lump, b'')
        header.append(struct.pack('<ii', offset, len(data)))
        body.append(data)
        offset += len(data)
    return b''.join(header + body)
