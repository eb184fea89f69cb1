"""
The binformat module :mod:`binformat` contains functionality for handling binary formats, \
esentially expanding on :external:mod:`struct`'s functionality.

The main class is :py:class:`ByteCursor`, a position inside an immutable buffer.
"""
from typing import Any, Final, Tuple, Union
from struct import Struct
import functools

import attrs


__all__ = [
    'SIZE_CHAR', 'SIZE_FLOAT', 'SIZE_INT',
    'ST_INT', 'ST_FLOAT',
    'EndOfDataError', 'ByteCursor', 'decode_fixed_str',
]

SIZE_CHAR: Final = 1
SIZE_INT: Final = 4
SIZE_FLOAT: Final = 4

ST_INT: Final = Struct('<i')
ST_FLOAT: Final = Struct('<f')
_cached_struct = functools.lru_cache()(Struct)


class EndOfDataError(ValueError):
    """Raised when a read would go past the end of the buffer."""


def decode_fixed_str(data: bytes, encoding: str = 'utf8') -> str:
    """Decode a fixed-length string field.

    Fields are padded with null bytes, so the string ends at the first null (if any).
    Invalid text raises :external:py:class:`UnicodeDecodeError`.
    """
    end = data.find(b'\0')
    if end != -1:
        data = data[:end]
    return data.decode(encoding)


@attrs.define(eq=False, repr=False)
class ByteCursor:
    """A read position inside an immutable byte buffer.

    Each read checks the bounds first, then advances the position past the data.
    Use :py:meth:`at` to get an independent cursor, so several readers never
    share the same position.
    """
    data: bytes
    pos: int = 0

    def __repr__(self) -> str:
        return f'<ByteCursor at {self.pos}/{len(self.data)}>'

    @property
    def remaining(self) -> int:
        """The number of bytes left after the current position."""
        return max(0, len(self.data) - self.pos)

    def at(self, offset: int) -> 'ByteCursor':
        """Return a new cursor over the same buffer, at this offset."""
        return ByteCursor(self.data, offset)

    def jump(self, offset: int) -> 'ByteCursor':
        """Move to the specified absolute offset.

        This is not checked, bad positions only fail on the next read.
        """
        self.pos = offset
        return self

    def _take(self, size: int) -> bytes:
        """Fetch the next ``size`` bytes and advance."""
        pos = self.pos
        if pos < 0 or pos + size > len(self.data):
            raise EndOfDataError(
                f'Cannot read {size} bytes at offset {pos}, '
                f'buffer is only {len(self.data)} bytes long!'
            )
        self.pos = pos + size
        return self.data[pos:pos + size]

    def read_bytes(self, size: int) -> bytes:
        """Read the specified number of raw bytes."""
        return self._take(size)

    def read_byte(self) -> int:
        """Read a single unsigned byte."""
        return self._take(SIZE_CHAR)[0]

    def read_int(self) -> int:
        """Read a signed little-endian 32-bit integer."""
        [value] = ST_INT.unpack(self._take(SIZE_INT))
        return value

    def read_float(self) -> float:
        """Read a little-endian 32-bit float."""
        [value] = ST_FLOAT.unpack(self._take(SIZE_FLOAT))
        return value

    def read_struct(self, fmt: Union[Struct, str]) -> Tuple[Any, ...]:
        """Read a structure, automatically computing the required number of bytes."""
        if not isinstance(fmt, Struct):
            fmt = _cached_struct(fmt)
        return fmt.unpack(self._take(fmt.size))

    def read_string(self, size: int, encoding: str = 'utf8') -> str:
        """Read a fixed-length string, discarding everything from the first null byte."""
        return decode_fixed_str(self._take(size), encoding)
