"""Decode id Tech 3 (Quake III) ``IBSP`` level files into typed records."""
from typing import TYPE_CHECKING, Union
from typing_extensions import TypeAlias
import os as _os


__version__: str
if not TYPE_CHECKING:
    try:
        from importlib.metadata import PackageNotFoundError, version as _get_version
        __version__ = _get_version('q3bsp')
    except PackageNotFoundError:
        __version__ = '<unknown>'
    else:
        del _get_version

__all__ = [
    '__version__',
    'StringPath',
    'BSP', 'LUMPS', 'Header', 'Direntries', 'Direntry',
    'ByteCursor', 'EndOfDataError', 'LumpSizeError',

    # Submodules:
    'binformat', 'bsp', 'logger',  # pyright: ignore
]

StringPath: TypeAlias = Union[str, '_os.PathLike[str]']


# Import these, so people can reference 'q3bsp.BSP' instead of 'q3bsp.bsp.BSP'.
# Should be done after other code, so everything's initialised.
# isort: off
from q3bsp.binformat import ByteCursor, EndOfDataError
from q3bsp.bsp import BSP, LUMPS, Header, Direntries, Direntry, LumpSizeError
