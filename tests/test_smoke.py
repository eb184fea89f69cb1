"""Import all modules, to ensure at least imports work."""
from pathlib import Path
import importlib

import pytest


package_loc = Path(__file__).parent.parent / 'src' / 'q3bsp'


@pytest.mark.parametrize('mod_name', [
    fname.stem
    for fname in package_loc.glob('*.py')
    # Don't import the package init.
    if fname.stem != '__init__'
] + ['scripts.dump_bsp'])
def test_smoke(mod_name: str) -> None:
    """Ensure every module is importable."""
    importlib.import_module('q3bsp.' + mod_name)


def test_package_exports() -> None:
    """The most-used classes are available from the package."""
    import q3bsp
    from q3bsp import bsp
    assert q3bsp.BSP is bsp.BSP
    assert q3bsp.LUMPS is bsp.LUMPS
    for name in q3bsp.__all__:
        assert hasattr(q3bsp, name), name
