"""Summarise the contents of Quake III BSP files.

For each file the header and the record count of every lump is logged.
"""
from typing import List, Optional
import argparse
import sys

from q3bsp import logger
from q3bsp.bsp import BSP, LUMPS, parse_entities


# Lump -> attribute on the BSP class.
LUMP_ATTRS = {
    LUMPS.ENTITIES: 'entities',
    LUMPS.TEXTURES: 'textures',
    LUMPS.PLANES: 'planes',
    LUMPS.NODES: 'nodes',
    LUMPS.LEAFS: 'leafs',
    LUMPS.LEAFFACES: 'leaffaces',
    LUMPS.LEAFBRUSHES: 'leafbrushes',
    LUMPS.MODELS: 'models',
    LUMPS.BRUSHES: 'brushes',
    LUMPS.BRUSHSIDES: 'brushsides',
    LUMPS.VERTEXES: 'vertexes',
    LUMPS.MESHVERTS: 'meshverts',
    LUMPS.EFFECTS: 'effects',
    LUMPS.FACES: 'faces',
    LUMPS.LIGHTMAPS: 'lightmaps',
    LUMPS.LIGHTVOLS: 'lightvols',
    LUMPS.VISDATA: 'visibility',
}


def dump(bsp: BSP, verbose: bool = False) -> None:
    """Log a summary of a single BSP."""
    log = logger.get_logger('dump_bsp')
    log.info('{}: {!r} v{}', bsp.filename, bsp.header.magic, bsp.version)
    for lump in LUMPS:
        entry = bsp.header.direntries[lump]
        value = getattr(bsp, LUMP_ATTRS[lump])
        if lump is LUMPS.ENTITIES:
            ents = parse_entities(value)
            log.info('{}: {} entities, {} bytes', lump.name, len(ents), entry.length)
            if verbose:
                for ent in ents:
                    log.info('  {}', ent.get('classname', '<no classname>'))
        elif lump is LUMPS.VISDATA:
            if value is None:
                log.info('{}: none', lump.name)
            else:
                log.info('{}: {} clusters, {} bytes', lump.name, value.n_vecs, entry.length)
        else:
            log.info('{}: {} records, {} bytes', lump.name, len(value), entry.length)


def main(args: List[str]) -> None:
    """Main script."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "-v", "--verbose",
        help="also list the classname of every entity.",
        action='store_true',
    )
    parser.add_argument(
        "--truncate",
        help="discard partial records at the end of lumps, instead of failing.",
        action='store_true',
    )
    parser.add_argument(
        "--version",
        help="the BSP version to require, or 0 to accept any version.",
        type=int,
        default=46,
    )
    parser.add_argument(
        "--log",
        help="also write a full log to this file.",
        metavar='FILE',
    )
    parser.add_argument(
        "files",
        help="the BSP files to read.",
        nargs='+',
    )
    result = parser.parse_args(args)

    logger.init_logging(result.log)
    version: Optional[int] = result.version or None
    for filename in result.files:
        with logger.context(filename):
            bsp = BSP(filename, version, truncate=result.truncate)
            dump(bsp, result.verbose)


def run() -> None:
    """Entry point for the console script."""
    main(sys.argv[1:])


if __name__ == '__main__':
    main(sys.argv[1:])
