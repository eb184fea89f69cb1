"""Read id Tech 3 (Quake III Arena) BSP files.

The header is read immediately, each lump is lazily parsed when the attribute is accessed.
"""
from typing import (
    Callable, ClassVar, Dict, Generic, List, Optional, Tuple, Type, TypeVar, Union, overload,
)
from enum import Enum
from struct import Struct
import functools
import re

import attrs

from q3bsp import StringPath, logger
from q3bsp.binformat import SIZE_INT, ByteCursor, EndOfDataError, decode_fixed_str


__all__ = [
    'BSP_MAGIC', 'BSP_VERSION', 'LUMPS', 'FaceType',
    'BSP', 'Header', 'Direntries', 'Direntry', 'LumpSizeError',
    'read_header', 'check_header', 'read_lump', 'read_entities', 'parse_entities',
    'Texture', 'Plane', 'Node', 'Leaf', 'Model', 'Brush', 'BrushSide',
    'Vertex', 'Effect', 'Face', 'Lightmap', 'LightVol', 'Visibility',
]

BSP_MAGIC = b'IBSP'  # All BSP files start with this
BSP_VERSION = 46  # Quake III Arena, Team Arena.
HEADER = Struct('<4si')  # Header section before the lump list.
HEADER_LUMP = Struct('<ii')  # Offset and length, for each lump.
NAME_LENGTH = 64  # Fixed size of texture and effect names.
LIGHTMAP_SIZE = 128  # Lightmaps are always 128x128 RGB.

T = TypeVar('T')

LOGGER = logger.get_logger(__name__)


class LUMPS(Enum):
    """All the lumps in a BSP file.

    The values represent the order lumps appear in the index.
    """
    ENTITIES = 0  #: self.entities
    TEXTURES = 1  #: self.textures
    PLANES = 2  #: self.planes
    NODES = 3  #: self.nodes
    LEAFS = 4  #: self.leafs
    LEAFFACES = 5  #: self.leaffaces
    LEAFBRUSHES = 6  #: self.leafbrushes
    MODELS = 7  #: self.models
    BRUSHES = 8  #: self.brushes
    BRUSHSIDES = 9  #: self.brushsides
    VERTEXES = 10  #: self.vertexes
    MESHVERTS = 11  #: self.meshverts
    EFFECTS = 12  #: self.effects
    FACES = 13  #: self.faces
    LIGHTMAPS = 14  #: self.lightmaps
    LIGHTVOLS = 15  #: self.lightvols
    VISDATA = 16  #: self.visibility


LUMP_COUNT = len(LUMPS)  # 17


class FaceType(Enum):
    """The kind of surface a face represents."""
    POLYGON = 1
    PATCH = 2  # Bezier patch, vertexes are the control points.
    MESH = 3
    BILLBOARD = 4  # Flares.


class LumpSizeError(ValueError):
    """Raised when a lump's length is not a multiple of its record size."""


@attrs.frozen
class Direntry:
    """The location of a lump in the file."""
    offset: int
    length: int

    @property
    def end(self) -> int:
        """The offset just past the end of the lump."""
        return self.offset + self.length


@attrs.frozen
class Direntries:
    """The lump directory, in file order."""
    entities: Direntry
    textures: Direntry
    planes: Direntry
    nodes: Direntry
    leafs: Direntry
    leaffaces: Direntry
    leafbrushes: Direntry
    models: Direntry
    brushes: Direntry
    brushsides: Direntry
    vertexes: Direntry
    meshverts: Direntry
    effects: Direntry
    faces: Direntry
    lightmaps: Direntry
    lightvols: Direntry
    visdata: Direntry

    @classmethod
    def read(cls, cur: ByteCursor) -> 'Direntries':
        """Read all the entries, each is an offset followed by the length."""
        return cls(*[
            Direntry(*cur.read_struct(HEADER_LUMP))
            for _ in range(LUMP_COUNT)
        ])

    def __getitem__(self, lump: LUMPS) -> Direntry:
        """Look up the entry for a lump."""
        return getattr(self, lump.name.lower())


@attrs.frozen
class Header:
    """The BSP header."""
    magic: bytes
    version: int
    direntries: Direntries


def read_header(cur: ByteCursor) -> Header:
    """Read the magic, version and lump directory.

    This reads from the cursor's current position, and does not check the values.
    """
    magic, version = cur.read_struct(HEADER)
    return Header(magic, version, Direntries.read(cur))


def check_header(header: Header, version: Optional[int] = BSP_VERSION) -> None:
    """Verify this is an IBSP file with the expected version.

    If version is None, any version is accepted.
    """
    if header.magic != BSP_MAGIC:
        raise ValueError(f'File is not an IBSP file! (magic={header.magic!r})')
    if version is not None and header.version != version:
        raise ValueError(
            f'Unexpected BSP version {header.version!r}, expected {version!r}!'
        )


def _check_bounds(data: bytes, entry: Direntry) -> None:
    """Check the lump lies inside the data."""
    if entry.offset < 0 or entry.length < 0:
        raise ValueError(f'Invalid lump location {entry}!')
    if entry.end > len(data):
        raise EndOfDataError(
            f'Lump at {entry.offset}-{entry.end} is past the end of '
            f'the file ({len(data)} bytes)!'
        )


def read_lump(
    data: bytes,
    entry: Direntry,
    record_size: int,
    read: Callable[[ByteCursor], T],
    *,
    truncate: bool = False,
) -> Tuple[T, ...]:
    """Decode a lump holding an array of fixed-size records.

    The read function is called once per record, and must consume exactly ``record_size`` bytes.
    If the lump length isn't a multiple of the record size, :py:class:`LumpSizeError` is raised,
    unless ``truncate`` is set. In that case the leftover bytes are discarded, with a warning.
    """
    _check_bounds(data, entry)
    count, extra = divmod(entry.length, record_size)
    if extra:
        if not truncate:
            raise LumpSizeError(
                f'Lump at offset {entry.offset} is {entry.length} bytes, '
                f'which is not a multiple of the record size {record_size}!'
            )
        LOGGER.warning(
            'Lump at offset {} has {} extra bytes after {} records, discarding.',
            entry.offset, extra, count,
        )

    cur = ByteCursor(data, entry.offset)
    records = tuple([read(cur) for _ in range(count)])
    if cur.pos != entry.offset + count * record_size:
        raise ValueError(
            f'Read {cur.pos - entry.offset} bytes for {count} records, '
            f'expected {count * record_size}!'
        )
    return records


def read_entities(data: bytes, direntries: Direntries, encoding: str = 'utf8') -> str:
    """Read the entities lump, as the raw text.

    The whole lump is returned, only the null padding at the end is removed.
    """
    entry = direntries.entities
    _check_bounds(data, entry)
    raw = ByteCursor(data, entry.offset).read_bytes(entry.length)
    return raw.decode(encoding).rstrip('\0')


# Null bytes are ignored, like whitespace.
_ENT_TOKEN = re.compile(r'"([^"]*)"|([{}])|([^\s\0]+)')


def parse_entities(text: str) -> List[Dict[str, str]]:
    """Split the entity lump text into a keyvalue dict for each entity.

    If a key is repeated, the last value is kept.
    """
    entities: List[Dict[str, str]] = []
    cur_ent: Optional[Dict[str, str]] = None
    key: Optional[str] = None
    for match in _ENT_TOKEN.finditer(text):
        string, brace, bare = match.groups()
        if bare is not None:
            raise ValueError(f'Unquoted text {bare!r} in entity lump!')
        if brace == '{':
            if cur_ent is not None:
                raise ValueError(f'Nested entity after {len(entities)} ents!')
            cur_ent = {}
        elif brace == '}':
            if cur_ent is None:
                raise ValueError(f'Too many closing brackets after {len(entities)} ents!')
            if key is not None:
                raise ValueError(f'Key {key!r} has no value!')
            entities.append(cur_ent)
            cur_ent = None
        else:
            if cur_ent is None:
                raise ValueError(f'Keyvalue outside brackets: {string!r}')
            if key is None:
                key = string
            else:
                cur_ent[key] = string
                key = None
    if cur_ent is not None:
        raise ValueError("Last entity didn't end!")
    return entities


@attrs.frozen
class Texture:
    """A surface shader used by faces and brushes."""
    ST: ClassVar[Struct] = Struct(f'<{NAME_LENGTH}sii')

    name: str
    flags: int
    contents: int

    @classmethod
    def read(cls, cur: ByteCursor, encoding: str = 'utf8') -> 'Texture':
        name, flags, contents = cur.read_struct(cls.ST)
        return cls(decode_fixed_str(name, encoding), flags, contents)


@attrs.frozen
class Plane:
    """A plane. Pairs are stored consecutively, with the second facing the opposite way."""
    ST: ClassVar[Struct] = Struct('<4f')

    normal: Tuple[float, float, float]
    dist: float

    @classmethod
    def read(cls, cur: ByteCursor) -> 'Plane':
        x, y, z, dist = cur.read_struct(cls.ST)
        return cls((x, y, z), dist)


@attrs.frozen
class Node:
    """A node in the BSP tree.

    Negative child indexes are leafs, with the index ``-(leaf + 1)``.
    """
    ST: ClassVar[Struct] = Struct('<i2i3i3i')

    plane: int
    children: Tuple[int, int]
    mins: Tuple[int, int, int]
    maxs: Tuple[int, int, int]

    @classmethod
    def read(cls, cur: ByteCursor) -> 'Node':
        (
            plane, front, back,
            min_x, min_y, min_z,
            max_x, max_y, max_z,
        ) = cur.read_struct(cls.ST)
        return cls(plane, (front, back), (min_x, min_y, min_z), (max_x, max_y, max_z))


@attrs.frozen
class Leaf:
    """A leaf of the BSP tree."""
    ST: ClassVar[Struct] = Struct('<ii3i3i4i')

    cluster: int  # Visdata cluster, negative if outside the map.
    area: int
    mins: Tuple[int, int, int]
    maxs: Tuple[int, int, int]
    leafface: int
    n_leaffaces: int
    leafbrush: int
    n_leafbrushes: int

    @classmethod
    def read(cls, cur: ByteCursor) -> 'Leaf':
        (
            cluster, area,
            min_x, min_y, min_z,
            max_x, max_y, max_z,
            leafface, n_leaffaces,
            leafbrush, n_leafbrushes,
        ) = cur.read_struct(cls.ST)
        return cls(
            cluster, area,
            (min_x, min_y, min_z), (max_x, max_y, max_z),
            leafface, n_leaffaces,
            leafbrush, n_leafbrushes,
        )


@attrs.frozen
class Model:
    """A brush model. The first is the world, the rest are used by brush entities."""
    ST: ClassVar[Struct] = Struct('<3f3f4i')

    mins: Tuple[float, float, float]
    maxs: Tuple[float, float, float]
    face: int
    n_faces: int
    brush: int
    n_brushes: int

    @classmethod
    def read(cls, cur: ByteCursor) -> 'Model':
        (
            min_x, min_y, min_z,
            max_x, max_y, max_z,
            face, n_faces,
            brush, n_brushes,
        ) = cur.read_struct(cls.ST)
        return cls((min_x, min_y, min_z), (max_x, max_y, max_z), face, n_faces, brush, n_brushes)


@attrs.frozen
class Brush:
    """A convex volume, used for collision."""
    ST: ClassVar[Struct] = Struct('<3i')

    brushside: int
    n_brushsides: int
    texture: int

    @classmethod
    def read(cls, cur: ByteCursor) -> 'Brush':
        return cls(*cur.read_struct(cls.ST))


@attrs.frozen
class BrushSide:
    """One of the bounding planes of a brush."""
    ST: ClassVar[Struct] = Struct('<2i')

    plane: int
    texture: int

    @classmethod
    def read(cls, cur: ByteCursor) -> 'BrushSide':
        return cls(*cur.read_struct(cls.ST))


@attrs.frozen
class Vertex:
    """A vertex, used by faces."""
    ST: ClassVar[Struct] = Struct('<3f2f2f3f4B')

    position: Tuple[float, float, float]
    # Surface, then lightmap coordinates.
    texcoord: Tuple[Tuple[float, float], Tuple[float, float]]
    normal: Tuple[float, float, float]
    color: Tuple[int, int, int, int]

    @classmethod
    def read(cls, cur: ByteCursor) -> 'Vertex':
        (
            x, y, z,
            tex_s, tex_t, lm_s, lm_t,
            norm_x, norm_y, norm_z,
            red, green, blue, alpha,
        ) = cur.read_struct(cls.ST)
        return cls(
            (x, y, z),
            ((tex_s, tex_t), (lm_s, lm_t)),
            (norm_x, norm_y, norm_z),
            (red, green, blue, alpha),
        )


@attrs.frozen
class Effect:
    """A volumetric fog effect."""
    ST: ClassVar[Struct] = Struct(f'<{NAME_LENGTH}sii')

    name: str
    brush: int
    unknown: int  # Almost always 5, the visible side of the brush.

    @classmethod
    def read(cls, cur: ByteCursor, encoding: str = 'utf8') -> 'Effect':
        name, brush, unknown = cur.read_struct(cls.ST)
        return cls(decode_fixed_str(name, encoding), brush, unknown)


@attrs.frozen
class Face:
    """A renderable surface."""
    ST: ClassVar[Struct] = Struct('<8i2i2i3f6f3f2i')

    texture: int
    effect: int  # -1 if no fog.
    type: int  # See FaceType.
    vertex: int
    n_vertexes: int
    meshvert: int
    n_meshverts: int
    lm_index: int
    lm_start: Tuple[int, int]
    lm_size: Tuple[int, int]
    lm_origin: Tuple[float, float, float]
    lm_vecs: Tuple[Tuple[float, float, float], Tuple[float, float, float]]
    normal: Tuple[float, float, float]
    size: Tuple[int, int]  # Patch dimensions.

    @classmethod
    def read(cls, cur: ByteCursor) -> 'Face':
        values = cur.read_struct(cls.ST)
        return cls(
            *values[:8],
            lm_start=values[8:10],
            lm_size=values[10:12],
            lm_origin=values[12:15],
            lm_vecs=(values[15:18], values[18:21]),
            normal=values[21:24],
            size=values[24:26],
        )

    @property
    def is_meshed(self) -> bool:
        """Polygons and meshes are drawn using the mesh vertexes."""
        return self.type == FaceType.POLYGON.value or self.type == FaceType.MESH.value


@attrs.frozen
class Lightmap:
    """A 128x128 RGB lightmap image."""
    ST: ClassVar[Struct] = Struct(f'<{LIGHTMAP_SIZE * LIGHTMAP_SIZE * 3}s')

    rgb: bytes = attrs.field(repr=lambda rgb: f'<{len(rgb)} bytes>')

    @classmethod
    def read(cls, cur: ByteCursor) -> 'Lightmap':
        [rgb] = cur.read_struct(cls.ST)
        return cls(rgb)

    def pixel(self, x: int, y: int) -> Tuple[int, int, int]:
        """Fetch the colour at this position."""
        if not (0 <= x < LIGHTMAP_SIZE and 0 <= y < LIGHTMAP_SIZE):
            raise IndexError(f'({x}, {y}) is outside the lightmap!')
        off = (y * LIGHTMAP_SIZE + x) * 3
        red, green, blue = self.rgb[off:off + 3]
        return red, green, blue


@attrs.frozen
class LightVol:
    """A cell of the uniform lighting grid, used to light models."""
    ST: ClassVar[Struct] = Struct('<3B3B2B')

    ambient: Tuple[int, int, int]
    directional: Tuple[int, int, int]
    direction: Tuple[int, int]  # Phi, theta, in 256ths of a turn.

    @classmethod
    def read(cls, cur: ByteCursor) -> 'LightVol':
        (
            amb_r, amb_g, amb_b,
            dir_r, dir_g, dir_b,
            phi, theta,
        ) = cur.read_struct(cls.ST)
        return cls((amb_r, amb_g, amb_b), (dir_r, dir_g, dir_b), (phi, theta))


@attrs.frozen
class Visibility:
    """The potentially visible set, a bit vector for each cluster."""
    n_vecs: int
    sz_vecs: int
    vecs: bytes = attrs.field(repr=lambda vecs: f'<{len(vecs)} bytes>')

    @classmethod
    def read(cls, cur: ByteCursor) -> 'Visibility':
        n_vecs = cur.read_int()
        sz_vecs = cur.read_int()
        if n_vecs < 0 or sz_vecs < 0:
            raise ValueError(f'Invalid visdata size {n_vecs} x {sz_vecs}!')
        return cls(n_vecs, sz_vecs, cur.read_bytes(n_vecs * sz_vecs))

    def is_visible(self, cluster_from: int, cluster_to: int) -> bool:
        """Check if the second cluster is potentially visible from the first.

        Negative clusters are outside the map, and always pass.
        """
        if cluster_from < 0 or cluster_to < 0:
            return True
        if cluster_from >= self.n_vecs or cluster_to >= min(self.n_vecs, self.sz_vecs * 8):
            raise IndexError(f'Cluster pair ({cluster_from}, {cluster_to}) out of range!')
        byte = self.vecs[cluster_from * self.sz_vecs + cluster_to // 8]
        return byte & (1 << (cluster_to % 8)) != 0


class ParsedLump(Generic[T]):
    """Allows access to parsed versions of lumps.

    When accessed, the corresponding lump is parsed into a tuple of records, which is cached.
    """
    lump: LUMPS
    __name__: str

    def __init__(self, lump: LUMPS) -> None:
        self.lump = lump
        self.__name__ = ''
        # Args are (BSP, direntry).
        self._read: Optional[Callable[['BSP', Direntry], T]] = None

    def __set_name__(self, owner: Type['BSP'], name: str) -> None:
        self.__name__ = name
        self.__objclass__ = owner
        self._read = getattr(owner, '_lmp_read_' + name)

    def __repr__(self) -> str:
        return f'<q3bsp.BSP.{self.__name__} member>'

    @overload
    def __get__(self, instance: None, owner: Optional[type] = None) -> 'ParsedLump[T]': ...
    @overload
    def __get__(self, instance: 'BSP', owner: Optional[type] = None) -> T: ...

    def __get__(self, instance: Optional['BSP'], owner: Optional[type] = None) -> Union['ParsedLump[T]', T]:
        """Read the lump, or return the cached version."""
        if instance is None:  # Accessed on the class.
            return self
        result: T
        try:
            # noinspection PyProtectedMember
            result = instance._parsed_lumps[self.lump]
            return result
        except KeyError:
            pass
        if self._read is None:
            raise TypeError('ParsedLump.__set_name__ was never called!')
        entry = instance.header.direntries[self.lump]
        LOGGER.debug('Load lump {} ({} bytes)', self.lump.name, entry.length)
        with logger.context(self.lump.name):
            result = self._read(instance, entry)
        instance._parsed_lumps[self.lump] = result  # noqa
        return result

    def __set__(self, instance: Optional['BSP'], value: T) -> None:
        raise AttributeError(f'Lump {self.__name__} is read-only!')


# noinspection PyMethodMayBeStatic
class BSP:
    """A BSP file.

    The whole file is loaded into memory, but lumps are only decoded when first accessed.
    """
    #: The version ID in the file.
    version: int
    #: The version required when reading, or None to accept any.
    expected_version: Optional[int]
    header: Header

    def __init__(
        self,
        filename: StringPath,
        version: Optional[int] = BSP_VERSION,
        *,
        data: Optional[bytes] = None,
        truncate: bool = False,
        encoding: str = 'utf8',
    ) -> None:
        """Load the file, and read the header.

        :param filename: The file to read. If ``data`` is passed, this is only used as a name.
        :param version: The BSP version to require, or None to accept any.
        :param data: If set, use these bytes instead of reading the file.
        :param truncate: If set, lumps with a partial record at the end are truncated, \
            instead of raising :py:class:`LumpSizeError`.
        :param encoding: The encoding used for names and the entity lump.
        """
        self.filename = filename
        self.expected_version = version
        self.truncate = truncate
        self.encoding = encoding
        self._parsed_lumps: Dict[LUMPS, object] = {}
        if data is None:
            with open(filename, 'rb') as file:
                data = file.read()
        self.data = bytes(data)
        self.read()

    def __repr__(self) -> str:
        return f'<BSP "{self.filename}", v{self.version}, {len(self.data)} bytes>'

    entities: ParsedLump[str] = ParsedLump(LUMPS.ENTITIES)
    textures: ParsedLump[Tuple[Texture, ...]] = ParsedLump(LUMPS.TEXTURES)
    planes: ParsedLump[Tuple[Plane, ...]] = ParsedLump(LUMPS.PLANES)
    nodes: ParsedLump[Tuple[Node, ...]] = ParsedLump(LUMPS.NODES)
    leafs: ParsedLump[Tuple[Leaf, ...]] = ParsedLump(LUMPS.LEAFS)
    leaffaces: ParsedLump[Tuple[int, ...]] = ParsedLump(LUMPS.LEAFFACES)
    leafbrushes: ParsedLump[Tuple[int, ...]] = ParsedLump(LUMPS.LEAFBRUSHES)
    models: ParsedLump[Tuple[Model, ...]] = ParsedLump(LUMPS.MODELS)
    brushes: ParsedLump[Tuple[Brush, ...]] = ParsedLump(LUMPS.BRUSHES)
    brushsides: ParsedLump[Tuple[BrushSide, ...]] = ParsedLump(LUMPS.BRUSHSIDES)
    vertexes: ParsedLump[Tuple[Vertex, ...]] = ParsedLump(LUMPS.VERTEXES)
    meshverts: ParsedLump[Tuple[int, ...]] = ParsedLump(LUMPS.MESHVERTS)
    effects: ParsedLump[Tuple[Effect, ...]] = ParsedLump(LUMPS.EFFECTS)
    faces: ParsedLump[Tuple[Face, ...]] = ParsedLump(LUMPS.FACES)
    lightmaps: ParsedLump[Tuple[Lightmap, ...]] = ParsedLump(LUMPS.LIGHTMAPS)
    lightvols: ParsedLump[Tuple[LightVol, ...]] = ParsedLump(LUMPS.LIGHTVOLS)
    # This is None if the map has no visibility data.
    visibility: ParsedLump[Optional[Visibility]] = ParsedLump(LUMPS.VISDATA)

    def read(self) -> None:
        """Parse and check the header, discarding any parsed lumps.

        The version is checked against :py:attr:`expected_version`.
        """
        self._parsed_lumps.clear()
        self.header = read_header(ByteCursor(self.data))
        check_header(self.header, self.expected_version)
        self.version = self.header.version
        LOGGER.debug('Read header for "{}", version {}', self.filename, self.version)

    def get_lump(self, lump: LUMPS) -> bytes:
        """Return the raw contents of a lump."""
        entry = self.header.direntries[lump]
        _check_bounds(self.data, entry)
        return self.data[entry.offset:entry.end]

    def model_faces(self, model: Union[Model, int]) -> Tuple[Face, ...]:
        """Return the faces used by a model, or a model index."""
        if isinstance(model, int):
            models = self.models
            if not 0 <= model < len(models):
                raise ValueError(f'Model {model} is out of range (0-{len(models)})!')
            model = models[model]
        faces = self.faces
        if model.face < 0 or model.n_faces < 0 or model.face + model.n_faces > len(faces):
            raise ValueError(
                f'Model faces {model.face}-{model.face + model.n_faces} '
                f'are out of range (0-{len(faces)})!'
            )
        return faces[model.face:model.face + model.n_faces]

    def mesh_indices(self, model: Union[Model, int] = 0) -> List[int]:
        """Compute the triangle list for the polygons and meshes of a model.

        Each mesh vertex is relative to the face's first vertex.
        The result indexes into :py:attr:`vertexes`.
        """
        meshverts = self.meshverts
        vert_count = len(self.vertexes)
        indices: List[int] = []
        for face in self.model_faces(model):
            if not face.is_meshed:
                continue
            start = face.meshvert
            end = start + face.n_meshverts
            if start < 0 or face.n_meshverts < 0 or end > len(meshverts):
                raise ValueError(
                    f'Face mesh vertexes {start}-{end} are out of range (0-{len(meshverts)})!'
                )
            for offset in meshverts[start:end]:
                ind = face.vertex + offset
                if not 0 <= ind < vert_count:
                    raise ValueError(f'Vertex {ind} is out of range (0-{vert_count})!')
                indices.append(ind)
        return indices

    def is_potentially_visible(self, leaf1: Leaf, leaf2: Leaf) -> bool:
        """Check if the second leaf is potentially visible from the first.

        If the map has no visibility data, everything is visible.
        """
        vis = self.visibility
        if vis is None:
            return True
        return vis.is_visible(leaf1.cluster, leaf2.cluster)

    # Lump reading code:
    def _read_ints(self, entry: Direntry) -> Tuple[int, ...]:
        return read_lump(self.data, entry, SIZE_INT, ByteCursor.read_int, truncate=self.truncate)

    def _lmp_read_entities(self, entry: Direntry) -> str:
        return read_entities(self.data, self.header.direntries, self.encoding)

    def _lmp_read_textures(self, entry: Direntry) -> Tuple[Texture, ...]:
        return read_lump(
            self.data, entry, Texture.ST.size,
            functools.partial(Texture.read, encoding=self.encoding),
            truncate=self.truncate,
        )

    def _lmp_read_planes(self, entry: Direntry) -> Tuple[Plane, ...]:
        return read_lump(self.data, entry, Plane.ST.size, Plane.read, truncate=self.truncate)

    def _lmp_read_nodes(self, entry: Direntry) -> Tuple[Node, ...]:
        return read_lump(self.data, entry, Node.ST.size, Node.read, truncate=self.truncate)

    def _lmp_read_leafs(self, entry: Direntry) -> Tuple[Leaf, ...]:
        return read_lump(self.data, entry, Leaf.ST.size, Leaf.read, truncate=self.truncate)

    def _lmp_read_leaffaces(self, entry: Direntry) -> Tuple[int, ...]:
        return self._read_ints(entry)

    def _lmp_read_leafbrushes(self, entry: Direntry) -> Tuple[int, ...]:
        return self._read_ints(entry)

    def _lmp_read_models(self, entry: Direntry) -> Tuple[Model, ...]:
        return read_lump(self.data, entry, Model.ST.size, Model.read, truncate=self.truncate)

    def _lmp_read_brushes(self, entry: Direntry) -> Tuple[Brush, ...]:
        return read_lump(self.data, entry, Brush.ST.size, Brush.read, truncate=self.truncate)

    def _lmp_read_brushsides(self, entry: Direntry) -> Tuple[BrushSide, ...]:
        return read_lump(self.data, entry, BrushSide.ST.size, BrushSide.read, truncate=self.truncate)

    def _lmp_read_vertexes(self, entry: Direntry) -> Tuple[Vertex, ...]:
        return read_lump(self.data, entry, Vertex.ST.size, Vertex.read, truncate=self.truncate)

    def _lmp_read_meshverts(self, entry: Direntry) -> Tuple[int, ...]:
        return self._read_ints(entry)

    def _lmp_read_effects(self, entry: Direntry) -> Tuple[Effect, ...]:
        return read_lump(
            self.data, entry, Effect.ST.size,
            functools.partial(Effect.read, encoding=self.encoding),
            truncate=self.truncate,
        )

    def _lmp_read_faces(self, entry: Direntry) -> Tuple[Face, ...]:
        return read_lump(self.data, entry, Face.ST.size, Face.read, truncate=self.truncate)

    def _lmp_read_lightmaps(self, entry: Direntry) -> Tuple[Lightmap, ...]:
        return read_lump(self.data, entry, Lightmap.ST.size, Lightmap.read, truncate=self.truncate)

    def _lmp_read_lightvols(self, entry: Direntry) -> Tuple[LightVol, ...]:
        return read_lump(self.data, entry, LightVol.ST.size, LightVol.read, truncate=self.truncate)

    def _lmp_read_visibility(self, entry: Direntry) -> Optional[Visibility]:
        if entry.length == 0:
            return None
        _check_bounds(self.data, entry)
        cur = ByteCursor(self.data, entry.offset)
        vis = Visibility.read(cur)
        if cur.pos > entry.end:
            raise EndOfDataError(
                f'Visibility data is {cur.pos - entry.offset} bytes, '
                f'but the lump is only {entry.length} bytes!'
            )
        return vis
