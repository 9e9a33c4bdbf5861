"""Brick catalog: colours, shapes and costs, plus the plain-text loader.

Catalog file format (whitespace-delimited, line breaks are not significant)::

    <colour count>
    <name> <R> <G> <B>        # once per colour, channels in 0..255
    ...
    <shape count>
    <width> <height> <cost>   # once per shape, cost in cents
    ...

Every non-square shape is augmented with its 90-degree rotation, appended
after the shapes read from the file.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from brick_mosaic.errors import CatalogError
from brick_mosaic.geometry import Vec2

# Built-in palette: name -> (R, G, B)
DEFAULT_COLORS: dict[str, tuple[int, int, int]] = {
    "Black": (5, 19, 29),
    "White": (255, 255, 255),
    "Red": (201, 26, 9),
    "Blue": (0, 85, 191),
    "Yellow": (242, 205, 55),
    "Green": (35, 120, 65),
    "Orange": (254, 138, 24),
    "Tan": (228, 205, 158),
    "Reddish_Brown": (88, 42, 18),
    "Medium_Azure": (54, 174, 191),
    "Light_Bluish_Gray": (160, 165, 169),
    "Dark_Bluish_Gray": (108, 110, 104),
}

# Built-in plate shapes: (width, height, cost in cents)
DEFAULT_SHAPES: list[tuple[int, int, int]] = [
    (1, 1, 7),
    (1, 2, 8),
    (1, 3, 10),
    (1, 4, 12),
    (2, 2, 10),
    (2, 3, 14),
    (2, 4, 16),
    (4, 4, 45),
]


def pack_rgba(r: int, g: int, b: int, a: int = 255) -> int:
    """Pack 8-bit channels into a single ``0xAARRGGBB`` brick colour."""
    return ((a & 0xFF) << 24) | ((r & 0xFF) << 16) | ((g & 0xFF) << 8) | (b & 0xFF)


def unpack_rgba(color: int) -> tuple[int, int, int, int]:
    """Inverse of :func:`pack_rgba`; returns ``(r, g, b, a)``."""
    return (
        (color >> 16) & 0xFF,
        (color >> 8) & 0xFF,
        color & 0xFF,
        (color >> 24) & 0xFF,
    )


@dataclass(frozen=True)
class BrickDefinition:
    """One purchasable brick shape.

    Attributes:
        id:    Index of this definition in its catalog.
        shape: ``(width, height)`` in pegs.
        cost:  Price per unit in cents.
    """

    id: int
    shape: Vec2
    cost: int

    @property
    def width(self) -> int:
        return self.shape.x

    @property
    def height(self) -> int:
        return self.shape.y

    @property
    def area(self) -> int:
        return self.shape.area

    @property
    def is_square(self) -> bool:
        return self.shape.x == self.shape.y


def with_rotations(definitions: Iterable[BrickDefinition]) -> list[BrickDefinition]:
    """Append a rotated copy of every non-square definition.

    Rotated copies keep the cost, swap width and height, and receive fresh
    ids following the last input id, in input order.
    """
    result = list(definitions)
    next_id = len(result)
    for definition in list(result):
        if definition.is_square:
            continue
        result.append(
            BrickDefinition(
                next_id, Vec2(definition.height, definition.width), definition.cost,
            )
        )
        next_id += 1
    return result


@dataclass(frozen=True)
class BrickCatalog:
    """Colours and brick definitions available to the solver.

    ``definitions`` already contains the rotated variants; the first
    ``base_count`` entries are the shapes as they were declared.
    """

    definitions: tuple[BrickDefinition, ...]
    colors: tuple[int, ...]
    color_names: tuple[str, ...]
    base_count: int

    def __len__(self) -> int:
        return len(self.definitions)

    def __iter__(self) -> Iterator[BrickDefinition]:
        return iter(self.definitions)

    def __getitem__(self, definition_id: int) -> BrickDefinition:
        return self.definitions[definition_id]

    @property
    def rgb(self) -> np.ndarray:
        """(N, 3) uint8 array of the catalog colours."""
        if not self.colors:
            return np.zeros((0, 3), dtype=np.uint8)
        return np.array(
            [unpack_rgba(c)[:3] for c in self.colors], dtype=np.uint8,
        )


def build_catalog(
    colors: Sequence[tuple[str, tuple[int, int, int]]],
    shapes: Sequence[tuple[int, int, int]],
) -> BrickCatalog:
    """Build a catalog from named RGB colours and ``(w, h, cost)`` shapes.

    Raises:
        CatalogError: If a channel, dimension or cost is out of range.
    """
    names: list[str] = []
    packed: list[int] = []
    for name, (r, g, b) in colors:
        for channel in (r, g, b):
            if not 0 <= channel <= 255:
                raise CatalogError(
                    f"Colour {name!r} has channel value {channel} outside 0..255"
                )
        names.append(name)
        packed.append(pack_rgba(r, g, b))

    base: list[BrickDefinition] = []
    for i, (w, h, cost) in enumerate(shapes):
        if w < 1 or h < 1:
            raise CatalogError(f"Brick #{i} has invalid shape {w}x{h}")
        if cost < 0:
            raise CatalogError(f"Brick #{i} has negative cost {cost}")
        base.append(BrickDefinition(i, Vec2(w, h), cost))

    return BrickCatalog(
        definitions=tuple(with_rotations(base)),
        colors=tuple(packed),
        color_names=tuple(names),
        base_count=len(base),
    )


def _next_int(tokens: Iterator[str], what: str) -> int:
    try:
        token = next(tokens)
    except StopIteration:
        raise CatalogError(f"Unexpected end of catalog while reading {what}") from None
    try:
        return int(token)
    except ValueError:
        raise CatalogError(f"Expected an integer for {what}, got {token!r}") from None


def parse_catalog(text: str) -> BrickCatalog:
    """Parse the plain-text catalog format described in the module docstring."""
    tokens = iter(text.split())

    if not text.split():
        raise CatalogError("No brick colors count found")
    color_count = _next_int(tokens, "the brick colors count")
    if color_count < 0:
        raise CatalogError(f"Negative brick colors count {color_count}")

    colors: list[tuple[str, tuple[int, int, int]]] = []
    for i in range(color_count):
        try:
            name = next(tokens)
        except StopIteration:
            raise CatalogError(f"Missing name for colour #{i}") from None
        rgb = tuple(_next_int(tokens, f"channel of colour {name!r}") for _ in range(3))
        colors.append((name, rgb))  # type: ignore[arg-type]

    shape_count = _next_int(tokens, "the brick structure count")
    if shape_count < 0:
        raise CatalogError(f"Negative brick structure count {shape_count}")

    shapes = [
        (
            _next_int(tokens, f"width of brick #{i}"),
            _next_int(tokens, f"height of brick #{i}"),
            _next_int(tokens, f"cost of brick #{i}"),
        )
        for i in range(shape_count)
    ]
    return build_catalog(colors, shapes)


def load_catalog(path: str | Path) -> BrickCatalog:
    """Read and parse a catalog file.

    Raises:
        CatalogError: If the file cannot be read or is malformed.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise CatalogError(f'Unable to open the given file "{path}": {exc}') from exc
    return parse_catalog(text)


def dump_catalog(catalog: BrickCatalog) -> str:
    """Serialise ``catalog`` back to the text format (declared shapes only)."""
    lines = [str(len(catalog.colors))]
    for name, color in zip(catalog.color_names, catalog.colors, strict=True):
        r, g, b, _ = unpack_rgba(color)
        lines.append(f"{name} {r} {g} {b}")
    base = catalog.definitions[: catalog.base_count]
    lines.append(str(len(base)))
    lines.extend(f"{d.width} {d.height} {d.cost}" for d in base)
    return "\n".join(lines) + "\n"


def default_catalog() -> BrickCatalog:
    """The built-in catalog used when no catalog file is given."""
    return build_catalog(list(DEFAULT_COLORS.items()), DEFAULT_SHAPES)
