"""Grid arithmetic for laying out cards as a near-square grid."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

_DEFAULT_HINT = (100, 70)


@dataclass(frozen=True)
class Size:
    width: int = 0
    height: int = 0

    def expanded_to(self, other: "Size") -> "Size":
        return Size(max(self.width, other.width), max(self.height, other.height))


@dataclass(frozen=True)
class Rect:
    left: int
    top: int
    width: int
    height: int


def _div(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    quotient = abs(a) // abs(b)
    return quotient if (a >= 0) == (b > 0) else -quotient


def grid_columns(count: int) -> int:
    """Number of columns: the ceiling of the square root of the count."""
    if count < 0:
        raise ValueError("count must not be negative")
    return 0 if count == 0 else math.isqrt(count - 1) + 1


def grid_rows(count: int) -> int:
    """Number of rows needed to hold ``count`` items in ``grid_columns`` columns."""
    columns = grid_columns(count)
    return 0 if columns == 0 else -(-count // columns)


def cell_geometry(rect: Rect, count: int, spacing: int) -> list[Rect]:
    """Geometry of each of ``count`` cells placed row by row inside ``rect``."""
    if count == 0:
        return []
    rows = grid_rows(count)
    columns = grid_columns(count)
    cell_width = _div(rect.width - (columns - 1) * spacing, columns)
    cell_height = _div(rect.height - (rows - 1) * spacing, rows)
    return [
        Rect(
            rect.left + column * (cell_width + spacing) - spacing,
            rect.top + row * (cell_height + spacing) - spacing,
            cell_width,
            cell_height,
        )
        for row, column in (divmod(index, columns) for index in range(count))
    ]


def _grid_size(cell: Size, count: int, spacing: int) -> Size:
    rows = grid_rows(count)
    columns = grid_columns(count)
    return Size(
        columns * cell.width + columns * spacing,
        rows * cell.height + rows * spacing,
    )


def size_hint(item_sizes: Iterable[Size], spacing: int) -> Size:
    """Preferred size of the grid given each item's preferred size."""
    sizes = list(item_sizes)
    cell = Size(*_DEFAULT_HINT) if sizes else Size()
    for size in sizes:
        cell = cell.expanded_to(size)
    return _grid_size(cell, len(sizes), spacing)


def minimum_size(item_sizes: Iterable[Size], spacing: int) -> Size:
    """Minimum size of the grid given each item's minimum size."""
    sizes = list(item_sizes)
    cell = Size()
    for size in sizes:
        cell = cell.expanded_to(size)
    return _grid_size(cell, len(sizes), spacing)