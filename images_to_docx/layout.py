from __future__ import annotations

from typing import List, Sequence

from .models import GridCell, GridRow, NormalizedImage

DEFAULT_COLUMNS = 3


def layout(images: Sequence[NormalizedImage], columns: int = DEFAULT_COLUMNS) -> List[GridRow]:
    """Split ``images`` into rows of ``columns`` cells, in input order.

    The trailing row is padded with empty cells so the table stays rectangular.
    No sorting, filtering or deduplication happens here.
    """
    if columns < 1:
        raise ValueError(f"columns must be >= 1, got {columns}")
    rows: List[GridRow] = []
    for start in range(0, len(images), columns):
        cells = [GridCell.occupied(img) for img in images[start:start + columns]]
        while len(cells) < columns:
            cells.append(GridCell.empty())
        rows.append(GridRow(tuple(cells)))
    return rows
