"""
List expansion.

A placeholder bound to a list of N values grows the sheet by N-1 rows
(vertical) or N-1 columns (horizontal) and writes one value per row or
column.
"""

import logging
from dataclasses import replace

from .config import Direction
from .grid import autosize_column, copy_style, move_cells_right
from .writer import write_value

logger = logging.getLogger(__name__)


def expand_vertical(ws, tracker, cell, values, directive=None):
    """Write *values* down the column of *cell*, inserting rows as needed.

    Rows already inserted below the same template row by another list are
    reused through *tracker*.
    """
    inserted = tracker.insert_rows(cell.row, len(values) - 1)
    tracker.mark_expanded(cell.row, cell.column, len(values))
    autosize = directive is not None and directive.autosize
    if autosize:
        # every value lands in the same column, size it once at the end
        directive = replace(directive, fit=None)
    for j, value in enumerate(values):
        target = ws.cell(row=cell.row + j, column=cell.column)
        write_value(target, value, directive)
    if autosize:
        autosize_column(ws, cell.column)
    return inserted > 0 or len(values) > 1


def expand_horizontal(ws, cell, values, directive=None):
    """Write *values* along the row of *cell*, pushing later cells right."""
    write_value(cell, values[0], directive)
    extra = len(values) - 1
    if extra <= 0:
        return False
    move_cells_right(ws, cell.row, cell.column, extra)
    for j in range(1, len(values)):
        target = ws.cell(row=cell.row, column=cell.column + j)
        copy_style(cell, target)
        write_value(target, values[j], directive)
    return True


def expand_list(ws, tracker, cell, values, directive, direction):
    """Expand a list placeholder in *cell*.

    Returns True when the structure of the sheet changed and scanning has
    to start over.
    """
    values = list(values)
    if not values:
        logger.debug("Empty list at %s, blanking the cell", cell.coordinate)
        write_value(cell, None, directive)
        return False
    logger.debug("Expanding %d values %s from %s",
                 len(values), direction.value, cell.coordinate)
    if direction is Direction.HORIZONTAL:
        return expand_horizontal(ws, cell, values, directive)
    return expand_vertical(ws, tracker, cell, values, directive)
