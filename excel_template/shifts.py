"""
Row shift bookkeeping for vertical list expansion.

Two lists placed next to each other on the same row share the rows they
insert: a list of 3 inserts 2 rows, a list of 4 next to it must only add 1
more.  :class:`ShiftTracker` remembers, per template row, how many rows
have already been inserted beneath it.  One tracker lives for the duration
of a single sheet pass.
"""

import logging

from .exceptions import ShiftCollisionError
from .grid import cell_text, copy_style, is_occupied, set_text, shift_rows_down
from .placeholders import has_constant, strip_constants

logger = logging.getLogger(__name__)


class ShiftTracker:
    """Tracks rows inserted below template rows of one worksheet."""

    def __init__(self, ws):
        self.ws = ws
        self._shifts = {}
        self._expanded = set()

    def __repr__(self):
        return f"ShiftTracker({self.ws.title!r}, {self._shifts})"

    @property
    def shifts(self):
        return dict(self._shifts)

    def shift_at(self, row):
        return self._shifts.get(row, 0)

    def mark_expanded(self, row, column, count):
        """Remember that a list filled *count* rows of *column* from *row*."""
        self._expanded.update((row + j, column) for j in range(count))

    def expanded_cells(self):
        """Return the (row, column) cells filled by list expansion so far.

        Coordinates are as written and not moved by later insertions.
        """
        return set(self._expanded)

    def insert_rows(self, row, amount):
        """Make sure *amount* rows exist below template *row*.

        Rows already inserted there by an earlier expansion are reused.
        New rows clone the template row's cell styles; constants of the
        template row are copied as literal text, other cells stay blank.

        Returns the number of rows actually inserted.
        """
        offset = self.shift_at(row)
        remaining = amount - offset
        if remaining <= 0:
            return 0

        start = row + 1 + offset
        logger.debug("Inserting %d new rows after row %d", remaining, start - 1)
        shift_rows_down(self.ws, start, remaining)

        template = next(self.ws.iter_rows(min_row=row, max_row=row))
        for i in range(remaining):
            for cell in template:
                if not is_occupied(cell):
                    continue
                new_cell = self.ws.cell(row=start + i, column=cell.column)
                copy_style(cell, new_cell)
                text = cell_text(cell)
                if text is not None and has_constant(text):
                    set_text(new_cell, strip_constants(text))

        self._shifts[row] = amount
        self._rekey(row, remaining)
        return remaining

    def _rekey(self, row, amount):
        """Move every entry below *row* down by *amount*."""
        rekeyed = {}
        for key in sorted(self._shifts, reverse=True):
            new_key = key + amount if key > row else key
            if new_key in rekeyed:
                raise ShiftCollisionError(new_key)
            rekeyed[new_key] = self._shifts[key]
        self._shifts = rekeyed
