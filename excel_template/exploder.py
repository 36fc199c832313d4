"""
Record-array explosion.

A record-array is a list of mappings bound to one variable, for example
``records = [{"date": ..., "amount": ...}, ...]``.  Template cells refer to
its fields as ``%records.date%``.  Exploding it

* stores every field under an indexed name (``0.records.date``,
  ``1.records.date``, ...),
* duplicates the template region once per extra record, and
* rewrites the placeholders of copy *i* to ``%i.records.date%``.

Vertical mode duplicates the placeholder column (meant to be the last
column of the sheet), horizontal mode duplicates the block of rows that
belongs to the record.
"""

import logging

from .config import Direction
from .exceptions import UnsupportedTemplateError
from .grid import (
    cell_text,
    copy_cell,
    is_occupied,
    iter_text_cells,
    last_populated_column,
    move_cells_right,
    row_texts,
    set_text,
    shift_rows_down,
)
from .placeholders import (
    drop_fit_auto,
    find_placeholders,
    has_constant,
    prefix_root,
    references_root,
    strip_constants,
)
from .values import ValueKind, value_kind

logger = logging.getLogger(__name__)


def _belongs_to_record(text, root):
    return text is not None and (references_root(text, root) or has_constant(text))


def _indexed_text(text, root, index):
    """Text of copy *index*: constants stripped, root fields indexed."""
    return prefix_root(strip_constants(text), root, index)


def _check_no_pending_lists(cells, store, root):
    """Refuse to duplicate a region that still holds a list placeholder."""
    for cell in cells:
        for placeholder in find_placeholders(cell_text(cell)):
            if placeholder.is_constant or not store.resolve_exact(placeholder.path):
                continue
            if value_kind(store[placeholder.path]) is ValueKind.LIST:
                raise UnsupportedTemplateError(
                    f"List '{placeholder.path}' at {cell.coordinate} lies inside the "
                    f"region duplicated for record-array '{root}'"
                )


# ---------------------------------------------------------------------------
# Vertical: duplicate the column
# ---------------------------------------------------------------------------

def duplicate_column(ws, column, record_count, root, duplicate_all):
    """Copy *column* ``record_count - 1`` times to its right.

    Cells beyond *column* are moved out of the way first.  Unless
    *duplicate_all* is set, a row is only copied when its cell refers to
    *root* or holds a constant.
    """
    logger.debug("Duplicating column %d %d times (record-array '%s', %s)",
                 column, record_count - 1, root,
                 "all rows" if duplicate_all else "record rows only")
    extra = record_count - 1
    for row in range(1, ws.max_row + 1):
        move_cells_right(ws, row, column, extra)
        src = ws.cell(row=row, column=column)
        if not is_occupied(src):
            continue
        text = cell_text(src)
        if not duplicate_all and not _belongs_to_record(text, root):
            continue
        for i in range(1, record_count):
            dst = ws.cell(row=row, column=column + i)
            copy_cell(src, dst)
            if text is not None:
                set_text(dst, _indexed_text(text, root, i))


def explode_vertical(ws, store, tracker, cell, root, records, duplicate_all):
    """Explode *records* by duplicating the column of *cell*."""
    column = cell.column
    grown = sorted(r for r, c in tracker.expanded_cells() if c == column)
    if grown:
        raise UnsupportedTemplateError(
            f"Column {column} holds list values (rows {grown}) and is duplicated "
            f"for record-array '{root}'"
        )
    column_cells = [c for c in iter_text_cells(ws) if c.column == column]
    _check_no_pending_lists(column_cells, store, root)

    if column < last_populated_column(ws):
        logger.warning(
            "Record-array '%s' at %s is not in the last column; "
            "cells to its right are moved", root, cell.coordinate)

    if len(records) > 1:
        duplicate_column(ws, column, len(records), root, duplicate_all)
    store.explode_one_level(root, records)

    # the original column goes last so the copies are not prefixed twice
    for tmp in column_cells:
        text = cell_text(tmp)
        if _belongs_to_record(text, root):
            set_text(tmp, _indexed_text(text, root, 0))


# ---------------------------------------------------------------------------
# Horizontal: duplicate the row block
# ---------------------------------------------------------------------------

def block_size(ws, row, root):
    """Number of rows, starting at *row*, that make up one record block.

    A row belongs to the block when it refers to *root* or holds only
    constants.  Rows without placeholders are kept when another block row
    follows them.  The first row with an unrelated placeholder ends the
    block; of the blank rows right before it only one is kept, as the
    separator between copies.  Blank rows running to the end of the sheet
    are dropped.
    """
    size = 0
    trailing = 0
    for r in range(row, ws.max_row + 1):
        placeholders = [p for text in row_texts(ws, r) for p in find_placeholders(text)]
        if any(p.references(root) for p in placeholders):
            trailing = 0
            size += 1
        elif any(not p.is_constant for p in placeholders):
            return size - max(trailing - 1, 0)
        elif placeholders:
            trailing = 0
            size += 1
        else:
            trailing += 1
            size += 1
    return size - trailing


def duplicate_row_block(ws, row, size, record_count, root, duplicate_all):
    """Copy the *size* rows starting at *row* ``record_count - 1`` times."""
    logger.debug("Duplicating row block %d-%d %d times (record-array '%s')",
                 row, row + size - 1, record_count - 1, root)
    extra_rows = size * (record_count - 1)
    start = row + size
    if start <= ws.max_row:
        shift_rows_down(ws, start, extra_rows)

    for i in range(1, record_count):
        for j in range(size):
            src_row = row + j
            dst_row = row + i * size + j
            height = ws.row_dimensions[src_row].height
            if height:
                ws.row_dimensions[dst_row].height = height
            for src in next(ws.iter_rows(min_row=src_row, max_row=src_row)):
                if not is_occupied(src):
                    continue
                text = cell_text(src)
                if not duplicate_all and not _belongs_to_record(text, root):
                    continue
                dst = ws.cell(row=dst_row, column=src.column)
                copy_cell(src, dst)
                if text is None:
                    continue
                new_text = _indexed_text(text, root, i)
                # autosize once, on the last copy
                if i < record_count - 1 and references_root(text, root):
                    new_text = drop_fit_auto(new_text)
                set_text(dst, new_text)


def explode_horizontal(ws, store, cell, root, records, duplicate_all):
    """Explode *records* by duplicating the row block of *cell*."""
    row = cell.row
    size = block_size(ws, row, root)
    block_cells = list(iter_text_cells(ws, min_row=row, max_row=row + size - 1))
    _check_no_pending_lists(block_cells, store, root)

    if len(records) > 1:
        duplicate_row_block(ws, row, size, len(records), root, duplicate_all)

    for tmp in block_cells:
        text = cell_text(tmp)
        if _belongs_to_record(text, root):
            set_text(tmp, _indexed_text(text, root, 0))

    for i, record in enumerate(records):
        store.explode_deep(f"{i}.{root}", record)


def explode_records(ws, store, tracker, cell, root, records, direction, duplicate_all):
    """Explode record-array *root* from *cell* in *direction*."""
    logger.debug("Variable '%s' is a record-array of %d records", root, len(records))
    if direction is Direction.HORIZONTAL:
        explode_horizontal(ws, store, cell, root, records, duplicate_all)
    else:
        explode_vertical(ws, store, tracker, cell, root, records, duplicate_all)
