"""
Worksheet helpers.

Thin layer over openpyxl for the operations the substitution engine needs:
reading cell text, cloning styles, shifting rows down and cells right, and
sizing columns.  Rows and columns are 1-based, as in openpyxl.
"""

from copy import copy

from openpyxl.utils import get_column_letter

# Excel default column width, in characters
MIN_AUTOSIZE_WIDTH = 8
AUTOSIZE_PADDING = 2


def cell_text(cell):
    """Return the text of a plain string cell, or ``None``.

    Formulas and non-text values never hold placeholders.
    """
    if cell.data_type == "f":
        return None
    if isinstance(cell.value, str):
        return cell.value
    return None


def iter_text_cells(ws, min_row=1, max_row=None):
    """Yield the string cells of *ws* in row-major, then column order."""
    for row in ws.iter_rows(min_row=min_row, max_row=max_row or ws.max_row):
        for cell in row:
            if cell_text(cell) is not None:
                yield cell


def row_texts(ws, row):
    """Return the texts of all string cells in *row*."""
    return [cell_text(c) for c in iter_text_cells(ws, min_row=row, max_row=row)]


def is_occupied(cell):
    return cell.value is not None or cell.has_style


def last_column(ws, row):
    """Last column of *row* holding a value or a style, 0 for an empty row."""
    last = 0
    for cells in ws.iter_rows(min_row=row, max_row=row):
        for cell in cells:
            if is_occupied(cell):
                last = cell.column
    return last


def last_populated_column(ws):
    """Last column of the sheet holding a value."""
    last = 0
    for row in ws.iter_rows():
        for cell in row:
            if cell.value is not None:
                last = max(last, cell.column)
    return last


def copy_style(src, dst):
    """Clone the style of *src* onto *dst*."""
    if not src.has_style:
        return
    dst.font = copy(src.font)
    dst.border = copy(src.border)
    dst.fill = copy(src.fill)
    dst.number_format = src.number_format
    dst.protection = copy(src.protection)
    dst.alignment = copy(src.alignment)


def set_text(cell, text):
    """Store *text* as a string, even when it starts with ``=``."""
    cell.value = text
    if cell.data_type == "f":
        cell.data_type = "s"


def copy_cell(src, dst):
    """Copy value, type and style verbatim.  Formulas are not re-indexed."""
    dst.value = src.value
    # keep text that starts with "=" as text
    dst.data_type = src.data_type
    copy_style(src, dst)


def move_cells_right(ws, row, col, amount):
    """Move every cell of *row* right of *col* by *amount* columns."""
    if amount <= 0:
        return
    last = last_column(ws, row)
    if last <= col:
        return
    ws.move_range(
        f"{get_column_letter(col + 1)}{row}:{get_column_letter(last)}{row}",
        rows=0, cols=amount, translate=False,
    )


def shift_rows_down(ws, start_row, amount):
    """Shift every row at or below *start_row* down by *amount* rows.

    Cells and custom row heights move together; formulas are left as-is.
    """
    if amount <= 0:
        return
    heights = {
        idx: dim.height
        for idx, dim in ws.row_dimensions.items()
        if idx >= start_row and dim.height
    }
    ws.insert_rows(start_row, amount)
    # high-to-low so no height overwrites one that still has to move
    for idx in sorted(heights, reverse=True):
        ws.row_dimensions[idx + amount].height = heights[idx]
        ws.row_dimensions[idx].height = None


def autosize_column(ws, col):
    """Fit the width of column *col* to its longest value."""
    longest = 0
    for cells in ws.iter_cols(min_col=col, max_col=col):
        for cell in cells:
            if cell.value is not None:
                longest = max(longest, len(str(cell.value)))
    letter = get_column_letter(col)
    ws.column_dimensions[letter].width = max(longest + AUTOSIZE_PADDING, MIN_AUTOSIZE_WIDTH)
