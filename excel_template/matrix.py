"""
Matrix export.

Writes a plain list of rows into a new worksheet, the reverse of filling a
template: no placeholders, every value goes to its own cell::

    wb = write_matrix([["Name", "Born"], ["Ann", datetime.date(1990, 5, 1)]],
                      sheet_name="People")
    wb.save("people.xlsx")

Strings are stored with the text number format (``@``) so Excel does not
reinterpret them as numbers or dates, strings starting with ``=`` become
formulas, and dates get *date_format*.
"""

import datetime
import io
import logging

from openpyxl import Workbook

from .values import ValueKind, render_text, value_kind

logger = logging.getLogger(__name__)

DEFAULT_DATE_FORMAT = 'yyyy-mm-dd"T"hh:mm:ss'
TEXT_FORMAT = "@"


def _as_row(row):
    if row is None:
        return []
    if isinstance(row, (str, bytes)) or not hasattr(row, "__iter__"):
        return [row]
    return list(row)


def _naive(value, timezone):
    if isinstance(value, datetime.datetime) and value.tzinfo is not None:
        if timezone is not None:
            value = value.astimezone(timezone)
        return value.replace(tzinfo=None)
    return value


def _write_cell(cell, value, date_format, timezone):
    kind = value_kind(value)
    if kind is ValueKind.NULL:
        return
    if kind in (ValueKind.BOOL, ValueKind.INT, ValueKind.FLOAT):
        cell.value = value
    elif kind is ValueKind.DATETIME:
        cell.value = _naive(value, timezone)
        if not isinstance(value, datetime.time):
            cell.number_format = date_format
    elif kind is ValueKind.TEXT and value.startswith("="):
        cell.value = value
    else:
        cell.value = render_text(value)
        cell.data_type = "s"
        cell.number_format = TEXT_FORMAT


def write_matrix(rows, sheet_name="Sheet1", date_format=None, timezone=None, workbook=None):
    """Write *rows* into a new sheet called *sheet_name*.

    Args:
        rows: iterable of rows; a row is an iterable of values, a single
            value (one cell), or ``None`` (an empty row).
        sheet_name: title of the new sheet.
        date_format: Excel number format for dates and datetimes.
        timezone: ``tzinfo`` that aware datetimes are converted to before
            their zone is dropped; without it the wall time is kept.
        workbook: add the sheet to this workbook instead of a new one.

    Returns:
        The workbook holding the new sheet.
    """
    if workbook is None:
        workbook = Workbook()
        ws = workbook.active
        ws.title = sheet_name
    else:
        ws = workbook.create_sheet(sheet_name)
    date_format = date_format or DEFAULT_DATE_FORMAT

    count = 0
    for i, row in enumerate(rows, start=1):
        for j, value in enumerate(_as_row(row), start=1):
            _write_cell(ws.cell(row=i, column=j), value, date_format, timezone)
        count = i
    logger.info("Wrote %d rows to sheet '%s'", count, ws.title)
    return workbook


def save_matrix(target, rows, **options):
    """Write *rows* with :func:`write_matrix` and save to *target*.

    *target* is a path or a binary file object.
    """
    workbook = write_matrix(rows, **options)
    workbook.save(target)
    return target


def matrix_to_bytes(rows, **options) -> bytes:
    """Write *rows* with :func:`write_matrix` and return xlsx bytes."""
    buffer = io.BytesIO()
    save_matrix(buffer, rows, **options)
    return buffer.getvalue()
