"""
Value writer and style applier.

:func:`write_value` stores a variable into a cell according to its
:class:`~excel_template.values.ValueKind` and then applies the placeholder
directive with :func:`apply_style`.
"""

import datetime
import logging

from openpyxl.styles import Border, Side

from .grid import autosize_column, set_text
from .values import ValueKind, render_text, value_kind

logger = logging.getLogger(__name__)

_EPOCH = datetime.datetime(1970, 1, 1)
_ONE_DAY = datetime.timedelta(days=1)
_SECONDS_PER_DAY = 86400.0


def day_fraction(value):
    """Return the fraction of a day for time-only values, else ``None``.

    Spreadsheets store a time of day as a fraction of one day.  A
    ``datetime.time`` is always time-only; a datetime counts as time-only
    when it falls within the first day after the Unix epoch.
    """
    if isinstance(value, datetime.time):
        seconds = value.hour * 3600 + value.minute * 60 + value.second
        return (seconds + value.microsecond / 1e6) / _SECONDS_PER_DAY
    if isinstance(value, datetime.datetime):
        if value.tzinfo is not None:
            value = value.astimezone(datetime.timezone.utc).replace(tzinfo=None)
        delta = value - _EPOCH
        if datetime.timedelta(0) <= delta < _ONE_DAY:
            return delta.total_seconds() / _SECONDS_PER_DAY
    return None


def write_value(cell, value, directive=None):
    """Write *value* into *cell* and apply *directive*."""
    kind = value_kind(value)
    if kind is ValueKind.NULL:
        cell.value = None
    elif kind in (ValueKind.BOOL, ValueKind.INT, ValueKind.FLOAT):
        cell.value = value
    elif kind is ValueKind.DATETIME:
        fraction = day_fraction(value)
        if fraction is not None:
            cell.value = fraction
        elif isinstance(value, datetime.datetime) and value.tzinfo is not None:
            # the xlsx format has no timezones
            cell.value = value.replace(tzinfo=None)
        else:
            cell.value = value
    elif kind is ValueKind.TEXT:
        set_text(cell, value)
    elif kind in (ValueKind.LIST, ValueKind.RECORD_ARRAY, ValueKind.OTHER):
        set_text(cell, render_text(value))
    else:
        raise ValueError(f"Unhandled value kind: {kind}")
    apply_style(cell, directive)


def _strip_sides(border, mask):
    """Return a copy of *border* with the sides flagged ``0`` cleared."""
    top, right, bottom, left = (flag == "0" for flag in mask)
    return Border(
        left=Side() if left else border.left,
        right=Side() if right else border.right,
        top=Side() if top else border.top,
        bottom=Side() if bottom else border.bottom,
        diagonal=border.diagonal,
        diagonalUp=border.diagonalUp,
        diagonalDown=border.diagonalDown,
        outline=border.outline,
        vertical=border.vertical,
        horizontal=border.horizontal,
    )


def apply_style(cell, directive):
    """Apply the ``border`` and ``fit`` options of *directive* to *cell*."""
    if directive is None:
        return
    logger.debug("Applying style '%s' on %s", directive.raw, cell.coordinate)
    if directive.border:
        cell.border = _strip_sides(cell.border, directive.border)
    if directive.autosize:
        autosize_column(cell.parent, cell.column)
