"""Excel template filler.

Fills ``%placeholder%`` tokens in the cells and sheet names of an Excel
workbook with caller-supplied values:

  * **scalars** replace the token (or just the token's part of a longer
    text),
  * **lists** insert rows (vertical) or columns (horizontal), one value
    each,
  * **record-arrays** (lists of dicts) duplicate the last column
    (vertical) or a block of rows (horizontal) once per record, with
    ``%records.field%`` resolving per copy.

Placeholders may carry styling directives, e.g. ``%dates/border:0101;fit:auto%``,
and ``%"text"%`` constants are copied into every duplicated row or column.

:func:`write_matrix` goes the other way and dumps a list of rows into a new
sheet.
"""

from .config import Direction
from .engine import SubstitutionEngine
from .exceptions import (
    ShiftCollisionError,
    TemplateError,
    TemplateFormatError,
    UnsupportedTemplateError,
)
from .matrix import matrix_to_bytes, save_matrix, write_matrix
from .template import Template
from .variables import VariableStore

__all__ = [
    "Direction",
    "ShiftCollisionError",
    "SubstitutionEngine",
    "Template",
    "TemplateError",
    "TemplateFormatError",
    "UnsupportedTemplateError",
    "VariableStore",
    "matrix_to_bytes",
    "save_matrix",
    "write_matrix",
]
