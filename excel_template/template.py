"""
Workbook templates.

A :class:`Template` wraps an ``.xlsx`` / ``.xlsm`` file holding
``%placeholder%`` tokens and produces filled-in workbooks from it::

    template = Template("invoice.xlsx")
    template.substitute_to_file("out.xlsx", {
        "customer": "ACME",
        "lines": [{"item": "Widget", "qty": 3}, {"item": "Gadget", "qty": 1}],
    })

Supported values are ``int``, ``float``, ``bool``, ``datetime``/``date``/
``time``, ``str``, lists of those, and lists of dicts (record-arrays).
Anything else is written as text.  Formulas are copied verbatim when rows
or columns move; their references are not updated.
"""

import io
import logging
import os
import zipfile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from .config import Direction
from .engine import SubstitutionEngine
from .exceptions import TemplateFormatError

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".xlsx", ".xlsm")


class Template:
    """A workbook template on disk."""

    def __init__(self, path):
        self.path = os.fspath(path)
        logger.debug("Loading template file '%s'", self.path)

    def __repr__(self):
        return f"Template({self.path!r})"

    def load(self):
        """Open the template workbook.

        Raises:
            TemplateFormatError: the file is not an xlsx/xlsm workbook or
                cannot be read.
        """
        extension = os.path.splitext(self.path)[1].lower()
        if extension not in SUPPORTED_EXTENSIONS:
            raise TemplateFormatError(self.path, "unknown file type, expecting xlsx or xlsm")
        try:
            return load_workbook(self.path, keep_vba=extension == ".xlsm")
        except (OSError, zipfile.BadZipFile, InvalidFileException, KeyError) as exc:
            raise TemplateFormatError(self.path, str(exc)) from exc

    def substitute(self, variables=None, duplicate_all=True,
                   direction=Direction.VERTICAL, remove_non_existent=False):
        """Fill the template and return the resulting openpyxl ``Workbook``.

        Args:
            variables: mapping of variable names to values.  Exploded
                record-arrays add ``"<i>.<name>.<field>"`` keys to it.
            duplicate_all: when a record-array duplicates a column or row
                block, copy every cell (True) or only the cells that refer
                to the record-array or hold a ``%"constant"%`` (False).
            direction: :class:`Direction` (or ``"vertical"`` /
                ``"horizontal"``) in which lists and record-arrays grow.
            remove_non_existent: blank unknown placeholders instead of
                leaving them in place.
        """
        logger.debug("Starting substitution in template '%s'", self.path)
        wb = self.load()
        engine = SubstitutionEngine(
            variables,
            duplicate_all=duplicate_all,
            direction=direction,
            remove_non_existent=remove_non_existent,
        )
        return engine.substitute_workbook(wb)

    def substitute_to_file(self, target, variables=None, **options):
        """Fill the template and save it to *target*."""
        wb = self.substitute(variables, **options)
        wb.save(target)
        logger.info("Wrote '%s'", target)
        return target

    def substitute_to_bytes(self, variables=None, **options) -> bytes:
        """Fill the template and return the workbook as xlsx bytes."""
        wb = self.substitute(variables, **options)
        buffer = io.BytesIO()
        wb.save(buffer)
        return buffer.getvalue()
