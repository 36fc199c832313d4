"""
Substitution engine.

Drives every sheet of a workbook to its fixed point: the sheet is scanned
row by row, then column by column, for ``%...%`` placeholders.  Scalars
are written in place and scanning continues; lists and record-arrays
change the layout of the sheet, so after expanding one the scan starts
over from the top.  Every placeholder handled ends up as a value, a blank
or a warning, so a sheet stops changing once a full scan makes no
structural change.
"""

import logging
from dataclasses import dataclass

from .config import Direction, parse_direction
from .expander import expand_list
from .exploder import explode_records
from .grid import cell_text, iter_text_cells, set_text
from .placeholders import find_placeholders, has_constant, strip_constants
from .shifts import ShiftTracker
from .values import ValueKind, render_text, value_kind
from .variables import VariableStore
from .writer import apply_style, write_value

logger = logging.getLogger(__name__)


@dataclass
class SubstitutionStats:
    """Counters for one run, logged when the workbook is done."""
    resolved: int = 0
    expanded: int = 0
    exploded: int = 0
    missing: int = 0
    passes: int = 0


class SubstitutionEngine:
    """Fills workbook templates from a variable store."""

    def __init__(self, variables=None, duplicate_all: bool = True,
                 direction=Direction.VERTICAL, remove_non_existent: bool = False):
        if isinstance(variables, VariableStore):
            self.store = variables
        else:
            self.store = VariableStore(variables if variables is not None else {})
        self.duplicate_all = duplicate_all
        self.direction = parse_direction(direction)
        self.remove_non_existent = remove_non_existent
        self.stats = SubstitutionStats()
        self._reported = set()

    # ------------------------------------------------------------------
    # Workbook / sheet drivers
    # ------------------------------------------------------------------

    def substitute_workbook(self, wb):
        """Substitute sheet names, then the cells of every sheet in order."""
        for ws in wb.worksheets:
            self.substitute_sheet_name(ws)
        for ws in wb.worksheets:
            self.substitute_sheet(ws)
        logger.info(
            "Substituted %d values, expanded %d lists, exploded %d record-arrays "
            "(%d unresolved, %d passes)",
            self.stats.resolved, self.stats.expanded, self.stats.exploded,
            self.stats.missing, self.stats.passes,
        )
        return wb

    def substitute_sheet_name(self, ws):
        """Resolve placeholders in the sheet title (exact names only)."""
        title = ws.title
        for placeholder in find_placeholders(title):
            if placeholder.is_constant:
                title = title.replace(placeholder.token, placeholder.literal)
            elif self.store.resolve_exact(placeholder.path):
                value = self.store[placeholder.path]
                logger.debug("Found variable '%s' = %r in sheet name", placeholder.path, value)
                title = title.replace(placeholder.token, render_text(value))
            elif self.remove_non_existent:
                title = title.replace(placeholder.token, "")
            else:
                logger.warning("Could not find variable '%s' in sheet name '%s'",
                               placeholder.path, ws.title)
        if title == ws.title:
            return
        if not title:
            logger.warning("Sheet name '%s' would become empty, keeping it", ws.title)
            return
        try:
            ws.title = title
        except ValueError as exc:
            logger.warning("Cannot rename sheet '%s' to '%s' (%s), keeping it",
                           ws.title, title, exc)

    def substitute_sheet(self, ws):
        """Drive *ws* to its fixed point."""
        logger.debug("Checking sheet '%s'", ws.title)
        tracker = ShiftTracker(ws)
        while self._scan_and_apply_one(ws, tracker):
            logger.debug("Sheet '%s' changed, scanning again", ws.title)
        self._strip_constants(ws)
        self._reported.clear()

    def _scan_and_apply_one(self, ws, tracker):
        """Scan *ws* once; return True as soon as its structure changes."""
        self.stats.passes += 1
        for cell in iter_text_cells(ws):
            for placeholder in find_placeholders(cell_text(cell)):
                # constants are stripped once the sheet is settled, so that
                # every row or column copied from theirs still carries them
                if placeholder.is_constant:
                    continue
                text = cell_text(cell)
                if text is None or placeholder.token not in text:
                    continue
                if self._apply(ws, tracker, cell, placeholder):
                    return True
        return False

    def _strip_constants(self, ws):
        for cell in iter_text_cells(ws):
            text = cell_text(cell)
            if has_constant(text):
                set_text(cell, strip_constants(text))

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def _apply(self, ws, tracker, cell, placeholder):
        path = placeholder.path
        logger.debug("Found variable reference '%s' at %s!%s", path, ws.title, cell.coordinate)

        if self.store.resolve_exact(path):
            value = self.store[path]
            if value_kind(value) is ValueKind.LIST:
                self.stats.expanded += 1
                return expand_list(ws, tracker, cell, value, placeholder.directive, self.direction)
            self._write_in_place(cell, placeholder, value)
            return False

        resolved = self.store.resolve_path(path)
        if resolved is not None:
            root, _field = resolved
            value = self.store[root]
            kind = value_kind(value)
            if kind is ValueKind.RECORD_ARRAY:
                self.stats.exploded += 1
                explode_records(ws, self.store, tracker, cell, root, value,
                                self.direction, self.duplicate_all)
                return True
            if kind is not ValueKind.LIST or value:
                self._report(ws, cell, placeholder,
                             "The complex variable '%s' is not a record-array", root)
                return False

        self._handle_missing(ws, cell, placeholder)
        return False

    def _write_in_place(self, cell, placeholder, value):
        """Write a scalar; a token inside longer text only replaces itself."""
        text = cell_text(cell)
        if text == placeholder.token:
            write_value(cell, value, placeholder.directive)
        else:
            set_text(cell, text.replace(placeholder.token, render_text(value)))
            apply_style(cell, placeholder.directive)
        self.stats.resolved += 1

    def _handle_missing(self, ws, cell, placeholder):
        if not self.remove_non_existent:
            self._report(ws, cell, placeholder, "Could not find variable '%s'", placeholder.path)
            return
        self.stats.missing += 1
        text = cell_text(cell)
        if text == placeholder.token:
            logger.debug("Blanking %s, variable '%s' does not exist",
                         cell.coordinate, placeholder.path)
            cell.value = None
        else:
            logger.debug("Removing '%s' from %s", placeholder.token, cell.coordinate)
            set_text(cell, text.replace(placeholder.token, ""))

    def _report(self, ws, cell, placeholder, message, *args):
        """Warn once per unresolved token and location on a sheet."""
        key = (cell.row, cell.column, placeholder.token)
        if key in self._reported:
            return
        self._reported.add(key)
        self.stats.missing += 1
        logger.warning(message + " (%s!%s)", *args, ws.title, cell.coordinate)
