"""Tests for ShiftTracker row insertion bookkeeping."""

import os
import sys

import pytest
from openpyxl import Workbook
from openpyxl.styles import Font

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from excel_template.shifts import ShiftTracker


@pytest.fixture
def sheet():
    wb = Workbook()
    ws = wb.active
    ws["A1"] = "Header"
    ws["A2"] = "%names%"
    ws["A2"].font = Font(bold=True)
    ws["B2"] = '%"Fixed"%'
    ws["A3"] = "Footer"
    return ws


class TestInsertRows:
    def test_inserts_and_moves_rows_below(self, sheet):
        tracker = ShiftTracker(sheet)
        assert tracker.insert_rows(2, 2) == 2
        assert sheet["A5"].value == "Footer"
        assert tracker.shifts == {2: 2}

    def test_new_rows_clone_styles_and_constants(self, sheet):
        tracker = ShiftTracker(sheet)
        tracker.insert_rows(2, 2)
        assert sheet["A3"].value is None
        assert sheet["A3"].font.bold
        assert sheet["B3"].value == "Fixed"
        assert sheet["B4"].value == "Fixed"
        # the template row keeps its constant until the sheet is done
        assert sheet["B2"].value == '%"Fixed"%'

    def test_reuses_rows_already_inserted(self, sheet):
        tracker = ShiftTracker(sheet)
        tracker.insert_rows(2, 2)
        assert tracker.insert_rows(2, 3) == 1
        assert sheet["A6"].value == "Footer"
        assert sheet["B5"].value == "Fixed"
        assert tracker.shifts == {2: 3}

    def test_smaller_request_inserts_nothing(self, sheet):
        tracker = ShiftTracker(sheet)
        tracker.insert_rows(2, 3)
        assert tracker.insert_rows(2, 1) == 0
        assert tracker.insert_rows(2, 0) == 0
        assert sheet["A6"].value == "Footer"
        assert tracker.shifts == {2: 3}

    def test_entries_below_are_rekeyed(self):
        wb = Workbook()
        ws = wb.active
        ws["A2"] = "%a%"
        ws["A5"] = "%b%"
        tracker = ShiftTracker(ws)
        tracker.insert_rows(5, 2)
        assert tracker.insert_rows(2, 1) == 1
        assert tracker.shifts == {2: 1, 6: 2}
        assert tracker.shift_at(6) == 2
        assert tracker.shift_at(5) == 0
        assert ws["A6"].value == "%b%"

    def test_row_heights_move_with_rows(self, sheet):
        sheet.row_dimensions[3].height = 30
        ShiftTracker(sheet).insert_rows(2, 2)
        assert sheet.row_dimensions[5].height == 30
        assert not sheet.row_dimensions[3].height


class TestExpandedCells:
    def test_mark_expanded(self, sheet):
        tracker = ShiftTracker(sheet)
        tracker.mark_expanded(2, 1, 3)
        assert tracker.expanded_cells() == {(2, 1), (3, 1), (4, 1)}

    def test_expanded_cells_is_a_copy(self, sheet):
        tracker = ShiftTracker(sheet)
        tracker.expanded_cells().add((9, 9))
        assert tracker.expanded_cells() == set()
