"""Template substitution exceptions."""


class TemplateError(Exception):
    """Base class for errors that abort a substitution run."""


class TemplateFormatError(TemplateError):
    """Raised when the template file is not a readable xlsx workbook."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot open template '{path}': {reason}")


class ShiftCollisionError(TemplateError):
    """Raised when two tracked row shifts end up on the same row.

    This means expansions were applied out of scan order and the sheet
    bookkeeping can no longer be trusted.
    """

    def __init__(self, row: int):
        self.row = row
        super().__init__(f"Unexpected condition: row {row} appears twice in the shift map")


class UnsupportedTemplateError(TemplateError):
    """Raised when list and record-array expansions share a region."""
