"""Spreadsheet exceptions for error handling."""

from ..catalog.exceptions import CatalogError


class SpreadsheetDecodeError(CatalogError):
    """Raised when an uploaded workbook cannot be read or decoded.

    Nothing from the file is imported when this is raised.
    """

    pass
