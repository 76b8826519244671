"""
Error taxonomy for the bulk import pipeline.

Every failure is fatal to the running import. Errors carry enough location
context (source, physical line number, field index) to find the offending
input, and render it in their message.
"""

from __future__ import annotations

from typing import Optional


class DataImportError(Exception):
    """
    Base class for all import failures.

    Args:
        message (str): Human-readable description of the problem.
        source (Optional[str]): File path or logical input name.
        line_number (Optional[int]): 1-based physical line number.
        field_index (Optional[int]): 0-based index of the field in the
            tab-split line.
    """

    def __init__(
        self,
        message: str,
        *,
        source: Optional[str] = None,
        line_number: Optional[int] = None,
        field_index: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.source = source
        self.line_number = line_number
        self.field_index = field_index

    def locate(
        self,
        source: Optional[str] = None,
        line_number: Optional[int] = None,
        field_index: Optional[int] = None,
    ) -> "DataImportError":
        """Fill in location fields that are still unknown; returns self."""
        if self.source is None:
            self.source = source
        if self.line_number is None:
            self.line_number = line_number
        if self.field_index is None:
            self.field_index = field_index
        return self

    def __str__(self) -> str:
        where = []
        if self.source is not None:
            where.append(str(self.source))
        if self.line_number is not None:
            where.append(f"line {self.line_number}")
        if self.field_index is not None:
            where.append(f"field {self.field_index}")
        if not where:
            return self.message
        return f"{', '.join(where)}: {self.message}"


class InvalidColumnSpec(DataImportError):
    """Raised for a malformed header token."""


class PropertyTypeError(DataImportError):
    """Raised when a field cannot be coerced to its declared type."""


class MalformedLine(DataImportError):
    """Raised when a data line does not fit the active schema."""


class DuplicateExternalId(DataImportError):
    """Raised when a node external id appears on more than one line."""


class UnknownNodeReference(DataImportError):
    """Raised when a relationship endpoint was never seen in the node file."""


class SinkFailure(DataImportError):
    """Raised when a graph or index sink call fails."""
