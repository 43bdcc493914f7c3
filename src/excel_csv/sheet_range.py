"""Rectangular, worksheet-anchored cell regions.

All addressing on a :class:`SheetRange` is 1-based and relative to the
range's top-left anchor, so row 1 / column 1 is the anchor cell whatever its
absolute position on the worksheet.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from openpyxl.cell import Cell
from openpyxl.utils.cell import range_boundaries
from openpyxl.workbook.workbook import Workbook
from openpyxl.worksheet.cell_range import CellRange
from openpyxl.worksheet.worksheet import Worksheet

from excel_csv.utils.exceptions import InvalidRangeError


@dataclass
class SheetRange:
    """A rectangular region of a worksheet.

    ``max_row``/``max_col`` of ``None`` leave that side open, following the
    worksheet's extent as it grows.
    """

    worksheet: Worksheet
    min_row: int = 1
    min_col: int = 1
    max_row: int | None = None
    max_col: int | None = None

    def __post_init__(self) -> None:
        if self.min_row < 1 or self.min_col < 1:
            raise InvalidRangeError(
                f"Range anchor must be at row >= 1 and column >= 1, "
                f"got ({self.min_row}, {self.min_col})"
            )
        if self.max_row is not None and self.max_row < self.min_row:
            raise InvalidRangeError(
                f"max_row {self.max_row} is above min_row {self.min_row}"
            )
        if self.max_col is not None and self.max_col < self.min_col:
            raise InvalidRangeError(
                f"max_col {self.max_col} is left of min_col {self.min_col}"
            )

    # ------------------------------------------------------------------ #
    # Constructors
    # ------------------------------------------------------------------ #

    @classmethod
    def whole(cls, worksheet: Worksheet) -> SheetRange:
        """The entire worksheet, anchored at A1."""
        return cls(worksheet)

    @classmethod
    def from_bounds(
        cls,
        worksheet: Worksheet,
        min_row: int,
        min_col: int,
        max_row: int,
        max_col: int,
    ) -> SheetRange:
        """Address a range by start row, start column, end row, end column."""
        return cls(worksheet, min_row, min_col, max_row, max_col)

    @classmethod
    def from_reference(cls, worksheet: Worksheet, reference: str) -> SheetRange:
        """Address a range by A1 reference such as ``"E4:F7"`` or ``"B:D"``."""
        try:
            min_col, min_row, max_col, max_row = range_boundaries(reference)
        except ValueError as exc:
            raise InvalidRangeError(
                f"Invalid range reference: {reference}", coordinate=reference
            ) from exc
        return cls(
            worksheet,
            min_row=min_row or 1,
            min_col=min_col or 1,
            max_row=max_row,
            max_col=max_col,
        )

    # ------------------------------------------------------------------ #
    # Geometry
    # ------------------------------------------------------------------ #

    @property
    def workbook(self) -> Workbook:
        return self.worksheet.parent

    @property
    def last_row(self) -> int:
        """Absolute last row, resolving an open bound to the sheet extent."""
        if self.max_row is not None:
            return self.max_row
        return max(self.worksheet.max_row, self.min_row)

    @property
    def last_col(self) -> int:
        """Absolute last column, resolving an open bound to the sheet extent."""
        if self.max_col is not None:
            return self.max_col
        return max(self.worksheet.max_column, self.min_col)

    @property
    def coordinate(self) -> str:
        """A1 text of the range with open bounds resolved."""
        return CellRange(
            min_col=self.min_col,
            min_row=self.min_row,
            max_col=self.last_col,
            max_row=self.last_row,
        ).coord

    def contains_row(self, row: int) -> bool:
        """Whether the range-relative row lies inside the range bounds."""
        if row < 1:
            return False
        return self.max_row is None or self.min_row + row - 1 <= self.max_row

    def contains_col(self, col: int) -> bool:
        """Whether the range-relative column lies inside the range bounds."""
        if col < 1:
            return False
        return self.max_col is None or self.min_col + col - 1 <= self.max_col

    # ------------------------------------------------------------------ #
    # Cell access
    # ------------------------------------------------------------------ #

    def cell(self, row: int, col: int) -> Cell:
        """Return the cell at a range-relative position, creating it if needed."""
        if not (self.contains_row(row) and self.contains_col(col)):
            raise InvalidRangeError(
                f"Cell ({row}, {col}) lies outside range {self.coordinate}",
                coordinate=self.coordinate,
            )
        return self.worksheet.cell(
            row=self.min_row + row - 1, column=self.min_col + col - 1
        )

    def has_cell(self, row: int, col: int) -> bool:
        """Whether the worksheet already holds a cell at a range-relative position."""
        return self._absolute(row, col) in self.worksheet._cells

    def discard_cell(self, row: int, col: int) -> None:
        """Drop the cell at a range-relative position so it no longer counts
        toward the worksheet's dimensions."""
        self.worksheet._cells.pop(self._absolute(row, col), None)

    def _absolute(self, row: int, col: int) -> tuple[int, int]:
        return self.min_row + row - 1, self.min_col + col - 1

    def value(self, row: int, col: int) -> Any:
        """Read a range-relative cell value without growing the worksheet."""
        values = self.row_values(row, col, col)
        return values[0]

    def row_values(self, row: int, first_col: int, last_col: int) -> list[Any]:
        """Values of range-relative columns ``first_col..last_col`` of a row.

        Positions outside the range or beyond the worksheet's extent read as
        ``None``.
        """
        width = last_col - first_col + 1
        if width <= 0:
            return []
        result: list[Any] = [None] * width
        if not self.contains_row(row):
            return result

        abs_row = self.min_row + row - 1
        if abs_row > self.worksheet.max_row:
            return result

        lo = max(first_col, 1)
        hi = last_col
        if self.max_col is not None:
            hi = min(hi, self.max_col - self.min_col + 1)
        hi = min(hi, self.worksheet.max_column - self.min_col + 1)
        if hi < lo:
            return result

        (values,) = self.worksheet.iter_rows(
            min_row=abs_row,
            max_row=abs_row,
            min_col=self.min_col + lo - 1,
            max_col=self.min_col + hi - 1,
            values_only=True,
        )
        for index, value in enumerate(values):
            result[lo - first_col + index] = value
        return result

    def row_has_used_cells(self, row: int) -> bool:
        """Whether any cell of the range-relative row holds a value."""
        width = self.last_col - self.min_col + 1
        return any(v is not None for v in self.row_values(row, 1, width))

    def used_cells(self) -> Iterator[tuple[int, int, Any]]:
        """Yield ``(row, col, value)`` for every used cell, range-relative."""
        last_row = min(self.last_row, self.worksheet.max_row)
        last_col = min(self.last_col, self.worksheet.max_column)
        if last_row < self.min_row or last_col < self.min_col:
            return
        rows = self.worksheet.iter_rows(
            min_row=self.min_row,
            max_row=last_row,
            min_col=self.min_col,
            max_col=last_col,
            values_only=True,
        )
        for row_index, values in enumerate(rows, start=1):
            for col_index, value in enumerate(values, start=1):
                if value is not None:
                    yield row_index, col_index, value

    def __str__(self) -> str:
        return f"'{self.worksheet.title}'!{self.coordinate}"
