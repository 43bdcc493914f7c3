"""Read worksheet rows as CSV-style records."""

from __future__ import annotations

import csv
import io
from typing import Any

from openpyxl.workbook.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from excel_csv.config import Settings
from excel_csv.models import CsvConfiguration
from excel_csv.services.cell_values import to_text
from excel_csv.services.target_resolver import Source, resolve_read_target
from excel_csv.sheet_range import SheetRange
from excel_csv.utils.exceptions import DisposedError, InvalidRangeError
from excel_csv.utils.logging import get_logger

logger = get_logger(__name__)


class RangeParser:
    """Forward-only source of string records backed by a worksheet range.

    ``source`` may be a path, an openpyxl ``Workbook``, a ``Worksheet`` or a
    :class:`SheetRange`. A workbook opened from a path belongs to the parser
    and is closed with it; anything passed in is borrowed and left alone.

    ``row_offset`` and ``column_offset`` shift where the record stream starts
    inside the range and may be set before the first read.

    Usage:
        with RangeParser("people.xlsx", "Export") as parser:
            header = parser.read()
            for record in parser:
                ...
    """

    def __init__(
        self,
        source: Source,
        sheet_name: str | None = None,
        *,
        configuration: CsvConfiguration | None = None,
        settings: Settings | None = None,
    ) -> None:
        target = resolve_read_target(source, sheet_name, settings=settings)
        self._range = target.range
        self._owns_workbook = target.owns_workbook
        self._configuration = configuration or CsvConfiguration()
        self._row = 1
        self._closed = False
        self.row_offset = 0
        self.column_offset = 0

        try:
            self._field_count = self._compute_field_count()
        except InvalidRangeError:
            self.close()
            raise

        logger.debug(
            "Parser ready",
            range=str(self._range),
            field_count=self._field_count,
            owns_workbook=self._owns_workbook,
        )

    def _compute_field_count(self) -> int:
        columns = [col for _, col, _ in self._range.used_cells()]
        if not columns:
            raise InvalidRangeError(
                "Cannot determine field count: range has no used cells",
                coordinate=str(self._range),
            )
        return max(columns) - min(columns) + 1

    # ------------------------------------------------------------------ #
    # Properties
    # ------------------------------------------------------------------ #

    @property
    def configuration(self) -> CsvConfiguration:
        return self._configuration

    @property
    def workbook(self) -> Workbook:
        return self._range.workbook

    @property
    def worksheet(self) -> Worksheet:
        return self._range.worksheet

    @property
    def range(self) -> SheetRange:
        return self._range

    @property
    def field_count(self) -> int:
        """Number of fields per record, fixed when the parser was created."""
        return self._field_count

    @property
    def row(self) -> int:
        """The 1-based cursor row the next read comes from, before offsets."""
        return self._row

    @property
    def char_position(self) -> int:
        """Not tracked for spreadsheets."""
        return -1

    @property
    def byte_position(self) -> int:
        """Not tracked for spreadsheets."""
        return -1

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def raw_record(self) -> str:
        """The current row's field span as one delimited line.

        Raises:
            DisposedError: If the parser has been closed.
        """
        self._check_closed()
        buffer = io.StringIO()
        writer = csv.writer(buffer, **self._configuration.csv_dialect_kwargs())
        writer.writerow(self._field_values(self._row + self.row_offset))
        return buffer.getvalue()

    # ------------------------------------------------------------------ #
    # Reading
    # ------------------------------------------------------------------ #

    def read(self) -> list[str] | None:
        """Read the next record.

        Returns:
            The record's fields as text, or ``None`` once the cursor row holds
            no used cells. The cursor only advances on a non-empty read.

        Raises:
            DisposedError: If the parser has been closed.
        """
        self._check_closed()
        row = self._row + self.row_offset
        if not self._range.row_has_used_cells(row):
            return None

        record = self._field_values(row)
        self._row += 1
        return record

    def _field_values(self, row: int) -> list[str]:
        first = 1 + self.column_offset
        last = self._field_count + self.column_offset
        values: list[Any] = self._range.row_values(row, first, last)
        return [to_text(value) for value in values]

    def __iter__(self) -> RangeParser:
        return self

    def __next__(self) -> list[str]:
        record = self.read()
        if record is None:
            raise StopIteration
        return record

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    def close(self) -> None:
        """Release the workbook if the parser opened it. Safe to call twice."""
        if self._closed:
            return
        self._closed = True
        if self._owns_workbook:
            self._range.workbook.close()
            logger.debug("Closed owned workbook", sheet=self._range.worksheet.title)

    def _check_closed(self) -> None:
        if self._closed:
            raise DisposedError(type(self).__name__)

    def __enter__(self) -> RangeParser:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
