"""Write CSV-style records as worksheet rows."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

from openpyxl.cell import Cell
from openpyxl.workbook.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from excel_csv.config import Settings
from excel_csv.models import CsvConfiguration
from excel_csv.services.cell_values import infer_value, sanitize
from excel_csv.services.target_resolver import Source, resolve_write_target
from excel_csv.sheet_range import SheetRange
from excel_csv.utils.exceptions import DisposedError
from excel_csv.utils.logging import LogContext, get_logger, timed_operation

logger = get_logger(__name__)


class RangeSerializer:
    """Forward-only sink of string records backed by a worksheet range.

    ``target`` decides what the serializer owns:

    - a path: a new workbook is created and saved to that path on
      :meth:`close`. Nothing reaches disk before then.
    - a ``Workbook``: the named sheet (default "Export") is added or reused;
      the workbook is neither saved nor closed.
    - a ``Worksheet`` or :class:`SheetRange`: written in place, nothing is
      saved. Explicit ranges store empty fields as empty text.
    """

    def __init__(
        self,
        target: Source,
        sheet_name: str | None = None,
        *,
        configuration: CsvConfiguration | None = None,
        settings: Settings | None = None,
    ) -> None:
        resolved = resolve_write_target(target, sheet_name, settings=settings)
        configuration = configuration or CsvConfiguration()
        if resolved.forced_quote_empty_fields:
            configuration = configuration.with_overrides(quote_empty_fields=True)

        self._range = resolved.range
        self._owns_workbook = resolved.owns_workbook
        self._owns_worksheet = resolved.owns_worksheet
        self._save_path: Path | None = resolved.save_path
        self._configuration = configuration
        self._row = 1
        self._rows_written = 0
        self._closed = False
        self.row_offset = 0
        self.column_offset = 0

        logger.debug(
            "Serializer ready",
            range=str(self._range),
            owns_workbook=self._owns_workbook,
            owns_worksheet=self._owns_worksheet,
        )

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
    def row(self) -> int:
        """The 1-based cursor row the next write goes to, before offsets."""
        return self._row

    @property
    def save_path(self) -> Path | None:
        return self._save_path

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------ #
    # Writing
    # ------------------------------------------------------------------ #

    def write(self, record: Sequence[str | None]) -> None:
        """Write ``record`` as the next row, one field per column.

        If any cell cannot be written, the cells already touched are restored,
        cells this write created are removed again and the cursor stays where
        it was.

        Raises:
            DisposedError: If the serializer has been closed.
        """
        self._check_closed()
        row = self._row + self.row_offset
        touched: list[tuple[int, Cell, Any, bool]] = []
        try:
            for index, field in enumerate(record):
                col = index + 1 + self.column_offset
                existed = self._range.has_cell(row, col)
                cell = self._range.cell(row, col)
                touched.append((col, cell, cell.value, existed))
                self._store(cell, field)
        except Exception:
            for col, cell, previous, existed in reversed(touched):
                if existed:
                    cell.value = previous
                else:
                    self._range.discard_cell(row, col)
            raise

        self._row += 1
        self._rows_written += 1

    def _store(self, cell: Cell, field: str | None) -> None:
        text = sanitize(field or "")
        if not text:
            cell.value = "" if self._configuration.quote_empty_fields else None
            return

        value = infer_value(text) if self._configuration.infer_types else text
        cell.value = value
        if isinstance(value, str) and cell.data_type == "f":
            # Record text is never a formula.
            cell.data_type = "s"

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    def close(self) -> None:
        """Persist and release owned resources. Safe to call twice.

        An owned workbook is saved to its path before being closed. Save
        errors propagate; the serializer is closed either way.
        """
        if self._closed:
            return
        self._closed = True

        if self._owns_worksheet:
            logger.debug(
                "Released owned worksheet",
                sheet=self._range.worksheet.title,
                rows_written=self._rows_written,
            )

        if not self._owns_workbook:
            return

        try:
            with (
                LogContext(
                    workbook=self._save_path, sheet=self._range.worksheet.title
                ),
                timed_operation(logger, "save_workbook") as metrics,
            ):
                metrics.rows_processed = self._rows_written
                self._range.workbook.save(self._save_path)
        finally:
            self._range.workbook.close()

    def _check_closed(self) -> None:
        if self._closed:
            raise DisposedError(type(self).__name__)

    def __enter__(self) -> RangeSerializer:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
