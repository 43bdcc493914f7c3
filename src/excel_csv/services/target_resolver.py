"""Resolve parser/serializer sources into a range plus ownership flags.

Each constructor variant (path, path + sheet, workbook, workbook + sheet,
worksheet, explicit range) reduces to a :class:`ResolvedTarget`, which the
parser and serializer consume through a single code path.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from openpyxl import Workbook, load_workbook
from openpyxl.worksheet.worksheet import Worksheet

from excel_csv.config import Settings
from excel_csv.config import settings as default_settings
from excel_csv.sheet_range import SheetRange
from excel_csv.utils.logging import get_logger

logger = get_logger(__name__)

Source = str | os.PathLike[str] | Workbook | Worksheet | SheetRange


@dataclass(frozen=True)
class ResolvedTarget:
    """The range a component operates on and what it must release."""

    range: SheetRange
    owns_workbook: bool = False
    owns_worksheet: bool = False
    save_path: Path | None = None
    forced_quote_empty_fields: bool = False

    @property
    def workbook(self) -> Workbook:
        return self.range.workbook

    @property
    def worksheet(self) -> Worksheet:
        return self.range.worksheet


def _is_path(source: object) -> bool:
    return isinstance(source, (str, os.PathLike))


def _reject_sheet_name(source: object, sheet_name: str | None) -> None:
    if sheet_name is not None:
        raise TypeError(
            f"sheet_name is only accepted with a path or workbook, "
            f"not {type(source).__name__}"
        )


def _select_sheet(workbook: Workbook, sheet_name: str | None) -> Worksheet:
    if sheet_name is None:
        return workbook.worksheets[0]
    return workbook[sheet_name]


def get_or_add_worksheet(workbook: Workbook, sheet_name: str) -> Worksheet:
    """Return the named worksheet, adding it to the workbook when absent."""
    if sheet_name in workbook.sheetnames:
        return workbook[sheet_name]
    return workbook.create_sheet(sheet_name)


def new_workbook(sheet_name: str) -> Workbook:
    """Create an in-memory workbook whose only sheet carries ``sheet_name``."""
    workbook = Workbook()
    workbook.active.title = sheet_name
    return workbook


def get_or_create_workbook(path: str | os.PathLike[str], sheet_name: str) -> Workbook:
    """Open the workbook at ``path``, creating and saving it first if missing."""
    file_path = Path(path)
    if not file_path.exists():
        workbook = new_workbook(sheet_name)
        workbook.save(file_path)
        logger.debug("Created workbook", path=file_path, sheet=sheet_name)
        return workbook
    return load_workbook(filename=file_path)


def resolve_read_target(
    source: Source,
    sheet_name: str | None = None,
    *,
    settings: Settings | None = None,
) -> ResolvedTarget:
    """Resolve a parser source.

    Paths are opened (never created) and owned. Workbooks, worksheets and
    ranges are borrowed.

    Raises:
        FileNotFoundError: If a path does not exist.
        KeyError: If ``sheet_name`` is not in the workbook.
        TypeError: If the source type is not supported.
    """
    s = settings or default_settings

    if _is_path(source):
        file_path = Path(source)  # type: ignore[arg-type]
        if not file_path.exists():
            raise FileNotFoundError(f"Excel file not found: {file_path}")
        workbook = load_workbook(filename=file_path, data_only=s.data_only)
        worksheet = _select_sheet(workbook, sheet_name)
        logger.debug(
            "Opened workbook for reading", path=file_path, sheet=worksheet.title
        )
        return ResolvedTarget(range=SheetRange.whole(worksheet), owns_workbook=True)

    if isinstance(source, Workbook):
        worksheet = _select_sheet(source, sheet_name)
        return ResolvedTarget(range=SheetRange.whole(worksheet))

    if isinstance(source, Worksheet):
        _reject_sheet_name(source, sheet_name)
        return ResolvedTarget(range=SheetRange.whole(source))

    if isinstance(source, SheetRange):
        _reject_sheet_name(source, sheet_name)
        return ResolvedTarget(range=source)

    raise TypeError(f"Unsupported parser source: {type(source).__name__}")


def resolve_write_target(
    target: Source,
    sheet_name: str | None = None,
    *,
    settings: Settings | None = None,
) -> ResolvedTarget:
    """Resolve a serializer target.

    A path yields a fresh workbook that is owned and saved to the path on
    close. A workbook gets the named sheet added or reused, and the serializer
    owns that sheet but not the workbook. Worksheets and ranges are borrowed;
    explicit ranges force empty fields to be stored as text.

    Raises:
        TypeError: If the target type is not supported.
    """
    s = settings or default_settings

    if _is_path(target):
        file_path = Path(target)  # type: ignore[arg-type]
        workbook = new_workbook(sheet_name or s.default_sheet_name)
        return ResolvedTarget(
            range=SheetRange.whole(workbook.active),
            owns_workbook=True,
            save_path=file_path,
        )

    if isinstance(target, Workbook):
        worksheet = get_or_add_worksheet(target, sheet_name or s.default_sheet_name)
        return ResolvedTarget(range=SheetRange.whole(worksheet), owns_worksheet=True)

    if isinstance(target, Worksheet):
        _reject_sheet_name(target, sheet_name)
        return ResolvedTarget(range=SheetRange.whole(target))

    if isinstance(target, SheetRange):
        _reject_sheet_name(target, sheet_name)
        return ResolvedTarget(range=target, forced_quote_empty_fields=True)

    raise TypeError(f"Unsupported serializer target: {type(target).__name__}")
