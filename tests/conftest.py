from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from openpyxl import Workbook

from excel_csv.config import Settings
from excel_csv.utils.logging import clear_context
from tests.fixtures import PEOPLE, Person, fill_people


@pytest.fixture(autouse=True)
def _clean_log_context() -> None:
    clear_context()


@pytest.fixture
def people() -> list[Person]:
    return list(PEOPLE)


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def people_workbook() -> Workbook:
    """In-memory workbook whose only sheet, "Export", holds PEOPLE at A1."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Export"
    fill_people(ws)
    return wb


@pytest.fixture
def make_people_file(tmp_path: Path) -> Callable[..., Path]:
    """Factory saving PEOPLE to an xlsx file under tmp_path.

    ``leading_sheet`` puts an empty sheet of that name before the data sheet.
    """

    def _make(
        name: str = "people.xlsx",
        sheet_name: str = "Export",
        start_row: int = 1,
        start_col: int = 1,
        leading_sheet: str | None = None,
    ) -> Path:
        wb = Workbook()
        if leading_sheet:
            wb.active.title = leading_sheet
            ws = wb.create_sheet(sheet_name)
        else:
            ws = wb.active
            ws.title = sheet_name
        fill_people(ws, start_row, start_col)
        path = tmp_path / name
        wb.save(path)
        return path

    return _make
