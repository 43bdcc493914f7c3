"""Tests for RangeSerializer."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest
from openpyxl import Workbook, load_workbook
from openpyxl.worksheet.worksheet import Worksheet

from excel_csv.config import Settings
from excel_csv.models import CsvConfiguration
from excel_csv.services.range_parser import RangeParser
from excel_csv.services.range_serializer import RangeSerializer
from excel_csv.sheet_range import SheetRange
from excel_csv.utils.exceptions import DisposedError, InvalidRangeError
from tests.fixtures import PEOPLE_RECORDS


def _write_all(serializer: RangeSerializer, records: list[list[str]]) -> None:
    for record in records:
        serializer.write(record)


def _assert_people_at(
    ws: Worksheet, start_row: int = 1, start_col: int = 1
) -> None:
    assert ws.cell(row=start_row, column=start_col).value == "Name"
    assert ws.cell(row=start_row, column=start_col + 1).value == "Age"
    for offset, (name, age) in enumerate(PEOPLE_RECORDS[1:], start=1):
        assert ws.cell(row=start_row + offset, column=start_col).value == name
        assert ws.cell(row=start_row + offset, column=start_col + 1).value == int(age)


class TestTargets:
    def test_serialize_by_path(self, tmp_path: Path) -> None:
        path = tmp_path / "serialise_by_path.xlsx"
        with RangeSerializer(path) as serializer:
            _write_all(serializer, PEOPLE_RECORDS)

        wb = load_workbook(path)
        assert wb.sheetnames == ["Export"]
        _assert_people_at(wb["Export"])
        assert wb["Export"].max_row == 4

    def test_serialize_by_path_and_sheet_name(self, tmp_path: Path) -> None:
        path = tmp_path / "serialise_by_path_and_sheetname.xlsx"
        with RangeSerializer(path, "a_different_sheet_name") as serializer:
            _write_all(serializer, PEOPLE_RECORDS)

        wb = load_workbook(path)
        assert wb.sheetnames == ["a_different_sheet_name"]
        _assert_people_at(wb["a_different_sheet_name"])

    def test_serialize_by_path_with_offsets(self, tmp_path: Path) -> None:
        path = tmp_path / "serialise_by_path_with_offsets.xlsx"
        with RangeSerializer(path) as serializer:
            serializer.row_offset = 4
            serializer.column_offset = 4
            _write_all(serializer, PEOPLE_RECORDS)

        ws = load_workbook(path).active
        _assert_people_at(ws, start_row=5, start_col=5)
        assert ws["A1"].value is None

    def test_default_sheet_name_from_settings(self, tmp_path: Path) -> None:
        path = tmp_path / "custom.xlsx"
        settings = Settings(_env_file=None, default_sheet_name="Data")
        with RangeSerializer(path, settings=settings) as serializer:
            serializer.write(["x"])

        assert load_workbook(path).sheetnames == ["Data"]

    def test_serialize_by_workbook_adds_export_sheet(self) -> None:
        wb = Workbook()
        serializer = RangeSerializer(wb)
        _write_all(serializer, PEOPLE_RECORDS)

        assert serializer.workbook is wb
        assert "Export" in wb.sheetnames
        _assert_people_at(wb["Export"])

    def test_serialize_by_workbook_reuses_named_sheet(self) -> None:
        wb = Workbook()
        existing = wb.create_sheet("a_different_sheet_name")

        serializer = RangeSerializer(wb, "a_different_sheet_name")

        assert serializer.worksheet is existing
        assert wb.sheetnames.count("a_different_sheet_name") == 1

    def test_serialize_by_worksheet(self) -> None:
        wb = Workbook()
        ws = wb.create_sheet("a_different_sheetname")
        with RangeSerializer(ws) as serializer:
            _write_all(serializer, PEOPLE_RECORDS)
        _assert_people_at(ws)

    def test_serialize_by_range(self) -> None:
        wb = Workbook()
        ws = wb.active
        sheet_range = SheetRange.from_bounds(ws, 4, 8, 4 + 3, 9)

        with RangeSerializer(sheet_range) as serializer:
            _write_all(serializer, PEOPLE_RECORDS)

        _assert_people_at(ws, start_row=4, start_col=8)

    def test_sheet_name_with_range_rejected(self) -> None:
        wb = Workbook()
        with pytest.raises(TypeError):
            RangeSerializer(SheetRange.whole(wb.active), "Export")


class TestWrite:
    def test_cursor_advances_per_write(self) -> None:
        serializer = RangeSerializer(Workbook().active)
        serializer.write(["a"])
        serializer.write([])
        assert serializer.row == 3

    def test_writes_as_many_cells_as_fields(self) -> None:
        ws = Workbook().active
        serializer = RangeSerializer(ws)
        serializer.write(["a", "b", "c"])
        serializer.write(["d"])

        assert [c.value for c in ws[1]] == ["a", "b", "c"]
        assert ws["A2"].value == "d"
        assert ws["B2"].value is None

    def test_control_characters_stripped(self) -> None:
        ws = Workbook().active
        RangeSerializer(ws).write(["a\x00b\x08c\x0bd\x0ce\x1ff"])
        assert ws["A1"].value == "abcdef"

    def test_tab_newline_and_ampersand_preserved(self) -> None:
        ws = Workbook().active
        RangeSerializer(ws).write(["Tom & Jerry\tline\nnext\r"])
        assert ws["A1"].value == "Tom & Jerry\tline\nnext\r"

    def test_numeric_text_stored_as_numbers(self) -> None:
        ws = Workbook().active
        RangeSerializer(ws).write(["40", "40.5", "-3", "007", "1e5", " 4"])

        assert [c.value for c in ws[1]] == [40, 40.5, -3, "007", "1e5", " 4"]

    def test_type_inference_can_be_disabled(self) -> None:
        ws = Workbook().active
        configuration = CsvConfiguration(infer_types=False)
        RangeSerializer(ws, configuration=configuration).write(["40"])
        assert ws["A1"].value == "40"

    def test_formula_like_text_stays_text(self) -> None:
        ws = Workbook().active
        RangeSerializer(ws).write(["=SUM(A2:A3)"])

        assert ws["A1"].value == "=SUM(A2:A3)"
        assert ws["A1"].data_type == "s"

    def test_empty_fields_are_blank_cells(self) -> None:
        ws = Workbook().active
        RangeSerializer(ws).write(["a", "", None, "d"])

        assert ws["B1"].value is None
        assert ws["C1"].value is None
        assert ws["D1"].value == "d"

    def test_range_target_stores_empty_text(self) -> None:
        ws = Workbook().active
        serializer = RangeSerializer(SheetRange.from_reference(ws, "A1:C2"))
        serializer.write(["a", "", "c"])

        assert serializer.configuration.quote_empty_fields is True
        assert ws["B1"].value == ""

    def test_range_target_does_not_mutate_caller_configuration(self) -> None:
        configuration = CsvConfiguration()
        ws = Workbook().active
        RangeSerializer(SheetRange.whole(ws), configuration=configuration)
        assert configuration.quote_empty_fields is False

    def test_overwriting_existing_cells(self, people_workbook: Workbook) -> None:
        ws = people_workbook.active
        RangeSerializer(ws).write(["First", "Second"])
        assert ws["A1"].value == "First"
        assert ws["B1"].value == "Second"

    def test_failed_write_restores_cells_and_cursor(self) -> None:
        ws = Workbook().active
        ws["A1"] = "keep"
        serializer = RangeSerializer(SheetRange.from_reference(ws, "A1:B2"))

        with pytest.raises(InvalidRangeError):
            serializer.write(["x", "y", "overflow"])

        assert ws["A1"].value == "keep"
        assert ws["B1"].value is None
        assert serializer.row == 1

    def test_failed_write_leaves_dimensions_unchanged(self) -> None:
        ws = Workbook().active
        ws["A1"] = "keep"
        serializer = RangeSerializer(SheetRange.from_reference(ws, "A1:B5"))
        serializer.row_offset = 3

        with pytest.raises(InvalidRangeError):
            serializer.write(["x", "y", "overflow"])

        assert ws.dimensions == "A1:A1"
        assert ws.max_row == 1

    def test_write_past_range_rows_fails(self) -> None:
        ws = Workbook().active
        serializer = RangeSerializer(SheetRange.from_reference(ws, "A1:B1"))
        serializer.write(["a", "b"])

        with pytest.raises(InvalidRangeError):
            serializer.write(["c", "d"])
        assert serializer.row == 2


class TestLifecycle:
    def test_nothing_saved_before_close(self, tmp_path: Path) -> None:
        path = tmp_path / "pending.xlsx"
        serializer = RangeSerializer(path)
        serializer.write(["a"])

        assert not path.exists()
        serializer.close()
        assert path.exists()

    def test_close_is_idempotent(self, tmp_path: Path) -> None:
        serializer = RangeSerializer(tmp_path / "once.xlsx")
        with (
            patch.object(Workbook, "save") as mock_save,
            patch.object(Workbook, "close") as mock_close,
        ):
            serializer.close()
            serializer.close()

        mock_save.assert_called_once_with(tmp_path / "once.xlsx")
        mock_close.assert_called_once()

    def test_borrowed_workbook_not_saved_or_closed(self) -> None:
        wb = Workbook()
        with (
            patch.object(Workbook, "save") as mock_save,
            patch.object(Workbook, "close") as mock_close,
        ):
            with RangeSerializer(wb) as serializer:
                serializer.write(["a"])
            with RangeSerializer(wb.active) as serializer:
                serializer.write(["b"])

        mock_save.assert_not_called()
        mock_close.assert_not_called()

    def test_owned_worksheet_stays_in_workbook(self) -> None:
        wb = Workbook()
        with RangeSerializer(wb) as serializer:
            serializer.write(["a"])
        assert wb["Export"]["A1"].value == "a"

    def test_write_after_close_raises(self) -> None:
        serializer = RangeSerializer(Workbook())
        serializer.close()
        with pytest.raises(DisposedError) as exc_info:
            serializer.write(["a"])
        assert exc_info.value.component == "RangeSerializer"

    def test_save_error_propagates_and_closes(self, tmp_path: Path) -> None:
        serializer = RangeSerializer(tmp_path / "no_such_dir" / "out.xlsx")
        with pytest.raises(FileNotFoundError):
            serializer.close()

        assert serializer.closed is True
        serializer.close()


class TestRoundTrip:
    def test_path_round_trip(self, tmp_path: Path) -> None:
        path = tmp_path / "round_trip.xlsx"
        records = PEOPLE_RECORDS + [["Ann", "40.5"], ["Zed", "007"]]
        with RangeSerializer(path) as serializer:
            _write_all(serializer, records)

        with RangeParser(path) as parser:
            assert list(parser) == records

    def test_path_round_trip_keeps_float_text(self, tmp_path: Path) -> None:
        path = tmp_path / "floats.xlsx"
        records = [["1.0", "0.30000000000000004", "100.0", "1234567.125"]]
        with RangeSerializer(path) as serializer:
            _write_all(serializer, records)

        with RangeParser(path) as parser:
            assert list(parser) == records

    def test_round_trip_with_offsets(self, tmp_path: Path) -> None:
        path = tmp_path / "round_trip_offsets.xlsx"
        with RangeSerializer(path) as serializer:
            serializer.row_offset = 2
            serializer.column_offset = 3
            _write_all(serializer, PEOPLE_RECORDS)

        with RangeParser(path) as parser:
            parser.row_offset = 2
            parser.column_offset = 3
            assert list(parser) == PEOPLE_RECORDS
