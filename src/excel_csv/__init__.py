"""Excel CSV - read and write worksheet ranges as CSV-style records."""

from excel_csv.models import CsvConfiguration
from excel_csv.services import (
    RangeParser,
    RangeSerializer,
    RecordReader,
    RecordWriter,
    read_dataframe,
    write_dataframe,
)
from excel_csv.sheet_range import SheetRange
from excel_csv.utils.exceptions import (
    DisposedError,
    ExcelCsvError,
    InvalidRangeError,
    RecordMappingError,
)

__all__ = [
    "CsvConfiguration",
    "DisposedError",
    "ExcelCsvError",
    "InvalidRangeError",
    "RangeParser",
    "RangeSerializer",
    "RecordMappingError",
    "RecordReader",
    "RecordWriter",
    "SheetRange",
    "read_dataframe",
    "write_dataframe",
]
__version__ = "0.1.0"
