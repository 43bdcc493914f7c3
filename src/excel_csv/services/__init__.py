"""Parser, serializer and mapping services."""

from excel_csv.services.range_parser import RangeParser
from excel_csv.services.range_serializer import RangeSerializer
from excel_csv.services.records import (
    RecordReader,
    RecordWriter,
    read_dataframe,
    write_dataframe,
)

__all__ = [
    "RangeParser",
    "RangeSerializer",
    "RecordReader",
    "RecordWriter",
    "read_dataframe",
    "write_dataframe",
]
