"""Bind records read from or written to a worksheet to typed objects.

This is the consumer side of the adapter: it drives a :class:`RangeParser`
through ``read()`` and a :class:`RangeSerializer` through ``write()`` and
never touches the workbook directly.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from enum import Enum
from typing import Any, Generic, TypeVar

import pandas as pd
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from excel_csv.services.range_parser import RangeParser
from excel_csv.services.range_serializer import RangeSerializer
from excel_csv.utils.exceptions import ErrorCode, RecordMappingError
from excel_csv.utils.logging import get_logger

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def field_names(model: type[BaseModel]) -> list[str]:
    """Column names for a model, preferring aliases, in declaration order."""
    return [info.alias or name for name, info in model.model_fields.items()]


def to_field(value: Any) -> str:
    """Render a Python value as record text."""
    if value is None:
        return ""
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, str):
        return value
    try:
        if pd.isna(value):
            return ""
    except (TypeError, ValueError):
        pass
    return str(value)


class RecordReader(Generic[ModelT]):
    """Iterate a parser's records as validated model instances.

    With ``has_header_record`` the first record names the columns; otherwise
    fields map onto the model's fields in declaration order.
    """

    def __init__(self, parser: RangeParser, model: type[ModelT]) -> None:
        self._parser = parser
        self._model = model
        self._header: list[str] | None = None
        self._optional = {
            (info.alias or name)
            for name, info in model.model_fields.items()
            if not info.is_required()
        }

    @property
    def header(self) -> list[str] | None:
        return self._header

    def read_header(self) -> list[str]:
        """Read and remember the header record."""
        record = self._parser.read()
        if record is None:
            raise RecordMappingError(
                "No header record found",
                row=self._parser.row,
                error_code=ErrorCode.MISSING_HEADER,
            )
        if self._parser.configuration.trim_fields:
            record = [name.strip() for name in record]
        self._header = record
        return record

    def __iter__(self) -> Iterator[ModelT]:
        configuration = self._parser.configuration
        if configuration.has_header_record and self._header is None:
            self.read_header()
        keys = self._header if self._header is not None else field_names(self._model)

        for record in self._parser:
            if configuration.ignore_blank_lines and not any(record):
                continue
            yield self._bind(keys, record)

    def read_all(self) -> list[ModelT]:
        return list(self)

    def _bind(self, keys: list[str], record: list[str]) -> ModelT:
        if self._parser.configuration.trim_fields:
            record = [field.strip() for field in record]
        data = {
            key: field
            for key, field in zip(keys, record, strict=False)
            if field != "" or key not in self._optional
        }
        try:
            return self._model.model_validate(data)
        except PydanticValidationError as exc:
            # The cursor has already moved past the failing record.
            row = self._parser.row - 1
            raise RecordMappingError(
                f"Record at row {row} does not match {self._model.__name__}",
                row=row,
                raw_record=self._parser.configuration.delimiter.join(record),
                details={"errors": exc.errors(include_url=False)},
            ) from exc


class RecordWriter(Generic[ModelT]):
    """Write model instances through a serializer, header first if configured."""

    def __init__(self, serializer: RangeSerializer, model: type[ModelT]) -> None:
        self._serializer = serializer
        self._model = model
        self._header_written = False

    def write_header(self) -> None:
        self._serializer.write(field_names(self._model))
        self._header_written = True

    def write_record(self, obj: ModelT) -> None:
        wants_header = self._serializer.configuration.has_header_record
        if wants_header and not self._header_written:
            self.write_header()
        data = obj.model_dump(by_alias=True)
        keys = field_names(self._model)
        self._serializer.write([to_field(data[key]) for key in keys])

    def write_records(self, objs: Iterable[ModelT]) -> int:
        """Write every object and return how many were written."""
        count = 0
        for obj in objs:
            self.write_record(obj)
            count += 1
        logger.debug("Wrote records", model=self._model.__name__, count=count)
        return count


def read_dataframe(parser: RangeParser) -> pd.DataFrame:
    """Read the parser's remaining records into a DataFrame of strings."""
    header = parser.read() if parser.configuration.has_header_record else None
    rows = list(parser)
    return pd.DataFrame(rows, columns=header if header else None)


def write_dataframe(
    serializer: RangeSerializer,
    frame: pd.DataFrame,
    include_header: bool | None = None,
) -> int:
    """Write a DataFrame, optionally preceded by its column names.

    Returns:
        Number of data rows written.
    """
    if include_header is None:
        include_header = serializer.configuration.has_header_record
    if include_header:
        serializer.write([to_field(column) for column in frame.columns])
    count = 0
    for row in frame.itertuples(index=False, name=None):
        serializer.write([to_field(value) for value in row])
        count += 1
    return count
