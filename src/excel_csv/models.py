"""Pydantic models shared by the parser, serializer and mapping layer."""

import csv
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CsvConfiguration(BaseModel):
    """CSV-style options passed through to the record mapping layer.

    The parser and serializer consult only ``quote_empty_fields`` and
    ``infer_types``; the remaining options shape how records are rendered as
    delimited text and how the mapping layer treats headers and blanks.
    """

    model_config = ConfigDict(frozen=True)

    delimiter: str = Field(default=",", description="Field separator")
    quote_char: str = Field(default='"', description="Quote character")
    has_header_record: bool = Field(
        default=True, description="Whether the first record holds column names"
    )
    quote_empty_fields: bool = Field(
        default=False,
        description="Store empty fields as empty text instead of blank cells",
    )
    quote_all_fields: bool = Field(
        default=False, description="Quote every field in delimited renderings"
    )
    infer_types: bool = Field(
        default=True, description="Store canonical numeric text as numbers"
    )
    trim_fields: bool = Field(
        default=False, description="Strip surrounding whitespace when mapping"
    )
    ignore_blank_lines: bool = Field(
        default=True, description="Skip records whose fields are all empty"
    )

    @field_validator("delimiter", "quote_char")
    @classmethod
    def validate_single_char(cls, v: str) -> str:
        """The stdlib csv module only accepts one-character tokens."""
        if len(v) != 1:
            raise ValueError(f"Expected a single character, got {v!r}")
        return v

    def with_overrides(self, **overrides: Any) -> "CsvConfiguration":
        """Return a copy with the given fields replaced."""
        return self.model_copy(update=overrides)

    def csv_dialect_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``csv.writer``/``csv.reader``."""
        return {
            "delimiter": self.delimiter,
            "quotechar": self.quote_char,
            "quoting": csv.QUOTE_ALL if self.quote_all_fields else csv.QUOTE_MINIMAL,
            "lineterminator": "",
        }
