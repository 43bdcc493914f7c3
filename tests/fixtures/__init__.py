"""Shared record model and worksheet builders for tests.

Example usage:
    from tests.fixtures import PEOPLE, Person, fill_people

    fill_people(workbook.active, start_row=5, start_col=5)
"""

from __future__ import annotations

from openpyxl.worksheet.worksheet import Worksheet
from pydantic import BaseModel, ConfigDict, Field


class Person(BaseModel):
    """Record type used across parser, serializer and mapping tests."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(alias="Name")
    age: int = Field(alias="Age")


PEOPLE = [
    Person(name="Bill", age=40),
    Person(name="Ben", age=30),
    Person(name="Weed", age=40),
]

PEOPLE_RECORDS = [["Name", "Age"]] + [[p.name, str(p.age)] for p in PEOPLE]


def fill_people(
    worksheet: Worksheet, start_row: int = 1, start_col: int = 1
) -> Worksheet:
    """Write a Name/Age header and PEOPLE starting at the given anchor."""
    worksheet.cell(row=start_row, column=start_col, value="Name")
    worksheet.cell(row=start_row, column=start_col + 1, value="Age")
    for offset, person in enumerate(PEOPLE, start=1):
        worksheet.cell(row=start_row + offset, column=start_col, value=person.name)
        worksheet.cell(row=start_row + offset, column=start_col + 1, value=person.age)
    return worksheet
