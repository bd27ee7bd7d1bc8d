from __future__ import annotations

from datetime import date

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class SchoolClassOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    name: str
    section: str
    class_teacher_id: str | None = None


class TeacherOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    name: str
    contact_number: str | None = None


class SubjectOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    name: str
    class_id: str | None = None


class HolidayRange(BaseModel):
    """An inclusive date range; a missing end date means a single-day holiday."""

    model_config = ConfigDict(from_attributes=True)

    name: str = Field(
        default="Holiday",
        min_length=1,
        max_length=200,
        validation_alias=AliasChoices("name", "occasion", "title"),
    )
    start_date: date = Field(validation_alias=AliasChoices("startDate", "start_date", "start", "date"))
    end_date: date | None = Field(default=None, validation_alias=AliasChoices("endDate", "end_date", "end"))

    @model_validator(mode="after")
    def validate_range(self) -> "HolidayRange":
        if self.end_date is None:
            self.end_date = self.start_date
        if self.end_date < self.start_date:
            raise ValueError("Holiday end date cannot be before its start date")
        return self


class HolidayOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    name: str
    start_date: date
    end_date: date
    description: str | None = None


class HolidayMatchOut(BaseModel):
    matched: bool
    name: str | None = None
