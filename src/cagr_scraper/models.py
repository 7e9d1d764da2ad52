"""Pydantic models for catalog data.

All data structures use Pydantic v2 for validation, serialization, and type safety.
Parsed records are frozen: the source repeats course metadata on every row, so
each Class embeds its own Course copy instead of referencing a shared one.
"""

import datetime as dt
from enum import Enum, IntEnum

from pydantic import BaseModel, ConfigDict, Field


class Campus(IntEnum):
    """UFSC campus codes as expected by the `formBusca:selectCampus` field."""

    EAD = 0
    FLO = 1
    JOI = 2
    CBS = 3
    ARA = 4
    BLN = 5

    def __str__(self) -> str:
        return self.name

    def __format__(self, format_spec: str) -> str:
        return format(self.name, format_spec)

    @classmethod
    def parse(cls, name: str) -> "Campus":
        """Resolve a campus by name, case-insensitively.

        Raises:
            ValueError: If the name is not a known campus.
        """
        try:
            return cls[name.strip().upper()]
        except KeyError:
            valid = ", ".join(campus.name for campus in cls)
            raise ValueError(f"Unknown campus {name!r}. Valid: {valid}") from None


class Weekday(str, Enum):
    SUN = "Sun"
    MON = "Mon"
    TUE = "Tue"
    WED = "Wed"
    THU = "Thu"
    FRI = "Fri"
    SAT = "Sat"


class Course(BaseModel):
    """Course metadata as repeated on every class row."""

    model_config = ConfigDict(frozen=True)

    id: str  # e.g. "INE5410"
    title: str
    credits: int = Field(ge=0)  # one credit = one weekly contact hour


class TimeSlot(BaseModel):
    """One weekly meeting, parsed from a line like "2.0820-2 / CTC-CTC107"."""

    model_config = ConfigDict(frozen=True)

    weekday: Weekday
    time: dt.time
    credits: int = Field(ge=0)  # hours occupied starting at `time`
    place: str


class Class(BaseModel):
    """A scheduled section of a course within one (campus, term).

    Slot credits are taken as published and are not checked against
    `course.credits`.
    """

    model_config = ConfigDict(frozen=True)

    id: str  # e.g. "04208A", unique per (campus, term) only
    course: Course
    labels: list[str] = Field(default_factory=list)
    capacity: int = Field(ge=0)
    enrolled: int = Field(ge=0)
    waiting: int = Field(default=0, ge=0)
    times: list[TimeSlot] = Field(default_factory=list)
    professors: list[str] = Field(default_factory=list)
