"""Cell-level parsing of CAGR result rows.

Each row of `tbody#formBusca:dataTable:tb` has a fixed column layout:

  idx  content
  3    course id                     "INE5410"
  4    class id                      "04208A"
  5    title, then "[label]" lines   "Programação Concorrente<br>[Turma especial]"
  6    course credits                "4"
  7    capacity                      "40"
  8    enrolled                      "38"
  11   waiting list (may be empty)   "" | "3"
  12   schedule, one slot per line   "2.0820-2 / CTC-CTC107"
  13   professors, one per line      "Fulano de Tal"

Columns 0-2, 9 and 10 are not used. A different layout is a schema change
and fails the parse.
"""

import datetime as dt
import re

from bs4 import Tag

from cagr_scraper.errors import (
    InvalidNumber,
    InvalidTime,
    MalformedRow,
    NoCourseTitle,
)
from cagr_scraper.models import Class, Course, TimeSlot, Weekday

COURSE_ID = 3
CLASS_ID = 4
TITLE = 5
CREDITS = 6
CAPACITY = 7
ENROLLED = 8
WAITING = 11
SCHEDULE = 12
PROFESSORS = 13

MIN_CELLS = PROFESSORS + 1

# Sunday is day 1 on CAGR
_WEEKDAYS: dict[int, Weekday] = {
    1: Weekday.SUN,
    2: Weekday.MON,
    3: Weekday.TUE,
    4: Weekday.WED,
    5: Weekday.THU,
    6: Weekday.FRI,
    7: Weekday.SAT,
}

_UINT_RE = re.compile(r"\d+", re.ASCII)
_CLOCK_RE = re.compile(r"(\d{2})(\d{2})", re.ASCII)


def _split_once(value: str, sep: str, line: str) -> tuple[str, str]:
    head, found, tail = value.partition(sep)
    if not found:
        raise InvalidTime(line, f"missing {sep!r}")
    return head, tail


def _lines(cell: str) -> list[str]:
    """Split a multi-line cell into stripped, non-blank lines."""
    return [line.strip() for line in cell.splitlines() if line.strip()]


def _parse_uint(field: str, value: str) -> int:
    if not _UINT_RE.fullmatch(value):
        raise InvalidNumber(field, value)
    return int(value)


def parse_weekday(code: str | int) -> Weekday:
    """Map a CAGR weekday code (1 = Sunday .. 7 = Saturday) to a Weekday.

    Raises:
        InvalidTime: If the code is not an integer in 1..7.
    """
    if isinstance(code, str):
        if not _UINT_RE.fullmatch(code):
            raise InvalidTime(code, "weekday code is not a number")
        number = int(code)
    else:
        number = code

    try:
        return _WEEKDAYS[number]
    except KeyError:
        raise InvalidTime(str(code), "weekday code out of range 1-7") from None


def parse_clock(value: str, line: str | None = None) -> dt.time:
    """Parse a zero-padded 24-hour "HHMM" string."""
    line = value if line is None else line
    match = _CLOCK_RE.fullmatch(value)
    if match is None:
        raise InvalidTime(line, f"clock {value!r} is not HHMM")
    try:
        return dt.time(int(match.group(1)), int(match.group(2)))
    except ValueError:
        raise InvalidTime(line, f"clock {value!r} is out of range") from None


def parse_time_slot(line: str) -> TimeSlot:
    """Parse one schedule line: `<weekday>.<HHMM>-<credits> / <place>`.

    >>> parse_time_slot("2.0800-4 / A1-101")
    TimeSlot(weekday=<Weekday.MON: 'Mon'>, time=datetime.time(8, 0), credits=4, place='A1-101')

    Raises:
        InvalidTime: If a delimiter is missing or a component is malformed.
    """
    schedule, place = _split_once(line, " / ", line)
    weekday_code, time_part = _split_once(schedule, ".", line)
    weekday = parse_weekday(weekday_code)

    clock, span = _split_once(time_part, "-", line)
    span = span.strip()
    if not _UINT_RE.fullmatch(span):
        raise InvalidTime(line, f"credit span {span!r} is not a number")

    return TimeSlot(
        weekday=weekday,
        time=parse_clock(clock, line),
        credits=int(span),
        place=place,
    )


def row_cells(row: Tag) -> list[str]:
    """Return the stripped text of every <td> in a row, in document order.

    <br> elements count as line breaks so multi-line cells keep their lines.
    """
    cells = []
    for td in row.find_all("td"):
        for br in td.find_all("br"):
            br.replace_with("\n")
        cells.append(td.get_text().strip())
    return cells


def parse_class_row(cells: list[str]) -> Class:
    """Build a Class from the ordered cell texts of one result row.

    Raises:
        MalformedRow: If the row is shorter than the known layout.
        NoCourseTitle: If the title cell is empty.
        InvalidNumber: If a numeric cell is not an unsigned integer.
        InvalidTime: If a schedule line is malformed.
    """
    if len(cells) < MIN_CELLS:
        raise MalformedRow(len(cells), MIN_CELLS)

    title_lines = _lines(cells[TITLE])
    if not title_lines:
        raise NoCourseTitle()
    title, *label_lines = title_lines
    labels = [label.strip("[]") for label in label_lines]

    waiting_cell = cells[WAITING]
    waiting = _parse_uint("waiting", waiting_cell) if waiting_cell else 0

    course = Course(
        id=cells[COURSE_ID],
        title=title,
        credits=_parse_uint("credits", cells[CREDITS]),
    )

    return Class(
        id=cells[CLASS_ID],
        course=course,
        labels=labels,
        capacity=_parse_uint("capacity", cells[CAPACITY]),
        enrolled=_parse_uint("enrolled", cells[ENROLLED]),
        waiting=waiting,
        times=[parse_time_slot(line) for line in _lines(cells[SCHEDULE])],
        professors=_lines(cells[PROFESSORS]),
    )
