"""German names for dates, as printed on the cafeteria menu."""

import datetime as dt
from typing import NamedTuple


WEEKDAYS = (
    "Montag",
    "Dienstag",
    "Mittwoch",
    "Donnerstag",
    "Freitag",
    "Samstag",
    "Sonntag",
)

WEEKDAYS_EN = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

MONTHS = (
    "Januar",
    "Februar",
    "März",
    "April",
    "Mai",
    "Juni",
    "Juli",
    "August",
    "September",
    "Oktober",
    "November",
    "Dezember",
)

DATE_FORMATS = ("%Y-%m-%d", "%d.%m.%Y")


class LocalDate(NamedTuple):
    weekday: str
    weekday_en: str
    day: int
    month: str

    @property
    def label(self) -> str:
        """e.g. ``Donnerstag, 20. Juli``"""
        return f"{self.weekday}, {self.day}. {self.month}"


def localize(date: dt.date) -> LocalDate:
    return LocalDate(
        weekday=WEEKDAYS[date.weekday()],
        weekday_en=WEEKDAYS_EN[date.weekday()],
        day=date.day,
        month=MONTHS[date.month - 1],
    )


def parse_date(value: str) -> dt.date:
    """Parse ``2023-07-20`` or ``20.07.2023``."""
    value = value.strip()
    for fmt in DATE_FORMATS:
        try:
            return dt.datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"Unrecognised date: {value!r}. Use YYYY-MM-DD or DD.MM.YYYY.")
