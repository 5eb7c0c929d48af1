import datetime as dt

import pytest

from domain.dates import LocalDate, localize, parse_date


@pytest.mark.parametrize(
    "date,expected",
    (
        (dt.date(2023, 7, 20), "Donnerstag, 20. Juli"),
        (dt.date(2024, 3, 4), "Montag, 4. März"),
        (dt.date(2025, 12, 28), "Sonntag, 28. Dezember"),
    ),
)
def test_localize_label(date: dt.date, expected: str) -> None:
    assert localize(date).label == expected


def test_localize_fields() -> None:
    got = localize(dt.date(2023, 7, 20))
    assert got == LocalDate(
        weekday="Donnerstag", weekday_en="Thursday", day=20, month="Juli"
    )


def test_local_date_is_immutable() -> None:
    got = localize(dt.date(2023, 7, 20))
    with pytest.raises(AttributeError):
        got.day = 21  # pyright: ignore[reportAttributeAccessIssue]


@pytest.mark.parametrize("value", ("2023-07-20", "20.07.2023", " 2023-07-20 "))
def test_parse_date(value: str) -> None:
    assert parse_date(value) == dt.date(2023, 7, 20)


@pytest.mark.parametrize("value", ("", "Donnerstag", "20/07/2023", "2023-13-01"))
def test_parse_date_invalid(value: str) -> None:
    with pytest.raises(ValueError):
        parse_date(value)
