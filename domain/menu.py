"""Scraping today's lunch from the cafeteria page.

The page lists the week in one or more ``div.divider`` blocks, days separated
by an en dash. A day looks roughly like::

    Donnerstag, 20. Juli – Mittag: Bò Kho Dessert: Obst
"""

import datetime as dt
import logging
import re
import string

import bs4
import httpx

from domain.dates import WEEKDAYS, WEEKDAYS_EN, LocalDate, localize
from domain.errors import ApiError, NotFoundError


logger = logging.getLogger(__name__)

DAY_SEPARATOR = "–"
START_MARKER = "Mittag"
END_MARKER = "Dessert"
MENU_SELECTOR = "div.block div.divider"


def remove_whitespace(s: str) -> str:
    return "".join(c for c in s if not c.isspace())


def split_days(text: str, separator: str = DAY_SEPARATOR) -> list[str]:
    return [c.strip() for c in text.split(separator) if c.strip()]


DAY_HEADING = re.compile(
    rf"\s*(?:{'|'.join(WEEKDAYS + WEEKDAYS_EN)})\b\s*,?\s*\d{{1,2}}(?!\d)"
)


def starts_day(chunk: str) -> bool:
    """True for a chunk opening with a heading such as ``Donnerstag, 20.``"""
    return DAY_HEADING.match(chunk) is not None


def group_days(chunks: list[str], separator: str = DAY_SEPARATOR) -> list[str]:
    """Glue chunks onto the day before them unless they open a new day.

    The separator also turns up between a day's heading and its menu, and
    dishes like "Sonntagsbraten" name a weekday, so only a leading
    weekday-and-date heading starts a new day.
    """
    days: list[list[str]] = []
    for chunk in chunks:
        if starts_day(chunk) or not days:
            days.append([chunk])
        else:
            days[-1].append(chunk)
    return [f" {separator} ".join(parts) for parts in days]


def matches_date(day: str, date: LocalDate) -> bool:
    stripped = remove_whitespace(day)
    return (
        (date.weekday in stripped or date.weekday_en in stripped)
        and re.search(rf"(?<!\d){date.day}(?!\d)", stripped) is not None
        and date.month in stripped
    )


def extract_section(
    day: str,
    start: str = START_MARKER,
    end: str = END_MARKER,
) -> str:
    """Text between the start and end markers, or "" when they don't fit."""
    i = day.find(start)
    j = day.find(end)
    if i == -1 or j == -1 or j <= i:
        return ""
    return day[i + len(start) : j].strip(string.whitespace + ":")


def find_lunch(
    html: str,
    date: LocalDate,
    *,
    selector: str = MENU_SELECTOR,
    separator: str = DAY_SEPARATOR,
    start: str = START_MARKER,
    end: str = END_MARKER,
) -> str:
    soup = bs4.BeautifulSoup(html, features="html.parser")
    lunch = ""
    for element in soup.select(selector):
        for day in group_days(split_days(element.get_text(), separator), separator):
            if not matches_date(day, date):
                continue
            section = extract_section(day, start, end)
            logger.debug("Day %r matches %s, extracted %r", day, date.label, section)
            if section:
                lunch = section

    if not lunch:
        raise NotFoundError(f"No lunch found for {date.label}.")
    return lunch


class MenuFetcher:
    def __init__(
        self,
        url: str,
        *,
        client: httpx.AsyncClient,
        selector: str = MENU_SELECTOR,
        timeout: float = 20,
    ) -> None:
        self.url = url
        self.selector = selector
        self.timeout = timeout
        self._client = client

    async def page(self) -> str:
        try:
            resp = await self._client.get(
                self.url, timeout=self.timeout, follow_redirects=True
            )
        except httpx.HTTPError as exc:
            raise ApiError(f"Could not fetch menu page {self.url}: {exc}") from exc
        if not resp.is_success:
            raise ApiError(
                f"Menu page {self.url} returned {resp.status_code} {resp.reason_phrase}"
            )
        return resp.text

    async def fetch(self, date: dt.date | None = None) -> str:
        local = localize(dt.date.today() if date is None else date)
        logger.info("Checking menu for %s", local.label)
        lunch = find_lunch(await self.page(), local, selector=self.selector)
        logger.info("Today: %s, on the menu: %s", local.label, lunch)
        return lunch
