#!/usr/bin/env python3.13
from __future__ import annotations
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

# English names only; strptime %a/%b would follow the process locale.
MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
DATE_RE = re.compile(
    r"^(?:Mon|Tue|Wed|Thu|Fri|Sat|Sun), (\d{1,2}) (" + "|".join(MONTHS) + r") (\d{4}) "
    r"(\d{2}):(\d{2}):(\d{2}) ([+-])(\d{2})(\d{2})$"
)


def normalize_search_term(term: str) -> tuple[str, str]:
    """Split a poster string like ``Name <email>`` into lowercase (name, email)."""
    term = term.strip().lower()
    name, _, email = term.partition("<")
    return name.strip(), email.strip(">")


def parse_overview_date(raw: str) -> datetime | None:
    # Mon, 1 Jan 2024 10:00:00 +0200 (CEST)
    value = raw.strip(" ").split(" (")[0]
    match = DATE_RE.match(value)
    if not match:
        return None
    day, month, year, hour, minute, second, sign, off_hours, off_minutes = match.groups()
    offset = timedelta(hours=int(off_hours), minutes=int(off_minutes))
    if sign == "-":
        offset = -offset
    try:
        return datetime(
            int(year), MONTHS.index(month) + 1, int(day), int(hour), int(minute), int(second),
            tzinfo=timezone(offset),
        )
    except ValueError:
        return None


def date_cutoff(days: int, now: datetime | None = None) -> datetime | None:
    if days == 0:
        return None
    if now is None:
        now = datetime.now(timezone.utc)
    return now - timedelta(days=days)


def poster_matches(search: tuple[str, str], from_field: str, exact: bool = False) -> bool:
    search_name, search_email = search
    name, email = normalize_search_term(from_field)
    if exact:
        return name == search_name and email == search_email
    return search_name in name and search_email in email


@dataclass(frozen=True)
class PosterFilter:
    name: str
    email: str
    exact: bool = False
    cutoff: datetime | None = None

    @classmethod
    def build(cls, poster: str, days: int = 0, exact: bool = False, now: datetime | None = None) -> "PosterFilter":
        name, email = normalize_search_term(poster)
        return cls(name=name, email=email, exact=exact, cutoff=date_cutoff(days, now))

    def matches_poster(self, from_field: str) -> bool:
        return poster_matches((self.name, self.email), from_field, self.exact)

    def matches_date(self, raw_date: str) -> bool:
        date = parse_overview_date(raw_date)
        if date is None:
            return False
        return self.cutoff is None or date > self.cutoff

    def matches(self, record: dict[str, str]) -> bool:
        return self.matches_poster(record.get("from", "")) and self.matches_date(record.get("date", ""))
