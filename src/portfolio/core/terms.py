"""Academic term utilities.

Content is dated by academic term ("Fall 2025", "Winter 2024") rather than
by calendar date. Terms map onto the academic calendar:

    Fall:   September - December
    Winter: January - April
    Summer: May - August

Within a year terms order Fall < Winter < Summer. This is the order used to
sort content and timeline groups.
"""

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Protocol, TypeVar

logger = logging.getLogger(__name__)

SEASON_ORDER: dict[str, int] = {"Fall": 1, "Winter": 2, "Summer": 3}

_START_MONTH = {"Fall": 9, "Winter": 1, "Summer": 5}
_END_MONTH = {"Fall": 12, "Winter": 4, "Summer": 8}
# Position of each season within a calendar year
_CALENDAR_POSITION = {"Winter": 0, "Summer": 1, "Fall": 2}


@dataclass(frozen=True)
class AcademicTerm:
    """Academic term such as Fall 2022."""

    season: str
    year: int

    @property
    def label(self) -> str:
        return get_term_label(self)


class Dated(Protocol):
    """Anything carrying an optional start and end date."""

    @property
    def date(self) -> str | None: ...

    @property
    def end_date(self) -> str | None: ...


class Typed(Protocol):
    @property
    def type(self) -> str: ...


DatedT = TypeVar("DatedT", bound=Dated)
TypedT = TypeVar("TypedT", bound=Typed)


def parse_term(label: str) -> AcademicTerm:
    """Parse a term label such as "Fall 2025".

    Raises:
        ValueError: If the label is not "<Season> <Year>"
    """
    parts = label.strip().split()
    if len(parts) != 2 or parts[0] not in SEASON_ORDER or not parts[1].isdigit():
        raise ValueError(f"Invalid academic term: {label!r}")
    return AcademicTerm(season=parts[0], year=int(parts[1]))


def term_sort_key_for(label: str) -> tuple[int, int]:
    """Sort key (year, season order) for a term label.

    Lenient: an unknown season sorts as 0 and a missing or non-numeric
    year as 0, so hand-written labels never break a listing.
    """
    parts = label.strip().split(" ")
    season = parts[0]
    year_match = re.match(r"\d+", parts[1]) if len(parts) > 1 else None
    year = int(year_match.group()) if year_match else 0
    return year, SEASON_ORDER.get(season, 0)


def to_datetime(value: str | date) -> datetime:
    """Parse an ISO date (or "YYYY-MM") into a naive datetime."""
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)

    text = value.strip()
    try:
        return datetime.fromisoformat(text).replace(tzinfo=None)
    except ValueError:
        pass

    match = re.fullmatch(r"(\d{4})-(\d{1,2})", text)
    if match:
        return datetime(int(match.group(1)), int(match.group(2)), 1)

    raise ValueError(f"Unrecognized date: {value!r}")


def _season_for_month(month: int) -> str:
    if 9 <= month <= 12:
        return "Fall"
    if 1 <= month <= 4:
        return "Winter"
    return "Summer"


def get_academic_term(value: str | date) -> AcademicTerm:
    """Detect the academic term of a date.

    Example:
        get_academic_term("2022-09-15") -> AcademicTerm("Fall", 2022)
        get_academic_term("2023-06-01") -> AcademicTerm("Summer", 2023)
    """
    moment = to_datetime(value)
    return AcademicTerm(season=_season_for_month(moment.month), year=moment.year)


def get_term_sort_key(term: AcademicTerm) -> str:
    """Sortable key such as "2022-01-Fall"."""
    return f"{term.year}-{SEASON_ORDER[term.season]:02d}-{term.season}"


def get_term_label(term: AcademicTerm) -> str:
    return f"{term.season} {term.year}"


def is_date_in_term(value: str | date, term: AcademicTerm) -> bool:
    moment = to_datetime(value)
    if moment.year != term.year:
        return False
    return _START_MONTH[term.season] <= moment.month <= _END_MONTH[term.season]


def get_term_start_date(term: AcademicTerm) -> datetime:
    """First moment of a term (e.g., Fall 2022 -> 2022-09-01 00:00)."""
    return datetime(term.year, _START_MONTH[term.season], 1)


def get_term_end_date(term: AcademicTerm) -> datetime:
    """Last second of a term (e.g., Winter 2023 -> 2023-04-30 23:59:59)."""
    end_month = _END_MONTH[term.season]
    if end_month == 12:
        first_of_next = datetime(term.year + 1, 1, 1)
    else:
        first_of_next = datetime(term.year, end_month + 1, 1)
    return first_of_next - timedelta(seconds=1)


def is_date_range_in_term(
    start: str | date,
    end: str | date | None,
    term: AcademicTerm,
) -> bool:
    """Check whether a date range overlaps a term.

    A missing end date makes the range a single day.
    """
    range_start = to_datetime(start)
    range_end = to_datetime(end) if end else range_start
    return range_start <= get_term_end_date(term) and range_end >= get_term_start_date(term)


def get_next_term(term: AcademicTerm) -> AcademicTerm:
    """Term following the given one (Fall 2022 -> Winter 2023)."""
    if term.season == "Fall":
        return AcademicTerm(season="Winter", year=term.year + 1)
    if term.season == "Winter":
        return AcademicTerm(season="Summer", year=term.year)
    return AcademicTerm(season="Fall", year=term.year)


def _chronological_index(term: AcademicTerm) -> int:
    return term.year * 3 + _CALENDAR_POSITION[term.season]


def group_items_by_term(items: Sequence[DatedT]) -> dict[str, list[DatedT]]:
    """Group dated items by academic term label.

    Items whose date range spans several terms are added to each of them.
    Items without a start date are skipped. Groups are ordered by
    (year, season) with Fall < Winter < Summer.

    Returns:
        Mapping of term label (e.g., "Fall 2022") to items, in group order
    """
    grouped: dict[str, list[DatedT]] = {}

    for item in items:
        if not item.date:
            logger.debug("Skipping undated item in term grouping: %r", item)
            continue

        current = get_academic_term(item.date)
        terms = [current]
        if item.end_date:
            last = get_academic_term(item.end_date)
            while _chronological_index(current) < _chronological_index(last):
                current = get_next_term(current)
                terms.append(current)

        for term in terms:
            grouped.setdefault(get_term_label(term), []).append(item)

    ordered = sorted(grouped, key=term_sort_key_for)
    return {label: grouped[label] for label in ordered}


def filter_items_by_type(items: Sequence[TypedT], item_type: str) -> list[TypedT]:
    return [item for item in items if item.type == item_type]


def sort_timeline_items(items: Sequence[DatedT], *, ascending: bool = False) -> list[DatedT]:
    """Sort items by start date, newest first unless ascending.

    Undated items keep their relative order after the dated ones.
    """
    dated = [item for item in items if item.date]
    undated = [item for item in items if not item.date]
    dated.sort(key=lambda item: to_datetime(item.date or ""), reverse=not ascending)
    return dated + undated


def get_current_academic_term(today: date | None = None) -> tuple[AcademicTerm, str]:
    """Academic term of today (or the given date) and its label."""
    term = get_academic_term(today or date.today())
    return term, get_term_label(term)
