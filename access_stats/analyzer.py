"""Count web-server accesses by hour, day of month and month.

A LogAnalyzer borrows one forward-only reader. Each ``analyze_*_data``
pass drains that reader, so only the first pass run against a reader sees
any records; use :meth:`LogAnalyzer.analyze` to fill every table in a single
traversal.
"""

import sys
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, TextIO, Tuple

from .reader import AccessRecord, LogfileReader

logger = logging.getLogger(__name__)

HOURS = 24
DAYS = 32  # index 0 unused
MONTHS = 13  # index 0 unused


def busiest_index(counts: Sequence[int], start: int = 0) -> int:
    """Index in ``counts[start:]`` holding the largest count; lowest index wins ties."""
    busiest = start
    for i in range(start + 1, len(counts)):
        if counts[i] > counts[busiest]:
            busiest = i
    return busiest


def quietest_index(counts: Sequence[int], start: int = 0) -> int:
    """Index in ``counts[start:]`` holding the smallest count; lowest index wins ties."""
    quietest = start
    for i in range(start + 1, len(counts)):
        if counts[i] < counts[quietest]:
            quietest = i
    return quietest


def busiest_window(counts: Sequence[int], width: int = 2) -> int:
    """First index of the busiest run of ``width`` slots, wrapping past the end."""
    size = len(counts)

    def window(i):
        return sum(counts[(i + k) % size] for k in range(width))

    busiest = 0
    best = window(0)
    for i in range(1, size):
        total = window(i)
        if total > best:
            busiest, best = i, total
    return busiest


class _Queries:
    # extremum queries shared by the live analyzer and its snapshots;
    # subclasses provide hour_counts, day_counts and month_counts

    def busiest_hour(self) -> int:
        return busiest_index(self.hour_counts)

    def quietest_hour(self) -> int:
        return quietest_index(self.hour_counts)

    def busiest_two_hour(self) -> int:
        """First hour of the busiest two-hour period (23 pairs with 0)."""
        return busiest_window(self.hour_counts, 2)

    def busiest_day(self) -> int:
        return busiest_index(self.day_counts, 1)

    def quietest_day(self) -> int:
        return quietest_index(self.day_counts, 1)

    def busiest_month(self) -> int:
        return busiest_index(self.month_counts, 1)

    def quietest_month(self) -> int:
        return quietest_index(self.month_counts, 1)

    def hourly_counts(self) -> List[Tuple[int, int]]:
        return [(hour, self.hour_counts[hour]) for hour in range(HOURS)]

    def daily_counts(self) -> List[Tuple[int, int]]:
        return [(day, self.day_counts[day]) for day in range(1, DAYS)]

    def monthly_counts(self) -> List[Tuple[int, int]]:
        return [(month, self.month_counts[month]) for month in range(1, MONTHS)]

    def print_hourly_counts(self, out: Optional[TextIO] = None) -> None:
        out = out or sys.stdout
        print("Hr: Count", file=out)
        for hour, count in self.hourly_counts():
            print(f"{hour}: {count}", file=out)

    def print_monthly_counts(self, out: Optional[TextIO] = None) -> None:
        out = out or sys.stdout
        print("Month : Count", file=out)
        for month, count in self.monthly_counts():
            print(f"{month} : {count}", file=out)


@dataclass(frozen=True)
class AccessSummary(_Queries):
    """Counter tables and total from one traversal of a log."""

    hour_counts: Tuple[int, ...]
    day_counts: Tuple[int, ...]
    month_counts: Tuple[int, ...]
    total: int

    def to_dict(self) -> Dict:
        return {
            "total_accesses": self.total,
            "busiest_hour": self.busiest_hour(),
            "quietest_hour": self.quietest_hour(),
            "busiest_two_hour": self.busiest_two_hour(),
            "busiest_day": self.busiest_day(),
            "quietest_day": self.quietest_day(),
            "busiest_month": self.busiest_month(),
            "quietest_month": self.quietest_month(),
            "hourly_counts": dict(self.hourly_counts()),
            "daily_counts": dict(self.daily_counts()),
            "monthly_counts": dict(self.monthly_counts()),
        }


class LogAnalyzer(_Queries):
    """Read web server data and analyse access patterns over time.

    The reader can be given directly (anything with ``has_next()`` and
    ``next()``); otherwise a LogfileReader is opened on ``filename``, or on
    the packaged sample log when no filename is given.

    Queries over a table that no pass has filled return the default index
    (0 for hours, 1 for days and months) rather than failing.
    """

    def __init__(self, filename: Optional[str] = None, reader=None):
        self.hour_counts = [0] * HOURS
        self.day_counts = [0] * DAYS
        self.month_counts = [0] * MONTHS
        self.reader = reader if reader is not None else LogfileReader(filename)

    def _drain(self):
        while self.reader.has_next():
            entry = self.reader.next()
            if not isinstance(entry, AccessRecord):
                # records from other readers are validated on the way in
                entry = AccessRecord(hour=entry.hour, day=entry.day, month=entry.month)
            yield entry

    def analyze_hourly_data(self) -> None:
        seen = 0
        for entry in self._drain():
            self.hour_counts[entry.hour] += 1
            seen += 1
        logger.debug("hourly pass counted %d records", seen)

    def analyze_daily_data(self) -> None:
        seen = 0
        for entry in self._drain():
            self.day_counts[entry.day] += 1
            seen += 1
        logger.debug("daily pass counted %d records", seen)

    def analyze_monthly_data(self) -> None:
        seen = 0
        for entry in self._drain():
            self.month_counts[entry.month] += 1
            seen += 1
        logger.debug("monthly pass counted %d records", seen)

    def number_of_accesses(self) -> int:
        """Drain the reader and return how many records it still held."""
        accesses = 0
        for _ in self._drain():
            accesses += 1
        return accesses

    def analyze(self) -> AccessSummary:
        """Fill all three tables in one pass and return a snapshot of them.

        The snapshot covers only the records this pass consumed; its counts
        are also added to the analyzer's own tables.
        """
        hours = [0] * HOURS
        days = [0] * DAYS
        months = [0] * MONTHS
        total = 0
        for entry in self._drain():
            hours[entry.hour] += 1
            days[entry.day] += 1
            months[entry.month] += 1
            total += 1
        for table, counted in ((self.hour_counts, hours), (self.day_counts, days), (self.month_counts, months)):
            for i, n in enumerate(counted):
                table[i] += n
        logger.debug("single pass counted %d records", total)
        return AccessSummary(
            hour_counts=tuple(hours),
            day_counts=tuple(days),
            month_counts=tuple(months),
            total=total,
        )

    def print_data(self, out: Optional[TextIO] = None) -> None:
        """Print the lines of data loaded by the reader."""
        self.reader.print_data(out)


__all__ = [
    "LogAnalyzer",
    "AccessSummary",
    "busiest_index",
    "quietest_index",
    "busiest_window",
]
