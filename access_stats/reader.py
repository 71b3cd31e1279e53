import re  # import the regular expression module for pattern matching
import sys  # import sys for the stdin source and the default output stream
import gzip  # import gzip to read compressed log files
import json  # import json to parse JSON-formatted log lines
import logging  # import logging to report skipped lines and load counts
import datetime  # import datetime for parsing timestamps
from dataclasses import dataclass  # import dataclass for the immutable record type
from pathlib import Path  # import Path to locate the packaged sample log
from typing import Iterable, Iterator, List, Optional, TextIO  # import type hints used in function signatures

logger = logging.getLogger(__name__)  # module logger, configured by the caller

DEFAULT_LOGFILE = Path(__file__).parent / "sample_logs" / "access.log"  # log read when no filename is given

COMMON_LOG_PATTERN = re.compile(  # compile a regex pattern to match Common Log Format lines
    r'(?P<ip>\S+) (?P<ident>\S+) (?P<user>\S+) \[(?P<time>[^\]]+)\] "(?P<request>[^"]*)" (?P<status>\d{3}) (?P<size>\S+)'  # regex capturing ip, ident, user, time, request, status, size
)  # end of regex compilation

WEBLOG_PATTERN = re.compile(r"^(\d{4})\s+(\d+)\s+(\d+)\s+(\d+)\s+(\d+)\s*$")  # "year month day hour minute" lines


class LogReaderError(Exception):
    """Base class for errors raised while reading access records."""


class ExhaustedError(LogReaderError):
    """Raised when next() is called on a reader with no records left."""


class MalformedRecordError(LogReaderError, ValueError):
    """Raised when a record's time fields fall outside their domain."""


@dataclass(frozen=True)
class AccessRecord:
    """One access to the server, reduced to the time fields we count by."""

    hour: int  # 0-23
    day: int  # 1-31
    month: int  # 1-12

    def __post_init__(self):  # reject impossible time fields as soon as a record is built
        for name, low, high in (("hour", 0, 23), ("day", 1, 31), ("month", 1, 12)):  # inclusive domain of each field
            value = getattr(self, name)  # field value under test
            if not isinstance(value, int) or isinstance(value, bool) or not low <= value <= high:  # bools and floats are not time fields
                raise MalformedRecordError(f"{name} must be in [{low}, {high}], got {value!r}")  # name the field and its domain

    def __str__(self) -> str:  # compact "MM-DD HHh" form used by print_data
        return f"{self.month:02d}-{self.day:02d} {self.hour:02d}h"  # zero-padded month, day and hour


def _from_datetime(dt: datetime.datetime) -> AccessRecord:  # reduce a timestamp to the fields we count by
    return AccessRecord(hour=dt.hour, day=dt.day, month=dt.month)  # year, minutes and seconds are dropped


def parse_common_log_line(line: str) -> Optional[AccessRecord]:  # parse a common-log-format line into a record, or None
    m = COMMON_LOG_PATTERN.match(line)  # attempt to match the line against the compiled pattern
    if not m:  # if there's no match
        return None  # return None to indicate parsing failed
    time_part = m.group("time").split()[0]  # split off timezone and keep the main time portion
    try:  # try to parse the timestamp portion into a datetime
        dt = datetime.datetime.strptime(time_part, "%d/%b/%Y:%H:%M:%S")  # parse time into a datetime object
    except ValueError:  # the timestamp does not follow the expected layout
        return None  # a line without a usable time cannot be counted
    return _from_datetime(dt)  # keep only hour, day and month


def parse_weblog_line(line: str) -> Optional[AccessRecord]:  # parse a "year month day hour minute" line
    m = WEBLOG_PATTERN.match(line)  # attempt to match the five integer fields
    if not m:  # if the line has some other shape
        return None  # return None to indicate parsing failed
    _, month, day, hour, _ = (int(g) for g in m.groups())  # year and minute are not counted
    return AccessRecord(hour=hour, day=day, month=month)  # out-of-range values raise MalformedRecordError here


def parse_json_line(line: str) -> Optional[AccessRecord]:  # parse a JSON-formatted log line
    try:  # try to decode the JSON
        obj = json.loads(line)  # load the JSON object from the line
    except json.JSONDecodeError:  # on JSON decoding error
        return None  # return None to indicate parsing failed
    if not isinstance(obj, dict):  # only objects carry named fields
        return None  # arrays and scalars are not records
    if all(k in obj for k in ("hour", "day", "month")):  # explicit time fields take precedence
        return AccessRecord(hour=obj["hour"], day=obj["day"], month=obj["month"])  # validated on construction
    raw = obj.get("time")  # otherwise fall back to an ISO timestamp
    if not isinstance(raw, str):  # missing or non-string timestamp
        return None  # nothing to count by
    try:  # try to parse the ISO timestamp
        dt = datetime.datetime.fromisoformat(raw)  # parse time into a datetime object
    except ValueError:  # not an ISO-8601 string
        return None  # return None to indicate parsing failed
    return _from_datetime(dt)  # keep only hour, day and month


def parse_line(line: str) -> Optional[AccessRecord]:  # decide which parser to use for a line
    line = line.strip()  # strip whitespace/newlines from the ends of the line
    if not line:  # if the line is empty after stripping
        return None  # skip empty lines
    if line.startswith("{"):  # heuristic: JSON lines start with "{"
        return parse_json_line(line)  # parse as JSON
    if WEBLOG_PATTERN.match(line):  # five bare integers
        return parse_weblog_line(line)  # parse as weblog
    return parse_common_log_line(line)  # otherwise attempt to parse as common log format


def open_stream(filename: str) -> TextIO:  # open a log file, a gzipped log file or stdin for reading
    if filename == "-":  # conventional name for standard input
        return sys.stdin  # read records piped into the process
    if filename.endswith(".gz"):  # compressed, rotated logs
        return gzip.open(filename, "rt", encoding="utf-8", errors="replace")  # decompress transparently as text
    return open(filename, "r", encoding="utf-8", errors="replace")  # plain text log


def parse_file(filename: str) -> Iterator[AccessRecord]:  # iterate over records parsed from a file name
    """Yield a record for every countable line in `filename`.

    Blank and unrecognised lines are skipped. A line that parses but carries
    an impossible hour, day or month raises MalformedRecordError.
    """
    stream = open_stream(filename)  # open the source once for the whole read
    try:  # make sure the file is closed however the loop ends
        for lineno, raw in enumerate(stream, 1):  # number lines from 1 for error messages
            try:  # parse the line, tagging domain errors with their location
                record = parse_line(raw)  # parse the line into a record or None
            except MalformedRecordError as exc:  # an impossible hour, day or month
                raise MalformedRecordError(f"{filename}:{lineno}: {exc}") from exc  # re-raise with file and line
            if record is None:  # parsing found nothing to count
                if raw.strip():  # blank lines are not worth a message
                    logger.debug("%s:%d: skipping unrecognised line", filename, lineno)  # note the skipped line
                continue  # move on to the next line
            yield record  # hand the record to the caller
    finally:  # runs on exhaustion, error or early close
        if stream is not sys.stdin:  # never close the process's stdin
            stream.close()  # release the file handle


class LogfileReader:
    """Forward-only cursor over the access records of one log file.

    The whole file is parsed when the reader is created; after that the
    cursor can only move forward, and there is no way to rewind it.
    """

    def __init__(self, filename: Optional[str] = None, entries: Optional[Iterable[AccessRecord]] = None):  # read a file, or take records already in memory
        if entries is not None:  # caller supplied the records
            self.filename = str(filename) if filename is not None else "<memory>"  # label used in error messages
            self._entries: List[AccessRecord] = list(entries)  # copy so the caller's sequence is left alone
        else:  # load records from a log file
            self.filename = str(filename) if filename is not None else str(DEFAULT_LOGFILE)  # fall back to the bundled sample
            self._entries = list(parse_file(self.filename))  # parse everything up front
            logger.info("loaded %d records from %s", len(self._entries), self.filename)  # report how much was read
        self._pos = 0  # index of the next record to hand out

    @classmethod
    def from_records(cls, records: Iterable[AccessRecord]) -> "LogfileReader":  # build a reader over in-memory records
        return cls(entries=records)  # no file is touched

    def has_next(self) -> bool:  # true while at least one record is left
        return self._pos < len(self._entries)  # compare the cursor with the record count

    def next(self) -> AccessRecord:  # return the next record and advance the cursor
        if not self.has_next():  # nothing left to hand out
            raise ExhaustedError(f"no records left in {self.filename}")  # the caller broke the has_next contract
        record = self._entries[self._pos]  # fetch the record under the cursor
        self._pos += 1  # advance irreversibly
        return record  # give it to the caller

    def __iter__(self):  # a reader is its own iterator
        return self  # iteration shares the single cursor

    def __next__(self) -> AccessRecord:  # iterator protocol on top of has_next/next
        if not self.has_next():  # the cursor is drained
            raise StopIteration  # end the for-loop quietly
        return self.next()  # advance exactly as next() does

    def __len__(self) -> int:  # number of records loaded, consumed or not
        return len(self._entries)  # size of the loaded list

    def print_data(self, out: Optional[TextIO] = None) -> None:  # list every loaded record
        """Write every loaded record, consumed or not; the cursor is untouched."""
        out = out or sys.stdout  # resolve the stream at call time
        for record in self._entries:  # walk the full list, not the cursor
            print(record, file=out)  # one record per line


__all__ = [  # define public API symbols for "from reader import *"
    "AccessRecord",  # exported symbol AccessRecord
    "LogReaderError",  # exported symbol LogReaderError
    "ExhaustedError",  # exported symbol ExhaustedError
    "MalformedRecordError",  # exported symbol MalformedRecordError
    "LogfileReader",  # exported symbol LogfileReader
    "parse_line",  # exported symbol parse_line
    "parse_file",  # exported symbol parse_file
]  # end of __all__
