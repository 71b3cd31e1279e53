import gzip

import pytest

from access_stats.reader import (
    AccessRecord,
    ExhaustedError,
    LogfileReader,
    MalformedRecordError,
    parse_line,
)


def test_parse_common_line():
    line = '127.0.0.1 - frank [10/Oct/2000:13:55:36 -0700] "GET /index.html HTTP/1.0" 200 2326'
    assert parse_line(line) == AccessRecord(hour=13, day=10, month=10)


def test_parse_weblog_line():
    assert parse_line("2015 06 01 00 33") == AccessRecord(hour=0, day=1, month=6)


def test_parse_json_lines():
    assert parse_line('{"time": "2021-03-04T05:06:07"}') == AccessRecord(hour=5, day=4, month=3)
    assert parse_line('{"hour": 7, "day": 8, "month": 9}') == AccessRecord(hour=7, day=8, month=9)


def test_unrecognised_lines_are_skipped():
    assert parse_line("") is None
    assert parse_line("not a log line") is None
    assert parse_line('{"path": "/a"}') is None
    assert parse_line("[1, 2]") is None


def test_out_of_domain_record_rejected():
    with pytest.raises(MalformedRecordError):
        AccessRecord(hour=24, day=1, month=1)
    with pytest.raises(MalformedRecordError):
        AccessRecord(hour=0, day=0, month=1)
    with pytest.raises(MalformedRecordError):
        parse_line("2015 13 01 00 33")


def test_malformed_line_reports_location(tmp_path):
    log = tmp_path / "weblog.txt"
    log.write_text("2015 06 01 00 33\n2015 06 32 10 00\n")
    with pytest.raises(MalformedRecordError, match="weblog.txt:2"):
        LogfileReader(str(log))


def test_reader_is_single_pass():
    reader = LogfileReader.from_records([AccessRecord(1, 2, 3)])
    assert reader.has_next()
    assert reader.next() == AccessRecord(1, 2, 3)
    assert not reader.has_next()
    with pytest.raises(ExhaustedError):
        reader.next()
    assert list(reader) == []


def test_default_reader_uses_sample_log():
    reader = LogfileReader()
    assert len(reader) == 12
    assert reader.next() == AccessRecord(hour=0, day=1, month=6)


def test_gzip_file(tmp_path):
    log = tmp_path / "access.log.gz"
    with gzip.open(log, "wt", encoding="utf-8") as f:
        f.write("2015 06 01 00 33\n2015 07 02 11 15\n")
    assert list(LogfileReader(str(log))) == [AccessRecord(0, 1, 6), AccessRecord(11, 2, 7)]


def test_print_data_leaves_cursor(capsys):
    reader = LogfileReader.from_records([AccessRecord(9, 5, 4), AccessRecord(10, 6, 4)])
    reader.next()
    reader.print_data()
    assert capsys.readouterr().out.splitlines() == ["04-05 09h", "04-06 10h"]
    assert reader.has_next()


def test_from_records_matches_constructor():
    records = [AccessRecord(1, 2, 3), AccessRecord(4, 5, 6)]
    a = LogfileReader.from_records(records)
    b = LogfileReader(entries=records)
    assert a.filename == b.filename == "<memory>"
    assert list(a) == list(b) == records
    assert len(LogfileReader("named", entries=[])) == 0
