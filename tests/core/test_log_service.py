from __future__ import annotations

import gzip
from datetime import UTC, datetime, timedelta, timezone
from pathlib import Path

import pytest

from mcp_log_timeline_server.core.errors import (
    EmptyInputError,
    LogParseError,
    NoRecognizableEntriesError,
    UnsupportedFormatError,
)
from mcp_log_timeline_server.core.log_service import (
    THRESHOLD_ENV,
    ParseOptions,
    parse_log_content,
    parse_log_file,
    resolve_parse_options,
)
from mcp_log_timeline_server.core.models import Severity

NOW = datetime(2025, 1, 15, 12, 0, 0, tzinfo=UTC)
OPTS = ParseOptions(now=NOW)


@pytest.mark.parametrize("content", ["", "   \n\t\n"])
def test_empty_content_raises(content: str) -> None:
    with pytest.raises(EmptyInputError) as excinfo:
        parse_log_content(content, "empty.log", options=OPTS)
    assert "'empty.log' is empty" in str(excinfo.value)
    assert isinstance(excinfo.value, LogParseError)
    assert isinstance(excinfo.value, ValueError)


def test_single_unrecognized_line_is_flagged_but_returned() -> None:
    result = parse_log_content("hello world", "notes.txt", options=OPTS)

    assert len(result.records) == 1
    record = result.records[0]
    assert record.level == Severity.INFORMATION
    assert record.source == "Unknown"
    assert record.message == "hello world"
    assert record.timestamp == NOW
    assert result.unsupported_format
    assert result.warning is not None
    assert "notes.txt" in result.warning


def test_strict_mode_raises_unsupported_format() -> None:
    with pytest.raises(UnsupportedFormatError) as excinfo:
        parse_log_content("hello world", "notes.txt", options=ParseOptions(now=NOW, strict=True))
    assert excinfo.value.result.unrecognized_count == 1
    assert "1/1 lines" in str(excinfo.value)


def test_well_formed_file_is_not_flagged() -> None:
    content = "\n".join(
        [
            "2024-07-23T10:30:00Z [INFO] service started",
            "    at com.example.Client.call(Client.java:42)",
            "2024-07-23T10:30:04Z [ERROR] upstream timeout",
        ]
    )
    result = parse_log_content(content, "app.log", options=OPTS)

    assert [r.level for r in result.records] == [
        Severity.INFORMATION,
        Severity.INFORMATION,
        Severity.ERROR,
    ]
    assert result.records[1].timestamp == datetime(2024, 7, 23, 10, 30, 0, tzinfo=UTC)
    assert result.unrecognized_count == 1
    assert result.total_lines == 3
    assert not result.unsupported_format
    assert result.warnings == []


def test_records_keep_file_scan_order() -> None:
    content = "\n".join(
        [
            "2024-07-23T10:30:05Z [INFO] later",
            "2024-07-23T10:30:00Z [INFO] earlier",
        ]
    )
    result = parse_log_content(content, "app.log", options=OPTS)
    assert [r.message for r in result.records] == ["later", "earlier"]


def test_leading_lines_backfilled_with_first_timestamp() -> None:
    content = "starting up\nstill starting\n2024-07-23T10:30:00Z [INFO] ready\n"
    result = parse_log_content(content, "app.log", options=OPTS)

    ts = datetime(2024, 7, 23, 10, 30, 0, tzinfo=UTC)
    assert [r.timestamp for r in result.records] == [ts, ts, ts]


def test_threshold_is_configurable() -> None:
    content = "2024-07-23T10:30:00Z [INFO] ready\nfree text one\n"

    lenient = parse_log_content(content, "app.log", options=OPTS)
    assert not lenient.unsupported_format

    tight = parse_log_content(
        content,
        "app.log",
        options=ParseOptions(now=NOW, unrecognized_threshold=0.25),
    )
    assert tight.unsupported_format


def test_threshold_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(THRESHOLD_ENV, "0.9")
    assert resolve_parse_options(OPTS).unrecognized_threshold == 0.9

    result = parse_log_content("hello world\nfoo bar\n", "notes.txt", options=OPTS)
    assert result.unsupported_format


@pytest.mark.parametrize("value", ["abc", "1.5", "-0.1"])
def test_invalid_threshold_env_raises(monkeypatch: pytest.MonkeyPatch, value: str) -> None:
    monkeypatch.setenv(THRESHOLD_ENV, value)
    with pytest.raises(ValueError, match=THRESHOLD_ENV):
        resolve_parse_options(None)


def test_invalid_threshold_option_raises() -> None:
    with pytest.raises(ValueError):
        resolve_parse_options(ParseOptions(unrecognized_threshold=2.0))


def test_windows_header_only_file_has_no_entries() -> None:
    content = "Level,Date and Time,Source,Event ID,Task Category\n"
    with pytest.raises(NoRecognizableEntriesError) as excinfo:
        parse_log_content(content, "System.csv", options=OPTS)
    assert "Could not parse any recognizable log entries in 'System.csv'" in str(excinfo.value)


def test_windows_export_skips_header() -> None:
    content = (
        "\ufeffLevel,Date and Time,Source,Event ID,Task Category,Message\n"
        '"Error","1/1/2024 12:00:00 PM","Service Control Manager","7000","None",'
        '"The service failed to start, because of X"\n'
        '"Information","1/1/2024 12:00:05 PM","EventLog","6005","None","The Event log service was started."\n'
    )
    result = parse_log_content(content, "System.csv", options=OPTS)

    assert result.total_lines == 2
    assert [r.level for r in result.records] == [Severity.ERROR, Severity.INFORMATION]
    assert result.records[0].message == "The service failed to start, because of X"
    assert not result.unsupported_format


def test_block_file_short_circuits_line_parsing(apt_history: str) -> None:
    result = parse_log_content(apt_history, "history.log", options=OPTS)

    assert result.block_count == 2
    assert len(result.records) == 2
    assert {r.format for r in result.records} == {"apt_history"}
    assert not result.unsupported_format


def test_blocks_can_be_disabled(apt_history: str) -> None:
    result = parse_log_content(
        apt_history,
        "history.log",
        options=ParseOptions(now=NOW, use_blocks=False),
    )
    assert result.block_count == 0
    assert len(result.records) == 10


def test_parse_is_idempotent_with_fixed_clock() -> None:
    content = "<34>Oct 11 22:14:15 mymachine su: 'su root' failed\nno timestamp here\n"
    first = parse_log_content(content, "syslog", options=OPTS)
    second = parse_log_content(content, "syslog", options=OPTS)
    assert first.records == second.records
    assert first.records[0].timestamp == datetime(2024, 10, 11, 22, 14, 15, tzinfo=UTC)


def test_naive_timestamps_use_default_tz() -> None:
    result = parse_log_content(
        "2025-11-03 23:04:18 startup archives unpack\n",
        "dpkg.log",
        options=ParseOptions(now=NOW, default_tz=timezone(timedelta(hours=-5))),
    )
    assert result.records[0].timestamp == datetime(2025, 11, 4, 4, 4, 18, tzinfo=UTC)



def test_out_of_range_timestamp_becomes_continuation_line() -> None:
    content = (
        "2024-07-23T10:30:00Z [INFO] ok\n"
        "9999-12-31T23:59:59-05:00 [INFO] far future\n"
    )
    result = parse_log_content(content, "app.log", options=OPTS)

    assert len(result.records) == 2
    assert result.records[1].format == "catch_all"
    assert result.records[1].timestamp == datetime(2024, 7, 23, 10, 30, 0, tzinfo=UTC)
    assert result.unrecognized_count == 1


@pytest.mark.asyncio
async def test_parse_log_file_uses_file_name(tmp_path: Path, write_app_log) -> None:
    path = tmp_path / "app.log"
    write_app_log(path)

    result = await parse_log_file(path, options=OPTS)

    assert result.filename == "app.log"
    assert len(result.records) == 5
    assert all(r.origin_file == "app.log" for r in result.records)
    assert result.records[3].timestamp == datetime(2024, 7, 23, 10, 30, 4, tzinfo=UTC)
    assert result.records[4].level == Severity.CRITICAL


@pytest.mark.asyncio
async def test_parse_log_file_reads_gzip(tmp_path: Path) -> None:
    path = tmp_path / "app.log.gz"
    with gzip.open(path, "wt", encoding="utf-8") as f:
        f.write("2024-07-23T10:30:00Z [WARNING] disk almost full\n")

    result = await parse_log_file(path, options=OPTS)

    assert result.filename == "app.log.gz"
    assert result.records[0].level == Severity.WARNING


@pytest.mark.asyncio
async def test_parse_log_file_syslog(tmp_path: Path, write_syslog) -> None:
    path = tmp_path / "syslog"
    write_syslog(path)

    result = await parse_log_file(path, options=OPTS)

    assert [r.source for r in result.records] == ["systemd", "sshd", "kernel"]
    assert result.records[1].level == Severity.ERROR
    assert result.records[0].timestamp == datetime(2024, 7, 23, 10, 29, 59, tzinfo=UTC)


@pytest.mark.asyncio
async def test_parse_log_file_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        await parse_log_file(tmp_path / "missing.log")
