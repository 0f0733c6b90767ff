from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

from mcp_log_timeline_server.core.blocks import BLOCK_FORMAT, extract_blocks
from mcp_log_timeline_server.core.models import Severity


def test_extract_blocks_one_record_per_transaction(apt_history: str) -> None:
    records = extract_blocks(apt_history, "history.log")

    assert len(records) == 2
    first, second = records
    assert first.timestamp == datetime(2024, 1, 15, 10, 30, 0, tzinfo=UTC)
    assert second.timestamp == datetime(2024, 1, 16, 8, 0, 0, tzinfo=UTC)
    assert all(r.level == Severity.INFORMATION for r in records)
    assert all(r.source == "apt" for r in records)
    assert all(r.format == BLOCK_FORMAT for r in records)
    assert all(r.origin_file == "history.log" for r in records)


def test_extract_blocks_flattens_actions(apt_history: str) -> None:
    first = extract_blocks(apt_history, "history.log")[0]
    assert first.message == (
        "Commandline: apt-get install -y curl "
        "Requested-By: alice (1000) "
        "Install: curl:amd64 (7.81.0-1ubuntu1.15), "
        "libcurl4:amd64 (7.81.0-1ubuntu1.15, automatic)"
    )
    assert "\n" not in first.message
    assert first.raw is not None and first.raw.startswith("Start-Date:")


def test_extract_blocks_header_and_single_action() -> None:
    content = (
        "Start-Date: 2024-01-15  10:30:00\n"
        "Commandline: apt-get install -y curl\n"
        "Install: curl:amd64 (7.81.0)\n"
        "Upgrade: libc6:amd64 (2.35)\n"
        "End-Date: 2024-01-15  10:30:05\n"
    )
    [record] = extract_blocks(content, "history.log")
    assert record.message == (
        "Commandline: apt-get install -y curl Install: curl:amd64 (7.81.0) Upgrade: libc6:amd64 (2.35)"
    )


def test_extract_blocks_none_in_plain_log() -> None:
    assert extract_blocks("2024-07-23T10:30:00Z [INFO] ready\n", "app.log") == []


def test_extract_blocks_skips_unparseable_start() -> None:
    content = (
        "Start-Date: yesterday\n"
        "Commandline: apt-get install foo\n"
        "Install: foo:amd64 (1.0)\n"
        "End-Date: yesterday\n"
        "Start-Date: 2024-02-01  09:00:00\n"
        "Commandline: apt-get remove bar\n"
        "Remove: bar:amd64 (2.0)\n"
        "End-Date: 2024-02-01  09:00:03\n"
    )
    [record] = extract_blocks(content, "history.log")
    assert record.timestamp == datetime(2024, 2, 1, 9, 0, 0, tzinfo=UTC)
    assert "apt-get remove bar" in record.message


def test_extract_blocks_crlf_and_default_tz() -> None:
    content = (
        "Start-Date: 2024-01-15  10:30:00\r\n"
        "Commandline: apt-get install -y curl\r\n"
        "Install: curl:amd64 (7.81.0)\r\n"
        "End-Date: 2024-01-15  10:30:05"
    )
    [record] = extract_blocks(content, "history.log", default_tz=timezone(timedelta(hours=1)))
    assert record.timestamp == datetime(2024, 1, 15, 9, 30, 0, tzinfo=UTC)
