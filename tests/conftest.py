from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path

import pytest

FIXED_NOW = datetime(2025, 1, 15, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def write_app_log() -> Callable[[Path], None]:
    def _write(path: Path) -> None:
        path.write_text(
            "\n".join(
                [
                    "2024-07-23T10:30:00Z [INFO] service started",
                    "2024-07-23T10:30:02Z [WARNING] retrying request id=abc123",
                    "2024-07-23T10:30:04Z [ERROR] upstream timeout route=/api/v1/items",
                    "    at com.example.Client.call(Client.java:42)",
                    "2024-07-23T10:30:05Z [CRITICAL] database unavailable",
                ]
            )
            + "\n",
            encoding="utf-8",
        )

    return _write


@pytest.fixture
def write_syslog() -> Callable[[Path], None]:
    def _write(path: Path) -> None:
        path.write_text(
            "\n".join(
                [
                    "Jul 23 10:29:59 web01 systemd[1]: Started Session 42 of user alice.",
                    "Jul 23 10:30:03 web01 sshd[1234]: Failed password for root from 10.0.0.1",
                    "Jul 23 10:30:04 web01 kernel: usb 1-1: new high-speed USB device",
                ]
            )
            + "\n",
            encoding="utf-8",
        )

    return _write


@pytest.fixture
def apt_history() -> str:
    return (
        "Start-Date: 2024-01-15  10:30:00\n"
        "Commandline: apt-get install -y curl\n"
        "Requested-By: alice (1000)\n"
        "Install: curl:amd64 (7.81.0-1ubuntu1.15),\n"
        "  libcurl4:amd64 (7.81.0-1ubuntu1.15, automatic)\n"
        "End-Date: 2024-01-15  10:30:05\n"
        "\n"
        "Start-Date: 2024-01-16  08:00:00\n"
        "Commandline: apt-get upgrade\n"
        "Upgrade: libc6:amd64 (2.35-0ubuntu3.1, 2.35-0ubuntu3.4)\n"
        "End-Date: 2024-01-16  08:00:42\n"
    )
