"""
Unit tests for the per-client log sink.
"""

from datetime import datetime, timedelta, timezone

import pytest

from line_server.errors import SessionSetupError
from line_server.log_sink import ClientLogStore, format_record, rfc3339


class TestFormatting:
    """Tests for record formatting."""

    def test_rfc3339_utc(self):
        moment = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        assert rfc3339(moment) == "2024-01-02T03:04:05Z"

    def test_rfc3339_offset(self):
        moment = datetime(2024, 1, 2, 3, 4, 5, 999, tzinfo=timezone(timedelta(hours=2)))
        assert rfc3339(moment) == "2024-01-02T03:04:05+02:00"

    def test_record(self):
        moment = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        assert format_record("hi there", moment) == "[2024-01-02T03:04:05Z] hi there\n"


class TestClientLogStore:
    """Tests for opening and appending to client logs."""

    def test_creates_directory(self, tmp_path):
        store = ClientLogStore(str(tmp_path / "nested" / "logs"))
        log = store.open("10.1.2.3")
        log.close()
        assert (tmp_path / "nested" / "logs" / "10.1.2.3.log").exists()

    def test_append(self, tmp_path):
        store = ClientLogStore(str(tmp_path))
        log = store.open("10.1.2.3")
        log.append("first\n")
        log.append("second")
        log.close()
        assert (tmp_path / "10.1.2.3.log").read_text() == "first\nsecond\n"

    def test_reopen_appends(self, tmp_path):
        store = ClientLogStore(str(tmp_path))
        for line in ["one", "two"]:
            log = store.open("10.1.2.3")
            log.append(line)
            log.close()
        assert (tmp_path / "10.1.2.3.log").read_text() == "one\ntwo\n"

    def test_concurrent_handles_interleave_lines(self, tmp_path):
        store = ClientLogStore(str(tmp_path))
        first = store.open("10.1.2.3")
        second = store.open("10.1.2.3")
        first.append("a1")
        second.append("b1")
        first.append("a2")
        first.close()
        second.close()
        assert (tmp_path / "10.1.2.3.log").read_text().splitlines() == ["a1", "b1", "a2"]

    def test_separate_files_per_ip(self, tmp_path):
        store = ClientLogStore(str(tmp_path))
        assert store.path_for("10.0.0.1") != store.path_for("10.0.0.2")

    def test_close_is_idempotent(self, tmp_path):
        log = ClientLogStore(str(tmp_path)).open("10.1.2.3")
        log.close()
        log.close()
        assert log.closed

    def test_directory_failure(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("")
        with pytest.raises(SessionSetupError):
            ClientLogStore(str(blocker)).open("10.1.2.3")

    def test_file_failure(self, tmp_path):
        (tmp_path / "10.1.2.3.log").mkdir()
        with pytest.raises(SessionSetupError):
            ClientLogStore(str(tmp_path)).open("10.1.2.3")
