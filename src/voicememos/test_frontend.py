"""
Unit tests for the frontend module.

A fake Voice Memos container is built under a temporary HOME.
"""

import io
import logging
import os
import random
import sqlite3
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

import voicememos.frontend as frontend
from voicememos.config import Config
from voicememos.database import VoiceMemo
from voicememos.paths import get_database_path, get_recordings_directory
from voicememos.selection import ClipSelection
from voicememos.test_database import create_voice_memos_db, memo_row


@pytest.fixture
def home():
    """Temporary HOME with an empty Voice Memos container."""
    with tempfile.TemporaryDirectory() as tmpdir:
        with patch.dict(os.environ, {"HOME": tmpdir}):
            get_recordings_directory().mkdir(parents=True)
            yield Path(tmpdir)


def run_prepare(seed=1):
    out, err = io.StringIO(), io.StringIO()
    result = frontend.prepare_random_clip(
        Config({}), logging.getLogger("voicememos.test"), rng=random.Random(seed), out=out, err=err
    )
    return result, out.getvalue(), err.getvalue()


class TestFormatBanner:
    """Test format_banner."""

    def test_banner_lines(self):
        """Test title, date, duration and clip window lines."""
        memo = VoiceMemo(title="Interview", date=0.0, duration=95.34, path="a.m4a")

        banner = frontend.format_banner(ClipSelection(memo=memo, start=12.04, duration=30.0))
        lines = banner.splitlines()

        assert lines[0] == frontend.RULE
        assert lines[1] == "  Random Voice Memo Clip"
        assert "Title:    Interview" in lines
        assert "Date:     January 01, 2001 at 12:00:00 AM UTC" in lines
        assert "Duration: 95.3 seconds" in lines
        assert "Clip:     12.0s - 42.0s (30 seconds)" in lines
        assert banner.endswith(frontend.RULE + "\n")


class TestPrepareRandomClip:
    """Test prepare_random_clip."""

    def test_no_qualifying_recordings(self, home):
        """Test that an empty candidate set prints a message and returns None."""
        create_voice_memos_db(get_database_path(), [memo_row(30.0), memo_row(5.0)])

        result, out, err = run_prepare()

        assert result is None
        assert "Loading Voice Memos library..." in out
        assert "No voice memos found (longer than 30 seconds)." in err

    def test_selects_local_recording(self, home):
        """Test that a qualifying local recording is returned with the banner printed."""
        create_voice_memos_db(get_database_path(), [memo_row(95.0, title="Lecture", path="lecture.m4a")])
        (get_recordings_directory() / "lecture.m4a").write_bytes(b"audio")

        result, out, err = run_prepare()

        assert result is not None
        selection, path = result
        assert selection.memo.title == "Lecture"
        assert path == get_recordings_directory() / "lecture.m4a"
        assert 0.0 <= selection.start <= 65.0
        assert "Found 1 voice memos longer than 30 seconds." in out
        assert "Title:    Lecture" in out
        assert err == ""

    def test_recording_not_downloaded(self, home):
        """Test that a recording missing on disk is reported as an iCloud issue."""
        create_voice_memos_db(get_database_path(), [memo_row(95.0, path="cloud-only.m4a")])

        result, out, err = run_prepare()

        assert result is None
        assert "Title:    Untitled" in out
        assert "Error: Recording file not found at" in err
        assert "cloud-only.m4a" in err
        assert "iCloud" in err

    def test_same_seed_same_clip(self, home):
        """Test that a fixed seed reproduces the selection."""
        rows = [memo_row(60.0 + i, path=f"{i}.m4a") for i in range(5)]
        create_voice_memos_db(get_database_path(), rows)
        for i in range(5):
            (get_recordings_directory() / f"{i}.m4a").write_bytes(b"audio")

        first, _, _ = run_prepare(seed=11)
        second, _, _ = run_prepare(seed=11)

        assert first == second

    def test_missing_database_propagates(self, home):
        """Test that a missing database raises sqlite3.Error."""
        with pytest.raises(sqlite3.Error):
            run_prepare()

    def test_missing_home_propagates(self):
        """Test that a missing HOME raises RuntimeError."""
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(RuntimeError):
                run_prepare()
