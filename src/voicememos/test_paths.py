"""
Unit tests for the paths module.

Tests HOME-based path resolution and directory creation.
"""

import os
import pytest
import tempfile
from pathlib import Path
from unittest.mock import patch

# Import the module under test
import voicememos.paths as paths


class TestHomeDirectory:
    """Test get_home_directory function."""

    def test_home_from_environment(self):
        """Test that HOME is used as the home directory."""
        with patch.dict(os.environ, {"HOME": "/Users/tester"}):
            assert paths.get_home_directory() == Path("/Users/tester")

    def test_missing_home_raises(self):
        """Test that a missing HOME aborts with RuntimeError."""
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(RuntimeError, match="HOME environment variable not set"):
                paths.get_home_directory()

    def test_empty_home_raises(self):
        """Test that an empty HOME is treated as missing."""
        with patch.dict(os.environ, {"HOME": ""}):
            with pytest.raises(RuntimeError):
                paths.get_home_directory()


class TestVoiceMemosPaths:
    """Test Voice Memos database and recordings paths."""

    def test_database_path(self):
        """Test the CloudRecordings.db location."""
        with patch.dict(os.environ, {"HOME": "/Users/tester"}):
            assert paths.get_database_path() == Path(
                "/Users/tester/Library/Application Support/com.apple.voicememos/CloudRecordings.db"
            )

    def test_recordings_directory(self):
        """Test the Recordings directory location."""
        with patch.dict(os.environ, {"HOME": "/Users/tester"}):
            assert paths.get_recordings_directory() == Path(
                "/Users/tester/Library/Application Support/com.apple.voicememos/Recordings"
            )

    def test_database_and_recordings_share_parent(self):
        """Test that both live in the Voice Memos container."""
        with patch.dict(os.environ, {"HOME": "/Users/tester"}):
            assert paths.get_database_path().parent == paths.get_recordings_directory().parent

    def test_resolve_recording_path(self):
        """Test that relative ZPATH values resolve under Recordings/."""
        with patch.dict(os.environ, {"HOME": "/Users/tester"}):
            resolved = paths.resolve_recording_path("20240312 101500-4F3A2B1C.m4a")
            assert resolved == paths.get_recordings_directory() / "20240312 101500-4F3A2B1C.m4a"

    def test_paths_require_home(self):
        """Test that path helpers fail without HOME."""
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(RuntimeError):
                paths.get_database_path()
            with pytest.raises(RuntimeError):
                paths.get_recordings_directory()


class TestLogsDirectory:
    """Test get_logs_directory function."""

    def test_logs_under_library_logs(self):
        """Test that logs go to ~/Library/Logs/VoiceMemoClips."""
        with patch.dict(os.environ, {"HOME": "/Users/tester"}):
            assert paths.get_logs_directory() == Path("/Users/tester/Library/Logs/VoiceMemoClips")


class TestDirectoryCreation:
    """Test ensure_directory_exists function."""

    def test_creates_nested_directory(self):
        """Test that missing parents are created."""
        with tempfile.TemporaryDirectory() as tmpdir:
            target = Path(tmpdir) / "a" / "b" / "c"
            paths.ensure_directory_exists(target)
            assert target.is_dir()

    def test_existing_directory_is_noop(self):
        """Test that an existing directory is left alone."""
        with tempfile.TemporaryDirectory() as tmpdir:
            target = Path(tmpdir)
            marker = target / "keep.txt"
            marker.write_text("x")

            paths.ensure_directory_exists(target)

            assert marker.read_text() == "x"
