"""
Path resolution for the Voice Memos library and this tool's own files.

The Voice Memos app keeps its metadata database and audio files under the
user's Library folder:

    ~/Library/Application Support/com.apple.voicememos/CloudRecordings.db
    ~/Library/Application Support/com.apple.voicememos/Recordings/

Both locations are derived from the HOME environment variable. They are
owned by the Voice Memos app and are only ever read.

Log files written by this tool go to:

    ~/Library/Logs/VoiceMemoClips/

All paths are Path objects from pathlib for consistent handling.
"""

import os
from pathlib import Path


VOICE_MEMOS_CONTAINER = "com.apple.voicememos"
DATABASE_FILENAME = "CloudRecordings.db"
RECORDINGS_DIRNAME = "Recordings"
LOGS_DIRNAME = "VoiceMemoClips"


def get_home_directory() -> Path:
    """
    Get the user's home directory from the HOME environment variable.

    Returns:
        Path to the home directory.

    Raises:
        RuntimeError: If HOME is not set or is empty.
    """
    home = os.environ.get("HOME")
    if not home:
        raise RuntimeError("HOME environment variable not set")
    return Path(home)


def get_voice_memos_directory() -> Path:
    """
    Get the Voice Memos application support directory.

    Returns:
        Path to ~/Library/Application Support/com.apple.voicememos
    """
    return get_home_directory() / "Library" / "Application Support" / VOICE_MEMOS_CONTAINER


def get_database_path() -> Path:
    """
    Get the Voice Memos metadata database path.

    Returns:
        Path to the CloudRecordings.db SQLite file.
    """
    return get_voice_memos_directory() / DATABASE_FILENAME


def get_recordings_directory() -> Path:
    """
    Get the directory holding the recorded audio files.

    Returns:
        Path to the Recordings/ directory.
    """
    return get_voice_memos_directory() / RECORDINGS_DIRNAME


def resolve_recording_path(relative_path: str) -> Path:
    """
    Resolve a recording path stored in the database to a local file path.

    The database stores paths relative to the recordings directory
    (e.g. "20240312 101500-4F3A2B1C.m4a").

    Args:
        relative_path: Value of the ZPATH column.

    Returns:
        Absolute path of the recording. The file may not exist locally if
        the recording has not been downloaded from iCloud yet.
    """
    return get_recordings_directory() / relative_path


def get_logs_directory() -> Path:
    """
    Get the logs directory for this tool.

    Returns:
        Path to ~/Library/Logs/VoiceMemoClips
    """
    return get_home_directory() / "Library" / "Logs" / LOGS_DIRNAME


def ensure_directory_exists(path: Path, mode: int = 0o755) -> None:
    """
    Ensure a directory exists, creating it with proper permissions if needed.

    Creates parent directories as needed. If the directory already exists,
    this is a no-op.

    Args:
        path: Directory path to create.
        mode: Unix permissions mode (default: 0o755 = drwxr-xr-x).

    Raises:
        OSError: If directory creation fails.
    """
    if not path.exists():
        path.mkdir(parents=True, mode=mode, exist_ok=True)


__all__ = [
    "VOICE_MEMOS_CONTAINER",
    "DATABASE_FILENAME",
    "RECORDINGS_DIRNAME",
    "LOGS_DIRNAME",
    "get_home_directory",
    "get_voice_memos_directory",
    "get_database_path",
    "get_recordings_directory",
    "resolve_recording_path",
    "get_logs_directory",
    "ensure_directory_exists",
]
