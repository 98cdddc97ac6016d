"""
Media player integration.

On macOS the file is opened with the default application through `open -W`,
which blocks until the player quits. Elsewhere ffplay (shipped with FFmpeg)
plays the file and exits at the end. Either way the call returns only after
playback, so a temporary file can be removed right afterwards.
"""

import sys
from pathlib import Path
from typing import List, Optional

from .commands import CommandRunner


class PlayerError(Exception):
    """Raised when the media player fails to open a file."""
    pass


def is_macos() -> bool:
    """Check if running on macOS."""
    return sys.platform == "darwin"


def build_player_command(path: Path) -> List[str]:
    """
    Build the command that plays a media file and waits for it to finish.

    Args:
        path: Audio or video file to play

    Returns:
        Command argument list
    """
    if is_macos():
        return ["open", "-W", str(path)]

    cmd = ["ffplay", "-autoexit", "-hide_banner", "-loglevel", "error"]
    if path.suffix.lower() in (".m4a", ".aac", ".mp3", ".wav"):
        cmd.append("-nodisp")
    cmd.append(str(path))
    return cmd


def open_in_player(path: Path, runner: Optional[CommandRunner] = None) -> None:
    """
    Play a media file in the external player and wait until it is closed.

    Args:
        path: File to play
        runner: Command runner (default: CommandRunner())

    Raises:
        PlayerError: If the file does not exist or the player exits with an error
    """
    if not path.exists():
        raise PlayerError(f"Cannot open missing file: {path}")

    runner = runner or CommandRunner()
    result = runner.run(build_player_command(path))

    if not result.success:
        raise PlayerError(f"Media player failed to open {path}: {result.stderr.strip()}")
