#!/usr/bin/env python3
"""
Cut a random 30-second clip of a Voice Memos recording and open it.

Picks a random recording longer than the clip length and a random window
inside it, cuts the window into a temporary .m4a file with FFmpeg, and opens
that file in the media player. The temporary file is removed once the player
is closed.

The Voice Memos database and recordings are only read.

Requirements:
- FFmpeg (brew install ffmpeg)

Usage:
    python3 src/scripts/clip_random_memo.py
    python3 src/scripts/clip_random_memo.py --seed 42
"""

import argparse
import random
import sqlite3
import sys
import tempfile
from pathlib import Path

# Add parent directory to path to import voicememos modules
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from voicememos.commands import CommandRunner
from voicememos.config import load_config_with_defaults
from voicememos.frontend import prepare_random_clip
from voicememos.logging_config import (
    setup_logger,
    log_info,
    log_error_with_context,
)
from voicememos.player import PlayerError, open_in_player
from voicememos.video import FFmpegError, clip_comment, extract_audio_clip


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Cut a random 30-second clip from your Voice Memos library and open it"
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="JSON file overriding the default settings"
    )

    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for the random selection, to replay the same clip"
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Also print debug logs to stderr"
    )

    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Main entry point for clip extraction."""
    args = parse_args(argv)
    config = load_config_with_defaults(args.config)
    logger = setup_logger(
        "clip",
        log_level="DEBUG" if args.verbose else "INFO",
        console_output=args.verbose,
    )
    rng = random.Random(args.seed)

    try:
        prepared = prepare_random_clip(config, logger, rng=rng)
    except sqlite3.Error as e:
        print(f"Error: Could not read the Voice Memos database: {e}", file=sys.stderr)
        log_error_with_context(logger, "Database access failed", e)
        return 1

    if prepared is None:
        return 0

    selection, recording_path = prepared
    runner = CommandRunner()

    with tempfile.TemporaryDirectory(prefix="voicememo-clip-") as tmpdir_str:
        clip_path = Path(tmpdir_str) / "clip.m4a"

        print("Extracting clip...\n")
        try:
            extract_audio_clip(
                recording_path,
                clip_path,
                selection.start,
                selection.duration,
                clip_comment(selection),
                runner=runner,
                audio_bitrate=config.audio_bitrate,
            )
        except FFmpegError as e:
            print(f"Error: {e}", file=sys.stderr)
            log_error_with_context(logger, "Clip extraction failed", e, path=str(recording_path))
            return 1

        log_info(logger, "Clip extracted", clip=str(clip_path), size_bytes=clip_path.stat().st_size)

        print("Opening clip...\n")
        try:
            open_in_player(clip_path, runner=runner)
        except PlayerError as e:
            print(f"Error: {e}", file=sys.stderr)
            log_error_with_context(logger, "Player failed", e, clip=str(clip_path))
            return 1

    print("Playback complete!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
