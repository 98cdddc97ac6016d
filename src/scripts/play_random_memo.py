#!/usr/bin/env python3
"""
Play a random 30-second clip of a Voice Memos recording.

Picks a random recording longer than the clip length, picks a random window
inside it, and plays that window directly on the default audio output device.

This script operates in READ-ONLY mode:
- The Voice Memos database is opened with SQLite's mode=ro
- The recording is only decoded, never modified
- No audio files are created

Usage:
    python3 src/scripts/play_random_memo.py
    python3 src/scripts/play_random_memo.py --seed 42 --verbose
"""

import argparse
import random
import sqlite3
import sys
from pathlib import Path

# Add parent directory to path to import voicememos modules
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from voicememos.config import load_config_with_defaults
from voicememos.frontend import prepare_random_clip
from voicememos.logging_config import (
    setup_logger,
    log_info,
    log_error_with_context,
)
from voicememos.playback import PlaybackError, play_audio_segment


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Play a random 30-second clip from your Voice Memos library"
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
    """Main entry point for direct playback."""
    args = parse_args(argv)
    config = load_config_with_defaults(args.config)
    logger = setup_logger(
        "play",
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

    print("Playing clip...\n")
    try:
        frames = play_audio_segment(
            recording_path,
            selection.start,
            selection.duration,
            handoff_capacity=config.handoff_capacity,
            throttle_seconds=config.throttle_seconds,
            settle_seconds=config.settle_seconds,
        )
    except PlaybackError as e:
        print(f"Error: {e}", file=sys.stderr)
        log_error_with_context(logger, "Playback failed", e, path=str(recording_path))
        return 1

    log_info(logger, "Playback complete", frames=frames, path=str(recording_path))
    print("Playback complete!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
