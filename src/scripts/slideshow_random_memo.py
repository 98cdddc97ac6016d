#!/usr/bin/env python3
"""
Turn a random 30-second clip of a Voice Memos recording into a slideshow video.

Picks a random recording longer than the clip length and a random window
inside it, cuts the window with FFmpeg, downloads placeholder images, renders
the images and the clip into an MP4, and opens the video in the media player.
All intermediate files live in a temporary directory that is removed at the
end of the run.

The Voice Memos database and recordings are only read.

Requirements:
- FFmpeg (brew install ffmpeg)
- curl
- Network access for the placeholder images

Usage:
    python3 src/scripts/slideshow_random_memo.py
    python3 src/scripts/slideshow_random_memo.py --images 8 --seed 42
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
from voicememos.config import MAX_SLIDESHOW_IMAGES, is_valid_image_count, load_config_with_defaults
from voicememos.frontend import prepare_random_clip
from voicememos.images import ImageFetchError, fetch_placeholder_images
from voicememos.logging_config import (
    setup_logger,
    log_info,
    log_error_with_context,
)
from voicememos.player import PlayerError, open_in_player
from voicememos.video import (
    FFmpegError,
    clip_comment,
    create_slideshow_video,
    extract_audio_clip,
)


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a random 30-second Voice Memos clip into a slideshow video and open it"
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="JSON file overriding the default settings"
    )

    parser.add_argument(
        "--images",
        type=int,
        help=f"Number of placeholder images in the slideshow, 1-{MAX_SLIDESHOW_IMAGES} (default from config: 5)"
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
    """Main entry point for slideshow rendering."""
    args = parse_args(argv)
    config = load_config_with_defaults(args.config)
    logger = setup_logger(
        "slideshow",
        log_level="DEBUG" if args.verbose else "INFO",
        console_output=args.verbose,
    )
    rng = random.Random(args.seed)

    image_count = args.images if args.images is not None else config.slideshow_image_count
    if not is_valid_image_count(image_count):
        print(f"Error: --images must be between 1 and {MAX_SLIDESHOW_IMAGES}", file=sys.stderr)
        return 2

    try:
        prepared = prepare_random_clip(config, logger, rng=rng)
    except sqlite3.Error as e:
        print(f"Error: Could not read the Voice Memos database: {e}", file=sys.stderr)
        log_error_with_context(logger, "Database access failed", e)
        return 1

    if prepared is None:
        return 0

    selection, recording_path = prepared
    comment = clip_comment(selection)
    runner = CommandRunner()

    with tempfile.TemporaryDirectory(prefix="voicememo-slideshow-") as tmpdir_str:
        tmpdir = Path(tmpdir_str)
        clip_path = tmpdir / "clip.m4a"
        video_path = tmpdir / "slideshow.mp4"

        try:
            print("Extracting clip...\n")
            extract_audio_clip(
                recording_path,
                clip_path,
                selection.start,
                selection.duration,
                comment,
                runner=runner,
                audio_bitrate=config.audio_bitrate,
            )

            print(f"Downloading {image_count} placeholder images...\n")
            images = fetch_placeholder_images(
                tmpdir,
                image_count,
                config.slideshow_width,
                config.slideshow_height,
                runner=runner,
                url_template=config.placeholder_url,
            )

            print("Rendering slideshow...\n")
            create_slideshow_video(
                images,
                clip_path,
                video_path,
                selection.duration,
                comment,
                runner=runner,
                width=config.slideshow_width,
                height=config.slideshow_height,
                crf=config.ffmpeg_crf,
                preset=config.ffmpeg_preset,
                audio_bitrate=config.audio_bitrate,
            )
        except (FFmpegError, ImageFetchError) as e:
            print(f"Error: {e}", file=sys.stderr)
            log_error_with_context(logger, "Slideshow creation failed", e, path=str(recording_path))
            return 1

        log_info(
            logger,
            "Slideshow rendered",
            video=str(video_path),
            images=len(images),
            size_bytes=video_path.stat().st_size,
        )

        print("Opening slideshow...\n")
        try:
            open_in_player(video_path, runner=runner)
        except PlayerError as e:
            print(f"Error: {e}", file=sys.stderr)
            log_error_with_context(logger, "Player failed", e, video=str(video_path))
            return 1

    print("Playback complete!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
