#!/usr/bin/env python3
"""
Steps shared by the play, clip and slideshow scripts.

Each script loads the library, picks a random clip, prints the banner, and
checks that the recording is available locally before doing its own work.

Functions:
    - format_banner: Render the human-readable clip banner
    - prepare_random_clip: Load, select, report, and locate a random clip
"""

import logging
import random
import sys
from pathlib import Path
from typing import Optional, TextIO, Tuple

from .config import Config
from .database import VoiceMemosDatabase
from .logging_config import log_info, log_warning
from .paths import get_database_path, resolve_recording_path
from .selection import ClipSelection, choose_random_clip
from .timestamps import format_memo_date


RULE = "═" * 51


def format_banner(selection: ClipSelection) -> str:
    """
    Render the clip banner.

    Args:
        selection: Chosen recording and window

    Returns:
        Multi-line banner text ending with a blank line

    Examples:
        >>> print(format_banner(selection))  # doctest: +SKIP
        ═══════════════════════════════════════════════════
          Random Voice Memo Clip
        ═══════════════════════════════════════════════════
        Title:    Interview
        Date:     March 12, 2024 at 10:15:00 AM UTC
        Duration: 95.3 seconds
        Clip:     12.0s - 42.0s (30 seconds)
        ═══════════════════════════════════════════════════
    """
    memo = selection.memo
    lines = [
        RULE,
        "  Random Voice Memo Clip",
        RULE,
        f"Title:    {memo.title}",
        f"Date:     {format_memo_date(memo.date)}",
        f"Duration: {memo.duration:.1f} seconds",
        f"Clip:     {selection.start:.1f}s - {selection.end:.1f}s ({selection.duration:.0f} seconds)",
        RULE,
        "",
    ]
    return "\n".join(lines)


def prepare_random_clip(
    config: Config,
    logger: logging.Logger,
    rng: Optional[random.Random] = None,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
) -> Optional[Tuple[ClipSelection, Path]]:
    """
    Pick a random clip and locate its recording.

    Opens the Voice Memos database read-only, loads every recording longer
    than the clip length, picks one recording and window, and prints the
    banner.

    Args:
        config: Loaded configuration
        logger: Script logger
        rng: Random source (default: unseeded)
        out: Stream for status text (default: sys.stdout)
        err: Stream for user-facing problems (default: sys.stderr)

    Returns:
        (selection, recording_path), or None when there is nothing to play:
        no qualifying recordings, or the chosen recording has not been
        downloaded from iCloud.

    Raises:
        RuntimeError: If HOME is not set
        sqlite3.Error: If the database cannot be opened or queried
    """
    out = out or sys.stdout
    err = err or sys.stderr

    print("Loading Voice Memos library...\n", file=out)

    db_path = get_database_path()
    db = VoiceMemosDatabase(db_path)
    memos = db.get_memos_longer_than(config.clip_seconds)

    if not memos:
        print(f"No voice memos found (longer than {config.clip_seconds:.0f} seconds).", file=err)
        log_info(
            logger,
            "No qualifying recordings",
            db_path=str(db_path),
            min_duration=config.clip_seconds,
            total_recordings=db.count_memos(),
        )
        return None

    print(f"Found {len(memos)} voice memos longer than {config.clip_seconds:.0f} seconds.\n", file=out)

    selection = choose_random_clip(memos, clip_seconds=config.clip_seconds, rng=rng)
    print(format_banner(selection), file=out)

    log_info(
        logger,
        "Selected clip",
        candidates=len(memos),
        title=selection.memo.title,
        path=selection.memo.path,
        start=round(selection.start, 3),
        duration=selection.duration,
    )

    recording_path = resolve_recording_path(selection.memo.path)
    if not recording_path.exists():
        print(f"Error: Recording file not found at {recording_path}", file=err)
        print("The recording may be in iCloud and not downloaded locally.", file=err)
        log_warning(logger, "Recording not available locally", path=str(recording_path))
        return None

    return selection, recording_path
