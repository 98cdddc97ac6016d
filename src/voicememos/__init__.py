"""Shared Python utilities for the Voice Memos clip tools.

This package provides the functionality behind the play, clip and slideshow
scripts:

- database: Read-only access to the Voice Memos CloudRecordings.db
- selection: Random recording and clip window selection
- playback: Direct playback of a window through the audio device
- video: FFmpeg wrappers for clip extraction and slideshow rendering
- images: Placeholder image download
- player: External media player integration
- commands: External command runner
- paths: Voice Memos and log path resolution
- timestamps: Core Data timestamp conversion
"""

from .database import (
    VoiceMemo,
    VoiceMemosDatabase,
)
from .selection import (
    CLIP_SECONDS,
    ClipSelection,
    choose_random_clip,
)

__all__ = [
    "commands",
    "config",
    "database",
    "frontend",
    "images",
    "paths",
    "playback",
    "player",
    "selection",
    "timestamps",
    "video",
    "VoiceMemo",
    "VoiceMemosDatabase",
    "CLIP_SECONDS",
    "ClipSelection",
    "choose_random_clip",
]
