"""
Configuration management for the Voice Memos clip tools.

Every setting has a built-in default. A JSON file with overrides is only read
when one is passed explicitly (the scripts' --config option).
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .selection import CLIP_SECONDS


DEFAULT_PLACEHOLDER_URL = "https://picsum.photos/{width}/{height}?random={index}"
"""
Placeholder image source for slideshow videos.

The template is formatted with the frame width, height, and a 1-based image
index so each request returns a different image.
"""

MAX_SLIDESHOW_IMAGES = 30


def _is_int(value: Any) -> bool:
    # JSON true/false load as bool, which is an int subclass
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return _is_int(value) or isinstance(value, float)


def is_valid_image_count(count: Any) -> bool:
    """Check that a slideshow image count is an integer from 1 to MAX_SLIDESHOW_IMAGES."""
    return _is_int(count) and 1 <= count <= MAX_SLIDESHOW_IMAGES


class Config:
    """Configuration holder with typed properties."""

    def __init__(self, config_dict: Dict[str, Any]):
        """
        Initialize configuration from dictionary.

        Args:
            config_dict: Configuration dictionary loaded from JSON.
        """
        self.clip_seconds: float = config_dict.get("clip_seconds", CLIP_SECONDS)

        playback = config_dict.get("playback", {})
        self.handoff_capacity: int = playback.get("handoff_capacity", 32)
        self.throttle_seconds: float = playback.get("throttle_seconds", 0.01)
        self.settle_seconds: float = playback.get("settle_seconds", 1.0)

        self.audio_bitrate: str = config_dict.get("audio_bitrate", "192k")
        self.ffmpeg_crf: int = config_dict.get("ffmpeg_crf", 23)
        self.ffmpeg_preset: str = config_dict.get("ffmpeg_preset", "veryfast")

        slideshow = config_dict.get("slideshow", {})
        self.slideshow_image_count: int = slideshow.get("image_count", 5)
        self.slideshow_width: int = slideshow.get("width", 1280)
        self.slideshow_height: int = slideshow.get("height", 720)
        self.placeholder_url: str = slideshow.get("placeholder_url", DEFAULT_PLACEHOLDER_URL)

        self._validate()

    def _validate(self) -> None:
        """Validate configuration values and apply defaults for invalid values."""
        if not _is_number(self.clip_seconds) or self.clip_seconds <= 0:
            self.clip_seconds = CLIP_SECONDS
        self.clip_seconds = float(self.clip_seconds)

        if not _is_int(self.handoff_capacity) or self.handoff_capacity < 1:
            self.handoff_capacity = 32

        if not _is_number(self.throttle_seconds) or self.throttle_seconds < 0:
            self.throttle_seconds = 0.01

        if not _is_number(self.settle_seconds) or self.settle_seconds < 0:
            self.settle_seconds = 1.0

        if not isinstance(self.audio_bitrate, str) or not self.audio_bitrate.strip():
            self.audio_bitrate = "192k"

        if not _is_int(self.ffmpeg_crf) or not (0 <= self.ffmpeg_crf <= 51):
            self.ffmpeg_crf = 23

        valid_presets = [
            "ultrafast", "superfast", "veryfast", "faster", "fast",
            "medium", "slow", "slower", "veryslow",
        ]
        if self.ffmpeg_preset not in valid_presets:
            self.ffmpeg_preset = "veryfast"

        if not is_valid_image_count(self.slideshow_image_count):
            self.slideshow_image_count = 5

        # libx264 with yuv420p needs even dimensions
        if not _is_int(self.slideshow_width) or self.slideshow_width <= 0 or self.slideshow_width % 2:
            self.slideshow_width = 1280
        if not _is_int(self.slideshow_height) or self.slideshow_height <= 0 or self.slideshow_height % 2:
            self.slideshow_height = 720

        try:
            self.placeholder_url.format(width=1, height=1, index=1)
        except (AttributeError, KeyError, IndexError, ValueError):
            self.placeholder_url = DEFAULT_PLACEHOLDER_URL


def load_config(config_path: Union[Path, str]) -> Config:
    """
    Load configuration from a JSON file.

    Args:
        config_path: Path to the JSON configuration file.

    Returns:
        Config object with validated configuration values.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        json.JSONDecodeError: If config file contains invalid JSON.
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        config_dict = json.load(f)

    if not isinstance(config_dict, dict):
        raise json.JSONDecodeError("Top-level value must be an object", str(config_path), 0)

    return Config(config_dict)


def load_config_with_defaults(config_path: Optional[Union[Path, str]] = None) -> Config:
    """
    Load configuration with fallback to defaults.

    Args:
        config_path: Optional path to a JSON configuration file. When None,
            the built-in defaults are used.

    Returns:
        Config object with validated configuration values.
    """
    if config_path is None:
        return Config({})

    try:
        return load_config(config_path)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        print(f"Warning: Failed to load config ({e}), using defaults")
        return Config({})


__all__ = [
    "Config",
    "load_config",
    "load_config_with_defaults",
    "DEFAULT_PLACEHOLDER_URL",
    "MAX_SLIDESHOW_IMAGES",
    "is_valid_image_count",
]
