"""FFmpeg wrappers for clip extraction and slideshow rendering.

This module builds FFmpeg command lines for the two file-producing variants:
cutting a fixed-length audio clip out of a recording, and combining that clip
with still images into an MP4 slideshow. Commands run through CommandRunner.
"""

import os
import shutil
from pathlib import Path
from typing import List, Optional, Sequence

from .commands import CommandRunner
from .selection import ClipSelection


FFMPEG_TIMEOUT_SECONDS = 300


class FFmpegError(Exception):
    """Raised when FFmpeg operations fail."""
    pass


def _get_ffmpeg_path() -> str:
    """Get FFmpeg executable path from environment or common locations.

    Checks in order:
    1. FFMPEG_PATH environment variable
    2. Common Homebrew and system locations
    3. System PATH search via shutil.which

    Returns:
        Absolute path to ffmpeg executable, or "ffmpeg" as fallback.
    """
    if "FFMPEG_PATH" in os.environ:
        ffmpeg_path = os.environ["FFMPEG_PATH"]
        if os.path.exists(ffmpeg_path):
            return ffmpeg_path

    for path in ["/opt/homebrew/bin/ffmpeg", "/usr/local/bin/ffmpeg", "/usr/bin/ffmpeg"]:
        if os.path.exists(path):
            return path

    found = shutil.which("ffmpeg")
    return found if found else "ffmpeg"


def check_ffmpeg_available() -> bool:
    """Check if FFmpeg is available in the system.

    Returns:
        True if FFmpeg is available, False otherwise.
    """
    ffmpeg_path = _get_ffmpeg_path()
    return os.path.exists(ffmpeg_path) if os.path.isabs(ffmpeg_path) else shutil.which(ffmpeg_path) is not None


def clip_comment(selection: ClipSelection) -> str:
    """Describe a clip for the output file's comment metadata tag."""
    return (
        f'Random {selection.duration:.0f}s clip from "{selection.memo.title}" '
        f"({selection.start:.1f}s - {selection.end:.1f}s)"
    )


def build_clip_command(
    source: Path,
    output: Path,
    start: float,
    duration: float,
    comment: str,
    audio_bitrate: str = "192k",
) -> List[str]:
    """Build the FFmpeg command that cuts an AAC clip out of a recording.

    The seek is placed before the input so FFmpeg jumps straight to the
    offset; re-encoding keeps the cut sample-accurate.
    """
    return [
        _get_ffmpeg_path(),
        "-y",
        "-hide_banner",
        "-loglevel", "error",
        "-ss", f"{start:.3f}",
        "-i", str(source),
        "-t", f"{duration:.3f}",
        "-vn",
        "-c:a", "aac",
        "-b:a", audio_bitrate,
        "-metadata", f"comment={comment}",
        str(output),
    ]


def extract_audio_clip(
    source: Path,
    output: Path,
    start: float,
    duration: float,
    comment: str,
    runner: Optional[CommandRunner] = None,
    audio_bitrate: str = "192k",
) -> Path:
    """Cut a clip out of a recording into a new audio file.

    The source recording is only read.

    Args:
        source: Recording to cut from.
        output: Destination file, normally .m4a inside a temp directory.
        start: Clip start offset in seconds.
        duration: Clip length in seconds.
        comment: Text for the comment metadata tag.
        runner: Command runner (default: CommandRunner()).
        audio_bitrate: AAC bitrate. Default: "192k".

    Returns:
        Path to the created clip.

    Raises:
        FFmpegError: If FFmpeg is not available or the cut fails.
    """
    if not check_ffmpeg_available():
        raise FFmpegError("FFmpeg is not available in PATH")

    runner = runner or CommandRunner()
    cmd = build_clip_command(source, output, start, duration, comment, audio_bitrate)
    result = runner.run(cmd, timeout=FFMPEG_TIMEOUT_SECONDS)

    if not result.success:
        raise FFmpegError(f"FFmpeg clip extraction failed: {result.stderr.strip()}")

    if not output.exists():
        raise FFmpegError(f"FFmpeg completed but output file not found: {output}")

    return output


def build_slideshow_command(
    image_paths: Sequence[Path],
    audio_path: Path,
    output_path: Path,
    duration: float,
    comment: str,
    width: int = 1280,
    height: int = 720,
    crf: int = 23,
    preset: str = "veryfast",
    audio_bitrate: str = "192k",
) -> List[str]:
    """Build the FFmpeg command that renders images and a clip into an MP4.

    Each image is looped for an equal share of the clip, scaled to fit the
    frame, padded to the exact frame size, and concatenated in order.
    """
    per_image = duration / len(image_paths)

    cmd = [_get_ffmpeg_path(), "-y", "-hide_banner", "-loglevel", "error"]
    for image_path in image_paths:
        cmd += ["-loop", "1", "-t", f"{per_image:.3f}", "-i", str(image_path)]
    cmd += ["-i", str(audio_path)]

    filters = []
    for idx in range(len(image_paths)):
        filters.append(
            f"[{idx}:v]scale={width}:{height}:force_original_aspect_ratio=decrease,"
            f"pad={width}:{height}:(ow-iw)/2:(oh-ih)/2,setsar=1,fps=30[v{idx}]"
        )
    inputs = "".join(f"[v{idx}]" for idx in range(len(image_paths)))
    filters.append(f"{inputs}concat=n={len(image_paths)}:v=1:a=0,format=yuv420p[v]")

    cmd += [
        "-filter_complex", ";".join(filters),
        "-map", "[v]",
        "-map", f"{len(image_paths)}:a",
        "-c:v", "libx264",
        "-preset", preset,
        "-crf", str(crf),
        "-c:a", "aac",
        "-b:a", audio_bitrate,
        "-shortest",
        "-movflags", "+faststart",
        "-metadata", f"comment={comment}",
        str(output_path),
    ]
    return cmd


def create_slideshow_video(
    image_paths: Sequence[Path],
    audio_path: Path,
    output_path: Path,
    duration: float,
    comment: str,
    runner: Optional[CommandRunner] = None,
    width: int = 1280,
    height: int = 720,
    crf: int = 23,
    preset: str = "veryfast",
    audio_bitrate: str = "192k",
) -> Path:
    """Render still images and an audio clip into an MP4 slideshow.

    Args:
        image_paths: Images in display order.
        audio_path: Audio clip for the soundtrack.
        output_path: Destination video. If the path has no extension, .mp4
            will be added.
        duration: Clip length in seconds, split evenly across the images.
        comment: Text for the comment metadata tag.
        runner: Command runner (default: CommandRunner()).
        width: Frame width in pixels. Default: 1280.
        height: Frame height in pixels. Default: 720.
        crf: Constant Rate Factor for libx264 (0-51). Default: 23.
        preset: libx264 encoding speed preset. Default: "veryfast".
        audio_bitrate: AAC bitrate. Default: "192k".

    Returns:
        Path to the created video.

    Raises:
        FFmpegError: If FFmpeg is not available or encoding fails.
        ValueError: If image_paths is empty or duration is not positive.
    """
    if not image_paths:
        raise ValueError("image_paths cannot be empty")

    if duration <= 0:
        raise ValueError("duration must be positive")

    if not check_ffmpeg_available():
        raise FFmpegError("FFmpeg is not available in PATH")

    if not output_path.suffix:
        output_path = output_path.with_suffix(".mp4")

    runner = runner or CommandRunner()
    cmd = build_slideshow_command(
        image_paths, audio_path, output_path, duration, comment,
        width=width, height=height, crf=crf, preset=preset, audio_bitrate=audio_bitrate,
    )
    result = runner.run(cmd, timeout=FFMPEG_TIMEOUT_SECONDS)

    if not result.success:
        raise FFmpegError(f"FFmpeg slideshow encoding failed: {result.stderr.strip()}")

    if not output_path.exists():
        raise FFmpegError(f"FFmpeg completed but output file not found: {output_path}")

    return output_path
