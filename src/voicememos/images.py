"""Placeholder image download for slideshow videos.

Images are fetched with curl into a caller-owned directory, normally the
temporary directory that also holds the clip and the rendered video.
"""

import logging
from pathlib import Path
from typing import List, Optional

from .commands import CommandRunner
from .config import DEFAULT_PLACEHOLDER_URL

logger = logging.getLogger(__name__)


CURL_TIMEOUT_SECONDS = 60


class ImageFetchError(Exception):
    """Raised when a placeholder image cannot be downloaded."""
    pass


def placeholder_url(template: str, width: int, height: int, index: int) -> str:
    """
    Format a placeholder image URL.

    Examples:
        >>> placeholder_url("https://picsum.photos/{width}/{height}?random={index}", 640, 480, 2)
        'https://picsum.photos/640/480?random=2'
    """
    return template.format(width=width, height=height, index=index)


def fetch_placeholder_images(
    dest_dir: Path,
    count: int,
    width: int,
    height: int,
    runner: Optional[CommandRunner] = None,
    url_template: str = DEFAULT_PLACEHOLDER_URL,
) -> List[Path]:
    """
    Download placeholder images for a slideshow.

    Args:
        dest_dir: Existing directory to save images into
        count: Number of images to download
        width: Image width in pixels
        height: Image height in pixels
        runner: Command runner (default: CommandRunner())
        url_template: URL template with {width}, {height} and {index} fields

    Returns:
        List of downloaded image paths, in slideshow order

    Raises:
        ImageFetchError: If any download fails or produces an empty file
        ValueError: If count is less than 1
    """
    if count < 1:
        raise ValueError("count must be at least 1")

    runner = runner or CommandRunner()
    images: List[Path] = []

    for index in range(1, count + 1):
        url = placeholder_url(url_template, width, height, index)
        target = dest_dir / f"image_{index:02d}.jpg"

        result = runner.run(
            ["curl", "-fsSL", "--max-time", "30", "-o", str(target), url],
            timeout=CURL_TIMEOUT_SECONDS,
        )
        if not result.success:
            raise ImageFetchError(f"Failed to fetch placeholder image {url}: {result.stderr.strip()}")

        if not target.exists() or target.stat().st_size == 0:
            raise ImageFetchError(f"Placeholder image download produced no data: {url}")

        logger.debug(f"Fetched placeholder image {index}/{count} to {target}")
        images.append(target)

    return images
