"""
Random clip selection.

A clip is a fixed-length window of one recording. The same length doubles as
the candidate threshold: only recordings strictly longer than the clip are
eligible, so every selected window fits inside its recording.
"""

import random
from dataclasses import dataclass
from typing import Optional, Sequence

from .database import VoiceMemo


CLIP_SECONDS = 30.0


@dataclass
class ClipSelection:
    """A recording and the window of it that was picked for playback."""
    memo: VoiceMemo
    start: float
    duration: float

    @property
    def end(self) -> float:
        return self.start + self.duration


def choose_memo(memos: Sequence[VoiceMemo], rng: random.Random) -> VoiceMemo:
    """
    Pick one recording uniformly at random.

    Raises:
        ValueError: If memos is empty.
    """
    if not memos:
        raise ValueError("memos cannot be empty")
    return memos[rng.randrange(len(memos))]


def choose_start_offset(duration: float, clip_seconds: float, rng: random.Random) -> float:
    """
    Pick a clip start offset uniformly in [0, duration - clip_seconds].

    Args:
        duration: Length of the recording in seconds
        clip_seconds: Length of the clip in seconds
        rng: Random source

    Returns:
        Start offset in seconds such that start + clip_seconds <= duration

    Raises:
        ValueError: If the recording is not longer than the clip.
    """
    if duration <= clip_seconds:
        raise ValueError(
            f"recording of {duration:.1f}s is not longer than the {clip_seconds:.1f}s clip"
        )

    max_start = duration - clip_seconds
    return min(max(rng.uniform(0.0, max_start), 0.0), max_start)


def choose_random_clip(
    memos: Sequence[VoiceMemo],
    clip_seconds: float = CLIP_SECONDS,
    rng: Optional[random.Random] = None,
) -> ClipSelection:
    """
    Pick a random recording and a random clip window inside it.

    Args:
        memos: Candidate recordings, each longer than clip_seconds
        clip_seconds: Length of the clip in seconds
        rng: Random source (default: a fresh, unseeded random.Random)

    Returns:
        ClipSelection for the chosen recording and window
    """
    rng = rng or random.Random()
    memo = choose_memo(memos, rng)
    start = choose_start_offset(memo.duration, clip_seconds, rng)
    return ClipSelection(memo=memo, start=start, duration=clip_seconds)
