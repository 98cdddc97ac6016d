"""
Unit tests for the selection module.

Tests random recording and clip window selection.
"""

import random
from collections import Counter

import pytest

# Import the module under test
import voicememos.selection as selection
from voicememos.database import VoiceMemo


def make_memo(duration: float, path: str = "memo.m4a") -> VoiceMemo:
    return VoiceMemo(title="Memo", date=0.0, duration=duration, path=path)


class TestChooseStartOffset:
    """Test choose_start_offset bounds."""

    def test_offset_within_bounds(self):
        """Test that 0 <= start <= duration - clip for many draws."""
        rng = random.Random(1234)
        for duration in (30.01, 31.0, 45.5, 600.0, 7200.0):
            for _ in range(500):
                start = selection.choose_start_offset(duration, 30.0, rng)
                assert 0.0 <= start <= duration - 30.0
                assert start + 30.0 <= duration

    def test_upper_bound_clamped(self):
        """Test that a random source returning the upper bound stays inside the recording."""

        class MaxRandom(random.Random):
            def uniform(self, a, b):
                return b + 1e-9

        start = selection.choose_start_offset(45.0, 30.0, MaxRandom())
        assert start == 15.0

    def test_duration_equal_to_clip_rejected(self):
        """Test that a recording exactly as long as the clip is rejected."""
        with pytest.raises(ValueError, match="not longer"):
            selection.choose_start_offset(30.0, 30.0, random.Random())

    def test_short_duration_rejected(self):
        """Test that a recording shorter than the clip is rejected."""
        with pytest.raises(ValueError):
            selection.choose_start_offset(12.0, 30.0, random.Random())


class TestChooseMemo:
    """Test choose_memo."""

    def test_empty_list_rejected(self):
        """Test that an empty candidate list raises ValueError."""
        with pytest.raises(ValueError, match="empty"):
            selection.choose_memo([], random.Random())

    def test_every_memo_can_be_chosen(self):
        """Test that selection covers all candidates roughly uniformly."""
        memos = [make_memo(60.0, path=f"{i}.m4a") for i in range(4)]
        rng = random.Random(99)

        counts = Counter(selection.choose_memo(memos, rng).path for _ in range(4000))

        assert set(counts) == {"0.m4a", "1.m4a", "2.m4a", "3.m4a"}
        assert all(800 <= count <= 1200 for count in counts.values())


class TestChooseRandomClip:
    """Test choose_random_clip."""

    def test_clip_fields(self):
        """Test that the selection carries the memo, start, and clip length."""
        memo = make_memo(100.0)

        clip = selection.choose_random_clip([memo], rng=random.Random(7))

        assert clip.memo is memo
        assert clip.duration == selection.CLIP_SECONDS
        assert clip.end == clip.start + selection.CLIP_SECONDS
        assert 0.0 <= clip.start <= 70.0

    def test_seed_reproducible(self):
        """Test that the same seed picks the same clip."""
        memos = [make_memo(60.0 + i, path=f"{i}.m4a") for i in range(10)]

        first = selection.choose_random_clip(memos, rng=random.Random(42))
        second = selection.choose_random_clip(memos, rng=random.Random(42))

        assert first == second

    def test_custom_clip_length(self):
        """Test a non-default clip length."""
        clip = selection.choose_random_clip([make_memo(20.0)], clip_seconds=10.0, rng=random.Random(3))

        assert clip.duration == 10.0
        assert clip.end <= 20.0

    def test_default_rng(self):
        """Test that an unseeded random source is used when none is given."""
        clip = selection.choose_random_clip([make_memo(31.0)])
        assert 0.0 <= clip.start <= 1.0
