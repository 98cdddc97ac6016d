"""Direct playback of a time window of a recording.

The recording is decoded with PyAV and the samples inside the requested
window are streamed to the default output device through sounddevice. No file
is written.

Two threads are involved:

- the caller's thread demuxes and decodes packets, trims each decoded block to
  the window, and puts the result on a bounded queue. A full queue blocks the
  put, which is the only backpressure.
- PortAudio's real-time thread runs BufferedOutput. It only ever uses
  get_nowait() and fills the device buffer with silence when nothing is
  queued, so it never waits on the decoder.
"""

import logging
import queue
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterable, Iterator, Optional

import av
import numpy as np

logger = logging.getLogger(__name__)


HANDOFF_CAPACITY = 32
SEND_THROTTLE_SECONDS = 0.01
SETTLE_SECONDS = 1.0


class PlaybackError(Exception):
    """Raised when a recording cannot be probed, decoded, or played."""
    pass


@dataclass
class AudioTrack:
    """An opened container and the audio stream selected for playback."""
    container: Any
    stream: Any
    sample_rate: int
    channels: int

    def close(self) -> None:
        self.container.close()


def open_audio_track(path: Path) -> AudioTrack:
    """Open a recording and select its first decodable audio stream.

    Args:
        path: Audio file to open (read-only).

    Returns:
        AudioTrack with the stream's native sample rate and channel count.

    Raises:
        PlaybackError: If the file cannot be probed, has no audio stream,
            or the stream does not report a sample rate or channel count.
    """
    try:
        container = av.open(str(path), mode="r")
    except (av.error.FFmpegError, OSError) as e:
        raise PlaybackError(f"Could not probe {path}: {e}") from e

    stream = None
    for candidate in container.streams:
        codec_context = getattr(candidate, "codec_context", None)
        if candidate.type == "audio" and codec_context is not None and codec_context.name:
            stream = candidate
            break

    if stream is None:
        container.close()
        raise PlaybackError(f"No audio track found in {path}")

    codec_context = stream.codec_context
    sample_rate = codec_context.sample_rate
    channels = len(codec_context.layout.channels) if codec_context.layout is not None else 0
    if not sample_rate:
        container.close()
        raise PlaybackError(f"No sample rate for audio track in {path}")
    if not channels:
        container.close()
        raise PlaybackError(f"No channels for audio track in {path}")

    return AudioTrack(container=container, stream=stream, sample_rate=sample_rate, channels=channels)


def _to_float32(samples: np.ndarray) -> np.ndarray:
    """Convert PCM samples of any decoder sample format to float32 in [-1, 1]."""
    if samples.dtype == np.float32:
        return samples
    if np.issubdtype(samples.dtype, np.floating):
        return samples.astype(np.float32)
    if samples.dtype == np.uint8:
        return (samples.astype(np.float32) - 128.0) / 128.0

    scale = float(np.iinfo(samples.dtype).max) + 1.0
    return (samples.astype(np.float32) / scale).astype(np.float32)


def interleave_frame(frame: Any) -> np.ndarray:
    """Flatten a decoded audio frame into interleaved float32 samples.

    Planar frames come out of to_ndarray() as (channels, samples); packed
    frames as (1, samples * channels).
    """
    samples = frame.to_ndarray()
    if frame.format.is_planar:
        samples = samples.T
    return _to_float32(np.ascontiguousarray(samples).reshape(-1))


def decode_interleaved(track: AudioTrack) -> Iterator[np.ndarray]:
    """Decode the selected stream into interleaved float32 blocks.

    Packets of other streams are skipped. A packet that fails to decode is
    skipped too; a demuxing failure ends the stream as if it were exhausted.

    Yields:
        One array per decoded frame, in stream order.
    """
    packets = track.container.demux()
    while True:
        try:
            packet = next(packets)
        except StopIteration:
            return
        except av.error.FFmpegError as e:
            logger.warning(f"Stopped reading packets: {e}")
            return

        if packet.stream.index != track.stream.index:
            continue

        try:
            frames = packet.decode()
        except av.error.FFmpegError as e:
            logger.debug(f"Skipping undecodable packet: {e}")
            continue

        for frame in frames:
            yield interleave_frame(frame)


def extract_window(
    blocks: Iterable[np.ndarray],
    start_frame: int,
    end_frame: int,
    channels: int,
) -> Iterator[np.ndarray]:
    """Trim a sequence of interleaved blocks to the frame window [start_frame, end_frame).

    A running cursor tracks the first frame of each block. Blocks that overlap
    the window are sliced at frame precision on both edges; iteration stops as
    soon as the cursor reaches end_frame, so the rest of the source is never
    decoded.

    Yields:
        Interleaved sample arrays whose concatenation is exactly the window.
    """
    cursor = 0
    for samples in blocks:
        block_frames = len(samples) // channels
        block_end = cursor + block_frames

        if block_end > start_frame and cursor < end_frame:
            first = max(start_frame - cursor, 0) * channels
            last = (min(block_end, end_frame) - cursor) * channels
            if first < last:
                yield samples[first:last]

        cursor = block_end
        if cursor >= end_frame:
            break


class BufferedOutput:
    """Output stream callback fed from the handoff queue.

    Never blocks: queued buffers are pulled with get_nowait(), and whatever
    part of the device buffer cannot be filled is zeroed. A queued buffer
    that is larger than the device buffer is carried over to the next call.
    """

    def __init__(self, handoff: "queue.Queue[np.ndarray]"):
        self._handoff = handoff
        self._pending: Optional[np.ndarray] = None
        self.underruns = 0

    def __call__(self, outdata: np.ndarray, frames: int, time_info: Any, status: Any) -> None:
        out = outdata.reshape(-1)
        filled = 0

        while filled < out.size:
            if self._pending is None or self._pending.size == 0:
                try:
                    self._pending = self._handoff.get_nowait()
                except queue.Empty:
                    break

            count = min(out.size - filled, self._pending.size)
            out[filled:filled + count] = self._pending[:count]
            self._pending = self._pending[count:]
            filled += count

        if filled < out.size:
            out[filled:] = 0.0
            if filled == 0:
                self.underruns += 1


def _open_output_stream(sample_rate: int, channels: int, callback: Callable[..., None]) -> Any:
    """Open and start a float32 output stream on the default device."""
    # PortAudio is loaded on import, so a missing library surfaces as OSError here
    try:
        import sounddevice as sd
    except (ImportError, OSError) as e:
        raise PlaybackError(f"Audio output unavailable: {e}") from e

    try:
        stream = sd.OutputStream(
            samplerate=sample_rate,
            channels=channels,
            dtype="float32",
            callback=callback,
        )
    except sd.PortAudioError as e:
        raise PlaybackError(f"No output device available: {e}") from e

    try:
        stream.start()
    except sd.PortAudioError as e:
        stream.close()
        raise PlaybackError(f"Could not start audio output: {e}") from e

    return stream


def play_audio_segment(
    file_path: Path,
    start_sec: float,
    duration_sec: float,
    handoff_capacity: int = HANDOFF_CAPACITY,
    throttle_seconds: float = SEND_THROTTLE_SECONDS,
    settle_seconds: float = SETTLE_SECONDS,
    stream_factory: Optional[Callable[[int, int, Callable[..., None]], Any]] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """Play [start_sec, start_sec + duration_sec) of a recording on the default output device.

    The output stream runs at the track's own sample rate and channel count.
    After the last block is queued, the call waits settle_seconds so queued
    audio can drain before the stream is closed.

    Args:
        file_path: Recording to play (read-only).
        start_sec: Window start in seconds.
        duration_sec: Window length in seconds.
        handoff_capacity: Maximum number of blocks waiting for the device.
        throttle_seconds: Pause after each queued block.
        settle_seconds: Wait after decoding ends.
        stream_factory: Opens and starts the output stream; called with
            (sample_rate, channels, callback). Default: sounddevice.
        sleep: Sleep function.

    Returns:
        Number of frames handed to the output device.

    Raises:
        PlaybackError: If probing fails, there is no audio track, or no
            output device is available.
    """
    track = open_audio_track(file_path)
    try:
        start_frame = int(start_sec * track.sample_rate)
        end_frame = start_frame + int(duration_sec * track.sample_rate)
        logger.info(
            f"Playing frames {start_frame}-{end_frame} of {file_path.name} "
            f"({track.sample_rate} Hz, {track.channels} ch)"
        )

        handoff: "queue.Queue[np.ndarray]" = queue.Queue(maxsize=handoff_capacity)
        output = BufferedOutput(handoff)
        stream = (stream_factory or _open_output_stream)(track.sample_rate, track.channels, output)

        frames_sent = 0
        try:
            blocks = decode_interleaved(track)
            for segment in extract_window(blocks, start_frame, end_frame, track.channels):
                handoff.put(segment)
                frames_sent += len(segment) // track.channels
                sleep(throttle_seconds)

            sleep(settle_seconds)
        finally:
            stream.stop()
            stream.close()

        if output.underruns:
            logger.debug(f"Output callback ran dry {output.underruns} times")
        logger.info(f"Handed {frames_sent} frames to the output device")
        return frames_sent
    finally:
        track.close()
