"""
frame_sampler.py
Seek to a few points of a video, scale each frame into a small raster and
reduce its pixels to brightness / colour-divergence statistics.
"""

import asyncio
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import cv2
import numpy as np

from kinetics.errors import FrameSampleTimeout, MediaUnreadable
from kinetics.models import FrameStat


DEFAULT_OFFSETS = (0.25, 0.5, 0.75)
DEFAULT_RASTER_SIZE = (300, 150)


@dataclass(frozen=True)
class SamplingResult:
    frame_stats: Tuple[FrameStat, ...]
    duration: Optional[float]
    timed_out: bool = False


def reduce_frame_pixels(raster: np.ndarray, stride: int = 4) -> FrameStat:
    """
    Reduce an RGB(A) raster to average brightness and energy.

    Only every `stride`-th pixel is visited so the cost is bounded by the
    raster size, not the source resolution.

    Args:
        raster: H x W x C uint8 image, C >= 3, channels in RGB order
        stride: Pixel step (4 = every 16th byte of an RGBA buffer)

    Returns:
        FrameStat with per-pixel averages of (r+g+b)/3 and |r-g| + |g-b|
    """
    if raster is None or raster.size == 0:
        return FrameStat(average_brightness=0.0, energy_index=0.0)

    if raster.ndim != 3 or raster.shape[2] < 3:
        raise ValueError(f"Expected an RGB(A) raster, got shape {raster.shape}")

    channels = raster.shape[2]
    pixels = raster.reshape(-1, channels)[::max(1, int(stride)), :3].astype(np.int32)

    r = pixels[:, 0]
    g = pixels[:, 1]
    b = pixels[:, 2]

    brightness = (r + g + b) / 3.0
    energy = np.abs(r - g) + np.abs(g - b)

    return FrameStat(
        average_brightness=float(brightness.mean()),
        energy_index=float(energy.mean()),
    )


def probe_duration(capture) -> Optional[float]:
    """Clip duration in seconds, or None when the container doesn't say."""
    fps = capture.get(cv2.CAP_PROP_FPS)
    frame_count = capture.get(cv2.CAP_PROP_FRAME_COUNT)
    if fps and fps > 0 and frame_count and frame_count > 0:
        return float(frame_count) / float(fps)
    return None


def read_frame_at(capture, position_ms: float, raster_size=DEFAULT_RASTER_SIZE) -> Optional[np.ndarray]:
    """Blocking seek + decode; returns an RGB raster or None."""
    capture.set(cv2.CAP_PROP_POS_MSEC, float(position_ms))
    ret, frame = capture.read()
    if not ret or frame is None:
        return None

    width, height = raster_size
    small = cv2.resize(frame, (int(width), int(height)), interpolation=cv2.INTER_AREA)
    return cv2.cvtColor(small, cv2.COLOR_BGR2RGB)


def _open_capture(video_path):
    """Blocking open + duration probe; runs on the sampler's worker."""
    capture = cv2.VideoCapture(str(video_path))
    if not capture.isOpened():
        capture.release()
        raise MediaUnreadable(f"Cannot open video: {video_path}")
    return capture, probe_duration(capture)


def _release_when_opened(future):
    if future.cancelled() or future.exception() is not None:
        return
    capture, _ = future.result()
    capture.release()


def _release_when_done(capture):
    def _done(future):
        if not future.cancelled():
            # Retrieve the result so a late decode error is not reported as unhandled
            future.exception()
        capture.release()
    return _done


async def _await_before(loop, future, deadline):
    remaining = deadline - loop.time()
    if remaining <= 0:
        raise asyncio.TimeoutError()
    return await asyncio.wait_for(asyncio.shield(asyncio.wrap_future(future)), timeout=remaining)


async def sample_frames(
    video_path: str,
    offsets: Sequence[float] = DEFAULT_OFFSETS,
    raster_size: Tuple[int, int] = DEFAULT_RASTER_SIZE,
    stride: int = 4,
    timeout: float = 15.0,
    fallback_duration: float = 10.0,
    verbose: bool = True,
) -> SamplingResult:
    """
    Capture one FrameStat per offset, strictly one frame at a time.

    A single watchdog deadline covers the whole sequence, starting with the
    container open. When it expires the in-flight call is left to finish on
    its own (the capture is released once it does) and the frames gathered
    so far are returned.

    Args:
        video_path: Path to the video file
        offsets: Seek points as fractions of the clip duration
        raster_size: (width, height) of the scan raster
        stride: Pixel step for the reduction
        timeout: Watchdog budget in seconds for the whole sequence
        fallback_duration: Duration assumed when it cannot be probed

    Returns:
        SamplingResult with the captured stats and the probed duration

    Raises:
        MediaUnreadable: If the video cannot be opened at all
    """
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    # One worker per run: calls on the capture never overlap
    executor = ThreadPoolExecutor(max_workers=1)
    capture = None
    stats = []
    pending = None
    release_pending = None
    timed_out = False
    duration = None

    try:
        pending = executor.submit(_open_capture, video_path)
        release_pending = _release_when_opened
        try:
            capture, duration = await _await_before(loop, pending, deadline)
        except asyncio.TimeoutError:
            raise FrameSampleTimeout("Video open stalled") from None
        pending = None

        seek_duration = duration or fallback_duration

        for offset in offsets:
            if deadline - loop.time() <= 0:
                raise FrameSampleTimeout(f"Watchdog expired before offset {offset:.2f}")

            position_ms = offset * seek_duration * 1000.0
            pending = executor.submit(read_frame_at, capture, position_ms, raster_size)
            release_pending = _release_when_done(capture)

            try:
                raster = await _await_before(loop, pending, deadline)
                stat = None if raster is None else reduce_frame_pixels(raster, stride)
            except asyncio.TimeoutError:
                raise FrameSampleTimeout(f"Frame at offset {offset:.2f} stalled") from None
            except Exception as e:
                pending = None
                if verbose:
                    print(f"  [WARNING] Decode failed at {offset:.0%}: {e}")
                continue

            pending = None

            if stat is None:
                if verbose:
                    print(f"  [WARNING] No frame at {offset:.0%}, skipping")
                continue

            stats.append(stat)
            if verbose:
                print(f"  -> Frame @ {offset:.0%}: brightness={stat.average_brightness:.1f}, "
                      f"energy={stat.energy_index:.2f}")

    except FrameSampleTimeout as e:
        timed_out = True
        if verbose:
            print(f"  [WARNING] Video processing timeout, finalizing with {len(stats)} frame(s): {e}")

    finally:
        if pending is not None:
            # Runs immediately if the call already finished
            pending.add_done_callback(release_pending)
        elif capture is not None:
            capture.release()
        executor.shutdown(wait=False)

    return SamplingResult(frame_stats=tuple(stats), duration=duration, timed_out=timed_out)
