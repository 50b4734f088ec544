"""
pipeline.py
End-to-end analysis: sample frames -> summary signal -> metrics -> narrative
-> schedule, assembled into one AnalysisReport.
"""

import asyncio
import json
import os
import random
import sys
import tempfile
from datetime import datetime
from pathlib import Path

from kinetics.config import (
    DEFAULT_CONFIG,
    get_raster_size,
    get_sample_offsets,
    get_storage_dir,
    load_config,
    resolve_config,
)
from kinetics.errors import InputTooLarge, MediaUnreadable
from kinetics.frame_sampler import SamplingResult, sample_frames
from kinetics.metrics import derive_metrics
from kinetics.models import Activity, AnalysisReport, StatusTier, SummarySignal
from kinetics.narrative import compose_narrative, projected_improvement, weakest_category
from kinetics.schedule import generate_schedule
from kinetics.signals import aggregate_signal
from kinetics.storage import ReportStore
from kinetics.timeseries import synthesize_time_series


# ============================================================================
# Input Guards
# ============================================================================

def check_upload_size(size_bytes: int, limit_bytes: int = None) -> None:
    """
    Reject uploads above the size ceiling.

    Raises:
        InputTooLarge: If size_bytes exceeds the limit
    """
    if limit_bytes is None:
        limit_bytes = DEFAULT_CONFIG['max_upload_bytes']
    if size_bytes > limit_bytes:
        raise InputTooLarge(size_bytes, limit_bytes)


def _source_size(source) -> int:
    if isinstance(source, (bytes, bytearray)):
        return len(source)

    path = Path(source)
    if not path.is_file():
        raise MediaUnreadable(f"Video not found: {source}")
    return path.stat().st_size


# ============================================================================
# Report Assembly
# ============================================================================

def build_report(signal: SummarySignal, activity, duration: float = None,
                 rng=None, config: dict = None) -> AnalysisReport:
    """
    Derive every report section from the summary signal.

    Args:
        signal: Aggregated motion energy for the run
        activity: Activity or its name
        duration: Clip duration in seconds (None if it could not be probed)
        rng: random.Random-compatible source for the jitter fields
        config: Engine configuration

    Returns:
        Immutable AnalysisReport
    """
    activity = Activity.parse(activity)
    config = resolve_config(config)
    rng = rng or random.Random()

    bundle = derive_metrics(signal.motion_energy, activity, rng=rng)
    narrative = compose_narrative(bundle, activity)
    weakness = weakest_category(narrative.categories)
    schedule = generate_schedule(activity, weakness)
    series = synthesize_time_series(
        activity, duration or config['fallback_series_duration'], rng=rng
    )

    return AnalysisReport(
        activity=activity,
        summary=narrative.summary,
        tips=narrative.tips,
        categories=narrative.categories,
        actions=narrative.actions,
        projected_improvement=projected_improvement(signal.motion_energy),
        metrics=bundle,
        time_series=series,
        schedule=schedule,
        motion_energy=signal.motion_energy,
        frames_sampled=signal.frame_count,
    )


def _spool_upload(payload) -> str:
    """Write uploaded bytes to a temp clip and return its path."""
    tmp = tempfile.NamedTemporaryFile(suffix='.mp4', delete=False)
    try:
        with tmp:
            tmp.write(payload)
    except OSError:
        os.unlink(tmp.name)
        raise
    return tmp.name


async def _run_analysis(source, activity: Activity, config: dict, rng, verbose: bool) -> AnalysisReport:
    temp_path = None

    try:
        if isinstance(source, (bytes, bytearray)):
            temp_path = await asyncio.get_running_loop().run_in_executor(None, _spool_upload, source)
            video_path = temp_path
        else:
            video_path = str(source)

        if verbose:
            print(f"\n[VIDEO] {video_path if temp_path is None else 'uploaded clip'} ({activity.value} mode)")
            print("\n[1/4] Sampling frames...")

        try:
            sampling = await sample_frames(
                video_path,
                offsets=get_sample_offsets(config),
                raster_size=get_raster_size(config),
                stride=int(config['pixel_stride']),
                timeout=float(config['frame_timeout_seconds']),
                fallback_duration=float(config['fallback_seek_duration']),
                verbose=verbose,
            )
        except MediaUnreadable as e:
            if verbose:
                print(f"  [WARNING] {e}")
                print("  -> Continuing with a zero motion signal")
            sampling = SamplingResult(frame_stats=(), duration=None)

        if verbose:
            print("\n[2/4] Aggregating motion signal...")
        signal = aggregate_signal(sampling.frame_stats)
        if verbose:
            print(f"  -> Motion energy: {signal.motion_energy:.2f} "
                  f"from {signal.frame_count} frame(s)")
            print("\n[3/4] Deriving metrics, assessments and schedule...")

        report = build_report(signal, activity, sampling.duration, rng=rng, config=config)

        if verbose:
            weak = [c.name for c in report.categories if c.status == StatusTier.WEAK]
            print(f"  -> Weak areas: {', '.join(weak) if weak else 'none'}")
            print("\n[4/4] Report ready")
            print(f"  -> {report.summary}")

        return report

    finally:
        if temp_path is not None:
            try:
                os.unlink(temp_path)
            except OSError as e:
                print(f"  [WARNING] Could not remove temporary clip: {e}")


def analyze_video(source, activity, config: dict = None, rng=None, verbose: bool = True):
    """
    Validate the input and return an awaitable that resolves to a report.

    The size ceiling and the missing/empty-input checks run immediately, so
    InputTooLarge and MediaUnreadable surface at call time, before any frame
    work is scheduled. Decode problems after that point never fail the run:
    the report degrades to whatever frames were captured (possibly none).

    Args:
        source: Path to a video file, or its raw bytes
        activity: Activity or its name
        config: Engine configuration (defaults + optional YAML)
        rng: random.Random-compatible source for the jitter fields
        verbose: Print progress lines

    Returns:
        Coroutine resolving to an AnalysisReport

    Raises:
        InputTooLarge: If the input exceeds the configured ceiling
        MediaUnreadable: If the input is missing or empty
    """
    config = resolve_config(config)
    activity = Activity.parse(activity)

    size = _source_size(source)
    check_upload_size(size, int(config['max_upload_bytes']))
    if size == 0:
        raise MediaUnreadable("Video file is empty")

    return _run_analysis(source, activity, config, rng, verbose)


def analyze_video_sync(source, activity, config: dict = None, rng=None, verbose: bool = True) -> AnalysisReport:
    """Blocking wrapper for scripts and the dashboard."""
    return asyncio.run(analyze_video(source, activity, config=config, rng=rng, verbose=verbose))


# ============================================================================
# CLI
# ============================================================================

def generate_session_id() -> str:
    """Session ID in format: YYYY-MM-DD_HH-MM-SS"""
    return datetime.now().strftime("%Y-%m-%d_%H-%M-%S")


def run_pipeline(video_path: str, sport: str, config_path: str = None,
                 user_id: int = None, output_path: str = None, verbose: bool = True) -> bool:
    """
    Analyze one clip from the command line and write the report as JSON.

    Returns:
        True on success, False if the input was rejected
    """
    config = load_config(config_path)

    if verbose:
        print("=" * 60)
        print("Kinetics Coach - Biomechanics Analysis")
        print("=" * 60)

    try:
        report = analyze_video_sync(video_path, sport, config=config, verbose=verbose)
    except InputTooLarge as e:
        print(f"\n[ERROR] {e}")
        return False
    except MediaUnreadable as e:
        print(f"\n[ERROR] {e}")
        print("   Please provide a valid video file.")
        return False

    if output_path is None:
        output_path = get_storage_dir(config) / generate_session_id() / "report.json"
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(report.to_dict(), f, indent=2)

    if user_id is not None:
        budget = int(config['media_budget_bytes'])
        store = ReportStore(get_storage_dir(config), budget)
        media = None
        if Path(video_path).stat().st_size <= budget:
            media = Path(video_path).read_bytes()
        elif verbose:
            print("  [WARNING] Clip exceeds the media budget, saving the report only")
        store.save_analysis(user_id, report, media=media, media_suffix=Path(video_path).suffix or '.mp4')

    if verbose:
        print("\n" + "=" * 60)
        print("ANALYSIS COMPLETE!")
        print("=" * 60)
        print(f"\nProjected improvement: {report.projected_improvement}")
        print(f"Report saved to: {output_path}")

    return True


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Kinetics Coach - Biomechanics Analysis")
    parser.add_argument('video', type=str, help='Path to the input video')
    parser.add_argument(
        '--sport',
        type=str,
        default=Activity.ATHLETICS.value,
        choices=[a.value for a in Activity],
        help='Activity context for the analysis'
    )
    parser.add_argument('--config', type=str, default=None, help='Path to YAML configuration file (optional)')
    parser.add_argument('--user-id', type=int, default=None, help='Save the report for this user id')
    parser.add_argument('--output', type=str, default=None, help='Where to write report.json')
    parser.add_argument('--quiet', action='store_true', help='Suppress progress output')

    args = parser.parse_args()

    success = run_pipeline(
        args.video,
        args.sport,
        config_path=args.config,
        user_id=args.user_id,
        output_path=args.output,
        verbose=not args.quiet,
    )
    sys.exit(0 if success else 1)
