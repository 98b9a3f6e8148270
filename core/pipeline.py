# core/pipeline.py
from __future__ import annotations
from typing import Callable, Iterable, List, Optional
import logging
import os

from core.config import Settings
from core.aggregate import Aggregator
from core.detector import build_detector
from core.dispatch import dispatch_frames
from core.distraction import classify_distraction
from core.frames import sample_frames
from core.models import AnalysisSummary, FrameError
from core.normalize import normalize_face
from core.roles import assign_roles
from core.tracking import IdentityTracker

logger = logging.getLogger(__name__)

Detector = Callable[[bytes], List[dict]]


def _process_frame(index: int, raw_faces: List[dict], tracker: IdentityTracker,
                   aggregator: Aggregator, settings: Settings) -> int:
    """Normalize, role-split, track, classify and fold one frame. Returns faces folded."""
    faces = [normalize_face(f, settings) for f in raw_faces]
    roled = assign_roles(faces)
    for face in roled:
        person_id = tracker.assign(face, index)
        verdict = classify_distraction(face, settings.TURN_YAW_THRESHOLD)
        aggregator.add(index, face, person_id, verdict)
    return len(roled)


def analyze_frames(frames: Iterable[bytes], detect: Detector, settings: Settings) -> AnalysisSummary:
    """
    Run the frame-analysis pipeline over already-sampled frames.

    Detector calls run concurrently; tracking and aggregation are applied
    one frame at a time in ascending frame order. Each call owns a fresh
    tracker, so concurrent analyses do not share identities.
    """
    tracker = IdentityTracker(settings.CENTER_DISTANCE_THRESHOLD, settings.STALE_FRAMES)
    aggregator = Aggregator(settings)
    errors: List[FrameError] = []
    frames_seen = 0
    fps = settings.SAMPLE_FPS or 1.0

    for det in dispatch_frames(frames, detect, settings.DETECTOR_CONCURRENCY):
        frames_seen += 1
        if det.failed:
            errors.append(FrameError(
                index=det.index,
                timestamp=round(det.index / fps, 2),
                error=det.error,
                message=det.message or "",
            ))
            continue
        n = _process_frame(det.index, det.faces, tracker, aggregator, settings)
        logger.debug(f"[pipeline] frame={det.index} faces={n}")

    if errors:
        logger.warning(f"[pipeline] {len(errors)} of {frames_seen} frames failed detection")
        if settings.FAIL_ON_DETECTOR_ERROR:
            failed = ", ".join(str(e.index) for e in errors)
            raise RuntimeError(f"Detector failed on frames: {failed}")

    parts = aggregator.finalize()
    logger.debug(f"[pipeline] analyzed frames={frames_seen} identities={len(tracker.identities)}")
    return AnalysisSummary(
        frames_analyzed=frames_seen,
        sample_fps=fps,
        errors=errors,
        **parts,
    )


def analyze_video_pipeline(video_path: str, settings: Settings,
                           detect: Optional[Detector] = None) -> AnalysisSummary:
    """
    Full pipeline for a video: sample frames, detect faces, track, classify, aggregate.

    Decoder failures (missing file, unreadable video) propagate; no partial
    summary is produced.
    """
    if not os.path.exists(video_path):
        raise FileNotFoundError(f"Video not found: {video_path}")

    logger.debug(f"[pipeline] analyze_video_pipeline start video_path={video_path}")
    if detect is None:
        detect = build_detector(settings)
    frames = sample_frames(
        video_path,
        sample_fps=settings.SAMPLE_FPS,
        width=settings.FRAME_WIDTH,
        jpeg_quality=settings.JPEG_QUALITY,
    )

    summary = analyze_frames(frames, detect, settings)
    logger.debug("[pipeline] analyze_video_pipeline finished successfully")
    return summary
