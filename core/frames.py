"""
Frame sampling: decode a video with OpenCV and yield JPEG buffers at a fixed rate.
"""
# core/frames.py
from __future__ import annotations
from typing import Iterator
import logging
import os

import cv2
import numpy as np

logger = logging.getLogger(__name__)


def scale_to_width(frame: np.ndarray, width: int) -> np.ndarray:
    """Downscale to ``width`` keeping aspect ratio; smaller frames pass through."""
    h, w = frame.shape[:2]
    if not width or w <= width:
        return frame
    new_h = max(1, int(round(h * width / float(w))))
    return cv2.resize(frame, (int(width), new_h), interpolation=cv2.INTER_AREA)


def encode_jpeg(frame: np.ndarray, quality: int = 85) -> bytes:
    ok, buf = cv2.imencode(".jpg", frame, [cv2.IMWRITE_JPEG_QUALITY, int(quality)])
    if not ok or buf is None:
        raise RuntimeError("Failed to encode frame to JPEG")
    return buf.tobytes()


def _iter_samples(cap, fps: float, sample_fps: float, width: int, jpeg_quality: int) -> Iterator[bytes]:
    step = 1.0 / sample_fps
    next_t = 0.0
    frame_index = 0
    emitted = 0
    try:
        while True:
            ok, frame = cap.read()
            if not ok:
                break
            t = frame_index / fps
            if t + 1e-6 >= next_t:
                yield encode_jpeg(scale_to_width(frame, width), jpeg_quality)
                emitted += 1
                while next_t <= t + 1e-6:
                    next_t += step
            frame_index += 1
    finally:
        cap.release()
        logger.debug(f"[frames] released capture; decoded={frame_index} sampled={emitted}")


def sample_frames(
    video_path: str,
    sample_fps: float = 1.0,
    width: int = 640,
    jpeg_quality: int = 85,
) -> Iterator[bytes]:
    """
    Sample a video into JPEG-encoded still frames.

    The first decoded frame at or after each ``k / sample_fps`` second is
    taken, downscaled to ``width`` and JPEG-encoded. The result is a finite,
    non-restartable iterator; frame index == position in the stream.

    Raises:
        FileNotFoundError: Input file missing.
        RuntimeError: OpenCV cannot open the file.
        ValueError: Non-positive sample rate.
    """
    if not os.path.exists(video_path):
        raise FileNotFoundError(f"Video not found: {video_path}")
    if sample_fps <= 0:
        raise ValueError(f"sample_fps must be positive, got {sample_fps}")

    logger.debug(f"[frames] open video: {video_path}")
    cap = cv2.VideoCapture(str(video_path))
    if not cap.isOpened():
        raise RuntimeError(f"Could not open video: {video_path}")

    fps = cap.get(cv2.CAP_PROP_FPS) or 25.0
    logger.debug(f"[frames] fps={fps} sample_fps={sample_fps} width={width}")
    return _iter_samples(cap, float(fps), float(sample_fps), width, jpeg_quality)
