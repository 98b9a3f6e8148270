"""
Cross-frame identity tracking by bounding-box centroid proximity.
"""
from __future__ import annotations
import logging
import math
from typing import Dict, Optional, Tuple

from core.models import FaceAttributes

logger = logging.getLogger(__name__)


class TrackedIdentity:
    """Last known position of one person."""
    def __init__(self, person_id: str, cx: float, cy: float, last_seen_frame: int):
        self.person_id = person_id
        self.cx = cx
        self.cy = cy
        self.last_seen_frame = last_seen_frame

    def __repr__(self) -> str:
        return (f"TrackedIdentity({self.person_id!r}, cx={self.cx:.3f}, cy={self.cy:.3f}, "
                f"last_seen_frame={self.last_seen_frame})")


def face_centroid(face: FaceAttributes) -> Tuple[float, float]:
    if face.bounding_box is None:
        return 0.5, 0.5
    return face.bounding_box.center


class IdentityTracker:
    """
    Assign stable ``person_<n>`` ids to faces across the frames of one video.

    A face matches the nearest identity seen within the last ``stale_frames``
    frames when the centroid distance is below ``distance_threshold``;
    otherwise it gets a fresh id. Ids are never reused. On an exact distance
    tie the lowest id wins. Matching is not exclusive within a frame.

    Not thread-safe: call ``assign`` in ascending frame order from one thread.
    """
    def __init__(self, distance_threshold: float = 0.15, stale_frames: int = 300):
        self.distance_threshold = float(distance_threshold)
        self.stale_frames = int(stale_frames)
        self._next_id = 1
        # insertion order == ascending numeric id
        self._tracked: Dict[str, TrackedIdentity] = {}

    @property
    def identities(self) -> Dict[str, TrackedIdentity]:
        return dict(self._tracked)

    def _nearest(self, cx: float, cy: float, frame_index: int) -> Tuple[Optional[str], float]:
        best_id, best_dist = None, math.inf
        for pid, ident in self._tracked.items():
            if frame_index - ident.last_seen_frame > self.stale_frames:
                continue
            dist = math.hypot(ident.cx - cx, ident.cy - cy)
            if dist < best_dist:
                best_id, best_dist = pid, dist
        return best_id, best_dist

    def assign(self, face: FaceAttributes, frame_index: int) -> str:
        cx, cy = face_centroid(face)
        best_id, best_dist = self._nearest(cx, cy, frame_index)

        if best_id is not None and best_dist < self.distance_threshold:
            ident = self._tracked[best_id]
            ident.cx, ident.cy, ident.last_seen_frame = cx, cy, frame_index
            return best_id

        new_id = f"person_{self._next_id}"
        self._next_id += 1
        self._tracked[new_id] = TrackedIdentity(new_id, cx, cy, frame_index)
        logger.debug(f"[tracking] frame={frame_index} new identity {new_id} at ({cx:.3f},{cy:.3f})")
        return new_id
