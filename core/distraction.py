"""
Per-face distraction heuristic.
"""
from __future__ import annotations
from typing import List

from core.models import DistractionVerdict, FaceAttributes


def distraction_triggers(face: FaceAttributes, yaw_threshold: float = 25.0) -> List[str]:
    triggers = []
    if abs(face.pose_yaw) > yaw_threshold:
        triggers.append("turned")
    if face.eye_direction not in ("Center", "Unknown"):
        triggers.append("eyesAway")
    if face.face_occluded is True:
        triggers.append("occluded")
    return triggers


def classify_distraction(face: FaceAttributes, yaw_threshold: float = 25.0) -> DistractionVerdict:
    """
    One trigger reports its own name; two or more collapse to "multiple".
    """
    triggers = distraction_triggers(face, yaw_threshold)
    if not triggers:
        return DistractionVerdict(distracted=False, reason="none")
    if len(triggers) == 1:
        return DistractionVerdict(distracted=True, reason=triggers[0])
    return DistractionVerdict(distracted=True, reason="multiple")
