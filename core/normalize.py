"""
Normalize raw detector faces (Rekognition ``FaceDetails`` shape) into FaceAttributes.
"""
from __future__ import annotations
from typing import Dict, Optional, Tuple

from core.config import Settings
from core.models import BoundingBox, FaceAttributes


def _safe_float(v, d=0.0) -> float:
    try:
        return float(v)
    except (TypeError, ValueError):
        return float(d)


def _flag(raw: Dict, key: str) -> Tuple[Optional[bool], float]:
    blob = raw.get(key) or {}
    value = blob.get("Value")
    return (bool(value) if value is not None else None), _safe_float(blob.get("Confidence"))


def top_emotion(emotions) -> Tuple[str, float]:
    """Highest-confidence emotion; the first entry wins on equal confidence."""
    if not emotions:
        return "Unknown", 0.0
    best = max(emotions, key=lambda e: _safe_float(e.get("Confidence")))
    return (best.get("Type") or "Unknown"), _safe_float(best.get("Confidence"))


def classify_gaze(eye_direction: Optional[Dict],
                  confidence_floor: float = 50.0,
                  yaw_threshold: float = 15.0) -> str:
    if not eye_direction:
        return "Unknown"
    if _safe_float(eye_direction.get("Confidence")) <= confidence_floor:
        return "Unknown"
    yaw = _safe_float(eye_direction.get("Yaw"))
    if yaw < -yaw_threshold:
        return "Left"
    if yaw > yaw_threshold:
        return "Right"
    return "Center"


def parse_bounding_box(raw_box: Optional[Dict]) -> Optional[BoundingBox]:
    if not raw_box:
        return None
    return BoundingBox(
        left=_safe_float(raw_box.get("Left")),
        top=_safe_float(raw_box.get("Top")),
        width=_safe_float(raw_box.get("Width")),
        height=_safe_float(raw_box.get("Height")),
    )


def normalize_face(raw: Optional[Dict], settings: Optional[Settings] = None) -> FaceAttributes:
    """
    Convert one raw detector face into a FaceAttributes record.

    ``raw=None`` (no face) yields a record holding only defaults. Missing
    fields never raise: booleans become unknown (None), confidences and
    angles become 0.
    """
    if not raw:
        return FaceAttributes()

    floor = settings.GAZE_CONFIDENCE_FLOOR if settings else 50.0
    gaze_yaw = settings.GAZE_YAW_THRESHOLD if settings else 15.0

    emotion, emotion_conf = top_emotion(raw.get("Emotions") or [])
    eye_dir = raw.get("EyeDirection") or {}
    eyes_open, eyes_open_conf = _flag(raw, "EyesOpen")
    mouth_open, mouth_open_conf = _flag(raw, "MouthOpen")
    occluded, occluded_conf = _flag(raw, "FaceOccluded")
    smile, smile_conf = _flag(raw, "Smile")
    box = parse_bounding_box(raw.get("BoundingBox"))

    return FaceAttributes(
        emotion=emotion,
        emotion_confidence=emotion_conf,
        eye_direction=classify_gaze(eye_dir, floor, gaze_yaw),
        eye_direction_confidence=_safe_float(eye_dir.get("Confidence")),
        eyes_open=eyes_open,
        eyes_open_confidence=eyes_open_conf,
        mouth_open=mouth_open,
        mouth_open_confidence=mouth_open_conf,
        face_occluded=occluded,
        face_occluded_confidence=occluded_conf,
        smile=smile,
        smile_confidence=smile_conf,
        pose_yaw=_safe_float((raw.get("Pose") or {}).get("Yaw")),
        bounding_box=box,
        bounding_box_area=box.area if box else 0.0,
    )
