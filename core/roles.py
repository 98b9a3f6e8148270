"""
Speaker / audience separation within a single frame.
"""
from __future__ import annotations
from typing import List, Optional, Tuple

from core.models import FaceAttributes, RoledFace


def separate_roles(faces: List[FaceAttributes]) -> Tuple[Optional[FaceAttributes], List[FaceAttributes]]:
    """
    Largest bounding box is the speaker, everyone else is audience.

    The sort is stable, so faces with equal area keep detector order.
    """
    if not faces:
        return None, []
    ordered = sorted(faces, key=lambda f: f.bounding_box_area, reverse=True)
    return ordered[0], ordered[1:]


def assign_roles(faces: List[FaceAttributes]) -> List[RoledFace]:
    speaker, audience = separate_roles(faces)
    if speaker is None:
        return []
    roled = [RoledFace(**speaker.model_dump(), role="speaker")]
    roled.extend(RoledFace(**f.model_dump(), role="audience") for f in audience)
    return roled
