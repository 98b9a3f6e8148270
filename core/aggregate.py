"""
Streaming aggregation of classified faces into run-level metrics.
"""
from __future__ import annotations
from typing import Dict, List, Optional
import logging

from core.config import Settings
from core.models import (
    INFINITE_RATIO,
    DistractionSummary,
    DistractionVerdict,
    EmotionBalance,
    EyesMouthCounts,
    FrameRow,
    RoledFace,
    SpeakingRatio,
)

logger = logging.getLogger(__name__)

POSITIVE_EMOTIONS = frozenset({"HAPPY", "SURPRISED"})
NEGATIVE_EMOTIONS = frozenset({"SAD", "ANGRY", "DISGUSTED", "CONFUSED", "FEAR"})


def _rate(part: int, whole: int, ndigits: Optional[int] = None) -> float:
    if not whole:
        return 0.0
    value = part / whole
    return round(value, ndigits) if ndigits is not None else value


class Aggregator:
    """
    Single-pass fold over (frame, face, person id, verdict) tuples.

    Feed ``add`` in ascending frame order, then call ``finalize`` exactly once.
    """
    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings()
        self.rows: List[FrameRow] = []
        self.emotion_counts: Dict[str, Dict[str, int]] = {}
        self.distraction: Dict[str, DistractionSummary] = {}
        self.speaker_speaking = 0
        self.audience_speaking = 0
        self.audience_positive = 0
        self.audience_negative = 0
        self.eye_directions: Dict[str, int] = {"Left": 0, "Right": 0, "Center": 0, "Unknown": 0}
        self.eyes_mouth = EyesMouthCounts()
        self._finalized = False

    def _timestamp(self, frame_index: int) -> float:
        fps = self.settings.SAMPLE_FPS or 1.0
        return round(frame_index / fps, 2)

    def add(self, frame_index: int, face: RoledFace, person_id: str, verdict: DistractionVerdict) -> None:
        if self._finalized:
            raise RuntimeError("Aggregator already finalized")

        # speaking
        if face.mouth_open is True and face.mouth_open_confidence > self.settings.SPEAKING_CONFIDENCE_FLOOR:
            if face.role == "speaker":
                self.speaker_speaking += 1
            else:
                self.audience_speaking += 1

        # audience emotion balance
        if face.role == "audience":
            if face.emotion in POSITIVE_EMOTIONS:
                self.audience_positive += 1
            elif face.emotion in NEGATIVE_EMOTIONS:
                self.audience_negative += 1

        counts = self.emotion_counts.setdefault(person_id, {})
        counts[face.emotion] = counts.get(face.emotion, 0) + 1

        rec = self.distraction.setdefault(person_id, DistractionSummary())
        rec.total_frames += 1
        if verdict.distracted:
            rec.distracted_frames += 1
            rec.reason_breakdown[verdict.reason] = rec.reason_breakdown.get(verdict.reason, 0) + 1

        self.eye_directions[face.eye_direction] = self.eye_directions.get(face.eye_direction, 0) + 1
        em = self.eyes_mouth
        if face.eyes_open is None:
            em.eyes_unknown += 1
        elif face.eyes_open:
            em.eyes_open += 1
        else:
            em.eyes_closed += 1
        if face.mouth_open is None:
            em.mouth_unknown += 1
        elif face.mouth_open:
            em.mouth_open += 1
        else:
            em.mouth_closed += 1

        self.rows.append(FrameRow(
            frame=frame_index,
            timestamp=self._timestamp(frame_index),
            person_id=person_id,
            role=face.role,
            emotion=face.emotion,
            emotion_confidence=face.emotion_confidence,
            eye_direction=face.eye_direction,
            eyes_open=face.eyes_open,
            mouth_open=face.mouth_open,
            smile=face.smile,
            pose_yaw=face.pose_yaw,
            distracted=verdict.distracted,
            distraction_reason=verdict.reason,
        ))

    def finalize(self) -> Dict:
        """
        Compute rates and return the summary parts.

        Returns:
          {
            "rows", "emotion_frequencies", "distraction",
            "speaking_ratio", "audience_emotion_balance",
            "eye_direction_histogram", "eyes_mouth_counts"
          }
        """
        if self._finalized:
            raise RuntimeError("Aggregator already finalized")
        self._finalized = True

        for rec in self.distraction.values():
            rec.distraction_rate = _rate(rec.distracted_frames, rec.total_frames)

        if self.audience_speaking == 0:
            ratio = INFINITE_RATIO
        else:
            ratio = round(self.speaker_speaking / self.audience_speaking, 3)

        total_emotions = self.audience_positive + self.audience_negative
        balance = EmotionBalance(
            positive=self.audience_positive,
            negative=self.audience_negative,
            positive_rate=_rate(self.audience_positive, total_emotions, 3),
            negative_rate=_rate(self.audience_negative, total_emotions, 3),
        )
        logger.debug(f"[aggregate] finalized people={len(self.distraction)} rows={len(self.rows)}")

        return {
            "rows": self.rows,
            "emotion_frequencies": {pid: dict(c) for pid, c in self.emotion_counts.items()},
            "distraction": self.distraction,
            "speaking_ratio": SpeakingRatio(
                speaker_speaking_frames=self.speaker_speaking,
                audience_speaking_frames=self.audience_speaking,
                speaker_vs_audience_ratio=ratio,
            ),
            "audience_emotion_balance": balance,
            "eye_direction_histogram": dict(self.eye_directions),
            "eyes_mouth_counts": self.eyes_mouth,
        }
