"""
Pydantic data models for per-frame face records and run summaries.
"""
from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Optional, Literal, Tuple, Union

EyeDirection = Literal["Left", "Right", "Center", "Unknown"]
Role = Literal["speaker", "audience"]
DistractionReason = Literal["none", "turned", "eyesAway", "occluded", "multiple"]

# Returned instead of a ratio when the audience never speaks
INFINITE_RATIO = "Infinity"


class BoundingBox(BaseModel):
    """Box in normalized [0, 1] image coordinates."""
    model_config = ConfigDict(frozen=True)

    left: float = 0.0
    top: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @property
    def center(self) -> Tuple[float, float]:
        return self.left + self.width / 2, self.top + self.height / 2

    @property
    def area(self) -> float:
        return self.width * self.height


class FaceAttributes(BaseModel):
    model_config = ConfigDict(frozen=True)

    emotion: str = "Unknown"
    emotion_confidence: float = 0.0
    eye_direction: EyeDirection = "Unknown"
    eye_direction_confidence: float = 0.0
    eyes_open: Optional[bool] = None
    eyes_open_confidence: float = 0.0
    mouth_open: Optional[bool] = None
    mouth_open_confidence: float = 0.0
    face_occluded: Optional[bool] = None
    face_occluded_confidence: float = 0.0
    smile: Optional[bool] = None
    smile_confidence: float = 0.0
    pose_yaw: float = 0.0
    bounding_box: Optional[BoundingBox] = None
    bounding_box_area: float = 0.0


class RoledFace(FaceAttributes):
    role: Role


class DistractionVerdict(BaseModel):
    model_config = ConfigDict(frozen=True)

    distracted: bool = False
    reason: DistractionReason = "none"


class FrameDetection(BaseModel):
    """Detector output re-associated with the frame that produced it."""
    index: int
    faces: List[dict] = Field(default_factory=list)
    error: Optional[str] = None
    message: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


class FrameError(BaseModel):
    index: int
    timestamp: float
    error: str
    message: str = ""


class FrameRow(BaseModel):
    frame: int
    timestamp: float
    person_id: str
    role: Role
    emotion: str
    emotion_confidence: float
    eye_direction: EyeDirection
    eyes_open: Optional[bool] = None
    mouth_open: Optional[bool] = None
    smile: Optional[bool] = None
    pose_yaw: float
    distracted: bool
    distraction_reason: DistractionReason


def _empty_breakdown() -> Dict[str, int]:
    return {"turned": 0, "eyesAway": 0, "occluded": 0, "multiple": 0}


class DistractionSummary(BaseModel):
    total_frames: int = 0
    distracted_frames: int = 0
    reason_breakdown: Dict[str, int] = Field(default_factory=_empty_breakdown)
    distraction_rate: float = 0.0


class SpeakingRatio(BaseModel):
    speaker_speaking_frames: int = 0
    audience_speaking_frames: int = 0
    speaker_vs_audience_ratio: Union[float, Literal["Infinity"]] = INFINITE_RATIO


class EmotionBalance(BaseModel):
    positive: int = 0
    negative: int = 0
    positive_rate: float = 0.0
    negative_rate: float = 0.0


class EyesMouthCounts(BaseModel):
    eyes_open: int = 0
    eyes_closed: int = 0
    eyes_unknown: int = 0
    mouth_open: int = 0
    mouth_closed: int = 0
    mouth_unknown: int = 0


def _empty_histogram() -> Dict[str, int]:
    return {"Left": 0, "Right": 0, "Center": 0, "Unknown": 0}


class AnalysisSummary(BaseModel):
    frames_analyzed: int = 0
    sample_fps: float = 1.0
    rows: List[FrameRow] = Field(default_factory=list)
    emotion_frequencies: Dict[str, Dict[str, int]] = Field(default_factory=dict)
    distraction: Dict[str, DistractionSummary] = Field(default_factory=dict)
    speaking_ratio: SpeakingRatio = Field(default_factory=SpeakingRatio)
    audience_emotion_balance: EmotionBalance = Field(default_factory=EmotionBalance)
    eye_direction_histogram: Dict[str, int] = Field(default_factory=_empty_histogram)
    eyes_mouth_counts: EyesMouthCounts = Field(default_factory=EyesMouthCounts)
    errors: List[FrameError] = Field(default_factory=list)
