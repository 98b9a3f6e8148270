"""
Configuration for the frame-analysis pipeline.
"""
from pydantic import BaseModel
import os


def _env_bool(name: str, default: str = "false") -> bool:
    return (os.getenv(name, default) or default).strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    """
    Runtime settings with environment-variable overrides.
    """
    # Frame sampling
    SAMPLE_FPS: float = float(os.getenv("SAMPLE_FPS", "1"))
    FRAME_WIDTH: int = int(os.getenv("FRAME_WIDTH", "640"))
    JPEG_QUALITY: int = int(os.getenv("JPEG_QUALITY", "85"))

    # Detector
    DETECTOR_BACKEND: str = (os.getenv("DETECTOR_BACKEND", "rekognition") or "rekognition")
    DETECTOR_CONCURRENCY: int = int(os.getenv("DETECTOR_CONCURRENCY", "6"))
    DETECTOR_TIMEOUT: float = float(os.getenv("DETECTOR_TIMEOUT", "30"))
    DETECTOR_MAX_ATTEMPTS: int = int(os.getenv("DETECTOR_MAX_ATTEMPTS", "3"))
    AWS_REGION: str = os.getenv("AWS_REGION", "us-east-1")
    FAIL_ON_DETECTOR_ERROR: bool = _env_bool("FAIL_ON_DETECTOR_ERROR")

    # Identity tracking
    CENTER_DISTANCE_THRESHOLD: float = float(os.getenv("CENTER_DISTANCE_THRESHOLD", "0.15"))
    STALE_FRAMES: int = int(os.getenv("STALE_FRAMES", "300"))

    # Classification
    TURN_YAW_THRESHOLD: float = float(os.getenv("TURN_YAW_THRESHOLD", "25"))
    GAZE_CONFIDENCE_FLOOR: float = float(os.getenv("GAZE_CONFIDENCE_FLOOR", "50"))
    GAZE_YAW_THRESHOLD: float = float(os.getenv("GAZE_YAW_THRESHOLD", "15"))
    SPEAKING_CONFIDENCE_FLOOR: float = float(os.getenv("SPEAKING_CONFIDENCE_FLOOR", "70"))

    OUTPUT_DIR: str = os.getenv("OUTPUT_DIR", "output")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "DEBUG")

    def __init__(self, **data):
        super().__init__(**data)
        # Normalize backend name and keep at least one detector slot
        backend = (self.DETECTOR_BACKEND or "rekognition").strip().split()[0].lower()
        object.__setattr__(self, "DETECTOR_BACKEND", backend)
        object.__setattr__(self, "DETECTOR_CONCURRENCY", max(1, int(self.DETECTOR_CONCURRENCY)))
