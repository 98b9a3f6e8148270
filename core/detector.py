"""
Face detector backends.

Every backend is a callable ``detector(image_bytes) -> list[dict]`` returning
faces in the Rekognition ``FaceDetails`` shape, so the rest of the pipeline
does not care which one ran.

- RekognitionDetector: AWS Rekognition DetectFaces with all attributes.
- DeepFaceDetector: local DeepFace emotion model (emotion + box only).
"""
from __future__ import annotations
from typing import Dict, List, Optional
import logging

import boto3
from botocore.config import Config
import cv2
import numpy as np

from core.config import Settings

logger = logging.getLogger(__name__)


class RekognitionDetector:
    """Thin wrapper around ``rekognition.detect_faces``; boto3 clients are thread-safe."""

    def __init__(self, settings: Settings, client=None):
        self.settings = settings
        if client is None:
            cfg = Config(
                connect_timeout=settings.DETECTOR_TIMEOUT,
                read_timeout=settings.DETECTOR_TIMEOUT,
                retries={"max_attempts": settings.DETECTOR_MAX_ATTEMPTS, "mode": "standard"},
                max_pool_connections=max(10, settings.DETECTOR_CONCURRENCY),
            )
            client = boto3.client("rekognition", region_name=settings.AWS_REGION, config=cfg)
            logger.debug(f"[detector] rekognition client region={settings.AWS_REGION}")
        self.client = client

    def __call__(self, image: bytes) -> List[Dict]:
        response = self.client.detect_faces(Image={"Bytes": image}, Attributes=["ALL"])
        return response.get("FaceDetails") or []


# DeepFace label -> Rekognition emotion type
DEEPFACE_EMOTIONS = {
    "angry": "ANGRY",
    "disgust": "DISGUSTED",
    "fear": "FEAR",
    "happy": "HAPPY",
    "sad": "SAD",
    "surprise": "SURPRISED",
    "neutral": "CALM",
}


class DeepFaceDetector:
    """
    Local fallback using DeepFace emotion analysis.

    Gaze, pose, eyes/mouth/occlusion are not available and are left out of
    the returned faces; the normalizer fills in defaults.

    NOTE: DeepFace is imported lazily so tests can monkeypatch sys.modules['deepface'].
    """
    MIN_DET_CONF = 0.5

    def __init__(self, settings: Settings, detector_backend: str = "opencv"):
        self.settings = settings
        self.detector_backend = detector_backend

    @staticmethod
    def _decode(image: bytes) -> np.ndarray:
        frame = cv2.imdecode(np.frombuffer(image, dtype=np.uint8), cv2.IMREAD_COLOR)
        if frame is None:
            raise ValueError("Could not decode image buffer")
        return frame

    def _to_face(self, r: Dict, img_w: int, img_h: int) -> Optional[Dict]:
        conf = r.get("face_confidence")
        try:
            conf = float(conf) if conf is not None else 1.0
        except (TypeError, ValueError):
            conf = 1.0
        if conf < self.MIN_DET_CONF:
            return None

        reg = r.get("region") or {}
        x, y = float(reg.get("x", 0)), float(reg.get("y", 0))
        w, h = float(reg.get("w", 0)), float(reg.get("h", 0))
        scores = r.get("emotion") or {}
        emotions = [
            {"Type": DEEPFACE_EMOTIONS.get(str(label).lower(), str(label).upper()), "Confidence": float(score)}
            for label, score in scores.items()
        ]
        return {
            "Emotions": emotions,
            "BoundingBox": {
                "Left": x / img_w,
                "Top": y / img_h,
                "Width": w / img_w,
                "Height": h / img_h,
            },
        }

    def __call__(self, image: bytes) -> List[Dict]:
        try:
            from deepface import DeepFace
        except Exception as e:
            raise RuntimeError("DeepFace import failed. Ensure deepface/tensorflow stack is installed.") from e

        frame = self._decode(image)
        img_h, img_w = frame.shape[:2]
        result = DeepFace.analyze(
            frame,
            actions=["emotion"],
            enforce_detection=False,
            detector_backend=self.detector_backend,
        )
        # DeepFace returns list[dict] or dict depending on version; normalize to list
        if isinstance(result, dict):
            result = [result]
        faces = []
        for r in result or []:
            face = self._to_face(r, img_w, img_h)
            if face is not None:
                faces.append(face)
        return faces


def build_detector(settings: Settings):
    backend = settings.DETECTOR_BACKEND
    if backend == "rekognition":
        return RekognitionDetector(settings)
    if backend == "deepface":
        return DeepFaceDetector(settings)
    raise ValueError(f"Unknown detector backend: {backend}")
