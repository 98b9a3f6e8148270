import numpy as np, cv2
import pytest

from core.config import Settings


def _raw_face(cx=0.5, cy=0.5, size=0.2, yaw=0.0, eye_yaw=0.0, eye_conf=99.0,
              occluded=False, eyes_open=True, mouth_open=False, mouth_conf=90.0,
              emotion="CALM", emotion_conf=90.0, smile=False):
    """Rekognition FaceDetails-shaped dict centred on (cx, cy)."""
    return {
        "BoundingBox": {"Left": cx - size / 2, "Top": cy - size / 2, "Width": size, "Height": size},
        "Emotions": [{"Type": emotion, "Confidence": emotion_conf}],
        "EyeDirection": {"Yaw": eye_yaw, "Pitch": 0.0, "Confidence": eye_conf},
        "EyesOpen": {"Value": eyes_open, "Confidence": 95.0},
        "MouthOpen": {"Value": mouth_open, "Confidence": mouth_conf},
        "FaceOccluded": {"Value": occluded, "Confidence": 95.0},
        "Smile": {"Value": smile, "Confidence": 90.0},
        "Pose": {"Yaw": yaw, "Pitch": 0.0, "Roll": 0.0},
    }


@pytest.fixture
def raw_face():
    return _raw_face


@pytest.fixture
def settings():
    return Settings(SAMPLE_FPS=1.0, DETECTOR_CONCURRENCY=4, FAIL_ON_DETECTOR_ERROR=False)


@pytest.fixture
def tiny_video(tmp_path):
    """Write a small MJPG video and return its path: 10 frames @ 5fps."""
    def _make(n_frames=10, fps=5, w=32, h=32, name="tiny.avi"):
        path = str(tmp_path / name)
        fourcc = cv2.VideoWriter_fourcc(*"MJPG")
        writer = cv2.VideoWriter(path, fourcc, fps, (w, h))
        assert writer.isOpened(), "OpenCV VideoWriter failed to open"
        for i in range(n_frames):
            frame = np.full((h, w, 3), i * 10 % 255, dtype=np.uint8)
            writer.write(frame)
        writer.release()
        return path
    return _make
