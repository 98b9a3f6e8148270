import numpy as np, cv2
import pytest

from core.frames import encode_jpeg, sample_frames, scale_to_width


def _decode(buf):
    return cv2.imdecode(np.frombuffer(buf, dtype=np.uint8), cv2.IMREAD_COLOR)


def test_sample_frames_at_one_fps(tiny_video):
    path = tiny_video(n_frames=10, fps=5)
    frames = list(sample_frames(path, sample_fps=1.0, width=640))
    assert len(frames) == 2
    assert all(f[:2] == b"\xff\xd8" for f in frames)
    # smaller than target width -> not upscaled
    assert _decode(frames[0]).shape[:2] == (32, 32)


def test_sample_frames_every_frame(tiny_video):
    path = tiny_video(n_frames=10, fps=5)
    assert len(list(sample_frames(path, sample_fps=5.0))) == 10


def test_sample_frames_downscales(tiny_video):
    path = tiny_video(n_frames=3, fps=5, w=64, h=48, name="wide.avi")
    frames = list(sample_frames(path, sample_fps=5.0, width=32))
    assert _decode(frames[0]).shape[:2] == (24, 32)


def test_sample_frames_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        sample_frames(str(tmp_path / "missing.mp4"))
    bogus = tmp_path / "bogus.mp4"
    bogus.write_bytes(b"not a video")
    with pytest.raises(RuntimeError):
        sample_frames(str(bogus))
    with pytest.raises(ValueError):
        sample_frames(str(bogus), sample_fps=0)


def test_scale_and_encode_helpers():
    frame = np.zeros((100, 200, 3), dtype=np.uint8)
    assert scale_to_width(frame, 100).shape[:2] == (50, 100)
    assert scale_to_width(frame, 0) is frame
    assert encode_jpeg(frame, 70)[:2] == b"\xff\xd8"
