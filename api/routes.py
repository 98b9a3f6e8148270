"""
REST endpoints for video analysis.
"""
from fastapi import APIRouter, UploadFile, File, HTTPException, Form
from fastapi.responses import JSONResponse
import logging

from core.config import Settings
from core.pipeline import analyze_video_pipeline

import tempfile
import shutil
import os

router = APIRouter()
settings = Settings()
logger = logging.getLogger(__name__)


def _save_upload(file: UploadFile) -> str:
    suffix = os.path.splitext(file.filename or "")[1] or ".mp4"
    with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as tmp:
        shutil.copyfileobj(file.file, tmp)
        return tmp.name


def _cleanup(tmp_path: str) -> None:
    try:
        os.unlink(tmp_path)
    except OSError:
        logger.warning(f"[api] failed to cleanup tmp file: {tmp_path}")


@router.post("/analyze/video")
def analyze_video(
    file: UploadFile = File(...),
    sample_fps: float | None = Form(None),
):
    """
    Analyze a speaker/audience video: sample frames, detect faces, track
    identities, classify distraction and aggregate metrics.

    Args:
        file: Uploaded video file.
        sample_fps: Optional override for frames sampled per second.

    Returns:
        JSONResponse: AnalysisSummary payload.
    """
    logger.debug(f"[api] /analyze/video filename={file.filename} sample_fps={sample_fps}")
    run_settings = settings
    if sample_fps is not None:
        if sample_fps <= 0:
            raise HTTPException(status_code=422, detail="sample_fps must be positive")
        run_settings = settings.model_copy(update={"SAMPLE_FPS": float(sample_fps)})

    try:
        tmp_path = _save_upload(file)
    except Exception as e:
        logger.exception("[api] upload save failed")
        raise HTTPException(status_code=400, detail=f"Upload failed: {e}")

    try:
        logger.debug(f"[api] starting analyze_video_pipeline tmp_path={tmp_path}")
        summary = analyze_video_pipeline(tmp_path, run_settings)
        logger.debug("[api] analyze_video_pipeline completed")
        return JSONResponse(summary.model_dump())
    except FileNotFoundError as e:
        logger.exception("[api] analyze_video_pipeline file not found")
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.exception("[api] analyze_video_pipeline failed")
        raise HTTPException(status_code=500, detail=str(e))
    finally:
        _cleanup(tmp_path)


@router.post("/upload-video")
def upload_video(video: UploadFile | None = File(None)):
    """
    Legacy upload endpoint: never raises, reports ``success`` in the body.
    """
    if video is None:
        return {"success": False, "error": "No video uploaded"}

    try:
        tmp_path = _save_upload(video)
    except Exception as e:
        logger.exception("[api] upload save failed")
        return {"success": False, "error": f"Upload failed: {e}"}

    try:
        summary = analyze_video_pipeline(tmp_path, settings)
        return JSONResponse({"success": True, **summary.model_dump()})
    except Exception as e:
        logger.exception("[api] /upload-video analysis failed")
        return {"success": False, "error": str(e)}
    finally:
        _cleanup(tmp_path)
