"""
Write a finished AnalysisSummary to CSV/JSON artifacts.
"""
from __future__ import annotations
from pathlib import Path
from typing import Dict, Optional
import csv
import json
import logging

from core.models import AnalysisSummary

logger = logging.getLogger(__name__)

CSV_HEADER = [
    "timestamp", "personId", "role", "emotion", "emotionConfidence", "eyeDirection",
    "eyesOpen", "mouthOpen", "smile", "poseYaw", "distracted", "distractionReason",
]


def _cell(v: Optional[bool]) -> str:
    if v is None:
        return ""
    return "true" if v else "false"


def _write_json(path: Path, payload) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)


def write_reports(summary: AnalysisSummary, out_dir) -> Dict[str, Path]:
    """
    Write the per-run artifacts into ``out_dir`` (created if missing).

    Returns a mapping of artifact name -> written path.
    """
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)
    paths = {
        "emotion_data": out / "emotion_data.csv",
        "emotion_frequencies": out / "emotion_frequencies.json",
        "audience_distraction": out / "audience_distraction.json",
        "speaking_ratio": out / "speaking_ratio.json",
        "audience_emotion_balance": out / "audience_emotion_balance.json",
    }

    with open(paths["emotion_data"], "w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(CSV_HEADER)
        for r in summary.rows:
            writer.writerow([
                r.timestamp, r.person_id, r.role, r.emotion, r.emotion_confidence,
                r.eye_direction, _cell(r.eyes_open), _cell(r.mouth_open), _cell(r.smile),
                r.pose_yaw, _cell(r.distracted),
                "" if r.distraction_reason == "none" else r.distraction_reason,
            ])

    _write_json(paths["emotion_frequencies"], summary.emotion_frequencies)
    _write_json(paths["audience_distraction"],
                {pid: rec.model_dump() for pid, rec in summary.distraction.items()})
    _write_json(paths["speaking_ratio"], summary.speaking_ratio.model_dump())
    _write_json(paths["audience_emotion_balance"], summary.audience_emotion_balance.model_dump())

    logger.debug(f"[report] wrote {len(paths)} artifacts to {out}")
    return paths
