"""
CLI to analyze a speaker/audience video -> JSON summary + CSV/JSON artifacts.
"""
from __future__ import annotations
import argparse, json, logging
from core.config import Settings
from core.pipeline import analyze_video_pipeline
from core.report import write_reports

def main(argv=None):
    p = argparse.ArgumentParser()
    p.add_argument("--video", required=True, help="Path to input video")
    p.add_argument("--out", default=None, help="Directory for output artifacts (default: OUTPUT_DIR)")
    p.add_argument("--sample-fps", type=float, default=None, help="Frames sampled per second")
    p.add_argument("--backend", choices=["rekognition", "deepface"], default=None, help="Face detector backend")
    p.add_argument("--log-level", default="INFO", help="Logging level")
    args = p.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))

    overrides = {}
    if args.sample_fps is not None:
        overrides["SAMPLE_FPS"] = args.sample_fps
    if args.backend is not None:
        overrides["DETECTOR_BACKEND"] = args.backend
    settings = Settings(**overrides)

    summary = analyze_video_pipeline(args.video, settings)
    print(json.dumps(summary.model_dump(), indent=2, ensure_ascii=False))

    # Also write artifacts
    out_dir = args.out or settings.OUTPUT_DIR
    write_reports(summary, out_dir)
    print(f"✅ Analysis written to {out_dir}")
    if summary.errors:
        print(f"⚠️  {len(summary.errors)} frame(s) failed detection")
    return summary

if __name__ == "__main__":
    main()
