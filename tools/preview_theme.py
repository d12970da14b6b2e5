"""Render a theme's textures for a synthetic face without a model.

Builds the 30-point reference face, runs the full pipeline with a
:class:`StaticInferenceEngine` and writes the base, normal and specular
maps as PNGs.

Usage::

    python -m tools.preview_theme barbarian
    python -m tools.preview_theme greek --quality high --intensity 1.0 --out previews/
    python -m tools.preview_theme --all --seed 7
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, "src")

from facetheme.core.landmarks import FacialLandmark
from facetheme.core.options import ProcessingOptions, Quality
from facetheme.pipeline import FaceStylePipeline, PipelineResult
from facetheme.styling.inference import StaticInferenceEngine
from facetheme.styling.registry import available_themes

# Reference face: 30 named points in normalised image coordinates
SYNTHETIC_FACE = [
    ("eyeLeft", 0.3, 0.4),
    ("eyeRight", 0.7, 0.4),
    ("nose", 0.5, 0.5),
    ("mouthLeft", 0.4, 0.7),
    ("mouthRight", 0.6, 0.7),
    ("chinBottom", 0.5, 0.9),
    ("leftEyeBrowLeft", 0.25, 0.35),
    ("leftEyeBrowRight", 0.35, 0.35),
    ("leftEyeBrowUp", 0.3, 0.3),
    ("rightEyeBrowLeft", 0.65, 0.35),
    ("rightEyeBrowRight", 0.75, 0.35),
    ("rightEyeBrowUp", 0.7, 0.3),
    ("leftEyeLeft", 0.25, 0.4),
    ("leftEyeRight", 0.35, 0.4),
    ("leftEyeUp", 0.3, 0.38),
    ("leftEyeDown", 0.3, 0.42),
    ("rightEyeLeft", 0.65, 0.4),
    ("rightEyeRight", 0.75, 0.4),
    ("rightEyeUp", 0.7, 0.38),
    ("rightEyeDown", 0.7, 0.42),
    ("noseLeft", 0.45, 0.5),
    ("noseRight", 0.55, 0.5),
    ("mouthUp", 0.5, 0.65),
    ("mouthDown", 0.5, 0.75),
    ("leftPupil", 0.3, 0.4),
    ("rightPupil", 0.7, 0.4),
    ("upperJawlineLeft", 0.2, 0.6),
    ("midJawlineLeft", 0.15, 0.75),
    ("midJawlineRight", 0.85, 0.75),
    ("upperJawlineRight", 0.8, 0.6),
]


def synthetic_landmarks() -> list[FacialLandmark]:
    return [FacialLandmark(name, x, y) for name, x, y in SYNTHETIC_FACE]


def write_previews(result: PipelineResult, out_dir: Path) -> list[Path]:
    """Save the three texture maps as ``<theme>_<map>.png``."""
    out_dir.mkdir(parents=True, exist_ok=True)
    theme_id = result.styled.theme_id
    written = []
    for name, texture in (
        ("base", result.textured.base_texture),
        ("normal", result.textured.normal_texture),
        ("specular", result.textured.specular_texture),
    ):
        path = out_dir / f"{theme_id}_{name}.png"
        texture.to_image().save(path)
        written.append(path)
    return written


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Preview theme textures on a synthetic face.")
    parser.add_argument("theme", nargs="?", help="Theme id (see --all)")
    parser.add_argument("--all", action="store_true", help="Preview every available theme")
    parser.add_argument("--quality", choices=[q.value for q in Quality], default="balanced")
    parser.add_argument("--intensity", type=float, default=0.8, help="Style intensity in [0, 1]")
    parser.add_argument("--seed", type=int, default=0, help="Seed for scars/runes")
    parser.add_argument("--out", type=Path, default=Path("previews"), help="Output directory")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(name)s: %(message)s",
    )

    if args.all:
        themes = available_themes()
    elif args.theme:
        if args.theme not in available_themes():
            parser.error(f"Unknown theme: {args.theme!r}. Choices: {', '.join(available_themes())}")
        themes = [args.theme]
    else:
        parser.error("Give a theme id or --all")

    options = ProcessingOptions(quality=args.quality, style_intensity=args.intensity)
    pipeline = FaceStylePipeline(StaticInferenceEngine())
    landmarks = synthetic_landmarks()

    for theme_id in themes:
        result = pipeline.run(landmarks, theme_id, options, seed=args.seed)
        paths = write_previews(result, args.out)
        print(f"{theme_id}: quality {result.mesh.quality_score:.3f}, "
              f"{result.mesh.vertex_count} vertices, {result.mesh.triangle_count} triangles")
        for path in paths:
            print(f"  wrote {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
