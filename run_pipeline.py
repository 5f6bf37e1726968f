#!/usr/bin/env python3
"""Resize and re-encode a batch of images into named output variants.

Usage:
    python run_pipeline.py photos/cat.png -o dist -W 100 -H 100 -f png
    python run_pipeline.py photos/*.jpg -b photos -o dist -W 320 -H 240 \\
        -f avif -f webp -f jpg --variant thumb --manifest dist/manifest.json
"""
import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from models.request import AvifOptions, JpegOptions, OutputFormat, TransformRequest, WebpOptions
from pipeline import orchestrator
from pipeline.errors import ConfigError, PipelineError
from settings import Settings

logger = logging.getLogger("run_pipeline")


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="image-variants",
        description="Resize images and write fingerprinted output variants.",
    )
    parser.add_argument("images", nargs="*", type=Path, help="Images that should be transformed")
    parser.add_argument("-o", "--out-dir", type=Path, required=True, dest="out_dir")
    parser.add_argument("-b", "--base-dir", type=Path, default=None, dest="base_dir",
                        help="Sandbox root for all images (default: current directory)")
    parser.add_argument("-W", "--width", type=int, required=True,
                        help="The width the images should be resized to")
    parser.add_argument("-H", "--height", type=int, required=True,
                        help="The height the images should be resized to")
    parser.add_argument("-f", "--format", action="append", default=[], dest="formats",
                        metavar="FORMAT",
                        help="Output format: avif, jpg/jpeg, png, webp (repeatable)")
    parser.add_argument("-n", "--variant", default=None, help="Name of the variant")
    parser.add_argument("--manifest", type=Path, default=None,
                        help="Path to the JSON manifest (requires --variant)")
    parser.add_argument("--jpeg-quality", type=int, default=settings.jpeg_quality,
                        dest="jpeg_quality", help="0-100 scale")
    parser.add_argument("--webp-quality", type=int, default=settings.webp_quality,
                        dest="webp_quality", help="0-100 scale")
    parser.add_argument("--avif-quality", type=int, default=settings.avif_quality,
                        dest="avif_quality", help="0-100 scale")
    parser.add_argument("--avif-speed", type=int, default=settings.avif_speed,
                        dest="avif_speed", help="1 (slow) to 10 (fast but crappy)")
    parser.add_argument("--no-preserve-aspect", action="store_false", dest="preserve_aspect",
                        default=settings.preserve_aspect,
                        help="Stretch to the target size instead of cropping to fit")
    parser.add_argument("--log-level", default=settings.log_level, dest="log_level", type=str.upper,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    return parser


def request_from_args(args: argparse.Namespace) -> TransformRequest:
    try:
        formats = [OutputFormat.parse(name) for name in args.formats]
        jpeg = JpegOptions(quality=args.jpeg_quality)
        webp = WebpOptions(quality=args.webp_quality)
        avif = AvifOptions(quality=args.avif_quality, speed=args.avif_speed)
    except ValidationError as exc:
        raise ConfigError(f"invalid encode options: {exc.errors()[0]['msg']}") from exc

    return TransformRequest.build(
        images=args.images,
        out_dir=args.out_dir,
        base_dir=args.base_dir,
        width=args.width,
        height=args.height,
        formats=formats,
        variant=args.variant,
        manifest=args.manifest,
        preserve_aspect=args.preserve_aspect,
        jpeg=jpeg,
        webp=webp,
        avif=avif,
    )


def load_settings() -> Settings:
    try:
        return Settings()
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        raise ConfigError(f"invalid settings: {problems}") from exc


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
        datefmt="%H:%M:%S",
    )


def main(argv: list[str] | None = None) -> None:
    try:
        settings = load_settings()
    except ConfigError as exc:
        _configure_logging("INFO")
        logger.error("[%s] %s", exc.stage, exc)
        sys.exit(1)

    args = build_parser(settings).parse_args(argv)
    _configure_logging(args.log_level)

    try:
        request = request_from_args(args)
        artifacts = orchestrator.run(request)
    except PipelineError as exc:
        logger.error("[%s] %s", exc.stage, exc)
        sys.exit(1)

    logger.info("=== Done → %d file(s) ===", len(artifacts))


if __name__ == "__main__":
    main()
