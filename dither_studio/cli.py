"""Command-line interface for dither-studio.

Supports both interactive TUI mode and headless/JSON mode for scripting.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

from dither_studio.config import CONFIG
from dither_studio.core.dither import Algorithm
from dither_studio.core.processor import Settings


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dither-studio",
        description="Levels adjustment and palette dithering with a live preview.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # --- convert subcommand ---
    convert = subparsers.add_parser(
        "convert",
        help="Dither an image file.",
    )
    convert.add_argument("input", help="Input image file path.")
    convert.add_argument(
        "-o", "--output",
        help="Output PNG path. Defaults to <input>_dithered.png.",
    )
    convert.add_argument(
        "--palette",
        default=",".join(CONFIG.palette),
        help="Comma-separated #RRGGBB colors (default: %(default)s).",
    )
    convert.add_argument(
        "--algorithm",
        choices=[a.value for a in Algorithm],
        default=Algorithm.FLOYD_STEINBERG.value,
        help="Dithering algorithm (default: %(default)s).",
    )
    convert.add_argument(
        "--black",
        type=int,
        default=0,
        help="Levels black point, 0 to 255 (default: 0).",
    )
    convert.add_argument(
        "--mid",
        type=float,
        default=1.0,
        help="Levels mid point (gamma), 0.1 to 10.0 (default: 1.0).",
    )
    convert.add_argument(
        "--white",
        type=int,
        default=255,
        help="Levels white point, 0 to 255 (default: 255).",
    )
    convert.add_argument(
        "--scale",
        type=int,
        default=CONFIG.processing_scale,
        help="Processing scale in percent, 5 to 50 (default: %(default)s).",
    )
    convert.add_argument(
        "--zoom",
        type=int,
        default=CONFIG.display_zoom,
        help="Output zoom in percent, 50 to 200 (default: %(default)s).",
    )
    convert.add_argument(
        "--json",
        action="store_true",
        help="Output structured JSON (pipe-friendly, no TUI).",
    )
    convert.add_argument(
        "--no-tui",
        action="store_true",
        help="Run headless (no interactive TUI).",
    )
    convert.add_argument(
        "--debug",
        action="store_true",
        help="Show stack traces on error (with --json).",
    )
    convert.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: LOG_LEVEL env or WARNING).",
    )

    return parser


def _auto_output_path(input_path: Path) -> Path:
    """Generate default output path from input."""
    return input_path.parent / f"{input_path.stem}_dithered.png"


def _json_error(message: str, code: str) -> None:
    """Print JSON error to stderr and exit with code 1."""
    err = {"status": "error", "error": message, "code": code}
    print(json.dumps(err), file=sys.stderr)
    sys.exit(1)


def _fail(message: str, code: str, is_json: bool) -> None:
    if is_json:
        _json_error(message, code)
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def _settings_from_args(args: argparse.Namespace) -> Settings:
    from dither_studio.core.geometry import clamp_display_zoom, clamp_processing_scale
    from dither_studio.core.levels import LevelsSettings
    from dither_studio.core.palette import Palette, parse_palette_arg

    palette = Palette.from_hex(parse_palette_arg(args.palette))
    levels = LevelsSettings(
        black_point=max(0, min(255, args.black)),
        mid_point=max(0.1, min(10.0, args.mid)),
        white_point=max(0, min(255, args.white)),
    )
    return Settings(
        algorithm=Algorithm(args.algorithm),
        levels=levels,
        palette=palette.hex,
        processing_scale=clamp_processing_scale(args.scale),
        display_zoom=clamp_display_zoom(args.zoom),
    )


def _run_convert(args: argparse.Namespace) -> None:
    """Run the headless convert pipeline."""
    from dither_studio.config import configure_logging
    from dither_studio.core.geometry import canvas_size, feedback
    from dither_studio.core.palette import InvalidPalette
    from dither_studio.core.pipeline import PreviewPipeline
    from dither_studio.core.source import (
        CaptureFailure,
        ImageDocumentSource,
        NoActiveDocument,
        UnsupportedColorMode,
    )
    from dither_studio.core.writer import save_output

    configure_logging(args.log_level)
    is_json = args.json

    input_path = Path(args.input).resolve()
    if not input_path.exists():
        _fail(f"File not found: {input_path}", "FILE_NOT_FOUND", is_json)

    try:
        settings = _settings_from_args(args)
    except InvalidPalette as e:
        _fail(str(e), "INVALID_PALETTE", is_json)

    if args.output:
        output_path = Path(args.output).resolve()
    else:
        output_path = _auto_output_path(input_path)

    source = ImageDocumentSource()
    pipeline = PreviewPipeline(source)
    try:
        info = source.open(input_path)
        result = asyncio.run(pipeline.reprocess(settings))
        output_path = save_output(
            result.buffer, output_path, display_zoom=settings.display_zoom
        )
    except NoActiveDocument as e:
        _fail(str(e), "NO_DOCUMENT", is_json)
    except UnsupportedColorMode as e:
        _fail(str(e), "UNSUPPORTED_COLOR_MODE", is_json)
    except CaptureFailure as e:
        _fail(str(e), "CAPTURE_FAILED", is_json)
    except Exception as e:
        if is_json and args.debug:
            import traceback
            traceback.print_exc(file=sys.stderr)
        _fail(str(e), "PROCESSING_ERROR", is_json)

    if not is_json:
        print(f"Saved to {output_path}", file=sys.stderr)
        return

    result_json = {
        "status": "success",
        "input": str(input_path),
        "output": str(output_path),
        "settings": {
            "algorithm": settings.algorithm.value,
            "palette": list(settings.palette),
            "levels": {
                "black_point": settings.levels.black_point,
                "mid_point": settings.levels.mid_point,
                "white_point": settings.levels.white_point,
            },
            "processing_scale": settings.processing_scale,
            "display_zoom": settings.display_zoom,
        },
        "metadata": {
            "source_size": list(info.size),
            "processed_size": list(result.size),
            "canvas_size": list(canvas_size(result.size, settings.display_zoom)),
            "feedback": feedback(settings.display_zoom).value,
            "levels_ms": round(result.levels_ms, 2),
            "dither_ms": round(result.dither_ms, 2),
        },
    }
    print(json.dumps(result_json, indent=2))


def main() -> None:
    """Main entry point.

    Routing:
      dither-studio convert <file> [opts]  → convert subcommand
      dither-studio <file>                 → launch TUI with file
      dither-studio                        → launch TUI (file picker)
    """
    # A first argument other than "convert" is a file path for the TUI,
    # so argparse must not try to read it as a subcommand.
    raw_args = sys.argv[1:]
    if raw_args and raw_args[0] == "convert":
        parser = _build_parser()
        args = parser.parse_args()
        if args.json or args.no_tui:
            _run_convert(args)
        else:
            from dither_studio.app import run_app

            try:
                settings = _settings_from_args(args)
            except ValueError as e:
                print(f"Error: {e}", file=sys.stderr)
                sys.exit(1)
            run_app(input_path=args.input, settings=settings)
    elif raw_args and not raw_args[0].startswith("-"):
        from dither_studio.app import run_app
        run_app(input_path=raw_args[0])
    elif raw_args and raw_args[0] in ("-h", "--help"):
        parser = _build_parser()
        parser.parse_args()
    else:
        from dither_studio.app import run_app
        run_app()


if __name__ == "__main__":
    main()
