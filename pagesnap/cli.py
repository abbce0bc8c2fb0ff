from __future__ import annotations

import argparse
import asyncio
import json
import signal
import sys
from pathlib import Path

from pagesnap_core import estimate, pipeline, presets
from pagesnap_core.errors import PagesnapError
from pagesnap_core.options import DEFAULT_SAFETY_MARGIN, DEFAULT_TIMEOUT_MS, RenderOptions
from pagesnap_core.renderer import PlaywrightRenderer, shutdown_shared_pool
from pagesnap_core.text_source import read_text_file


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pagesnap",
        description="Turn long-form text into a series of themed social-media cards.",
    )
    parser.add_argument(
        "--mode",
        choices=("cards", "estimate", "themes"),
        default="cards",
        help=(
            "cards: render images (default); estimate: quick page count without a browser; "
            "themes: list available themes."
        ),
    )
    parser.add_argument(
        "--input",
        type=Path,
        help="Path to a .md/.txt source file.",
    )
    parser.add_argument(
        "--text",
        type=str,
        help="Text to render directly instead of --input.",
    )
    parser.add_argument(
        "--title",
        type=str,
        help="Title for the first page (files default to their first # heading or file name).",
    )
    parser.add_argument(
        "--theme",
        choices=presets.THEME_NAMES,
        default=presets.DEFAULT_THEME,
        help=f"Visual theme (default: {presets.DEFAULT_THEME}).",
    )
    parser.add_argument(
        "--ratio",
        choices=presets.RATIO_NAMES,
        default=presets.DEFAULT_RATIO,
        help=f"Card aspect ratio, always 1080px wide (default: {presets.DEFAULT_RATIO}).",
    )
    parser.add_argument(
        "--font-size",
        choices=presets.FONT_SIZE_NAMES,
        default=presets.DEFAULT_FONT_SIZE,
        help=f"Font size tier (default: {presets.DEFAULT_FONT_SIZE}).",
    )
    parser.add_argument(
        "--show-cover",
        action="store_true",
        help="Put the title on the first page (on by default for --input).",
    )
    parser.add_argument(
        "--no-cover",
        action="store_true",
        help="Never put a title on the first page.",
    )
    parser.add_argument(
        "--ai-cover",
        action="store_true",
        help="Generate a cover banner with the Imagen API (needs GEMINI_API_KEY).",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=pipeline.DEFAULT_OUTPUT_DIR,
        help=f"Directory where generated cards will be written (default: {pipeline.DEFAULT_OUTPUT_DIR}).",
    )
    parser.add_argument(
        "--safety-margin",
        type=float,
        default=DEFAULT_SAFETY_MARGIN,
        help=f"Pixels kept free at the bottom of each page (default: {DEFAULT_SAFETY_MARGIN}).",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT_MS,
        help=f"Per-render timeout in milliseconds (default: {DEFAULT_TIMEOUT_MS}).",
    )
    parser.add_argument(
        "--chars-per-page",
        type=int,
        help="Characters per page for --mode=estimate (default: derived from ratio and font size).",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print a JSON summary instead of a status line.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable verbose debug logging.",
    )
    return parser.parse_args(argv)


def _load_source(args: argparse.Namespace) -> tuple[str, str | None, str]:
    """Returns (text, title, output stem)."""
    if args.input and args.text:
        raise SystemExit("Use either --input or --text, not both.")
    if args.input:
        source = read_text_file(args.input)
        return source.content, args.title or source.title, args.input.stem
    if args.text is not None:
        return args.text, args.title, "cards"
    raise SystemExit("Provide --input FILE or --text STRING.")


def _build_options(args: argparse.Namespace, title: str | None) -> RenderOptions:
    show_cover = (bool(args.input) or args.show_cover) and not args.no_cover
    return RenderOptions(
        theme=args.theme,
        ratio=args.ratio,
        font_size=args.font_size,
        title=title,
        show_cover=show_cover,
        safety_margin=args.safety_margin,
        timeout_ms=args.timeout,
    )


async def _render_cards(args: argparse.Namespace) -> int:
    text, title, stem = _load_source(args)
    options = _build_options(args, title)
    renderer = PlaywrightRenderer(debug=args.debug)

    result = await pipeline.render_text(
        text, options, renderer=renderer, ai_cover=args.ai_cover, debug=args.debug
    )
    if not result.images:
        raise SystemExit("No text content found to render.")

    result.saved_files = pipeline.save_images(
        result.images, args.output_dir, stem, debug=args.debug
    )

    if args.json:
        dimensions = result.options.dimensions
        summary = {
            "success": True,
            "pageCount": result.page_count,
            "theme": result.options.theme_preset.name,
            "ratio": result.options.ratio,
            "dimensions": str(dimensions),
            "title": result.options.title,
            "aiCoverGenerated": result.cover is not None,
            "coverPrompt": result.cover.prompt if result.cover else None,
            "savedFiles": [str(path) for path in result.saved_files],
        }
        print(json.dumps(summary, ensure_ascii=False, indent=2))
    else:
        print(
            f"Generated {result.page_count} cards in {result.saved_files[0].parent.resolve()}"
        )
    return 0


async def _run_with_shutdown(args: argparse.Namespace) -> int:
    task = asyncio.current_task()
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGTERM, task.cancel)
    except (NotImplementedError, RuntimeError):
        pass  # no signal handlers on this platform / thread
    try:
        return await _render_cards(args)
    finally:
        await shutdown_shared_pool()


def _print_estimate(args: argparse.Namespace) -> int:
    text, title, _ = _load_source(args)
    has_title = bool(title) and ((bool(args.input) or args.show_cover) and not args.no_cover)
    count = estimate.estimate_page_count(
        text,
        ratio=args.ratio,
        font_size=args.font_size,
        chars_per_page_override=args.chars_per_page,
        has_title=has_title,
    )
    if args.json:
        print(
            json.dumps(
                {
                    "success": True,
                    "charCount": len(text),
                    "pageCount": count,
                    "fontSize": args.font_size,
                    "ratio": args.ratio,
                },
                indent=2,
            )
        )
    else:
        print(f"Estimated {count} pages ({len(text)} characters)")
    return 0


def _print_themes(args: argparse.Namespace) -> int:
    themes = presets.describe_themes()
    if args.json:
        print(json.dumps({"themes": themes}, indent=2))
        return 0
    for name, info in themes.items():
        print(f"{name:<8} {info['description']}")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    if args.mode == "themes":
        return _print_themes(args)
    try:
        if args.mode == "estimate":
            return _print_estimate(args)
        return asyncio.run(_run_with_shutdown(args))
    except (PagesnapError, FileNotFoundError, ValueError) as exc:
        if args.json:
            print(json.dumps({"success": False, "error": str(exc)}, ensure_ascii=False))
        else:
            print(f"Error: {exc}", file=sys.stderr)
        return 1
    except asyncio.CancelledError:
        print("Cancelled.", file=sys.stderr)
        return 128 + signal.SIGTERM
