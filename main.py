#!/usr/bin/env python3
"""
mathchat - Segment and render math-heavy tutoring answers.

Entry point for the application with CLI support.

Usage:
    mathchat "Area: $\\pi r^2$"          # List segments
    mathchat -f html "$$x^2$$"           # Render an HTML fragment
    mathchat -f page --file answer.md    # Render a full HTML page
    echo '$a$ and $b$' | mathchat -      # Read from stdin
    mathchat --gui                       # Launch the viewer
"""

import sys
import os
import json
import argparse

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(__file__))


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="mathchat",
        description="Split answers into text and math segments and render them",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  mathchat "Energy: $E = mc^2$"          List segments
  mathchat -f json "$$x^2$$ and $y$"     Segments as JSON records
  mathchat -f html --backend mathjax ... HTML fragment for MathJax
  mathchat -f page --scheme user ...     Full HTML page, user palette
  mathchat --file answer.md -f page      Read the answer from a file
        """,
    )

    # Positional: answer text
    parser.add_argument(
        "text",
        nargs="?",
        help="Answer text to process ('-' reads stdin)",
    )

    parser.add_argument(
        "--file",
        metavar="PATH",
        help="Read the answer text from a file",
    )

    # Output format
    parser.add_argument(
        "-f",
        "--format",
        choices=["text", "json", "html", "page"],
        default="text",
        help="Output format (default: text)",
    )

    parser.add_argument(
        "--scheme",
        choices=["user", "assistant"],
        default="assistant",
        help="Colour scheme for rendered output (default: assistant)",
    )

    parser.add_argument(
        "--backend",
        choices=["matplotlib", "mathjax"],
        help="Typesetting backend (overrides config)",
    )

    parser.add_argument(
        "--config",
        metavar="PATH",
        help="YAML configuration file",
    )

    # GUI mode (explicit)
    parser.add_argument(
        "--gui",
        action="store_true",
        help="Launch the viewer (default if no text given)",
    )

    # Version
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 0.1.0",
    )

    # Verbose
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    return parser


def read_text(args) -> str | None:
    """Resolve the answer text from --file, stdin or the positional argument."""
    if args.file:
        with open(args.file, "r", encoding="utf-8") as handle:
            return handle.read()
    if args.text == "-":
        return sys.stdin.read()
    return args.text


def print_segments(text: str, settings, output_format: str) -> int:
    """Segment text and print the segments as a listing or JSON."""
    from mathchat.segmentation import Segmenter

    segments = Segmenter.from_config(settings.segmenter).segment(text)

    if output_format == "json":
        print(json.dumps([s.to_dict() for s in segments], indent=2, ensure_ascii=False))
        return 0

    for i, seg in enumerate(segments, 1):
        label = seg.kind.name.lower()
        if seg.command:
            label += f" ({seg.command})"
        print(f"{i}. {label}: {seg.content!r}")

    print(f"\nTotal: {len(segments)} segments")
    return 0


def render_text(text: str, settings, output_format: str, scheme: str) -> int:
    """Render text to an HTML fragment or page and print it."""
    from mathchat.output import AnswerRenderer, wrap_page

    renderer = AnswerRenderer.from_settings(settings)
    answer = renderer.render_answer(text, scheme)

    if output_format == "page":
        print(
            wrap_page(
                answer.html,
                scheme,
                include_mathjax=settings.render.backend == "mathjax",
            )
        )
    else:
        print(answer.html)

    if answer.failures:
        print(
            f"Warning: {len(answer.failures)} expression(s) could not be typeset",
            file=sys.stderr,
        )
    return 0


def main(argv=None):
    """Main entry point."""
    from mathchat.config import load_settings
    from mathchat.utils.errors import ConfigError, MathChatError, format_error_for_user
    from mathchat.utils.logging import configure_logging

    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args.config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        if e.technical_details:
            print(e.technical_details, file=sys.stderr)
        return 1

    if args.backend:
        settings.render.backend = args.backend

    level = "DEBUG" if args.verbose else settings.logging.level
    configure_logging(level, json_output=settings.logging.json_output)

    try:
        text = read_text(args)
    except OSError as e:
        print(f"Error: Could not read {args.file}: {e}", file=sys.stderr)
        return 1

    # If no text and not explicit GUI, launch GUI
    if args.gui or text is None:
        from mathchat.gui.answer_view import run_app

        return run_app(settings, initial_text=text or "")

    if args.format in ("text", "json"):
        return print_segments(text, settings, args.format)

    try:
        return render_text(text, settings, args.format, args.scheme)
    except MathChatError as e:
        print(f"Error: {format_error_for_user(e)}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main() or 0)
