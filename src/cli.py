#!/usr/bin/env python3
"""
cli.py - Command Line Interface for ZW-Blind-Mark

This module provides a CLI for keyed, invisible text watermarking. It
supports five workflows:

    1. EMBED:   Hide a watermark in a text file under a secret key
    2. EXTRACT: Recover the watermark from a marked text with the key
    3. CHECK:   Quick check whether a text contains zero-width characters
    4. CLEAN:   Remove every zero-width character from a text
    5. DEMO:    Round trip on a built-in sample

Usage Examples:
    # Watermark an article for a recipient
    $ blindmark embed article.txt -k "s3cret" -w "Reader-042" -o article_marked.txt

    # Identify the recipient of a leaked copy
    $ blindmark extract leaked.txt -k "s3cret"

    # Strip invisible characters from a text
    $ blindmark clean pasted.txt -o pasted_clean.txt

The key may also be supplied through the BLINDMARK_KEY environment
variable. FILE may be "-" to read from stdin.
"""

import argparse
import logging
import os
import sys
from typing import TYPE_CHECKING, Callable, Optional, cast

# Local imports (when run as module)
if TYPE_CHECKING:
    from .auth_tag import TAG_SCHEMES
    from .embedder import DEFAULT_BLOCK_SIZE
    from .errors import CarrierTooShortError, WatermarkError
    from .stegano_core import SteganoEngine
else:
    try:
        from .auth_tag import TAG_SCHEMES
        from .embedder import DEFAULT_BLOCK_SIZE
        from .errors import CarrierTooShortError, WatermarkError
        from .stegano_core import SteganoEngine
    except ImportError:
        # Direct script execution
        from auth_tag import TAG_SCHEMES
        from embedder import DEFAULT_BLOCK_SIZE
        from errors import CarrierTooShortError, WatermarkError
        from stegano_core import SteganoEngine

KEY_ENV_VAR = "BLINDMARK_KEY"


# ═══════════════════════════════════════════════════════════════════════════════
# CLI OUTPUT FORMATTING
# ═══════════════════════════════════════════════════════════════════════════════


class ConsoleOutput:
    """Handles formatted console output with optional color support.

    Status lines go to stderr so that stdout can carry the processed text.
    """

    # ANSI color codes (disabled if not TTY)
    COLORS_ENABLED = sys.stderr.isatty()

    RESET = "\033[0m" if COLORS_ENABLED else ""
    BOLD = "\033[1m" if COLORS_ENABLED else ""
    GREEN = "\033[92m" if COLORS_ENABLED else ""
    RED = "\033[91m" if COLORS_ENABLED else ""
    YELLOW = "\033[93m" if COLORS_ENABLED else ""
    BLUE = "\033[94m" if COLORS_ENABLED else ""
    CYAN = "\033[96m" if COLORS_ENABLED else ""

    @classmethod
    def plain(cls, message: str) -> None:
        print(message, file=sys.stderr)

    @classmethod
    def banner(cls) -> None:
        """Print the application banner."""
        cls.plain(
            f"""
{cls.CYAN}╔═══════════════════════════════════════════════════════════════╗
║  {cls.BOLD}ZW-Blind-Mark{cls.RESET}{cls.CYAN}                                                ║
║  Keyed Invisible Watermarks for Plain Text                    ║
║  Version 1.0.0 | MIT License                                  ║
╚═══════════════════════════════════════════════════════════════╝{cls.RESET}
"""
        )

    @classmethod
    def success(cls, message: str) -> None:
        cls.plain(f"{cls.GREEN}✓ {message}{cls.RESET}")

    @classmethod
    def error(cls, message: str) -> None:
        cls.plain(f"{cls.RED}✗ {message}{cls.RESET}")

    @classmethod
    def warning(cls, message: str) -> None:
        cls.plain(f"{cls.YELLOW}⚠ {message}{cls.RESET}")

    @classmethod
    def info(cls, message: str) -> None:
        cls.plain(f"{cls.BLUE}ℹ {message}{cls.RESET}")

    @classmethod
    def alert(cls, message: str) -> None:
        cls.plain(f"{cls.RED}{cls.BOLD}🚨 {message}{cls.RESET}")


# ═══════════════════════════════════════════════════════════════════════════════
# I/O HELPERS
# ═══════════════════════════════════════════════════════════════════════════════


def read_text(source: str) -> str:
    """Read a UTF-8 text file, or stdin when source is '-'.

    Line endings are kept as-is; markers must survive character for character.
    """
    if source == "-":
        return sys.stdin.read()
    with open(source, encoding="utf-8", newline="") as f:
        return f.read()


def write_text(text: str, destination: Optional[str]) -> None:
    """Write text to a file, or to stdout when no destination is given."""
    if destination is None or destination == "-":
        sys.stdout.write(text)
        sys.stdout.flush()
        return
    with open(destination, "w", encoding="utf-8", newline="") as f:
        f.write(text)


def resolve_key(args: argparse.Namespace) -> Optional[str]:
    return args.key or os.environ.get(KEY_ENV_VAR)


# ═══════════════════════════════════════════════════════════════════════════════
# COMMAND HANDLERS
# ═══════════════════════════════════════════════════════════════════════════════


def cmd_embed(args: argparse.Namespace) -> int:
    """
    Handle the 'embed' command - hide a watermark in a text.

    Refuses carriers that already contain zero-width characters unless
    --strip-existing is given, because stray markers would be read as
    watermark bits during extraction.
    """
    key = resolve_key(args)
    if not key:
        ConsoleOutput.error(f"A secret key is required (--key or ${KEY_ENV_VAR})")
        return 1

    try:
        carrier = read_text(args.file)
    except OSError as e:
        ConsoleOutput.error(f"Failed to read input: {e}")
        return 1

    engine = SteganoEngine(block_size=args.block_size, tag_scheme=args.tag)

    if engine.contains_marker(carrier):
        if not args.strip_existing:
            ConsoleOutput.error("Input already contains zero-width characters.")
            ConsoleOutput.info("Run 'clean' first, or pass --strip-existing.")
            return 1
        carrier = engine.strip_markers(carrier)
        ConsoleOutput.warning("Removed existing zero-width characters before embedding")

    try:
        report = engine.embed_with_report(carrier, key, args.watermark)
    except CarrierTooShortError as e:
        ConsoleOutput.error(str(e))
        return 1

    try:
        write_text(report.text, args.output)
    except OSError as e:
        ConsoleOutput.error(f"Failed to write output file: {e}")
        return 1

    for w in report.warnings:
        ConsoleOutput.warning(w)
    ConsoleOutput.success(
        f"Watermark embedded: {len(carrier)} → {len(report.text)} characters "
        f"({report.total_markers} invisible markers)"
    )
    if args.output:
        ConsoleOutput.info(f"Output file: {args.output}")
    if args.verbose:
        ConsoleOutput.plain(report.summary())

    return 0


def cmd_extract(args: argparse.Namespace) -> int:
    """
    Handle the 'extract' command - blind watermark recovery.

    Exit code 2 signals that a watermark was found, 0 that none was.
    """
    key = resolve_key(args)
    if not key:
        ConsoleOutput.error(f"A secret key is required (--key or ${KEY_ENV_VAR})")
        return 1

    try:
        text = read_text(args.file)
    except OSError as e:
        ConsoleOutput.error(f"Failed to read input: {e}")
        return 1

    engine = SteganoEngine(tag_scheme=args.tag)
    report = engine.trace(text, key)

    if args.json_output:
        print(report.to_json())
    else:
        ConsoleOutput.plain(report.summary())

    if report.found:
        if not args.json_output:
            print(report.watermark)
        return 2

    ConsoleOutput.warning("No valid watermark found. Check the key and that the text is unmodified.")
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    """
    Handle the 'check' command - quick zero-width presence check.

    Useful for batch processing; exit code 2 means markers are present.
    """
    try:
        text = read_text(args.file)
    except OSError as e:
        if not args.quiet:
            ConsoleOutput.error(f"Failed to read input: {e}")
        return 1

    present = SteganoEngine.contains_marker(text)

    if args.quiet:
        return 2 if present else 0
    if present:
        ConsoleOutput.alert(f"ZERO-WIDTH CHARACTERS PRESENT: {args.file}")
        return 2
    ConsoleOutput.success(f"No zero-width characters: {args.file}")
    return 0


def cmd_clean(args: argparse.Namespace) -> int:
    """Handle the 'clean' command - strip every zero-width character."""
    try:
        text = read_text(args.file)
    except OSError as e:
        ConsoleOutput.error(f"Failed to read input: {e}")
        return 1

    cleaned = SteganoEngine.strip_markers(text)
    try:
        write_text(cleaned, args.output)
    except OSError as e:
        ConsoleOutput.error(f"Failed to write output file: {e}")
        return 1

    removed = len(text) - len(cleaned)
    if removed:
        ConsoleOutput.success(f"Removed {removed} zero-width character(s)")
    else:
        ConsoleOutput.info("No zero-width characters found")
    return 0


DEMO_TEXT = (
    "Invisible watermarks let a publisher hand out copies of the same text "
    "that look identical on screen but can each be traced back to the "
    "person who received them. Every copy carries its own hidden frame, "
    "written between ordinary letters with characters that take up no space."
)


def cmd_demo(args: argparse.Namespace) -> int:
    """
    Handle the 'demo' command - embed and extract on sample text.
    """
    ConsoleOutput.banner()

    key = "demo-key"
    recipient = "Reader-042"
    engine = SteganoEngine(block_size=DEFAULT_BLOCK_SIZE)

    report = engine.embed_with_report(DEMO_TEXT, key, recipient)
    ConsoleOutput.success(f"Embedded '{recipient}' with key '{key}'")
    ConsoleOutput.plain(report.summary())

    ConsoleOutput.plain(f"{ConsoleOutput.YELLOW}═══ THE MAGIC ═══{ConsoleOutput.RESET}")
    ConsoleOutput.plain("The marked text prints exactly like the original:")
    ConsoleOutput.plain(report.text)
    ConsoleOutput.plain("")

    found = engine.extract(report.text, key)
    ConsoleOutput.success(f"Extracted with the right key: {found!r}")

    wrong = engine.extract(report.text, "not-the-key")
    ConsoleOutput.info(f"Extracted with a wrong key:   {wrong!r}")

    return 0


# ═══════════════════════════════════════════════════════════════════════════════
# MAIN ENTRY POINT
# ═══════════════════════════════════════════════════════════════════════════════


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blindmark",
        description="Keyed invisible watermarks for plain text",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s embed article.txt -k KEY -w "Reader-042" -o marked.txt
  %(prog)s extract marked.txt -k KEY
  %(prog)s check pasted.txt
  %(prog)s clean pasted.txt -o clean.txt
  %(prog)s demo
        """,
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(
        dest="command", title="commands", description="Available operations"
    )

    # ─────────────────────────────────────────────────────────────────────────
    # EMBED command
    # ─────────────────────────────────────────────────────────────────────────
    embed_parser = subparsers.add_parser(
        "embed",
        help="Hide a watermark in a text file",
        description="Weave an invisible, keyed watermark into a UTF-8 text.",
    )
    embed_parser.add_argument("file", help="Carrier text file ('-' for stdin)")
    embed_parser.add_argument("-w", "--watermark", required=True, help="Watermark text to hide")
    embed_parser.add_argument("-k", "--key", help=f"Secret key (default: ${KEY_ENV_VAR})")
    embed_parser.add_argument("-o", "--output", help="Output file path (default: stdout)")
    embed_parser.add_argument(
        "-b",
        "--block-size",
        type=int,
        default=DEFAULT_BLOCK_SIZE,
        help=f"Carrier characters per block (default: {DEFAULT_BLOCK_SIZE})",
    )
    embed_parser.add_argument(
        "--tag", choices=sorted(TAG_SCHEMES), default="lcg", help="Authentication tag scheme"
    )
    embed_parser.add_argument(
        "--strip-existing",
        action="store_true",
        help="Remove zero-width characters already present in the input",
    )
    embed_parser.add_argument(
        "-v", "--verbose", action="store_true", help="Show detailed embed report"
    )
    embed_parser.set_defaults(func=cmd_embed)

    # ─────────────────────────────────────────────────────────────────────────
    # EXTRACT command
    # ─────────────────────────────────────────────────────────────────────────
    extract_parser = subparsers.add_parser(
        "extract",
        help="Recover a watermark with the secret key",
        description="Blindly search a text for a watermark that authenticates under the key.",
    )
    extract_parser.add_argument("file", help="Text file to analyze ('-' for stdin)")
    extract_parser.add_argument("-k", "--key", help=f"Secret key (default: ${KEY_ENV_VAR})")
    extract_parser.add_argument(
        "--tag", choices=sorted(TAG_SCHEMES), default="lcg", help="Authentication tag scheme"
    )
    extract_parser.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Output results as JSON (machine-readable)",
    )
    extract_parser.set_defaults(func=cmd_extract)

    # ─────────────────────────────────────────────────────────────────────────
    # CHECK command
    # ─────────────────────────────────────────────────────────────────────────
    check_parser = subparsers.add_parser(
        "check",
        help="Quick check for zero-width characters",
        description="Fast check if a text contains zero-width characters (no key needed).",
    )
    check_parser.add_argument("file", help="Text file to check ('-' for stdin)")
    check_parser.add_argument(
        "-q", "--quiet", action="store_true", help="Silent mode - only return exit code"
    )
    check_parser.set_defaults(func=cmd_check)

    # ─────────────────────────────────────────────────────────────────────────
    # CLEAN command
    # ─────────────────────────────────────────────────────────────────────────
    clean_parser = subparsers.add_parser(
        "clean",
        help="Remove zero-width characters",
        description="Strip every zero-width character, destroying any watermark.",
    )
    clean_parser.add_argument("file", help="Text file to clean ('-' for stdin)")
    clean_parser.add_argument("-o", "--output", help="Output file path (default: stdout)")
    clean_parser.set_defaults(func=cmd_clean)

    # ─────────────────────────────────────────────────────────────────────────
    # DEMO command
    # ─────────────────────────────────────────────────────────────────────────
    demo_parser = subparsers.add_parser(
        "demo",
        help="Run a demonstration",
        description="Embed and extract a watermark on built-in sample text.",
    )
    demo_parser.set_defaults(func=cmd_demo)

    return parser


def main(argv=None) -> int:
    """Run the CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug or os.environ.get("DEBUG") else logging.ERROR,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 0

    try:
        func = cast(Callable[[argparse.Namespace], int], args.func)
        return func(args)
    except WatermarkError as e:
        ConsoleOutput.error(str(e))
        return 1
    except KeyboardInterrupt:
        print("\nOperation cancelled.", file=sys.stderr)
        return 130
    except Exception as e:
        ConsoleOutput.error(f"Unexpected error: {e}")
        if os.environ.get("DEBUG"):
            raise
        return 1


if __name__ == "__main__":
    sys.exit(main())
