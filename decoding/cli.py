import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .config import DecoderConfig
from .exceptions import PatternLibraryError
from .logging_config import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="decode-response",
        description="Recover content, title and description from raw generator output.",
    )
    parser.add_argument("path", nargs="?", help="File with the raw response (default: stdin)")
    parser.add_argument("--title-max", type=int, help="Maximum title length")
    parser.add_argument("--summary-max", type=int, help="Maximum description length")
    parser.add_argument("--patterns", help="JSON file with extra preamble/footer phrases")
    parser.add_argument("--ellipsis", help="Suffix for truncated title/description")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log decoding steps")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        config = DecoderConfig.from_env()
    except ValueError as exc:
        print(f"Error: invalid DECODER_* setting: {exc}", file=sys.stderr)
        return 2

    if args.title_max is not None:
        config.title_max = args.title_max
    if args.summary_max is not None:
        config.summary_max = args.summary_max
    if args.patterns:
        config.patterns_file = args.patterns
    if args.ellipsis is not None:
        config.ellipsis = args.ellipsis

    try:
        decoder = config.build_decoder()
    except (PatternLibraryError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    if args.path:
        try:
            raw = Path(args.path).read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1
    else:
        raw = sys.stdin.read()

    record = decoder.decode(raw)
    print(json.dumps(record.model_dump(), ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
