"""
cli.py — textsplit Command Line
=================================
Usage:
    textsplit split app.exe --chunk-size 20MB
    textsplit join app.exe
    textsplit pack app.exe --chunk-size 20MB
    textsplit unpack app.exe --dest ./restored
    textsplit serve --port 8600
"""

import argparse
import logging
import sys
from typing import List, Optional

from textsplit.config import settings
from textsplit.core.chunker import join_chunks, split_file
from textsplit.core.errors import ChunkingError
from textsplit.core.units import parse_size
from textsplit.services.pipeline import pack, unpack

logger = logging.getLogger("textsplit.cli")


def _size_arg(value: str) -> int:
    """argparse type for --chunk-size."""
    try:
        return parse_size(value)
    except ChunkingError as e:
        raise argparse.ArgumentTypeError(e.reason)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="textsplit",
        description="Split files into base64 text chunk files and join them back.",
    )
    parser.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Logging level (default: %(default)s)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("split", help="Split a file into {file}.partNNN.txt chunks")
    p.add_argument("source", help="File to split")
    p.add_argument(
        "--chunk-size", type=_size_arg, default=settings.CHUNK_SIZE,
        help="Max raw bytes per chunk, e.g. 20MB or 512KiB (default: %(default)s)",
    )
    p.add_argument(
        "--no-replace", action="store_true",
        help="Fail instead of removing chunk files from an earlier split",
    )

    p = sub.add_parser("join", help="Rebuild a file from its {file}.part*.txt chunks")
    p.add_argument("base", help="Path of the file to rebuild")
    p.add_argument("--keep", action="store_true", help="Keep the chunk files")

    p = sub.add_parser("pack", help="Zip a file, then split the archive")
    p.add_argument("file", help="File to pack")
    p.add_argument(
        "--chunk-size", type=_size_arg, default=settings.CHUNK_SIZE,
        help="Max raw archive bytes per chunk (default: %(default)s)",
    )
    p.add_argument("--keep-archive", action="store_true", help="Keep {file}.zip")

    p = sub.add_parser("unpack", help="Join {file}.zip chunks, then extract")
    p.add_argument("file", help="Original path of the packed file")
    p.add_argument("--dest", default=None, help="Extraction directory")
    p.add_argument("--keep-archive", action="store_true", help="Keep {file}.zip")

    p = sub.add_parser("serve", help="Run the HTTP API")
    p.add_argument("--host", default=settings.HOST)
    p.add_argument("--port", type=int, default=settings.PORT)

    return parser


def _print_chunks(manifest) -> None:
    for path in manifest.paths:
        print(path)
    print(f"{manifest.count} chunk files written for {manifest.base_path}")


def _warn_cleanup(paths: List[str]) -> None:
    for path in paths:
        print(f"warning: could not delete chunk file {path}", file=sys.stderr)


def run_command(args: argparse.Namespace) -> None:
    if args.command == "split":
        manifest = split_file(
            args.source, args.chunk_size, replace_existing=not args.no_replace
        )
        _print_chunks(manifest)

    elif args.command == "join":
        result = join_chunks(args.base, cleanup=not args.keep)
        print(
            f"{result.output_path} rebuilt from {result.chunk_count} chunk files "
            f"({result.bytes_written} bytes)"
        )
        _warn_cleanup(result.cleanup_failures)

    elif args.command == "pack":
        manifest = pack(args.file, args.chunk_size, keep_archive=args.keep_archive)
        _print_chunks(manifest)

    elif args.command == "unpack":
        result = unpack(args.file, args.dest, keep_archive=args.keep_archive)
        for path in result.extracted:
            print(path)
        _warn_cleanup(result.cleanup_failures)

    elif args.command == "serve":
        from textsplit.main import run

        run(args.host, args.port)


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the textsplit command."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level, logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        run_command(args)
    except ChunkingError as e:
        logger.error("%s", e)
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
