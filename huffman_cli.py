#!/usr/bin/env python3
"""
Command-line front end for the huffman compressor.

    huffman notes.txt          -> notes.huf
    huffman -d notes.huf       -> notes_decode.txt
"""
import argparse
import logging
import sys
from pathlib import Path

from huffman_errors import CoreError, IoFailure
from huffman_service import HuffmanService

logger = logging.getLogger(__name__)

COMPRESSED_SUFFIX = ".huf"
DECODED_SUFFIX = "_decode.txt"


def default_output_path(path, decode):
    """Place the result next to the input: <stem>.huf or <stem>_decode.txt."""
    path = Path(path)
    if decode:
        return path.with_name(path.stem + DECODED_SUFFIX)
    # notes.huf compresses to notes.huf.huf rather than over itself
    if path.suffix == COMPRESSED_SUFFIX:
        return path.with_name(path.name + COMPRESSED_SUFFIX)
    return path.with_name(path.stem + COMPRESSED_SUFFIX)


def read_input(path):
    try:
        return Path(path).read_bytes()
    except OSError as err:
        raise IoFailure(path, err.strerror or str(err)) from err


def write_output(path, data):
    try:
        Path(path).write_bytes(data)
    except OSError as err:
        raise IoFailure(path, err.strerror or str(err)) from err


def build_parser():
    parser = argparse.ArgumentParser(
        prog="huffman",
        description="huffman compression of arbitrary files",
    )
    parser.add_argument("path", help="path of file to compress (or decompress with -d)")
    parser.add_argument(
        "-d", "--decode",
        action="store_true",
        help="decode a huffman encoded file instead of compressing",
    )
    parser.add_argument(
        "-o", "--output",
        default=None,
        help="output file path (default: <stem>.huf, or <stem>_decode.txt with -d)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="log tree and code table details")
    return parser


def run(path, decode=False, output=None, service=None):
    service = service or HuffmanService()
    data = read_input(path)
    result = service.decompress(data) if decode else service.compress(data)
    target = Path(output) if output else default_output_path(path, decode)
    write_output(target, result)
    logger.info("wrote %d bytes to %s", len(result), target)
    return target


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        run(args.path, decode=args.decode, output=args.output)
    except CoreError as err:
        print(f"error: {err}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
