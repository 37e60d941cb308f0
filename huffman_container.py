# filename: huffman_container.py

import json
import logging
import struct
from collections import namedtuple

from bitstream import PackedBitstream, packed_length
from huffman_errors import CorruptStream

logger = logging.getLogger(__name__)

MAGIC = b"HUFF"
FORMAT_VERSION = 1
MAX_SYMBOL = 255

# magic, version, byte length of the JSON frequency table
_PREAMBLE = struct.Struct(">4sBI")
# original decoded length, packed bit count
_LENGTHS = struct.Struct(">QQ")

Container = namedtuple("Container", ["frequencies", "original_length", "bitstream"])


def _encode_table(frequencies):
    # Explicit symbol/count pairs in ascending symbol order
    table = {str(symbol): frequencies[symbol] for symbol in sorted(frequencies)}
    return json.dumps(table, separators=(",", ":")).encode("ascii")


def _decode_table(raw):
    try:
        table = json.loads(raw.decode("ascii"))
    except (UnicodeDecodeError, ValueError, RecursionError) as err:
        raise CorruptStream(f"unreadable frequency table: {err}") from err
    if not isinstance(table, dict):
        raise CorruptStream("frequency table is not a JSON object")

    frequencies = {}
    for key, count in table.items():
        if not (key.isascii() and key.isdigit()) or str(int(key)) != key or int(key) > MAX_SYMBOL:
            raise CorruptStream(f"invalid symbol {key!r} in frequency table")
        # bool is an int subclass; reject it explicitly
        if isinstance(count, bool) or not isinstance(count, int) or count <= 0:
            raise CorruptStream(f"invalid count {count!r} for symbol {key}")
        frequencies[int(key)] = count
    return frequencies


def emit(container):
    table = _encode_table(container.frequencies)
    bitstream = container.bitstream
    return b"".join([
        _PREAMBLE.pack(MAGIC, FORMAT_VERSION, len(table)),
        table,
        _LENGTHS.pack(container.original_length, bitstream.bit_count),
        bitstream.data,
    ])


def parse(data):
    data = bytes(data)
    if len(data) < _PREAMBLE.size:
        raise CorruptStream(f"container is only {len(data)} bytes long")
    magic, version, table_length = _PREAMBLE.unpack_from(data, 0)
    if magic != MAGIC:
        raise CorruptStream(f"bad magic {magic!r}, expected {MAGIC!r}")
    if version != FORMAT_VERSION:
        raise CorruptStream(f"unsupported format version {version}")

    offset = _PREAMBLE.size
    if len(data) < offset + table_length + _LENGTHS.size:
        raise CorruptStream("container header is truncated")
    frequencies = _decode_table(data[offset:offset + table_length])
    offset += table_length
    original_length, bit_count = _LENGTHS.unpack_from(data, offset)
    offset += _LENGTHS.size
    packed = data[offset:]

    logger.debug(
        "container: %d symbols, original_length=%d, bit_count=%d, packed=%d bytes",
        len(frequencies), original_length, bit_count, len(packed),
    )

    if len(frequencies) < 2:
        raise CorruptStream(f"frequency table holds {len(frequencies)} symbol(s), need at least 2")
    total = sum(frequencies.values())
    if total != original_length:
        raise CorruptStream(
            f"frequency table accounts for {total} symbols but original length is {original_length}"
        )
    if len(packed) != packed_length(bit_count):
        raise CorruptStream(
            f"{bit_count} bits need {packed_length(bit_count)} packed bytes, found {len(packed)}"
        )
    return Container(frequencies, original_length, PackedBitstream(packed, bit_count))
