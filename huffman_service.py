# filename: huffman_service.py

import logging

from bitstream import BitPacker, BitUnpacker
from huffman_container import Container, emit, parse
from huffman_core import HuffmanLogic
from huffman_errors import CorruptStream

logger = logging.getLogger(__name__)


def _as_bytes(data):
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError(f"expected a bytes-like object, got {type(data).__name__}")
    return bytes(data)


class HuffmanService:
    def __init__(self):
        self.logic = HuffmanLogic()

    def compress(self, data):
        data = _as_bytes(data)
        freqs = self.logic.count_frequencies(data)
        tree = self.logic.build_tree(freqs)
        codes = self.logic.generate_codes(tree)

        packer = BitPacker()
        for symbol in data:
            packer.extend(codes[symbol])

        compressed = emit(Container(freqs, len(data), packer.getvalue()))
        logger.debug("compressed %d bytes into %d (%d payload bits)", len(data), len(compressed), packer.bit_count)
        return compressed

    def decompress(self, data):
        container = parse(_as_bytes(data))
        tree = self.logic.build_tree(container.frequencies)
        codes = self.logic.generate_codes(tree)

        # The stored table fixes exactly how many bits the payload must hold
        expected_bits = sum(count * len(codes[symbol]) for symbol, count in container.frequencies.items())
        if expected_bits != container.bitstream.bit_count:
            raise CorruptStream(
                f"frequency table implies {expected_bits} bits but the stream declares "
                f"{container.bitstream.bit_count}"
            )

        decoded = self._walk(tree, BitUnpacker.from_bitstream(container.bitstream), container.original_length)
        logger.debug("decompressed %d bytes into %d", len(data), len(decoded))
        return decoded

    def _walk(self, root, bits, expected):
        out = bytearray()
        node = root
        for bit in bits:
            if len(out) == expected:
                raise CorruptStream(f"trailing bits after {expected} decoded symbols")
            node = node.right if bit else node.left
            if node.is_leaf:
                out.append(node.symbol)
                node = root
        if len(out) != expected or node is not root:
            raise CorruptStream(f"bitstream exhausted after {len(out)} of {expected} symbols")
        return bytes(out)


_default_service = HuffmanService()


def compress(data):
    return _default_service.compress(data)


def decompress(data):
    return _default_service.decompress(data)
