# filename: bitstream.py

from collections import namedtuple

from huffman_errors import CorruptStream

BITS_PER_BYTE = 8

# data holds the packed bytes; bit_count says how many of their bits are payload.
PackedBitstream = namedtuple("PackedBitstream", ["data", "bit_count"])


def packed_length(bit_count):
    return (bit_count + BITS_PER_BYTE - 1) // BITS_PER_BYTE


class BitPacker:
    """Accumulates bits most-significant-bit first into a byte buffer."""

    def __init__(self):
        self._buffer = bytearray()
        self._current_byte = 0
        self._filled = 0
        self.bit_count = 0

    def write(self, bit):
        if bit:
            self._current_byte |= 1 << (BITS_PER_BYTE - self._filled - 1)
        self._filled += 1
        self.bit_count += 1
        if self._filled == BITS_PER_BYTE:
            self._buffer.append(self._current_byte)
            self._current_byte = 0
            self._filled = 0

    def extend(self, bits):
        for bit in bits:
            self.write(bit)

    def getvalue(self):
        """Return the packed bits; a partial last byte is zero-padded on the right."""
        data = bytes(self._buffer)
        if self._filled:
            data += bytes([self._current_byte])
        return PackedBitstream(data, self.bit_count)


def pack_bits(bits):
    packer = BitPacker()
    packer.extend(bits)
    return packer.getvalue()


class BitUnpacker:
    """Lazily yields the payload bits of a packed buffer.

    Every ``iter()`` starts again from the first bit. The constructor rejects a
    buffer whose size disagrees with ``bit_count`` or whose padding is not zero,
    so padding can never be read back as payload.
    """

    def __init__(self, data, bit_count):
        if bit_count < 0:
            raise CorruptStream(f"negative bit count {bit_count}")
        expected = packed_length(bit_count)
        if len(data) != expected:
            raise CorruptStream(
                f"{bit_count} bits need {expected} packed bytes, found {len(data)}"
            )
        padding = expected * BITS_PER_BYTE - bit_count
        if padding and data[-1] & ((1 << padding) - 1):
            raise CorruptStream(f"non-zero padding in the last {padding} bit(s)")
        self.data = bytes(data)
        self.bit_count = bit_count

    @classmethod
    def from_bitstream(cls, bitstream):
        return cls(bitstream.data, bitstream.bit_count)

    def __len__(self):
        return self.bit_count

    def __iter__(self):
        remaining = self.bit_count
        for byte in self.data:
            for shift in range(BITS_PER_BYTE - 1, -1, -1):
                if not remaining:
                    return
                remaining -= 1
                yield bool((byte >> shift) & 1)
