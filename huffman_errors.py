# filename: huffman_errors.py


class CoreError(Exception):
    """Base class for every failure raised by the compressor."""


class InsufficientSymbols(CoreError):
    def __init__(self, distinct):
        super().__init__(
            f"cannot build a huffman tree from {distinct} distinct symbol(s); at least 2 are required"
        )
        self.distinct = distinct


class CorruptStream(CoreError):
    pass


class IoFailure(CoreError):
    def __init__(self, path, reason):
        super().__init__(f"{path}: {reason}")
        self.path = path
