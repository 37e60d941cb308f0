# filename: huffman_core.py

import heapq
import logging
from collections import Counter

from huffman_errors import InsufficientSymbols

logger = logging.getLogger(__name__)


def _precedes(node, other):
    # Weight first; two leaves fall back to their symbols, anything else to creation order.
    if node.weight != other.weight:
        return node.weight < other.weight
    if node.is_leaf and other.is_leaf:
        return node.symbol < other.symbol
    return node.node_id < other.node_id


class HuffmanLeaf:
    is_leaf = True

    def __init__(self, symbol, weight, node_id):
        self.symbol = symbol
        self.weight = weight
        self.node_id = node_id

    __lt__ = _precedes

    def __repr__(self):
        return f"HuffmanLeaf(symbol={self.symbol!r}, weight={self.weight}, id={self.node_id})"


class HuffmanInternal:
    is_leaf = False

    def __init__(self, left, right, node_id):
        self.left = left
        self.right = right
        self.weight = left.weight + right.weight
        self.node_id = node_id

    __lt__ = _precedes

    def __repr__(self):
        return f"HuffmanInternal(weight={self.weight}, id={self.node_id})"


def count_frequencies(data):
    return dict(Counter(data))


def format_code(code):
    return "".join("1" if bit else "0" for bit in code)


class HuffmanLogic:
    def count_frequencies(self, data):
        # Frequency analysis of the input byte data
        freqs = count_frequencies(data)
        logger.debug("counted %d distinct symbols over %d bytes", len(freqs), len(data))
        return freqs

    def build_tree(self, freqs):
        if len(freqs) < 2:
            raise InsufficientSymbols(len(freqs))

        # Leaf ids follow symbol order so the table's iteration order never matters
        priority_queue = []
        for node_id, symbol in enumerate(sorted(freqs)):
            weight = freqs[symbol]
            if weight <= 0:
                raise ValueError(f"symbol {symbol!r} has non-positive count {weight}")
            priority_queue.append(HuffmanLeaf(symbol, weight, node_id))
        heapq.heapify(priority_queue)

        # Iteratively merge nodes to form the binary tree
        next_id = len(priority_queue)
        while len(priority_queue) > 1:
            left = heapq.heappop(priority_queue)
            right = heapq.heappop(priority_queue)
            merged = HuffmanInternal(left, right, next_id)
            logger.debug("merge #%d: left=%r right=%r weight=%d", next_id, left, right, merged.weight)
            heapq.heappush(priority_queue, merged)
            next_id += 1

        return priority_queue[0]

    def generate_codes(self, node):
        if node.is_leaf:
            raise InsufficientSymbols(1)

        codes = {}
        stack = [(node, ())]
        while stack:
            current, path = stack.pop()
            if current.is_leaf:
                codes[current.symbol] = path
                continue
            # Right is pushed first so the left subtree is walked first
            stack.append((current.right, path + (True,)))
            stack.append((current.left, path + (False,)))

        if logger.isEnabledFor(logging.DEBUG):
            for symbol in sorted(codes):
                logger.debug("%r | %s", symbol, format_code(codes[symbol]))
        return codes
