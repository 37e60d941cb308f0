import os
import random
import subprocess
import sys
import time
from pathlib import Path

import pytest

import huffman_service as hs
from bitstream import BitUnpacker, PackedBitstream
from huffman_container import Container, emit, parse
from huffman_errors import CorruptStream, InsufficientSymbols


def _get_service():
	return hs.HuffmanService()


def test_roundtrip_random_10kb():
	svc = _get_service()

	rng = random.Random(10)
	data = bytes(rng.getrandbits(8) for _ in range(10 * 1024))
	assert len(set(data)) > 200
	compressed = svc.compress(data)
	out = svc.decompress(compressed)
	assert out == data


def test_roundtrip_all_bytes_once():
	svc = _get_service()

	data = bytes(range(256))
	compressed = svc.compress(data)
	out = svc.decompress(compressed)
	assert out == data


@pytest.mark.parametrize("data", [b"ab", b"ba", b"abc", b"\x00\xff", b"aaaaaaaab"])
def test_small_inputs(data):
	svc = _get_service()

	assert svc.decompress(svc.compress(data)) == data


def test_abracadabra_scenario():
	svc = _get_service()

	compressed = svc.compress(b"abracadabra")
	container = parse(compressed)
	assert container.frequencies == {ord('a'): 5, ord('b'): 2, ord('r'): 2, ord('c'): 1, ord('d'): 1}
	assert container.original_length == 11
	# a=0 b=110 r=111 a=0 c=100 a=0 d=101 a=0 b=110 r=111 a=0
	assert container.bitstream == PackedBitstream(b"\x6e\x8a\xdc", 23)
	assert svc.decompress(compressed) == b"abracadabra"


def test_empty_input_is_rejected():
	svc = _get_service()

	with pytest.raises(InsufficientSymbols):
		svc.compress(b"")


def test_single_symbol_input_is_rejected():
	svc = _get_service()

	with pytest.raises(InsufficientSymbols):
		svc.compress(b"aaaa")
	with pytest.raises(InsufficientSymbols):
		svc.compress(b'A' * (1024 * 10))


def test_compress_is_deterministic():
	rng = random.Random(7)
	data = bytes(rng.choice(b"etaoin shrdlu") for _ in range(4096))
	assert len(set(data)) == len(set(b"etaoin shrdlu"))
	first = _get_service().compress(data)
	assert _get_service().compress(data) == first
	assert hs.compress(data) == first


_COMPRESS_STDIN = (
	"import sys, huffman_service; "
	"sys.stdout.write(huffman_service.compress(sys.stdin.buffer.read()).hex())"
)


def _compress_in_subprocess(data, hash_seed):
	env = os.environ.copy()
	env["PYTHONHASHSEED"] = str(hash_seed)
	env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(Path(__file__).parent.parent), env.get("PYTHONPATH")]))
	result = subprocess.run(
		[sys.executable, "-c", _COMPRESS_STDIN],
		input=data,
		capture_output=True,
		env=env,
		timeout=60,
		check=True,
	)
	return bytes.fromhex(result.stdout.decode("ascii"))


def test_compress_is_identical_across_processes():
	rng = random.Random(21)
	data = bytes(rng.choice(b"the rain in spain\n") for _ in range(2048))
	expected = hs.compress(data)
	assert _compress_in_subprocess(data, 1) == expected
	assert _compress_in_subprocess(data, 4242) == expected


def test_skewed_input_compresses():
	container = parse(hs.compress(b"aaaaaaaab"))
	assert container.bitstream.bit_count < 8 * 9
	assert container.bitstream.bit_count == 9


def test_module_level_roundtrip_accepts_bytes_like():
	data = bytearray(b"mississippi")
	assert hs.decompress(memoryview(hs.compress(data))) == bytes(data)


def test_rejects_text_input():
	with pytest.raises(TypeError):
		hs.compress("abracadabra")


def test_truncated_stream_behavior():
	svc = _get_service()

	data = b'This is a test' * 100
	compressed = svc.compress(data)
	with pytest.raises(CorruptStream):
		svc.decompress(compressed[:-1])
	with pytest.raises(CorruptStream):
		svc.decompress(compressed[:-3])


def test_corrupted_header_behavior():
	svc = _get_service()

	compressed = bytearray(svc.compress(b'Hello World' * 50))
	# flip some bits in the beginning to simulate header corruption
	compressed[0] ^= 0xFF
	with pytest.raises(CorruptStream):
		svc.decompress(bytes(compressed))


def test_bit_count_inconsistent_with_table():
	# {a: 8, b: 1} needs 9 bits; only 8 are declared
	raw = emit(Container({ord('a'): 8, ord('b'): 1}, 9, PackedBitstream(b"\xff", 8)))
	with pytest.raises(CorruptStream):
		_get_service().decompress(raw)


def test_walk_detects_exhausted_stream():
	svc = _get_service()
	root = svc.logic.build_tree({ord('a'): 5, ord('b'): 2, ord('r'): 2, ord('c'): 1, ord('d'): 1})

	# a single "1" stops halfway down to b, c, d or r
	with pytest.raises(CorruptStream):
		svc._walk(root, BitUnpacker(b"\x80", 1), 1)


def test_walk_detects_trailing_bits():
	svc = _get_service()
	root = svc.logic.build_tree({ord('a'): 1, ord('b'): 1})

	# a=0 b=1, followed by one bit too many
	assert svc._walk(root, BitUnpacker(b"\x40", 2), 2) == b"ab"
	with pytest.raises(CorruptStream):
		svc._walk(root, BitUnpacker(b"\x40", 3), 2)


def test_service_initializes_logic_attribute():
	svc = _get_service()
	assert hasattr(svc, 'logic')
	assert svc.logic is not None


@pytest.mark.timeout(120)
def test_performance_512kb_baseline():
	svc = _get_service()
	rng = random.Random(99)
	data = bytes(rng.getrandbits(8) for _ in range(512 * 1024))
	t0 = time.time()
	compressed = svc.compress(data)
	assert svc.decompress(compressed) == data
	dur = time.time() - t0
	assert dur > 0
	print(f"Round trip time for 512KB: {dur:.4f}s")
