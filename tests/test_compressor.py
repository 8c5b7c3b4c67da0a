import struct
import pytest

from compressor import HuffmanCompressor
from huffman import HuffmanCode, InvalidCodeError, TruncatedStreamError


def test_compressor_roundtrip(sample_text):
    code = HuffmanCode.from_text(sample_text)
    comp = HuffmanCompressor(code).compress(sample_text)
    assert isinstance(comp, (bytes, bytearray)) and len(comp) > 5

    out = HuffmanCompressor(HuffmanCode.from_table(code.to_table())).decompress(comp)
    assert out == sample_text


def test_compressor_header_and_payload(classic_freqs):
    code = HuffmanCode.from_frequencies(classic_freqs)
    comp = HuffmanCompressor(code).compress("fa")
    # version 1, 5 payload bits "0" + "1100", padded
    assert comp == bytes([1, 0, 0, 0, 5, 0b01100000])


def test_compressor_padding_is_not_decoded(classic_freqs):
    code = HuffmanCode.from_frequencies(classic_freqs)
    arch = HuffmanCompressor(code)
    # "f" is a single 0 bit; seven zero padding bits must not become "f"s
    assert arch.decompress(arch.compress("f")) == "f"


def test_compressor_empty_input(classic_freqs):
    arch = HuffmanCompressor(HuffmanCode.from_frequencies(classic_freqs))
    comp = arch.compress("")
    assert len(comp) == 5
    assert arch.decompress(comp) == ""


def test_compressor_single_symbol_code():
    arch = HuffmanCompressor(HuffmanCode.from_frequencies({'a': 5}))
    comp = arch.compress("aaaaa")
    assert arch.decompress(comp) == "aaaaa"


def test_compressor_unknown_character_raises(classic_freqs):
    arch = HuffmanCompressor(HuffmanCode.from_frequencies(classic_freqs))
    with pytest.raises(InvalidCodeError):
        arch.compress("xyz")


def test_decompress_wrong_version_raises(classic_freqs):
    arch = HuffmanCompressor(HuffmanCode.from_frequencies(classic_freqs))
    bad = struct.pack(">BI", 99, 0)
    with pytest.raises(ValueError):
        _ = arch.decompress(bad)


def test_decompress_truncated_payload_raises(classic_freqs):
    arch = HuffmanCompressor(HuffmanCode.from_frequencies(classic_freqs))
    bad = struct.pack(">BI", HuffmanCompressor.VERSION, 64) + b"\x00"
    with pytest.raises(EOFError):
        _ = arch.decompress(bad)


def test_decompress_cut_code_word(classic_freqs):
    arch = HuffmanCompressor(HuffmanCode.from_frequencies(classic_freqs))
    # "0" + "11": f, then an unfinished code word
    data = struct.pack(">BI", HuffmanCompressor.VERSION, 3) + bytes([0b01100000])
    assert arch.decompress(data) == "f"
    with pytest.raises(TruncatedStreamError):
        arch.decompress(data, strict=True)


def test_compress_payload_over_length_field_raises(classic_freqs, monkeypatch):
    arch = HuffmanCompressor(HuffmanCode.from_frequencies(classic_freqs))
    monkeypatch.setattr(HuffmanCompressor, "MAX_PAYLOAD_BITS", 8)
    assert arch.decompress(arch.compress("fffffff")) == "fffffff"
    with pytest.raises(ValueError):
        arch.compress("ffffffff")
