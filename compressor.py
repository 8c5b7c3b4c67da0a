from bitops import BitWriter, BitReader
from huffman import HuffmanCode


class HuffmanCompressor:
    """Packs text into a bit stream with a fixed Huffman code and back.

    Stream layout (MSB first):

    - Version: 8 bits
    - Payload length in bits: 32 bits
    - Payload: concatenated code words, zero-padded to a whole byte

    The code table itself is not stored; both sides must share it.

    :ivar VERSION: Format version of the stream.
    :type VERSION: int
    :ivar MAX_PAYLOAD_BITS: Payload sizes must stay below this to fit the
        32-bit length field.
    :type MAX_PAYLOAD_BITS: int
    :ivar code: Huffman code used in both directions.
    :type code: HuffmanCode
    """

    VERSION = 1
    MAX_PAYLOAD_BITS = 1 << 32

    def __init__(self, code: HuffmanCode):
        self.code = code

    def compress(self, text: str) -> bytes:
        """Encode ``text`` into a versioned bit stream.

        :param text: Text whose characters all have code words.
        :type text: str
        :returns: Compressed byte stream.
        :rtype: bytes
        :raises InvalidCodeError: If a character has no code word.
        :raises ValueError: If the payload does not fit the length field.
        """
        bits = self.code.encode(text)
        if len(bits) >= self.MAX_PAYLOAD_BITS:
            raise ValueError(
                f"Payload too large: {len(bits)} bits, "
                f"limit is {self.MAX_PAYLOAD_BITS - 1}"
            )

        output = BitWriter()
        output.write_bits(self.VERSION, 8)
        output.write_bits(len(bits), 32)
        output.write_path(bits)
        return output.flush()

    def decompress(self, data: bytes, strict: bool = False) -> str:
        """Decode a stream produced by ``compress``.

        :param data: Compressed byte stream.
        :type data: bytes
        :param strict: Fail on a payload that ends inside a code word.
        :type strict: bool
        :returns: The decoded text.
        :rtype: str
        :raises ValueError: If the version is unsupported or the payload
            does not match the code.
        :raises EOFError: If the stream is shorter than its header says.
        """
        reader = BitReader(data)

        version = reader.read_bits(8)
        if version != self.VERSION:
            raise ValueError(f"Unsupported version: {version}")

        nbits = reader.read_bits(32)
        reader.limit(nbits)
        return self.code.decode(reader, strict=strict)
