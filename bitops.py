class BitWriter:
    """Bit-packing writer.

    Accumulates individual bits into bytes and buffers them until
    flushed.

    :ivar buffer: Internal byte buffer holding fully written bytes.
    :type buffer: bytearray
    :ivar bit_buffer: 8-bit scratch register for accumulating pending bits.
    :type bit_buffer: int
    :ivar bit_count: Number of valid bits currently stored in ``bit_buffer`` (0-7).
    :type bit_count: int
    :ivar bits_written: Total number of bits written so far, padding excluded.
    :type bits_written: int
    """

    def __init__(self):
        self.buffer = bytearray()
        self.bit_buffer = 0
        self.bit_count = 0
        self.bits_written = 0

    def write_bit(self, bit: int):
        self.bit_buffer = (self.bit_buffer << 1) | (1 if bit else 0)
        self.bit_count += 1
        self.bits_written += 1
        if self.bit_count == 8:
            self.buffer.append(self.bit_buffer)
            self.bit_buffer = 0
            self.bit_count = 0

    def write_bits(self, value: int, nbits: int):
        """Write the lowest ``nbits`` of ``value`` to the buffer, MSB first.

        :param value: Integer whose bits will be written.
        :type value: int
        :param nbits: Number of bits from ``value`` to write.
        :type nbits: int
        :returns: None
        :rtype: None
        """
        for i in range(nbits - 1, -1, -1):
            self.write_bit((value >> i) & 1)

    def write_path(self, path: str):
        """Write a code word given as a string of ``0``/``1`` characters.

        :param path: Code word, e.g. ``"1101"``.
        :type path: str
        :returns: None
        :rtype: None
        :raises ValueError: If ``path`` holds any other character.
        """
        for ch in path:
            if ch not in "01":
                raise ValueError(f"Invalid bit character: {ch!r}")
            self.write_bit(ch == "1")

    def flush(self) -> bytes:
        """Flush remaining bits (if any) and return the full byte buffer.

        Any partial byte in ``bit_buffer`` is padded with zeros to complete the
        byte before being appended.

        :returns: The accumulated bytes written so far.
        :rtype: bytes
        """
        if self.bit_count > 0:
            self.bit_buffer <<= (8 - self.bit_count)
            self.buffer.append(self.bit_buffer)
            self.bit_buffer = 0
            self.bit_count = 0
        return bytes(self.buffer)


class BitReader:
    """Sequential bit reader over a bytes-like object.

    Serves both multi-bit header fields (:meth:`read_bits`) and the
    one-bit-at-a-time source interface used for decoding
    (:meth:`has_next_bit` / :meth:`next_bit`).

    :ivar data: Input data to read bits from.
    :type data: bytes
    :ivar pos: Current position in ``data`` (byte index).
    :type pos: int
    :ivar bit_buffer: Scratch register holding the current source byte.
    :type bit_buffer: int
    :ivar bit_count: Number of unread bits remaining in ``bit_buffer`` (0-8).
    :type bit_count: int
    :ivar bits_read: Total number of bits consumed.
    :type bits_read: int
    :ivar bit_limit: Number of bits readable in total; defaults to all of
                     ``data``.
    :type bit_limit: int
    """

    def __init__(self, data: bytes):
        self.data = data
        self.pos = 0
        self.bit_buffer = 0
        self.bit_count = 0
        self.bits_read = 0
        self.bit_limit = len(data) * 8

    def limit(self, nbits: int):
        """Allow only ``nbits`` more bits to be read.

        Used to stop before the zero padding of the last byte.

        :param nbits: Number of further bits to expose.
        :type nbits: int
        :returns: None
        :rtype: None
        :raises EOFError: If ``data`` holds fewer than ``nbits`` further bits.
        """
        available = len(self.data) * 8 - self.bits_read
        if nbits > available:
            raise EOFError(
                f"Unexpected end of data: {nbits} bits declared, "
                f"{available} available"
            )
        self.bit_limit = self.bits_read + nbits

    def read_bits(self, nbits: int) -> int:
        """Read ``nbits`` bits from the stream and return them as an integer.

        Bits are returned MSB-first in the integer.

        :param nbits: Number of bits to read.
        :type nbits: int
        :returns: The integer value composed of the next ``nbits`` bits.
        :rtype: int
        :raises EOFError: If the end of data is reached before reading ``nbits``.
        """
        result = 0
        for _ in range(nbits):
            if self.bits_read >= self.bit_limit:
                raise EOFError("Unexpected end of data")
            if self.bit_count == 0:
                self.bit_buffer = self.data[self.pos]
                self.pos += 1
                self.bit_count = 8
            result = (result << 1) | ((self.bit_buffer >> (self.bit_count - 1)) & 1)
            self.bit_count -= 1
            self.bits_read += 1
        return result

    def has_next_bit(self) -> bool:
        return self.bits_read < self.bit_limit

    def next_bit(self) -> int:
        return self.read_bits(1)


class BitString:
    """Bit source over a string of ``0``/``1`` characters.

    :ivar bits: The bit characters.
    :type bits: str
    :ivar index: Index of the next unread character.
    :type index: int
    """

    def __init__(self, bits: str):
        for ch in bits:
            if ch not in "01":
                raise ValueError(f"Invalid bit character: {ch!r}")
        self.bits = bits
        self.index = 0

    def has_next_bit(self) -> bool:
        return self.index < len(self.bits)

    def next_bit(self) -> int:
        if self.index >= len(self.bits):
            raise EOFError("Unexpected end of bits")
        bit = 1 if self.bits[self.index] == "1" else 0
        self.index += 1
        return bit
