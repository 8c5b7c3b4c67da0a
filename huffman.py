import heapq
from collections import abc
import io
import re
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

ALPHABET_SIZE = 256  #: Symbol codes are single 8-bit character values

Frequencies = Union[Sequence[int], Mapping[int, int]]

_DECIMAL = re.compile(r"[0-9]+")


class HuffmanError(ValueError):
    """Base class for all Huffman code errors."""


class TreeConstructionError(HuffmanError):
    """Raised when a frequency table cannot produce a tree."""


class TableParseError(HuffmanError):
    """Raised when a saved code table is malformed.

    :ivar line_number: 1-based line of the table where parsing failed.
    :type line_number: int
    """

    def __init__(self, message: str, line_number: int):
        super().__init__(f"line {line_number}: {message}")
        self.line_number = line_number


class InvalidCodeError(HuffmanError):
    """Raised when bits or characters do not belong to the code."""


class TruncatedStreamError(HuffmanError):
    """Raised by strict decoding when the bits end in the middle of a code."""


class HuffmanNode:
    """Node for a standard binary Huffman tree.

    :ivar symbol: Character code stored at a leaf; ``None`` for internal nodes.
    :type symbol: int | None
    :ivar freq: Frequency (weight) of the subtree rooted at this node.
    :type freq: int
    :ivar left: Left child node (bit ``0``).
    :type left: HuffmanNode | None
    :ivar right: Right child node (bit ``1``).
    :type right: HuffmanNode | None
    :ivar order: Creation index used to break frequency ties.
    :type order: int
    """

    def __init__(self, symbol=None, freq=0, left=None, right=None, order=0):
        self.symbol = symbol
        self.freq = freq
        self.left = left
        self.right = right
        self.order = order

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def __lt__(self, other):
        """Order nodes by frequency, then by creation order.

        :param other: Another node to compare with.
        :type other: HuffmanNode
        :returns: ``True`` if this node should leave the heap first.
        :rtype: bool
        """
        return (self.freq, self.order) < (other.freq, other.order)


def _positive_entries(frequencies: Frequencies) -> List[Tuple[int, int]]:
    if isinstance(frequencies, abc.Mapping):
        counts = {}
        for sym, count in frequencies.items():
            if isinstance(sym, str):
                if len(sym) != 1:
                    raise TreeConstructionError(
                        f"Not a single character: {sym!r}"
                    )
                sym = ord(sym)
            if sym in counts:
                raise TreeConstructionError(f"Symbol given twice: {sym}")
            counts[sym] = count
        items = sorted(counts.items())
    else:
        items = list(enumerate(frequencies))

    entries = []
    for symbol, count in items:
        if not 0 <= symbol < ALPHABET_SIZE:
            raise TreeConstructionError(f"Symbol out of range: {symbol}")
        if count < 0:
            raise TreeConstructionError(
                f"Negative frequency {count} for symbol {symbol}"
            )
        if count > 0:
            entries.append((symbol, count))
    return entries


def build_tree(frequencies: Frequencies) -> HuffmanNode:
    """Build a Huffman tree by repeatedly merging the two rarest nodes.

    Leaves are created in ascending symbol order and every merged node gets
    the next creation index, so equal frequencies always resolve the same
    way: smaller symbols first, then older merged nodes.

    :param frequencies: Counts indexed by symbol code, either a sequence of
                        at most ``ALPHABET_SIZE`` entries or a mapping whose
                        keys are codes or single characters.
    :type frequencies: Sequence[int] | Mapping[int, int]
    :returns: Root of the tree. A single positive symbol yields a lone leaf.
    :rtype: HuffmanNode
    :raises TreeConstructionError: If no symbol has a positive count, a count
        is negative, a symbol is outside the alphabet, or a mapping names the
        same symbol twice (e.g. ``'a'`` and ``97``).
    """
    entries = _positive_entries(frequencies)
    if not entries:
        raise TreeConstructionError("No symbol has a positive frequency")

    heap = [
        HuffmanNode(symbol=sym, freq=freq, order=i)
        for i, (sym, freq) in enumerate(entries)
    ]
    heapq.heapify(heap)
    order = len(heap)

    while len(heap) > 1:
        left = heapq.heappop(heap)
        right = heapq.heappop(heap)
        merged = HuffmanNode(
            freq=left.freq + right.freq, left=left, right=right, order=order
        )
        order += 1
        heapq.heappush(heap, merged)

    return heap[0]


def count_frequencies(text: str) -> List[int]:
    """Count occurrences of every character code in ``text``.

    :param text: Text whose characters all fall in ``0..ALPHABET_SIZE - 1``.
    :type text: str
    :returns: Table of ``ALPHABET_SIZE`` counts indexed by character code.
    :rtype: List[int]
    :raises TreeConstructionError: If a character is outside the alphabet.
    """
    counts = [0] * ALPHABET_SIZE
    for ch in text:
        code = ord(ch)
        if code >= ALPHABET_SIZE:
            raise TreeConstructionError(f"Character out of range: {ch!r}")
        counts[code] += 1
    return counts


class HuffmanCode:
    """A prefix code backed by a Huffman tree.

    Built from frequencies or loaded from a saved table. The tree is not
    modified after that, so one instance may serve many decodes.

    :ivar root: Root node of the tree.
    :type root: HuffmanNode
    """

    def __init__(self, root: HuffmanNode):
        self.root = root
        self._codes: Optional[Dict[int, str]] = None

    @classmethod
    def from_frequencies(cls, frequencies: Frequencies) -> "HuffmanCode":
        """Build a code from a frequency table (see :func:`build_tree`)."""
        return cls(build_tree(frequencies))

    @classmethod
    def from_text(cls, text: str) -> "HuffmanCode":
        return cls.from_frequencies(count_frequencies(text))

    @classmethod
    def load(cls, lines: Iterable[str]) -> "HuffmanCode":
        """Rebuild a code from a saved table.

        The table holds two lines per leaf: the decimal symbol code and then
        its path of ``0``/``1`` characters. Each path is walked from the root,
        creating placeholder nodes where children are missing. The last node
        takes the symbol and keeps any children it already has.

        :param lines: Table lines, e.g. an open text file.
        :type lines: Iterable[str]
        :returns: The reconstructed code.
        :rtype: HuffmanCode
        :raises TableParseError: On a non-integer or out-of-range symbol, a
            path with characters other than ``0``/``1``, a symbol without a
            path line, or a table with no records.
        """
        root = HuffmanNode()
        records = 0
        it = iter(lines)
        line_number = 0

        for symbol_line in it:
            line_number += 1
            symbol_line = symbol_line.rstrip("\r\n")
            if not _DECIMAL.fullmatch(symbol_line):
                raise TableParseError(
                    f"Invalid symbol code: {symbol_line!r}", line_number
                )
            symbol = int(symbol_line)
            if not 0 <= symbol < ALPHABET_SIZE:
                raise TableParseError(
                    f"Symbol code out of range: {symbol}", line_number
                )

            path = next(it, None)
            line_number += 1
            if path is None:
                raise TableParseError(
                    f"Missing path for symbol {symbol}", line_number
                )
            path = path.rstrip("\r\n")

            node = root
            for bit in path:
                if bit == "0":
                    if node.left is None:
                        node.left = HuffmanNode()
                    node = node.left
                elif bit == "1":
                    if node.right is None:
                        node.right = HuffmanNode()
                    node = node.right
                else:
                    raise TableParseError(
                        f"Invalid path character {bit!r} in {path!r}",
                        line_number,
                    )
            node.symbol = symbol
            records += 1

        if not records:
            raise TableParseError("Code table has no records", line_number + 1)
        return cls(root)

    @classmethod
    def from_table(cls, table: str) -> "HuffmanCode":
        return cls.load(table.splitlines())

    def iter_codes(self) -> Iterator[Tuple[int, str]]:
        """Yield ``(symbol, path)`` for every leaf, left to right.

        :returns: Iterator of symbol codes and their ``0``/``1`` paths.
        :rtype: Iterator[Tuple[int, str]]
        """
        stack = [(self.root, "")]
        while stack:
            node, path = stack.pop()
            if node.is_leaf:
                yield node.symbol, path
                continue
            # right pushed first so the left subtree comes out first
            if node.right is not None:
                stack.append((node.right, path + "1"))
            if node.left is not None:
                stack.append((node.left, path + "0"))

    @property
    def codes(self) -> Dict[int, str]:
        if self._codes is None:
            self._codes = dict(self.iter_codes())
        return self._codes

    def save(self, output) -> None:
        """Write the table: symbol code line, then path line, for each leaf.

        :param output: Writable text stream.
        :returns: None
        :rtype: None
        """
        for symbol, path in self.iter_codes():
            output.write(f"{symbol}\n{path}\n")

    def to_table(self) -> str:
        buf = io.StringIO()
        self.save(buf)
        return buf.getvalue()

    def encode(self, text: str) -> str:
        """Concatenate the code word of every character in ``text``.

        A single-leaf tree has the empty code word, so each of its characters
        is written as one ``0`` bit instead, matching :meth:`translate`.

        :param text: Text to encode.
        :type text: str
        :returns: Bits as a string of ``0``/``1`` characters.
        :rtype: str
        :raises InvalidCodeError: If a character has no code word.
        """
        codes = self.codes
        degenerate = self.root.is_leaf
        parts = []
        for ch in text:
            path = codes.get(ord(ch))
            if path is None:
                raise InvalidCodeError(f"No code for character {ch!r}")
            parts.append("0" if degenerate else path)
        return "".join(parts)

    def translate(self, bits, output, strict: bool = False) -> int:
        """Decode bits from ``bits`` and write characters to ``output``.

        The cursor starts at the root. On a leaf it emits the symbol and goes
        back to the root without reading; otherwise it reads one bit and moves
        left on ``0``, right on anything else. A leaf reached by the final bit
        is emitted after the source runs dry.

        A tree made of a single leaf emits its symbol once per bit read.

        :param bits: Bit source with ``has_next_bit()`` and ``next_bit()``.
        :param output: Text sink with ``write(str)``.
        :param strict: Raise instead of stopping quietly when the bits end in
                       the middle of a code word.
        :type strict: bool
        :returns: Number of characters written.
        :rtype: int
        :raises InvalidCodeError: If a bit leads outside the tree.
        :raises TruncatedStreamError: If ``strict`` and the stream is cut.
        """
        root = self.root
        emitted = 0

        if root.is_leaf:
            while bits.has_next_bit():
                bits.next_bit()
                output.write(chr(root.symbol))
                emitted += 1
            return emitted

        current = root
        while bits.has_next_bit():
            if current.is_leaf:
                output.write(chr(current.symbol))
                emitted += 1
                current = root
            else:
                bit = bits.next_bit()
                current = current.left if bit == 0 else current.right
                if current is None:
                    raise InvalidCodeError("Bit sequence matches no code")

        if current.is_leaf:
            output.write(chr(current.symbol))
            emitted += 1
        elif strict and current is not root:
            raise TruncatedStreamError("Bit stream ends inside a code word")
        return emitted

    def decode(self, bits, strict: bool = False) -> str:
        out = io.StringIO()
        self.translate(bits, out, strict=strict)
        return out.getvalue()
