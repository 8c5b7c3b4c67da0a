import argparse
import os
import sys

from compressor import HuffmanCompressor
from huffman import HuffmanCode

TEXT_ENCODING = "latin-1"  #: Maps every byte to exactly one symbol code


def get_parser():
    """Create and configure the CLI argument parser.

    :returns: Configured argument parser.
    :rtype: argparse.ArgumentParser
    """
    parser = argparse.ArgumentParser(
        description="Build Huffman code tables and compress text with them"
    )
    subparsers = parser.add_subparsers(
        title="subcommands", dest="cmd", required=True
    )

    makecode = subparsers.add_parser(
        "makecode", aliases=["m"], help="Build a code table from a text file"
    )
    makecode.add_argument("input", help="Text file to count characters in")
    makecode.add_argument(
        "-o", "--output", required=True, help="Output code table path"
    )

    compress = subparsers.add_parser(
        "compress", aliases=["c"], help="Compress a text file with a code table"
    )
    compress.add_argument("input", help="Text file to compress")
    compress.add_argument(
        "-c", "--code", required=True, help="Code table produced by makecode"
    )
    compress.add_argument(
        "-o", "--output", required=True, help="Output compressed file path"
    )

    decompress = subparsers.add_parser(
        "decompress", aliases=["d"], help="Decompress a file with a code table"
    )
    decompress.add_argument("input", help="Compressed file to decode")
    decompress.add_argument(
        "-c", "--code", required=True, help="Code table used to compress"
    )
    decompress.add_argument(
        "-o", "--output", required=True, help="Output text file path"
    )
    decompress.add_argument(
        "--strict",
        action="store_true",
        help="Fail if the data ends in the middle of a code word",
    )

    return parser


def _fmt_bytes(n: int) -> str:
    """Format a byte count into a human-readable string.

    :param n: Number of bytes.
    :type n: int
    :returns: Human-readable string.
    :rtype: str
    """
    for unit in ['', 'Ki', 'Mi', 'Gi', 'Ti']:
        if abs(n) < 1024:
            return f"{n:.2f} {unit}B"
        n /= 1024
    return f"{n:.2f} PiB"


def _read_text(path: str) -> str:
    with open(path, "r", encoding=TEXT_ENCODING, newline="") as f:
        return f.read()


def _load_code(path: str) -> HuffmanCode:
    """Load a saved code table.

    :param path: Path to a table written by ``make_code``.
    :type path: str
    :returns: The reconstructed code.
    :rtype: HuffmanCode
    :raises TableParseError: If the table is malformed.
    """
    with open(path, "r", encoding="ascii", newline="") as f:
        return HuffmanCode.load(f)


def make_code(input_path: str, output_path: str) -> None:
    """Count characters in a text file and save the resulting code table.

    :param input_path: Text file to take frequencies from.
    :type input_path: str
    :param output_path: Destination of the code table.
    :type output_path: str
    :returns: None
    :rtype: None
    :raises TreeConstructionError: If the file is empty.
    """
    try:
        text = _read_text(input_path)
    except FileNotFoundError:
        print(f"[!] Input file not found: {input_path}")
        return
    code = HuffmanCode.from_text(text)
    with open(output_path, "w", encoding="ascii", newline="\n") as out:
        code.save(out)
    print("Symbols in code: ", len(code.codes))


def compress_file(input_path: str, code_path: str, output_path: str) -> None:
    """Compress a text file with a saved code table.

    :param input_path: Text file to compress.
    :type input_path: str
    :param code_path: Code table to compress with.
    :type code_path: str
    :param output_path: Destination of the compressed stream.
    :type output_path: str
    :returns: None
    :rtype: None
    :raises HuffmanError: If the table is malformed or the text uses a
        character the table has no code for.
    """
    try:
        text = _read_text(input_path)
        code = _load_code(code_path)
    except FileNotFoundError as e:
        print(f"[!] File not found: {e.filename}")
        return
    data = HuffmanCompressor(code).compress(text)
    with open(output_path, "wb") as out:
        out.write(data)

    before = len(text.encode(TEXT_ENCODING))
    after = len(data)
    print("Size before compression: ", _fmt_bytes(before))
    print("Size after compression: ", _fmt_bytes(after))
    if after:
        print(f"Compression ratio: {before / after:.2f}")


def decompress_file(
    input_path: str, code_path: str, output_path: str, strict: bool = False
) -> None:
    """Decompress a file produced by ``compress_file``.

    :param input_path: Compressed file to decode.
    :type input_path: str
    :param code_path: Code table the file was compressed with.
    :type code_path: str
    :param output_path: Destination text file.
    :type output_path: str
    :param strict: Fail on data that ends inside a code word.
    :type strict: bool
    :returns: None
    :rtype: None
    :raises ValueError: If the stream version is unsupported or the data
        does not match the code.
    :raises EOFError: If the compressed file is truncated.
    """
    try:
        with open(input_path, "rb") as f:
            data = f.read()
        code = _load_code(code_path)
    except FileNotFoundError as e:
        print(f"[!] File not found: {e.filename}")
        return
    text = HuffmanCompressor(code).decompress(data, strict=strict)
    out_dir = os.path.dirname(os.path.abspath(output_path))
    os.makedirs(out_dir, exist_ok=True)
    with open(output_path, "w", encoding=TEXT_ENCODING, newline="") as out:
        out.write(text)


def main():
    """Entry point for the CLI tool.

    :returns: None
    :rtype: None
    """
    parser = get_parser()
    args = parser.parse_args()

    try:
        if args.cmd in ["makecode", "m"]:
            make_code(args.input, args.output)
        elif args.cmd in ["compress", "c"]:
            compress_file(args.input, args.code, args.output)
        elif args.cmd in ["decompress", "d"]:
            decompress_file(
                args.input, args.code, args.output,
                getattr(args, "strict", False)
            )
    except (ValueError, EOFError) as e:
        print(f"[!] {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
