import argparse
import io
import sys

from typing import List, Optional
from alphabets import VARIANTS, get_codec
from codec import Codec
from errors import CodecError

STDIO = "-"  #: Path meaning stdin/stdout


def get_parser():
    """Create and configure the CLI argument parser.

    :returns: Configured argument parser.
    :rtype: argparse.ArgumentParser
    """
    parser = argparse.ArgumentParser(
        description="RFC 4648 base16/32/64 encoder and decoder"
    )
    subparsers = parser.add_subparsers(
        title="subcommands", dest="cmd", required=True
    )

    for name, alias, help_text in (
        ("encode", "e", "Encode binary input into text"),
        ("decode", "d", "Decode text input back into binary"),
    ):
        sub = subparsers.add_parser(name, aliases=[alias], help=help_text)
        sub.add_argument(
            "input",
            nargs="?",
            default=STDIO,
            help="Input file (default: stdin)",
        )
        sub.add_argument(
            "-o", "--output", default=STDIO, help="Output file (default: stdout)"
        )
        sub.add_argument(
            "-a",
            "--alphabet",
            default="base64",
            choices=sorted(VARIANTS),
            help="Encoding variant (default: base64)",
        )
        sub.add_argument(
            "-n",
            "--no-padding",
            action="store_true",
            help="Do not emit or expect '=' padding",
        )
        sub.add_argument(
            "-s",
            "--strict",
            action="store_true",
            help="Reject non-canonical encodings when decoding",
        )
        sub.add_argument(
            "-q",
            "--quiet",
            action="store_true",
            help="Do not print the size summary",
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


def _open_binary(path: str, mode: str):
    """Open ``path`` in binary ``mode``, or the matching std stream."""
    if path == STDIO:
        std = sys.stdin if "r" in mode else sys.stdout
        return _Unclosable(std.buffer)
    return open(path, mode + "b")


def _open_text(path: str, mode: str):
    """Open ``path`` as a verbatim text stream, or wrap the std stream.

    Text is read one byte per character so any stray byte reaches the
    decoder as a character and is reported as such.
    """
    if path == STDIO:
        std = sys.stdin if "r" in mode else sys.stdout
        return _Unclosable(
            io.TextIOWrapper(
                std.buffer, encoding="latin-1", newline="",
                write_through=True,
            )
        )
    return open(path, mode, encoding="latin-1", newline="")


class _Unclosable:
    """Context manager lending a std stream without closing it on exit.

    :ivar stream: Wrapped stream.
    """

    def __init__(self, stream) -> None:
        self.stream = stream

    def __enter__(self):
        return self.stream

    def __exit__(self, *exc) -> None:
        self.stream.flush()
        if isinstance(self.stream, io.TextIOWrapper):
            self.stream.detach()


def encode_file(
    input_path: str, output_path: str, codec: Codec, quiet: bool
) -> int:
    """Encode ``input_path`` into ``output_path``.

    :param input_path: File to read octets from (``-`` for stdin).
    :type input_path: str
    :param output_path: File to write characters to (``-`` for stdout).
    :type output_path: str
    :param codec: Codec to encode with.
    :type codec: Codec
    :param quiet: Whether to suppress the size summary.
    :type quiet: bool
    :returns: Number of characters written.
    :rtype: int
    :raises FileNotFoundError: If ``input_path`` does not exist.
    :raises CodecError: If encoding fails.
    """
    with _open_binary(input_path, "r") as src:
        with _open_text(output_path, "w") as dst:
            written = codec.encode_stream(src, dst)
    if not quiet:
        print("Encoded size: ", _fmt_bytes(written), file=sys.stderr)
    return written


def decode_file(
    input_path: str, output_path: str, codec: Codec, quiet: bool
) -> int:
    """Decode ``input_path`` into ``output_path``.

    Output written before an error is detected stays in ``output_path``.

    :param input_path: File to read characters from (``-`` for stdin).
    :type input_path: str
    :param output_path: File to write octets to (``-`` for stdout).
    :type output_path: str
    :param codec: Codec to decode with.
    :type codec: Codec
    :param quiet: Whether to suppress the size summary.
    :type quiet: bool
    :returns: Number of octets written.
    :rtype: int
    :raises FileNotFoundError: If ``input_path`` does not exist.
    :raises CodecError: If the input is not a valid encoding.
    """
    with _open_text(input_path, "r") as src:
        with _open_binary(output_path, "w") as dst:
            written = codec.decode_stream(src, dst)
    if not quiet:
        print("Decoded size: ", _fmt_bytes(written), file=sys.stderr)
    return written


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the CLI tool.

    :param argv: Arguments without the program name (default: sys.argv).
    :type argv: Optional[List[str]]
    :returns: Process exit status.
    :rtype: int
    """
    parser = get_parser()
    args = parser.parse_args(argv)

    codec = get_codec(
        args.alphabet,
        pads=False if args.no_padding else None,
        strict=args.strict,
    )
    run = encode_file if args.cmd in ["encode", "e"] else decode_file
    try:
        run(args.input, args.output, codec, args.quiet)
    except FileNotFoundError as e:
        print(f"[!] File not found: {e.filename}", file=sys.stderr)
        return 1
    except CodecError as e:
        print(f"[!] {args.alphabet} {args.cmd} failed: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
