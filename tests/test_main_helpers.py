import pytest


def test_fmt_bytes(m):
    assert m._fmt_bytes(0) == "0.00 B"
    assert m._fmt_bytes(1024).endswith("KiB")


def test_cli_parser_accepts_subcommands(m):
    parser = m.get_parser()
    ns = parser.parse_args(["encode", "file1", "-o", "out.txt"])
    assert ns.cmd in ("encode", "e")
    assert ns.alphabet == "base64" and not ns.no_padding
    ns2 = parser.parse_args(["d", "-a", "base32", "-n", "-s"])
    assert ns2.cmd in ("decode", "d")
    assert ns2.input == "-" and ns2.output == "-"
    assert ns2.no_padding and ns2.strict


def test_cli_parser_rejects_unknown_variant(m, capsys):
    with pytest.raises(SystemExit):
        m.get_parser().parse_args(["encode", "-a", "base58"])
