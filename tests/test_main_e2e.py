import io
import sys


def test_encode_and_decode_files_roundtrip(tmp_path, m, sample_bytes):
    src = tmp_path / "in.bin"
    src.write_bytes(sample_bytes)
    enc = tmp_path / "in.b32"
    dec = tmp_path / "out.bin"

    assert m.main(["encode", str(src), "-o", str(enc), "-a", "base32",
                   "-q"]) == 0
    text = enc.read_text(encoding="ascii")
    assert len(text) % 8 == 0

    assert m.main(["decode", str(enc), "-o", str(dec), "-a", "base32",
                   "-q"]) == 0
    assert dec.read_bytes() == sample_bytes


def test_encode_file_reports_size(tmp_path, m, capsys):
    src = tmp_path / "foo.txt"
    src.write_bytes(b"foobar")
    out = tmp_path / "foo.b64"
    assert m.encode_file(str(src), str(out), m.get_codec("base64"),
                         False) == 8
    assert out.read_text() == "Zm9vYmFy"
    assert "Encoded size" in capsys.readouterr().err


def test_encode_stdin_to_stdout(m, monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(b"foob")))
    assert m.main(["e", "-n", "-q"]) == 0
    assert capsys.readouterr().out == "Zm9vYg"


def test_decode_stdin_to_stdout(m, monkeypatch, capsysbinary):
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(b"666F6F")))
    assert m.main(["d", "-a", "base16", "-q"]) == 0
    assert capsysbinary.readouterr().out == b"foo"


def test_decode_rejects_trailing_newline(tmp_path, m, capsys):
    src = tmp_path / "in.b64"
    src.write_bytes(b"Zm9v\n")
    out = tmp_path / "out.bin"
    assert m.main(["decode", str(src), "-o", str(out)]) == 1
    assert "[!]" in capsys.readouterr().err
    assert out.read_bytes() == b"foo"


def test_strict_flag(tmp_path, m):
    src = tmp_path / "in.b64"
    src.write_text("Zh==")
    out = tmp_path / "out.bin"
    assert m.main(["decode", str(src), "-o", str(out), "-q"]) == 0
    assert out.read_bytes() == b"f"
    assert m.main(["decode", str(src), "-o", str(out), "-q", "-s"]) == 1


def test_missing_input_file(tmp_path, m, capsys):
    rc = m.main(["encode", str(tmp_path / "nope.bin"), "-q"])
    assert rc == 1
    assert "File not found" in capsys.readouterr().err
