import sys
from pathlib import Path
import importlib
import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

#: RFC 4648 section 10 test vectors: input -> (base16, base32, base64)
RFC_VECTORS = [
    (b"", "", "", ""),
    (b"f", "66", "MY======", "Zg=="),
    (b"fo", "666F", "MZXQ====", "Zm8="),
    (b"foo", "666F6F", "MZXW6===", "Zm9v"),
    (b"foob", "666F6F62", "MZXW6YQ=", "Zm9vYg=="),
    (b"fooba", "666F6F6261", "MZXW6YTB", "Zm9vYmE="),
    (b"foobar", "666F6F626172", "MZXW6YTBOI======", "Zm9vYmFy"),
]


@pytest.fixture()
def m():
    """Lazily import the main module for tests to avoid module-level import."""
    return importlib.import_module("main")


@pytest.fixture()
def b64():
    """Padded, lenient standard Base64 codec."""
    from alphabets import BASE64
    from codec import Codec

    return Codec(BASE64)


@pytest.fixture()
def b64_nopad():
    """Unpadded, lenient standard Base64 codec."""
    from alphabets import BASE64
    from codec import Codec

    return Codec(BASE64, pads=False)


@pytest.fixture()
def sample_bytes():
    """Every octet value, followed by a short text tail."""
    return bytes(range(256)) + b"The quick brown fox"


class BrokenStream:
    """File-like object whose every read and write fails."""

    def read(self, n=-1):
        raise OSError("device not ready")

    def write(self, data):
        raise OSError("disk full")


@pytest.fixture()
def broken_stream():
    return BrokenStream()
