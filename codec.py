import io
from typing import BinaryIO, List, Sequence, TextIO, Union

from bitops import BitReader, BitWriter, End
from errors import (
    BadCharacter,
    BadPadding,
    CodecIOError,
    InvalidAlphabet,
    UnexpectedEndOfStream,
)
from geometry import OCTET_SIZE, Geometry, word_geometry

PAD = "="  #: Pad character
SMALLEST_VISIBLE = 0x21  #: First visible ASCII code point ('!')
LARGEST_VISIBLE = 0x7E  #: Last visible ASCII code point ('~')
TABLE_END = 0x80  #: Reverse table covers [SMALLEST_VISIBLE, TABLE_END)
INVALID = -1  #: Reverse table sentinel for characters not in the alphabet


def _build_reverse_table(alphabet: str) -> List[int]:
    """Map code points ``[0x21, 0x80)`` to alphabet indices.

    :param alphabet: Validated alphabet characters.
    :type alphabet: str
    :returns: Table indexed by ``ord(c) - SMALLEST_VISIBLE``; entries not in
        the alphabet hold :data:`INVALID`.
    :rtype: List[int]
    """
    table = [INVALID] * (TABLE_END - SMALLEST_VISIBLE)
    for index, char in enumerate(alphabet):
        table[ord(char) - SMALLEST_VISIBLE] = index
    return table


def _check_alphabet(alphabet: str) -> None:
    """Reject alphabets with invisible, duplicate or pad characters.

    :raises InvalidAlphabet: On the first offending character.
    """
    seen = set()
    for char in alphabet:
        if not SMALLEST_VISIBLE <= ord(char) <= LARGEST_VISIBLE:
            raise InvalidAlphabet(f"Not a visible ASCII character: {char!r}")
        if char == PAD:
            raise InvalidAlphabet(f"Pad character {PAD!r} in alphabet")
        if char in seen:
            raise InvalidAlphabet(f"Duplicate character: {char!r}")
        seen.add(char)


class Codec:
    """RFC 4648 style base-N codec for one alphabet and padding policy.

    Instances are immutable and can be shared between threads; every
    encode/decode call owns a fresh :class:`BitReader` or
    :class:`BitWriter`.

    On failure the output already written to a sink is left in place.
    Callers that need all-or-nothing behaviour should encode or decode
    into a buffer first.

    :ivar alphabet: Characters for values ``0 .. N-1``.
    :type alphabet: str
    :ivar pads: Whether ``=`` padding is emitted and required.
    :type pads: bool
    :ivar strict: Whether non-canonical input is rejected on decode.
    :type strict: bool
    """

    def __init__(
        self,
        alphabet: Union[str, bytes, Sequence[str]],
        pads: bool = True,
        strict: bool = False,
    ):
        """Validate ``alphabet`` and build the decoding table.

        :param alphabet: ``N`` distinct visible ASCII characters, ``N`` a
            power of two in ``[2, 128]``, ``=`` excluded.
        :type alphabet: Union[str, bytes, Sequence[str]]
        :param pads: Emit padding on encode and require it on decode.
        :type pads: bool
        :param strict: On decode, reject non-zero discarded trailing bits
            and characters following a pad run.
        :type strict: bool
        :returns: None
        :rtype: None
        :raises InvalidAlphabet: If the alphabet is unusable.
        """
        if isinstance(alphabet, (bytes, bytearray)):
            alphabet = alphabet.decode("latin-1")
        elif not isinstance(alphabet, str):
            chars = list(alphabet)
            for char in chars:
                if len(char) != 1:
                    raise InvalidAlphabet(f"Not a single character: {char!r}")
            alphabet = "".join(chars)
        _check_alphabet(alphabet)
        self._geometry = word_geometry(len(alphabet))
        self._alphabet = alphabet
        self._numbers = _build_reverse_table(alphabet)
        self._pads = bool(pads)
        self._strict = bool(strict)

    @property
    def alphabet(self) -> str:
        return self._alphabet

    @property
    def pads(self) -> bool:
        return self._pads

    @property
    def strict(self) -> bool:
        return self._strict

    @property
    def geometry(self) -> Geometry:
        return self._geometry

    def __repr__(self) -> str:
        return (
            f"Codec({self._alphabet!r}, pads={self._pads}, "
            f"strict={self._strict})"
        )

    def with_padding(self, pads: bool) -> "Codec":
        """Return a codec with the same alphabet and a different padding
        policy (``self`` if unchanged)."""
        if bool(pads) == self._pads:
            return self
        return Codec(self._alphabet, pads=pads, strict=self._strict)

    def encoded_length(self, nbytes: int) -> int:
        """Number of characters :meth:`encode` produces for ``nbytes``."""
        bits, bpw, cpw = self._geometry
        if self._pads:
            return -(-nbytes // bpw) * cpw
        return -(-nbytes * OCTET_SIZE // bits)

    def decoded_length(self, nchars: int) -> int:
        """Number of octets carried by ``nchars`` alphabet characters."""
        return nchars * self._geometry.bits_per_char // OCTET_SIZE

    def encode(self, data: Union[bytes, bytearray, memoryview]) -> str:
        """Encode ``data`` into a string.

        :param data: Octets to encode.
        :type data: Union[bytes, bytearray, memoryview]
        :returns: Encoded characters.
        :rtype: str
        """
        output = io.StringIO()
        self.encode_stream(io.BytesIO(bytes(data)), output)
        return output.getvalue()

    def encode_stream(self, source: BinaryIO, sink: TextIO) -> int:
        """Encode octets read from ``source`` into characters on ``sink``.

        :param source: Binary stream, read one octet at a time.
        :type source: BinaryIO
        :param sink: Text stream receiving characters.
        :type sink: TextIO
        :returns: Number of characters written.
        :rtype: int
        :raises UnexpectedEndOfStream: If the bit reader loses input in a
            position where the octet stream cannot end.
        :raises CodecIOError: If ``source`` or ``sink`` fails.
        """
        reader = BitReader(source)
        bits, _, cpw = self._geometry
        written = 0
        while True:
            for i in range(cpw):
                available = OCTET_SIZE - (bits * i) % OCTET_SIZE
                if available >= bits:
                    value = reader.read_bits(bits)
                    if value is End.AT_BOUNDARY and i == 0:
                        return written
                    if isinstance(value, End):
                        raise UnexpectedEndOfStream(
                            f"Input ended inside character {i} of a word"
                        )
                    written += self._put(sink, self._alphabet[value])
                    continue
                required = bits - available
                high = reader.read_bits(available)
                if isinstance(high, End):
                    raise UnexpectedEndOfStream(
                        f"Input ended inside character {i} of a word"
                    )
                low = reader.read_bits(required)
                if isinstance(low, End):
                    written += self._put(
                        sink, self._alphabet[high << required]
                    )
                    if self._pads:
                        written += self._put(sink, PAD * (cpw - i - 1))
                    return written
                written += self._put(
                    sink, self._alphabet[(high << required) | low]
                )

    def decode(self, text: Union[str, bytes, bytearray]) -> bytes:
        """Decode ``text`` into octets.

        :param text: Encoded characters. Bytes are taken one byte per
            character.
        :type text: Union[str, bytes, bytearray]
        :returns: Decoded octets.
        :rtype: bytes
        """
        if isinstance(text, (bytes, bytearray)):
            text = text.decode("latin-1")
        output = io.BytesIO()
        self.decode_stream(io.StringIO(text), output)
        return output.getvalue()

    def decode_stream(self, source: TextIO, sink: BinaryIO) -> int:
        """Decode characters read from ``source`` into octets on ``sink``.

        :param source: Text stream, read one character at a time.
        :type source: TextIO
        :param sink: Binary stream receiving octets.
        :type sink: BinaryIO
        :returns: Number of octets written.
        :rtype: int
        :raises BadCharacter: On a character outside the alphabet.
        :raises BadPadding: On a misplaced or short pad run, any pad when
            padding is disabled, or (strict) non-canonical trailing data.
        :raises UnexpectedEndOfStream: If input ends inside a bit group,
            a pad run, or a padded word.
        :raises CodecIOError: If ``source`` or ``sink`` fails.
        """
        writer = BitWriter(sink)
        bits, _, cpw = self._geometry
        while True:
            for i in range(cpw):
                char = self._get(source)
                if not char:
                    if i == 0:
                        break
                    if (i * bits) % OCTET_SIZE >= bits:
                        raise UnexpectedEndOfStream(
                            f"Input ended inside a {bits}-bit group"
                        )
                    if not self._pads:
                        break
                    raise UnexpectedEndOfStream(
                        f"Input ended after {i} of {cpw} word characters"
                    )
                if char == PAD:
                    self._read_padding(source, i)
                    break
                writer.write_bits(self._value_of(char), bits)
            else:
                continue
            break
        self._settle(writer)
        return writer.written

    def _read_padding(self, source: TextIO, index: int) -> None:
        """Consume the rest of a pad run that started at word position
        ``index``."""
        bits, _, cpw = self._geometry
        if not self._pads:
            raise BadPadding("Padding is not allowed")
        if index == 0:
            raise BadPadding("Padding at the start of a word")
        if (index * bits) % OCTET_SIZE >= bits:
            raise BadPadding(f"Padding at character {index} of a word")
        for _ in range(index + 1, cpw):
            char = self._get(source)
            if not char:
                raise UnexpectedEndOfStream("Input ended inside padding")
            if char != PAD:
                raise BadPadding(f"Expected {PAD!r}, got {char!r}")
        if self._strict and self._get(source):
            raise BadPadding("Data after padding")

    def _settle(self, writer: BitWriter) -> None:
        trailing = writer.drop_pending()
        if self._strict and trailing:
            raise BadPadding("Non-zero bits after the last octet")
        writer.finish()

    def _value_of(self, char: str) -> int:
        offset = ord(char) - SMALLEST_VISIBLE
        if 0 <= offset < len(self._numbers):
            value = self._numbers[offset]
            if value != INVALID:
                return value
        raise BadCharacter(char)

    @staticmethod
    def _get(source: TextIO) -> str:
        try:
            return source.read(1)
        except OSError as e:
            raise CodecIOError(f"Failed to read input: {e}") from e

    @staticmethod
    def _put(sink: TextIO, chars: str) -> int:
        try:
            sink.write(chars)
        except OSError as e:
            raise CodecIOError(f"Failed to write output: {e}") from e
        return len(chars)
