import enum
import io
from typing import BinaryIO, Optional, Union

from errors import CodecIOError, UnalignedEnd

OCTET_SIZE = 8


class End(enum.Enum):
    """End-of-stream outcomes of :meth:`BitReader.read_bits`.

    ``AT_BOUNDARY`` means the source was exhausted before any bit of the
    request was consumed, so the stream ended on an octet boundary.
    ``MID_GROUP`` means some bits of the request were consumed first.
    """

    AT_BOUNDARY = "at-boundary"
    MID_GROUP = "mid-group"


class BitWriter:
    """Bit-packing writer.

    Packs groups of up to eight bits MSB-first into octets and writes each
    octet to the sink as soon as it is complete.

    :ivar sink: Binary file-like object receiving octets.
    :type sink: BinaryIO
    :ivar bit_buffer: 8-bit scratch register for accumulating pending bits.
    :type bit_buffer: int
    :ivar bit_count: Number of valid bits currently stored in ``bit_buffer`` (0-7).
    :type bit_count: int
    """

    def __init__(self, sink: Optional[BinaryIO] = None):
        """Initialize an empty bit writer.

        :param sink: Where complete octets go. An in-memory buffer is used
            when omitted; read it back with :meth:`getvalue`.
        :type sink: Optional[BinaryIO]
        :returns: None
        :rtype: None
        """
        self.sink = io.BytesIO() if sink is None else sink
        self.bit_buffer = 0
        self.bit_count = 0
        self.written = 0

    @property
    def pending(self) -> int:
        """Number of bits waiting for a complete octet."""
        return self.bit_count

    def write_bits(self, value: int, nbits: int):
        """Write the lowest ``nbits`` of ``value`` to the sink, MSB first.

        :param value: Integer whose bits will be written.
        :type value: int
        :param nbits: Number of bits from ``value`` to write (1-8).
        :type nbits: int
        :returns: None
        :rtype: None
        :raises ValueError: If ``nbits`` is out of range or ``value`` does
            not fit in ``nbits`` bits.
        :raises CodecIOError: If the sink fails.
        """
        if not 1 <= nbits <= OCTET_SIZE:
            raise ValueError(f"Bit count out of range: {nbits}")
        if value < 0 or value >> nbits:
            raise ValueError(f"Value {value} does not fit in {nbits} bits")
        free = OCTET_SIZE - self.bit_count
        if nbits < free:
            self.bit_buffer = (self.bit_buffer << nbits) | value
            self.bit_count += nbits
            return
        rest = nbits - free
        self._emit((self.bit_buffer << free) | (value >> rest))
        self.bit_buffer = value & ((1 << rest) - 1)
        self.bit_count = rest

    def drop_pending(self) -> int:
        """Discard the partial octet and return its bits as an integer.

        :returns: Value of the pending bits (0 if none are pending).
        :rtype: int
        """
        value = self.bit_buffer
        self.bit_buffer = 0
        self.bit_count = 0
        return value

    def finish(self) -> None:
        """Check that the writer ends on an octet boundary.

        :raises UnalignedEnd: If bits are still pending.
        """
        if self.bit_count:
            raise UnalignedEnd(
                f"{self.bit_count} bit(s) left over after the last octet"
            )

    def getvalue(self) -> bytes:
        """Return everything written when the writer owns its sink."""
        return self.sink.getvalue()

    def _emit(self, octet: int) -> None:
        try:
            self.sink.write(bytes((octet,)))
        except OSError as e:
            raise CodecIOError(f"Failed to write output: {e}") from e
        self.written += 1


class BitReader:
    """Lazy bit reader over an octet source.

    Reads arbitrary bit lengths MSB-first, fetching one octet at a time.

    :ivar source: Binary file-like object supplying octets.
    :type source: BinaryIO
    :ivar bit_buffer: Scratch register holding the current source byte.
    :type bit_buffer: int
    :ivar bit_count: Number of unread bits remaining in ``bit_buffer`` (0-8).
    :type bit_count: int
    """

    def __init__(self, source: Union[bytes, bytearray, BinaryIO]):
        """Create a bit reader for the given ``source``.

        :param source: Bytes-like data or a binary stream.
        :type source: Union[bytes, bytearray, BinaryIO]
        :returns: None
        :rtype: None
        """
        if isinstance(source, (bytes, bytearray, memoryview)):
            source = io.BytesIO(source)
        self.source = source
        self.bit_buffer = 0
        self.bit_count = 0
        self.consumed = 0

    def read_bits(self, nbits: int) -> Union[int, End]:
        """Read ``nbits`` bits from the stream.

        Bits are returned MSB-first in the integer. Running out of input
        is reported as a value, not raised: :attr:`End.AT_BOUNDARY` if no
        bit of this call had been read yet, :attr:`End.MID_GROUP` otherwise.

        :param nbits: Number of bits to read (1-32).
        :type nbits: int
        :returns: The next ``nbits`` bits, or an :class:`End` marker.
        :rtype: Union[int, End]
        :raises ValueError: If ``nbits`` is out of range.
        :raises CodecIOError: If the source fails.
        """
        if not 1 <= nbits <= 32:
            raise ValueError(f"Bit count out of range: {nbits}")
        result = 0
        needed = nbits
        while needed:
            if self.bit_count == 0:
                octet = self._fetch()
                if octet is None:
                    return End.AT_BOUNDARY if needed == nbits else End.MID_GROUP
                self.bit_buffer = octet
                self.bit_count = OCTET_SIZE
            take = min(needed, self.bit_count)
            self.bit_count -= take
            chunk = (self.bit_buffer >> self.bit_count) & ((1 << take) - 1)
            result = (result << take) | chunk
            needed -= take
        return result

    def _fetch(self) -> Optional[int]:
        try:
            octet = self.source.read(1)
        except OSError as e:
            raise CodecIOError(f"Failed to read input: {e}") from e
        if not octet:
            return None
        self.consumed += 1
        return octet[0]
