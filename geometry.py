from typing import NamedTuple

from errors import InvalidAlphabet

OCTET_SIZE = 8  #: Bits per octet
MIN_ALPHABET = 2
MAX_ALPHABET = 128


class Geometry(NamedTuple):
    """Word layout of a base-N encoding.

    :ivar bits_per_char: Bits represented by one character (``k``).
    :ivar bytes_per_word: Octets in a full word (``B``).
    :ivar chars_per_word: Characters in a full word (``C``).
    """

    bits_per_char: int
    bytes_per_word: int
    chars_per_word: int


def gcd(a: int, b: int) -> int:
    """Greatest common divisor by Euclid's algorithm."""
    while b:
        a, b = b, a % b
    return a


def lcm(a: int, b: int) -> int:
    """Least common multiple of two positive integers."""
    return a * b // gcd(a, b)


def word_geometry(size: int) -> Geometry:
    """Derive the word geometry for an alphabet of ``size`` characters.

    :param size: Alphabet size, a power of two in ``[2, 128]``.
    :type size: int
    :returns: ``(bits_per_char, bytes_per_word, chars_per_word)``.
    :rtype: Geometry
    :raises InvalidAlphabet: If ``size`` is out of range or not a power
        of two.
    """
    if size < MIN_ALPHABET or size > MAX_ALPHABET:
        raise InvalidAlphabet(
            f"Alphabet size {size} outside [{MIN_ALPHABET}, {MAX_ALPHABET}]"
        )
    if size & (size - 1):
        raise InvalidAlphabet(f"Alphabet size {size} is not a power of two")
    bits = size.bit_length() - 1
    bytes_per_word = lcm(OCTET_SIZE, bits) // OCTET_SIZE
    return Geometry(bits, bytes_per_word, bytes_per_word * OCTET_SIZE // bits)
