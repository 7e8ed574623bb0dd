class CodecError(ValueError):
    """Base class for every encode/decode and construction failure."""


class InvalidAlphabet(CodecError):
    """Alphabet is not usable for a base-N codec."""


class BadCharacter(CodecError):
    """Encoded input contains a character outside the alphabet.

    :ivar char: The offending character.
    :type char: str
    """

    def __init__(self, char: str):
        super().__init__(f"Bad character: {char!r}")
        self.char = char


class BadPadding(CodecError):
    """Pad character in a position where it is not allowed."""


class UnexpectedEndOfStream(CodecError, EOFError):
    """Input ended inside a bit group, a pad run or a padded word."""


class UnalignedEnd(CodecError):
    """Bit writer finished with a partial octet still pending."""


class CodecIOError(CodecError, OSError):
    """Underlying source or sink failed."""
