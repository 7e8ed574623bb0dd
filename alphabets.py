from typing import Dict, Optional

from codec import Codec

BASE16 = "0123456789ABCDEF"  #: RFC 4648 section 8
BASE32 = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"  #: RFC 4648 section 6
BASE32_HEX = "0123456789ABCDEFGHIJKLMNOPQRSTUV"  #: RFC 4648 section 7
BASE64 = (
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
)  #: RFC 4648 section 4
BASE64_URL = BASE64[:-2] + "-_"  #: RFC 4648 section 5

VARIANTS: Dict[str, Codec] = {
    "base16": Codec(BASE16, pads=False),
    "base32": Codec(BASE32),
    "base32hex": Codec(BASE32_HEX),
    "base64": Codec(BASE64),
    "base64url": Codec(BASE64_URL),
}


def get_codec(
    name: str, pads: Optional[bool] = None, strict: bool = False
) -> Codec:
    """Look up one of the canonical variants.

    :param name: Variant name, one of :data:`VARIANTS` (case-insensitive,
        ``-`` and ``_`` ignored so ``base64-url`` works too).
    :type name: str
    :param pads: Override the variant's padding policy; ``None`` keeps it.
    :type pads: Optional[bool]
    :param strict: Reject non-canonical input on decode.
    :type strict: bool
    :returns: Codec for the variant.
    :rtype: Codec
    :raises KeyError: If ``name`` is not a known variant.
    """
    key = name.lower().replace("-", "").replace("_", "")
    try:
        codec = VARIANTS[key]
    except KeyError:
        raise KeyError(
            f"Unknown variant {name!r}; choose from {', '.join(VARIANTS)}"
        ) from None
    if pads is not None:
        codec = codec.with_padding(pads)
    if strict:
        codec = Codec(codec.alphabet, pads=codec.pads, strict=True)
    return codec
