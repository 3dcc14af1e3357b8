"""
framing.py - Watermark Frame Assembly and Parsing

Wire format of one watermark copy, before scrambling:

    ┌──────────────────┬──────────────────────┬──────────────────┐
    │ length (16 bits) │ data (length bits)   │ tag (32 bits)    │
    └──────────────────┴──────────────────────┴──────────────────┘

    length  bit length of the UTF-8 watermark, big-endian
    data    UTF-8 bytes of the watermark, MSB first
    tag     authentication tag over the data bits (see auth_tag.py)

The whole frame is XORed with a keystream from the stream generator,
seeded once from the key. The keystream always starts at bit 0: there is
no running stream position, so a parse attempt at any offset restarts it.
"""

from dataclasses import dataclass
from typing import Optional

try:
    from .auth_tag import AUTH_BITS, TagFunction, generate_auth_tag
    from .bit_codec import text_to_bits
    from .errors import InvalidInputError, PayloadTooLargeError
    from .prng import LCG, STREAM_PURPOSE
except ImportError:
    from auth_tag import AUTH_BITS, TagFunction, generate_auth_tag
    from bit_codec import text_to_bits
    from errors import InvalidInputError, PayloadTooLargeError
    from prng import LCG, STREAM_PURPOSE

LENGTH_BITS = 16
MAX_DATA_BITS = (1 << LENGTH_BITS) - 1
MIN_FRAME_BITS = LENGTH_BITS + 1 + AUTH_BITS


@dataclass(frozen=True)
class Frame:
    """
    One unscrambled watermark frame.

    Attributes:
        length: Declared data length in bits
        data_bits: The watermark bits
        tag_bits: The authentication tag bits
    """

    length: int
    data_bits: str
    tag_bits: str

    @property
    def length_bits(self) -> str:
        return format(self.length, f"0{LENGTH_BITS}b")

    @property
    def bits(self) -> str:
        return self.length_bits + self.data_bits + self.tag_bits

    def __len__(self) -> int:
        return LENGTH_BITS + len(self.data_bits) + len(self.tag_bits)


def xor_bits(bits: str, keystream: str) -> str:
    """XOR two equal-length bit strings."""
    return "".join("0" if a == b else "1" for a, b in zip(bits, keystream))


def stream_generator(key: str) -> LCG:
    """The scrambling generator, positioned at keystream bit 0."""
    return LCG.for_purpose(key, STREAM_PURPOSE)


def frame_bit_length(watermark: str) -> int:
    """Total frame size in bits for a watermark."""
    return LENGTH_BITS + len(text_to_bits(watermark)) + AUTH_BITS


def build_frame(watermark: str, key: str, tag_fn: TagFunction = generate_auth_tag) -> Frame:
    """
    Assemble the unscrambled frame for a watermark.

    Raises:
        InvalidInputError: If the watermark or key is empty.
        PayloadTooLargeError: If the watermark exceeds MAX_DATA_BITS.
    """
    if not watermark:
        raise InvalidInputError("Watermark cannot be empty")
    if not key:
        raise InvalidInputError("Secret key cannot be empty")

    data_bits = text_to_bits(watermark)
    if len(data_bits) > MAX_DATA_BITS:
        raise PayloadTooLargeError(len(data_bits), MAX_DATA_BITS)

    return Frame(length=len(data_bits), data_bits=data_bits, tag_bits=tag_fn(data_bits, key))


def scramble(bits: str, key: str) -> str:
    """XOR bits against the key's stream keystream (self-inverse)."""
    _, keystream = stream_generator(key).bits(len(bits))
    return xor_bits(bits, keystream)


def build_scrambled_frame(
    watermark: str, key: str, tag_fn: TagFunction = generate_auth_tag
) -> str:
    """Frame bits ready for embedding."""
    return scramble(build_frame(watermark, key, tag_fn).bits, key)


def parse_frame_at(
    bits: str,
    key: str,
    offset: int = 0,
    stream: Optional[LCG] = None,
    tag_fn: TagFunction = generate_auth_tag,
) -> Optional[Frame]:
    """
    Try to read an authentic frame starting at ``bits[offset]``.

    The keystream is restarted for the attempt. The length prefix is
    unscrambled first and the attempt is rejected early when it is out of
    range or when not enough bits remain for data and tag.

    Args:
        bits: Scrambled marker bits collected from a carrier.
        key: The shared secret key.
        offset: Position in ``bits`` where the frame would start.
        stream: Pre-built stream generator for ``key``; derived when None.
        tag_fn: Tag scheme used when the frame was built.

    Returns:
        The unscrambled Frame when its tag verifies, otherwise None.
    """
    rng = stream if stream is not None else stream_generator(key)
    available = len(bits) - offset
    if available < MIN_FRAME_BITS:
        return None

    rng, keystream = rng.bits(LENGTH_BITS)
    length = int(xor_bits(bits[offset : offset + LENGTH_BITS], keystream), 2)
    if not 0 <= length <= MAX_DATA_BITS:
        return None
    if available < LENGTH_BITS + length + AUTH_BITS:
        return None

    data_start = offset + LENGTH_BITS
    rng, keystream = rng.bits(length)
    data_bits = xor_bits(bits[data_start : data_start + length], keystream)

    tag_start = data_start + length
    _, keystream = rng.bits(AUTH_BITS)
    tag_bits = xor_bits(bits[tag_start : tag_start + AUTH_BITS], keystream)

    if tag_bits != tag_fn(data_bits, key):
        return None
    return Frame(length=length, data_bits=data_bits, tag_bits=tag_bits)
