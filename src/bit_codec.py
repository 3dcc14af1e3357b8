"""
bit_codec.py - UTF-8 Text <-> Bit String Conversion

Text is carried through the watermarking pipeline as a string of '0' and
'1' characters: UTF-8 bytes, eight bits each, most significant bit first.

Decoding is where a wrong key or a wrong scan offset shows up, because the
bits it receives are then effectively random. Two flavours are provided:

    bits_to_text()  raises a DecodeError subclass
    decode_bits()   returns a DecodeResult and never raises
"""

from dataclasses import dataclass
from typing import Optional

try:
    from .errors import DecodeError, InvalidBitLengthError, InvalidDigitError, InvalidUtf8Error
except ImportError:
    from errors import DecodeError, InvalidBitLengthError, InvalidDigitError, InvalidUtf8Error

_BINARY_DIGITS = frozenset("01")


@dataclass(frozen=True)
class DecodeResult:
    """
    Result of decoding a bit string back to plaintext.

    Attributes:
        payload: The decoded text, None on failure
        bit_length: Number of bits that were presented
        is_valid: Whether decoding succeeded
        error: Error message if decoding failed, None otherwise
    """

    payload: Optional[str]
    bit_length: int
    is_valid: bool
    error: Optional[str] = None


def text_to_bits(text: str) -> str:
    """
    Encode text as a bit string.

    Example:
        >>> text_to_bits("hi")
        '0110100001101001'
    """
    return "".join(format(byte, "08b") for byte in text.encode("utf-8"))


def bits_to_text(bits: str) -> str:
    """
    Decode a bit string produced by text_to_bits().

    Raises:
        InvalidBitLengthError: If the bit count is not a multiple of 8.
        InvalidDigitError: If a byte group is not made of '0'/'1'.
        InvalidUtf8Error: If the bytes are not valid UTF-8.
    """
    if len(bits) % 8 != 0:
        raise InvalidBitLengthError(f"Invalid bit length {len(bits)} (not multiple of 8)")

    decoded = bytearray()
    for i in range(0, len(bits), 8):
        chunk = bits[i : i + 8]
        if not _BINARY_DIGITS.issuperset(chunk):
            raise InvalidDigitError(f"Invalid binary digits in byte {i // 8}: {chunk!r}")
        decoded.append(int(chunk, 2))

    try:
        return decoded.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidUtf8Error(f"UTF-8 decode error: {e}") from e


def decode_bits(bits: str) -> DecodeResult:
    """Non-raising variant of bits_to_text()."""
    try:
        payload = bits_to_text(bits)
    except DecodeError as e:
        return DecodeResult(payload=None, bit_length=len(bits), is_valid=False, error=str(e))
    return DecodeResult(payload=payload, bit_length=len(bits), is_valid=True)
