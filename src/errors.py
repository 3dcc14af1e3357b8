"""
errors.py - Exception Taxonomy for Blind Zero-Width Watermarking

Every error raised by the codec derives from WatermarkError and, for
compatibility with callers that already catch ValueError for bad input,
from ValueError as well.

Hierarchy:
    WatermarkError
    ├── InvalidInputError        empty carrier/key/watermark, bad options
    │   └── PayloadTooLargeError watermark does not fit the 16-bit length
    ├── CarrierTooShortError     carrier cannot hold a single frame
    └── DecodeError              bit string is not a UTF-8 payload
        ├── InvalidBitLengthError
        ├── InvalidDigitError
        └── InvalidUtf8Error

DecodeError never escapes extraction: a failed decode simply means the
scanned offset is not a watermark.
"""


class WatermarkError(ValueError):
    """Base class for all watermarking errors."""


class InvalidInputError(WatermarkError):
    """A required input is empty or an option is out of range."""


class PayloadTooLargeError(InvalidInputError):
    """The watermark is longer than the 16-bit length prefix can describe."""

    def __init__(self, bit_length: int, max_bits: int):
        self.bit_length = bit_length
        self.max_bits = max_bits
        super().__init__(
            f"Watermark is {bit_length} bits long; the frame supports at most {max_bits} bits"
        )


class CarrierTooShortError(WatermarkError):
    """
    The carrier text has fewer insertion slots than the frame has bits.

    Attributes:
        required: Minimum carrier length (in characters) for this payload
        actual: Length of the carrier that was supplied
        payload_bits: Size of the frame that had to be embedded
    """

    def __init__(self, required: int, actual: int, payload_bits: int):
        self.required = required
        self.actual = actual
        self.payload_bits = payload_bits
        super().__init__(
            f"Carrier text is too short ({actual} characters). The watermark frame needs "
            f"{payload_bits} insertion points, so the carrier must be at least {required} "
            f"characters long. Lengthen the text or shorten the watermark."
        )


class DecodeError(WatermarkError):
    """A bit string could not be turned back into text."""


class InvalidBitLengthError(DecodeError):
    """Bit count is not a multiple of 8."""


class InvalidDigitError(DecodeError):
    """A byte group contains something other than '0' and '1'."""


class InvalidUtf8Error(DecodeError):
    """The decoded bytes are not valid UTF-8."""
