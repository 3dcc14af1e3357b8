"""
zero_width.py - Zero-Width Marker Alphabet

Two zero-width code points form the binary alphabet the embedder writes.
A wider set of reserved zero-width characters is recognised for detection
and cleaning, because text can already carry joiners or a byte order mark
that the embedder never emits itself.

Encoding Scheme:
    ZERO_WIDTH_SPACE (U+200B)      → Binary '0'
    ZERO_WIDTH_NON_JOINER (U+200C) → Binary '1'

Reserved (detected and stripped, never emitted):
    ZERO_WIDTH_JOINER (U+200D)
    ZERO WIDTH NO-BREAK SPACE / BOM (U+FEFF)
"""

import re
from typing import Iterable


class ZeroWidthCodec:
    """
    Unicode code points used for invisible binary encoding.

    These characters belong to the "General Punctuation" and "Arabic
    Presentation Forms-B" blocks and have zero display width. They survive
    copy and paste and most text pipelines, which is what makes them usable
    as an invisible alphabet.

    Reference: Unicode Standard, Chapter 23.2 "Format Characters"
    """

    ZERO: str = "\u200b"  # ZERO WIDTH SPACE - represents binary '0'
    ONE: str = "\u200c"  # ZERO WIDTH NON-JOINER - represents binary '1'

    ALPHABET: frozenset = frozenset({ZERO, ONE})

    # Everything contains_markers()/strip() react to
    ALL_CHARS: frozenset = frozenset({"\u200b", "\u200c", "\u200d", "\ufeff"})

    _RESERVED_RE = re.compile("[\u200b-\u200d\ufeff]")

    @classmethod
    def is_marker(cls, char: str) -> bool:
        """Check if a character belongs to the two-symbol alphabet."""
        return char in cls.ALPHABET

    @classmethod
    def is_zero_width(cls, char: str) -> bool:
        """Check if a character is any reserved zero-width character."""
        return char in cls.ALL_CHARS

    @classmethod
    def contains_markers(cls, text: str) -> bool:
        """Quick check if text contains any reserved zero-width characters."""
        return cls._RESERVED_RE.search(text) is not None

    @classmethod
    def count_markers(cls, text: str) -> int:
        return len(cls._RESERVED_RE.findall(text))

    @classmethod
    def strip(cls, text: str) -> str:
        """Remove every reserved zero-width character."""
        return cls._RESERVED_RE.sub("", text)

    @classmethod
    def bit_to_char(cls, bit: str) -> str:
        return cls.ZERO if bit == "0" else cls.ONE

    @classmethod
    def bits_to_chars(cls, bits: Iterable[str]) -> str:
        return "".join(cls.ZERO if bit == "0" else cls.ONE for bit in bits)

    @classmethod
    def collect_bits(cls, text: str) -> str:
        """
        Read the alphabet characters of a text, in order, as a bit string.

        Visible characters and reserved characters outside the alphabet
        are skipped.
        """
        out = []
        for char in text:
            if char == cls.ZERO:
                out.append("0")
            elif char == cls.ONE:
                out.append("1")
        return "".join(out)
