"""
ZW-Blind-Mark: Keyed Invisible Watermarks for Plain Text

This package hides a short watermark inside ordinary text using zero-width
Unicode characters, and recovers it later from the marked text and a
shared secret key alone (blind extraction).

Core Components:
    - prng: Seed derivation and the deterministic LCG
    - bit_codec: UTF-8 text <-> bit string conversion
    - auth_tag: Frame authentication tags
    - framing: Frame layout, scrambling and parsing
    - embedder: Block-based embedding
    - extractor: Blind brute-force extraction
    - stegano_core: Engine and public entry points
    - cli: Command-line interface for all operations

Example:
    >>> from blindmark import embed, extract
    >>> marked = embed(article_text, "k3y", "Reader-042")
    >>> extract(marked, "k3y")
    'Reader-042'

License: MIT
"""

import logging

__version__ = "1.0.0"

from .errors import (
    CarrierTooShortError,
    DecodeError,
    InvalidInputError,
    PayloadTooLargeError,
    WatermarkError,
)
from .embedder import BlockEmbedder, EmbedReport
from .extractor import BlindExtractor, ExtractionReport
from .stegano_core import SteganoEngine, contains_marker, embed, extract, strip_markers
from .zero_width import ZeroWidthCodec

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "SteganoEngine",
    "ZeroWidthCodec",
    "BlockEmbedder",
    "EmbedReport",
    "BlindExtractor",
    "ExtractionReport",
    "embed",
    "extract",
    "contains_marker",
    "strip_markers",
    "WatermarkError",
    "InvalidInputError",
    "PayloadTooLargeError",
    "CarrierTooShortError",
    "DecodeError",
]
