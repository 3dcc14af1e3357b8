"""Public import package for ZW-Blind-Mark."""

from src import (  # re-export public API
    BlindExtractor,
    BlockEmbedder,
    CarrierTooShortError,
    DecodeError,
    EmbedReport,
    ExtractionReport,
    InvalidInputError,
    PayloadTooLargeError,
    SteganoEngine,
    WatermarkError,
    ZeroWidthCodec,
    __version__,
    contains_marker,
    embed,
    extract,
    strip_markers,
)

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
