"""
stegano_core.py - Blind Zero-Width Watermarking Engine

This module is the public face of the codec. It ties together framing,
block embedding and blind extraction behind four entry points:

    embed(carrier, key, watermark, block_size)  → marked text
    extract(text, key)                          → watermark or None
    contains_marker(text)                       → bool
    strip_markers(text)                         → clean text

Technical Background:
    The watermark is framed (length, data, tag), scrambled with a keystream
    derived from the secret key and written into the carrier as invisible
    zero-width characters at key-derived positions. Extraction collects
    the invisible characters and searches for a frame whose tag verifies
    under the key, so it works on the marked text alone ("blind").

Security Note:
    This is watermarking, not encryption. The generator and the default
    tag are not cryptographic: the scheme resists casual tampering and
    accidental damage, not an adversary who knows the algorithm. It also
    assumes the text survives character for character.
"""

from typing import Optional

try:
    from .auth_tag import DEFAULT_TAG_SCHEME, get_tag_function
    from .embedder import DEFAULT_BLOCK_SIZE, BlockEmbedder, EmbedReport
    from .extractor import BlindExtractor, ExtractionReport
    from .zero_width import ZeroWidthCodec
except ImportError:
    from auth_tag import DEFAULT_TAG_SCHEME, get_tag_function
    from embedder import DEFAULT_BLOCK_SIZE, BlockEmbedder, EmbedReport
    from extractor import BlindExtractor, ExtractionReport
    from zero_width import ZeroWidthCodec


class SteganoEngine:
    """
    Core engine for keyed, blind zero-width watermarking.

    Example:
        >>> engine = SteganoEngine(block_size=100)
        >>> marked = engine.embed(article_text, "k3y", "Supplier-B")
        >>> engine.extract(marked, "k3y")
        'Supplier-B'
        >>> engine.extract(marked, "other-key") is None
        True

    Thread Safety:
        The engine only stores configuration. Every call allocates its own
        generators, so instances can be shared between threads.
    """

    def __init__(self, block_size: int = DEFAULT_BLOCK_SIZE, tag_scheme: str = DEFAULT_TAG_SCHEME):
        """
        Initialize the engine.

        Args:
            block_size: Default number of carrier characters per block.
            tag_scheme: Authentication tag scheme, "lcg" or "hmac".
        """
        self.block_size = block_size
        self.tag_scheme = tag_scheme
        self._tag_fn = get_tag_function(tag_scheme)

    # ─────────────────────────────────────────────────────────────────────────
    # EMBEDDING
    # ─────────────────────────────────────────────────────────────────────────

    def embed_with_report(
        self, carrier: str, key: str, watermark: str, block_size: Optional[int] = None
    ) -> EmbedReport:
        """Embed a watermark and return the full EmbedReport."""
        size = self.block_size if block_size is None else block_size
        return BlockEmbedder(size, self._tag_fn).embed(carrier, key, watermark)

    def embed(
        self, carrier: str, key: str, watermark: str, block_size: Optional[int] = None
    ) -> str:
        """
        Embed ``watermark`` into ``carrier`` under ``key``.

        Args:
            carrier: The visible text that will carry the watermark.
            key: The shared secret key.
            watermark: The text to hide.
            block_size: Overrides the engine's block size for this call.

        Returns:
            The carrier text with the watermark woven in.

        Raises:
            InvalidInputError: If an input is empty or the block size is invalid.
            CarrierTooShortError: If the carrier cannot hold one frame.
        """
        return self.embed_with_report(carrier, key, watermark, block_size).text

    # ─────────────────────────────────────────────────────────────────────────
    # EXTRACTION
    # ─────────────────────────────────────────────────────────────────────────

    def trace(self, text: str, key: str) -> ExtractionReport:
        """Blind extraction with a full ExtractionReport."""
        return BlindExtractor(self._tag_fn).trace(text, key)

    def extract(self, text: str, key: str) -> Optional[str]:
        """
        Recover the watermark from marked text.

        Returns:
            The watermark, or None when no frame authenticates under ``key``.

        Raises:
            InvalidInputError: If the text or key is empty.
        """
        return self.trace(text, key).watermark

    # ─────────────────────────────────────────────────────────────────────────
    # UTILITY
    # ─────────────────────────────────────────────────────────────────────────

    @staticmethod
    def contains_marker(text: str) -> bool:
        """True if the text holds any reserved zero-width character."""
        return ZeroWidthCodec.contains_markers(text)

    @staticmethod
    def strip_markers(text: str) -> str:
        """
        Remove all reserved zero-width characters from text.

        This also destroys any watermark the text carried.
        """
        return ZeroWidthCodec.strip(text)


# ═══════════════════════════════════════════════════════════════════════════════
# MODULE-LEVEL ENTRY POINTS
# ═══════════════════════════════════════════════════════════════════════════════


def embed(carrier: str, key: str, watermark: str, block_size: int = DEFAULT_BLOCK_SIZE) -> str:
    """Embed with the default tag scheme. See SteganoEngine.embed()."""
    return SteganoEngine(block_size).embed(carrier, key, watermark)


def extract(text: str, key: str) -> Optional[str]:
    """Extract with the default tag scheme. See SteganoEngine.extract()."""
    return SteganoEngine().extract(text, key)


def contains_marker(text: str) -> bool:
    return ZeroWidthCodec.contains_markers(text)


def strip_markers(text: str) -> str:
    return ZeroWidthCodec.strip(text)
