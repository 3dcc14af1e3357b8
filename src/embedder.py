"""
embedder.py - Block-Based Watermark Embedding

The carrier text is cut into blocks of ``block_size`` characters. Each
block gets its own insertion layout, chosen by a generator seeded from the
key and the block index, so the watermark is spread over the whole text
and every sufficiently large block carries a complete frame on its own.

Embedding Pipeline:
    1. FRAME:   length ‖ data ‖ tag, scrambled with the stream keystream
    2. SPLIT:   carrier → blocks of block_size characters (last may be short)
    3. LAYOUT:  per block, shuffle the len(block)+1 slots, keep the first
                min(frame_bits, slots), sort ascending
    4. WEAVE:   interleave marker characters with the block's characters

Which frame bits go into a block:
    A block with room for the whole frame receives the whole frame from
    bit 0. A smaller block receives the next bits of the frame, continuing
    where the previous block stopped and wrapping to bit 0 after the tag,
    so that runs of small blocks still spell out complete frames.
"""

import logging
from dataclasses import dataclass, field
from typing import List

try:
    from .auth_tag import TagFunction, generate_auth_tag
    from .errors import CarrierTooShortError, InvalidInputError
    from .framing import build_scrambled_frame
    from .prng import LCG, position_purpose
    from .zero_width import ZeroWidthCodec
except ImportError:
    from auth_tag import TagFunction, generate_auth_tag
    from errors import CarrierTooShortError, InvalidInputError
    from framing import build_scrambled_frame
    from prng import LCG, position_purpose
    from zero_width import ZeroWidthCodec

logger = logging.getLogger(__name__)

DEFAULT_BLOCK_SIZE = 100

# Below this, output inflates heavily: nearly every gap receives a marker.
MIN_RECOMMENDED_BLOCK_SIZE = 50


# ═══════════════════════════════════════════════════════════════════════════════
# DATA CLASSES FOR EMBEDDING REPORTS
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass
class BlockLayout:
    """
    Where the markers of one block went.

    Attributes:
        index: Block number, starting at 0
        start: Offset of the block in the carrier text
        length: Number of carrier characters in the block
        frame_offset: Frame bit the block's first marker carries
        positions: Sorted insertion slots (0..length) that received a marker
    """

    index: int
    start: int
    length: int
    frame_offset: int
    positions: List[int] = field(default_factory=list)

    @property
    def slots(self) -> int:
        return self.length + 1

    @property
    def bits_embedded(self) -> int:
        return len(self.positions)


@dataclass
class EmbedReport:
    """
    Report of a single embed operation.

    Attributes:
        text: The carrier with the watermark woven in
        payload_bits: Size of one frame in bits
        block_size: Block size that was used
        blocks: Layout of every block
        warnings: Non-fatal issues, also emitted through logging
    """

    text: str
    payload_bits: int
    block_size: int
    blocks: List[BlockLayout] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def total_markers(self) -> int:
        return sum(b.bits_embedded for b in self.blocks)

    @property
    def full_frame_blocks(self) -> int:
        """Blocks that hold a complete frame by themselves."""
        return sum(1 for b in self.blocks if b.bits_embedded >= self.payload_bits)

    def summary(self) -> str:
        """Human-readable summary of the embedding."""
        lines = [
            "═══════════════════════════════════════════════════════════",
            "  Embed Report",
            "═══════════════════════════════════════════════════════════",
            f"  Frame size:          {self.payload_bits} bits",
            f"  Block size:          {self.block_size} characters",
            f"  Blocks:              {len(self.blocks)}",
            f"  Self-contained:      {self.full_frame_blocks} block(s)",
            f"  Markers inserted:    {self.total_markers}",
            f"  Output length:       {len(self.text)} characters",
        ]

        if self.warnings:
            lines.append(f"  ⚠ Warnings: {len(self.warnings)}")
            for w in self.warnings[:3]:
                lines.append(f"    - {w}")

        lines.append("═══════════════════════════════════════════════════════════")
        return "\n".join(lines)


# ═══════════════════════════════════════════════════════════════════════════════
# LAYOUT HELPERS
# ═══════════════════════════════════════════════════════════════════════════════


def select_insertion_slots(key: str, block_index: int, slots: int, count: int) -> List[int]:
    """
    Pick ``count`` of a block's ``slots`` insertion points.

    The slot list is shuffled with the block's own generator and the first
    ``count`` entries are kept, in ascending order.
    """
    rng = LCG.for_purpose(key, position_purpose(block_index))
    _, order = rng.shuffle(range(slots))
    return sorted(order[:count])


def weave(chunk: str, positions: List[int], markers: str) -> str:
    """
    Interleave markers with the characters of a block.

    ``markers[k]`` goes into slot ``positions[k]``; slot j is the gap
    before ``chunk[j]`` (slot len(chunk) is after the last character).
    """
    out = []
    pointer = 0
    for j in range(len(chunk) + 1):
        while pointer < len(positions) and positions[pointer] == j:
            out.append(markers[pointer])
            pointer += 1
        if j < len(chunk):
            out.append(chunk[j])
    return "".join(out)


def _cyclic_slice(bits: str, start: int, count: int) -> str:
    out = []
    while count > 0:
        piece = bits[start : start + count]
        out.append(piece)
        count -= len(piece)
        start = 0
    return "".join(out)


# ═══════════════════════════════════════════════════════════════════════════════
# MAIN EMBEDDER CLASS
# ═══════════════════════════════════════════════════════════════════════════════


class BlockEmbedder:
    """
    Weaves a scrambled watermark frame into carrier text, block by block.

    Example:
        >>> embedder = BlockEmbedder(block_size=100)
        >>> report = embedder.embed(article_text, "k3y", "hi")
        >>> print(report.summary())

    The embedder holds only configuration; every call builds its own
    generators, so one instance can be shared freely.
    """

    def __init__(self, block_size: int = DEFAULT_BLOCK_SIZE, tag_fn: TagFunction = generate_auth_tag):
        self.block_size = block_size
        self.tag_fn = tag_fn

    def embed(self, carrier: str, key: str, watermark: str) -> EmbedReport:
        """
        Embed ``watermark`` into ``carrier`` under ``key``.

        Args:
            carrier: The visible text that will carry the watermark.
            key: The shared secret key.
            watermark: The text to hide.

        Returns:
            EmbedReport whose ``text`` is the watermarked carrier.

        Raises:
            InvalidInputError: If an input is empty or block_size < 1.
            PayloadTooLargeError: If the watermark exceeds 65535 bits.
            CarrierTooShortError: If the carrier has fewer insertion
                points than the frame has bits.
        """
        if not carrier or not key or not watermark:
            raise InvalidInputError("Carrier text, secret key and watermark are all required")
        block_size = self.block_size
        if not isinstance(block_size, int) or block_size < 1:
            raise InvalidInputError(f"Block size must be a positive integer, got {block_size!r}")

        warnings: List[str] = []

        def warn(message: str) -> None:
            logger.warning(message)
            warnings.append(message)

        if block_size < MIN_RECOMMENDED_BLOCK_SIZE:
            warn(
                f"Block size {block_size} is very small; the text will be heavily inflated. "
                f"A value of at least {MIN_RECOMMENDED_BLOCK_SIZE} is recommended."
            )
        if ZeroWidthCodec.contains_markers(carrier):
            warn(
                "Carrier already contains zero-width characters, which may interfere with "
                "extraction. Strip them before embedding."
            )

        frame = build_scrambled_frame(watermark, key, self.tag_fn)
        payload_bits = len(frame)

        if len(carrier) + 1 < payload_bits:
            raise CarrierTooShortError(
                required=payload_bits - 1, actual=len(carrier), payload_bits=payload_bits
            )

        if payload_bits > block_size + 1:
            warn(
                f"Watermark frame ({payload_bits} bits) exceeds the insertion points of a single "
                f"block ({block_size + 1}); a complete frame spans several blocks and short "
                f"excerpts of the text may not be extractable."
            )

        markers = ZeroWidthCodec.bits_to_chars(frame)
        pieces = []
        blocks = []
        cursor = 0

        for index, start in enumerate(range(0, len(carrier), block_size)):
            chunk = carrier[start : start + block_size]
            slots = len(chunk) + 1
            count = min(payload_bits, slots)

            positions = select_insertion_slots(key, index, slots, count)
            block_markers = _cyclic_slice(markers, cursor, count)
            pieces.append(weave(chunk, positions, block_markers))

            blocks.append(BlockLayout(index=index, start=start, length=len(chunk),
                                      frame_offset=cursor, positions=positions))
            logger.debug("Block %d: %d chars, %d markers from frame bit %d",
                         index, len(chunk), count, cursor)
            cursor = (cursor + count) % payload_bits

        report = EmbedReport(
            text="".join(pieces),
            payload_bits=payload_bits,
            block_size=block_size,
            blocks=blocks,
            warnings=warnings,
        )
        logger.info("Embedded %d-bit frame into %d block(s), %d markers",
                    payload_bits, len(blocks), report.total_markers)
        return report
