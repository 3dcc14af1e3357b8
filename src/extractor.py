"""
extractor.py - Blind Watermark Extraction

Extraction needs nothing but the marked text and the key. All marker
characters are collected in order, and every offset into the resulting
bit string is tried as the start of a frame until one authenticates.

Extraction Workflow:
    1. COLLECT: U+200B → '0', U+200C → '1'; everything else is skipped
    2. SCAN:    for each offset, restart the keystream and unscramble a
                length prefix, the data and the tag
    3. VERIFY:  recompute the tag over the data; accept on equality
    4. DECODE:  UTF-8 decode the data; lowest accepted offset wins

Decode failures after a tag match are logged and the scan continues.
"No watermark" is a normal result (None), never an exception.
"""

import hashlib
import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

try:
    from .auth_tag import TagFunction, generate_auth_tag
    from .bit_codec import decode_bits
    from .errors import InvalidInputError
    from .framing import MIN_FRAME_BITS, parse_frame_at, stream_generator
    from .zero_width import ZeroWidthCodec
except ImportError:
    from auth_tag import TagFunction, generate_auth_tag
    from bit_codec import decode_bits
    from errors import InvalidInputError
    from framing import MIN_FRAME_BITS, parse_frame_at, stream_generator
    from zero_width import ZeroWidthCodec

logger = logging.getLogger(__name__)


@dataclass
class ExtractionReport:
    """
    Outcome of a blind extraction scan.

    Attributes:
        watermark: The recovered watermark, None when nothing authenticated
        marker_bits: Number of alphabet characters found in the text
        offset: Bit offset of the accepted frame, None when not found
        offsets_tried: Number of offsets that were attempted
        rejected_decodes: Offsets whose tag matched but whose data was not text
        text_hash: SHA-256 of the scanned text, for record keeping
        scan_timestamp: When the scan was performed
    """

    watermark: Optional[str]
    marker_bits: int
    offset: Optional[int] = None
    offsets_tried: int = 0
    rejected_decodes: int = 0
    text_hash: str = ""
    scan_timestamp: str = ""

    @property
    def found(self) -> bool:
        return self.watermark is not None

    def summary(self) -> str:
        lines = [
            "═══════════════════════════════════════════════════════════",
            "  Extraction Report",
            "═══════════════════════════════════════════════════════════",
            f"  SHA-256:               {self.text_hash[:32]}",
            f"  Scan time:             {self.scan_timestamp}",
            f"  Marker bits collected: {self.marker_bits}",
            f"  Offsets tried:         {self.offsets_tried}",
        ]
        if self.found:
            lines.append(f"  ✓ Watermark found at bit offset {self.offset}")
            lines.append(f"    → {self.watermark}")
        else:
            lines.append("  ✗ No watermark authenticated with this key")
            lines.append("    Check the key, and whether the text was edited or")
            lines.append("    its zero-width characters were removed.")
        lines.append("═══════════════════════════════════════════════════════════")
        return "\n".join(lines)

    def to_json(self) -> str:
        """Export report as JSON for programmatic processing."""
        return json.dumps(
            {
                "found": self.found,
                "watermark": self.watermark,
                "offset": self.offset,
                "marker_bits": self.marker_bits,
                "offsets_tried": self.offsets_tried,
                "rejected_decodes": self.rejected_decodes,
                "text_hash": self.text_hash,
                "scan_timestamp": self.scan_timestamp,
            },
            indent=2,
            ensure_ascii=False,
        )


class BlindExtractor:
    """
    Recovers a watermark from marked text using only the secret key.

    The scan is linear in the number of marker bits and each attempt
    costs at most one frame's worth of keystream plus one tag computation.
    There is no cancellation; callers that need a timeout should run the
    scan on a worker thread.
    """

    def __init__(self, tag_fn: TagFunction = generate_auth_tag):
        self.tag_fn = tag_fn

    def trace(self, text: str, key: str) -> ExtractionReport:
        """
        Scan ``text`` for a frame that authenticates under ``key``.

        Raises:
            InvalidInputError: If the text or key is empty.
        """
        if not text or not key:
            raise InvalidInputError("Text and secret key are required for extraction")

        bits = ZeroWidthCodec.collect_bits(text)
        report = ExtractionReport(
            watermark=None,
            marker_bits=len(bits),
            text_hash=hashlib.sha256(text.encode("utf-8", "surrogatepass")).hexdigest(),
            scan_timestamp=datetime.now().isoformat(),
        )

        if len(bits) < MIN_FRAME_BITS:
            logger.info("Only %d marker bits found; a frame needs at least %d",
                        len(bits), MIN_FRAME_BITS)
            return report

        stream = stream_generator(key)
        for offset in range(len(bits) - MIN_FRAME_BITS + 1):
            report.offsets_tried += 1
            frame = parse_frame_at(bits, key, offset, stream=stream, tag_fn=self.tag_fn)
            if frame is None:
                continue

            decoded = decode_bits(frame.data_bits)
            if not decoded.is_valid or not decoded.payload:
                report.rejected_decodes += 1
                logger.warning("Tag matched at offset %d but the data did not decode: %s",
                               offset, decoded.error or "empty payload")
                continue

            report.watermark = decoded.payload
            report.offset = offset
            logger.info("Watermark extracted at bit offset %d", offset)
            return report

        logger.debug("No authentic frame in %d marker bits (%d offsets)",
                     len(bits), report.offsets_tried)
        return report

    def extract(self, text: str, key: str) -> Optional[str]:
        """Return the watermark hidden in ``text``, or None if not found."""
        return self.trace(text, key).watermark
