"""
auth_tag.py - Frame Authentication Tags

The extractor finds a watermark by brute force: it tries every offset in
the collected marker bits and needs a way to tell the real frame apart
from noise or from a frame written under another key. That is the job of
the 32-bit tag appended to every frame.

Two tag schemes share the same frame layout:

    "lcg"   The scheme's native tag, built from three key-derived LCG
            streams (data mixing, folding, final whitening). Cheap and
            deterministic, but NOT a MAC.
    "hmac"  HMAC-SHA256 over the data bits, truncated to 32 bits.

Embedder and extractor must agree on the scheme.
"""

import hashlib
import hmac
from typing import Callable, Dict

try:
    from .errors import InvalidInputError
    from .prng import AUTH_DATA_MIX_PURPOSE, AUTH_FINAL_MIX_PURPOSE, AUTH_FOLD_PURPOSE, LCG
except ImportError:
    from errors import InvalidInputError
    from prng import AUTH_DATA_MIX_PURPOSE, AUTH_FINAL_MIX_PURPOSE, AUTH_FOLD_PURPOSE, LCG

AUTH_BITS = 32
AUTH_BYTES = AUTH_BITS // 8

TagFunction = Callable[[str, str], str]


def _to_bits(values: bytes) -> str:
    return "".join(format(value, "08b") for value in values)


def generate_auth_tag(data_bits: str, key: str) -> str:
    """
    Compute the LCG-based authentication tag for a frame's data bits.

    Three independently seeded generators are used:

    1. Data mixing: each data bit, XORed with one bit of a fresh random
       byte, is packed LSB-first into a buffer of ceil(N/8) bytes.
    2. Folding: each buffer byte gets a random additive offset and a
       random two-sided rotation, then is XORed into a random byte of the
       4-byte checksum.
    3. Whitening: the checksum is XORed with 4 random bytes.

    Args:
        data_bits: The watermark bits (no length prefix).
        key: The shared secret key.

    Returns:
        A bit string of exactly AUTH_BITS bits.
    """
    mix_rng = LCG.for_purpose(key, AUTH_DATA_MIX_PURPOSE)
    fold_rng = LCG.for_purpose(key, AUTH_FOLD_PURPOSE)
    final_rng = LCG.for_purpose(key, AUTH_FINAL_MIX_PURPOSE)

    mixed = bytearray((len(data_bits) + 7) // 8)
    for i, bit in enumerate(data_bits):
        bit_index = i % 8
        mix_rng, key_byte = mix_rng.next_int_range(0, 256)
        key_bit = (key_byte >> bit_index) & 1
        mixed[i // 8] ^= ((bit == "1") ^ key_bit) << bit_index

    checksum = bytearray(AUTH_BYTES)
    for value in mixed:
        fold_rng, mix_value = fold_rng.next_int_range(0, 256)
        fold_rng, target = fold_rng.next_int_range(0, AUTH_BYTES)

        folded = (value + mix_value) & 0xFF
        fold_rng, left = fold_rng.next_int_range(0, 8)
        fold_rng, right = fold_rng.next_int_range(0, 8)
        folded = (folded << left) | (folded >> (8 - right))

        checksum[target] = (checksum[target] ^ folded) & 0xFF

    _, whitening = final_rng.bytes_(AUTH_BYTES)
    return _to_bits(bytes(c ^ w for c, w in zip(checksum, whitening)))


def hmac_auth_tag(data_bits: str, key: str) -> str:
    """HMAC-SHA256 of the data bits under the key, truncated to AUTH_BITS."""
    digest = hmac.new(key.encode("utf-8"), data_bits.encode("ascii"), hashlib.sha256).digest()
    return _to_bits(digest[:AUTH_BYTES])


TAG_SCHEMES: Dict[str, TagFunction] = {
    "lcg": generate_auth_tag,
    "hmac": hmac_auth_tag,
}

DEFAULT_TAG_SCHEME = "lcg"


def get_tag_function(scheme: str) -> TagFunction:
    """Look up a tag scheme by name."""
    try:
        return TAG_SCHEMES[scheme]
    except KeyError:
        known = ", ".join(sorted(TAG_SCHEMES))
        raise InvalidInputError(f"Unknown tag scheme {scheme!r} (expected one of: {known})") from None
