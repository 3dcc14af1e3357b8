"""
prng.py - Seed Derivation and Deterministic Pseudo-Random Generator

All randomness in the watermarking scheme comes from this module. Embedder
and extractor must reproduce exactly the same sequences from the same key,
so everything here is a pure function of its inputs.

Seed Derivation:
    A key is never used directly. Each consumer appends its own purpose
    suffix to the key and hashes the result, which gives every consumer
    an independent stream:

        key + "_stream_seed"               → frame scrambling keystream
        key + "_pos_seed_<block>"          → insertion slots of one block
        key + "_auth_seed_{1,2,3}_..."     → authentication tag streams

Generator:
    A linear congruential generator with the classic ANSI C constants,
    modelled as an immutable value. Every operation returns the advanced
    generator together with its output, so restarting a stream is just
    reusing the original value.

Security Note:
    Neither the hash nor the LCG is cryptographic. They only need to be
    deterministic and well dispersed.
"""

from dataclasses import dataclass
from typing import List, Sequence, Tuple, TypeVar

T = TypeVar("T")

# ═══════════════════════════════════════════════════════════════════════════════
# CONSTANTS
# ═══════════════════════════════════════════════════════════════════════════════

MASK_32 = 0xFFFFFFFF

LCG_MULTIPLIER = 1103515245
LCG_INCREMENT = 12345
LCG_MODULUS = 0x80000000  # 2^31

STREAM_PURPOSE = "_stream_seed"
POSITION_PURPOSE_PREFIX = "_pos_seed_"
AUTH_DATA_MIX_PURPOSE = "_auth_seed_1_data_mix"
AUTH_FOLD_PURPOSE = "_auth_seed_2_final_hash"
AUTH_FINAL_MIX_PURPOSE = "_auth_seed_3_final_mix"


def position_purpose(block_index: int) -> str:
    """Purpose suffix for the insertion-slot stream of one block."""
    return f"{POSITION_PURPOSE_PREFIX}{block_index}"


# ═══════════════════════════════════════════════════════════════════════════════
# SEED DERIVATION
# ═══════════════════════════════════════════════════════════════════════════════


def _utf16_units(text: str) -> List[int]:
    data = text.encode("utf-16-be", "surrogatepass")
    return [(data[i] << 8) | data[i + 1] for i in range(0, len(data), 2)]


def string_hash(text: str) -> int:
    """
    Hash a string to a 32-bit unsigned integer.

    djb2-style accumulation over UTF-16 code units followed by a murmur3
    style finaliser so that short suffix differences spread over all bits.
    """
    h = 5381
    for unit in _utf16_units(text):
        h = ((h * 33) & MASK_32) ^ unit

    h ^= h >> 16
    h = (h * 2246822507) & MASK_32
    h ^= h >> 13
    h = (h * 3266489917) & MASK_32
    h ^= h >> 16
    return h


def derive_seed(key: str, purpose: str = "") -> int:
    """
    Derive the 32-bit seed for one purpose from the secret key.

    Args:
        key: The shared secret key.
        purpose: Suffix naming the consumer of the seed.

    Returns:
        Unsigned 32-bit seed.

    Example:
        >>> derive_seed("k3y", STREAM_PURPOSE) == derive_seed("k3y", STREAM_PURPOSE)
        True
    """
    return string_hash(key + purpose)


# ═══════════════════════════════════════════════════════════════════════════════
# LINEAR CONGRUENTIAL GENERATOR
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class LCG:
    """
    Immutable linear congruential generator.

        state' = (1103515245 * state + 12345) mod 2^31

    Each method returns ``(advanced_generator, value)`` and leaves the
    receiver untouched:

        >>> rng = LCG.from_seed(42)
        >>> rng, first = rng.next_int()
        >>> rng, bit = rng.next_bit()

    A zero seed is replaced by 1.
    """

    state: int

    @classmethod
    def from_seed(cls, seed: int) -> "LCG":
        seed &= MASK_32
        return cls(seed or 1)

    @classmethod
    def for_purpose(cls, key: str, purpose: str) -> "LCG":
        """Generator seeded from ``derive_seed(key, purpose)``."""
        return cls.from_seed(derive_seed(key, purpose))

    def next_int(self) -> Tuple["LCG", int]:
        """Advance once; the value is the new state, in [0, 2^31)."""
        state = (LCG_MULTIPLIER * self.state + LCG_INCREMENT) % LCG_MODULUS
        return LCG(state), state

    def next_int_range(self, low: int, high: int) -> Tuple["LCG", int]:
        """
        Value in [low, high) by modulo reduction.

        The reduction is slightly biased for ranges that do not divide
        2^31; embedder and extractor depend on this exact mapping.
        """
        span = high - low
        if span <= 0:
            return self, low
        rng, value = self.next_int()
        return rng, low + value % span

    def next_bit(self) -> Tuple["LCG", int]:
        return self.next_int_range(0, 2)

    def shuffle(self, items: Sequence[T]) -> Tuple["LCG", List[T]]:
        """Seeded Fisher-Yates shuffle, walking from the last index down."""
        result = list(items)
        rng = self
        for i in range(len(result) - 1, 0, -1):
            rng, j = rng.next_int_range(0, i + 1)
            result[i], result[j] = result[j], result[i]
        return rng, result

    def bits(self, count: int) -> Tuple["LCG", str]:
        """Keystream of ``count`` bits as a '0'/'1' string."""
        rng = self
        out = []
        for _ in range(count):
            rng, bit = rng.next_bit()
            out.append("1" if bit else "0")
        return rng, "".join(out)

    def bytes_(self, count: int) -> Tuple["LCG", bytes]:
        """Keystream of ``count`` byte values."""
        rng = self
        out = bytearray()
        for _ in range(count):
            rng, value = rng.next_int_range(0, 256)
            out.append(value)
        return rng, bytes(out)
