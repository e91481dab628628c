"""Multiplicative hashing and the kernel's 48-bit linear congruential generator."""

__all__ = ["GOLDEN_RATIO_PRIME_32", "RAND_MAX", "RandomGenerator", "hash32", "rand", "srand"]

# 2^31 + 2^29 - 2^25 + 2^22 - 2^19 - 2^16 + 1
GOLDEN_RATIO_PRIME_32 = 0x9E370001

RAND_MAX = 2147483647

_MASK32 = 0xFFFFFFFF
_MASK48 = (1 << 48) - 1
_MULTIPLIER = 0x5DEECE66D
_INCREMENT = 0xB


def hash32(val: int, bits: int) -> int:
    """Hash a 32-bit value into the range [0, 2**bits - 1] using its high bits."""
    if not 0 <= bits <= 32:
        raise ValueError(f"bits must be between 0 and 32, got {bits}")
    product = (int(val) * GOLDEN_RATIO_PRIME_32) & _MASK32
    return product >> (32 - bits)


class RandomGenerator:
    """A pseudo-random generator yielding integers in [0, RAND_MAX]."""

    def __init__(self, seed: int = 1) -> None:
        self._state = 1
        self.seed(seed)

    def seed(self, seed: int) -> None:
        """Reset the generator; the seed is taken as an unsigned 32-bit value."""
        self._state = int(seed) & _MASK32

    def rand(self) -> int:
        """Advance the generator and return the next value."""
        self._state = (self._state * _MULTIPLIER + _INCREMENT) & _MASK48
        return (self._state >> 12) % (RAND_MAX + 1)


_default = RandomGenerator()


def rand() -> int:
    """Return the next value of the shared generator."""
    return _default.rand()


def srand(seed: int) -> None:
    """Seed the shared generator."""
    _default.seed(seed)