# planet_generator/prng.py

"""
================================================================================
SEEDED RANDOM STREAMS AND PERMUTATION TABLES
================================================================================
A small deterministic pseudo-random generator (mulberry32) and the
permutation table builder used by the noise kernels.

Data Contract:
---------------
- Inputs: a 32-bit unsigned seed.
- Outputs:
    - SeededPRNG.next(): floats in [0, 1).
    - build_permutation_table(): a read-only 512-entry int array whose
      values lie in [0, 256), the second half duplicating the first.
- Side Effects: None beyond the generator's own state advancing.
- Invariants: The same seed always yields the same sequence.
================================================================================
"""

import numpy as np

UINT32_MASK = 0xFFFFFFFF
# Mixing constants of mulberry32.
MULBERRY_INCREMENT = 0x6D2B79F5
MULBERRY_SHIFTS = (15, 7, 14)
MULBERRY_ODD_MASK = 61

TABLE_SIZE = 256


class SeededPRNG:
    """
    mulberry32: a 32-bit state advanced by a Weyl increment and finalised
    with two xorshift-multiply rounds.
    """

    def __init__(self, seed: int):
        self.seed = int(seed) & UINT32_MASK
        self._state = self.seed

    def next_uint32(self) -> int:
        """Advances the state and returns the next 32-bit output word."""
        s1, s2, s3 = MULBERRY_SHIFTS
        self._state = (self._state + MULBERRY_INCREMENT) & UINT32_MASK
        t = self._state
        t = ((t ^ (t >> s1)) * (t | 1)) & UINT32_MASK
        t ^= (t + (((t ^ (t >> s2)) * (t | MULBERRY_ODD_MASK)) & UINT32_MASK)) & UINT32_MASK
        return (t ^ (t >> s3)) & UINT32_MASK

    def next(self) -> float:
        """Returns a float in [0, 1)."""
        return self.next_uint32() / 4294967296.0

    def randint(self, n: int) -> int:
        """Returns an integer in [0, n)."""
        return int(self.next() * n)


def build_permutation_table(prng: SeededPRNG) -> np.ndarray:
    """
    Builds the 512-entry permutation table.

    The 256 sequential indices are Fisher-Yates shuffled using the PRNG and
    then duplicated into the second half, so lookups such as
    perm[i + perm[j]] never need a second modulo.
    """
    p = np.arange(TABLE_SIZE, dtype=np.int64)
    for i in range(TABLE_SIZE - 1):
        r = i + prng.randint(TABLE_SIZE - i)
        p[i], p[r] = p[r], p[i]

    table = np.concatenate([p, p])
    table.setflags(write=False)
    return table
