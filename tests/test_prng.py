import numpy as np
import pytest

from planet_generator.prng import SeededPRNG, build_permutation_table


def test_first_words_for_seed_12345():
    prng = SeededPRNG(12345)
    words = [prng.next_uint32() for _ in range(5)]
    assert words == [4207900869, 1317490944, 2079646450, 3513001552, 2187978186]


def test_seed_zero_is_a_valid_seed():
    prng = SeededPRNG(0)
    assert prng.next_uint32() == 1144304738
    assert prng.next_uint32() == 1416247


def test_next_is_word_over_two_to_the_32():
    a, b = SeededPRNG(12345), SeededPRNG(12345)
    for _ in range(100):
        value = a.next()
        assert 0.0 <= value < 1.0
        assert value == b.next_uint32() / 2 ** 32


def test_seed_is_masked_to_32_bits():
    assert SeededPRNG(12345 + 2 ** 32).seed == 12345
    assert SeededPRNG(-1).seed == 0xFFFFFFFF


def test_randint_stays_in_range():
    prng = SeededPRNG(7)
    values = [prng.randint(10) for _ in range(2000)]
    assert min(values) == 0
    assert max(values) == 9


def test_permutation_table_golden_values():
    table = build_permutation_table(SeededPRNG(12345))
    assert list(table[:16]) == [250, 79, 124, 209, 132, 92, 24, 197, 255, 212, 123, 242, 229, 248, 165, 74]
    assert list(table[248:256]) == [2, 159, 244, 148, 25, 127, 136, 8]


@pytest.mark.parametrize("seed", [0, 1, 12345, 0xFFFFFFFF])
def test_permutation_table_is_a_duplicated_permutation(seed):
    table = build_permutation_table(SeededPRNG(seed))
    assert table.shape == (512,)
    assert sorted(table[:256]) == list(range(256))
    np.testing.assert_array_equal(table[:256], table[256:])


def test_permutation_table_is_read_only():
    table = build_permutation_table(SeededPRNG(1))
    with pytest.raises(ValueError):
        table[0] = 5


def test_different_seeds_give_different_tables():
    a = build_permutation_table(SeededPRNG(1))
    b = build_permutation_table(SeededPRNG(2))
    assert not np.array_equal(a, b)
