import pytest

from gbsplay.util import CRandom, rand_long, shuffle


def test_shuffle_matches_reference_sequence():
    rng = CRandom()
    rng.seed(0)
    actual = [1, 2, 3, 4, 5, 6, 7, 8, 9]
    shuffle(rng, actual)
    assert actual == [2, 8, 9, 1, 6, 4, 5, 3, 7]


def test_first_value_after_seed_one():
    rng = CRandom(1)
    assert rng.rand() == 1804289383


def test_seed_zero_behaves_like_seed_one():
    a = CRandom(0)
    b = CRandom(1)
    assert [a.rand() for _ in range(50)] == [b.rand() for _ in range(50)]


def test_reseeding_restarts_sequence():
    rng = CRandom(1234)
    first = [rng.rand() for _ in range(20)]
    rng.seed(1234)
    assert [rng.rand() for _ in range(20)] == first


def test_different_seeds_differ():
    a = CRandom(7)
    b = CRandom(8)
    assert [a.rand() for _ in range(10)] != [b.rand() for _ in range(10)]


def test_rand_within_bounds():
    rng = CRandom(99)
    values = [rng.rand() for _ in range(1000)]
    assert all(0 <= v <= CRandom.RAND_MAX for v in values)


@pytest.mark.parametrize("maximum", [1, 2, 7, 100])
def test_rand_long_range(maximum):
    rng = CRandom(42)
    values = [rand_long(rng, maximum) for _ in range(500)]
    assert all(0 <= v < maximum for v in values)


def test_rand_long_zero_maximum_is_zero():
    rng = CRandom(5)
    assert {rand_long(rng, 0) for _ in range(10)} == {0}


def test_shuffle_keeps_elements():
    rng = CRandom(3)
    items = list(range(30))
    shuffle(rng, items)
    assert sorted(items) == list(range(30))


def test_shuffle_single_and_empty():
    rng = CRandom(3)
    one = ["x"]
    empty: list = []
    shuffle(rng, one)
    shuffle(rng, empty)
    assert one == ["x"]
    assert empty == []


def test_shuffle_is_reproducible():
    a = list(range(12))
    b = list(range(12))
    shuffle(CRandom(77), a)
    shuffle(CRandom(77), b)
    assert a == b