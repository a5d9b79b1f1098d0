"""Test sampling without replacement"""
import sys
sys.path.append('.')

import collections

import numpy as np
import pytest

from fastmask.data import sample_without_replacement


@pytest.mark.parametrize('population, k', [(0, 0), (1, 1), (10, 0), (10, 3), (10, 10), (1000, 999), (10 ** 9, 5)])
def test_distinct_in_range(population, k):
    picked = sample_without_replacement(population, k, np.random.default_rng(0))
    assert picked.dtype == np.int64
    assert len(picked) == k
    assert len(set(picked.tolist())) == k
    if k:
        assert picked.min() >= 0
        assert picked.max() < population


def test_full_draw_is_permutation():
    picked = sample_without_replacement(50, 50, np.random.default_rng(3))
    assert sorted(picked.tolist()) == list(range(50))


def test_index_frequency_uniform():
    rng = np.random.default_rng(2024)
    population, k, trials = 10, 3, 20000
    counts = np.zeros(population)
    for _ in range(trials):
        counts[sample_without_replacement(population, k, rng)] += 1
    freq = counts / trials
    np.testing.assert_allclose(freq, k / population, atol=0.02)


def test_subset_frequency_uniform():
    rng = np.random.default_rng(7)
    trials = 12000
    counter = collections.Counter(
        tuple(sorted(sample_without_replacement(4, 2, rng).tolist())) for _ in range(trials)
    )
    assert len(counter) == 6
    for count in counter.values():
        assert abs(count / trials - 1 / 6) < 0.02


@pytest.mark.parametrize('population, k', [(-1, 0), (5, 6), (5, -1)])
def test_invalid_arguments(population, k):
    with pytest.raises(ValueError):
        sample_without_replacement(population, k)
