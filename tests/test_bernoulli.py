import pytest

import numpy as np
import mpmath as mp
from scipy.special import bernoulli as scipy_bernoulli
from concurrent.futures import ThreadPoolExecutor

from ratseries import rational, ZERO, ONE, bernoulli, bernoulli_generator, IllegalArgumentError
from ratseries.core.bernoulli import calculate_bernoulli

def test_special_values():
    assert bernoulli(0) is ONE
    assert bernoulli(1) == rational.of(-1, 2)
    assert bernoulli(3) is ZERO
    assert bernoulli(101) is ZERO
    assert bernoulli(2) == rational.of(1, 6)
    assert bernoulli(4) == rational.of(-1, 30)
    assert bernoulli(20) == rational.of(-174611, 330)

def test_negative_index():
    for n in [-1, -2, -10]:
        with pytest.raises(IllegalArgumentError):
            bernoulli(n)

def test_mpmath(n=30):
    '''
    Compare against the exact Bernoulli numbers of mpmath (with the same convention B_1 = -1/2).
    '''
    for k in range(n + 1):
        p, q = mp.bernfrac(k)
        assert bernoulli(k) == rational.of(int(p), int(q))

def test_scipy(n=24, tol=1e-12):
    reference = scipy_bernoulli(n)
    values = np.array([float(b) for b in bernoulli_generator().sequence(n)])
    assert len(values) == len(reference)
    assert max(np.abs(values - reference)/np.maximum(np.abs(reference), 1)) < tol

def test_sequence():
    expected = [rational.of(1, 1), rational.of(-1, 2), rational.of(1, 6), ZERO, rational.of(-1, 30), ZERO, rational.of(1, 42)]
    assert bernoulli_generator().sequence(6) == expected

def test_unreduced_calculation():
    '''
    The raw calculation is not reduced; the generator stores reduced values.
    '''
    b4 = calculate_bernoulli(4)
    assert b4.compare_to(rational.of(-1, 30)) == 0
    assert b4.reduce() == rational.of(-1, 30)

@pytest.mark.parametrize("n", [0, 2, 8, 12])
def test_parallel_fold(n):
    '''
    Folding the terms on a thread pool gives the same result as the sequential fold.
    '''
    sequential = calculate_bernoulli(n)
    parallel = calculate_bernoulli(n, workers=4)
    assert parallel == sequential

def test_cache_growth():
    generator = bernoulli_generator()
    assert len(generator) == 0
    generator(1)
    generator(7)
    assert len(generator) == 0 # odd indices are not cached
    b8 = generator(8)
    assert len(generator) == 5 # B_0, B_2, B_4, B_6, B_8
    generator(4)
    assert len(generator) == 5
    assert generator(8) is b8
    generator(12, disable_tqdm=False, leave_tqdm=False)
    assert len(generator) == 7

def test_concurrent_cold_cache(n_threads=8, n=20):
    '''
    Concurrent requests on an empty cache yield identical results, and the cache is filled without
    duplicates or gaps.
    '''
    generator = bernoulli_generator(workers=2)
    with ThreadPoolExecutor(max_workers=n_threads) as executor:
        results = list(executor.map(lambda k: generator(n), range(2*n_threads)))
    assert all(r is results[0] for r in results)
    assert results[0] == rational.of(-174611, 330)
    assert len(generator) == n//2 + 1
    for k in range(0, n + 1, 2):
        p, q = mp.bernfrac(k)
        assert generator(k) == rational.of(int(p), int(q))
