import pytest

import numpy as np
import mpmath as mp
from decimal import Decimal
from concurrent.futures import ThreadPoolExecutor

from njet.jet import factorials

from ratseries import rational, ONE, IllegalArgumentError
from ratseries.core.tools import make_context
from ratseries.series import power_iterator, series_calculator, exp_series, EXP
from ratseries.series.exp import exp_factors

from .common import get_rel_diff

def alternating_factors():
    '''
    The factors 1, -1, 1, -1, ... of the series 1/(1 + x).
    '''
    factor = ONE
    while True:
        yield factor
        factor = factor.negate()

def constant_factors():
    while True:
        yield ONE

def test_power_iterator():
    powers = power_iterator(Decimal(2), make_context(10))
    assert powers.current_power() == 1
    assert powers.current_power() == 1 # no side effect
    values = []
    for k in range(6):
        values.append(powers.current_power())
        powers.advance()
    assert values == [1, 2, 4, 8, 16, 32]

def test_power_iterator_rounding():
    powers = power_iterator(Decimal('1.1'), make_context(3))
    assert [next(powers) for k in range(4)] == [Decimal(1), Decimal('1.1'), Decimal('1.21'), Decimal('1.33')]

def test_exp_factors(n=15):
    '''
    The factors of the exponential series are the reciprocals of the factorials.
    '''
    facts = factorials(n)
    calculator = exp_series()
    for k, fact in enumerate(facts):
        assert calculator.get_factor(k) == rational(1, int(fact))
    assert len(calculator) == len(facts)

def test_exp_zero():
    assert exp_series().calculate(0, 10) == Decimal(1)
    assert EXP.calculate(Decimal(0), 1) == 1

def test_exp_one():
    with mp.workdps(30):
        reference = Decimal(mp.nstr(mp.e, 15))
    assert reference == Decimal('2.71828182845905')
    assert exp_series().calculate(1, 15) == reference

@pytest.mark.parametrize("x", ['0.5', '-0.5', '2', '0.1', '-1.25', '3'])
def test_exp_values(x, precision=30):
    result = EXP.calculate(Decimal(x), precision)
    with mp.workdps(80):
        reference = mp.exp(mp.mpf(x))
    assert get_rel_diff(result, reference) < 10**-(precision - 2)

def test_input_types(precision=20):
    reference = EXP.calculate(Decimal('0.5'), precision)
    assert EXP.calculate(rational.of(1, 2), precision) == reference
    assert EXP.calculate('0.5', precision) == reference
    assert EXP.calculate(mp.mpf(0.5), precision) == reference
    assert EXP.calculate(0.5, precision) == reference
    negative = EXP.calculate(Decimal('-0.5'), precision)
    assert EXP.calculate(mp.mpf('-0.5'), precision) == negative
    assert EXP.calculate(rational.of(-1, 2), precision) == negative
    assert negative < 1

def test_numpy_precision():
    reference = EXP.calculate(1, 10)
    assert EXP.calculate(1, np.int64(10)) == reference
    assert exp_series().calculate(Decimal('0.25'), np.int32(12)) == EXP.calculate(Decimal('0.25'), 12)

def test_invalid_precision():
    for precision in [0, -3, 2.5]:
        with pytest.raises(IllegalArgumentError):
            exp_series().calculate(1, precision)

def test_convergence_bound(precision=50):
    '''
    The summation stops at the first term below 10**-(precision + 1).
    '''
    calculator = exp_series()
    calculator.calculate(1, precision)
    n_terms = len(calculator)
    assert n_terms < 200
    threshold = rational(1, 10**(precision + 1))
    assert calculator.get_factor(n_terms - 1) <= threshold
    assert calculator.get_factor(n_terms - 2) > threshold

def test_factor_cache_reuse():
    calculator = exp_series()
    calculator.calculate(1, 30)
    n_terms = len(calculator)
    calculator.calculate(Decimal('0.5'), 10)
    assert len(calculator) == n_terms # fewer factors are required, so nothing has been added
    first = calculator.get_factor(5)
    assert calculator.get_factor(5) is first

def test_pairs(precision=20, tol=1e-18):
    '''
    Sum up 1 - x + x**2 - ... = 1/(1 + x) by pairs of terms.
    '''
    calculator = series_calculator(factors=alternating_factors, pairs=True, name='geometric')
    result = calculator.calculate(Decimal('0.5'), precision)
    assert abs(result - Decimal(2)/Decimal(3)) < tol
    assert len(calculator)%2 == 0

def test_exhausted_factors():
    calculator = series_calculator(factors=lambda: iter([ONE, ONE]))
    assert calculator.get_factor(1) is ONE
    with pytest.raises(RuntimeError):
        calculator.get_factor(5)

def test_slow_convergence_warning(tol=5e-3):
    calculator = series_calculator(factors=constant_factors, name='geometric')
    with pytest.warns(UserWarning, match='did not converge'):
        result = calculator.calculate(Decimal('0.9'), 5, warn_after=10)
    assert abs(result - 10) < tol

def test_concurrent_factor_cache(n_threads=8, precision=40):
    '''
    Concurrent evaluations obtain identical results, and every factor is computed exactly once.
    '''
    produced = []
    def counting_factors():
        for factor in exp_factors():
            produced.append(factor)
            yield factor

    calculator = series_calculator(factors=counting_factors, name='exp')
    with ThreadPoolExecutor(max_workers=n_threads) as executor:
        results = list(executor.map(lambda k: calculator.calculate(1, precision), range(2*n_threads)))
    assert all(r == results[0] for r in results)
    assert len(produced) == len(calculator)
    assert all(produced[k] is calculator.get_factor(k) for k in range(len(produced)))
