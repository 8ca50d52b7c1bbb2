import threading
import warnings
from decimal import Decimal

from ratseries.core.tools import EXACT, make_context, to_decimal
from .iterators import power_iterator

DEFAULT_WARN_AFTER = 10000 # number of terms after which a series is reported to converge slowly

class series_calculator:
    '''
    Evaluate a power series sum_i factor_i*x**i to a given decimal precision.

    The factors are exact rationals, produced by a sequential generator and cached, so that
    subsequent calls (also with different x) re-use them. The cache is shared between threads; each
    factor is computed exactly once.

    Parameters
    ----------
    factors: callable
        A function taking no arguments and returning an iterator over the rational factors
        factor_0, factor_1, factor_2, ... of the series. Each factor may depend on its predecessor.

    make_power_iterator: callable, optional
        A function (x, context) -> power_iterator, providing the powers of x which belong to the factors.

    pairs: bool, optional
        If True, then two consecutive terms are summed up before the convergence check is applied.
        Required for series whose individual terms are not monotonically decreasing.

    name: str, optional
        A name of the series, used in warnings.
    '''
    def __init__(self, factors, make_power_iterator=power_iterator, pairs=False, name=''):
        self.make_power_iterator = make_power_iterator
        self.pairs = pairs
        self.name = name
        self._factor_source = iter(factors())
        self._factors = []
        self._lock = threading.Lock()

    def get_factor(self, index: int):
        '''
        Return the factor of the given index, computing all missing factors up to this index.
        '''
        factors = self._factors
        if index < len(factors): # entries are only appended, so a present entry is final
            return factors[index]
        with self._lock:
            while len(factors) <= index:
                try:
                    factor = next(self._factor_source)
                except StopIteration:
                    raise RuntimeError(f'Factor sequence of series {self.name!r} exhausted at index {len(factors)}.')
                assert factor is not None, 'Factor cannot be None.'
                factors.append(factor)
            return factors[index]

    def __len__(self):
        return len(self._factors)

    def _term(self, index, powers, context):
        factor = self.get_factor(index)
        power = powers.current_power()
        powers.advance()
        # numerator*power is exact; only the division is rounded
        return context.divide(EXACT.multiply(Decimal(factor.numerator), power), Decimal(factor.denominator))

    def calculate(self, x, precision: int, **kwargs):
        '''
        Evaluate the series at a given point.

        Parameters
        ----------
        x: Decimal, int, str, rational or mpmath.mpf
            The point at which the series should be evaluated.

        precision: int
            The number of significant digits of the result. Every term is rounded to this
            precision and the summation stops as soon as the absolute value of a term (or pair of terms)
            drops below 10**-(precision + 1).

        warn_after: int, optional
            Issue a warning if the series did not converge after this number of terms. The
            summation nevertheless continues.

        Returns
        -------
        Decimal
            The value of the series, rounded half-up to the requested precision.
        '''
        context = make_context(precision)
        precision = context.prec # plain int, also for numpy integers
        x = to_decimal(x)
        warn_after = kwargs.get('warn_after', DEFAULT_WARN_AFTER)
        acceptable_error = Decimal(1).scaleb(-(precision + 1))

        powers = self.make_power_iterator(x, context)
        result = Decimal(0)
        index = 0
        warned = False
        while True:
            step = self._term(index, powers, context)
            index += 1
            if self.pairs:
                step = EXACT.add(step, self._term(index, powers, context))
                index += 1
            result = EXACT.add(result, step)
            if step.copy_abs() <= acceptable_error:
                break
            if index >= warn_after and not warned:
                warnings.warn(f'Series {self.name!r} did not converge after {index} terms (precision: {precision}, x: {x}).')
                warned = True
        return context.plus(result)
