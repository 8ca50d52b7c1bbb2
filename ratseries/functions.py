'''
Elementary functions to a requested number of significant digits, built on top of the
power series in ratseries.series.
'''

import threading
from decimal import Decimal

from .core.errors import DivideByZeroError, IllegalArgumentError
from .core.tools import EXACT, make_context, to_decimal, integral_part
from .series.exp import EXP

_e_cache = {}
_e_lock = threading.Lock()

def pow_int(x, n: int, precision: int):
    '''
    Raise a decimal to an integer power by repeated squaring.

    Parameters
    ----------
    x: Decimal, int, str, rational or mpmath.mpf
        The base.

    n: int
        The exponent. For negative exponents the reciprocal of x**(-n) is returned.

    precision: int
        The number of significant digits of the result. Intermediate results
        are computed with 10 additional digits.

    Returns
    -------
    Decimal
    '''
    context = make_context(precision)
    mc = make_context(precision + 10)
    x = to_decimal(x)
    if n < 0:
        if x.is_zero():
            raise DivideByZeroError(f'Zero can not be raised to the negative power {n}.')
        return context.plus(mc.divide(Decimal(1), pow_int(x, -n, precision + 10)))
    result = Decimal(1)
    while n > 0:
        if n%2 == 1:
            # odd exponent -> multiply result with x
            result = mc.multiply(result, x)
            n -= 1
        if n > 0:
            # even exponent -> square x
            x = mc.multiply(x, x)
        n >>= 1
    return context.plus(result)

def _exp_taylor(x: Decimal, precision: int, **kwargs):
    # exp(x) = exp(x/256)**256; the series converges fast for the small argument x/256.
    mc = make_context(precision + 6)
    x = mc.divide(x, Decimal(256))
    result = EXP.calculate(x, precision + 6, **kwargs)
    result = pow_int(result, 256, precision + 6)
    return make_context(precision).plus(result)

def exp(x, precision: int, **kwargs):
    '''
    Compute the exponential function.

    For |x| >= 1 the argument is split into its integral part i and fractional part f, and
    exp(x) = exp(1 + f/i)**i is evaluated, so that the series is always used for small arguments.

    Parameters
    ----------
    x: Decimal, int, str, rational or mpmath.mpf
        The argument.

    precision: int
        The number of significant digits of the result.

    **kwargs
        Optional keyworded arguments passed to series_calculator.calculate.

    Returns
    -------
    Decimal
    '''
    context = make_context(precision)
    x = to_decimal(x)
    if x.is_zero():
        return Decimal(1)
    integral = integral_part(x)
    if integral.is_zero():
        return _exp_taylor(x, precision, **kwargs)
    fractional = EXACT.subtract(x, integral)
    mc = make_context(precision + 10)
    z = mc.add(Decimal(1), mc.divide(fractional, integral))
    t = _exp_taylor(z, precision + 10, **kwargs)
    return context.plus(pow_int(t, int(integral), precision + 10))

def e(precision: int):
    '''
    Return Euler's number to the given number of significant digits.

    The value is cached; requests up to the cached precision are served by rounding the cached value.
    '''
    context = make_context(precision)
    with _e_lock:
        if _e_cache.get('precision', 0) < precision:
            guard_precision = precision + 10
            _e_cache['value'] = exp(1, guard_precision)
            _e_cache['precision'] = guard_precision
        return context.plus(_e_cache['value'])

FUNCTIONS = {'exp': exp}

def register(name: str, function):
    '''
    Make a function (x, precision) -> Decimal available to 'evaluate' under a given name.
    '''
    FUNCTIONS[name] = function

def evaluate(name: str, x, precision: int, **kwargs):
    '''
    Evaluate a named function at x to a given number of significant digits.

    Parameters
    ----------
    name: str
        The name of the function, see FUNCTIONS. Currently supported: 'exp'.

    x: Decimal, int, str, rational or mpmath.mpf
        The argument.

    precision: int
        The number of significant digits of the result.

    **kwargs
        Optional keyworded arguments passed to the function.

    Returns
    -------
    Decimal
    '''
    if name not in FUNCTIONS:
        raise IllegalArgumentError(f"Function '{name}' not supported. Available: {list(FUNCTIONS.keys())}")
    return FUNCTIONS[name](x, precision, **kwargs)
