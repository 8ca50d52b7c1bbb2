# collection of helper routines to set up and convert decimal quantities

import math
import decimal
from decimal import Decimal

import numpy as np
import mpmath as mp

from .errors import IllegalArgumentError, ParseError

DEFAULT_PRECISION = 128 # lower bound of the number of digits used in lossless conversions

# Context in which additions and multiplications are carried out without rounding.
# Never divide in this context: an inexact quotient would require infinitely many digits.
EXACT = decimal.Context(prec=decimal.MAX_PREC, Emax=decimal.MAX_EMAX, Emin=decimal.MIN_EMIN)

def make_context(precision: int):
    '''
    Create a decimal context for a given number of significant digits, rounding half-up.

    Parameters
    ----------
    precision: int
        The number of significant digits. Must be positive.

    Returns
    -------
    decimal.Context
    '''
    if isinstance(precision, (bool, float)) or not isinstance(precision, (int, np.integer)):
        raise IllegalArgumentError(f'Precision has to be a positive integer, got {precision!r}.')
    if precision < 1:
        raise IllegalArgumentError(f'Precision has to be positive, got {precision}.')
    return decimal.Context(prec=int(precision), rounding=decimal.ROUND_HALF_UP,
                           Emax=decimal.MAX_EMAX, Emin=decimal.MIN_EMIN)

def count_digits(number: int):
    '''
    Return the number of decimal digits of an integer. An estimate is obtained from
    its bit length, which is corrected by a comparison against the respective power of ten.
    '''
    number = abs(number)
    digit_count = int(math.log10(2)*number.bit_length() + 1)
    if 10**(digit_count - 1) > number:
        return digit_count - 1
    return digit_count

def integral_part(value: Decimal):
    '''
    Truncate a decimal towards zero.
    '''
    return value.to_integral_value(rounding=decimal.ROUND_DOWN)

def mpf_man_exp(value):
    '''
    Return the signed mantissa m and the exponent e of an mpmath float, so that value == m*2**e.
    '''
    # mpf.man_exp drops the sign of the mantissa
    sign, man, exp, bc = value._mpf_
    return (-man if sign else man), exp

def mpf2decimal(value):
    '''
    Convert an mpmath float exactly to a decimal.

    Parameters
    ----------
    value: mpmath.mpf
        The value to be converted. Must be finite.

    Returns
    -------
    Decimal
    '''
    if not mp.isfinite(value):
        raise ParseError(f'Non-finite value {value} can not be converted.')
    man, exp = mpf_man_exp(value)
    if exp >= 0:
        return Decimal(man*2**exp)
    # m*2**(-k) = m*5**k*10**(-k)
    return Decimal(man*5**(-exp)).scaleb(exp, EXACT)

def to_decimal(x):
    '''
    Convert a given input to a decimal without loss of information.

    Parameters
    ----------
    x: int, str, float, Decimal, rational or mpmath.mpf
        The value to be converted. Floats are taken by their shortest representation, so that
        e.g. 0.1 becomes Decimal('0.1').

    Returns
    -------
    Decimal
    '''
    if isinstance(x, Decimal):
        if not x.is_finite():
            raise ParseError(f'Non-finite value {x} not supported.')
        return x
    elif isinstance(x, (bool, np.bool_)):
        raise ParseError(f'Boolean input {x} not supported.')
    elif isinstance(x, (int, np.integer)):
        return Decimal(int(x))
    elif isinstance(x, (float, np.floating)):
        if not math.isfinite(x):
            raise ParseError(f'Non-finite value {x} not supported.')
        return Decimal(repr(float(x)))
    elif isinstance(x, mp.mpf):
        return mpf2decimal(x)
    elif isinstance(x, str):
        try:
            result = Decimal(x.strip())
        except decimal.InvalidOperation:
            raise ParseError(f'Input {x!r} is not a decimal number.')
        return to_decimal(result)
    elif hasattr(x, 'to_decimal'):
        return x.to_decimal()
    else:
        raise NotImplementedError(f'Input of type {type(x)} not recognized.')
