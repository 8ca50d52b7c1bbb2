import re
import math
import decimal
from decimal import Decimal

import numpy as np
import mpmath as mp

from .errors import DivideByZeroError, IllegalArgumentError, ParseError
from .tools import DEFAULT_PRECISION, EXACT, make_context, count_digits, mpf_man_exp

# sign? digits? ('.' digits?)? ('(' digits ')')? ('e' sign? digits)?
_LITERAL = re.compile(r'(?P<sign>[+-])?(?P<integer>\d*)(?:\.(?P<fraction>\d*))?(?:\((?P<repeat>\d+)\))?(?:[eE](?P<exponent>[+-]?\d+))?')

_INTEGER_TYPES = (int, np.integer)

def _trunc_divmod(n, d):
    '''
    Integer division rounding towards zero (d > 0). The remainder carries the sign of n.
    '''
    q = -(-n//d) if n < 0 else n//d
    return q, n - q*d

def _parse_digits(digits, name):
    try:
        return int(digits)
    except ValueError:
        raise ParseError(f'{name} {digits!r} is not a valid number.')

def _check_operand(value):
    if isinstance(value, (bool, np.bool_)):
        raise TypeError(f'Boolean operand {value} not supported.')


class rational:
    '''
    Class to model an exact rational number n/d with integer numerator n and denominator d.

    The representation is not reduced automatically: arithmetic operations produce the
    plain cross-multiplied numerator and denominator, so that e.g. repeated additions grow the
    denominator. Call self.reduce() to obtain a representation in lowest terms.

    !!! Attention !!!
    Equality and hashing operate on the raw (numerator, denominator) pair. Hence
    rational(2, 4) != rational(1, 2), while the comparison operators <, <=, >, >=
    (and self.compare_to) are independent of the representation.
    '''
    def __init__(self, numerator=0, denominator=1):
        if isinstance(numerator, bool) or not isinstance(numerator, _INTEGER_TYPES):
            raise TypeError(f'Numerator has to be an integer, got {type(numerator)}.')
        if isinstance(denominator, bool) or not isinstance(denominator, _INTEGER_TYPES):
            raise TypeError(f'Denominator has to be an integer, got {type(denominator)}.')
        numerator, denominator = int(numerator), int(denominator)
        if denominator == 0:
            raise DivideByZeroError('Divide by zero')
        if denominator < 0:
            numerator, denominator = -numerator, -denominator
        self._numerator = numerator
        self._denominator = denominator

    @property
    def numerator(self):
        return self._numerator

    @property
    def denominator(self):
        return self._denominator

    ###############
    # Constructors
    ###############

    @classmethod
    def of(cls, numerator, denominator):
        '''
        Create a rational number n/d. Zero and one are mapped to the shared constants ZERO and ONE.

        Parameters
        ----------
        numerator: int
        denominator: int
            Must be non-zero. If negative, the signs of both components are flipped.

        Returns
        -------
        rational
        '''
        if numerator == 0 and denominator != 0:
            return ZERO
        if numerator == 1 and denominator == 1:
            return ONE
        return cls(numerator, denominator)

    @classmethod
    def value_of(cls, value):
        '''
        Convert a given number to a rational without loss of information.

        Parameters
        ----------
        value: rational, int, float, str, Decimal or mpmath.mpf
            Floats are taken by their shortest decimal representation, strings are
            parsed with self.parse.

        Returns
        -------
        rational
        '''
        if isinstance(value, rational):
            return value
        elif isinstance(value, (bool, np.bool_)):
            raise ParseError(f'Boolean input {value} not supported.')
        elif isinstance(value, _INTEGER_TYPES):
            value = int(value)
            if value == 0:
                return ZERO
            if value == 1:
                return ONE
            return cls(value)
        elif isinstance(value, (float, np.floating)):
            value = float(value)
            if math.isinf(value):
                raise ParseError('Infinite')
            if math.isnan(value):
                raise ParseError('NaN')
            return cls.value_of(Decimal(repr(value)))
        elif isinstance(value, Decimal):
            return cls._from_decimal(value)
        elif isinstance(value, mp.mpf):
            if not mp.isfinite(value):
                raise ParseError(f'Non-finite value {value} not supported.')
            man, exp = mpf_man_exp(value)
            if exp >= 0:
                return cls.of(man*2**exp, 1)
            return cls.of(man, 2**(-exp))
        elif isinstance(value, str):
            return cls.parse(value)
        else:
            raise NotImplementedError(f'Input of type {type(value)} not recognized.')

    @classmethod
    def _from_decimal(cls, value):
        if not value.is_finite():
            raise ParseError(f'Non-finite value {value} not supported.')
        if value == 0:
            return ZERO
        if value == 1:
            return ONE
        sign, digits, exponent = value.as_tuple()
        unscaled = int(''.join(str(k) for k in digits))
        if sign:
            unscaled = -unscaled
        if exponent >= 0:
            return cls(unscaled*10**exponent)
        return cls(unscaled, 10**(-exponent))

    @classmethod
    def mixed(cls, integer, fraction_numerator, fraction_denominator):
        '''
        Create a rational from a mixed number like 3 1/4 (= 13/4) or -3 1/4 (= -13/4).

        Parameters
        ----------
        integer: int
            The integer part. Its sign determines the sign of the result.
        fraction_numerator: int
            Non-negative numerator of the fraction part.
        fraction_denominator: int
            Positive denominator of the fraction part.

        Returns
        -------
        rational
        '''
        if fraction_numerator < 0 or fraction_denominator < 0:
            raise IllegalArgumentError('Negative value')
        integer_part = cls.value_of(integer)
        fraction_part = cls.of(fraction_numerator, fraction_denominator)
        if integer_part.signum() >= 0:
            return integer_part.add(fraction_part)
        return integer_part.subtract(fraction_part)

    @classmethod
    def parse(cls, text: str):
        '''
        Parse a string into a rational number.

        The string may consist of several decimal literals separated by '/', which are
        divided from left to right, e.g. '1/3', '1.5/2/3' or '-2.5e-3/7'.
        Every literal has the form

            sign? digits? ('.' digits?)? ('(' digits ')')? ('e' sign? digits)?

        where the digits in parentheses denote a repeating fraction part; e.g. '0.1(6)' = 1/6.

        Parameters
        ----------
        text: str
            The string to be parsed.

        Returns
        -------
        rational
        '''
        if not isinstance(text, str):
            raise ParseError(f'Expected a string, got {type(text)}.')
        literals = text.split('/')
        result = cls._parse_literal(literals[0])
        for literal in literals[1:]:
            result = result.divide(cls._parse_literal(literal))
        return result

    @classmethod
    def _parse_literal(cls, literal):
        match = _LITERAL.fullmatch(literal.strip())
        if match is None:
            raise ParseError(f'Literal {literal!r} not understood.')
        parts = match.groupdict()
        if not (parts['integer'] or parts['fraction'] or parts['repeat']):
            raise ParseError(f'Literal {literal!r} contains no digits.')
        return cls.from_parts(positive=parts['sign'] != '-', integer_part=parts['integer'], fraction_part=parts['fraction'],
                              fraction_repeat_part=parts['repeat'], exponent_part=parts['exponent'])

    @classmethod
    def from_parts(cls, positive=True, integer_part=None, fraction_part=None, fraction_repeat_part=None, exponent_part=None):
        '''
        Create a rational number from the individual parts of a decimal literal.

        Parameters
        ----------
        positive: bool, optional
            The sign of the result.
        integer_part: str, optional
            The digits in front of the decimal point.
        fraction_part: str, optional
            The (non-repeating) digits after the decimal point.
        fraction_repeat_part: str, optional
            Digits which are repeated infinitely often after the fraction part.
        exponent_part: str, optional
            A power of ten by which the result will be scaled.

        Returns
        -------
        rational
        '''
        result = ZERO
        if fraction_repeat_part:
            lots_of_nines = 10**len(fraction_repeat_part) - 1
            result = cls.of(_parse_digits(fraction_repeat_part, 'Repeating fraction part'), lots_of_nines)

        if fraction_part:
            result = result.add(_parse_digits(fraction_part, 'Fraction part'))
            result = result.divide(10**len(fraction_part))

        if integer_part:
            result = result.add(_parse_digits(integer_part, 'Integer part'))

        if exponent_part:
            exponent = _parse_digits(exponent_part, 'Exponent')
            power_of_ten = 10**abs(exponent)
            result = result.multiply(power_of_ten) if exponent >= 0 else result.divide(power_of_ten)

        if not positive:
            result = result.negate()
        return result

    ##############
    # Arithmetic
    ##############

    def add(self, value):
        _check_operand(value)
        if isinstance(value, _INTEGER_TYPES):
            if value == 0:
                return self
            return self.of(self._numerator + int(value)*self._denominator, self._denominator)
        if self._denominator == value._denominator:
            return self.of(self._numerator + value._numerator, self._denominator)
        n = self._numerator*value._denominator + value._numerator*self._denominator
        d = self._denominator*value._denominator
        return self.of(n, d)

    def subtract(self, value):
        _check_operand(value)
        if isinstance(value, _INTEGER_TYPES):
            if value == 0:
                return self
            return self.of(self._numerator - int(value)*self._denominator, self._denominator)
        if self._denominator == value._denominator:
            return self.of(self._numerator - value._numerator, self._denominator)
        n = self._numerator*value._denominator - value._numerator*self._denominator
        d = self._denominator*value._denominator
        return self.of(n, d)

    def multiply(self, value):
        _check_operand(value)
        if isinstance(value, _INTEGER_TYPES):
            value = int(value)
            if self.is_zero() or value == 0:
                return ZERO
            if self == ONE:
                return self.value_of(value)
            if value == 1:
                return self
            return self.of(self._numerator*value, self._denominator)
        if self.is_zero() or value.is_zero():
            return ZERO
        if self == ONE:
            return value
        if value == ONE:
            return self
        return self.of(self._numerator*value._numerator, self._denominator*value._denominator)

    def divide(self, value):
        _check_operand(value)
        if isinstance(value, _INTEGER_TYPES):
            value = int(value)
            if value == 1:
                return self
            return self.of(self._numerator, self._denominator*value)
        if value == ONE:
            return self
        return self.of(self._numerator*value._denominator, self._denominator*value._numerator)

    def reciprocal(self):
        return self.of(self._denominator, self._numerator)

    def negate(self):
        if self.is_zero():
            return self
        return self.of(-self._numerator, self._denominator)

    def abs(self):
        return self if self._numerator >= 0 else self.negate()

    def increment(self):
        return self.of(self._numerator + self._denominator, self._denominator)

    def decrement(self):
        return self.of(self._numerator - self._denominator, self._denominator)

    def pow(self, exponent: int):
        '''
        Raise the current rational to an integer power.

        Parameters
        ----------
        exponent: int
            The exponent. For negative exponents the reciprocal is raised to the absolute value.
            An exponent of zero always yields ONE (also for ZERO).

        Returns
        -------
        rational
        '''
        if isinstance(exponent, bool) or not isinstance(exponent, _INTEGER_TYPES):
            raise TypeError(f'Exponent has to be an integer, got {type(exponent)}.')
        exponent = int(exponent) # numpy integers would overflow
        if exponent == 0:
            return ONE
        if exponent == 1:
            return self
        if exponent > 0:
            return self.of(self._numerator**exponent, self._denominator**exponent)
        return self.of(self._denominator**(-exponent), self._numerator**(-exponent))

    def reduce(self):
        '''
        Return the representation of the current rational in lowest terms.
        '''
        gcd = math.gcd(self._numerator, self._denominator)
        return self.of(self._numerator//gcd, self._denominator//gcd)

    def integer_part(self):
        '''
        The integer part, truncated towards zero, e.g. -7/2 -> -3.
        '''
        _, r = _trunc_divmod(self._numerator, self._denominator)
        return self.of(self._numerator - r, self._denominator)

    def fraction_part(self):
        '''
        The fraction part, carrying the sign of the number, e.g. -7/2 -> -1/2.
        '''
        _, r = _trunc_divmod(self._numerator, self._denominator)
        return self.of(r, self._denominator)

    def with_precision(self, precision: int):
        '''
        Round the current rational to a given number of significant digits (half-up).
        '''
        return self.value_of(self.to_decimal(precision))

    def with_scale(self, scale: int):
        '''
        Round the current rational to a given number of digits after the decimal point (half-up).
        '''
        quantum = Decimal(1).scaleb(-scale)
        return self.value_of(self.to_decimal().quantize(quantum, rounding=decimal.ROUND_HALF_UP, context=EXACT))

    @staticmethod
    def min(*values):
        if len(values) == 0:
            return ZERO
        result = values[0]
        for value in values[1:]:
            if result.compare_to(value) > 0:
                result = value
        return result

    @staticmethod
    def max(*values):
        if len(values) == 0:
            return ZERO
        result = values[0]
        for value in values[1:]:
            if result.compare_to(value) < 0:
                result = value
        return result

    ###############
    # Properties
    ###############

    def is_zero(self):
        return self._numerator == 0

    def is_integer(self):
        return self._denominator == 1 or self.reduce()._denominator == 1

    def signum(self):
        return (self._numerator > 0) - (self._numerator < 0)

    def compare_to(self, other):
        '''
        Compare two rationals by cross-multiplication.

        Returns
        -------
        int
            -1, 0 or 1 if self is smaller than, equal to or larger than other.
        '''
        if self is other:
            return 0
        lhs = self._numerator*other._denominator
        rhs = self._denominator*other._numerator
        return (lhs > rhs) - (lhs < rhs)

    ###############
    # Conversions
    ###############

    def _precision(self):
        return count_digits(self._numerator) + count_digits(self._denominator)

    def to_decimal(self, precision=None):
        '''
        Divide numerator by denominator to obtain a decimal.

        Parameters
        ----------
        precision: int, optional
            The number of significant digits of the result (rounded half-up). If nothing
            specified, the sum of the number of digits of numerator and denominator is taken,
            but at least DEFAULT_PRECISION.

        Returns
        -------
        Decimal
        '''
        if precision is None:
            precision = max(self._precision(), DEFAULT_PRECISION)
        return make_context(precision).divide(Decimal(self._numerator), Decimal(self._denominator))

    def to_float(self):
        return float(self.to_decimal())

    def to_mpf(self, dps=None):
        '''
        Convert the current rational to an mpmath float.

        Parameters
        ----------
        dps: int, optional
            The number of decimal digits used in the division. If nothing specified,
            the current mpmath working precision is used.

        Returns
        -------
        mpmath.mpf
        '''
        if dps is None:
            return mp.mpf(self._numerator)/self._denominator
        with mp.workdps(dps):
            return mp.mpf(self._numerator)/self._denominator

    def __int__(self):
        q, _ = _trunc_divmod(self._numerator, self._denominator)
        return q

    def __float__(self):
        return self.to_float()

    def __bool__(self):
        return not self.is_zero()

    ###########
    # Strings
    ###########

    def __str__(self):
        if self.is_zero():
            return '0'
        if self._denominator == 1:
            return str(self._numerator)
        return str(self.to_decimal())

    def to_plain_string(self):
        if self.is_zero():
            return '0'
        if self._denominator == 1:
            return str(self._numerator)
        return format(self.to_decimal(), 'f')

    def to_rational_string(self):
        '''
        Return a string of the form 'n' for integers or 'n/d' otherwise.
        '''
        if self.is_zero():
            return '0'
        if self._denominator == 1:
            return str(self._numerator)
        return f'{self._numerator}/{self._denominator}'

    def to_integer_rational_string(self):
        '''
        Return a string representing the current rational as mixed number, e.g. '3 1/4'
        for 13/4, '-3 1/4' for -13/4 and '1/4' if there is no integer part.
        '''
        integer, fraction_numerator = _trunc_divmod(self._numerator, self._denominator)
        result = ''
        if integer != 0:
            result += str(integer)
        if fraction_numerator != 0:
            if len(result) > 0:
                result += f' {abs(fraction_numerator)}'
            else:
                result += str(fraction_numerator)
            result += f'/{self._denominator}'
        if len(result) == 0:
            result = '0'
        return result

    def __repr__(self):
        return f'{self.__class__.__name__}({self._numerator}, {self._denominator})'

    def _repr_html_(self):
        return f'<samp>{self.to_rational_string()}</samp>'

    #############
    # Operators
    #############

    def _coerce(self, other):
        if isinstance(other, rational):
            return other
        if isinstance(other, _INTEGER_TYPES) and not isinstance(other, bool):
            return self.value_of(other)
        return None

    def __add__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self.add(other)

    def __radd__(self, other):
        # addition is commutative, apart from the order of the numerator terms
        return self.__add__(other)

    def __sub__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self.subtract(other)

    def __rsub__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return other.subtract(self)

    def __mul__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self.multiply(other)

    def __rmul__(self, other):
        return self.__mul__(other)

    def __truediv__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self.divide(other)

    def __rtruediv__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return other.divide(self)

    def __pow__(self, other):
        if isinstance(other, bool) or not isinstance(other, _INTEGER_TYPES):
            return NotImplemented
        return self.pow(int(other))

    def __neg__(self):
        return self.negate()

    def __pos__(self):
        return self

    def __abs__(self):
        return self.abs()

    def __eq__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self._numerator == other._numerator and self._denominator == other._denominator

    def __hash__(self):
        if self._denominator == 1:
            return hash(self._numerator) # consistent with int, since rational(k) == k
        return hash((self._numerator, self._denominator))

    def __lt__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self.compare_to(other) < 0

    def __le__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self.compare_to(other) <= 0

    def __gt__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self.compare_to(other) > 0

    def __ge__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self.compare_to(other) >= 0


ZERO = rational(0)
ONE = rational(1)
TWO = rational(2)
TEN = rational(10)
