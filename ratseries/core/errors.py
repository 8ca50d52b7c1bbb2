'''
Error kinds raised by the rational and series routines. They derive from the
corresponding builtin exceptions, so callers may catch either.
'''

class DivideByZeroError(ZeroDivisionError):
    '''
    Raised when a rational with zero denominator would be constructed, e.g. by
    dividing through a rational of value zero.
    '''
    pass

class ParseError(ValueError):
    '''
    Raised for malformed numeric literals, including infinite or NaN input.
    '''
    pass

class IllegalArgumentError(ValueError):
    '''
    Raised for arguments outside of the domain of a routine (negative Bernoulli index,
    negative fraction components, non-positive precision, unknown series names).
    '''
    pass
