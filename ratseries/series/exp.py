# The generating series of exp(x)

from ratseries.core.rational import ONE
from .common import series_calculator
from .iterators import power_iterator

def exp_factors():
    '''
    Generate the Taylor coefficients 1/n! of the exponential function.
    '''
    n = 0
    factor = ONE
    while True:
        yield factor
        n += 1
        factor = factor.divide(n)

def exp_series():
    '''
    Create a series calculator for exp(x) with its own (empty) factor cache.
    '''
    return series_calculator(factors=exp_factors, make_power_iterator=power_iterator, pairs=False, name='exp')

EXP = exp_series() # process-wide instance, sharing the cache of the factors 1/n!
