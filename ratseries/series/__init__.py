'''
Collection of routines to sum up power series with exact rational coefficients
to a requested decimal precision.
'''

from .iterators import power_iterator
from .common import series_calculator
from .exp import exp_series, EXP
