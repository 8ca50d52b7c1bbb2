from .core import rational, ZERO, ONE, TWO, TEN
from .core import bernoulli, bernoulli_generator
from .core import DivideByZeroError, ParseError, IllegalArgumentError
from .series import power_iterator, series_calculator, exp_series, EXP
from .functions import exp, e, pow_int, evaluate

__version__ = '0.1.0'
