'''
Exact rational arithmetic and Bernoulli numbers.
'''

from .errors import DivideByZeroError, ParseError, IllegalArgumentError
from .rational import rational, ZERO, ONE, TWO, TEN
from .bernoulli import bernoulli, bernoulli_generator
