import numpy as np
import mpmath as mp

from ratseries import rational

def make_random_rationals(n, max_value=10**6):
    '''
    Create random non-zero rationals with numerator and denominator between -max_value and max_value.
    '''
    numerators = np.random.randint(1, max_value, size=n)*np.random.choice([-1, 1], size=n)
    denominators = np.random.randint(1, max_value, size=n)*np.random.choice([-1, 1], size=n)
    return [rational.of(int(a), int(b)) for a, b in zip(numerators, denominators)]

def get_rel_diff(value, reference, dps=80):
    '''
    Return the relative difference between a decimal and a reference value, computed with mpmath.
    '''
    with mp.workdps(dps):
        reference = mp.mpf(reference)
        return abs(mp.mpf(str(value)) - reference)/abs(reference)
