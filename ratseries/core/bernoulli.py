import threading
from functools import partial, reduce
from concurrent.futures import ThreadPoolExecutor

from tqdm import tqdm

from .errors import IllegalArgumentError
from .rational import rational, ZERO, ONE

MINUS_ONE_HALF = rational(-1, 2)

def _power_sum(k: int, n: int):
    '''
    Compute sum_{j=0}^k (-1)**j*binomial(k, j)*j**n/(k + 1), the k-th term of the sum defining
    the n-th Bernoulli number.
    '''
    j_sum = ZERO
    binomial = ONE
    for j in range(k + 1):
        j_pow_n = rational.value_of(j).pow(n)
        if j%2 == 0:
            j_sum = j_sum.add(binomial.multiply(j_pow_n))
        else:
            j_sum = j_sum.subtract(binomial.multiply(j_pow_n))
        binomial = binomial.multiply(rational.value_of(k - j).divide(rational.value_of(j + 1)))
    return j_sum.divide(rational.value_of(k + 1))

def calculate_bernoulli(n: int, workers=1):
    r'''
    Compute the n-th Bernoulli number from scratch, via

    B_n = \sum_{k=0}^n 1/(k + 1) \sum_{j=0}^k (-1)**j binomial(k, j) j**n .

    Parameters
    ----------
    n: int
        The index of the Bernoulli number.

    workers: int, optional
        If > 1, the terms of the outer sum are computed on a thread pool of this size.
        The result does not depend on this parameter.

    Returns
    -------
    rational
        The (unreduced) Bernoulli number B_n.
    '''
    power_sum = partial(_power_sum, n=n)
    if workers > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return reduce(rational.add, executor.map(power_sum, range(n + 1)), ZERO)
    return reduce(rational.add, map(power_sum, range(n + 1)), ZERO)


class bernoulli_generator:
    '''
    Provide Bernoulli numbers (with the convention B_1 = -1/2) as reduced rationals.

    Bernoulli numbers of even index are cached in the order of their index, where the cache
    is filled without gaps. The cache can be shared between threads; each entry is computed exactly once.

    Parameters
    ----------
    workers: int, optional
        The number of threads to compute an individual Bernoulli number.
    '''
    def __init__(self, workers=1):
        self.workers = workers
        self._cache = [] # self._cache[k] = B_{2k}
        self._lock = threading.Lock()

    def __len__(self):
        return len(self._cache)

    def __call__(self, n: int, **kwargs):
        '''
        Return the n-th Bernoulli number.

        Parameters
        ----------
        n: int
            A non-negative index.

        **kwargs
            Optional keyworded arguments 'disable_tqdm' (default: True) and 'leave_tqdm' (default: True)
            to control the progress bar shown while the cache is filled.

        Returns
        -------
        rational
        '''
        if n < 0:
            raise IllegalArgumentError(f'Illegal bernoulli(n) for n < 0: n = {n}')
        if n == 0:
            return ONE
        if n == 1:
            return MINUS_ONE_HALF
        if n%2 == 1:
            return ZERO

        index = n//2
        cache = self._cache
        if index < len(cache):
            return cache[index]
        with self._lock:
            if len(cache) <= index:
                pbar = tqdm(range(len(cache), index + 1),
                            leave=kwargs.get('leave_tqdm', True),
                            disable=kwargs.get('disable_tqdm', True))
                for k in pbar:
                    cache.append(calculate_bernoulli(2*k, workers=self.workers).reduce())
            return cache[index]

    def sequence(self, n: int, **kwargs):
        '''
        Return the list [B_0, B_1, ..., B_n].
        '''
        self(n - n%2, **kwargs) # fill the cache at once
        return [self(k, **kwargs) for k in range(n + 1)]


_generator = bernoulli_generator()

def bernoulli(n: int, **kwargs):
    '''
    Return the n-th Bernoulli number as reduced rational, using a process-wide cache.
    See bernoulli_generator.__call__ for details.
    '''
    return _generator(n, **kwargs)
