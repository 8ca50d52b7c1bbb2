from decimal import Decimal

class power_iterator:
    '''
    Generate the successive powers 1, x, x**2, x**3, ... of a fixed base x, where
    each multiplication is rounded according to a fixed decimal context.

    An instance is bound to its (base, context) pair; create a new iterator for a different
    base or precision.
    '''
    def __init__(self, x: Decimal, context):
        self.x = x
        self.context = context
        self._power = Decimal(1)

    def current_power(self):
        '''
        Return the power of the current step, without advancing.
        '''
        return self._power

    def advance(self):
        '''
        Multiply the current power by the base.
        '''
        self._power = self.context.multiply(self._power, self.x)

    def __iter__(self):
        return self

    def __next__(self):
        power = self._power
        self.advance()
        return power
