class IntervalError(Exception):
    def __init__(self, msg):
        if msg:
            self.message = msg
        else:
            self.message = None

    def __str__(self):
        return 'IntervalError: {0}'.format(self.message)

class IterationError(Exception):
    def __init__(self, msg):
        if msg:
            self.message = msg
        else:
            self.message = None

    def __str__(self):
        return 'IterationError: {0}'.format(self.message)

class PolynomialError(ValueError):
    def __init__(self, msg):
        if msg:
            self.message = msg
        else:
            self.message = None

    def __str__(self):
        return 'PolynomialError: {0}'.format(self.message)

class DivisionByZeroError(ZeroDivisionError):
    def __init__(self, msg):
        if msg:
            self.message = msg
        else:
            self.message = None

    def __str__(self):
        return 'DivisionByZeroError: {0}'.format(self.message)
