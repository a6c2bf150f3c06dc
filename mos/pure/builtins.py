"""Native operations of the mos language.

Every builtin is curried exactly like a user lambda: it collects (unevaluated) arguments until its arity is met and
only then runs. Each implementation forces exactly the arguments it needs, so `if` never touches its untaken branch.
"""

from enum import Enum

from mos.lang.error import ArithmeticFault, BuiltinTypeError, GenericException
from mos.pure.term import Boolean, BuiltinLambda, Integer


class Operation(Enum):
    """Closed set of native operations, each with the name it is bound to and its arity."""
    ADD = ("add", 2)
    MUL = ("mul", 2)
    DIV = ("div", 2)
    REM = ("rem", 2)
    EQ = ("eq", 2)
    IF = ("if", 3)

    def __init__(self, symbol, arity):
        self.symbol = symbol
        self.arity = arity

    def apply(self, args, force):
        """Runs this operation on its full argument list. force reduces a term to weak head normal form."""
        if len(args) != self.arity:
            raise GenericException("'{}' applied to {} arguments, expected {}", (self.symbol, len(args), self.arity),
                                   internal=True)
        return _IMPLEMENTATIONS[self](self, args, force)

    def __repr__(self):
        return f"Operation.{self.name}"


def builtin_context():
    """Returns a fresh binding context holding every builtin, unapplied."""
    return {operation.symbol: BuiltinLambda(operation) for operation in Operation}


def _integers(operation, args, force):
    """Forces every arg (left to right) and returns their int values."""
    values = [force(arg) for arg in args]
    for value in values:
        if not isinstance(value, Integer):
            raise BuiltinTypeError(operation.symbol, "integers", value)
    return [value.value for value in values]


def _truncated_divmod(operation, args, force):
    """Integer division truncating toward zero; the remainder takes the sign of the dividend."""
    dividend, divisor = _integers(operation, args, force)
    if divisor == 0:
        raise ArithmeticFault(operation.symbol, BuiltinLambda(operation, tuple(args)))

    quotient = abs(dividend) // abs(divisor)
    if (dividend < 0) != (divisor < 0):
        quotient = -quotient
    return quotient, dividend - divisor * quotient


def _add(operation, args, force):
    left, right = _integers(operation, args, force)
    return Integer(left + right)


def _mul(operation, args, force):
    left, right = _integers(operation, args, force)
    return Integer(left * right)


def _div(operation, args, force):
    quotient, __ = _truncated_divmod(operation, args, force)
    return Integer(quotient)


def _rem(operation, args, force):
    __, remainder = _truncated_divmod(operation, args, force)
    return Integer(remainder)


def _eq(operation, args, force):
    left, right = args
    return Boolean(force(left) == force(right))


def _if(operation, args, force):
    condition, if_true, if_false = args

    value = force(condition)
    if not isinstance(value, Boolean):
        raise BuiltinTypeError(operation.symbol, "a boolean", value)

    return force(if_true) if value.value else force(if_false)


_IMPLEMENTATIONS = {
    Operation.ADD: _add,
    Operation.MUL: _mul,
    Operation.DIV: _div,
    Operation.REM: _rem,
    Operation.EQ: _eq,
    Operation.IF: _if,
}
