"""Call-by-name reduction of mos terms to weak head normal form.

Arguments are substituted unevaluated and only forced where a builtin needs their value. References are looked up in
the binding context every time they are reached, and the referent is reduced again: reduced values are never shared.
"""

from mos.lang.error import UnboundNameError
from mos.pure.term import Apply, BuiltinLambda, Lambda, Reference


class CallByNameReducer:
    """Reduces terms under a read-only binding context (name -> Term). tracer, if given, is called as tracer(step, term)
    after every beta step ("β") and every saturated builtin call ("δ").
    """

    def __init__(self, context, tracer=None):
        self.context = context
        self.tracer = tracer

    def reduce(self, term):
        """Returns the weak head normal form of term. An application whose operator does not reduce to a function is
        stuck and comes back as an Apply of the reduced operator to the untouched argument.
        """
        while True:
            if isinstance(term, Reference):
                try:
                    term = self.context[term.name]
                except KeyError:
                    raise UnboundNameError(term.name) from None

            elif isinstance(term, Apply):
                function = self.reduce(term.function)

                if isinstance(function, BuiltinLambda):
                    builtin = function.collect(term.argument)
                    if not builtin.saturated:
                        return builtin  # partial application

                    result = builtin.operation.apply(builtin.args, self.reduce)
                    self._trace("δ", result)
                    return result

                elif isinstance(function, Lambda):
                    term = function.body.sub(function.param, term.argument)
                    self._trace("β", term)

                else:
                    return Apply(function, term.argument)

            else:
                return term  # literals, lambdas and unsaturated builtins

    def _trace(self, step, term):
        if self.tracer is not None:
            self.tracer(step, term)


def evaluate(term, context, tracer=None):
    """Reduces term to weak head normal form under context."""
    return CallByNameReducer(context, tracer).reduce(term)
