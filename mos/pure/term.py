r"""Terms of the mos language: the expression tree that the parser produces and the reducer rewrites.

```
<term> ::= <literal>                   ; Integer, Boolean or Bytes
         | <name>                      ; "reference", resolved through the binding context when reduced
         | "\" <name> "->" <term>      ; "lambda", exactly one parameter
         | <term> <term>               ; "apply", written (f a b) and associating by left: ((f a) b)
         | <builtin>                   ; native operation plus the arguments collected so far
```

Terms are immutable: substitution and reduction always build new terms, so a bound term can be shared by the binding
context and any number of reductions without copying.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from mos.lang.error import DisplayError


def fresh_name(name, avoid):
    """Returns the first of name_1, name_2, ... that is not in avoid. A trailing prime is dropped so that the result is
    still a valid identifier.
    """
    base = name.rstrip("'")
    suffix = 1
    while f"{base}_{suffix}" in avoid:
        suffix += 1
    return f"{base}_{suffix}"


class Term(ABC):
    """Superclass of every node in a mos expression tree."""

    @abstractmethod
    def free_names(self):
        """Returns the frozenset of names referenced in this term that no enclosing Lambda binds."""

    @abstractmethod
    def sub(self, name, value):
        """Returns this term with value substituted for every free occurrence of name. Bound variables are renamed
        where value would otherwise be captured.
        """

    @abstractmethod
    def __str__(self):
        """Canonical display form. Parsing it back gives an equal term (builtins excepted)."""


class Literal(Term):
    """Integer, Boolean or Bytes constant. Literals have no names in them."""

    def free_names(self):
        return frozenset()

    def sub(self, name, value):
        return self


@dataclass(frozen=True)
class Integer(Literal):
    value: int

    def __str__(self):
        return str(self.value)


@dataclass(frozen=True)
class Boolean(Literal):
    value: bool

    def __str__(self):
        return "True" if self.value else "False"


@dataclass(frozen=True)
class Bytes(Literal):
    value: bytes

    def __str__(self):
        try:
            return '"' + self.value.decode("utf-8") + '"'
        except UnicodeDecodeError:
            raise DisplayError(repr(self.value)) from None


@dataclass(frozen=True)
class Reference(Term):
    name: str

    def free_names(self):
        return frozenset([self.name])

    def sub(self, name, value):
        return value if name == self.name else self

    def __str__(self):
        return self.name


@dataclass(frozen=True)
class Lambda(Term):
    param: str
    body: Term

    def free_names(self):
        return self.body.free_names() - {self.param}

    def sub(self, name, value):
        if name == self.param or name not in self.body.free_names():
            return self  # name is shadowed by param, or simply absent

        param, body = self.param, self.body
        value_names = value.free_names()
        if param in value_names:
            param = fresh_name(param, value_names | body.free_names() | {name})
            body = body.sub(self.param, Reference(param))

        return Lambda(param, body.sub(name, value))

    def __str__(self):
        return f"\\{self.param} -> {self.body}"


@dataclass(frozen=True)
class Apply(Term):
    function: Term
    argument: Term

    def spine(self):
        """Returns the operator chain of this application flattened left to right: ((f a) b) gives [f, a, b]."""
        terms = [self.argument]
        function = self.function
        while isinstance(function, Apply):
            terms.append(function.argument)
            function = function.function
        terms.append(function)
        return terms[::-1]

    def free_names(self):
        return self.function.free_names() | self.argument.free_names()

    def sub(self, name, value):
        return Apply(self.function.sub(name, value), self.argument.sub(name, value))

    def __str__(self):
        return "(" + " ".join(str(term) for term in self.spine()) + ")"


@dataclass(frozen=True)
class BuiltinLambda(Term):
    """A native operation and the (unevaluated) arguments collected for it so far. Two builtins are equal iff they
    are the same operation with pointwise equal collected arguments.
    """
    operation: Enum
    args: Tuple[Term, ...] = ()

    @property
    def arity(self):
        return self.operation.arity

    @property
    def saturated(self):
        return len(self.args) == self.arity

    def collect(self, arg):
        """Returns a new builtin with arg appended to the collected arguments."""
        return BuiltinLambda(self.operation, self.args + (arg,))

    def free_names(self):
        return frozenset().union(*(arg.free_names() for arg in self.args))

    def sub(self, name, value):
        if not self.args:
            return self
        return BuiltinLambda(self.operation, tuple(arg.sub(name, value) for arg in self.args))

    def __str__(self):
        if not self.args:
            return self.operation.symbol
        return f"({self.operation.symbol} {' '.join(str(arg) for arg in self.args)})"
