"""Statements of the mos language and the Program that orders them.

```
<bind_stmt>  ::= <name> "=" <term> [";"]   ; adds name to the binding context, never rebinds
<print_stmt> ::= <term> [";"]              ; reduces term and outputs it
```
"""

from dataclasses import dataclass, field
from typing import Tuple

from mos.pure.term import Term


class Statement:
    """Superclass for Bind and Print. line is the 1-based source line the statement starts on (not compared)."""


@dataclass(frozen=True)
class Bind(Statement):
    name: str
    term: Term
    line: int = field(default=0, compare=False)

    def __str__(self):
        return f"{self.name} = {self.term};"


@dataclass(frozen=True)
class Print(Statement):
    term: Term
    line: int = field(default=0, compare=False)

    def __str__(self):
        return f"{self.term};"


@dataclass(frozen=True)
class Program:
    statements: Tuple[Statement, ...] = ()

    def __iter__(self):
        return iter(self.statements)

    def __len__(self):
        return len(self.statements)

    def __str__(self):
        return "".join(f"{statement}\n" for statement in self.statements)
