r"""Recursive-descent parser for the mos language. Whitespace (spaces, tabs, newlines) is insignificant between tokens.

```
<program>     ::= <statement>* EOF
<statement>   ::= <bind> | <print>
<bind>        ::= <identifier> "=" <lambda> [";"]
<print>       ::= <lambda> [";"]
<lambda>      ::= "\" <identifier> "->" <lambda> | <application>
<application> ::= "(" <lambda>+ ")" | <reference>    ; (f a b) = ((f a) b), a single element is just itself
<reference>   ::= <literal> | <identifier>
<literal>     ::= "True" | "False" | '"' <any char but '"'>* '"' | ["-"] <digit>+
<identifier>  ::= <alpha> (<alnum> | "_")* ["'"]
```

A lambda body extends over exactly one application or reference: `(\x -> x 5)` applies `\x -> x` to 5, while
`\x -> (x 5)` is a lambda whose body is an application. This is also how terms are displayed, so displaying a parsed
program and parsing it again gives the same program.

Parse errors carry the trail of grammar rules being parsed (e.g. Program → Statement → Bind-statement → Identifier)
plus the line and column of the failing span.
"""

from contextlib import contextmanager
from functools import reduce
import re

from mos.lang.error import ParseError
from mos.lang.statements import Bind, Print, Program
from mos.pure.term import Apply, Boolean, Bytes, Integer, Lambda, Reference


IDENTIFIER = re.compile(r"[A-Za-z][A-Za-z0-9_]*'?")
INTEGER = re.compile(r"-?[0-9]+")
BYTES = re.compile(r'"([^"]*)"')
IDENTIFIER_CHAR = re.compile(r"[A-Za-z0-9_']")

KEYWORDS = {"True": Boolean(True), "False": Boolean(False)}
WHITESPACE = " \t\r\n"


class Parser:
    """Parses a single source string. Use parse or parse_statement rather than instantiating directly."""

    def __init__(self, source):
        self.source = source
        self.pos = 0
        self.contexts = []

    # top level

    def program(self):
        """<program>: every statement up to the end of the source."""
        statements = []
        with self.context("Program"):
            self.skip_ws()
            while not self.at_end():
                statements.append(self.statement())
                self.skip_ws()
        return Program(tuple(statements))

    def single_statement(self):
        """Exactly one statement that must span the whole source (used for interactive lines)."""
        self.skip_ws()
        if self.at_end():
            self.fail("expected a statement, found end of input")

        statement = self.statement()

        self.skip_ws()
        if not self.at_end():
            self.fail(f"unexpected {self.found()} after statement", end=len(self.source))
        return statement

    # grammar rules

    def statement(self):
        with self.context("Statement"):
            line = self.line_of(self.pos)
            if self.at_bind():
                statement = self.bind(line)
            else:
                statement = self.print_(line)

            self.skip_ws()
            if self.peek() == ";":
                self.pos += 1
        return statement

    def bind(self, line):
        with self.context("Bind-statement"):
            name = self.identifier()
            self.skip_ws()
            self.expect("=")
            return Bind(name, self.lambda_(), line)

    def print_(self, line):
        with self.context("Print-statement"):
            return Print(self.lambda_(), line)

    def lambda_(self):
        self.skip_ws()
        if self.peek() != "\\":
            return self.application()

        with self.context("Lambda"):
            self.pos += 1
            self.skip_ws()
            param = self.identifier()
            self.skip_ws()
            self.expect("->")
            return Lambda(param, self.lambda_())

    def application(self):
        if self.peek() != "(":
            return self.reference()

        with self.context("Application"):
            open_pos = self.pos
            self.pos += 1

            terms = []
            while True:
                self.skip_ws()
                if self.at_end():
                    self.fail("unclosed '('", start=open_pos)
                elif self.peek() == ")":
                    break
                terms.append(self.lambda_())

            if not terms:
                self.fail("application '()' is empty", start=open_pos, end=self.pos + 1)
            self.pos += 1

        return reduce(Apply, terms)

    def reference(self):
        with self.context("Reference"):
            char = self.peek()

            if char == '"':
                return self.bytes_()

            match = INTEGER.match(self.source, self.pos)
            if match:
                self.check_boundary(match, "integer")
                self.pos = match.end()
                return Integer(int(match.group()))

            match = IDENTIFIER.match(self.source, self.pos)
            if match:
                self.pos = match.end()
                name = match.group()
                return KEYWORDS[name] if name in KEYWORDS else Reference(name)

            self.fail(f"expected a term, found {self.found()}")

    def bytes_(self):
        with self.context("Bytes"):
            match = BYTES.match(self.source, self.pos)
            if not match:
                self.fail("unterminated byte string", end=len(self.source))
            self.pos = match.end()
            return Bytes(match.group(1).encode("utf-8"))

    def identifier(self):
        with self.context("Identifier"):
            match = IDENTIFIER.match(self.source, self.pos)
            if not match:
                self.fail(f"expected an identifier, found {self.found()}")
            elif match.group() in KEYWORDS:
                self.fail(f"'{match.group()}' is a literal, not an identifier", end=match.end())

            self.pos = match.end()
            return match.group()

    # helpers

    def at_bind(self):
        """Whether the input at self.pos reads `<identifier> =`, without consuming anything."""
        match = IDENTIFIER.match(self.source, self.pos)
        if not match or match.group() in KEYWORDS:
            return False

        pos = match.end()
        while pos < len(self.source) and self.source[pos] in WHITESPACE:
            pos += 1
        return self.source.startswith("=", pos)

    def check_boundary(self, match, what):
        """Literals may not run straight into an identifier: `12ab` is neither a number nor a name."""
        if IDENTIFIER_CHAR.match(self.source, match.end()):
            end = match.end()
            while IDENTIFIER_CHAR.match(self.source, end):
                end += 1
            self.fail(f"malformed {what} '{self.source[match.start():end]}'", start=match.start(), end=end)

    def expect(self, token):
        if not self.source.startswith(token, self.pos):
            self.fail(f"expected '{token}', found {self.found()}")
        self.pos += len(token)

    def skip_ws(self):
        while self.pos < len(self.source) and self.source[self.pos] in WHITESPACE:
            self.pos += 1

    def peek(self):
        return self.source[self.pos:self.pos + 1]

    def at_end(self):
        return self.pos >= len(self.source)

    def found(self):
        return f"'{self.peek()}'" if not self.at_end() else "end of input"

    def line_of(self, pos):
        return self.source.count("\n", 0, pos) + 1

    @contextmanager
    def context(self, name):
        """Names the grammar rule being parsed, for error trails."""
        self.contexts.append(name)
        try:
            yield
        finally:
            self.contexts.pop()

    def fail(self, msg, start=None, end=None):
        """Raises a ParseError for the span [start, end) (defaults to the current character)."""
        start = self.pos if start is None else start
        end = start + 1 if end is None else end

        line_start = self.source.rfind("\n", 0, start) + 1
        line_end = self.source.find("\n", start)
        if line_end == -1:
            line_end = len(self.source)

        column = start - line_start + 1
        end_column = min(end, max(line_end, start + 1)) - line_start + 1
        raise ParseError(msg, self.source[line_start:line_end], self.line_of(start), column, end_column, self.contexts)


def parse(source):
    """Parses a whole program. Raises ParseError if any of source is not valid mos."""
    return Parser(source).program()


def parse_statement(source):
    """Parses source as a single statement, which must consume all of it."""
    return Parser(source).single_statement()
