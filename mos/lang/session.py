"""Session control for the mos language: owns the binding context and executes statements against it, either from a
source file (batch mode) or one line at a time (command-line mode).
"""

from types import MappingProxyType

from mos.lang.error import GenericException, ParseError, RedefinitionError
from mos.lang.parser import parse, parse_statement
from mos.lang.statements import Bind, Program
from mos.pure.builtins import builtin_context
from mos.pure.reducer import CallByNameReducer
from mos.pure.term import Apply


class Session:
    """Governs a mos session. The binding context starts with the builtins and only ever grows."""
    SH_FILE = "<in>"  # command-line interpreter filename

    def __init__(self, error_handler, path=SH_FILE, tracer=None):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path                        # used for error messages
        self.cmd_line = path == Session.SH_FILE  # whether or not in command-line mode

        self.context = builtin_context()
        tracer = tracer or self.error_handler.register_step  # prints steps only when tracing is on
        self.reducer = CallByNameReducer(MappingProxyType(self.context), tracer=tracer)

        self.program = Program()
        self.results = []  # display forms of every Print executed so far

        if self.cmd_line:
            self.error_handler.fatal = False
        else:
            try:
                with open(path, "r", encoding="utf-8") as file:
                    source = file.read()
            except OSError:
                raise GenericException("'{}' could not be opened", path, diagnosis=False)

            self.load(source)

    def load(self, source):
        """Parses source as a whole program, to be executed by run. Nothing is executed if parsing fails."""
        try:
            self.program = parse(source)
        except ParseError as error:
            self.error_handler.register_line(self.path, error.expr, error.line)
            raise

    def execute(self, statement):
        """Executes a single statement. Returns the display form of a Print's result, or None for a Bind."""
        if isinstance(statement, Bind):
            if statement.name in self.context:
                raise RedefinitionError(statement.name)
            self.context[statement.name] = statement.term
            return None

        reduced = self.reducer.reduce(statement.term)
        if isinstance(reduced, Apply):
            self.error_handler.warn("'{}' is stuck: its operator is not a function", str(reduced), diagnosis=False)

        result = str(reduced)
        self.results.append(result)
        return result

    def add(self, line, line_num):
        """Parses and executes one command-line statement. Returns what execute returns."""
        self.error_handler.register_line(self.path, line, line_num)  # in case error is raised

        result = self.execute(parse_statement(line))

        self.error_handler.remove_line(self.path)  # error was not raised
        return result

    def run(self):
        """Runs the loaded program statement by statement, printing results as they come. The first error aborts the
        run.
        """
        for statement in self.program:
            self.error_handler.register_line(self.path, str(statement), statement.line)

            result = self.execute(statement)
            if result is not None:
                print(result)

            self.error_handler.remove_line(self.path)
