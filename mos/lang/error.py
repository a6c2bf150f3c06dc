"""Error handling for the mos language. Only GenericExceptions should be encountered during running: if another type of
error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Parse errors and evaluation faults are disjoint branches of GenericException. Both abort the statement (or program) in
progress; whether that also ends the process is up to the ErrorHandler's fatal flag.
"""

import sys

from termcolor import colored


class GenericException(Exception):
    """Templates an error/warning message so that it can be used to throw a mos error/warning."""

    def __init__(self, msg, exprs=None, start=0, end=-1, diagnosis=True, internal=False):
        """Parses args for GenericException or warning."""
        if exprs is None:
            exprs = ""
        if not isinstance(exprs, (list, tuple)):
            exprs = [exprs]
        exprs = [str(expr) for expr in exprs]

        self.msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in exprs))  # color expr snippets
        self.plain_msg = msg.format(*exprs)
        self.expr = exprs[0]  # exprs[0] should be the offending expr that caused the error
        self.end = end if end != -1 else len(self.expr)  # needed for error display

        self.start = start
        self.diagnosis = diagnosis
        self.internal = internal

        super().__init__(self.plain_msg)


class ParseError(GenericException):
    """Source text does not match the grammar. contexts is the trail of grammar rules (outermost first) that were being
    parsed when the failure happened; line and column are 1-based and point at the failing span.
    """

    def __init__(self, msg, source_line, line, column, end_column=None, contexts=()):
        self.line = line
        self.column = column
        self.contexts = tuple(contexts)

        start = column - 1
        end = (end_column if end_column is not None else column) - 1
        msg = msg.replace("{", "{{").replace("}", "}}")  # msg is already rendered, source_line is only diagnosed
        super().__init__(msg, source_line, start=start, end=max(end, start + 1))

        where = f"line {line}, column {column}"
        if self.contexts:
            where = f"in {' → '.join(self.contexts)}, {where}"
        self.msg += f" ({where})"
        self.plain_msg += f" ({where})"
        self.args = (self.plain_msg,)


class EvaluationError(GenericException):
    """Any fault raised while executing a statement."""


class UnboundNameError(EvaluationError):

    def __init__(self, name):
        self.name = name
        super().__init__("'{}' is not bound in this context", name, diagnosis=False)


class RedefinitionError(EvaluationError):

    def __init__(self, name):
        self.name = name
        super().__init__("cannot redefine '{}'", name, diagnosis=False)


class BuiltinTypeError(EvaluationError):

    def __init__(self, builtin, expected, got):
        super().__init__("'{}' expects " + expected + ", got '{}'", (builtin, got), diagnosis=False)


class ArithmeticFault(EvaluationError):

    def __init__(self, builtin, expr):
        super().__init__("'{}' faulted: division by zero in '{}'", (builtin, expr), diagnosis=False)


class DisplayError(EvaluationError):

    def __init__(self, expr):
        super().__init__("cannot display '{}': bytes are not valid UTF-8", expr, diagnosis=False)


class ErrorHandler:
    """Context manager that will silently suppress Python errors and raise custom mos errors/warnings."""
    ERROR = "red"
    WARNING = "magenta"
    TRACE = "dark_grey"

    def __init__(self, fatal=True, trace=False):
        self.fatal = fatal
        self.trace = trace
        self.traceback = {}

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Registers line in traceback given path. Should be called prior to Session add/run."""
        self.traceback[path] = (line, line_num)

    def remove_line(self, path):
        """Removes line from traceback given path. Should be called after successful Session add/run."""
        self.traceback[path] = (None, None)

    def register_step(self, step, term):
        """Reducer tracer: prints a single reduction step if tracing is enabled."""
        if self.trace:
            print(colored(f"  {step} {term}", ErrorHandler.TRACE), file=sys.stderr)

    @staticmethod
    def diagnose(error, warning=False):
        """Returns offending part of error.expr highlighted and bolded."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR

        diagnosis = "  " + error.expr[:error.start]

        end = max(error.end, error.start + 1)
        diagnosis += colored(error.expr[error.start:end], color, attrs=["bold"])
        diagnosis += error.expr[end:] + "\n"

        diagnosis += "  " + " " * error.start
        diagnosis += colored("^" + "~" * (end - error.start - 1), color, attrs=["bold"])

        return diagnosis

    def warn(self, *args, **kwargs):
        """Generates and prints runtime warning message based on args."""
        error = GenericException(*args, **kwargs)

        error_msg = colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + error.msg
        print(error_msg, file=sys.stderr)

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error, warning=True), file=sys.stderr)

    def throw(self, error):
        """Throws error using error and self.traceback. error must be a GenericException, and self.traceback must be a
        dict of file: (line, line_num) representing origination of error.
        """
        error_msg = ""
        for file, (line, line_num) in self.traceback.items():  # assumes dict is insertion-ordered
            if line:
                error_msg += f"  File '{file}', line {line_num}:\n"
                error_msg += f"    {line}\n"

        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        print(error_msg, file=sys.stderr)

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error), file=sys.stderr)

        if self.fatal:
            sys.exit(1)
        for path in self.traceback:  # if error occurred, reset traceback (no need if error is fatal)
            self.traceback[path] = (None, None)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is None:
            return False
        elif issubclass(exc_type, KeyboardInterrupt):
            self.throw(GenericException("keyboard interrupt"))
        elif issubclass(exc_type, SystemExit):
            do_exit = True
        elif issubclass(exc_type, RecursionError):
            self.throw(EvaluationError("maximum recursion depth exceeded while reducing"))
        elif issubclass(exc_type, GenericException):
            self.throw(exc_val)
        else:
            self.throw(GenericException("unknown error: '{}'", f"{exc_type.__name__}: {exc_val}", internal=True))
            do_exit = True

        return not do_exit
