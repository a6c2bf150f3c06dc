import unittest

from mos.lang.error import ParseError
from mos.lang.parser import parse, parse_statement
from mos.lang.statements import Bind, Print, Program
from mos.pure.term import Apply, Boolean, Bytes, Integer, Lambda, Reference


x, y, f = Reference("x"), Reference("y"), Reference("f")


class TermTestCase(unittest.TestCase):

    def test_literals(self):
        cases = {
            "1": Integer(1),
            "-42": Integer(-42),
            "0": Integer(0),
            "340282366920938463463374607431768211456": Integer(2 ** 128),
            "True": Boolean(True),
            "False": Boolean(False),
            '"hello"': Bytes(b"hello"),
            '""': Bytes(b""),
            '"a \\n b"': Bytes(b"a \\n b"),  # no escape processing
            '"λ"': Bytes("λ".encode("utf-8")),
        }
        for case, expected in cases.items():
            self.assertEqual(Print(expected), parse_statement(case), case)

    def test_identifiers(self):
        should_pass = ["x", "foo", "x1", "snake_case", "x'", "f_1'", "Trueish", "False2", "True'"]
        for case in should_pass:
            self.assertEqual(Print(Reference(case)), parse_statement(case), case)

        should_fail = ["_x", "x''", "1x", "x'y", "-"]
        for case in should_fail:
            self.assertRaises(ParseError, parse_statement, case)

    def test_applications(self):
        cases = {
            "(f)": f,
            "(f x)": Apply(f, x),
            "(f x y)": Apply(Apply(f, x), y),
            "( f  x\n\ty )": Apply(Apply(f, x), y),
            "(f (x y))": Apply(f, Apply(x, y)),
            "((f x) y)": Apply(Apply(f, x), y),
            "(((f)))": f,
            "(f -1)": Apply(f, Integer(-1)),
        }
        for case, expected in cases.items():
            self.assertEqual(Print(expected), parse_statement(case), case)

    def test_lambdas(self):
        cases = {
            "\\x -> x": Lambda("x", x),
            "\\ x->x": Lambda("x", x),
            "\\x -> \\y -> (x y)": Lambda("x", Lambda("y", Apply(x, y))),
            "(\\x -> x y)": Apply(Lambda("x", x), y),
            "((\\x -> x) y)": Apply(Lambda("x", x), y),
            "(f \\x -> x)": Apply(f, Lambda("x", x)),
            "(f \\x -> x y)": Apply(Apply(f, Lambda("x", x)), y),
            "\\x' -> x'": Lambda("x'", Reference("x'")),
        }
        for case, expected in cases.items():
            self.assertEqual(Print(expected), parse_statement(case), case)

    def test_invalid(self):
        should_fail = [
            "", "   ", "()", "(f x", "f x)", ")", '"abc', "\\x x", "\\ -> x", "\\True -> x", "12ab", "Truex = 1 2",
            "x = ", "= 1", "True = 1", "x = 1; y = 2", "(f x) ;;", "1 2",
        ]
        for case in should_fail:
            self.assertRaises(ParseError, parse_statement, case)


class StatementTestCase(unittest.TestCase):

    def test_statements(self):
        cases = {
            "x = 1": Bind("x", Integer(1)),
            "x=1;": Bind("x", Integer(1)),
            "  id = \\x -> x ;  ": Bind("id", Lambda("x", x)),
            "x": Print(x),
            "(f x);": Print(Apply(f, x)),
        }
        for case, expected in cases.items():
            self.assertEqual(expected, parse_statement(case), case)

    def test_program(self):
        source = 'x = 1;\ny = "two"\n\n(f x y);\n\\x -> x'
        expected = Program((
            Bind("x", Integer(1)),
            Bind("y", Bytes(b"two")),
            Print(Apply(Apply(f, x), y)),
            Print(Lambda("x", x)),
        ))

        program = parse(source)
        self.assertEqual(expected, program)
        self.assertEqual([1, 2, 4, 5], [statement.line for statement in program])

    def test_program_without_separators(self):
        self.assertEqual(Program((Bind("x", Integer(1)), Bind("y", Integer(2)), Print(x))), parse("x = 1 y = 2 x"))

    def test_empty_program(self):
        for case in ["", " \n\t "]:
            self.assertEqual(Program(), parse(case), repr(case))

    def test_trailing_garbage(self):
        should_fail = ["x = 1;\n)", "(f x))", "x = 1;;", '"unterminated']
        for case in should_fail:
            self.assertRaises(ParseError, parse, case)


class ErrorTestCase(unittest.TestCase):

    def test_context_trail(self):
        cases = {
            "x = \\1 -> x": ("Program", "Statement", "Bind-statement", "Lambda", "Identifier"),
            "(f x": ("Program", "Statement", "Print-statement", "Application"),
            "(f )x)": ("Program", "Statement", "Print-statement", "Reference"),
            '(f "abc)': ("Program", "Statement", "Print-statement", "Application", "Reference", "Bytes"),
        }
        for case, contexts in cases.items():
            with self.assertRaises(ParseError) as raised:
                parse(case)
            self.assertEqual(contexts, raised.exception.contexts, case)

    def test_location(self):
        with self.assertRaises(ParseError) as raised:
            parse("x = 1\ny = (add 1 ]\nz = 3")

        error = raised.exception
        self.assertEqual((2, 12), (error.line, error.column))
        self.assertEqual("y = (add 1 ]", error.expr)
        self.assertEqual((11, 12), (error.start, error.end))
        self.assertIn("line 2, column 12", str(error))

    def test_span(self):
        with self.assertRaises(ParseError) as raised:
            parse_statement("(add 12ab 1)")
        self.assertEqual((5, 9), (raised.exception.start, raised.exception.end))


class RoundTripTestCase(unittest.TestCase):

    def test_round_trip(self):
        sources = [
            "x = 1; y = -2; z = True; w = \"some bytes\";",
            "id = \\x -> x\n(id 5)",
            "k = \\x -> \\y -> x; ((k 1) 2); (k (k 1) 2)",
            "((\\x -> (add x x)) 5)",
            "(f \\x -> x y) (\\x -> \\y -> (x y) z) \\f -> (f (f x))",
            "fact = \\n -> (if (eq n 0) 1 (mul n (fact (add n -1)))); (fact 5)",
            "x' = \"\"; (eq x' \"\")",
        ]
        for source in sources:
            program = parse(source)
            self.assertEqual(program, parse(str(program)), source)
            self.assertEqual(str(program), str(parse(str(program))), source)


if __name__ == '__main__':
    unittest.main()
