"""Handles interactive/command-line mode for the mos interpreter. Uses cmd as backend and readline (where available)
for line editing and history.
"""

import cmd
import os
import re

from termcolor import colored

from mos.lang.error import ParseError

try:
    import readline
except ImportError:  # e.g. Windows without pyreadline: no line editing, no history
    readline = None


BYTES = re.compile(r'"[^"]*"')


class Shell(cmd.Cmd):
    """mos interpreter shell. history_path is where line history is loaded from and saved to (None disables it)."""
    intro = "mos interpreter :: Python backend\nType '?' or 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, history_path=None, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess
        self.history_path = history_path

        self._tmp_line = ""
        self.line_num = 0

    @staticmethod
    def is_open(line):
        """Whether line has more '(' than ')' outside of byte strings, i.e. needs a continuation."""
        line = BYTES.sub("", line)
        return line.count("(") > line.count(")")

    def default(self, line):
        """Executes arbitrary mos statement."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            line = self._tmp_line + line

            if Shell.is_open(line):
                self._tmp_line = line + "\n"
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            try:
                result = self.sess.add(line, self.line_num)
            except ParseError:
                Shell.forget(line)
                raise
            if result is not None:
                print(colored(result, "green"))

    def cmdloop(self, intro=None):
        """Runs the shell, with history loaded before and saved after (even if interrupted)."""
        self.load_history()
        try:
            super().cmdloop(intro)
        finally:
            self.save_history()

    def load_history(self):
        if readline is not None and self.history_path and os.path.exists(self.history_path):
            readline.read_history_file(self.history_path)

    def save_history(self):
        if readline is not None and self.history_path:
            readline.write_history_file(self.history_path)

    @staticmethod
    def forget(line):
        """Drops the physical lines of line from the end of history, so that statements which do not parse are not
        recalled. Entries that do not match (e.g. line did not come from readline) are left alone.
        """
        if readline is None:
            return
        for physical in reversed(line.split("\n")):
            length = readline.get_current_history_length()
            if length == 0 or readline.get_history_item(length) != physical:
                return
            readline.remove_history_item(length - 1)

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        if arg:
            return self.default(self.lastcmd)  # e.g. 'help = 1' binds help

        print("Welcome to the mos interpreter!\n\n"
              "Statements are either bindings, 'name = term', or terms to print. Terms are \n"
              "integers, True/False, \"byte strings\", names, lambdas '\\x -> body' and \n"
              "applications '(f a b)'. Builtins: add mul div rem eq if.\n\n"
              "Try it out by typing 'double = \\x -> (add x x)'. This binds a lambda to the \n"
              "name 'double'. Next, try typing '(double 21)', which prints 42.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        if arg:
            return self.default(self.lastcmd)  # e.g. 'exit = 1' binds exit
        return True
