"""Handles interactive/command-line mode for lcrepl interpreter. Uses cmd as backend (and readline, if available, for
line editing and history).

Lines starting with ':' are shell commands (':help', ':limit 500', ...). Every other line is a lcrepl statement.
"""

import cmd

from termcolor import colored

from lcrepl.lang.error import GenericException
from lcrepl.pure.display import display


class Shell(cmd.Cmd):
    """Lambda calculus interpreter shell."""
    intro = "Lambda calculus interpreter :: normal-order reduction\nType ':help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations
    COMMAND = ":"

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""
        self.line_num = 0

    def onecmd(self, line):
        """Dispatches ':'-prefixed lines to do_* methods and everything else to default."""
        stripped = line.strip()
        if stripped == "EOF":
            return self.do_EOF("")
        elif self._tmp_line or not stripped.startswith(Shell.COMMAND):
            return self.default(line) if stripped or self._tmp_line else self.emptyline()

        command, arg, __ = self.parseline(stripped[len(Shell.COMMAND):])
        if not command:
            return self.do_help("")
        elif not hasattr(self, "do_" + command):
            with self.sess.error_handler:
                raise GenericException("unknown command ':{}'", command, diagnosis=False)
            return False
        return getattr(self, "do_" + command)(arg)

    def default(self, line):
        """Executes arbitrary lcrepl statement."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            line, add_to_prev = self.sess.preprocess_line(f"{self._tmp_line} {line}", self.line_num, False)

            if add_to_prev:
                self._tmp_line = line
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            if not line:
                return  # if line is empty (or only a comment), terminate

            self.sess.add(line, self.line_num)
            self.sess.run()

            while self.sess.results:
                print(self.sess.pop())

    def do_help(self, arg):
        """Prints a short intro, or the docs of a command: ':help limit'."""
        if arg:
            return super().do_help(arg)

        print("Welcome to the lcrepl interpreter!\n\n"
              "Lambda calculus is a Turing-complete language created by Alonzo Church. This \n"
              "interpreter reduces pure lambda calculus terms in normal order, and supports \n"
              "named terms, natural numbers and #import statements.\n\n"
              "Try it out by typing 'I := λx.x' (or 'I := \\x.x'). This will bind the lambda \n"
              "term 'λx.x' to a name 'I'. Next, try typing 'I y'. This will apply 'I' to 'y', \n"
              "giving 'y' as the result. '#import \"prelude\"' loads common definitions.\n\n"
              "Commands: :help [COMMAND], :limit [N], :trace [on|off], :env, :alpha M ; N, :exit")

    def do_limit(self, arg):
        """Shows or sets the reduction step limit: ':limit', ':limit 500'."""
        with self.sess.error_handler:
            if arg:
                if not arg.strip().isdigit() or int(arg) < 1:
                    raise GenericException("step limit must be a positive integer, got '{}'", arg.strip())
                self.sess.limit = int(arg)
            print(f"step limit: {self.sess.limit}")

    def do_trace(self, arg):
        """Turns printing of every reduction step on or off: ':trace on', ':trace off', ':trace' toggles."""
        with self.sess.error_handler:
            arg = arg.strip().lower()
            if arg not in ("", "on", "off"):
                raise GenericException("':trace' expects 'on' or 'off', got '{}'", arg)

            error_handler = self.sess.error_handler
            error_handler.trace = not error_handler.trace if not arg else arg == "on"
            print(f"trace: {'on' if error_handler.trace else 'off'}")

    def do_env(self, arg):
        """Lists named terms defined in this session."""
        for name, term in self.sess.namespace.items():
            print(colored(name, attrs=["bold"]) + " := " + display(term, self.sess.color))

    def do_alpha(self, arg):
        """Checks whether two terms are alpha-equivalent: ':alpha λx.x ; λy.y'."""
        with self.sess.error_handler:
            if arg.count(";") != 1:
                raise GenericException("':alpha' expects two terms separated by ';'", arg, diagnosis=False)

            expr, other_expr = arg.split(";")
            equivalent = self.sess.alpha(expr, other_expr)
            print(colored("α-equivalent", "green") if equivalent else colored("not α-equivalent", "red"))

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return False

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
