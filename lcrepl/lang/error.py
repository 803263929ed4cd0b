"""Error reporting for lcrepl. The parser and the language layer only ever raise GenericException; anything else that
reaches an ErrorHandler is reported as an internal error.

Reports look like this (the offending span underlined in red for errors, magenta for warnings):

```
prog.lc:3: error: 'λx.' contains an illegal abstraction body
  λx.
    ^
```
"""

import sys

from termcolor import colored

from lcrepl.pure.display import display


class GenericException(Exception):
    """An lcrepl error or warning. msg is a str.format template filled with exprs; exprs[0] is the offending source
    text, and [start, end) the span of it to underline. diagnosis=False suppresses the underline, internal=True marks
    errors that are lcrepl's fault rather than the user's.
    """

    def __init__(self, msg, exprs=None, start=0, end=-1, diagnosis=True, internal=False):
        if exprs is None:
            exprs = ()
        elif isinstance(exprs, str):
            exprs = (exprs,)
        self.exprs = tuple(str(expr) for expr in exprs)

        self.plain = msg.format(*self.exprs)
        self.msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in self.exprs))

        self.expr = self.exprs[0] if self.exprs else ""
        self.start = start
        self.end = len(self.expr) if end == -1 else end

        self.diagnosis = diagnosis
        self.internal = internal

        super().__init__(self.plain)

    @property
    def underlined(self):
        """Whether or not a report of this error should show the offending span."""
        return self.diagnosis and not self.internal and bool(self.expr)


class ErrorHandler:
    """Context manager that reports GenericExceptions (and turns stray Python errors into reports). When fatal, any
    error exits with status 1; otherwise it is printed and execution carries on after the with block.

    traceback maps every file being run to the (line, line number) currently executing in it, so that errors raised
    from inside an #import point at both the import and the offending line.
    """
    ERROR = "red"
    WARNING = "magenta"
    TRACE = "cyan"

    # Python errors that are reported as user errors rather than internal ones
    EXPECTED = {
        KeyboardInterrupt: "keyboard interrupt",
        RecursionError: "term is nested too deeply, maximum recursion depth exceeded",
    }

    def __init__(self, fatal=True, trace=False):
        self.fatal = fatal
        self.trace = trace
        self.traceback = {}

    def register_file(self, path):
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Marks line as the one being run in path. Call before Session add/run."""
        self.traceback[path] = (line, line_num)

    def remove_line(self, path):
        """Call after a successful Session add/run."""
        self.traceback[path] = (None, None)

    def register_step(self, symbol, term):
        """Prints a reduction step if tracing is on."""
        if self.trace:
            print(colored(f"  {symbol}> ", ErrorHandler.TRACE, attrs=["dark"]) + display(term))

    @staticmethod
    def diagnose(error, warning=False):
        """Returns error.expr on one line and a ^~~ marker under its offending span on the next."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR
        start = error.start
        end = max(error.end, start + 1)

        before, span, after = error.expr[:start], error.expr[start:end], error.expr[end:]
        marker = "^" + "~" * (end - start - 1)

        return (f"  {before}{colored(span, color, attrs=['bold'])}{after}\n"
                f"  {' ' * start}{colored(marker, color, attrs=['bold'])}")

    def _active_lines(self):
        """(file, line, line_num) of every file with a registered line, outermost first."""
        return [(file, line, line_num) for file, (line, line_num) in self.traceback.items() if line is not None]

    def _location(self):
        """'file:line_num: ' of the innermost registered line, or ''."""
        active = self._active_lines()
        if not active:
            return ""
        file, __, line_num = active[-1]
        return f"{file}:{line_num}: "

    def _report(self, error, warning=False):
        """Prints error: a location (or a traceback for nested files), the message and the underlined span."""
        active = self._active_lines()
        if len(active) > 1:
            header = "Traceback:\n" + "".join(f"  File '{file}', line {line_num}:\n    {line}\n"
                                              for file, line, line_num in active)
        else:
            header = colored(self._location(), attrs=["bold"])

        if error.internal:
            header += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        label = colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) if warning else \
            colored("error: ", ErrorHandler.ERROR, attrs=["bold"])
        print(header + label + error.msg)

        if error.underlined:
            print(ErrorHandler.diagnose(error, warning))

    def warn(self, *args, **kwargs):
        """Prints a warning built from GenericException(*args, **kwargs). Execution is not interrupted."""
        self._report(GenericException(*args, **kwargs), warning=True)

    def throw(self, error):
        """Prints error, then exits if fatal. Otherwise the registered lines are forgotten, since they never
        completed.
        """
        self._report(error)

        if self.fatal:
            sys.exit(1)
        self.traceback = dict.fromkeys(self.traceback, (None, None))

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            return False
        elif exc_type is SystemExit:
            return False
        elif issubclass(exc_type, GenericException):
            self.throw(exc_val)
        elif exc_type in ErrorHandler.EXPECTED:
            self.throw(GenericException(ErrorHandler.EXPECTED[exc_type]))
        else:
            # an unknown error is always a bug: report it, then let it propagate
            self.throw(GenericException("unknown error: '{}'", f"{exc_type.__name__}: {exc_val}", internal=True))
            return False
        return True
