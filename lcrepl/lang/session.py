"""Session control for lcrepl language. Implementation of lexical parsing to run the lcrepl interpreter, either in
command-line mode or file interpretation mode.
"""

import os

from lcrepl.lang.error import GenericException
from lcrepl.lang.lexical import ExecStmt, Grammar, ImportStmt, NamedFunc, expand
from lcrepl.lang.numerical import cnumberify
from lcrepl.pure.display import display
from lcrepl.pure.equivalence import alpha_equivalent
from lcrepl.pure.lexical import parse
from lcrepl.pure.reduction import NormalOrderReducer

COMMON = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "common")


class Session:
    """Governs a lcrepl session, with control over scope of named funcs."""
    SH_FILE = "<in>"  # command-line interpreter filename
    PRELUDE = "prelude"

    def __init__(self, error_handler, path, cmd_line=False, limit=NormalOrderReducer.DEFAULT_LIMIT, color=False):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode
        self.limit = limit        # step limit for every reduction
        self.color = color        # whether or not results are colorized

        self.namespace = {}  # dict of name: expanded LambdaTerm that exist in the current session
        self.to_exec = {}    # dict of line num: ExecStmts to execute
        self.results = []    # displayed results of executed ExecStmts, oldest first

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            exprs = []
            add_to_prev = False

            try:
                with open(path, "r", encoding="utf-8") as file:
                    for line_num, line in enumerate(file):
                        __, add_to_prev = self.preprocess_line(line, line_num + 1, add_to_prev, exprs)
            except OSError:
                raise GenericException("'{}' could not be opened", path, diagnosis=False)

            for expr in exprs:
                self.add(*expr)

        elif not cmd_line:
            raise GenericException("'<in>' is a reserved filename", diagnosis=False)

    @staticmethod
    def preprocess_line(line, line_num, add_to_prev, exprs=None):
        """Preprocesses a line from a file or command-line. In command-line mode, exprs can be ignored (used to keep
        track of file's exprs), but add_to_prev will indicate whether a line continuation is necessary. Returns
        updated value of line and add_to_prev. Must be called before calling add.
        """
        if ";;" in line:
            line = line[:line.index(";;")]  # get rid of comments

        line = Grammar.preprocess(line)
        if exprs is not None:
            if line and not add_to_prev:
                exprs.append((line, line_num))
            elif add_to_prev and exprs:
                prev_line, prev_num = exprs.pop()
                line = f"{prev_line} {line}".strip()
                exprs.append((line, prev_num))

        return line, line.count("(") > line.count(")")

    def add(self, expr, line_num=0):
        """Adds Grammar object to the current session. Beta-reduction is lazy and is delayed until run is called."""
        self.error_handler.register_line(self.path, expr, line_num)  # in case error is raised

        stmt = Grammar.infer(expr)

        if isinstance(stmt, ImportStmt):
            loaded_module = Session(self.error_handler, self._get_path(stmt.path), limit=self.limit)
            self.namespace = {**loaded_module.namespace, **self.namespace}
            # on import, ExecStmts from the imported module will not be run
            # local namespace also takes precedence over the loaded module's namespace

        elif isinstance(stmt, NamedFunc):
            stmt.define(self.namespace)

        elif isinstance(stmt, ExecStmt):
            self.to_exec[line_num] = stmt

        self.error_handler.remove_line(self.path)  # error was not raised
        return stmt

    def run(self):
        """Runs this session's executable statements by expanding them and then beta-reducing them. Will raise any
        errors that are encountered.
        """
        for line_num, exec_stmt in list(self.to_exec.items()):
            self.error_handler.register_line(self.path, str(exec_stmt), line_num)

            try:
                result, term = exec_stmt.execute(self.error_handler, self.namespace, self.limit)
            finally:
                del self.to_exec[line_num]

            if not result.reduced:
                msg = "'{}' has no β-normal form within {} steps"
                self.error_handler.warn(msg, (str(exec_stmt), str(result.limit)), diagnosis=False)

            self.results.append(display(term, self.color))
            self.error_handler.remove_line(self.path)

    def pop(self):
        """Returns and removes the oldest result."""
        return self.results.pop(0)

    def alpha(self, expr, other_expr):
        """Whether or not the expanded forms of expr and other_expr are alpha-equivalent."""
        terms = [cnumberify(expand(parse(Grammar.preprocess(text)), self.namespace)) for text in (expr, other_expr)]
        return alpha_equivalent(*terms)

    def _get_path(self, path):
        """Returns absolute path of bundled prelude if path is 'prelude', else absolute path of path."""
        if path == Session.PRELUDE:
            return os.path.join(COMMON, "prelude.lc")
        return os.path.abspath(path)
