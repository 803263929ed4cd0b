"""Lexical analysis for the lcrepl language, a shallow wrapper around pure lambda calculus. Note that this module does
not provide input file parsing, but rather classification of single (already joined) statements.

All grammar can be loosely defined as follows:

```
<import_stmt> ::= "#import " '"' <filepath> '"'  ; imports relative to the working directory ("prelude" denotes
                                                 ; the bundled common/prelude.lc)
<named_func>  ::= <var> ":=" <λ-term>            ; expanded when defined, reduced only when used later on
<exec_stmt>   ::= <λ-term>                       ; will be reduced and outputted when the session is run

<comment>     ::= ";;" <char>*
```

Comments are handled in session.py: there is no dedicated Grammar class for comments.
"""

from abc import abstractmethod, ABC

from lcrepl.lang.error import GenericException
from lcrepl.lang.numerical import cnumberify, numberify
from lcrepl.pure.equivalence import canonical
from lcrepl.pure.lexical import is_name, is_numeral, parse
from lcrepl.pure.reduction import NormalOrderReducer, free_variables, substitute
from lcrepl.pure.term import Abstraction, Application, Variable


def expand(term, namespace):
    """Substitutes every free name of term that is defined in namespace with its term, until none are left."""
    names = free_variables(term) & namespace.keys()
    while names:
        for name in sorted(names):
            term = substitute(name, namespace[name], term)
        names = free_variables(term) & namespace.keys()
    return term


def rsub(term, namespace):
    """Reverse-substitutes names into term: every subterm alpha-equivalent to a named term is replaced with that
    name, outermost first. Names bound to bare variables are ignored. The first name defined wins on ties.

    A subterm under binders is only replaced if none of its free variables (and not the name itself) is bound by an
    enclosing abstraction, so that expanding the result gives back term: after A := x y, λx.x y stays λx.x y.
    """
    names = {}
    for name, named_term in namespace.items():
        if not isinstance(named_term, Variable):
            names.setdefault(canonical(named_term), name)

    def _rsub(node, bound):
        name = names.get(canonical(node))
        if name is not None and name not in bound and not free_variables(node) & bound:
            return Variable(name)
        elif isinstance(node, Abstraction):
            return Abstraction(node.arg, _rsub(node.body, bound | {node.arg}))
        elif isinstance(node, Application):
            return Application(_rsub(node.func, bound), _rsub(node.arg, bound))
        return node

    return _rsub(term, frozenset()) if names else term


class Grammar(ABC):
    """Superclass representing any grammar object in lcrepl language."""

    def __init__(self, expr, original_expr=None):
        """Assumes check_grammar has been run."""
        if original_expr is None:
            original_expr = Grammar.preprocess(expr)

        self.expr = Grammar.preprocess(expr)
        self.original_expr = original_expr  # used for errors messages
        self._cls = type(self).__name__

    @staticmethod
    @abstractmethod
    def check_grammar(expr, original_expr):
        """This method should check expr's top-level grammar and return whether or not it is valid. It should also
        raise a GenericException if expr's top-level grammar is similar to the accepted grammar but syntactically
        invalid. original_expr is used for error messages.
        """

    @staticmethod
    def preprocess(expr):
        """Removes surrounding whitespace."""
        return expr.strip()

    @classmethod
    def infer(cls, expr, original_expr=None):
        """Infers the type of expr and returns an object of the correct statement class."""
        original_expr = original_expr if original_expr else Grammar.preprocess(expr)
        for stmt_cls in STATEMENTS:
            if stmt_cls.check_grammar(expr, original_expr):
                return stmt_cls(expr, original_expr)
        raise GenericException("'{}' is not valid lcrepl grammar", original_expr)

    def __repr__(self):
        return f"{self._cls}('{self.expr}')"

    def __str__(self):
        return self.expr

    def __eq__(self, other):
        return isinstance(other, type(self)) and other.expr == self.expr

    def __hash__(self):
        return hash(self.expr)


class ImportStmt(Grammar):
    """Import statement in lcrepl. See docstrings for grammar."""

    def __init__(self, expr, original_expr=None):
        super().__init__(expr, original_expr)

        __, path = self.expr.split(None, 1)
        self.path = path.strip()[1:-1]  # get rid of surrounding " "

    @staticmethod
    def check_grammar(expr, original_expr):
        expr = Grammar.preprocess(expr)

        if not expr.startswith("#"):
            return False

        try:
            hash_import, path = expr.split(None, 1)
            path = path.strip()

            assert hash_import == "#import"
            assert len(path) > 2 and path.startswith("\"") and path.endswith("\"")

        except (AssertionError, ValueError):
            raise GenericException("'{}': #import expects \"FILENAME\"", original_expr, diagnosis=False)

        return True


class FuncStmt(Grammar):
    """Superclass for function statements (executable or named) in lcrepl."""

    def __init__(self, expr, original_expr=None):
        super().__init__(expr, original_expr)
        self.term = None

    def expand(self, namespace):
        """Expands self.term with namespace, then converts its numerals to Church numerals."""
        return cnumberify(expand(self.term, namespace))


class NamedFunc(FuncStmt):
    """NamedFuncs represent binding statements in lcrepl: <NAME> := <λ-term>."""

    def __init__(self, expr, original_expr=None):
        super().__init__(expr, original_expr)

        name, rval = self.expr.split(":=")
        self.name = name.strip()
        self.term = parse(rval.strip(), self.original_expr)

    @staticmethod
    def check_grammar(expr, original_expr):
        expr = Grammar.preprocess(expr)

        # check 1: is ":=" in expr?
        eq = expr.find(":=")
        if eq == -1:
            return False
        elif eq != expr.rfind(":="):
            start = original_expr.rfind(":=")
            raise GenericException("'{}' contains illegal reserved ':='", original_expr, start=start, end=start + 2)

        lval, rval = expr.split(":=")
        lval = lval.strip()
        end = max(original_expr.find(":="), 1)

        # check 2: is l-value a Variable (and not a number)?
        if is_numeral(lval):
            raise GenericException("l-value of '{}' is a natural number", original_expr, end=end)
        elif not is_name(lval):
            raise GenericException("l-value of '{}' is not a valid variable", original_expr, end=end)

        # check 3: is there an r-value? (its grammar is checked when parsed)
        if not rval.strip():
            raise GenericException("r-value of '{}' is empty", original_expr, start=end)

        return True

    def define(self, namespace):
        """Expands self.term and binds it to self.name in namespace. Raises GenericException if the definition is
        recursive.
        """
        term = self.expand(namespace)
        if self.name in free_variables(term):
            start = self.original_expr.find(":=") + 2
            raise GenericException("'{}': recursive definitions not supported", self.original_expr, start=start)

        namespace[self.name] = term
        return term

    def __repr__(self):
        return f"{self._cls}(name={self.name!r}, term={self.term!r})"


class ExecStmt(FuncStmt):
    """Executable statement: a λ-term that is expanded, beta-reduced and displayed."""

    def __init__(self, expr, original_expr=None):
        super().__init__(expr, original_expr)
        self.term = parse(self.expr, self.original_expr)

    @staticmethod
    def check_grammar(expr, original_expr):
        return bool(Grammar.preprocess(expr))

    def execute(self, error_handler, namespace, limit=NormalOrderReducer.DEFAULT_LIMIT):
        """Running an ExecStmt is equivalent to beta-reducing its expanded term. Returns the reduction result and the
        term to display, with Church numerals turned back into numbers and named terms turned back into names.
        """
        reducer = NormalOrderReducer(self.expand(namespace), limit)
        result = reducer.beta_reduce(error_handler)
        return result, rsub(numberify(result.term), namespace)


STATEMENTS = (ImportStmt, NamedFunc, ExecStmt)
