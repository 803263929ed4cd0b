"""Normal-order β-reduction of λ-terms with capture-avoiding substitution.

Every function here is a pure function of its arguments: terms are never modified, and there is no global state. The
substitution cluster is the classic one:

```
(λx.M) N  →β  M[x := N]
```

where M[x := N] replaces the free occurrences of x in M by N, renaming the binders of M that would otherwise capture a
free variable of N. Reduction is leftmost-outermost (normal order) and also reduces under abstractions, so a term that
has a β-normal form always reaches it given enough steps.

Sources: http://pages.cs.wisc.edu/~horwitz/CS704-NOTES/1.LAMBDA-CALCULUS.html#NOR,
         https://plato.stanford.edu/entries/lambda-calculus/#Com
"""

from dataclasses import dataclass

from lcrepl.pure.term import Abstraction, Application, LambdaTerm, Variable


def free_variables(term):
    """Returns the set of names that occur free in term."""
    if isinstance(term, Variable):
        return {term.name}
    elif isinstance(term, Abstraction):
        return free_variables(term.body) - {term.arg}
    elif isinstance(term, Application):
        return free_variables(term.func) | free_variables(term.arg)
    raise TypeError(f"expected LambdaTerm, got {type(term).__name__}")


def is_free_in(name, term):
    """Whether or not name occurs free in term."""
    return name in free_variables(term)


def all_variables(term):
    """Returns every name in term, free or bound (binders included)."""
    if isinstance(term, Variable):
        return {term.name}
    elif isinstance(term, Abstraction):
        return all_variables(term.body) | {term.arg}
    elif isinstance(term, Application):
        return all_variables(term.func) | all_variables(term.arg)
    raise TypeError(f"expected LambdaTerm, got {type(term).__name__}")


def next_name(name):
    """Successor of name: a -> b -> ... -> z -> z0 -> z1 -> ... -> z9 -> z9' -> z9'' -> ..."""
    if len(name) == 1:
        if "a" <= name < "z":
            return chr(ord(name) + 1)
        return name + "0"
    if len(name) == 2 and name[1] in "012345678":
        return name[0] + str(int(name[1]) + 1)
    return name + "'"


def fresh_name(candidate, avoid):
    """Returns the first successor of candidate that is not in avoid."""
    name = next_name(candidate)
    while name in avoid:
        name = next_name(name)
    return name


def rename(old, new, term):
    """Replaces every occurrence of old with new in term, binders included. Does not check for capture."""
    if isinstance(term, Variable):
        return Variable(new) if term.name == old else term
    elif isinstance(term, Abstraction):
        arg = new if term.arg == old else term.arg
        return Abstraction(arg, rename(old, new, term.body))
    elif isinstance(term, Application):
        return Application(rename(old, new, term.func), rename(old, new, term.arg))
    raise TypeError(f"expected LambdaTerm, got {type(term).__name__}")


def substitute(name, replacement, subject):
    """Returns subject[name := replacement]: every free occurrence of name in subject replaced with replacement.
    Binders in subject that would capture a free variable of replacement are renamed first.
    """
    if isinstance(subject, Variable):
        return replacement if subject.name == name else subject

    elif isinstance(subject, Application):
        return Application(substitute(name, replacement, subject.func), substitute(name, replacement, subject.arg))

    elif isinstance(subject, Abstraction):
        arg, body = subject.arg, subject.body
        if arg == name:
            return subject  # name is rebound here

        replacement_free = free_variables(replacement)
        if arg in replacement_free:
            new_arg = fresh_name(arg, replacement_free | all_variables(body) | {name})
            body = rename(arg, new_arg, body)
            arg = new_arg

        return Abstraction(arg, substitute(name, replacement, body))

    raise TypeError(f"expected LambdaTerm, got {type(subject).__name__}")


def is_redex(term):
    """Whether or not term itself is a redex: an Abstraction applied to an argument."""
    return isinstance(term, Application) and isinstance(term.func, Abstraction)


def contains_redex(term):
    """Whether or not any subterm of term is a redex."""
    if isinstance(term, Variable):
        return False
    elif isinstance(term, Abstraction):
        return contains_redex(term.body)
    elif isinstance(term, Application):
        return is_redex(term) or contains_redex(term.func) or contains_redex(term.arg)
    raise TypeError(f"expected LambdaTerm, got {type(term).__name__}")


def reduce_one_step(term):
    """Performs one leftmost-outermost β-reduction. Terms in β-normal form are returned as is."""
    if is_redex(term):
        return substitute(term.func.arg, term.arg, term.func.body)

    elif isinstance(term, Abstraction):
        body = reduce_one_step(term.body)
        return term if body is term.body else Abstraction(term.arg, body)

    elif isinstance(term, Application):
        if contains_redex(term.func):
            return Application(reduce_one_step(term.func), term.arg)
        arg = reduce_one_step(term.arg)
        return term if arg is term.arg else Application(term.func, arg)

    return term


@dataclass(frozen=True)
class NormalForm:
    """Result of a reduction that reached β-normal form after some number of steps."""
    term: LambdaTerm
    steps: int

    @property
    def reduced(self):
        return True


@dataclass(frozen=True)
class LimitExceeded:
    """Result of a reduction that used up its step limit while a redex still remained. term is the last term."""
    term: LambdaTerm
    limit: int

    @property
    def reduced(self):
        return False


def normalize(term, limit, on_step=None):
    """Reduces term in normal order until no redex remains or limit steps have been taken. on_step, if given, is called
    with (step number, term) after every step. Returns NormalForm or LimitExceeded.
    """
    if not isinstance(limit, int) or isinstance(limit, bool) or limit < 1:
        raise ValueError(f"step limit must be a positive integer, got {limit!r}")

    steps = 0
    while contains_redex(term):
        if steps == limit:
            return LimitExceeded(term, limit)
        term = reduce_one_step(term)
        steps += 1
        if on_step is not None:
            on_step(steps, term)
    return NormalForm(term, steps)


class NormalOrderReducer:
    """Implements normal-order beta reduction of a term under a step limit. Used by ExecStmt in lang."""
    DEFAULT_LIMIT = 1000

    def __init__(self, tree, limit=DEFAULT_LIMIT):
        if not isinstance(limit, int) or isinstance(limit, bool) or limit < 1:
            raise ValueError(f"step limit must be a positive integer, got {limit!r}")

        self.tree = tree
        self.limit = limit
        self.result = None

    def beta_reduce(self, error_handler=None):
        """Beta-reduces self.tree, registering every step with error_handler (if given). Returns NormalForm or
        LimitExceeded and replaces self.tree with the last term.
        """

        def register(__, term):
            error_handler.register_step("β", term)

        self.result = normalize(self.tree, self.limit, register if error_handler is not None else None)
        self.tree = self.result.term
        return self.result

    def __repr__(self):
        return f"NormalOrderReducer({self.tree!r}, limit={self.limit})"
