"""String forms of λ-terms.

`unparse` writes the fully parenthesized grammar (every abstraction and application wrapped, variables bare):

```
(λx.x) y   ->   ((\\x.x) y)
```

`display` writes the readable form used by the interpreter, with only the parentheses that are needed to read the term
back: applications associate to the left and abstraction bodies extend as far right as possible.

```
((\\x.(x x)) (\\x.(x x)))   ->   (λx.x x) (λx.x x)
```

Both forms parse back to the same term (see `lcrepl.pure.lexical`).
"""

from termcolor import colored

from lcrepl.pure.term import Abstraction, Application, Variable


LAMBDA = "λ"


def unparse(term):
    """Returns term in fully parenthesized concrete syntax."""
    if isinstance(term, Variable):
        return term.name
    elif isinstance(term, Abstraction):
        return f"(\\{term.arg}.{unparse(term.body)})"
    elif isinstance(term, Application):
        return f"({unparse(term.func)} {unparse(term.arg)})"
    raise TypeError(f"expected LambdaTerm, got {type(term).__name__}")


def display(term, color=False):
    """Returns term with minimal parentheses. If color, lambdas and binders are highlighted."""
    if isinstance(term, Variable):
        return term.name

    elif isinstance(term, Abstraction):
        head = f"{LAMBDA}{term.arg}."
        if color:
            head = colored(LAMBDA, "blue", attrs=["bold"]) + colored(term.arg, "yellow") + "."
        return head + display(term.body, color)

    elif isinstance(term, Application):
        func = display(term.func, color)
        if isinstance(term.func, Abstraction):
            func = f"({func})"

        arg = display(term.arg, color)
        if not isinstance(term.arg, Variable):
            arg = f"({arg})"

        return f"{func} {arg}"

    raise TypeError(f"expected LambdaTerm, got {type(term).__name__}")
