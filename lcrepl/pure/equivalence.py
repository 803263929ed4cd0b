"""α-equivalence of λ-terms via de Bruijn indices.

Two terms are α-equivalent if one can be turned into the other by consistently renaming bound variables. Replacing every
bound variable with the number of binders between it and its own binder (its de Bruijn index) erases bound names
entirely, so α-equivalent terms have identical indexed forms:

```
λx.λy.x y z   ->   λ.λ.1 0 z
λa.λb.a b z   ->   λ.λ.1 0 z
```

Free variables keep their names.

Source: https://en.wikipedia.org/wiki/De_Bruijn_index
"""

from dataclasses import dataclass

from lcrepl.pure.term import Abstraction, Application, Variable


@dataclass(frozen=True)
class Index:
    """Bound variable: distance (in enclosing abstractions) to its binder."""
    depth: int


@dataclass(frozen=True)
class Free:
    name: str


@dataclass(frozen=True)
class Lam:
    body: object


@dataclass(frozen=True)
class App:
    func: object
    arg: object


def canonical(term, bound=()):
    """Returns the de Bruijn form of term. bound holds the names of the enclosing binders, innermost first."""
    if isinstance(term, Variable):
        if term.name in bound:
            return Index(bound.index(term.name))
        return Free(term.name)
    elif isinstance(term, Abstraction):
        return Lam(canonical(term.body, (term.arg,) + bound))
    elif isinstance(term, Application):
        return App(canonical(term.func, bound), canonical(term.arg, bound))
    raise TypeError(f"expected LambdaTerm, got {type(term).__name__}")


def alpha_equivalent(term, other):
    """Whether or not term and other are equal up to renaming of bound variables."""
    return canonical(term) == canonical(other)
