"""Pure lambda calculus terms.

A λ-term is a finite binary tree built from three kinds of nodes:

```
<λ-term> ::= <variable>                 ; Variable(name)
           | "λ" <variable> "." <λ-term>  ; Abstraction(arg, body)
           | <λ-term> <λ-term>          ; Application(func, arg)
```

Terms are immutable: every operation in `lcrepl.pure` builds new nodes and never modifies the ones it is given, so
subtrees can be shared freely. Equality is syntactic (same shape, same names); see `lcrepl.pure.equivalence` for
equality up to renaming of bound variables.
"""

from dataclasses import dataclass


class LambdaTerm:
    """Superclass of the three λ-term node types. Never instantiated directly."""

    __slots__ = ()


@dataclass(frozen=True)
class Variable(LambdaTerm):
    """Variable in lambda calculus: an identifier, free or bound by an enclosing Abstraction."""
    name: str


@dataclass(frozen=True)
class Abstraction(LambdaTerm):
    """Abstraction λarg.body. arg scopes over the whole of body."""
    arg: str
    body: LambdaTerm


@dataclass(frozen=True)
class Application(LambdaTerm):
    """Application of func to arg."""
    func: LambdaTerm
    arg: LambdaTerm
