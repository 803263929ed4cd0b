"""Natural numbers encoded as Church numerals. Note that operations are not implemented here (see common/prelude.lc)
and that numerals are built as plain λ-terms, thus keeping everything as pure as possible.

```
0 = λf.λx.x
3 = λf.λx.f (f (f x))
```

Source: https://en.wikipedia.org/wiki/Church_encoding#Calculation_with_Church_numerals
"""

from lcrepl.lang.error import GenericException
from lcrepl.pure.lexical import is_numeral
from lcrepl.pure.reduction import free_variables, substitute
from lcrepl.pure.term import Abstraction, Application, Variable


def cnumber(num):
    """Returns Church numeral of num as a LambdaTerm (cnum = Church numeral)."""
    try:
        assert not isinstance(num, (float, bool))
        num = int(num)
        assert num >= 0
    except (AssertionError, ValueError, TypeError):
        raise GenericException("expected natural number, got '{}'", str(num), internal=True)

    body = Variable("x")
    for __ in range(num):
        body = Application(Variable("f"), body)
    return Abstraction("f", Abstraction("x", body))


def number(cnum):
    """Returns int given LambdaTerm cnum. If cnum isn't a Church numeral, returns None."""
    if not isinstance(cnum, Abstraction) or not isinstance(cnum.body, Abstraction):
        return None

    first_arg, second_arg = cnum.arg, cnum.body.arg
    if first_arg == second_arg:
        return None  # λx.λx.x is not a numeral: the inner x shadows the outer

    num = 0
    nth_body = cnum.body.body
    while isinstance(nth_body, Application):
        if nth_body.func != Variable(first_arg):
            return None
        nth_body = nth_body.arg
        num += 1

    return num if nth_body == Variable(second_arg) else None


def cnumberify(term):
    """Replaces every free numeral variable in term with its Church numeral."""
    for name in sorted(free_variables(term)):
        if is_numeral(name):
            term = substitute(name, cnumber(name), term)
    return term


def numberify(term):
    """Replaces every Church numeral in term with a numeral variable, outermost first."""
    num = number(term)
    if num is not None:
        return Variable(str(num))

    if isinstance(term, Abstraction):
        return Abstraction(term.arg, numberify(term.body))
    elif isinstance(term, Application):
        return Application(numberify(term.func), numberify(term.arg))
    return term
