"""Pure lambda calculus tokenizer and parser.

The `pure` directory contains pure lambda calculus: terms, reduction, and parsing. It is not sufficient for the lcrepl
language (named terms, numerals, imports), which lives in `lang`.

Formally, pure lambda calculus can be defined as

```
<λ-term> ::= <variable>                   ; "variable"
                                          ; - a letter or "_", then letters/digits/"_", then any number of "'"
                                          ; - a run of digits is also a variable (a numeral, see lang/numerical.py)
           | "λ" <variable> "." <λ-term>  ; "abstraction" ("\" may be used instead of "λ")
                                          ; - currying is not supported in this implementation (*)
                                          ; - abstraction bodies are greedy: λx.x y = λx.(x y) != (λx.x) (y)
           | <λ-term> <λ-term>            ; "application"
                                          ; - associating by left: a b c d = (((a b) c) d)
           | "(" <λ-term> ")"
```

Sources: https://plato.stanford.edu/entries/lambda-calculus/#Com,
         https://opendsa-server.cs.vt.edu/ODSA/Books/PL/html/Syntax.html

------------------------------------------------------------------------------------------------------------------------

(*) Why is currying not supported? Because it makes the use of multi-character Variables ambiguous. For example, if
currying is allowed, what does the expression `λvar.x` mean? Should it be resolved to `λv.λa.λr.x`, or is `var` a
Variable name? Thus, currying and multi-character Variables cannot coexist without causing ambiguity. This
implementation favors multi-character Variables over currying. Relatedly, function application must be separated by
spaces or parentheses.
"""

import re
from collections import namedtuple

from lcrepl.lang.error import GenericException
from lcrepl.pure.term import Abstraction, Application, Variable


LAMBDA, DOT, LPAREN, RPAREN, NAME, NUMBER, END = "λ", ".", "(", ")", "name", "number", "end"

Token = namedtuple("Token", ["kind", "text", "start"])

NAME_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]*'*")
NUMBER_PATTERN = re.compile(r"[0-9]+")
TOKEN_PATTERN = re.compile(r"(?P<space>\s+)|(?P<builtin>[λ\\.()])|(?P<word>[A-Za-z0-9_']+)")


def is_name(expr):
    """Whether or not expr is a valid variable name (numerals excluded)."""
    return NAME_PATTERN.fullmatch(expr) is not None


def is_numeral(expr):
    """Whether or not expr is a natural number literal."""
    return NUMBER_PATTERN.fullmatch(expr) is not None


def tokenize(expr):
    """Returns the list of Tokens in expr, ending with an END token. Raises GenericException on unknown characters or
    malformed variable names.
    """
    tokens = []
    pos = 0
    while pos < len(expr):
        match = TOKEN_PATTERN.match(expr, pos)
        if match is None:
            raise GenericException("'{}' contains unknown character '{}'", (expr, expr[pos]), start=pos, end=pos + 1)

        text = match.group()
        if match.lastgroup == "builtin":
            tokens.append(Token(LAMBDA if text == "\\" else text, text, pos))
        elif match.lastgroup == "word":
            if is_numeral(text):
                tokens.append(Token(NUMBER, text, pos))
            elif is_name(text):
                tokens.append(Token(NAME, text, pos))
            else:
                msg = "'{}' contains invalid variable '{}'"
                raise GenericException(msg, (expr, text), start=pos, end=pos + len(text))

        pos = match.end()

    tokens.append(Token(END, "", len(expr)))
    return tokens


class Parser:
    """Recursive descent parser from str to LambdaTerm. original_expr is used for better error messages."""

    def __init__(self, expr, original_expr=None):
        self.expr = expr
        self.original_expr = original_expr if original_expr is not None else expr
        self.offset = max(self.original_expr.find(expr), 0)  # position of expr within original_expr

        self.tokens = tokenize(expr)
        self.pos = 0

    @property
    def current(self):
        return self.tokens[self.pos]

    def advance(self):
        token = self.current
        self.pos += 1
        return token

    def error(self, msg, token, length=None):
        """Returns GenericException highlighting token in original_expr."""
        start = self.offset + token.start
        end = start + (length if length is not None else max(len(token.text), 1))
        return GenericException(msg, self.original_expr, start=start, end=end)

    def parse(self):
        """Parses the whole expr. Raises GenericException if it is not a λ-term."""
        if self.current.kind == END:
            raise GenericException("λ-term cannot be empty", self.original_expr, diagnosis=False)

        term = self.parse_term()

        if self.current.kind == RPAREN:
            raise self.error("'{}' has mismatched parentheses", self.current)
        elif self.current.kind != END:
            raise self.error("'{}' has stray builtin '" + self.current.text + "'", self.current)
        return term

    def parse_term(self):
        """<λ-term> ::= <atom>+ [<abstraction>] | <abstraction>"""
        term = None
        while True:
            kind = self.current.kind
            if kind == LAMBDA:
                node = self.parse_abstraction()
            elif kind in (NAME, NUMBER):
                node = Variable(self.advance().text)
            elif kind == LPAREN:
                node = self.parse_parens()
            else:
                break

            term = node if term is None else Application(term, node)
            if kind == LAMBDA:
                break  # abstraction body extended as far right as possible

        if term is None:
            if self.current.kind == END:
                raise self.error("'{}' ends unexpectedly", self.current)
            raise self.error("'{}' has stray builtin '" + self.current.text + "'", self.current)
        return term

    def parse_parens(self):
        opening = self.advance()
        if self.current.kind == RPAREN:
            raise self.error("'{}' has empty parentheses", opening, length=2)

        term = self.parse_term()
        if self.current.kind != RPAREN:
            raise self.error("'{}' has mismatched parentheses", opening)
        self.advance()
        return term

    def parse_abstraction(self):
        bind = self.advance()

        arg = self.current
        if arg.kind == NUMBER:
            raise self.error("'{}' binds a number", arg)
        elif arg.kind != NAME:
            raise self.error("'{}' has an abstraction without a bound variable", bind)
        self.advance()

        if self.current.kind != DOT:
            raise self.error("'{}' has mismatched binds/declarators", bind)
        decl = self.advance()

        if self.current.kind in (END, RPAREN, DOT):
            raise self.error("'{}' contains an illegal abstraction body", decl)
        return Abstraction(arg.text, self.parse_term())


def parse(expr, original_expr=None):
    """Converts expr to a LambdaTerm, raises GenericException if expr is not valid λ-term grammar."""
    return Parser(expr, original_expr).parse()
