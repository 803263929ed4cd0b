"""Normal-order lambda calculus interpreter.

For reference:
- "Pure lambda calculus": lambda calculus as defined by Church (see lcrepl/pure)
- "lcrepl language": lambda calculus + named terms, numerals and imports, used in .lc files and the shell (see
  lcrepl/lang)

Basic program flow:
    1. Parser: produces a λ-term tree from each statement (pure/lexical.py, lang/lexical.py)
    2. Expansion: named terms and numerals are substituted into the tree (lang/lexical.py, lang/numerical.py)
    3. Reduction: the tree is β-reduced in normal order up to a step limit (pure/reduction.py)
    4. Display: numerals and named terms are recovered and the result is printed (lang/lexical.py, pure/display.py)
"""

__version__ = "0.2.0"
