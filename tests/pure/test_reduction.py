import unittest

from lcrepl.pure.lexical import parse
from lcrepl.pure.reduction import (
    LimitExceeded, NormalForm, NormalOrderReducer, all_variables, contains_redex, free_variables, fresh_name,
    is_free_in, next_name, normalize, reduce_one_step, rename, substitute
)
from lcrepl.pure.term import Abstraction, Application, Variable

OMEGA = "(λx.x x) (λx.x x)"


class StepRecorder:
    """Stands in for ErrorHandler in NormalOrderReducer.beta_reduce."""

    def __init__(self):
        self.steps = []

    def register_step(self, symbol, term):
        self.steps.append((symbol, term))


class FreeVariablesTestCase(unittest.TestCase):

    def test_free_variables(self):
        cases = {
            "x": {"x"},
            "λx.x": set(),
            "λx.y": {"y"},
            "x z": {"x", "z"},
            "x x": {"x"},
            "λx.x y": {"y"},
            "(λx.x) x": {"x"},
            "λx.λy.x y z": {"z"},
            "λx.(λx.x) x": set(),
        }
        for case, expected in cases.items():
            self.assertEqual(expected, free_variables(parse(case)), case)

    def test_free_variables_of_abstraction(self):
        bodies = ["x", "y", "x y x", "λy.x y", "λx.x"]
        for body in bodies:
            term = parse(body)
            self.assertEqual(free_variables(term) - {"x"}, free_variables(Abstraction("x", term)), body)

    def test_is_free_in(self):
        should_pass = [("x", "x"), ("y", "λx.y"), ("x", "(λx.x) x"), ("z", "λx.λy.x y z")]
        for name, case in should_pass:
            self.assertTrue(is_free_in(name, parse(case)), case)

        should_fail = [("x", "y"), ("x", "λx.x"), ("x", "λx.λy.x y"), ("y", "λx.x")]
        for name, case in should_fail:
            self.assertFalse(is_free_in(name, parse(case)), case)

    def test_all_variables(self):
        cases = {
            "x": {"x"},
            "λx.y": {"x", "y"},
            "λx.λy.x y z": {"x", "y", "z"},
            "(λa.a) b": {"a", "b"},
        }
        for case, expected in cases.items():
            self.assertEqual(expected, all_variables(parse(case)), case)

    def test_not_a_term(self):
        for func in (free_variables, all_variables, contains_redex):
            self.assertRaises(TypeError, func, "x")


class FreshNameTestCase(unittest.TestCase):

    def test_next_name(self):
        cases = {
            "a": "b",
            "x": "y",
            "y": "z",
            "z": "z0",
            "A": "A0",
            "_": "_0",
            "z0": "z1",
            "a0": "a1",
            "x8": "x9",
            "x9": "x9'",
            "ab": "ab'",
            "y'": "y''",
            "abc": "abc'",
            "SUCC": "SUCC'",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, next_name(case), case)

    def test_fresh_name(self):
        cases = [
            ("x", set(), "y"),
            ("x", {"y"}, "z"),
            ("x", {"y", "z"}, "z0"),
            ("y", {"z", "z0", "z1"}, "z2"),
            ("x9", {"x9'"}, "x9''"),
            ("x", {"x"}, "y"),
        ]
        for candidate, avoid, expected in cases:
            self.assertEqual(expected, fresh_name(candidate, avoid), (candidate, avoid))

    def test_fresh_name_deterministic(self):
        avoid = {"y", "z", "z0"}
        self.assertEqual(fresh_name("x", avoid), fresh_name("x", set(avoid)))


class RenameTestCase(unittest.TestCase):

    def test_rename(self):
        cases = {
            "x": "y",
            "z": "z",
            "λx.x": "λy.y",
            "λx.λx.x z": "λy.λy.y z",
            "(λz.x) x": "(λz.y) y",
            "λa.b": "λa.b",
        }
        for case, expected in cases.items():
            self.assertEqual(parse(expected), rename("x", "y", parse(case)), case)


class SubstituteTestCase(unittest.TestCase):

    def test_substitute(self):
        cases = [
            ("x", "y", "x", "y"),
            ("x", "y", "z", "z"),
            ("x", "λz.z", "x x", "(λz.z) (λz.z)"),
            ("x", "a", "λy.x y", "λy.a y"),
            ("x", "a b", "f x (λz.x)", "f (a b) (λz.a b)"),
            ("x", "y", "λy.x", "λz.y"),              # bound y renamed before substitution
            ("x", "y", "λy.x z", "λz0.y z"),         # fresh name avoids free z of the body
            ("x", "y", "λy.λz.x y", "λz0.λz.y z0"),  # fresh name avoids inner binder z
            ("x", "y z", "λy.λz.x", "λz0.λz0.y z"),
            ("z", "y", "λy.z y", "λz0.y z0"),        # fresh name avoids the substituted name
        ]
        for name, replacement, subject, expected in cases:
            result = substitute(name, parse(replacement), parse(subject))
            self.assertEqual(parse(expected), result, (name, replacement, subject))

    def test_substitute_vacuous(self):
        replacements = ["y", "x", "λz.z", "a b"]
        bodies = ["x", "y", "x y", "λy.x"]
        for replacement in replacements:
            for body in bodies:
                subject = Abstraction("x", parse(body))
                self.assertIs(subject, substitute("x", parse(replacement), subject))

    def test_no_capture(self):
        """No free variable of the replacement becomes bound in the result."""
        replacements = ["y", "y z", "λy.y", "x", "f z0 y'"]
        subjects = ["λy.x", "λy.λz.x y z", "λz.(λy.x) y", "x (λx.x)", "λy.λz.λz0.x", "(λy'.x) y"]
        for replacement in replacements:
            for subject in subjects:
                term, subject_term = parse(replacement), parse(subject)
                result = substitute("x", term, subject_term)
                expected = (free_variables(subject_term) - {"x"}) | free_variables(term)
                self.assertEqual(expected, free_variables(result), (replacement, subject))

    def test_inputs_unchanged(self):
        replacement, subject = parse("y"), parse("λy.x y")
        substitute("x", replacement, subject)
        self.assertEqual(parse("y"), replacement)
        self.assertEqual(parse("λy.x y"), subject)


class RedexTestCase(unittest.TestCase):

    def test_contains_redex(self):
        should_fail = ["x", "λx.x", "x y", "(x y) z", "λx.x (λy.y)", "x (λy.y)"]
        for case in should_fail:
            self.assertFalse(contains_redex(parse(case)), case)

        should_pass = ["(λx.x) y", "λx.(λy.y) x", "x ((λy.y) z)", "((λx.x) a) b", OMEGA]
        for case in should_pass:
            self.assertTrue(contains_redex(parse(case)), case)


class ReduceOneStepTestCase(unittest.TestCase):

    def test_reduce_one_step(self):
        cases = {
            "(λx.x) y": "y",
            "(λx.λy.x) a b": "(λy.a) b",
            "(λy.a) b": "a",
            "(λx.x) ((λy.y) z)": "(λy.y) z",        # outermost first
            "((λx.x) a) ((λy.y) b)": "a ((λy.y) b)",  # leftmost first
            "x ((λy.y) z)": "x z",
            "λx.(λy.y) x": "λx.x",                  # reduces under abstractions
            "(λx.λy.x y) y": "λz.y z",
        }
        for case, expected in cases.items():
            self.assertEqual(parse(expected), reduce_one_step(parse(case)), case)

    def test_normal_form(self):
        cases = ["x", "λx.x", "x y", "λx.x (λy.y)", "x (λy.y z)"]
        for case in cases:
            term = parse(case)
            self.assertFalse(contains_redex(term), case)
            self.assertIs(term, reduce_one_step(term))

    def test_redex_changes_term(self):
        cases = ["(λx.x) y", "λx.(λy.y) x", "x ((λy.y) z)", "(λx.λy.x) a b"]
        for case in cases:
            term = parse(case)
            self.assertTrue(contains_redex(term), case)
            self.assertNotEqual(term, reduce_one_step(term), case)

    def test_self_application(self):
        term = parse(OMEGA)
        self.assertEqual(term, reduce_one_step(term))


class NormalizeTestCase(unittest.TestCase):

    def test_normal_form(self):
        cases = {
            "(λx.x) y": ("y", 1),
            "(λx.λy.x) a b": ("a", 2),
            "y": ("y", 0),
            "λx.(λy.y) x": ("λx.x", 1),
            "(λx.λy.x) (λz.z) " + f"({OMEGA})": ("λz.z", 2),  # normal order skips the divergent argument
        }
        for case, (expected, steps) in cases.items():
            result = normalize(parse(case), 50)
            self.assertEqual(NormalForm(parse(expected), steps), result, case)
            self.assertTrue(result.reduced)

    def test_limit_exceeded(self):
        result = normalize(parse(OMEGA), 50)
        self.assertIsInstance(result, LimitExceeded)
        self.assertEqual(50, result.limit)
        self.assertEqual(parse(OMEGA), result.term)
        self.assertFalse(result.reduced)

    def test_limit_boundary(self):
        term = parse("(λx.λy.x) a b")
        self.assertEqual(NormalForm(parse("a"), 2), normalize(term, 2))
        self.assertEqual(LimitExceeded(parse("(λy.a) b"), 1), normalize(term, 1))

    def test_on_step(self):
        steps = []
        normalize(parse("(λx.λy.x) a b"), 10, lambda step, term: steps.append((step, term)))
        self.assertEqual([(1, parse("(λy.a) b")), (2, parse("a"))], steps)

    def test_invalid_limit(self):
        should_raise = [0, -1, 2.5, True, "10", None]
        for limit in should_raise:
            self.assertRaises(ValueError, normalize, parse("x"), limit)
            self.assertRaises(ValueError, NormalOrderReducer, parse("x"), limit)


class NormalOrderReducerTestCase(unittest.TestCase):

    def test_beta_reduce(self):
        recorder = StepRecorder()
        nor = NormalOrderReducer(parse("(λx.λy.x) a b"), limit=10)
        self.assertIsNone(nor.result)

        result = nor.beta_reduce(recorder)
        self.assertEqual(NormalForm(Variable("a"), 2), result)
        self.assertEqual(Variable("a"), nor.tree)
        self.assertIs(result, nor.result)
        self.assertEqual([("β", parse("(λy.a) b")), ("β", Variable("a"))], recorder.steps)

    def test_beta_reduce_without_handler(self):
        nor = NormalOrderReducer(parse(OMEGA), limit=5)
        result = nor.beta_reduce()
        self.assertEqual(LimitExceeded(parse(OMEGA), 5), result)

    def test_default_limit(self):
        nor = NormalOrderReducer(Application(Variable("f"), Variable("a")))
        self.assertEqual(NormalOrderReducer.DEFAULT_LIMIT, nor.limit)


if __name__ == '__main__':
    unittest.main()
