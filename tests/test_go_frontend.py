import os
import tempfile
import textwrap
import unittest
from pathlib import Path

from go_parser import ParseGoError, parse_go_source
from go_tree import build_go_unit
from nargs import check_for_unused_function_args, check_units
from nargs_flags import NargsFlags


ROOT = Path(__file__).resolve().parents[1]
TESTDATA = ROOT / "testdata"


def analyze_go(code, flags=None, filename="fixture.go"):
    source = textwrap.dedent(code).lstrip("\n")
    tree = parse_go_source(source, filename)
    unit = build_go_unit(tree, filename)
    results, _exit = check_units([unit], flags or NargsFlags())
    return results


def findings(results):
    # "fixture.go:4 funcOne contains unused parameter c\n" -> (4, "funcOne", "c")
    out = []
    for text in results:
        location, func_name, *_rest, param = text.split()
        out.append((int(location.rsplit(":", 1)[1]), func_name, param))
    return out


class GoScenarioTest(unittest.TestCase):
    def test_unused_trailing_parameter(self):
        results = analyze_go(
            """
            package main

            func funcOne(a, b, c int) int {
                return a + b
            }
            """
        )
        self.assertEqual(results, ["fixture.go:3 funcOne contains unused parameter c\n"])

    def test_unnamed_receiver_has_nothing_to_report(self):
        results = analyze_go(
            """
            package main

            type f struct{}

            func (f) funcTwo(a, b, c int) int {
                return a + b
            }
            """
        )
        self.assertEqual(findings(results), [(5, "funcTwo", "c")])

    def test_receiver_toggle(self):
        code = """
            package main

            type server struct{}

            func (s *server) handle(x int) int {
                return x
            }
            """
        self.assertEqual(findings(analyze_go(code)), [(5, "handle", "s")])
        self.assertEqual(analyze_go(code, NargsFlags(include_receivers=False)), [])

    def test_named_return_toggle(self):
        code = """
            package main

            func funcThree() (namedReturn int) {
                return
            }
            """
        self.assertEqual(analyze_go(code), [])
        self.assertEqual(
            findings(analyze_go(code, NargsFlags(include_named_returns=True))),
            [(3, "funcThree", "namedReturn")],
        )

    def test_assigned_named_return_is_used(self):
        code = """
            package main

            func answer() (n int) {
                n = 42
                return
            }
            """
        self.assertEqual(analyze_go(code, NargsFlags(include_named_returns=True)), [])

    def test_closure_reports_own_parameter_only(self):
        results = analyze_go(
            """
            package main

            func closures() {
                closure := func(v int) {
                    enclosed := 2
                    enclosed++
                }
                closure(1)
            }
            """
        )
        self.assertEqual(results, ["fixture.go:4 closure contains unused parameter v\n"])

    def test_capture_marks_enclosing_parameter(self):
        results = analyze_go(
            """
            package main

            func outer(r int, spare int) func(int) int {
                inner := func(n int) int {
                    return r * 2
                }
                return inner
            }
            """
        )
        self.assertEqual(findings(results), [(3, "outer", "spare"), (4, "inner", "n")])

    def test_shadowed_name_is_not_confused_with_outer_binding(self):
        results = analyze_go(
            """
            package main

            func shadow(n int) {
                f := func(n int) {
                    println(n)
                }
                f(1)
            }

            func shadowed(n int) {
                g := func(n int) {}
                g(n)
            }
            """
        )
        self.assertEqual(findings(results), [(3, "shadow", "n"), (11, "g", "n")])

    def test_discarded_parameters_are_never_reported(self):
        results = analyze_go(
            """
            package main

            func handler(_ int, _ string) {
                cb := func(_ int) {}
                cb(0)
            }
            """
        )
        self.assertEqual(results, [])

    def test_declaration_without_body_is_skipped(self):
        results = analyze_go(
            """
            package main

            func external(x int) int
            """
        )
        self.assertEqual(results, [])

    def test_package_level_closure(self):
        results = analyze_go(
            """
            package main

            var handle = func(w int, r int) int {
                return r
            }
            """
        )
        self.assertEqual(findings(results), [(3, "handle", "w")])

    def test_uses_inside_statement_forms(self):
        results = analyze_go(
            """
            package main

            func uses(a int, b []int, c chan int, d map[string]int, e interface{}, g int, h int, k int) {
                for i := range b {
                    _ = i
                }
                switch a {
                case g:
                }
                select {
                case v := <-c:
                    _ = v
                default:
                }
                if x, ok := d["k"]; ok {
                    _ = x
                }
                switch t := e.(type) {
                case int:
                    _ = t
                }
                defer func() {
                    println(h)
                }()
            loop:
                for j := 0; j < k; j++ {
                    break loop
                }
            }
            """
        )
        self.assertEqual(results, [])

    def test_struct_literal_keys_are_field_names(self):
        results = analyze_go(
            """
            package main

            func build(x int, y int) struct{ x, y int } {
                return struct{ x, y int }{x: 1, y: y}
            }
            """
        )
        self.assertEqual(findings(results), [(3, "build", "x")])

    def test_keys_of_named_and_elided_literals_are_uses(self):
        results = analyze_go(
            """
            package main

            import "net/http"

            type M map[string]int

            func header(key string) http.Header {
                return http.Header{key: nil}
            }

            func named(k string) M {
                return M{k: 1}
            }

            func nested(k string, m int) map[string]map[string]int {
                return map[string]map[string]int{"a": {k: 1}}
            }
            """
        )
        self.assertEqual(findings(results), [(15, "nested", "m")])

    def test_local_redeclaration_hides_parameter(self):
        results = analyze_go(
            """
            package main

            func hidden(v int) int {
                {
                    v := 3
                    return v
                }
            }
            """
        )
        self.assertEqual(findings(results), [(3, "hidden", "v")])

    def test_diagnostics_are_sorted_by_line(self):
        results = analyze_go(
            """
            package main

            func first(a int) {}

            func second(b int) {
                late := func(z int) {}
                late(0)
                early := func(y int) {}
                early(0)
            }
            """
        )
        lines = [line for line, _name, _param in findings(results)]
        self.assertEqual(lines, sorted(lines))
        self.assertEqual(len(results), 4)

    def test_deterministic(self):
        code = (TESTDATA / "test.go").read_text(encoding="utf-8")
        self.assertEqual(analyze_go(code), analyze_go(code))


class GoParseErrorTest(unittest.TestCase):
    def test_malformed_source_raises(self):
        with self.assertRaises(ParseGoError):
            parse_go_source("package main\n\nfunc broken( {\n", "broken.go")


class TestdataTest(unittest.TestCase):
    def setUp(self):
        self._cwd = os.getcwd()
        os.chdir(ROOT)

    def tearDown(self):
        os.chdir(self._cwd)

    def test_default_flags(self):
        results, exit_with_status, errors = check_for_unused_function_args(["testdata/test.go"], NargsFlags())
        self.assertEqual(
            results,
            [
                "testdata/test.go:4 funcOne contains unused parameter c\n",
                "testdata/test.go:11 funcTwo contains unused parameter c\n",
                "testdata/test.go:17 funcThree contains unused parameter recv\n",
                "testdata/test.go:28 closure contains unused parameter v\n",
                "testdata/test.go:35 unusedFunc contains unused parameter f\n",
            ],
        )
        self.assertTrue(exit_with_status)
        self.assertEqual(errors, [])

    def test_include_named_returns(self):
        results, _exit, _errors = check_for_unused_function_args(
            ["testdata/test.go"], NargsFlags(include_named_returns=True)
        )
        self.assertIn("testdata/test.go:23 funcFour contains unused parameter namedReturn\n", results)
        self.assertEqual(len(results), 6)

    def test_success_file(self):
        results, exit_with_status, errors = check_for_unused_function_args(["testdata/success.go"], NargsFlags())
        self.assertEqual(results, [])
        self.assertFalse(exit_with_status)
        self.assertEqual(errors, [])


class BatchTest(unittest.TestCase):
    def test_malformed_unit_does_not_stop_siblings(self):
        with tempfile.TemporaryDirectory() as td:
            Path(td, "bad.go").write_text("package main\n\nfunc (\n", encoding="utf-8")
            Path(td, "good.go").write_text("package main\n\nfunc good(a, b int) int { return a }\n", encoding="utf-8")

            results, exit_with_status, errors = check_for_unused_function_args([td], NargsFlags())

        self.assertEqual(len(results), 1)
        self.assertTrue(results[0].endswith("good.go:3 good contains unused parameter b\n"))
        self.assertTrue(exit_with_status)
        self.assertEqual([os.path.basename(path) for path, _msg in errors], ["bad.go"])

    def test_deeply_nested_unit_is_analyzed_with_its_siblings(self):
        terms = " + ".join(["a"] * 3000)
        opening = "if true {\n" * 400
        closing = "}\n" * 400
        deep = (
            "package main\n\n"
            f"func sum(a int, b int) int {{\nreturn {terms}\n}}\n\n"
            f"func nest(c int, d int) {{\n{opening}_ = c\n{closing}}}\n"
        )
        with tempfile.TemporaryDirectory() as td:
            Path(td, "deep.go").write_text(deep, encoding="utf-8")
            Path(td, "ok.go").write_text("package main\n\nfunc ok(e, f int) int { return e }\n", encoding="utf-8")

            results, _exit, errors = check_for_unused_function_args([td], NargsFlags())

        self.assertEqual(errors, [])
        self.assertEqual(
            [line.split(" ", 1)[1] for line in results],
            [
                "sum contains unused parameter b\n",
                "nest contains unused parameter d\n",
                "ok contains unused parameter f\n",
            ],
        )

    def test_tests_toggle(self):
        with tempfile.TemporaryDirectory() as td:
            Path(td, "lib.go").write_text("package lib\n\nfunc Lib(x int) {}\n", encoding="utf-8")
            Path(td, "lib_test.go").write_text("package lib\n\nfunc helper(y int) {}\n", encoding="utf-8")

            with_tests, _exit, _errors = check_for_unused_function_args([td], NargsFlags())
            without_tests, _exit, _errors = check_for_unused_function_args([td], NargsFlags(include_tests=False))

        self.assertEqual(len(with_tests), 2)
        self.assertEqual(len(without_tests), 1)
        self.assertIn("Lib contains unused parameter x", without_tests[0])


if __name__ == "__main__":
    unittest.main()
