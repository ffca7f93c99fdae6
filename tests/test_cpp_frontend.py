import os
import tempfile
import textwrap
import unittest
from pathlib import Path

from ast_parser import ParseCppError, parse_cpp_file
from cpp_tree import build_cpp_unit
from nargs import check_for_unused_function_args, check_units
from nargs_flags import NargsFlags


ROOT = Path(__file__).resolve().parents[1]


def analyze_cpp(code, filename="fixture.cpp", flags=None):
    with tempfile.TemporaryDirectory() as td:
        src = Path(td) / filename
        src.write_text(textwrap.dedent(code).lstrip("\n"), encoding="utf-8")
        cwd = os.getcwd()
        os.chdir(td)
        try:
            unit = build_cpp_unit(parse_cpp_file(str(src)), filename)
        finally:
            os.chdir(cwd)
    results, _exit = check_units([unit], flags or NargsFlags())
    return results


class CppScenarioTest(unittest.TestCase):
    def test_testdata(self):
        cwd = os.getcwd()
        os.chdir(ROOT)
        try:
            results, exit_with_status, errors = check_for_unused_function_args(["testdata/test.cpp"], NargsFlags())
        finally:
            os.chdir(cwd)

        self.assertEqual(
            results,
            [
                "testdata/test.cpp:1 add contains unused parameter c\n",
                "testdata/test.cpp:5 apply contains unused parameter unused\n",
                "testdata/test.cpp:6 closure contains unused parameter n\n",
            ],
        )
        self.assertTrue(exit_with_status)
        self.assertEqual(errors, [])

    def test_capture_by_reference_marks_outer_parameter(self):
        results = analyze_cpp(
            """
            int outer(int r) {
                auto inner = [&](int n) { return r; };
                return inner(0);
            }
            """
        )
        self.assertEqual(results, ["fixture.cpp:2 inner contains unused parameter n\n"])

    def test_prototype_is_skipped(self):
        results = analyze_cpp(
            """
            int prototype(int x);
            """
        )
        self.assertEqual(results, [])

    def test_uses_in_control_flow(self):
        results = analyze_cpp(
            """
            int walk(int limit, int step, int flag, int pick) {
                int total = 0;
                for (int i = 0; i < limit; i += step) {
                    if (flag) {
                        total += i;
                    }
                }
                switch (pick) {
                case 1:
                    return total;
                default:
                    break;
                }
                return total > 0 ? total : -total;
            }
            """
        )
        self.assertEqual(results, [])

    def test_long_expression_chain(self):
        terms = " + ".join(["a"] * 2000)
        results = analyze_cpp(f"int sum(int a, int b) {{\n    return {terms};\n}}\n")
        self.assertEqual(results, ["fixture.cpp:1 sum contains unused parameter b\n"])

    def test_syntax_error_raises(self):
        with tempfile.TemporaryDirectory() as td:
            src = Path(td) / "broken.cpp"
            src.write_text("int broken( {\n", encoding="utf-8")
            with self.assertRaises(ParseCppError):
                parse_cpp_file(str(src))


if __name__ == "__main__":
    unittest.main()
