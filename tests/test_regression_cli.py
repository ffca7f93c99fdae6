import json
import subprocess
import sys
import tempfile
import textwrap
import unittest
from pathlib import Path


ROOT = Path(__file__).resolve().parents[1]
CLI = ROOT / "nargs_cli.py"
VENV_PY = ROOT / ".venv" / "bin" / "python"
PYTHON = VENV_PY if VENV_PY.exists() else Path(sys.executable)


def run_cli(*args):
    cmd = [str(PYTHON), str(CLI)] + list(args)
    return subprocess.run(
        cmd,
        cwd=ROOT,
        capture_output=True,
        text=True,
        check=False,
    )


def run_json(*args):
    proc = run_cli("--json", *args)
    if proc.returncode not in (0, 1):
        raise RuntimeError(f"CLI failed:\nSTDOUT:\n{proc.stdout}\nSTDERR:\n{proc.stderr}")
    return proc.returncode, json.loads(proc.stdout)


class RegressionCliTest(unittest.TestCase):
    def test_testdata_with_default_flags(self):
        code, payload = run_json("testdata/test.go")

        self.assertEqual(code, 1)
        self.assertTrue(payload["ok"])
        self.assertTrue(payload["exit_with_status"])
        self.assertEqual(
            payload["results"],
            [
                "testdata/test.go:4 funcOne contains unused parameter c\n",
                "testdata/test.go:11 funcTwo contains unused parameter c\n",
                "testdata/test.go:17 funcThree contains unused parameter recv\n",
                "testdata/test.go:28 closure contains unused parameter v\n",
                "testdata/test.go:35 unusedFunc contains unused parameter f\n",
            ],
        )

    def test_flag_switches(self):
        _code, payload = run_json("--no-receivers", "--named-returns", "testdata/test.go")

        results = payload["results"]
        self.assertFalse(any("recv" in line for line in results))
        self.assertIn("testdata/test.go:23 funcFour contains unused parameter namedReturn\n", results)
        self.assertEqual(payload["flags"]["include_receivers"], False)
        self.assertEqual(payload["flags"]["include_named_returns"], True)

    def test_no_set_exit_status_exits_zero(self):
        proc = run_cli("--no-set-exit-status", "testdata/test.go")

        self.assertEqual(proc.returncode, 0)
        self.assertIn("testdata/test.go:4 funcOne contains unused parameter c\n", proc.stdout)

    def test_clean_file_exits_zero(self):
        code, payload = run_json("testdata/success.go")

        self.assertEqual(code, 0)
        self.assertEqual(payload["results"], [])
        self.assertFalse(payload["exit_with_status"])

    def test_text_output_is_plain_lines(self):
        proc = run_cli("testdata/test.go")

        self.assertEqual(proc.returncode, 1)
        lines = proc.stdout.splitlines()
        self.assertEqual(len(lines), 5)
        self.assertEqual(lines[0], "testdata/test.go:4 funcOne contains unused parameter c")

    def test_parse_failure_is_reported_per_file(self):
        with tempfile.TemporaryDirectory() as td:
            bad = Path(td) / "bad.go"
            bad.write_text("package main\n\nfunc broken( {\n", encoding="utf-8")
            good = Path(td) / "good.go"
            good.write_text(
                textwrap.dedent(
                    """\
                    package main

                    func good(a int, b int) int {
                        return b
                    }
                    """
                ),
                encoding="utf-8",
            )

            code, payload = run_json(str(bad), str(good))

        self.assertEqual(code, 1)
        self.assertFalse(payload["ok"])
        self.assertEqual([e["path"] for e in payload["errors"]], [str(bad)])
        self.assertEqual(payload["results"], [f"{good}:3 good contains unused parameter a\n"])

    def test_unknown_option(self):
        proc = run_cli("--json", "--bogus")

        self.assertEqual(proc.returncode, 2)
        payload = json.loads(proc.stdout)
        self.assertFalse(payload["ok"])
        self.assertIn("--bogus", payload["error"])


if __name__ == "__main__":
    unittest.main()
