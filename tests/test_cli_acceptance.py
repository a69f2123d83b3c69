from __future__ import annotations

import io
import json
import sys
import tempfile
import unittest
import xml.etree.ElementTree as ET
from pathlib import Path
from unittest import mock

TESTS_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = TESTS_DIR.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from diagramgeom import cli

NESTED_SVG = """
<svg xmlns="http://www.w3.org/2000/svg">
  <g transform="scale(2)">
    <rect id="r" x="0" y="0" width="10" height="5" transform="translate(5 0)"/>
    <text id="t">label</text>
  </g>
</svg>
""".strip()


class CLIAcceptanceTests(unittest.TestCase):
    def run_cli(self, argv: list[str], stdin_text: str = "") -> tuple[int, str, str]:
        stdout = io.StringIO()
        stderr = io.StringIO()
        stdin = io.StringIO(stdin_text)
        with mock.patch("sys.stdout", stdout), mock.patch("sys.stderr", stderr), mock.patch("sys.stdin", stdin):
            code = cli.main(argv)
        return code, stdout.getvalue(), stderr.getvalue()

    def test_requires_subcommand(self) -> None:
        code, _out, err = self.run_cli([])
        self.assertEqual(code, 2)
        self.assertIn("E_ARGS", err)
        self.assertIn("subcommand", err)

    def test_error_format_json_shape(self) -> None:
        code, _out, err = self.run_cli(["--error-format", "json", "connector"])
        self.assertEqual(code, 2)
        payload = json.loads(err)
        self.assertEqual(payload["code"], "E_ARGS")
        self.assertFalse(payload["ok"])

    def test_transform_text(self) -> None:
        code, out, err = self.run_cli(["transform", "translate(10 20) rotate(90) bogus(1)"])
        self.assertEqual(code, 0, err)
        self.assertEqual(out.splitlines(), ["translate(10 20) rotate(90)", "matrix(0 1 -1 0 10 20)"])

    def test_transform_json(self) -> None:
        code, out, err = self.run_cli(["transform", "matrix(1,0,0,1,30,40)", "--json"])
        self.assertEqual(code, 0, err)
        payload = json.loads(out)
        self.assertTrue(payload["ok"])
        self.assertEqual(payload["ops"], ["matrix(1 0 0 1 30 40)"])
        self.assertEqual(payload["matrix"], [1, 0, 0, 1, 30, 40])

    def test_ctm_from_text(self) -> None:
        code, out, err = self.run_cli(["ctm", "--text", NESTED_SVG, "--id", "r"])
        self.assertEqual(code, 0, err)
        self.assertEqual(out.strip(), "matrix(2 0 0 2 10 0)")

    def test_ctm_from_file_and_stdin(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            src = Path(td) / "doc.svg"
            src.write_text(NESTED_SVG)
            code, out, err = self.run_cli(["ctm", str(src), "--id", "r", "--json"])
            self.assertEqual(code, 0, err)
            self.assertEqual(json.loads(out)["matrix"], [2, 0, 0, 2, 10, 0])
        code, out, err = self.run_cli(["ctm", "--id", "r"], stdin_text=NESTED_SVG)
        self.assertEqual(code, 0, err)

    def test_missing_input_file(self) -> None:
        code, _out, err = self.run_cli(["ctm", "/nonexistent/doc.svg", "--id", "r"])
        self.assertEqual(code, 2)
        self.assertIn("E_IO_READ", err)

    def test_ctm_unknown_id(self) -> None:
        code, _out, err = self.run_cli(["--error-format", "json", "ctm", "--text", NESTED_SVG, "--id", "zzz"])
        self.assertEqual(code, 4)
        self.assertEqual(json.loads(err)["code"], "E_ID_NOT_FOUND")

    def test_malformed_xml(self) -> None:
        code, _out, err = self.run_cli(["--error-format", "json", "ctm", "--text", "<svg><g></svg>", "--id", "r"])
        self.assertEqual(code, 2)
        payload = json.loads(err)
        self.assertEqual(payload["code"], "E_PARSE_XML")
        self.assertIsNotNone(payload["line"])

    def test_outline(self) -> None:
        code, out, err = self.run_cli(["outline", "--text", NESTED_SVG, "--id", "r"])
        self.assertEqual(code, 0, err)
        self.assertEqual(out.strip(), "M 10 0 L 30 0 L 30 10 L 10 10 Z")

    def test_outline_unsupported_element(self) -> None:
        code, _out, err = self.run_cli(["outline", "--text", NESTED_SVG, "--id", "t"])
        self.assertEqual(code, 3)
        self.assertIn("E_UNSUPPORTED_ELEMENT", err)

    def test_connector_stdout(self) -> None:
        code, out, err = self.run_cli(
            ["connector", "--origin", "0,0", "--target", "100,0", "--head", "diamond", "--stdout"]
        )
        self.assertEqual(code, 0, err)
        root = ET.fromstring(out)
        paths = root.findall(".//{http://www.w3.org/2000/svg}path")
        self.assertEqual(len(paths), 2)
        self.assertEqual(paths[-1].get("d"), "M 0 0 L 90 0")

    def test_connector_writes_file(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            target = Path(td) / "arrow.svg"
            code, out, err = self.run_cli(
                [
                    "connector",
                    "--origin=-5,0",
                    "--target",
                    "100,50",
                    "--via",
                    "50,0",
                    "--fat",
                    "--tail",
                    "regular",
                    "--join",
                    "round",
                    "-o",
                    str(target),
                ]
            )
            self.assertEqual(code, 0, err)
            self.assertIn("Wrote", out)
            root = ET.fromstring(target.read_text())
            self.assertEqual(len(root.findall(".//{http://www.w3.org/2000/svg}path")), 1)

    def test_connector_orthogonal(self) -> None:
        code, out, err = self.run_cli(
            ["connector", "--origin", "0,0", "--target", "10,10", "--head", "none", "--line-type", "orthogonal"]
        )
        self.assertEqual(code, 0, err)
        self.assertIn('d="M 0 0 L 10 0 L 10 10"', out)

    def test_connector_argument_errors(self) -> None:
        code, _out, err = self.run_cli(["connector", "--origin", "0", "--target", "1,1"])
        self.assertEqual(code, 2)
        self.assertIn("--origin expects X,Y", err)

        code, _out, err = self.run_cli(["connector", "--origin", "0,0", "--target", "1,1", "--fat", "--head", "stick"])
        self.assertEqual(code, 2)
        self.assertIn("unknown --head type", err)

        code, _out, err = self.run_cli(
            ["connector", "--origin", "0,0", "--target", "1,1", "--stdout", "-o", "x.svg"]
        )
        self.assertEqual(code, 2)
        self.assertIn("mutually exclusive", err)

    def test_short_fat_connector_still_renders(self) -> None:
        code, out, err = self.run_cli(
            ["connector", "--origin", "0,0", "--target", "30,0", "--fat", "--tail", "regular"]
        )
        self.assertEqual(code, 0, err)
        (path,) = ET.fromstring(out).findall(".//{http://www.w3.org/2000/svg}path")
        self.assertTrue(path.get("d").startswith("M 15 3.5 L 15 6.5 L 30 0"))

    def test_coincident_fat_connector(self) -> None:
        code, out, err = self.run_cli(["connector", "--origin", "5,5", "--target", "5,5", "--fat", "--head", "none"])
        self.assertEqual(code, 0, err)
        self.assertIn('d="M 5 8.5 L 5 1.5 Z"', out)

    def test_cheatsheet(self) -> None:
        code, out, err = self.run_cli(["cheatsheet"])
        self.assertEqual(code, 0, err)
        self.assertIn("diagramgeom quick reference", out)
        self.assertIn("ballCenter", out)

    def test_debug_traceback_gate(self) -> None:
        argv = ["connector", "--origin", "0,0", "--target", "10,0"]
        with mock.patch("diagramgeom.cli.connector_document", side_effect=RuntimeError("boom")):
            code, _out, err = self.run_cli(argv)
            self.assertEqual(code, 1)
            self.assertIn("E_INTERNAL", err)
            self.assertNotIn("Traceback", err)

        with mock.patch("diagramgeom.cli.connector_document", side_effect=RuntimeError("boom")):
            code, _out, err = self.run_cli(["--debug"] + argv)
            self.assertEqual(code, 1)
            self.assertIn("Traceback", err)


if __name__ == "__main__":
    unittest.main()
