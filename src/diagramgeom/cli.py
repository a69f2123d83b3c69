"""Command-line interface for diagramgeom transform and connector workflows."""
from __future__ import annotations

import argparse
import json
import logging
import math
import os
import sys
import traceback
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

from .affine import AffineTransform
from .arrowheads import FatArrowheadType, ThinArrowheadType
from .connector import Connector, FatConnectorStyle, LineType, ThinConnectorStyle
from .errors import DiagramGeomError, ElementNotFoundError
from .geometry import Vector2D
from .offset import JoinType
from .resources import load_cheatsheet
from .svg import SvgTree, connector_document, render_in_root
from .transforms import TransformList

COMMANDS = "transform, ctm, outline, connector, cheatsheet"


@dataclass
class CliError(Exception):
    code: str
    message: str
    hint: Optional[str] = None
    exit_code: int = 1
    file: Optional[str] = None
    line: Optional[int] = None
    column: Optional[int] = None
    retryable: bool = True


class UsageError(Exception):
    pass


class FriendlyArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # pragma: no cover - argparse callback
        raise UsageError(message)


def _add_source_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("input", nargs="?", help="Input .svg file")
    parser.add_argument("--text", help="Raw SVG source")
    parser.add_argument("--id", required=True, help="Element id")


def _build_parser() -> argparse.ArgumentParser:
    parser = FriendlyArgumentParser(
        prog="diagramgeom",
        description="Inspect SVG transforms and build connector geometry.",
    )
    parser.add_argument("--error-format", choices=["text", "json"], default="text")
    parser.add_argument("--debug", action="store_true")

    subparsers = parser.add_subparsers(dest="command")

    transform_parser = subparsers.add_parser("transform", help="Parse a transform list")
    transform_parser.add_argument("transform", help="SVG transform attribute text")
    transform_parser.add_argument("--json", action="store_true", help="Emit JSON")

    ctm_parser = subparsers.add_parser("ctm", help="Cumulative transform of an element")
    _add_source_arguments(ctm_parser)
    ctm_parser.add_argument("--json", action="store_true", help="Emit JSON")

    outline_parser = subparsers.add_parser("outline", help="Root-space path data of an element")
    _add_source_arguments(outline_parser)

    connector_parser = subparsers.add_parser(
        "connector",
        help="Draw a connector as SVG",
        description="Points are X,Y; use --origin=-5,3 for negative coordinates.",
    )
    connector_parser.add_argument("--origin", required=True, metavar="X,Y")
    connector_parser.add_argument("--target", required=True, metavar="X,Y")
    connector_parser.add_argument("--via", action="append", default=[], metavar="X,Y", help="Midpoint (repeatable)")
    connector_parser.add_argument("--fat", action="store_true", help="Filled outline instead of a stroked line")
    connector_parser.add_argument("--head", help="Head arrowhead type")
    connector_parser.add_argument("--tail", help="Tail arrowhead type")
    connector_parser.add_argument("--size", type=float, default=10.0, help="Head size")
    connector_parser.add_argument("--tail-size", type=float, help="Tail size (defaults to --size)")
    connector_parser.add_argument(
        "--line-type", choices=[item.value for item in LineType], default=LineType.STRAIGHT.value
    )
    connector_parser.add_argument("--width", type=float, default=7.0, help="Fat connector width")
    connector_parser.add_argument("--join", choices=[item.value for item in JoinType], default=JoinType.MITER.value)
    connector_parser.add_argument("--stdout", action="store_true", help="Write SVG to stdout")
    connector_parser.add_argument("-o", "--output", help="Output .svg path")

    subparsers.add_parser("cheatsheet", help="Print quick reference")

    return parser


def _read_input(path: Optional[str], text: Optional[str]) -> tuple[str, str]:
    if path and text is not None:
        raise CliError(
            "E_ARGS",
            "--text cannot be combined with file input",
            hint="Use either FILE or --text.",
            exit_code=2,
        )

    if text is not None:
        return text, "<text>"

    if path:
        input_path = Path(path)
        if not input_path.exists():
            raise CliError(
                "E_IO_READ",
                f"input file not found: {input_path}",
                exit_code=2,
                file=str(input_path),
            )
        try:
            return input_path.read_text(), str(input_path)
        except OSError as exc:
            raise CliError(
                "E_IO_READ",
                f"failed to read input file: {input_path}",
                hint=str(exc),
                exit_code=2,
                file=str(input_path),
            )

    if sys.stdin.isatty():
        raise CliError(
            "E_ARGS",
            "no input provided",
            hint="Use FILE, --text, or pipe SVG into stdin.",
            exit_code=2,
        )

    data = sys.stdin.read()
    if not data.strip():
        raise CliError(
            "E_ARGS",
            "stdin was empty",
            hint="Pipe SVG content into stdin.",
            exit_code=2,
        )
    return data, "<stdin>"


def _write_text(path: Path, content: str) -> None:
    try:
        path.write_text(content)
    except OSError as exc:
        raise CliError(
            "E_IO_WRITE",
            f"failed to write output file: {path}",
            hint=str(exc),
            exit_code=4,
            file=str(path),
        )


def _parse_point(text: str, option: str) -> Vector2D:
    parts = text.split(",")
    try:
        if len(parts) != 2:
            raise ValueError(text)
        return Vector2D(float(parts[0]), float(parts[1]))
    except ValueError:
        raise CliError(
            "E_ARGS",
            f"{option} expects X,Y but got '{text}'",
            hint="Write points as two comma-separated numbers, e.g. 10,20.",
            exit_code=2,
        )


def _parse_choice(enum_type, value: Optional[str], option: str):
    if value is None:
        return None
    for item in enum_type:
        if item.value.lower() == value.lower():
            return item
    choices = ", ".join(item.value for item in enum_type)
    raise CliError(
        "E_ARGS",
        f"unknown {option} type '{value}'",
        hint=f"Choose one of: {choices}.",
        exit_code=2,
    )


def _matrix_list(m: AffineTransform) -> List[float]:
    return list(m.as_tuple())


def _coefficient(value: float) -> str:
    if not math.isfinite(value):
        return str(value)
    text = f"{value:.6f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def _matrix_text(m: AffineTransform) -> str:
    return "matrix(" + " ".join(_coefficient(value) for value in m.as_tuple()) + ")"


def _error_from_exception(exc: Exception) -> CliError:
    if isinstance(exc, CliError):
        return exc
    if isinstance(exc, ElementNotFoundError):
        return CliError(
            exc.code,
            str(exc),
            hint="Check id attributes in your SVG and retry --id.",
            exit_code=4,
            retryable=True,
        )
    if isinstance(exc, ET.ParseError):
        line, column = getattr(exc, "position", (None, None))
        return CliError(
            "E_PARSE_XML",
            f"failed to parse XML: {exc}",
            hint="Ensure input is well-formed XML and escape &, <, > in text.",
            exit_code=2,
            line=line,
            column=column,
            retryable=True,
        )
    if isinstance(exc, DiagramGeomError):
        return CliError(
            exc.code,
            str(exc),
            hint="Check the element kinds and connector parameters.",
            exit_code=3,
            retryable=True,
        )
    return CliError(
        "E_INTERNAL",
        str(exc) or exc.__class__.__name__,
        hint="Re-run with --debug to see traceback.",
        exit_code=1,
        retryable=False,
    )


def _emit_error(err: CliError, *, error_format: str) -> None:
    if error_format == "json":
        payload = {
            "ok": False,
            "code": err.code,
            "message": err.message,
            "file": err.file,
            "line": err.line,
            "column": err.column,
            "hint": err.hint,
            "retryable": err.retryable,
        }
        sys.stderr.write(json.dumps(payload) + "\n")
        return

    sys.stderr.write(f"error[{err.code}]: {err.message}\n")
    if err.hint:
        sys.stderr.write(f"hint: {err.hint}\n")


def _handle_transform(args: argparse.Namespace) -> int:
    transforms = TransformList.parse(args.transform)
    matrix = transforms.to_affine()
    if args.json:
        payload = {
            "ok": True,
            "ops": [op.to_svg() for op in transforms],
            "matrix": _matrix_list(matrix),
        }
        print(json.dumps(payload))
        return 0
    if transforms:
        print(transforms.to_svg())
    print(_matrix_text(matrix))
    return 0


def _handle_ctm(args: argparse.Namespace) -> int:
    source, _source_name = _read_input(args.input, args.text)
    tree = SvgTree.from_string(source)
    matrix = tree.cumulative_transform(tree.find(args.id))
    if args.json:
        print(json.dumps({"ok": True, "id": args.id, "matrix": _matrix_list(matrix)}))
        return 0
    print(_matrix_text(matrix))
    return 0


def _handle_outline(args: argparse.Namespace) -> int:
    source, _source_name = _read_input(args.input, args.text)
    tree = SvgTree.from_string(source)
    path = render_in_root(tree, tree.find(args.id))
    print(path.to_svg_d())
    return 0


def _handle_connector(args: argparse.Namespace) -> int:
    if args.stdout and args.output:
        raise CliError(
            "E_ARGS",
            "--stdout and --output are mutually exclusive",
            hint="Choose either --stdout or --output.",
            exit_code=2,
        )
    if args.size < 0 or (args.tail_size is not None and args.tail_size < 0):
        raise CliError(
            "E_ARGS",
            "arrowhead sizes must be >= 0",
            hint="Use a non-negative --size / --tail-size.",
            exit_code=2,
        )

    origin = _parse_point(args.origin, "--origin")
    target = _parse_point(args.target, "--target")
    midpoints = [_parse_point(value, "--via") for value in args.via]

    if args.fat:
        style = FatConnectorStyle(
            head_size=args.size,
            tail_size=args.tail_size,
            width=args.width,
            join_type=JoinType(args.join),
        )
        head = _parse_choice(FatArrowheadType, args.head, "--head")
        tail = _parse_choice(FatArrowheadType, args.tail, "--tail")
    else:
        style = ThinConnectorStyle(
            head_size=args.size,
            tail_size=args.tail_size,
            line_type=LineType(args.line_type),
        )
        head = _parse_choice(ThinArrowheadType, args.head, "--head")
        tail = _parse_choice(ThinArrowheadType, args.tail, "--tail")
    if head is not None:
        style.head_type = head
    if tail is not None:
        style.tail_type = tail

    connector = Connector(origin, target, midpoints, style, id="connector")
    svg_text = connector_document([connector])

    if not args.output:
        sys.stdout.write(svg_text)
        if not svg_text.endswith("\n"):
            sys.stdout.write("\n")
        return 0

    output_path = Path(args.output)
    _write_text(output_path, svg_text + "\n")
    print(f"Wrote {output_path}")
    return 0


def main(argv: Optional[Iterable[str]] = None) -> int:
    raw_argv = list(argv) if argv is not None else sys.argv[1:]
    parser = _build_parser()

    if not raw_argv:
        err = CliError(
            "E_ARGS",
            "missing subcommand",
            hint=f"Use one of: {COMMANDS}.",
            exit_code=2,
        )
        _emit_error(err, error_format="text")
        return err.exit_code

    debug_enabled = "--debug" in raw_argv or os.getenv("DIAGRAMGEOM_DEBUG") == "1"
    if debug_enabled:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="%(levelname)s %(name)s: %(message)s",
        )
    error_format = "text"
    if "--error-format" in raw_argv:
        idx = raw_argv.index("--error-format")
        if idx + 1 < len(raw_argv):
            error_format = raw_argv[idx + 1]

    try:
        args = parser.parse_args(raw_argv)
        error_format = args.error_format

        if args.command == "transform":
            return _handle_transform(args)
        if args.command == "ctm":
            return _handle_ctm(args)
        if args.command == "outline":
            return _handle_outline(args)
        if args.command == "connector":
            return _handle_connector(args)
        if args.command == "cheatsheet":
            print(load_cheatsheet())
            return 0

        raise CliError(
            "E_ARGS",
            "missing subcommand",
            hint=f"Use one of: {COMMANDS}.",
            exit_code=2,
        )
    except UsageError as exc:
        err = CliError(
            "E_ARGS",
            str(exc),
            hint=f"Use subcommands: {COMMANDS}.",
            exit_code=2,
        )
        _emit_error(err, error_format=error_format)
        return err.exit_code
    except Exception as exc:  # pragma: no cover - exercised in integration tests
        err = _error_from_exception(exc)
        _emit_error(err, error_format=error_format)
        if debug_enabled:
            traceback.print_exc(file=sys.stderr)
        return err.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
