"""``apon`` command line tool: convert between APON and JSON, check files.

Usage::

    apon to-json config.apon          # APON → JSON on stdout
    apon from-json --indent 4 < data.json
    apon check a.apon b.apon          # exit status 1 if any file is malformed
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import IO

from .errors import AponError
from .parser import parse
from .serializer import stringify

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _read_source(path: str | None) -> str:
    """Read *path*, or stdin when it is ``None`` or ``-``."""
    if path is None or path == "-":
        return sys.stdin.read()
    with open(path, encoding="utf-8") as fh:
        return fh.read()


def _error(message: str, dest: IO[str]) -> int:
    print(f"error: {message}", file=dest)
    return 1


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def _cmd_to_json(args: argparse.Namespace) -> int:
    value = parse(_read_source(args.file))
    print(json.dumps(value, indent=args.indent, ensure_ascii=False))
    return 0


def _cmd_from_json(args: argparse.Namespace) -> int:
    value = json.loads(_read_source(args.file))
    print(stringify(value, args.indent))
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    status = 0
    for path in args.files:
        try:
            parse(_read_source(path))
        except (AponError, OSError) as exc:
            print(f"{path}: {exc}", file=sys.stderr)
            status = 1
        else:
            print(f"{path}: OK")
    return status


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="apon", description="Convert and check APON documents."
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="enable debug logging"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    to_json = sub.add_parser("to-json", help="parse APON and print JSON")
    to_json.add_argument("file", nargs="?", help="APON file (default: stdin)")
    to_json.add_argument("--indent", type=int, default=2, help="JSON indent width")
    to_json.set_defaults(func=_cmd_to_json)

    from_json = sub.add_parser("from-json", help="read JSON and print APON")
    from_json.add_argument("file", nargs="?", help="JSON file (default: stdin)")
    from_json.add_argument("--indent", type=int, default=2, help="APON indent width")
    from_json.set_defaults(func=_cmd_from_json)

    check = sub.add_parser("check", help="report whether APON files parse")
    check.add_argument("files", nargs="+", help="APON files to check")
    check.set_defaults(func=_cmd_check)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``apon`` console script and ``python -m apon``."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    logger.debug("running command %s", args.command)

    try:
        return args.func(args)
    except json.JSONDecodeError as exc:
        return _error(f"invalid JSON: {exc}", sys.stderr)
    except (AponError, OSError) as exc:
        return _error(str(exc), sys.stderr)


if __name__ == "__main__":
    sys.exit(main())
