"""csconv CLI - convert a Java subset file to pseudocode."""

from __future__ import annotations

import json
import logging
import sys

from .backend.styles import DEFAULT_STYLE, STYLE_IDS
from .pipeline import convert


USAGE: str = """\
csconv [OPTIONS] [INPUT]

Convert a Java teaching subset program to pseudocode.
Reads INPUT, or stdin when INPUT is omitted or '-'.

Options:
  --style ID     Output style (default: """ + DEFAULT_STYLE + """)
  --json         Print the result as a JSON document
  -o FILE        Write pseudocode to FILE instead of stdout
  --verbose      Log pipeline stages to stderr
  --list-styles  Print the available style ids
  --help         Show this help message
"""


def _read_input(filepath: str) -> str | None:
    """Read the source text; None after reporting an I/O or decoding failure."""
    if filepath == "" or filepath == "-":
        return sys.stdin.read()
    try:
        with open(filepath, "rb") as f:
            raw = f.read()
    except FileNotFoundError:
        print("csconv: " + filepath + ": No such file or directory", file=sys.stderr)
        return None
    except OSError as e:
        print("csconv: " + filepath + ": " + str(e), file=sys.stderr)
        return None
    try:
        return raw.decode("utf-8")
    except ValueError:
        print("csconv: " + filepath + ": invalid utf-8", file=sys.stderr)
        return None


def _write_output(text: str, out_path: str) -> bool:
    if out_path == "":
        print(text)
        return True
    try:
        with open(out_path, "w", encoding="utf-8") as f:
            f.write(text + "\n")
    except OSError as e:
        print("csconv: " + out_path + ": " + str(e), file=sys.stderr)
        return False
    return True


def main(argv: list[str] | None = None) -> int:
    args = argv if argv is not None else sys.argv[1:]
    filepath: str = ""
    out_path: str = ""
    style: str | None = None
    as_json = False
    verbose = False
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--help" or arg == "-h":
            print(USAGE, end="")
            return 0
        elif arg == "--list-styles":
            for style_id in STYLE_IDS:
                print(style_id)
            return 0
        elif arg == "--style" or arg == "-o":
            if i + 1 >= len(args):
                print("csconv: " + arg + " requires a value", file=sys.stderr)
                return 2
            if arg == "--style":
                style = args[i + 1]
            else:
                out_path = args[i + 1]
            i += 2
        elif arg.startswith("--style="):
            style = arg[len("--style=") :]
            i += 1
        elif arg == "--json":
            as_json = True
            i += 1
        elif arg == "--verbose" or arg == "-v":
            verbose = True
            i += 1
        elif arg.startswith("-") and arg != "-":
            print("csconv: unknown flag '" + arg + "'", file=sys.stderr)
            return 2
        elif filepath == "":
            filepath = arg
            i += 1
        else:
            print("csconv: unexpected argument '" + arg + "'", file=sys.stderr)
            return 2

    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s: %(message)s",
    )

    source = _read_input(filepath)
    if source is None:
        return 1

    result = convert(source, style)
    if as_json:
        document = json.dumps(result.to_dict(), indent=2)
        if not result.ok:
            print(document)
            return 1
        return 0 if _write_output(document, out_path) else 1
    if not result.ok:
        for error in result.errors:
            print("error: " + str(error), file=sys.stderr)
        return 1
    return 0 if _write_output(result.pseudocode or "", out_path) else 1


if __name__ == "__main__":
    sys.exit(main())
