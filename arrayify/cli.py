#!/usr/bin/env python3

# Turn a file into a C const char array which can be compiled into code.

from __future__ import annotations

import argparse
import pathlib
import re
import sys

if __package__ is None or __package__ == "":
    sys.path.insert(0, str(pathlib.Path(__file__).resolve().parents[1]))

from arrayify.transcoder import LINE_LENGTH, TOOL_NAME, effective_line_length, encode_text, transcode

DIR_SEPARATORS = re.compile(r"[\\/]")
EXT_SEPARATOR = "."
OUTPUT_FILE_EXTENSION = "array"


def base_name(path: str) -> str:
    """Strip any directories and everything from the first '.' onwards."""
    parts = [part for part in DIR_SEPARATORS.split(path) if part]
    base = parts[-1] if parts else path
    stems = [stem for stem in base.split(EXT_SEPARATOR) if stem]
    return stems[0] if stems else base


def exe_name(argv0: str) -> str:
    name = base_name(argv0)
    if not name or name == "__main__":
        return TOOL_NAME
    return name


def display(text: str) -> str:
    return encode_text(text).decode("utf-8", "replace")


def default_output_path(input_path: str) -> str:
    return f"{base_name(input_path)}{EXT_SEPARATOR}{OUTPUT_FILE_EXTENSION}"


def build_parser(prog: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=prog,
        description="Take a text file and create from it a C const char array which can be compiled into code.",
        epilog=f"For example:\n    {prog} input.txt -n fred -l 120 -o output.blah -b",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        exit_on_error=False,
    )
    parser.add_argument("input_file", nargs="?", help="the input text file")
    parser.add_argument(
        "-n",
        dest="name",
        help="name for the array (if not specified input_file, without file extension, will be used)",
    )
    parser.add_argument(
        "-l",
        dest="line_length",
        type=int,
        default=LINE_LENGTH,
        help=f"length of each line in the output file ({LINE_LENGTH} by default)",
    )
    parser.add_argument(
        "-o",
        dest="output_file",
        help=f"output file (if not specified the output file is input_file with extension "
        f"{EXT_SEPARATOR}{OUTPUT_FILE_EXTENSION}); if the output file exists it will be overwritten",
    )
    parser.add_argument(
        "-b",
        dest="bare",
        action="store_true",
        help="bare; no topping/tailing comment lines will be added to the output",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    prog = exe_name(sys.argv[0])
    parser = build_parser(prog)
    try:
        args, unknown = parser.parse_known_args(argv)
    except argparse.ArgumentError as exc:
        print(f"{prog}: {exc}")
        parser.print_help(sys.stdout)
        return 1

    if args.input_file is None or unknown:
        parser.print_help(sys.stdout)
        return 1

    name = args.name or base_name(args.input_file)
    output_file = args.output_file or default_output_path(args.input_file)

    line_length = effective_line_length(name, args.line_length)
    if line_length != args.line_length:
        print(f"Using line length {line_length} as {args.line_length} is less than the minimum required to print something.")

    try:
        source = open(args.input_file, "rb")
    except OSError as exc:
        print(f"Cannot open input file {display(args.input_file)} ({exc.strerror}).", file=sys.stderr)
        parser.print_help(sys.stdout)
        return 1

    with source:
        try:
            sink = open(output_file, "wb")
        except OSError as exc:
            print(f"Cannot open output file {display(output_file)} ({exc.strerror}).", file=sys.stderr)
            parser.print_help(sys.stdout)
            return 1

        with sink:
            print(
                f'Arrifying file "{display(args.input_file)}", naming array "{display(name)}", using {line_length} character lines '
                f'and writing output to "{display(output_file)}"{" bare." if args.bare else "."}'
            )
            try:
                lines_written = transcode(
                    source,
                    sink,
                    name,
                    line_length=line_length,
                    bare=args.bare,
                    input_name=args.input_file,
                    tool_name=prog,
                )
            except MemoryError:
                print("Cannot allocate memory for output buffer.", file=sys.stderr)
                return 1
            except OSError as exc:
                print(f"Failed to convert {display(args.input_file)} into {display(output_file)}: {exc}", file=sys.stderr)
                return 1

    print(f"Done: {lines_written} line(s) written to file.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
