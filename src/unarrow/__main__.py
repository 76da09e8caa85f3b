"""CLI entry point: `unarrow file.js` or `python -m unarrow < file.js`."""

import json
import logging
import sys
from pathlib import Path


def main(argv=None) -> int:
    import argparse
    from .compiler.driver import CompilerDriver
    from .utils.io_utils import read_source_file, read_stream, write_output_file

    parser = argparse.ArgumentParser(
        prog="unarrow",
        description="Rewrite JavaScript arrow functions into ordinary function expressions.",
    )
    parser.add_argument("file", type=Path, nargs="?", help="JavaScript source file (default: read stdin)")
    parser.add_argument("-o", "--output", type=Path, help="Write code here instead of stdout")
    parser.add_argument("--source-file-name", help="Source name recorded in locations and the source map")
    parser.add_argument("--source-map-name", help="Produce a source map with this file name")
    parser.add_argument("--strict", action="store_true",
                        help="Treat `arguments` in an arrow outside any function as an error")
    parser.add_argument("--dump-ast", action="store_true", help="Dump the tree after each pass to stderr")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s: %(levelname)s: %(message)s",
    )

    if args.file is not None:
        path = args.file
        if not path.exists():
            sys.stderr.write(f"unarrow: error: file not found: {path}\n")
            return 1
        if not path.is_file():
            sys.stderr.write(f"unarrow: error: not a file: {path}\n")
            return 1
        try:
            source = read_source_file(path)
        except (OSError, UnicodeDecodeError) as e:
            sys.stderr.write(f"unarrow: error: could not read file: {e}\n")
            return 1
        source_file_name = args.source_file_name or str(path)
    else:
        source = read_stream()
        source_file_name = args.source_file_name

    result = CompilerDriver().compile(
        source,
        source_file_name=source_file_name,
        source_map_name=args.source_map_name,
        strict=args.strict,
        dump_ast=args.dump_ast or None,
    )

    if result.diagnostics:
        sys.stderr.write(result.format_diagnostics() + "\n")
    if not result.success:
        return 1

    if args.output is not None:
        write_output_file(args.output, result.code)
        if result.map is not None:
            map_path = args.output.parent / args.source_map_name
            write_output_file(map_path, json.dumps(result.map))
    else:
        sys.stdout.write(result.code)
        if result.map is not None:
            sys.stderr.write("unarrow: warning: source map requested without -o; not written\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
