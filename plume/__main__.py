"""CLI entry point for the Plume interpreter.

Usage:
    python -m plume [-v|-vv|-vvv] [program_file]
    python -m plume --tokens <program_file>
    python -m plume --print-ast <program_file>
    python -m plume [-v...] --emit-ast <program_file>
    python -m plume [-v...] --ast <ast_json_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --tokens      Print the scanned tokens of the given file
  --print-ast   Print the parsed statements in prefix form
  --emit-ast    Parse the given file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file

Without a program file an interactive session starts. Each line is run
against the same interpreter, so declarations persist between lines; type
`exit` or `quit` (or send EOF) to leave.

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero.
"""

import argparse
import json
import sys
from pathlib import Path

from .ast import Stmt
from .ast_json import ast_to_obj, ast_from_obj
from .errors import ErrorReporter, PlumeRuntimeError
from .interpreter import Interpreter
from .parser import parse
from .printer import AstPrinter
from .scanner import scan

EXIT_SYNTAX_ERROR = 65
EXIT_RUNTIME_ERROR = 70
QUIT_WORDS = ('exit', 'quit')


def read_source(path_arg: str) -> str:
    program_file = Path(path_arg)
    if not program_file.exists():
        print(f"Error: file {program_file} not found", file=sys.stderr)
        sys.exit(1)
    with open(program_file, 'r', encoding='utf-8') as f:
        return f.read()


def parse_or_exit(source: str):
    reporter = ErrorReporter()
    statements = parse(scan(source, reporter), reporter)
    if reporter.had_error:
        sys.exit(EXIT_SYNTAX_ERROR)
    return statements


def run_statements(statements, debug_level: int) -> None:
    interpreter = Interpreter(debug_level=debug_level)
    try:
        interpreter.interpret(statements)
    except PlumeRuntimeError as e:
        print(str(e), file=sys.stderr)
        sys.exit(EXIT_RUNTIME_ERROR)
    finally:
        interpreter.close()


def repl(debug_level: int) -> None:
    interpreter = Interpreter(debug_level=debug_level)
    reporter = ErrorReporter()
    try:
        while True:
            try:
                line = input('> ')
            except EOFError:
                print()
                break
            if not line.strip():
                continue
            if line.strip().lower() in QUIT_WORDS:
                break
            reporter.reset()
            statements = parse(scan(line, reporter), reporter)
            if reporter.had_error:
                continue
            try:
                interpreter.interpret(statements)
            except PlumeRuntimeError as e:
                print(str(e), file=sys.stderr)
    finally:
        interpreter.close()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Plume language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--tokens', metavar='PLUME_FILE', help='print the tokens of the given file')
    group.add_argument('--print-ast', metavar='PLUME_FILE', help='print the AST of the given file in prefix form')
    group.add_argument('--emit-ast', metavar='PLUME_FILE', help='emit AST JSON for the given file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='Plume program file to execute')
    args = parser.parse_args(argv)

    # Token dump mode
    if args.tokens:
        for token in scan(read_source(args.tokens)):
            print(f" {token}")
        return

    # Prefix AST mode
    if args.print_ast:
        printer = AstPrinter()
        for stmt in parse_or_exit(read_source(args.print_ast)):
            print(printer.print(stmt))
        return

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        statements = parse_or_exit(read_source(args.emit_ast))
        obj = ast_to_obj(statements)
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(obj, out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    # Execute from AST JSON
    if args.ast:
        ast_path = Path(args.ast)
        if not ast_path.exists():
            print(f"Error: file {ast_path} not found", file=sys.stderr)
            sys.exit(1)
        try:
            with open(ast_path, 'r', encoding='utf-8') as f:
                statements = ast_from_obj(json.load(f))
            if not isinstance(statements, list) or not all(isinstance(s, Stmt) for s in statements):
                raise ValueError('expected a list of statements')
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            print(f"Error: invalid AST file {ast_path}: {e}", file=sys.stderr)
            sys.exit(1)
        run_statements(statements, args.v)
        return

    # Default: execute source file, or start the interactive session
    if not args.program:
        repl(args.v)
        return
    run_statements(parse_or_exit(read_source(args.program)), args.v)


if __name__ == '__main__':
    main()
