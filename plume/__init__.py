# Plume language package
# This package provides the scanner, parser and tree-walking interpreter for Plume.
from .errors import ErrorReporter, PlumeError, PlumeRuntimeError, PlumeSyntaxError
from .interpreter import Interpreter, parse_program, run_program
from .lark_parser import parse_with_lark
from .parser import Parser, parse
from .scanner import Scanner, scan

__all__ = [
    'scan',
    'parse',
    'parse_with_lark',
    'parse_program',
    'run_program',
    'Scanner',
    'Parser',
    'Interpreter',
    'ErrorReporter',
    'PlumeError',
    'PlumeRuntimeError',
    'PlumeSyntaxError',
]
