"""Declarative Lark front end for Plume.

The grammar below describes the same language as the hand-written
recursive-descent parser in `plume.parser`. A Lark LALR parser produces a
parse tree that `PlumeTransformer` turns into the very same AST classes
(with equivalent tokens), so the two front ends can be compared node for
node. Unlike the hand-written parser there is no panic-mode recovery: the
first syntax error is raised as a `PlumeSyntaxError`.
"""

from __future__ import annotations

from functools import lru_cache
from typing import List

from lark import Lark, Transformer, UnexpectedCharacters, UnexpectedInput, UnexpectedToken, v_args
from lark import Token as LarkToken

from .ast import (
    Stmt, Literal, Grouping, Unary, Binary, Logical, Variable, Assign, Call,
    Index, AssignIndex, Expression, Print, Var, Block, If, While, For,
    Function, Return,
)
from .errors import Diagnostic, PlumeSyntaxError
from .tokens import Token, TokenType


PLUME_GRAMMAR = r"""
    start: declaration*

    ?declaration: var_decl
                | fun_decl
                | statement

    var_decl: "var" NAME ["=" expression] ";"
    fun_decl: "fun" NAME "(" [parameters] ")" block
    parameters: NAME ("," NAME)*

    ?statement: print_stmt
              | if_stmt
              | while_stmt
              | for_stmt
              | return_stmt
              | block
              | expr_stmt

    print_stmt: "print" expression ";"
    if_stmt: "if" "(" expression ")" statement ["else" statement]
    while_stmt: "while" "(" expression ")" statement
    for_stmt: "for" "(" for_init [expression] ";" [expression] ")" statement
    for_init: var_decl | expr_stmt | ";"
    return_stmt: RETURN [expression] ";"
    block: "{" declaration* "}"
    expr_stmt: expression ";"

    // Expressions, lowest precedence first
    ?expression: assignment
    ?assignment: NAME "=" assignment -> assign
               | index_target "=" assignment -> assign_index
               | logic_or
    index_target: call "[" expression "]"
    ?logic_or: logic_and (OR logic_and)*
    ?logic_and: equality (AND equality)*
    ?equality: comparison ((BANG_EQUAL | EQUAL_EQUAL) comparison)*
    ?comparison: term ((GREATER | GREATER_EQUAL | LESS | LESS_EQUAL) term)*
    ?term: factor ((MINUS | PLUS) factor)*
    ?factor: unary ((SLASH | STAR) unary)*
    ?unary: (BANG | MINUS) unary -> unary_op
          | call
    ?call: primary
         | call "(" [arguments] ")" -> call_expr
         | call "[" expression "]" -> index_expr
    arguments: expression ("," expression)*
    ?primary: NUMBER -> number
            | STRING -> string
            | "true" -> true_lit
            | "false" -> false_lit
            | "nil" -> nil_lit
            | NAME -> variable
            | "(" expression ")" -> grouping

    // Tokens
    AND: "and"
    OR: "or"
    RETURN: "return"
    BANG: "!"
    BANG_EQUAL: "!="
    EQUAL_EQUAL: "=="
    GREATER: ">"
    GREATER_EQUAL: ">="
    LESS: "<"
    LESS_EQUAL: "<="
    MINUS: "-"
    PLUS: "+"
    SLASH: "/"
    STAR: "*"
    NUMBER: /[0-9]+(\.[0-9]+)?/
    STRING: /"[^"]*"/
    NAME: /[^\W\d]\w*/

    WHITESPACE: /[ \t\r\n]+/
    %ignore WHITESPACE

    // Comments
    LINE_COMMENT: /\/\/[^\n]*/
    %ignore LINE_COMMENT
    BLOCK_COMMENT: /\/\*[\s\S]*?\*\//
    %ignore BLOCK_COMMENT
"""


@lru_cache(maxsize=None)
def get_parser() -> Lark:
    """Build (once) the LALR parser for the Plume grammar."""
    return Lark(
        PLUME_GRAMMAR,
        parser='lalr',
        lexer='basic',
        propagate_positions=True,
        maybe_placeholders=True,
    )


def name_token(tok: LarkToken) -> Token:
    return Token(TokenType.IDENTIFIER, str(tok), None, tok.line)


def operator_token(tok: LarkToken) -> Token:
    # terminal names match TokenType member names
    return Token(TokenType[tok.type], str(tok), None, tok.line)


class PlumeTransformer(Transformer):
    """Transforms the raw parse tree into a Plume AST."""

    def start(self, items):
        return list(items)

    # Declarations and statements

    def var_decl(self, items):
        name, initializer = items
        return Var(name_token(name), initializer)

    def fun_decl(self, items):
        name, params, body = items
        return Function(name_token(name), params or [], body.statements)

    def parameters(self, items):
        return [name_token(tok) for tok in items]

    def print_stmt(self, items):
        return Print(items[0])

    def if_stmt(self, items):
        condition, then_branch, else_branch = items
        return If(condition, then_branch, else_branch)

    def while_stmt(self, items):
        condition, body = items
        return While(condition, body)

    def for_stmt(self, items):
        initializer, condition, increment, body = items
        return For(initializer, condition, increment, body).desugar()

    def for_init(self, items):
        # a bare ';' leaves no children
        return items[0] if items else None

    def return_stmt(self, items):
        keyword, value = items
        return Return(operator_token(keyword), value)

    def block(self, items):
        return Block(list(items))

    def expr_stmt(self, items):
        return Expression(items[0])

    # Expressions

    def assign(self, items):
        name, value = items
        return Assign(name_token(name), value)

    def assign_index(self, items):
        target, value = items
        return AssignIndex(target.target, target.bracket, target.index, value)

    @v_args(meta=True)
    def index_target(self, meta, items):
        target, index = items
        return Index(target, Token(TokenType.RIGHT_BRACKET, ']', None, meta.end_line), index)

    @v_args(meta=True)
    def index_expr(self, meta, items):
        target, index = items
        return Index(target, Token(TokenType.RIGHT_BRACKET, ']', None, meta.end_line), index)

    @v_args(meta=True)
    def call_expr(self, meta, items):
        callee, arguments = items
        paren = Token(TokenType.RIGHT_PAREN, ')', None, meta.end_line)
        return Call(callee, paren, arguments or [])

    def arguments(self, items):
        return list(items)

    def fold(self, cls, items):
        # items pattern: expr (op expr)*, folded left-associatively
        expr = items[0]
        for i in range(1, len(items), 2):
            expr = cls(expr, operator_token(items[i]), items[i + 1])
        return expr

    def logic_or(self, items):
        return self.fold(Logical, items)

    def logic_and(self, items):
        return self.fold(Logical, items)

    def equality(self, items):
        return self.fold(Binary, items)

    def comparison(self, items):
        return self.fold(Binary, items)

    def term(self, items):
        return self.fold(Binary, items)

    def factor(self, items):
        return self.fold(Binary, items)

    def unary_op(self, items):
        operator, operand = items
        return Unary(operator_token(operator), operand)

    def number(self, items):
        return Literal(float(items[0]))

    def string(self, items):
        return Literal(str(items[0])[1:-1])

    def true_lit(self, items):
        return Literal(True)

    def false_lit(self, items):
        return Literal(False)

    def nil_lit(self, items):
        return Literal(None)

    def variable(self, items):
        return Variable(name_token(items[0]))

    def grouping(self, items):
        return Grouping(items[0])


def to_diagnostic(error: UnexpectedInput) -> Diagnostic:
    if isinstance(error, UnexpectedCharacters):
        return Diagnostic(error.line, '', f"Unexpected character '{error.char}'.")
    if isinstance(error, UnexpectedToken):
        token = error.token
        if token.type == '$END':
            return Diagnostic(token.line or 1, ' at end', 'Unexpected end of input.')
        return Diagnostic(token.line, f" at '{token}'", 'Unexpected token.')
    return Diagnostic(getattr(error, 'line', 1), '', str(error))


def parse_with_lark(source: str) -> List[Stmt]:
    """Parse Plume source with the Lark grammar into a list of statements."""
    try:
        tree = get_parser().parse(source)
    except UnexpectedInput as e:
        raise PlumeSyntaxError([to_diagnostic(e)]) from e
    return PlumeTransformer().transform(tree)
