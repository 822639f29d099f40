"""Abstract Syntax Tree (AST) definitions for the Plume language.

The AST classes defined in this module represent the syntactic structure
of parsed Plume programs. Expressions derive from `Expr` and statements
from `Stmt`; the variant sets are closed and the interpreter dispatches
over them exhaustively. Nodes are immutable once built.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional

from .tokens import Token


@dataclass(frozen=True)
class Node:
    """Base class for all AST nodes."""
    pass


@dataclass(frozen=True)
class Expr(Node):
    pass


@dataclass(frozen=True)
class Stmt(Node):
    pass


# Expressions

@dataclass(frozen=True)
class Literal(Expr):
    value: Any  # float, str, bool or None


@dataclass(frozen=True)
class Grouping(Expr):
    expression: Expr


@dataclass(frozen=True)
class Unary(Expr):
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Logical(Expr):
    left: Expr
    operator: Token  # AND or OR
    right: Expr


@dataclass(frozen=True)
class Variable(Expr):
    name: Token


@dataclass(frozen=True)
class Assign(Expr):
    name: Token
    value: Expr


@dataclass(frozen=True)
class Call(Expr):
    callee: Expr
    paren: Token  # closing ')', used for error locations
    arguments: List[Expr]


@dataclass(frozen=True)
class Index(Expr):
    target: Expr
    bracket: Token  # closing ']'
    index: Expr


@dataclass(frozen=True)
class AssignIndex(Expr):
    target: Expr
    bracket: Token
    index: Expr
    value: Expr


# Statements

@dataclass(frozen=True)
class Expression(Stmt):
    expression: Expr


@dataclass(frozen=True)
class Print(Stmt):
    expression: Expr


@dataclass(frozen=True)
class Var(Stmt):
    name: Token
    initializer: Optional[Expr]


@dataclass(frozen=True)
class Block(Stmt):
    statements: List[Stmt]


@dataclass(frozen=True)
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt]


@dataclass(frozen=True)
class While(Stmt):
    condition: Expr
    body: Stmt


@dataclass(frozen=True)
class For(Stmt):
    initializer: Optional[Stmt]
    condition: Optional[Expr]
    increment: Optional[Expr]
    body: Stmt

    def desugar(self) -> Block:
        """Rewrite as `{ init; while (cond) { body; incr; } }`.

        A missing condition becomes literal `true`.
        """
        body = self.body
        if self.increment is not None:
            body = Block([body, Expression(self.increment)])
        condition = self.condition if self.condition is not None else Literal(True)
        loop = While(condition, body)
        if self.initializer is not None:
            return Block([self.initializer, loop])
        return Block([loop])


@dataclass(frozen=True)
class Function(Stmt):
    name: Token
    params: List[Token]
    body: List[Stmt]


@dataclass(frozen=True)
class Return(Stmt):
    keyword: Token
    value: Optional[Expr]
