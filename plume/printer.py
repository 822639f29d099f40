"""Prefix (Lisp-like) rendering of Plume ASTs, used for debugging and tests."""

from __future__ import annotations

from typing import Any, List

from .ast import (
    Node, Literal, Grouping, Unary, Binary, Logical, Variable, Assign, Call,
    Index, AssignIndex, Expression, Print, Var, Block, If, While, For,
    Function, Return,
)


class AstPrinter:
    def print(self, node: Node) -> str:
        if isinstance(node, Literal):
            return self.literal(node.value)
        if isinstance(node, Grouping):
            return self.parenthesize('group', node.expression)
        if isinstance(node, Unary):
            return self.parenthesize(node.operator.lexeme, node.right)
        if isinstance(node, (Binary, Logical)):
            return self.parenthesize(node.operator.lexeme, node.left, node.right)
        if isinstance(node, Variable):
            return node.name.lexeme
        if isinstance(node, Assign):
            return self.parenthesize(f"= {node.name.lexeme}", node.value)
        if isinstance(node, Call):
            return self.parenthesize('call', node.callee, *node.arguments)
        if isinstance(node, Index):
            return self.parenthesize('index', node.target, node.index)
        if isinstance(node, AssignIndex):
            return self.parenthesize('index=', node.target, node.index, node.value)
        if isinstance(node, Expression):
            return self.parenthesize(';', node.expression)
        if isinstance(node, Print):
            return self.parenthesize('print', node.expression)
        if isinstance(node, Var):
            if node.initializer is None:
                return f"(var {node.name.lexeme})"
            return self.parenthesize(f"var {node.name.lexeme}", node.initializer)
        if isinstance(node, Block):
            return self.parenthesize('block', *node.statements)
        if isinstance(node, If):
            if node.else_branch is None:
                return self.parenthesize('if', node.condition, node.then_branch)
            return self.parenthesize('if-else', node.condition, node.then_branch, node.else_branch)
        if isinstance(node, While):
            return self.parenthesize('while', node.condition, node.body)
        if isinstance(node, For):
            return self.print(node.desugar())
        if isinstance(node, Function):
            params = ' '.join(p.lexeme for p in node.params)
            return self.parenthesize(f"fun {node.name.lexeme} ({params})", *node.body)
        if isinstance(node, Return):
            if node.value is None:
                return '(return)'
            return self.parenthesize('return', node.value)
        raise NotImplementedError(f"print: unexpected node type {type(node)}")

    def parenthesize(self, name: str, *parts: Node) -> str:
        pieces: List[str] = [name]
        pieces.extend(self.print(part) for part in parts)
        return '(' + ' '.join(pieces) + ')'

    def literal(self, value: Any) -> str:
        if value is None:
            return 'nil'
        if isinstance(value, bool):
            return 'true' if value else 'false'
        if isinstance(value, str):
            return f'"{value}"'
        return repr(value)
