"""JSON serialization/deserialization for Plume AST.

This module converts between Plume AST dataclasses and plain Python
dict/list structures suitable for JSON encoding. It supports a full
round-trip for all node types and for `Token`.
"""

from __future__ import annotations

from typing import Any, Dict

from .ast import (
    Literal,
    Grouping,
    Unary,
    Binary,
    Logical,
    Variable,
    Assign,
    Call,
    Index,
    AssignIndex,
    Expression,
    Print,
    Var,
    Block,
    If,
    While,
    For,
    Function,
    Return,
)
from .tokens import Token, TokenType


NODE_TYPES = {
    cls.__name__: cls
    for cls in (
        Literal, Grouping, Unary, Binary, Logical, Variable, Assign, Call,
        Index, AssignIndex, Expression, Print, Var, Block, If, While, For,
        Function, Return,
    )
}

# field name -> how to decode it; anything not listed is a scalar
TOKEN_FIELDS = {'operator', 'name', 'paren', 'bracket', 'keyword'}
NODE_FIELDS = {
    'expression', 'right', 'left', 'value', 'callee', 'target', 'index',
    'initializer', 'condition', 'then_branch', 'else_branch', 'body',
    'increment',
}
LIST_FIELDS = {'arguments', 'statements', 'params'}


def token_to_obj(token: Token) -> Dict[str, Any]:
    return {
        "type": "Token",
        "kind": token.kind.name,
        "lexeme": token.lexeme,
        "literal": token.literal,
        "line": token.line,
    }


def token_from_obj(o: Dict[str, Any]) -> Token:
    return Token(TokenType[o["kind"]], o["lexeme"], o.get("literal"), o["line"])


def ast_to_obj(node: Any) -> Any:
    # Primitives
    if node is None or isinstance(node, (bool, float, int, str)):
        return node
    if isinstance(node, Token):
        return token_to_obj(node)
    if isinstance(node, list):
        return [ast_to_obj(n) for n in node]
    name = type(node).__name__
    if name not in NODE_TYPES:
        raise ValueError(f"Unsupported AST node for serialization: {type(node)}")
    obj: Dict[str, Any] = {"type": name}
    for field_name, value in vars(node).items():
        obj[field_name] = ast_to_obj(value)
    return obj


def ast_from_obj(obj: Any) -> Any:
    if obj is None or isinstance(obj, (bool, float, int, str)):
        return obj
    if isinstance(obj, list):
        return [ast_from_obj(x) for x in obj]
    t = obj.get("type")
    if t == "Token":
        return token_from_obj(obj)
    cls = NODE_TYPES.get(t)
    if cls is None:
        raise ValueError(f"Unknown AST node type in JSON: {t}")
    kwargs: Dict[str, Any] = {}
    for field_name, value in obj.items():
        if field_name == "type":
            continue
        if field_name in TOKEN_FIELDS:
            kwargs[field_name] = token_from_obj(value)
        elif field_name in NODE_FIELDS or field_name in LIST_FIELDS:
            kwargs[field_name] = ast_from_obj(value)
        else:
            raise ValueError(f"Unexpected field {field_name!r} for {t}")
    if cls is Literal and isinstance(kwargs.get("value"), int) and not isinstance(kwargs["value"], bool):
        # JSON writes 2.0 as 2.0, but hand-written files may say 2
        kwargs["value"] = float(kwargs["value"])
    return cls(**kwargs)
