from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, List

from plume.ast import Function

if TYPE_CHECKING:
    from plume.environment import Environment


@dataclass(eq=False)
class NativeFunction:
    """A host-implemented function with a fixed arity."""
    name: str
    arity: int
    fn: Callable[[List[Any]], Any]

    def __str__(self) -> str:
        return f"<native fn {self.name}>"


class UserFunction:
    """A Plume function together with the environment it closed over."""
    def __init__(self, declaration: Function, closure: 'Environment'):
        self.declaration = declaration
        self.closure = closure

    @property
    def name(self) -> str:
        return self.declaration.name.lexeme

    @property
    def arity(self) -> int:
        return len(self.declaration.params)

    def __str__(self) -> str:
        return f"<fn {self.name}>"

    def __repr__(self) -> str:
        return f"<function {self.name}>"
