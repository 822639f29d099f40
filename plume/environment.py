from typing import Any, Dict, Optional

from plume.errors import PlumeRuntimeError
from plume.tokens import Token


class Environment:
    """A scope mapping names to values, chained to its lexical parent.

    Declarations always land in this scope; reads and assignments walk
    outward through `enclosing` until the name is found.
    """
    def __init__(self, enclosing: Optional['Environment'] = None):
        self.enclosing = enclosing
        self.values: Dict[str, Any] = {}

    def define(self, name: str, value: Any) -> None:
        # redeclaring in the same scope simply overwrites
        self.values[name] = value

    def get(self, name: Token) -> Any:
        env: Optional[Environment] = self
        while env is not None:
            if name.lexeme in env.values:
                return env.values[name.lexeme]
            env = env.enclosing
        raise PlumeRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def assign(self, name: Token, value: Any) -> None:
        env: Optional[Environment] = self
        while env is not None:
            if name.lexeme in env.values:
                env.values[name.lexeme] = value
                return
            env = env.enclosing
        raise PlumeRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def __contains__(self, name: str) -> bool:
        return name in self.values
