import time
from typing import Any, Callable, List, Optional

from plume.callables import NativeFunction
from plume.environment import Environment
from plume.errors import PlumeRuntimeError
from plume.values import type_name


def populate_native_environment(battle_hook: Optional[Callable[[], Any]] = None) -> Environment:
    """Build the global environment pre-filled with the native functions.

    Natives raise `PlumeRuntimeError` without a token; the interpreter fills
    in the call site before the error leaves the call.
    """
    env = Environment()

    def native_clock(args: List[Any]) -> Any:
        return time.time()

    def native_step_battle(args: List[Any]) -> Any:
        if battle_hook is not None:
            battle_hook()
        return None

    def native_length(args: List[Any]) -> Any:
        text = args[0]
        if not isinstance(text, str):
            raise PlumeRuntimeError(None, f'length expects a string, got {type_name(text)}.')
        return float(len(text))

    def native_concat(args: List[Any]) -> Any:
        left, right = args
        if not isinstance(left, str) or not isinstance(right, str):
            raise PlumeRuntimeError(
                None, f'concat expects two strings, got {type_name(left)} and {type_name(right)}.')
        return left + right

    for native in (
        NativeFunction('clock', 0, native_clock),
        NativeFunction('stepBattle', 0, native_step_battle),
        NativeFunction('length', 1, native_length),
        NativeFunction('concat', 2, native_concat),
    ):
        env.define(native.name, native)
    return env
