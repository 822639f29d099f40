"""Tree-walking interpreter for the Plume language.

The interpreter executes a list of statements against a persistent global
environment, so bindings survive across separate `interpret` calls (the
REPL relies on this). Each statement is executed with the environment that
is active for it passed explicitly; blocks and calls create child scopes.

`return` is carried by a `ReturnSignal` result that every compound statement
hands back to its caller until a user-function call boundary consumes it.
"""

from __future__ import annotations

import sys
from typing import Any, Callable, List, Optional

from .ast import (
    Expr, Stmt, Literal, Grouping, Unary, Binary, Logical, Variable,
    Assign, Call, Index, AssignIndex, Expression, Print, Var, Block, If,
    While, For, Function, Return,
)
from .callables import NativeFunction, UserFunction
from .environment import Environment
from .errors import ErrorReporter, PlumeRuntimeError, PlumeSyntaxError, ReturnSignal
from .natives import populate_native_environment
from .parser import parse
from .scanner import scan
from .tokens import Token, TokenType
from .values import is_equal, is_number, is_truthy, stringify, type_name

# each Plume call costs several Python frames
RECURSION_LIMIT = 10000


class Interpreter:
    """Core interpreter that executes Plume ASTs."""
    def __init__(self, battle_hook: Optional[Callable[[], Any]] = None,
                 debug_level: int = 0, debug_file: str = 'debug.txt'):
        # lives as long as this interpreter; natives are defined first
        self.globals = populate_native_environment(battle_hook)
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 else None
        if sys.getrecursionlimit() < RECURSION_LIMIT:
            sys.setrecursionlimit(RECURSION_LIMIT)

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg)

    def close(self) -> None:
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    # Public API
    def interpret(self, statements: List[Stmt]) -> None:
        """Execute top-level statements in order.

        A runtime error aborts at the failing statement and propagates to the
        caller; effects of earlier statements are kept.
        """
        for stmt in statements:
            result = self.execute(stmt, self.globals)
            if isinstance(result, ReturnSignal):
                raise PlumeRuntimeError(result.keyword, "Can't return from top-level code.")

    def execute_block(self, statements: List[Stmt], env: Environment) -> Optional[ReturnSignal]:
        for stmt in statements:
            result = self.execute(stmt, env)
            # propagate return signals
            if isinstance(result, ReturnSignal):
                return result
        return None

    def execute(self, node: Stmt, env: Environment) -> Optional[ReturnSignal]:
        if isinstance(node, Expression):
            self.evaluate(node.expression, env)
            return None
        if isinstance(node, Print):
            print(stringify(self.evaluate(node.expression, env)))
            return None
        if isinstance(node, Var):
            value = self.evaluate(node.initializer, env) if node.initializer is not None else None
            env.define(node.name.lexeme, value)
            if self.debug_level >= 2:
                self.debug(f"declare {node.name.lexeme} = {stringify(value)}")
            return None
        if isinstance(node, Block):
            return self.execute_block(node.statements, Environment(env))
        if isinstance(node, If):
            cond = self.evaluate(node.condition, env)
            truthy = is_truthy(cond)
            if self.debug_level >= 3:
                self.debug(f"if condition {stringify(cond)} -> {truthy}")
            if truthy:
                return self.execute(node.then_branch, env)
            if node.else_branch is not None:
                return self.execute(node.else_branch, env)
            return None
        if isinstance(node, While):
            while is_truthy(self.evaluate(node.condition, env)):
                result = self.execute(node.body, env)
                if isinstance(result, ReturnSignal):
                    return result
            return None
        if isinstance(node, For):
            return self.execute(node.desugar(), env)
        if isinstance(node, Function):
            # closure is the live environment, not a copy
            env.define(node.name.lexeme, UserFunction(node, env))
            if self.debug_level >= 2:
                self.debug(f"define function {node.name.lexeme}")
            return None
        if isinstance(node, Return):
            value = self.evaluate(node.value, env) if node.value is not None else None
            return ReturnSignal(node.keyword, value)
        raise NotImplementedError(f"execute: unexpected node type {type(node)}")

    def evaluate(self, node: Expr, env: Environment) -> Any:
        if isinstance(node, Literal):
            return node.value
        if isinstance(node, Grouping):
            return self.evaluate(node.expression, env)
        if isinstance(node, Variable):
            return env.get(node.name)
        if isinstance(node, Assign):
            value = self.evaluate(node.value, env)
            env.assign(node.name, value)
            return value
        if isinstance(node, Logical):
            left = self.evaluate(node.left, env)
            if node.operator.kind is TokenType.OR:
                if is_truthy(left):
                    return left
            elif not is_truthy(left):
                return left
            return self.evaluate(node.right, env)
        if isinstance(node, Unary):
            right = self.evaluate(node.right, env)
            if node.operator.kind is TokenType.BANG:
                return not is_truthy(right)
            if node.operator.kind is TokenType.MINUS:
                self.check_number_operand(node.operator, right)
                return -right
            raise PlumeRuntimeError(node.operator, f'Unknown unary operator {node.operator.lexeme}.')
        if isinstance(node, Binary):
            left = self.evaluate(node.left, env)
            right = self.evaluate(node.right, env)
            return self.apply_binary_op(node.operator, left, right)
        if isinstance(node, Call):
            callee = self.evaluate(node.callee, env)
            args = [self.evaluate(arg, env) for arg in node.arguments]
            return self.call_function(callee, args, node.paren)
        if isinstance(node, Index):
            target = self.evaluate(node.target, env)
            index = self.evaluate(node.index, env)
            position = self.check_string_index(node.bracket, target, index)
            return target[position]
        if isinstance(node, AssignIndex):
            return self.assign_index(node, env)
        raise NotImplementedError(f"evaluate: unexpected node type {type(node)}")

    def assign_index(self, node: AssignIndex, env: Environment) -> Any:
        # only `name[i] = c` is supported: strings are rebuilt and rebound
        if not isinstance(node.target, Variable):
            raise PlumeRuntimeError(node.bracket, 'Invalid assignment target.')
        target = env.get(node.target.name)
        index = self.evaluate(node.index, env)
        value = self.evaluate(node.value, env)
        position = self.check_string_index(node.bracket, target, index)
        if not isinstance(value, str) or len(value) != 1:
            raise PlumeRuntimeError(node.bracket, 'Can only assign a single character to a string index.')
        env.assign(node.target.name, target[:position] + value + target[position + 1:])
        return value

    def check_string_index(self, bracket: Token, target: Any, index: Any) -> int:
        if not isinstance(target, str):
            raise PlumeRuntimeError(bracket, f'Only strings can be indexed, got {type_name(target)}.')
        if not is_number(index) or not index.is_integer():
            raise PlumeRuntimeError(bracket, 'String index must be a whole number.')
        position = int(index)
        if position < 0 or position >= len(target):
            raise PlumeRuntimeError(bracket, f'String index {position} out of bounds.')
        return position

    def call_function(self, callee: Any, args: List[Any], paren: Token) -> Any:
        if isinstance(callee, NativeFunction):
            self.check_arity(callee.arity, args, paren)
            try:
                return callee.fn(args)
            except PlumeRuntimeError as ex:
                if ex.token is None:
                    ex.token = paren
                raise
        if isinstance(callee, UserFunction):
            self.check_arity(callee.arity, args, paren)
            if self.debug_level >= 3:
                self.debug(f"call {callee.name}({', '.join(stringify(a) for a in args)})")
            call_env = Environment(callee.closure)
            for param, arg in zip(callee.declaration.params, args):
                call_env.define(param.lexeme, arg)
            try:
                result = self.execute_block(callee.declaration.body, call_env)
            except RecursionError:
                raise PlumeRuntimeError(paren, 'Stack overflow.') from None
            if isinstance(result, ReturnSignal):
                return result.value
            return None
        raise PlumeRuntimeError(paren, 'Can only call functions.')

    def check_arity(self, arity: int, args: List[Any], paren: Token) -> None:
        if len(args) != arity:
            raise PlumeRuntimeError(paren, f'Expected {arity} arguments but got {len(args)}.')

    def check_number_operand(self, operator: Token, operand: Any) -> None:
        if not is_number(operand):
            raise PlumeRuntimeError(operator, 'Operand must be a number.')

    def check_number_operands(self, operator: Token, left: Any, right: Any) -> None:
        if not (is_number(left) and is_number(right)):
            raise PlumeRuntimeError(operator, 'Operands must be numbers.')

    def apply_binary_op(self, operator: Token, a: Any, b: Any) -> Any:
        kind = operator.kind
        if kind is TokenType.PLUS:
            if is_number(a) and is_number(b):
                return a + b
            # either side being text makes this a concatenation
            if isinstance(a, str) or isinstance(b, str):
                return stringify(a) + stringify(b)
            raise PlumeRuntimeError(operator, 'Operands must be two numbers or two strings.')
        if kind is TokenType.EQUAL_EQUAL:
            return is_equal(a, b)
        if kind is TokenType.BANG_EQUAL:
            return not is_equal(a, b)
        self.check_number_operands(operator, a, b)
        if kind is TokenType.MINUS:
            return a - b
        if kind is TokenType.STAR:
            return a * b
        if kind is TokenType.SLASH:
            if b == 0:
                raise PlumeRuntimeError(operator, 'Division by zero.')
            return a / b
        if kind is TokenType.GREATER:
            return a > b
        if kind is TokenType.GREATER_EQUAL:
            return a >= b
        if kind is TokenType.LESS:
            return a < b
        if kind is TokenType.LESS_EQUAL:
            return a <= b
        raise PlumeRuntimeError(operator, f'Unknown binary operator {operator.lexeme}.')


def parse_program(source: str, reporter: Optional[ErrorReporter] = None) -> List[Stmt]:
    """Scan and parse `source`, raising `PlumeSyntaxError` if anything was reported."""
    reporter = reporter if reporter is not None else ErrorReporter()
    statements = parse(scan(source, reporter), reporter)
    if reporter.had_error:
        raise PlumeSyntaxError(reporter.diagnostics)
    return statements


def run_program(source: str, interpreter: Optional[Interpreter] = None,
                reporter: Optional[ErrorReporter] = None) -> Interpreter:
    """Convenience function to compile and run a Plume program from source string."""
    statements = parse_program(source, reporter)
    if interpreter is None:
        interpreter = Interpreter()
    interpreter.interpret(statements)
    return interpreter
