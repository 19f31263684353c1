"""Tree-walking evaluator for the monkey language.

Evaluator.eval(node, env) returns a MonkeyObject or None ("nil": e.g. a let statement, or an if whose condition is
false and that has no else). Errors and returns are not Python exceptions: they are Error and ReturnValue objects
travelling through the same channel as ordinary values, so every sub-evaluation is followed by an explicit check.

- Error short-circuits everything up to the program's final result.
- ReturnValue stops the enclosing blocks and is unwrapped at the function-call boundary (or at the top level).

Only function calls introduce a new scope; if/else branches and blocks evaluate in the current frame.
"""

from monkey.core import ast
from monkey.core.builtins import Builtins
from monkey.core.environment import Environment
from monkey.core.objects import (Array, BuiltIn, Boolean, Error, Function, Hash, HashPair, Hashable, Integer,
                                 ReturnValue, String, FALSE, TRUE)

INT64_BITS = 64


def wrap_int64(value):
    """Two's complement wrap of an arbitrary Python int to a signed 64-bit value."""
    half = 1 << (INT64_BITS - 1)
    return (value + half) % (1 << INT64_BITS) - half


def truncating_div(left, right):
    """Integer division rounding toward zero (Python's // rounds toward negative infinity)."""
    quotient = abs(left) // abs(right)
    return quotient if (left < 0) == (right < 0) else -quotient


def int_power(base, exponent):
    """base ^ exponent wrapped to 64 bits. A negative exponent truncates the real result toward zero. Returns None
    for 0 ^ -n, which has no finite value.
    """
    if exponent >= 0:
        return wrap_int64(pow(base, exponent, 1 << INT64_BITS))
    if base == 0:
        return None
    if base == 1:
        return 1
    if base == -1:
        return 1 if exponent % 2 == 0 else -1
    return 0


def type_name(obj):
    return "NIL" if obj is None else str(obj.type)


def is_truthy(obj):
    """FALSE and Integer zero are false, everything else (including the empty string and nil) is true."""
    if isinstance(obj, Boolean):
        return obj is TRUE
    if isinstance(obj, Integer):
        return obj.value != 0
    return True


class Evaluator:
    """Interprets AST nodes against an Environment.

    builtins is consulted before the environment chain, so a user binding can never shadow a built-in name. warn, if
    given, is called as warn(message, token) when a let statement binds such a name.
    """

    def __init__(self, builtins=None, warn=None):
        self.builtins = builtins if builtins is not None else Builtins()
        self.warn = warn

        self._dispatch = {
            ast.Program: self.eval_program,
            ast.ExpressionStatement: lambda node, env: self.eval(node.expression, env),
            ast.LetStatement: self.eval_let_statement,
            ast.ReturnStatement: self.eval_return_statement,
            ast.BlockStatement: self.eval_block_statement,
            ast.IntegerLiteral: lambda node, env: Integer(node.value),
            ast.StringLiteral: lambda node, env: String(node.value),
            ast.BooleanLiteral: lambda node, env: Boolean.of(node.value),
            ast.Identifier: self.eval_identifier,
            ast.PrefixExpression: self.eval_prefix_expression,
            ast.InfixExpression: self.eval_infix_expression,
            ast.IfExpression: self.eval_if_expression,
            ast.FunctionLiteral: lambda node, env: Function(node.parameters, node.body, env),
            ast.CallExpression: self.eval_call_expression,
            ast.ArrayLiteral: self.eval_array_literal,
            ast.IndexExpression: self.eval_index_expression,
            ast.HashLiteral: self.eval_hash_literal,
        }

    def eval(self, node, env):
        """Evaluates node in env. Returns a MonkeyObject, or None for nil."""
        if node is None:
            return None

        try:
            handler = self._dispatch[type(node)]
        except KeyError:
            raise TypeError(f"cannot evaluate {type(node).__name__}") from None
        return handler(node, env)

    @staticmethod
    def error(message, node):
        return Error(message, node.token if node is not None else None)

    def eval_program(self, program, env):
        """Runs statements in order. Stops at the first Error or return; the program's value is that of the last
        statement run, kept only if it is an Integer, Boolean, String or Error (anything else yields nil).
        """
        result = None

        for statement in program.statements:
            result = self.eval(statement, env)

            if isinstance(result, ReturnValue):
                result = result.value
                break
            if isinstance(result, Error):
                break

        if isinstance(result, (Integer, Boolean, String, Error)):
            return result
        return None

    def eval_block_statement(self, block, env):
        """Runs statements in order, stopping at (and passing up, still wrapped) the first ReturnValue or Error."""
        result = None

        for statement in block.statements:
            result = self.eval(statement, env)
            if isinstance(result, (ReturnValue, Error)):
                return result

        return result

    def eval_let_statement(self, node, env):
        value = self.eval(node.value, env)
        if isinstance(value, Error):
            return value

        name = node.name.value
        if name in self.builtins and self.warn is not None:
            self.warn(f"'{name}' is a built-in function, so this binding will never be looked up", node.name.token)

        env.set(name, value)
        return None

    def eval_return_statement(self, node, env):
        value = self.eval(node.value, env)
        if isinstance(value, Error):
            return value
        return ReturnValue(value)

    def eval_identifier(self, node, env):
        if node.value in self.builtins:
            return self.builtins[node.value]

        try:
            return env[node.value]
        except KeyError:
            return self.error(f"identifier not found: {node.value}", node)

    def eval_prefix_expression(self, node, env):
        right = self.eval(node.right, env)
        if isinstance(right, Error):
            return right

        if node.operator == "-":
            if not isinstance(right, Integer):
                return self.error(f"unknown operator: -{type_name(right)}", node)
            return Integer(wrap_int64(-right.value))

        if node.operator == "!":
            if not isinstance(right, Boolean):
                return self.error(f"unknown operator: !{type_name(right)}", node)
            return Boolean.of(right is FALSE)

        return self.error(f"unknown operator: {node.operator}{type_name(right)}", node)

    def eval_infix_expression(self, node, env):
        left = self.eval(node.left, env)
        if isinstance(left, Error):
            return left

        right = self.eval(node.right, env)
        if isinstance(right, Error):
            return right

        operator = node.operator

        if isinstance(left, Integer) and isinstance(right, Integer):
            return self.eval_integer_infix(node, operator, left.value, right.value)

        if isinstance(left, String) and isinstance(right, String):
            if operator == "+":
                return String(left.value + right.value)

        elif operator == "==":
            return Boolean.of(left is right)

        elif operator == "!=":
            return Boolean.of(left is not right)

        elif operator in ("&&", "||") and isinstance(left, Boolean) and isinstance(right, Boolean):
            if operator == "&&":
                return Boolean.of(left.value and right.value)
            return Boolean.of(left.value or right.value)

        return self.error(f"unknown operator: {type_name(left)} {operator} {type_name(right)}", node)

    def eval_integer_infix(self, node, operator, left, right):
        if operator == "+":
            return Integer(wrap_int64(left + right))
        if operator == "-":
            return Integer(wrap_int64(left - right))
        if operator == "*":
            return Integer(wrap_int64(left * right))
        if operator == "/":
            if right == 0:
                return self.error("division by zero", node)
            return Integer(wrap_int64(truncating_div(left, right)))
        if operator == "^":
            result = int_power(left, right)
            if result is None:
                return self.error("division by zero", node)
            return Integer(result)
        if operator == "<":
            return Boolean.of(left < right)
        if operator == ">":
            return Boolean.of(left > right)
        if operator == "==":
            return Boolean.of(left == right)
        if operator == "!=":
            return Boolean.of(left != right)

        return self.error(f"unknown operator: INTEGER {operator} INTEGER", node)

    def eval_if_expression(self, node, env):
        condition = self.eval(node.condition, env)
        if isinstance(condition, Error):
            return condition

        if is_truthy(condition):
            return self.eval(node.consequence, env)
        if node.alternative is not None:
            return self.eval(node.alternative, env)
        return None

    def eval_expressions(self, expressions, env):
        """Evaluates left to right. Returns (values, None), or (None, error) at the first Error."""
        values = []
        for expression in expressions:
            value = self.eval(expression, env)
            if isinstance(value, Error):
                return None, value
            values.append(value)
        return values, None

    def eval_call_expression(self, node, env):
        function = self.eval(node.function, env)
        if isinstance(function, Error):
            return function

        args, error = self.eval_expressions(node.arguments, env)
        if error is not None:
            return error

        return self.apply_function(node, function, args)

    def apply_function(self, node, function, args):
        """Calls a BuiltIn directly, or runs a Function's body in a fresh frame enclosing its captured environment."""
        if isinstance(function, BuiltIn):
            result = function(args)
            if isinstance(result, Error) and result.token is None:
                result.token = node.token
            return result

        if not isinstance(function, Function):
            return self.error(f"not a function: {type_name(function)}", node)

        if len(args) != len(function.parameters):
            return self.error(f"invalid argument count: expected {len(function.parameters)}, got {len(args)}",
                              node)

        call_env = Environment.enclosed(function.env)
        for param, arg in zip(function.parameters, args):
            call_env.set(param.value, arg)

        result = self.eval(function.body, call_env)
        if isinstance(result, ReturnValue):
            return result.value
        return result

    def eval_array_literal(self, node, env):
        elements, error = self.eval_expressions(node.elements, env)
        if error is not None:
            return error
        return Array(elements)

    def eval_index_expression(self, node, env):
        left = self.eval(node.left, env)
        if isinstance(left, Error):
            return left

        index = self.eval(node.index, env)
        if isinstance(index, Error):
            return index

        if isinstance(left, Array):
            if not isinstance(index, Integer):
                return self.error(f"array index must be INTEGER, got {type_name(index)}", node)
            if not 0 <= index.value < len(left.elements):
                return None
            return left.elements[index.value]

        if isinstance(left, Hash):
            if not isinstance(index, Hashable):
                return self.error(f"unusable as hash key: {type_name(index)}", node)
            return left.get(index)

        return self.error(f"index operator not supported: {type_name(left)}", node)

    def eval_hash_literal(self, node, env):
        """Later duplicate keys overwrite earlier ones."""
        pairs = {}

        for key_node, value_node in node.pairs:
            key = self.eval(key_node, env)
            if isinstance(key, Error):
                return key
            if not isinstance(key, Hashable):
                return self.error(f"unusable as hash key: {type_name(key)}", key_node)

            value = self.eval(value_node, env)
            if isinstance(value, Error):
                return value

            pairs[key.hash_key()] = HashPair(key, value)

        return Hash(pairs)
