"""Arithmetic expression evaluator.

Expressions are parsed with ``ast`` and walked node by node; nothing is
passed to ``eval``.
"""

import ast
import math
import operator
from typing import Any, Callable

from pydantic import BaseModel, Field

from aifns.config import AifnsSettings
from aifns.functions.function import FunctionDescriptor, aifn
from aifns.functions.http import HttpClientFactory

NAME = "calculator"
DESCRIPTION = "Calculate the output of a given mathematical expression"

MAX_EXPONENT = 10_000
MAX_RESULT_BITS = 10_000

_BINARY_OPERATORS: dict[type[ast.operator], Callable[[Any, Any], Any]] = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.FloorDiv: operator.floordiv,
    ast.Mod: operator.mod,
    ast.Pow: operator.pow,
}

_UNARY_OPERATORS: dict[type[ast.unaryop], Callable[[Any], Any]] = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}

_CONSTANTS = {"pi": math.pi, "e": math.e, "tau": math.tau}

_FUNCTIONS: dict[str, Callable[..., Any]] = {
    "abs": abs,
    "round": round,
    "min": min,
    "max": max,
    "sqrt": math.sqrt,
    "exp": math.exp,
    "log": math.log,
    "ln": math.log,
    "log10": math.log10,
    "sin": math.sin,
    "cos": math.cos,
    "tan": math.tan,
    "floor": math.floor,
    "ceil": math.ceil,
}


class CalculatorParams(BaseModel):
    """Arguments for the calculator function."""

    expression: str = Field(
        ..., description="Mathematical expression, e.g. '2 * (3 + 4) / sqrt(2)'"
    )


def _check_power(base: Any, exponent: Any) -> None:
    """Reject powers whose result would be too large to compute quickly."""
    if isinstance(base, complex) or isinstance(exponent, complex):
        return
    if abs(exponent) > MAX_EXPONENT:
        raise ValueError(f"Exponent too large: {exponent}")
    if abs(base) > 1 and exponent > 0:
        if exponent * math.log2(abs(base)) > MAX_RESULT_BITS:
            raise ValueError("Result too large")


def _evaluate_node(node: ast.AST) -> Any:
    if isinstance(node, ast.Expression):
        return _evaluate_node(node.body)

    if isinstance(node, ast.Constant):
        if isinstance(node.value, bool) or not isinstance(node.value, (int, float)):
            raise ValueError(f"Unsupported constant: {node.value!r}")
        return node.value

    if isinstance(node, ast.Name):
        if node.id not in _CONSTANTS:
            raise ValueError(f"Unknown name: {node.id}")
        return _CONSTANTS[node.id]

    if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY_OPERATORS:
        return _UNARY_OPERATORS[type(node.op)](_evaluate_node(node.operand))

    if isinstance(node, ast.BinOp) and type(node.op) in _BINARY_OPERATORS:
        left = _evaluate_node(node.left)
        right = _evaluate_node(node.right)
        if isinstance(node.op, ast.Pow):
            _check_power(left, right)
        return _BINARY_OPERATORS[type(node.op)](left, right)

    if isinstance(node, ast.Call):
        if not isinstance(node.func, ast.Name) or node.func.id not in _FUNCTIONS:
            raise ValueError(f"Unsupported function call: {ast.unparse(node.func)}")
        if node.keywords:
            raise ValueError("Keyword arguments are not supported")
        args = [_evaluate_node(arg) for arg in node.args]
        return _FUNCTIONS[node.func.id](*args)

    raise ValueError(f"Unsupported expression: {type(node).__name__}")


def evaluate(expression: str) -> int | float:
    """Evaluate an arithmetic expression.

    Raises:
        ValueError: If the expression is empty, malformed or uses anything
                    other than numbers, arithmetic operators and the
                    whitelisted constants and functions.
        ZeroDivisionError: On division by zero.
    """
    expression = expression.strip()
    if not expression:
        raise ValueError("Expression is empty")
    try:
        tree = ast.parse(expression, mode="eval")
    except SyntaxError as e:
        raise ValueError(f"Invalid expression: {e.msg}") from e
    return _evaluate_node(tree)


def calculate(params: CalculatorParams) -> int | float:
    return evaluate(params.expression)


def build(
    settings: AifnsSettings, client_factory: HttpClientFactory | None = None
) -> FunctionDescriptor:
    return aifn(NAME, DESCRIPTION, CalculatorParams, calculate)
