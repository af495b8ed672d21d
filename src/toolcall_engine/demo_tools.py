"""Mock weather, calculator and clock tools for demos and tests."""

import ast
import operator
import random
import re
from datetime import datetime, timezone
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from toolcall_engine.models import ToolParameter, ToolSchema
from toolcall_engine.registry import ToolRegistry

WEATHER_TOOL = ToolSchema(
    name="get_weather",
    description="Get the current weather for a given city",
    parameters=[
        ToolParameter(
            name="city",
            description='The city name, e.g. "San Francisco"',
            required=True,
        ),
        ToolParameter(
            name="unit",
            description='Temperature unit: "celsius" or "fahrenheit"',
            default_value="celsius",
            enum=["celsius", "fahrenheit"],
        ),
    ],
)

CALCULATOR_TOOL = ToolSchema(
    name="calculate",
    description="Perform a mathematical calculation",
    parameters=[
        ToolParameter(
            name="expression",
            description='A math expression to evaluate, e.g. "2 + 2"',
            required=True,
        ),
    ],
)

TIME_TOOL = ToolSchema(
    name="get_time",
    description="Get the current date and time for a timezone",
    parameters=[
        ToolParameter(
            name="timezone",
            description='IANA timezone, e.g. "America/New_York"',
            default_value="UTC",
        ),
    ],
)

DEMO_TOOLS = [WEATHER_TOOL, CALCULATOR_TOOL, TIME_TOOL]

CONDITIONS = ["Sunny", "Cloudy", "Rainy", "Partly Cloudy"]

# Characters allowed in a calculator expression
EXPRESSION_CHARS = re.compile(r"[^0-9+\-*/().% ]")

_BINARY_OPS = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.Mod: operator.mod,
}
_UNARY_OPS = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}


async def mock_weather(args: dict[str, Any]) -> dict[str, Any]:
    city = args.get("city") or "Unknown"
    unit = args.get("unit") or "celsius"
    temp = random.randint(5, 34)
    return {
        "city": city,
        "temperature": round(temp * 1.8 + 32) if unit == "fahrenheit" else temp,
        "unit": unit,
        "condition": random.choice(CONDITIONS),
        "humidity": random.randint(30, 89),
    }


async def mock_calculate(args: dict[str, Any]) -> dict[str, Any]:
    """Evaluate basic arithmetic. Bad expressions yield an error entry, not an exception."""
    expression = str(args.get("expression") or "0")
    sanitized = EXPRESSION_CHARS.sub("", expression)
    try:
        result = evaluate_expression(sanitized)
    except (SyntaxError, ValueError, ZeroDivisionError):
        return {"expression": expression, "error": "Could not evaluate expression"}
    return {"expression": expression, "result": result}


async def mock_get_time(args: dict[str, Any]) -> dict[str, Any]:
    tz = args.get("timezone") or "UTC"
    try:
        now = datetime.now(ZoneInfo(tz))
    except (ZoneInfoNotFoundError, ValueError):
        return {"timezone": tz, "datetime": datetime.now(timezone.utc).isoformat()}
    return {"timezone": tz, "datetime": now.strftime("%m/%d/%Y, %I:%M:%S %p")}


def evaluate_expression(expression: str) -> float:
    """Evaluate an arithmetic expression without eval()."""
    tree = ast.parse(expression.strip(), mode="eval")
    return float(_evaluate_node(tree.body))


def _evaluate_node(node: ast.AST) -> float:
    if isinstance(node, ast.Constant) and isinstance(node.value, (int, float)):
        return node.value
    if isinstance(node, ast.BinOp) and type(node.op) in _BINARY_OPS:
        return _BINARY_OPS[type(node.op)](_evaluate_node(node.left), _evaluate_node(node.right))
    if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY_OPS:
        return _UNARY_OPS[type(node.op)](_evaluate_node(node.operand))
    raise ValueError(f"Unsupported expression element: {type(node).__name__}")


DEMO_EXECUTORS = {
    "get_weather": mock_weather,
    "calculate": mock_calculate,
    "get_time": mock_get_time,
}


def register_demo_tools(registry: ToolRegistry) -> list[str]:
    """Clear the registry and register the three demo tools.

    Returns:
        Names of the registered tools.
    """
    registry.clear()
    for schema in DEMO_TOOLS:
        registry.register(schema, DEMO_EXECUTORS[schema.name])
    return [schema.name for schema in DEMO_TOOLS]
