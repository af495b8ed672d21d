"""Schema-driven validation and normalization of tool call arguments.

Model-generated arguments are frequently loosely typed ("42" for a number,
"true" for a boolean). Declared parameter types are therefore treated as a
coercion target rather than a strict check: a value only fails with
TypeMismatch when it cannot reasonably be converted.
"""

import json
import logging
import math
import re
from typing import Any

from toolcall_engine.errors import InvalidEnumValue, MissingRequiredArgument, TypeMismatch
from toolcall_engine.models import ParameterType, ToolCall, ToolParameter, ToolSchema

logger = logging.getLogger(__name__)

INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")

TRUE_STRINGS = frozenset({"true", "yes", "1"})
FALSE_STRINGS = frozenset({"false", "no", "0"})


class ArgumentValidator:
    """Validates raw arguments against a ToolSchema.

    For each declared parameter, in declaration order:
        - absent (missing key or null) and required: MissingRequiredArgument
        - absent and optional: default_value when declared, else left absent
        - present: coerced to the declared type, then checked against enum

    Keys not declared on the schema are passed through untouched.
    """

    def validate(self, schema: ToolSchema, arguments: dict[str, Any]) -> dict[str, Any]:
        """Return normalized arguments or raise a ValidationFailure.

        Args:
            schema: Schema of the tool being called.
            arguments: Raw arguments as parsed from model output.

        Returns:
            New mapping with defaults applied and values coerced.
        """
        normalized = dict(arguments)

        for param in schema.parameters:
            value = arguments.get(param.name)

            if value is None:
                if param.required:
                    raise MissingRequiredArgument(param.name)
                if param.has_default:
                    normalized[param.name] = param.default_value
                else:
                    normalized.pop(param.name, None)
                continue

            value = self.coerce(param, value)
            if param.enum is not None and value not in param.enum:
                raise InvalidEnumValue(param.name, value, param.enum)
            normalized[param.name] = value

        return normalized

    def validate_call(self, schema: ToolSchema, call: ToolCall) -> ToolCall:
        """Return a copy of call with normalized arguments."""
        arguments = self.validate(schema, call.arguments)
        return call.model_copy(update={"arguments": arguments})

    def coerce(self, param: ToolParameter, value: Any) -> Any:
        """Best-effort conversion of value to the parameter's declared type."""
        coercer = _COERCERS.get(param.type)
        if coercer is None:
            return value

        converted = coercer(value)
        if converted is _INVALID:
            raise TypeMismatch(param.name, param.type.value, value)
        if converted is not value and converted != value:
            logger.debug(f"Coerced argument '{param.name}' from {value!r} to {converted!r}")
        return converted


_INVALID = object()


def _to_string(value: Any) -> Any:
    if isinstance(value, str):
        return value
    if isinstance(value, (bool, int, float)):
        return json.dumps(value)
    return _INVALID


def _to_number(value: Any) -> Any:
    if isinstance(value, bool):
        return _INVALID
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        text = value.strip()
        if INTEGER_PATTERN.match(text):
            return int(text)
        try:
            number = float(text)
        except ValueError:
            return _INVALID
        return number if math.isfinite(number) else _INVALID
    return _INVALID


def _to_integer(value: Any) -> Any:
    number = _to_number(value)
    if number is _INVALID:
        return _INVALID
    if isinstance(number, float):
        return int(number) if number.is_integer() else _INVALID
    return number


def _to_boolean(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in TRUE_STRINGS:
            return True
        if text in FALSE_STRINGS:
            return False
    return _INVALID


def _decode_container(value: Any, expected: type) -> Any:
    if isinstance(value, expected):
        return value
    if expected is list and isinstance(value, tuple):
        return list(value)
    if isinstance(value, str):
        try:
            decoded = json.loads(value)
        except json.JSONDecodeError:
            return _INVALID
        if isinstance(decoded, expected):
            return decoded
    return _INVALID


_COERCERS = {
    ParameterType.STRING: _to_string,
    ParameterType.NUMBER: _to_number,
    ParameterType.INTEGER: _to_integer,
    ParameterType.BOOLEAN: _to_boolean,
    ParameterType.ARRAY: lambda value: _decode_container(value, list),
    ParameterType.OBJECT: lambda value: _decode_container(value, dict),
}
