"""Schema models describing callable tools.

A ToolSchema is what the model sees: a name, a description and an ordered list
of typed parameters. Schemas are frozen once created so that a registry can
hand them out to many concurrent orchestrations without copying.
"""

import re
from enum import Enum
from typing import Any, Self

from pydantic import BaseModel, Field, field_validator, model_validator

IDENTIFIER_PATTERN = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")


class ParameterType(str, Enum):
    """JSON types a tool parameter can declare."""

    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"


def _matches_type(value: Any, param_type: ParameterType) -> bool:
    """Check a declared value against a parameter type without coercion."""
    if param_type == ParameterType.STRING:
        return isinstance(value, str)
    if param_type == ParameterType.BOOLEAN:
        return isinstance(value, bool)
    if isinstance(value, bool):
        return False
    if param_type == ParameterType.INTEGER:
        return isinstance(value, int)
    if param_type == ParameterType.NUMBER:
        return isinstance(value, (int, float))
    if param_type == ParameterType.ARRAY:
        return isinstance(value, (list, tuple))
    return isinstance(value, dict)


class ToolParameter(BaseModel):
    """A single typed parameter of a tool.

    Attributes:
        name: Parameter name, unique within its tool.
        type: Declared JSON type. Advisory: values are coerced on a best-effort basis.
        description: Human readable description shown to the model.
        required: Whether the model must supply the parameter.
        default_value: Value substituted when an optional parameter is absent.
        enum: Ordered set of allowed values.

    Example:
        >>> ToolParameter(name="unit", enum=["celsius", "fahrenheit"], default_value="celsius")
    """

    name: str = Field(..., min_length=1, max_length=256)
    type: ParameterType = Field(default=ParameterType.STRING)
    description: str = Field(default="")
    required: bool = Field(default=False)
    default_value: Any = Field(default=None)
    enum: list[Any] | None = Field(default=None)

    model_config = {
        "frozen": True,
        "str_strip_whitespace": True,
    }

    @field_validator("enum")
    @classmethod
    def validate_enum(cls, v: list[Any] | None) -> list[Any] | None:
        """Reject an empty enum, it would make every value invalid."""
        if v is not None and len(v) == 0:
            raise ValueError("enum must contain at least one value")
        return v

    @model_validator(mode="after")
    def validate_values_match_type(self) -> Self:
        """Enum members and the default must be values of the declared type."""
        values = list(self.enum or [])
        if self.has_default:
            values.append(self.default_value)
        for value in values:
            if not _matches_type(value, self.type):
                raise ValueError(
                    f"Value {value!r} of parameter '{self.name}' "
                    f"is not of type '{self.type.value}'"
                )
        return self

    @model_validator(mode="after")
    def validate_default_in_enum(self) -> Self:
        """A declared default must itself be an allowed value."""
        if self.enum is not None and self.has_default and self.default_value not in self.enum:
            raise ValueError(
                f"Default value {self.default_value!r} of parameter '{self.name}' "
                f"is not one of {self.enum!r}"
            )
        return self

    @property
    def has_default(self) -> bool:
        return self.default_value is not None

    def to_json_schema(self) -> dict[str, Any]:
        """Render this parameter as a JSON Schema property."""
        schema: dict[str, Any] = {"type": self.type.value}
        if self.description:
            schema["description"] = self.description
        if self.enum is not None:
            schema["enum"] = list(self.enum)
        if self.has_default:
            schema["default"] = self.default_value
        return schema


class ToolSchema(BaseModel):
    """Immutable description of a callable tool.

    Attributes:
        name: Tool name. Must be a valid identifier and unique within a registry.
        description: What the tool does, shown to the model.
        parameters: Ordered parameter declarations.
    """

    name: str = Field(..., min_length=1, max_length=256)
    description: str = Field(default="")
    parameters: tuple[ToolParameter, ...] = Field(default_factory=tuple)

    model_config = {
        "frozen": True,
        "str_strip_whitespace": True,
        "json_schema_extra": {
            "examples": [
                {
                    "name": "get_weather",
                    "description": "Get the current weather for a given city",
                    "parameters": [
                        {"name": "city", "type": "string", "required": True},
                        {
                            "name": "unit",
                            "type": "string",
                            "default_value": "celsius",
                            "enum": ["celsius", "fahrenheit"],
                        },
                    ],
                }
            ]
        },
    }

    @field_validator("name")
    @classmethod
    def validate_tool_name(cls, v: str) -> str:
        """Validate tool name is a valid identifier."""
        if not IDENTIFIER_PATTERN.match(v):
            raise ValueError(
                f"Invalid tool name '{v}': must be a valid identifier "
                "(start with letter/underscore, contain only alphanumeric/underscore)"
            )
        return v

    @model_validator(mode="after")
    def validate_unique_parameters(self) -> Self:
        """Parameter names must be unique within a tool."""
        seen: set[str] = set()
        for param in self.parameters:
            if param.name in seen:
                raise ValueError(f"Duplicate parameter '{param.name}' in tool '{self.name}'")
            seen.add(param.name)
        return self

    def get_parameter(self, name: str) -> ToolParameter | None:
        """Look up a declared parameter by name."""
        for param in self.parameters:
            if param.name == name:
                return param
        return None

    @property
    def required_parameters(self) -> list[str]:
        return [param.name for param in self.parameters if param.required]

    def to_json_schema(self) -> dict[str, Any]:
        """Return the parameters as a JSON Schema object."""
        return {
            "type": "object",
            "properties": {param.name: param.to_json_schema() for param in self.parameters},
            "required": self.required_parameters,
        }

    def to_openai_format(self) -> dict[str, Any]:
        """Convert to OpenAI tools format."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.to_json_schema(),
            },
        }
