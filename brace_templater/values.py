from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Union

from brace_templater.errors import UnsupportedValueShape, UnsupportedValueType

I64_MIN = -(2**63)
I64_MAX = 2**63 - 1


@dataclass(frozen=True)
class StringValue:
    text: str


@dataclass(frozen=True)
class IntegerValue:
    number: int

    def __post_init__(self) -> None:
        if not I64_MIN <= self.number <= I64_MAX:
            raise UnsupportedValueType(f"integer {self.number} does not fit in 64 bits")


@dataclass(frozen=True)
class FloatValue:
    number: float


@dataclass(frozen=True)
class ObjectValue:
    fields: Mapping[str, "Value"]

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))


@dataclass(frozen=True)
class ListValue:
    items: tuple["Value", ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))


Value = Union[StringValue, IntegerValue, FloatValue, ObjectValue, ListValue]
VALUE_TYPES = (StringValue, IntegerValue, FloatValue, ObjectValue, ListValue)


def to_value(obj: object) -> Value:
    """Convert a plain Python object into a template value.

    This is the only construction path used by the engine, so every caller
    gets the same rules: ``bool`` is rejected even though it is an ``int``,
    integers must fit in a signed 64-bit range, and mappings need ``str`` keys.
    """
    if isinstance(obj, VALUE_TYPES):
        return obj
    if isinstance(obj, str):
        return StringValue(obj)
    if isinstance(obj, bool):
        raise UnsupportedValueType("booleans are not template values")
    if isinstance(obj, int):
        return IntegerValue(obj)
    if isinstance(obj, float):
        return FloatValue(obj)
    if isinstance(obj, Mapping):
        fields: dict[str, Value] = {}
        for key, item in obj.items():
            if not isinstance(key, str):
                raise UnsupportedValueType(f"object keys must be strings, got {type(key).__name__}")
            fields[key] = to_value(item)
        return ObjectValue(fields)
    if isinstance(obj, (list, tuple)):
        return ListValue(tuple(to_value(item) for item in obj))
    raise UnsupportedValueType(f"unsupported template value type: {type(obj).__name__}")


def shape_name(value: Value) -> str:
    if isinstance(value, StringValue):
        return "string"
    if isinstance(value, IntegerValue):
        return "integer"
    if isinstance(value, FloatValue):
        return "float"
    if isinstance(value, ObjectValue):
        return "object"
    if isinstance(value, ListValue):
        return "list"
    raise UnsupportedValueType(f"unknown template value: {value!r}")


def to_text(value: Value, *, name: str) -> str:
    """Return the canonical text of a scalar value.

    Floats use ``repr`` so the text always parses back to the same float.
    """
    if isinstance(value, StringValue):
        return value.text
    if isinstance(value, IntegerValue):
        return str(value.number)
    if isinstance(value, FloatValue):
        return repr(value.number)
    if isinstance(value, (ObjectValue, ListValue)):
        raise UnsupportedValueShape(name, shape_name(value))
    raise UnsupportedValueType(f"unknown template value: {value!r}")


def build_environment(variables: Mapping[str, object]) -> dict[str, Value]:
    environment: dict[str, Value] = {}
    for name, raw in variables.items():
        if not isinstance(name, str):
            raise UnsupportedValueType(f"variable names must be strings, got {type(name).__name__}")
        environment[name] = to_value(raw)
    return environment
