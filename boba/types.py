"""Static types and runtime values of the Boba language."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Union


class Primitive(Enum):
    """Types that carry no parameters."""

    INT = "int"
    FLOAT = "float"
    STRING = "string"
    BOOL = "bool"
    NULL = "null"
    ANY = "any"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ListType:
    """A list whose elements share one type."""

    element: Type

    def __str__(self) -> str:
        return f"[{self.element}]"


@dataclass(frozen=True)
class MapType:
    """A map from keys of one type to values of another."""

    key: Type
    value: Type

    def __str__(self) -> str:
        return f"[{self.key}:{self.value}]"


@dataclass(frozen=True)
class FunctionType:
    """The signature of a function: parameter types and return types."""

    params: tuple[Type, ...] = ()
    returns: tuple[Type, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "params", tuple(self.params))
        object.__setattr__(self, "returns", tuple(self.returns))

    def __str__(self) -> str:
        params = ", ".join(str(p) for p in self.params)
        returns = ", ".join(str(r) for r in self.returns)
        return f"fun({params}): {returns}"


Type = Union[Primitive, ListType, MapType, FunctionType]


@dataclass
class MapValue:
    """A runtime map: an ordered sequence of key/value pairs."""

    entries: list[tuple[Any, Any]] = field(default_factory=list)

    def __iter__(self) -> Iterator[tuple[Any, Any]]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


@dataclass
class FunctionValue:
    """A function as a runtime value."""

    name: str
    params: list[tuple[str, Type]] = field(default_factory=list)
    return_types: list[Type] = field(default_factory=list)
    body: list[Any] = field(default_factory=list)


# Runtime values use Python's own types where one fits:
# int, float, str, bool, None and list.
Value = Union[int, float, str, bool, None, list, MapValue, FunctionValue]


def type_of(value: Value) -> Type:
    """Return the static type of a runtime value.

    Collections take their element types from their first entry.
    """
    if isinstance(value, bool):
        return Primitive.BOOL
    if isinstance(value, int):
        return Primitive.INT
    if isinstance(value, float):
        return Primitive.FLOAT
    if isinstance(value, str):
        return Primitive.STRING
    if value is None:
        return Primitive.NULL
    if isinstance(value, list):
        return ListType(type_of(value[0]) if value else Primitive.ANY)
    if isinstance(value, MapValue):
        if not value.entries:
            return MapType(Primitive.ANY, Primitive.ANY)
        key, val = value.entries[0]
        return MapType(type_of(key), type_of(val))
    if isinstance(value, FunctionValue):
        return FunctionType(
            tuple(param_type for _, param_type in value.params),
            tuple(value.return_types),
        )
    raise TypeError(f"not a Boba value: {value!r}")