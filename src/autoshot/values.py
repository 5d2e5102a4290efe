# values.py
"""
Literal annotation argument values.

Values form a closed set of variants: StringValue, TypeValue (a class
literal), ListValue, AnnotationValue (a nested annotation) and OtherValue
(numbers, booleans, constants given as verbatim source). Equality between
values goes through values_equal(), which compares variant and structure
recursively instead of relying on Python's loose scalar equality
(1 == True, 1 == 1.0).
"""
import logging
from dataclasses import dataclass
from typing import Any, Optional, Tuple, TYPE_CHECKING

from .type_utils import kotlin_string_literal, simple_name

if TYPE_CHECKING:
    from .symbols import Annotation

logger = logging.getLogger(__name__)


class LiteralValue:
    """Base class of every literal value variant."""
    __slots__ = ()


@dataclass(frozen=True, eq=False)
class StringValue(LiteralValue):
    value: str


@dataclass(frozen=True, eq=False)
class TypeValue(LiteralValue):
    qualified_name: str


@dataclass(frozen=True, eq=False)
class ListValue(LiteralValue):
    items: Tuple[LiteralValue, ...] = ()


@dataclass(frozen=True, eq=False)
class AnnotationValue(LiteralValue):
    annotation: "Annotation"


@dataclass(frozen=True, eq=False)
class OtherValue(LiteralValue):
    value: Any = None
    source: Optional[str] = None # Verbatim source text, e.g. an enum entry or constant name


def values_equal(left, right):
    """Structural equality over literal values."""
    if left is right:
        return True
    if left is None or right is None:
        return False
    if type(left) is not type(right):
        return False

    if isinstance(left, StringValue):
        return left.value == right.value
    if isinstance(left, TypeValue):
        return left.qualified_name == right.qualified_name
    if isinstance(left, ListValue):
        if len(left.items) != len(right.items):
            return False
        return all(values_equal(a, b) for a, b in zip(left.items, right.items))
    if isinstance(left, AnnotationValue):
        return annotations_equal(left.annotation, right.annotation)
    if isinstance(left, OtherValue):
        # bool is an int subclass; keep True distinct from 1
        if type(left.value) is not type(right.value):
            return False
        return left.value == right.value and left.source == right.source

    logger.debug(f"Unknown literal value variant: {type(left).__name__}")
    return False


def annotations_equal(left, right):
    """Two annotations are equal when they name the same type with equal arguments."""
    if left.type_name != right.type_name:
        return False
    left_args = {arg.name: arg.value for arg in left.arguments}
    right_args = {arg.name: arg.value for arg in right.arguments}
    if left_args.keys() != right_args.keys():
        return False
    return all(values_equal(value, right_args[name]) for name, value in left_args.items())


def value_to_source(value, imports=None, reference=simple_name):
    """
    Renders a literal value as Kotlin source text.

    Class literals and nested annotations are written through `reference`,
    which maps a qualified name to its spelling (the simple name by
    default); their qualified names are added to `imports` when a set is given.
    """
    if isinstance(value, StringValue):
        return kotlin_string_literal(value.value)
    if isinstance(value, TypeValue):
        if imports is not None:
            imports.add(value.qualified_name)
        return f"{reference(value.qualified_name)}::class"
    if isinstance(value, ListValue):
        return "[" + ", ".join(value_to_source(item, imports, reference) for item in value.items) + "]"
    if isinstance(value, AnnotationValue):
        nested = value.annotation
        if imports is not None and nested.type_name:
            imports.add(nested.type_name)
        args = ", ".join(argument_to_source(arg.name, arg.value, imports, reference) for arg in nested.arguments)
        name = reference(nested.type_name) if nested.type_name else nested.short_name
        return f"{name}({args})"
    if isinstance(value, OtherValue):
        return _other_to_source(value)
    raise TypeError(f"expected LiteralValue, got {type(value)}")


def argument_to_source(name, value, imports=None, reference=simple_name):
    rendered = value_to_source(value, imports, reference)
    return f"{name} = {rendered}" if name else rendered


def _other_to_source(value):
    if value.source is not None:
        return value.source
    raw = value.value
    if raw is None:
        return "null"
    if isinstance(raw, bool):
        return "true" if raw else "false"
    if isinstance(raw, float):
        # Annotation float parameters (fontScale and friends) are Kotlin Floats
        return f"{raw!r}f"
    return str(raw)
