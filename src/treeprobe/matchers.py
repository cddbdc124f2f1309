"""
Matchers select Elements from a snapshot.

A matcher is one of three variants, each with a single evaluation rule:

* TypeMatcher -- the node's type equals a string tag or component reference.
* PredicateMatcher -- an arbitrary predicate over the node returns true.
* TemplateMatcher -- the node's type equals the template's type and the
  node's props are a superset-compatible match for the template's props.

User-facing query methods accept plain values (a tag, a component, or a
template) and convert them once, at the boundary, with to_matcher().
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol, TYPE_CHECKING, TypeAlias, runtime_checkable

if TYPE_CHECKING:
    from treeprobe.node import Element


# Prop key that holds nested content. Never compared by templates.
CHILDREN_PROP = 'children'


# ------------------------------------------------------------------------------
# AnyProps

class _AnyProps:
    """Props marker which matches any props at all."""
    _instance = None  # type: _AnyProps | None

    def __new__(cls) -> _AnyProps:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'ANY_PROPS'

    def __reduce__(self) -> str:
        return 'ANY_PROPS'


ANY_PROPS = _AnyProps()


# ------------------------------------------------------------------------------
# Templates

@runtime_checkable
class TemplateLike(Protocol):
    """
    Anything that carries both a type and props, such as a host element
    description. Such values are matched as templates.
    """
    @property
    def type(self) -> Any: ...
    @property
    def props(self) -> Mapping[str, Any]: ...


@dataclass(frozen=True)
class Template:
    """A host-independent template: a type plus the props it must carry."""
    type: Any
    props: Mapping[str, Any] | _AnyProps = field(default_factory=dict)


# ------------------------------------------------------------------------------
# Matcher Variants

@dataclass(frozen=True)
class TypeMatcher:
    type: Any

    def matches(self, element: Element) -> bool:
        return _same_value(element.type, self.type)

    def __str__(self) -> str:
        return describe_type(self.type)


@dataclass(frozen=True)
class PredicateMatcher:
    predicate: Callable[[Element], object]

    def matches(self, element: Element) -> bool:
        # NOTE: Exceptions raised by the predicate propagate to the caller
        return bool(self.predicate(element))

    def __str__(self) -> str:
        return getattr(self.predicate, '__name__', repr(self.predicate))


@dataclass(frozen=True)
class TemplateMatcher:
    type: Any
    props: Mapping[str, Any] | _AnyProps = ANY_PROPS

    def matches(self, element: Element) -> bool:
        if not _same_value(element.type, self.type):
            return False
        return props_match(self.props, element.props)

    def __str__(self) -> str:
        return describe_type(self.type)


Matcher: TypeAlias = TypeMatcher | PredicateMatcher | TemplateMatcher


# ------------------------------------------------------------------------------
# Coercion

def to_matcher(value: object, *, any_props_for_types: bool=False) -> Matcher:
    """
    Converts a user-supplied comparable value to a Matcher.

    - A Matcher is returned unchanged.
    - A Template or template-like host element description becomes
      a TemplateMatcher comparing its props.
    - Anything else is treated as a bare type. If `any_props_for_types` is
      set, the bare type becomes a TemplateMatcher whose props match anything,
      otherwise a TypeMatcher.

    Predicates are never inferred here, because a component reference is
    itself callable. Use PredicateMatcher directly or the *_where() queries.
    """
    if isinstance(value, (TypeMatcher, PredicateMatcher, TemplateMatcher)):
        return value
    if isinstance(value, Template):
        return TemplateMatcher(value.type, value.props)
    if not isinstance(value, (str, type)) and isinstance(value, TemplateLike):
        return TemplateMatcher(value.type, value.props)
    if any_props_for_types:
        return TemplateMatcher(value, ANY_PROPS)
    else:
        return TypeMatcher(value)


# ------------------------------------------------------------------------------
# Props Comparison

def props_match(
        expected: Mapping[str, Any] | _AnyProps,
        actual: Mapping[str, Any],
        ) -> bool:
    """
    Whether `actual` carries every prop in `expected` with an equal value.

    The comparison is shallow and one-directional: `actual` may carry props
    that `expected` does not mention. The children prop is never compared.
    """
    if expected is ANY_PROPS:
        return True
    assert isinstance(expected, Mapping)
    for (key, expected_value) in expected.items():
        if key == CHILDREN_PROP:
            continue
        if key not in actual:
            return False
        if not _same_value(actual[key], expected_value):
            return False
    return True


def _same_value(a: object, b: object) -> bool:
    return a is b or bool(a == b)


# ------------------------------------------------------------------------------
# Formatting

def describe_type(type_: object) -> str:
    """
    Returns the name under which a node type is shown to humans:
    the tag for host nodes, the display name for components.
    """
    if isinstance(type_, str):
        return type_
    display_name = getattr(type_, 'display_name', None)
    if isinstance(display_name, str):
        return display_name
    name = getattr(type_, '__name__', None)
    if isinstance(name, str):
        return name
    return repr(type_)


# ------------------------------------------------------------------------------
