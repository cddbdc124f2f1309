"""
Element descriptions for the reference host: what a component renders.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any, Generic, TypeVar
from typing_extensions import ParamSpec


_T = TypeVar('_T')
_P = ParamSpec('_P')


# ------------------------------------------------------------------------------
# VirtualElement

class VirtualElement:
    """
    An immutable description of an element to render: a type, its props,
    and an optional key used to match it against the previous render.

    The type is one of:
    * a str -- a platform element such as 'div'
    * a function -- a component, called with the props as keyword arguments
    * Fragment -- groups children without adding a node of its own
    * Context.Provider or Context.Consumer
    """
    __slots__ = ('_type', '_props', '_key')

    def __init__(self, type: Any, props: Mapping[str, Any], key: object=None) -> None:
        self._type = type
        self._props = MappingProxyType(dict(props))
        self._key = key

    @property
    def type(self) -> Any:
        return self._type

    @property
    def props(self) -> Mapping[str, Any]:
        return self._props

    @property
    def key(self) -> object:
        return self._key

    def with_props(self, props: Mapping[str, Any]) -> VirtualElement:
        """Returns a copy of this element with `props` merged over its props."""
        return VirtualElement(self._type, {**self._props, **props}, self._key)

    def __repr__(self) -> str:
        type_name = getattr(self._type, 'display_name', None) or getattr(self._type, '__name__', self._type)
        return f'h({type_name!r}, **{dict(self._props)!r})'


def h(type: Any, /, *children: Any, key: object=None, **props: Any) -> VirtualElement:
    """
    Creates a VirtualElement.

    Children passed positionally are stored in the children prop:
    a single child as-is, several children as a tuple.

    Examples:
        >>> h('div', 'Hello ', h('b', 'world'), class_name='greeting')
        >>> h(MyComponent, include=True)
        >>> h(Fragment, h('span', 'a'), h('span', 'b'))
    """
    if len(children) == 1:
        props['children'] = children[0]
    elif len(children) > 1:
        props['children'] = children
    return VirtualElement(type, props, key)


class _FragmentType:
    display_name = 'Fragment'

    def __repr__(self) -> str:
        return 'Fragment'


Fragment = _FragmentType()


# ------------------------------------------------------------------------------
# Context

class Context(Generic[_T]):
    """
    A value passed implicitly from a Provider to every Consumer
    (or use_context() call) beneath it.
    """
    def __init__(self, default_value: _T, display_name: str='Context') -> None:
        self.default_value = default_value
        self.display_name = display_name
        self.Provider = ContextProvider(self)
        self.Consumer = ContextConsumer(self)

    def __repr__(self) -> str:
        return f'Context({self.display_name!r})'


class ContextProvider:
    def __init__(self, context: Context) -> None:
        self.context = context
        self.display_name = f'{context.display_name}.Provider'


class ContextConsumer:
    def __init__(self, context: Context) -> None:
        self.context = context
        self.display_name = f'{context.display_name}.Consumer'


def create_context(default_value: _T, display_name: str='Context') -> Context[_T]:
    return Context(default_value, display_name)


# ------------------------------------------------------------------------------
# Component Names

def component(display_name: str) -> Callable[[Callable[_P, _T]], Callable[_P, _T]]:
    """Decorator that gives a component function a display name."""
    def decorate(func: Callable[_P, _T]) -> Callable[_P, _T]:
        func.display_name = display_name  # type: ignore[attr-defined]
        return func
    return decorate


# ------------------------------------------------------------------------------
