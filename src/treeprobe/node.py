"""
The immutable snapshot of one position in a rendered tree.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from enum import Enum
from treeprobe import query
from treeprobe.debug import to_tree_string
from treeprobe.errors import IllegalStateError, InvalidArgumentError
from treeprobe.matchers import describe_type, PredicateMatcher, to_matcher
from types import MappingProxyType
from typing import Any, Generic, TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from treeprobe.host import HostPlatform
    from treeprobe.root import Root


_P = TypeVar('_P')  # props, for documentation only


class NodeKind(Enum):
    # A platform element that contains no other platform elements
    HOST_LEAF = 'host_leaf'
    # A platform element that contains other platform elements
    HOST_CONTAINER = 'host_container'
    # A user-defined component, fragment, or other structural node
    COMPONENT = 'component'
    # Raw text. Never wrapped in an Element.
    TEXT_LEAF = 'text_leaf'

    @property
    def is_dom(self) -> bool:
        return self in (NodeKind.HOST_LEAF, NodeKind.HOST_CONTAINER)


Predicate = Callable[['Element'], object]


class Element(Generic[_P]):
    """
    A snapshot of one element of a rendered tree, along with everything
    rendered beneath it.

    Elements are immutable. When the Root they came from re-synchronizes
    after an action, a whole new tree of Elements is built and this one is
    left untouched, still describing the tree as it was.
    """

    __slots__ = (
        '_kind',
        '_type',
        '_props',
        '_instance',
        '_children',
        '_element_children',
        '_descendants',
        '_platform',
        '_root',
    )

    def __init__(self,
            kind: NodeKind,
            type: Any,
            props: Mapping[str, Any],
            instance: object | None,
            children: Sequence[Element | str],
            descendants: Sequence[Element],
            *, platform: HostPlatform | None=None,
            root: Root | None=None,
            ) -> None:
        self._kind = kind
        self._type = type
        # Copy, so that later mutation of the caller's mapping is not observed
        self._props = MappingProxyType(dict(props))  # type: Mapping[str, Any]
        self._instance = instance
        self._children = tuple(children)
        self._element_children = tuple(c for c in self._children if isinstance(c, Element))
        self._descendants = tuple(descendants)
        self._platform = platform
        self._root = root

    # === Properties ===

    @property
    def kind(self) -> NodeKind:
        return self._kind

    @property
    def type(self) -> Any:
        """The host tag (a str), the component, or None for fragments."""
        return self._type

    @property
    def props(self) -> Mapping[str, Any]:
        return self._props

    @property
    def instance(self) -> object | None:
        """The platform object behind a host element, if any."""
        return self._instance

    @property
    def is_dom(self) -> bool:
        return self._kind.is_dom

    @property
    def children(self) -> tuple[Element | str, ...]:
        """Immediate children. Text children appear as plain strings."""
        return self._children

    @property
    def element_children(self) -> tuple[Element, ...]:
        return self._element_children

    @property
    def descendants(self) -> tuple[Element, ...]:
        """Every Element beneath this one, in pre-order."""
        return self._descendants

    @property
    def root(self) -> Root | None:
        return self._root

    def prop(self, key: str) -> Any:
        """
        Returns the value of the specified prop, or None if it is absent.
        """
        return self._props.get(key)

    # === Text ===

    def text(self) -> str:
        """The text content of this element, including all descendants."""
        (instance, platform) = (self._instance, self._platform)
        if platform is not None and instance is not None and platform.is_platform_element(instance):
            return platform.text_content(instance)
        return ''.join(
            c if isinstance(c, str) else c.text()
            for c in self._children
        )

    def html(self) -> str:
        """The markup of everything rendered inside this element."""
        (instance, platform) = (self._instance, self._platform)
        if platform is not None and instance is not None and platform.is_platform_element(instance):
            return platform.inner_html(instance)
        return ''.join(
            c if isinstance(c, str) else c.html()
            for c in self._children
        )

    def debug(self, *, depth: int | None=None, all_props: bool=False) -> str:
        """Describes this element and its descendants in a JSX-like form."""
        return to_tree_string(self, depth=depth, all_props=all_props)

    # === Queries ===

    def is_(self, type_or_template: object) -> bool:
        """Whether this element, ignoring its descendants, matches."""
        return to_matcher(type_or_template, any_props_for_types=True).matches(self)

    def find(self, type_or_template: object) -> Element | None:
        """
        Returns the first descendant, in pre-order, whose type
        (and, for templates, props) matches. Returns None if there is none.
        """
        return query.find_first(self._descendants, to_matcher(type_or_template))

    def find_all(self, type_or_template: object) -> list[Element]:
        return query.find_all(self._descendants, to_matcher(type_or_template))

    def find_where(self, predicate: Predicate) -> Element | None:
        return query.find_first(self._descendants, PredicateMatcher(predicate))

    def find_all_where(self, predicate: Predicate) -> list[Element]:
        return query.find_all(self._descendants, PredicateMatcher(predicate))

    def contains(self, type_or_template: object) -> bool:
        """
        Whether any descendant matches the specified type or template.
        Template props are compared shallowly.
        """
        return query.contains(
            self._descendants,
            to_matcher(type_or_template, any_props_for_types=True))

    def get_dom_nodes(self) -> list[object]:
        """The platform objects of this element's immediate host children."""
        return query.dom_nodes(self._element_children)

    def get_dom_node(self) -> object | None:
        """
        Returns the platform object of this element's only immediate host
        child, or None if there is none.

        Raises:
        * AmbiguousMatchError -- if there is more than one host child.
        """
        return query.single_dom_node(self._element_children)

    # === Actions ===

    def trigger(self, prop: str, *args, **kwargs) -> Any:
        """
        Calls the function-valued prop `prop` with the specified arguments
        inside the owning Root's perform() boundary, returning its result.

        Raises:
        * InvalidArgumentError -- if the prop is absent or not callable.
        * IllegalStateError -- if this element is not attached to a Root.
        """
        handler = self._props.get(prop)
        if not callable(handler):
            raise InvalidArgumentError(
                f'Cannot trigger {prop!r} on <{describe_type(self._type)} />: '
                f'expected a callable prop but found {handler!r}')
        if self._root is None:
            raise IllegalStateError(
                f'Cannot trigger {prop!r} on an element that does not belong to a mounted tree')
        return self._root.perform(lambda: handler(*args, **kwargs))

    # === Formatting ===

    def __repr__(self) -> str:
        name = describe_type(self._type) if self._type is not None else 'Fragment'
        return f'<Element {name} kind={self._kind.value} props={dict(self._props)!r}>'
