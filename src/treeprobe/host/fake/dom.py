"""
A minimal headless document model, standing in for a browser DOM.

Only what the reference host and its tests need is provided:
element and text nodes, attribute storage, child manipulation, and
text/markup extraction.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from html import escape
from typing import Any


# Elements that never have children or a closing tag
_VOID_TAGS = frozenset([
    'area', 'base', 'br', 'col', 'embed', 'hr', 'img', 'input',
    'link', 'meta', 'source', 'track', 'wbr',
])

# Props that are stored under a different attribute name
_ATTRIBUTE_NAME_FOR_PROP = {
    'class_name': 'class',
    'html_for': 'for',
}


class DomNode:
    """Base class of all nodes in a Document."""
    parent = None  # type: DomElement | None

    @property
    def text_content(self) -> str:
        raise NotImplementedError()

    @property
    def outer_html(self) -> str:
        raise NotImplementedError()

    def remove(self) -> None:
        """Removes this node from its parent, if it has one."""
        if self.parent is not None:
            self.parent.remove_child(self)


class DomText(DomNode):
    def __init__(self, data: str) -> None:
        self.data = data

    @property
    def text_content(self) -> str:
        return self.data

    @property
    def outer_html(self) -> str:
        return escape(self.data, quote=False)

    def __repr__(self) -> str:
        return f'DomText({self.data!r})'


class DomElement(DomNode):
    def __init__(self, tag: str) -> None:
        self.tag = tag
        self.attributes = {}  # type: dict[str, str]
        self.listeners = {}  # type: dict[str, Any]
        self._children = []  # type: list[DomNode]

    # === Children ===

    @property
    def child_nodes(self) -> tuple[DomNode, ...]:
        return tuple(self._children)

    @property
    def children(self) -> tuple[DomElement, ...]:
        """Child elements, excluding text nodes."""
        return tuple(c for c in self._children if isinstance(c, DomElement))

    def append_child(self, child: DomNode) -> DomNode:
        child.remove()
        self._children.append(child)
        child.parent = self
        return child

    def remove_child(self, child: DomNode) -> DomNode:
        self._children.remove(child)
        child.parent = None
        return child

    def replace_children(self, children: Iterable[DomNode]) -> None:
        """
        Makes `children` the complete, ordered list of this element's children,
        moving nodes that currently belong to other parents.
        """
        new_children = list(children)
        for old_child in self._children:
            old_child.parent = None
        self._children = []
        for child in new_children:
            self.append_child(child)

    # === Attributes ===

    def set_props(self, props: Mapping[str, Any]) -> None:
        """
        Replaces this element's attributes and event listeners with the
        ones described by the specified host props.

        - Callable props become listeners.
        - None and False props are omitted. True props become empty attributes.
        - The children prop is ignored.
        """
        self.attributes = {}
        self.listeners = {}
        for (key, value) in props.items():
            if key == 'children':
                continue
            if callable(value):
                self.listeners[key] = value
            elif value is None or value is False:
                continue
            else:
                name = _ATTRIBUTE_NAME_FOR_PROP.get(key, key.replace('_', '-'))
                self.attributes[name] = '' if value is True else str(value)

    # === Content ===

    @property
    def text_content(self) -> str:
        return ''.join(c.text_content for c in self._children)

    @property
    def inner_html(self) -> str:
        return ''.join(c.outer_html for c in self._children)

    @property
    def outer_html(self) -> str:
        attrs = ''.join(
            f' {name}' if value == '' else f' {name}="{escape(value)}"'
            for (name, value) in self.attributes.items()
        )
        if self.tag in _VOID_TAGS:
            return f'<{self.tag}{attrs}>'
        return f'<{self.tag}{attrs}>{self.inner_html}</{self.tag}>'

    def __repr__(self) -> str:
        return f'DomElement({self.outer_html!r})'


class Document:
    """A document with a body, into which test containers are attached."""

    def __init__(self) -> None:
        self.body = DomElement('body')

    def create_element(self, tag: str) -> DomElement:
        return DomElement(tag)


# ------------------------------------------------------------------------------
